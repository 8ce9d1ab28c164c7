"""
local_filesystem.py
-------------------
FileSystem implementation backed by the local disk (pathlib, os, shutil).
"""

from __future__ import annotations

import logging
import os
import shutil
import stat as stat_module
from pathlib import Path

from connectors.filesystem_interface import FileSystem, PathStat

logger = logging.getLogger(__name__)


class LocalFileSystem(FileSystem):
    """
    Reads and writes the real filesystem.

    Args:
        encoding (str): Text encoding used for reads and writes. Default UTF-8.
    """

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def stat(self, path: Path) -> PathStat | None:
        try:
            mode = os.lstat(path).st_mode
        except (FileNotFoundError, NotADirectoryError):
            return None
        return PathStat(is_directory=stat_module.S_ISDIR(mode), is_file=stat_module.S_ISREG(mode))

    def make_directory(self, path: Path, *, parents: bool = False) -> None:
        Path(path).mkdir(parents=parents)

    def read_directory_entries(self, path: Path) -> list[str]:
        # sorted so that two runs over the same tree visit files in the same order
        return sorted(os.listdir(path))

    def read_file_text(self, path: Path) -> str:
        return Path(path).read_text(encoding=self.encoding)

    def write_file(self, path: Path, content: str) -> int:
        data = content.encode(self.encoding)
        return Path(path).write_bytes(data)

    def remove_file(self, path: Path) -> None:
        Path(path).unlink()

    def remove_directory_recursive(self, path: Path) -> None:
        logger.debug("Removing directory tree %s", path)
        shutil.rmtree(path)

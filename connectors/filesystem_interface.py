from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


@dataclass(frozen=True)
class PathStat:
    """Result of probing a path without following symlinks."""

    is_directory: bool
    is_file: bool


class FileSystem(Protocol):
    """
    Protocol for the storage the mirror engine reads from and writes to.
    Implementations are synchronous; the engine decides when to run them off the event loop.
    All paths are absolute.
    """

    def stat(self, path: Path) -> PathStat | None:
        """Return the type of ``path``, or None when nothing exists there."""
        ...

    def make_directory(self, path: Path, *, parents: bool = False) -> None:
        """
        Create one directory.
        Without ``parents`` the parent must exist and ``path`` must not.
        """
        ...

    def read_directory_entries(self, path: Path) -> list[str]: ...
    def read_file_text(self, path: Path) -> str: ...

    def write_file(self, path: Path, content: str) -> int:
        """Write ``content`` as UTF-8 and return the number of bytes written."""
        ...

    def remove_file(self, path: Path) -> None: ...
    def remove_directory_recursive(self, path: Path) -> None: ...

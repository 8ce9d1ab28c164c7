"""Exceptions raised by the mirror engine and its connectors."""

from __future__ import annotations

import logging
from pathlib import Path

mylogger = logging.getLogger(__name__)


class MirrorError(Exception):
    """Base error with a message. Optionally logs itself on creation."""

    def __init__(self, message: str = "A treemirror error occurred", log: bool = False):
        self.message = message
        super().__init__(self.message)
        if log:
            mylogger.error(message)


class ConfigurationError(MirrorError):
    """The engine or its configuration cannot be used as given."""


class MissingPathError(MirrorError):
    """A registered folder or an excluded file is not on disk."""

    def __init__(self, kind: str, path: str, base: Path | str, log: bool = False):
        self.kind = kind
        self.path = path
        self.base = Path(base)
        super().__init__(f'Cannot find {kind} "{path}" in "{self.base}"', log=log)


class DuplicateRegistrationError(MirrorError):
    """A top-level folder with the same name is already registered."""


class DuplicatePathError(DuplicateRegistrationError):
    """Two folders in the forest resolve to the same effective path."""

    def __init__(self, path: str, log: bool = False):
        self.path = path
        super().__init__(f'Folder path "{path}" is registered more than once', log=log)


class WriteError(MirrorError):
    """Writing a converted file failed."""

    def __init__(self, path: Path | str, log: bool = False):
        self.path = Path(path)
        super().__init__(f'Couldn\'t write to "{self.path}"', log=log)


class TransformSyntaxError(MirrorError):
    """The source transformer rejected its input."""


__all__ = [
    "ConfigurationError",
    "DuplicatePathError",
    "DuplicateRegistrationError",
    "MirrorError",
    "MissingPathError",
    "TransformSyntaxError",
    "WriteError",
]

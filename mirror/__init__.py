"""Core mirror package: folder descriptors and the engine that mirrors them."""

from .engine import TreeEngine
from .errors import (
    ConfigurationError,
    DuplicatePathError,
    DuplicateRegistrationError,
    MirrorError,
    MissingPathError,
    TransformSyntaxError,
    WriteError,
)
from .models import Dialect, DuplicatePolicy, FolderNode, TransformReport, WrittenFile, coerce_folder
from .tree import attach, walk

__all__ = [
    "ConfigurationError",
    "Dialect",
    "DuplicatePathError",
    "DuplicatePolicy",
    "DuplicateRegistrationError",
    "FolderNode",
    "MirrorError",
    "MissingPathError",
    "TransformReport",
    "TransformSyntaxError",
    "TreeEngine",
    "WriteError",
    "WrittenFile",
    "attach",
    "coerce_folder",
    "walk",
]

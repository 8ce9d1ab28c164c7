"""Pydantic models that describe what the mirror engine processes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class DuplicatePolicy(str, Enum):
    """What to do when a top-level folder name is registered twice."""

    SKIP = "skip"
    ERROR = "error"


class FolderNode(BaseModel):
    """Folder descriptor: a directory to mirror, its exclusions and sub folders.

    Nodes are immutable. ``parent_path`` is stamped by :func:`mirror.tree.attach`,
    which returns new nodes instead of rewriting existing ones.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    parent_path: str = Field(default="", description="Effective path of the parent folder")
    name: str = Field(..., min_length=1, description="Directory name of this folder")
    excluded_files: tuple[str, ...] = Field(
        default=(), alias="exclude", description="Exact file names that are not mirrored"
    )
    children: tuple[FolderNode, ...] = Field(default=(), alias="folders", description="Sub folders")

    @field_validator("name")
    @classmethod
    def _plain_name(cls, value: str) -> str:
        if "/" in value or "\\" in value or value in (".", ".."):
            raise ValueError(f"folder name must be a single path component, got {value!r}")
        return value

    @field_validator("excluded_files", mode="before")
    @classmethod
    def _unique_file_names(cls, value: Any) -> tuple[str, ...]:
        items = as_entry_list(value, "exclude")
        for name in items:
            if not isinstance(name, str) or not name or "/" in name or "\\" in name:
                raise ValueError(f"excluded entries must be plain file names, got {name!r}")
        return tuple(dict.fromkeys(items))

    @field_validator("children", mode="before")
    @classmethod
    def _coerce_children(cls, value: Any) -> tuple[FolderNode, ...]:
        return tuple(coerce_folder_entry(item) for item in as_entry_list(value, "folders"))

    @property
    def effective_path(self) -> str:
        """Location of the folder relative to the source and output roots."""
        if not self.parent_path:
            return self.name
        return f"{self.parent_path}/{self.name}"


class Dialect(BaseModel):
    """File suffixes read from the source tree and written to the output tree."""

    model_config = ConfigDict(frozen=True)

    source_suffix: str = Field(default=".ts", description="Suffix of files that are converted")
    compatible_suffix: str = Field(default=".js", description="Suffix of files mirrored as they are")
    target_suffix: str = Field(default=".js", description="Suffix of every written file")

    @field_validator("source_suffix", "compatible_suffix", "target_suffix")
    @classmethod
    def _dotted(cls, value: str) -> str:
        if not value.startswith(".") or len(value) < 2:
            raise ValueError(f"suffix must look like '.ext', got {value!r}")
        return value

    def _read_suffix(self, file_name: str) -> str | None:
        for suffix in (self.source_suffix, self.compatible_suffix):
            if file_name.endswith(suffix):
                return suffix
        return None

    def accepts(self, file_name: str) -> bool:
        return self._read_suffix(file_name) is not None

    def needs_conversion(self, file_name: str) -> bool:
        return file_name.endswith(self.source_suffix)

    def output_name(self, file_name: str) -> str:
        """Return ``file_name`` with its read suffix replaced by the target suffix."""
        suffix = self._read_suffix(file_name)
        if suffix is None:
            raise ValueError(f"{file_name!r} does not end with {self.source_suffix} or {self.compatible_suffix}")
        return file_name[: -len(suffix)] + self.target_suffix


@dataclass(frozen=True)
class WrittenFile:
    """One file produced by a traversal."""

    source: Path
    destination: Path
    relative_path: str
    byte_count: int
    converted: bool


@dataclass
class TransformReport:
    """Files written by one ``transform()`` call, in write order."""

    output_root: Path
    written: list[WrittenFile] = field(default_factory=list)

    @property
    def total_bytes(self) -> int:
        return sum(item.byte_count for item in self.written)

    @property
    def relative_paths(self) -> list[str]:
        return [item.relative_path for item in self.written]


# ---------------------------------------------------------------------------
# helpers


def as_entry_list(value: Any, field_name: str) -> list[Any]:
    """Turn a scalar or a sequence from a descriptor into a list of entries.

    A single string or mapping counts as one entry. Validators raise
    ValueError so pydantic reports the problem as a ValidationError.
    """
    if value is None:
        return []
    if isinstance(value, (str, Mapping, FolderNode)):
        return [value]
    if isinstance(value, (list, tuple, set, frozenset)) or hasattr(value, "__next__"):
        return list(value)
    raise ValueError(f"{field_name} must be a name or a list, got {type(value).__name__}")


def coerce_folder_entry(value: Any) -> FolderNode:
    """Like coerce_folder, but reports unsupported values as ValueError for validators."""
    if not isinstance(value, (FolderNode, str, Mapping)):
        raise ValueError(f"folder entries must be names or mappings, got {value!r}")
    return coerce_folder(value)


def coerce_folder(value: Any) -> FolderNode:
    """Normalize a FolderNode, a mapping or a bare folder name into a FolderNode."""
    if isinstance(value, FolderNode):
        return value
    payload: Mapping[str, Any]
    if isinstance(value, str):
        payload = {"name": value}
    elif isinstance(value, Mapping):
        payload = value
    else:
        raise TypeError(f"Unsupported folder descriptor: {value!r}")
    try:
        return FolderNode.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(f"Invalid folder descriptor {payload!r}") from exc


__all__ = [
    "Dialect",
    "DuplicatePolicy",
    "FolderNode",
    "TransformReport",
    "WrittenFile",
    "as_entry_list",
    "coerce_folder",
    "coerce_folder_entry",
]

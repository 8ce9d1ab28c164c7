"""Configuration file model: which tree to mirror, where, and how to convert it."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from connectors.command_transformer import DEFAULT_COMMAND
from connectors.transformer_manager import TRANSFORMER_KINDS, build_transformer

from .engine import TreeEngine
from .errors import ConfigurationError
from .models import Dialect, DuplicatePolicy, FolderNode, as_entry_list, coerce_folder_entry

DEFAULT_CONFIG_NAME = "mirror.yaml"


class TransformerSettings(BaseModel):
    """How source files are converted."""

    kind: str = Field(default="command", description="One of TRANSFORMER_KINDS")
    command: list[str] = Field(default_factory=lambda: list(DEFAULT_COMMAND), min_length=1)
    timeout: float | None = Field(default=60, gt=0, description="Seconds per file, null for no limit")

    @field_validator("kind")
    @classmethod
    def _known_kind(cls, value: str) -> str:
        if value not in TRANSFORMER_KINDS:
            raise ValueError(f"transformer kind must be one of {', '.join(TRANSFORMER_KINDS)}, got {value!r}")
        return value


class MirrorConfig(BaseModel):
    """Everything needed to build and run a TreeEngine."""

    source_root: Path = Field(default=Path("."), description="Root of the tree to read")
    out_dir: Path = Field(default=Path("dist"), description="Output root, relative to the working directory")
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.SKIP
    dialect: Dialect = Field(default_factory=Dialect)
    transformer: TransformerSettings = Field(default_factory=TransformerSettings)
    folders: list[FolderNode] = Field(default_factory=list)

    @field_validator("folders", mode="before")
    @classmethod
    def _coerce_folders(cls, value: Any) -> list[FolderNode]:
        return [coerce_folder_entry(item) for item in as_entry_list(value, "folders")]

    def with_base_dir(self, base_dir: Path) -> MirrorConfig:
        """Return a copy whose relative ``source_root`` is anchored at ``base_dir``."""
        if self.source_root.is_absolute():
            return self
        return self.model_copy(update={"source_root": base_dir / self.source_root})


def load_config(value: Any, *, base_dir: Path | None = None) -> MirrorConfig:
    """Normalize supported inputs into a MirrorConfig.

    ``value`` may be a MirrorConfig, a mapping, YAML or JSON text, or a Path
    to a file holding either. A relative ``source_root`` is resolved against
    ``base_dir``, which defaults to the directory of the file when a Path is
    given.
    """
    if isinstance(value, MirrorConfig):
        config = value
    else:
        payload: Mapping[str, Any]
        if isinstance(value, Mapping):
            payload = value
        elif isinstance(value, (str, bytes)):
            payload = _load_text_payload(value)
        elif isinstance(value, Path):
            try:
                payload = _load_text_payload(value.read_text(encoding="utf-8"))
            except OSError as exc:
                raise ConfigurationError(f'Cannot read config file "{value}"') from exc
            if base_dir is None:
                base_dir = value.resolve().parent
        else:
            raise TypeError("Unsupported value for mirror configuration")
        try:
            config = MirrorConfig.model_validate(payload)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid mirror configuration: {exc}") from exc
    if base_dir is not None:
        config = config.with_base_dir(base_dir)
    return config


def _load_text_payload(raw: str | bytes) -> dict[str, Any]:
    """Interpret raw text as YAML first, falling back to JSON."""
    text = raw.decode() if isinstance(raw, bytes) else raw
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigurationError("Config is neither valid YAML nor valid JSON") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config must be a mapping, got {type(data).__name__}")
    return data


def build_engine(config: MirrorConfig, *, working_dir: Path | str) -> TreeEngine:
    """Create an engine for ``config`` with every configured folder registered."""
    transformer = build_transformer(
        config.transformer.kind,
        command=config.transformer.command,
        dialect=config.dialect.source_suffix.lstrip("."),
        timeout=config.transformer.timeout,
    )
    engine = TreeEngine(
        config.source_root,
        transformer=transformer,
        dialect=config.dialect,
        working_dir=working_dir,
        duplicate_policy=config.duplicate_policy,
    )
    engine.set_output_root(config.out_dir)
    for folder in config.folders:
        engine.register_node(folder)
    return engine


__all__ = [
    "DEFAULT_CONFIG_NAME",
    "MirrorConfig",
    "TransformerSettings",
    "build_engine",
    "load_config",
]

# transformer_manager.py
"""
transformer_manager.py
----------------------
Builds source transformers by kind name.

Config files and the CLI only know the kind ("command", "passthrough")
and its options; this module turns them into transformer objects.
"""

from __future__ import annotations

import logging
from typing import Sequence

from connectors.command_transformer import DEFAULT_COMMAND, CommandTransformer, PassthroughTransformer
from connectors.transformer_interface import SourceTransformer

logger = logging.getLogger(__name__)

TRANSFORMER_KINDS = ("command", "passthrough")


def build_transformer(
    kind: str,
    *,
    command: Sequence[str] | None = None,
    dialect: str = "ts",
    timeout: float | None = 60,
) -> SourceTransformer:
    """
    Create a transformer of the given kind.
    Raises ValueError for unknown kinds.
    """
    if kind == "command":
        transformer: SourceTransformer = CommandTransformer(command or DEFAULT_COMMAND, dialect=dialect, timeout=timeout)
    elif kind == "passthrough":
        transformer = PassthroughTransformer(dialect=dialect)
    # Add other transformer kinds here as needed
    else:
        raise ValueError(f"Unsupported transformer kind: {kind}")
    logger.debug("Built %s transformer for dialect %s", kind, dialect)
    return transformer

"""
command_transformer.py
----------------------
Source transformers that do the dialect conversion outside of this project.

CommandTransformer pipes each file through an external converter
(esbuild by default), PassthroughTransformer leaves the text unchanged.
"""

from __future__ import annotations

import logging
import subprocess
from typing import Sequence

from connectors.transformer_interface import SourceTransformer
from mirror.errors import ConfigurationError, TransformSyntaxError

logger = logging.getLogger(__name__)

DEFAULT_COMMAND = ("esbuild", "--loader=ts")


class CommandTransformer(SourceTransformer):
    """
    Converts text by running an external command: source on stdin, converted code on stdout.

    Args:
        command (Sequence[str]): The program and its arguments.
            Example: ["esbuild", "--loader=ts"]
        dialect (str): The dialect the command reads. Informational.
        timeout (float | None): Seconds to wait for one conversion. None waits forever.
    """

    def __init__(self, command: Sequence[str] = DEFAULT_COMMAND, *, dialect: str = "ts", timeout: float | None = 60):
        if not command:
            raise ConfigurationError("Transformer command must not be empty")
        self.command = list(command)
        self._dialect = dialect
        self.timeout = timeout

    @property
    def dialect(self) -> str:
        return self._dialect

    def convert(self, text: str) -> str:
        try:
            proc = subprocess.run(
                self.command,
                input=text,
                capture_output=True,
                text=True,
                encoding="utf-8",
                timeout=self.timeout,
            )
        except FileNotFoundError as exc:
            raise ConfigurationError(f"Transformer executable not found: {self.command[0]}") from exc
        except subprocess.TimeoutExpired as exc:
            raise TransformSyntaxError(
                f"Transformer {self.command[0]} did not finish within {self.timeout} seconds"
            ) from exc
        if proc.returncode != 0:
            detail = proc.stderr.strip() or f"exit code {proc.returncode}"
            raise TransformSyntaxError(f"{self.command[0]} rejected {self.dialect} source: {detail}")
        return proc.stdout


class PassthroughTransformer(SourceTransformer):
    """Returns the text as it is. For trees already written in the target dialect."""

    def __init__(self, dialect: str = "js"):
        self._dialect = dialect

    @property
    def dialect(self) -> str:
        return self._dialect

    def convert(self, text: str) -> str:
        return text

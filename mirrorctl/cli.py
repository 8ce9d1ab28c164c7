"""
This file is the entry point for the 'treemirror' command-line tool.
Run 'treemirror build' next to a mirror.yaml to convert the configured folders.
"""
import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich import print as rich_print
from rich.markup import escape
from rich.tree import Tree

from common.app_setup import print_and_log, print_error, setup_logging
from mirror.config import DEFAULT_CONFIG_NAME, build_engine, load_config
from mirror.engine import TreeEngine
from mirror.errors import MirrorError
from mirror.models import DuplicatePolicy, FolderNode

app = typer.Typer(
    add_completion=False,
    help="Mirror a source tree into an output directory, converting each script file on the way.",
)


@app.callback()
def main(
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Log file (default: $TREEMIRROR_LOGFILE or ~/.treemirror/log.txt)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug messages"),
):
    setup_logging(app_name="treemirror", loglevel=logging.DEBUG if verbose else logging.INFO, logfile=log_file)


def _load_engine(config_path: Path, *, strict: bool, out: Optional[Path] = None) -> TreeEngine:
    config = load_config(config_path)
    if strict:
        config = config.model_copy(update={"duplicate_policy": DuplicatePolicy.ERROR})
    if out is not None:
        config = config.model_copy(update={"out_dir": out})
    return build_engine(config, working_dir=Path.cwd())


@app.command()
def build(
    config: Path = typer.Option(Path(DEFAULT_CONFIG_NAME), "--config", "-c", help="Path to the mirror configuration (YAML or JSON)"),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Output root, overrides out_dir from the config"),
    strict: bool = typer.Option(False, "--strict", help="Fail on a repeated top-level folder instead of skipping it"),
):
    """Wipe the output root and write the converted tree into it."""
    try:
        engine = _load_engine(config, strict=strict, out=out)
        report = asyncio.run(engine.transform())
    except MirrorError as e:
        print_error(f"Build failed: {e}")
        raise typer.Exit(1)
    for item in report.written:
        print_and_log(f'wrote file: "{escape(item.relative_path)}" ({item.byte_count} bytes)')
    print_and_log(f"[green]Done.[/green] {len(report.written)} files written ({report.total_bytes} bytes)")


@app.command()
def check(
    config: Path = typer.Option(Path(DEFAULT_CONFIG_NAME), "--config", "-c", help="Path to the mirror configuration (YAML or JSON)"),
    strict: bool = typer.Option(False, "--strict", help="Fail on a repeated top-level folder instead of skipping it"),
):
    """Validate the configured folders against the source tree without writing anything."""
    try:
        engine = _load_engine(config, strict=strict)
    except MirrorError as e:
        print_error(f"Check failed: {e}")
        raise typer.Exit(1)
    tree = Tree(f"[bold]{escape(engine.source_root.name or str(engine.source_root))}[/bold]")
    for folder in engine.folders:
        _add_branch(tree, folder)
    rich_print(tree)
    print_and_log(f"{len(engine.folders)} folders registered, configuration OK")


def _add_branch(parent: Tree, node: FolderNode):
    label = escape(node.name)
    if node.excluded_files:
        label += f" [dim](excludes {escape(', '.join(node.excluded_files))})[/dim]"
    branch = parent.add(label)
    for child in node.children:
        _add_branch(branch, child)


if __name__ == "__main__":
    app()

"""Tree engine: validates folder descriptors and mirrors them into an output root."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Iterable

from connectors.filesystem_interface import FileSystem
from connectors.local_filesystem import LocalFileSystem
from connectors.transformer_interface import SourceTransformer

from .errors import (
    ConfigurationError,
    DuplicatePathError,
    DuplicateRegistrationError,
    MissingPathError,
    WriteError,
)
from .models import Dialect, DuplicatePolicy, FolderNode, TransformReport, WrittenFile
from .tree import attach_children, effective_paths

logger = logging.getLogger(__name__)


class TreeEngine:
    """Owns the registered folder forest and the output root.

    Folders are registered one top-level name at a time. Every registration
    is checked against the source tree first, so ``transform()`` only ever
    visits folders that existed when they were registered.

    Args:
        source_root: Directory that registered folder names are relative to.
        transformer: Converts the text of one source file.
        filesystem: Storage backend. Defaults to the local disk.
        dialect: Suffixes read and written. Defaults to ``.ts``/``.js`` -> ``.js``.
        working_dir: Directory a relative output root is resolved against.
            Defaults to ``source_root``.
        duplicate_policy: ``skip`` ignores a second registration of a
            top-level name, ``error`` raises DuplicateRegistrationError.
    """

    def __init__(
        self,
        source_root: Path | str,
        *,
        transformer: SourceTransformer,
        filesystem: FileSystem | None = None,
        dialect: Dialect | None = None,
        working_dir: Path | str | None = None,
        duplicate_policy: DuplicatePolicy | str = DuplicatePolicy.SKIP,
    ) -> None:
        self.source_root = Path(source_root).resolve()
        self.working_dir = Path(working_dir).resolve() if working_dir is not None else self.source_root
        self.transformer = transformer
        self.fs: FileSystem = filesystem if filesystem is not None else LocalFileSystem()
        self.dialect = dialect or Dialect()
        self.duplicate_policy = DuplicatePolicy(duplicate_policy)
        self._folders: list[FolderNode] = []
        self._paths: set[str] = set()
        self._outdir: Path | None = None

    @property
    def folders(self) -> tuple[FolderNode, ...]:
        return tuple(self._folders)

    @property
    def output_root(self) -> Path:
        if self._outdir is None:
            raise ConfigurationError("No output root set, call set_output_root() before transform()")
        return (self.working_dir / self._outdir).resolve()

    def set_output_root(self, path: Path | str) -> TreeEngine:
        """Set the directory the transformed tree is written to."""
        self._outdir = Path(path)
        return self

    # ------------------------------------------------------------------
    # registration

    def register(
        self,
        name: str,
        excluded_files: Iterable[str] | None = None,
        children: Iterable[Any] | None = None,
    ) -> TreeEngine:
        """Add a top-level folder, skipping ``excluded_files`` inside it.

        ``children`` are sub folders given as FolderNode objects, mappings
        (``{"name": ..., "exclude": [...], "folders": [...]}``) or plain names.

        Example:
            engine.register("api").register("lib", ["index.ts"], [{"name": "game"}])
        """
        node = FolderNode(
            name=name,
            excluded_files=excluded_files or (),
            children=children or (),
        )
        return self.register_node(node)

    def register_node(self, node: FolderNode) -> TreeEngine:
        """Register a prebuilt descriptor as a top-level folder."""
        node = attach_children(node.model_copy(update={"parent_path": ""}))
        if not self.validate(node):
            return self
        self._folders.append(node)
        self._paths.update(effective_paths(node))
        logger.info("Registered folder %s", node.name)
        return self

    def validate(self, node: FolderNode) -> bool:
        """Check ``node`` and its sub folders against the source tree.

        Returns False when a top-level folder with the same name is already
        registered and the duplicate policy is ``skip``. Raises
        MissingPathError for folders or excluded files that are not on disk
        and DuplicatePathError for folders that resolve to the same path.
        """
        if not node.parent_path and any(f.name == node.name for f in self._folders):
            if self.duplicate_policy is DuplicatePolicy.ERROR:
                raise DuplicateRegistrationError(f'Folder "{node.name}" is already registered')
            logger.debug("Folder %s is already registered, skipping", node.name)
            return False

        self._check_folder(node)
        self._check_unique_paths(node)
        return True

    def _check_folder(self, node: FolderNode) -> None:
        base_path = node.effective_path
        self._probe(base_path, "folder")
        for file_name in node.excluded_files:
            self._probe(f"{base_path}/{file_name}", "file")
        for child in node.children:
            self._check_folder(child)

    def _probe(self, relative: str, kind: str) -> None:
        stats = self.fs.stat(self.source_root / relative)
        found = stats is not None and (stats.is_directory if kind == "folder" else stats.is_file)
        if not found:
            raise MissingPathError(kind, relative, self.source_root)

    def _check_unique_paths(self, node: FolderNode) -> None:
        seen = set(self._paths)
        for path in effective_paths(node):
            if path in seen:
                raise DuplicatePathError(path)
            seen.add(path)

    # ------------------------------------------------------------------
    # traversal

    async def transform(self) -> TransformReport:
        """Wipe the output root and write the converted tree into it."""
        output_root = self.output_root
        self._check_output_root_is_separate(output_root)
        stats = await asyncio.to_thread(self.fs.stat, output_root)
        if stats is None:
            await asyncio.to_thread(self.fs.make_directory, output_root, parents=True)
        elif not stats.is_directory:
            raise ConfigurationError(
                f'The output root "{self._outdir}" in "{self.working_dir}" is not a directory', log=True
            )

        await self._clear_output_root(output_root)

        report = TransformReport(output_root=output_root)
        for folder in self._folders:
            await self.transform_folder(folder, report)
        logger.info(
            "Transformed %d files (%d bytes) into %s", len(report.written), report.total_bytes, output_root
        )
        return report

    async def transform_folder(self, node: FolderNode, report: TransformReport | None = None) -> TransformReport:
        """Mirror one folder, then its sub folders, into the output root."""
        output_root = self.output_root
        if report is None:
            report = TransformReport(output_root=output_root)

        base_path = node.effective_path
        source_dir = self.source_root / base_path
        target_dir = output_root / base_path

        files = await self._folder_files(node, source_dir)
        await asyncio.to_thread(self.fs.make_directory, target_dir)

        written_names: dict[str, str] = {}
        for file_name in files:
            out_name = self.dialect.output_name(file_name)
            if out_name in written_names:
                logger.warning(
                    "%s and %s in %s both map to %s, the later one wins",
                    written_names[out_name], file_name, base_path, out_name,
                )
            written_names[out_name] = file_name

            code = await self.transform_file(source_dir / file_name)
            out_path = target_dir / out_name
            byte_count = await self.add_transformed_file(out_path, code)
            logger.info('wrote file: "%s" (%d bytes)', out_path, byte_count)
            report.written.append(
                WrittenFile(
                    source=source_dir / file_name,
                    destination=out_path,
                    relative_path=f"{base_path}/{out_name}",
                    byte_count=byte_count,
                    converted=self.dialect.needs_conversion(file_name),
                )
            )

        for child in node.children:
            await self.transform_folder(child, report)
        return report

    async def _folder_files(self, node: FolderNode, source_dir: Path) -> list[str]:
        entries = await asyncio.to_thread(self.fs.read_directory_entries, source_dir)
        files = []
        for entry in entries:
            if not self.dialect.accepts(entry) or entry in node.excluded_files:
                continue
            stats = await asyncio.to_thread(self.fs.stat, source_dir / entry)
            if stats is not None and stats.is_directory:
                continue
            files.append(entry)
        return files

    async def transform_file(self, path: Path) -> str:
        """Read one source file and return the text to write for it."""
        code = await asyncio.to_thread(self.fs.read_file_text, path)
        if not self.dialect.needs_conversion(path.name):
            return code
        return await asyncio.to_thread(self.transformer.convert, code)

    async def add_transformed_file(self, path: Path, code: str) -> int:
        """Write converted code to ``path`` and return the number of bytes written."""
        try:
            return await asyncio.to_thread(self.fs.write_file, path, code)
        except OSError as exc:
            raise WriteError(path) from exc

    def _check_output_root_is_separate(self, output_root: Path) -> None:
        """Refuse output roots that would wipe the source root or a registered folder."""
        protected = [self.source_root] + [self.source_root / path for path in sorted(self._paths)]
        for path in protected:
            if output_root == path or output_root in path.parents:
                raise ConfigurationError(
                    f'The output root "{output_root}" overlaps the source folder "{path}"', log=True
                )

    async def _clear_output_root(self, output_root: Path) -> None:
        entries = await asyncio.to_thread(self.fs.read_directory_entries, output_root)
        for entry in entries:
            target = output_root / entry
            stats = await asyncio.to_thread(self.fs.stat, target)
            if stats is None:
                continue
            if stats.is_directory:
                await asyncio.to_thread(self.fs.remove_directory_recursive, target)
            else:
                await asyncio.to_thread(self.fs.remove_file, target)
            logger.debug("Removed %s from output root", target)


__all__ = ["TreeEngine"]

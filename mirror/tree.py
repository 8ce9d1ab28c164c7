"""Path stamping and iteration over folder descriptor trees."""

from __future__ import annotations

from typing import Iterator

from .models import FolderNode


def attach(parent_path: str, child: FolderNode) -> FolderNode:
    """Return ``child`` placed under ``parent_path``.

    The child's own sub folders are re-attached under the child's new
    effective path, so every level below reflects all of its ancestors.
    The input node is left untouched.
    """
    placed = child.model_copy(update={"parent_path": parent_path})
    if not placed.children:
        return placed
    return placed.model_copy(
        update={"children": tuple(attach(placed.effective_path, sub) for sub in placed.children)}
    )


def attach_children(node: FolderNode) -> FolderNode:
    """Return ``node`` with every descendant stamped relative to it."""
    return attach(node.parent_path, node)


def walk(node: FolderNode) -> Iterator[FolderNode]:
    """Yield ``node`` and its descendants, depth first, parents before children."""
    yield node
    for child in node.children:
        yield from walk(child)


def effective_paths(node: FolderNode) -> list[str]:
    return [item.effective_path for item in walk(node)]


__all__ = ["attach", "attach_children", "effective_paths", "walk"]

"""
Materialized-path codec.

Pure functions over the path encoding; nothing here touches the database.

Encoding:
    ::

        root            path "/"        level 0
        child of 1      path "/1/"      level 1
        child of 2      path "/1/2/"    level 2

    children_path(node) = node.path + str(node.id) + "/"
    level(path)         = number of "/"-delimited segments
    ancestor_ids(path)  = segment ids, root first, parent last

A path encodes the full ancestor chain, so ancestor, descendant and
sibling queries become ``IN`` / prefix / equality comparisons instead of
recursive walks. Any future relocation must rewrite ``path`` and ``level``
of the moved node and every descendant inside one transaction.

Examples:
    >>> ancestor_ids("/1/2/")
    [1, 2]
    >>> level("/")
    0
"""

from __future__ import annotations

from typing import Protocol

from contentstore.core.errors import ValidationError

ROOT_PATH = "/"
SEPARATOR = "/"


class TreeNode(Protocol):
    """Anything stored in a materialized-path tree."""

    id: int
    path: str
    level: int


def children_path(node: TreeNode) -> str:
    """Path shared by every direct child of *node*."""
    return f"{node.path}{node.id}{SEPARATOR}"


def segments(path: str) -> list[str]:
    if not path.startswith(SEPARATOR) or not path.endswith(SEPARATOR):
        raise ValidationError(
            f"Malformed tree path: {path!r}", field="path", value=path
        )
    return [part for part in path.split(SEPARATOR) if part]


def ancestor_ids(path: str) -> list[int]:
    """Ids encoded in *path*, ordered root to parent. Empty for the root path."""
    try:
        return [int(part) for part in segments(path)]
    except ValueError as exc:
        raise ValidationError(
            f"Malformed tree path: {path!r}", field="path", value=path, cause=exc
        ) from exc


def level(path: str) -> int:
    """Depth of a node stored under *path* (root = 0)."""
    return len(segments(path))


def is_descendant(path: str, node: TreeNode) -> bool:
    """True when a node stored under *path* lies below *node*."""
    return path.startswith(children_path(node))


def place(node: TreeNode, parent: TreeNode | None) -> None:
    """Set *node*'s path and level for a position under *parent* (root if None)."""
    if parent is None:
        node.path = ROOT_PATH
        node.level = 0
        return
    node.path = children_path(parent)
    node.level = level(node.path)


__all__ = [
    "ROOT_PATH",
    "SEPARATOR",
    "TreeNode",
    "ancestor_ids",
    "children_path",
    "is_descendant",
    "level",
    "place",
    "segments",
]

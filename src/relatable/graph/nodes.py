"""Nodes - The closed set of node values in the tag graph.

This module defines the node values stored in the registry:
- File / Directory: canonical filesystem entities
- RootDirectory: anchor for the walked filesystem tree
- RootTag: anchor owning every known tag
- Tag: a tag identified by its exact string
- NodeKind: Enum naming each variant

Node identity is value equality. Two ``File`` values with equal paths are
the same logical node; ``File`` and ``Directory`` never compare equal even
when their paths do.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Union


class NodeKind(Enum):
    """Types of nodes in the tag graph."""

    FILE = "file"
    DIRECTORY = "directory"
    ROOT_DIRECTORY = "root_directory"
    ROOT_TAG = "root_tag"
    TAG = "tag"


@dataclass(frozen=True)
class File:
    """A file, identified by its absolute, symlink-resolved path."""

    path: Path

    @property
    def kind(self) -> NodeKind:
        return NodeKind.FILE


@dataclass(frozen=True)
class Directory:
    """A directory, identified by its absolute, symlink-resolved path."""

    path: Path

    @property
    def kind(self) -> NodeKind:
        return NodeKind.DIRECTORY


@dataclass(frozen=True)
class RootDirectory:
    """Parent slot of the walked root. All instances are equal."""

    @property
    def kind(self) -> NodeKind:
        return NodeKind.ROOT_DIRECTORY


@dataclass(frozen=True)
class RootTag:
    """Owner of every discovered tag. All instances are equal."""

    @property
    def kind(self) -> NodeKind:
        return NodeKind.ROOT_TAG


@dataclass(frozen=True)
class Tag:
    """A tag. The name is the tag file line, untouched (may be empty)."""

    name: str

    @property
    def kind(self) -> NodeKind:
        return NodeKind.TAG


TagNode = Union[File, Directory, RootDirectory, RootTag, Tag]

# Entities that can own tags besides RootTag
PathNode = Union[File, Directory]


def path_node(path: Path, is_dir: bool) -> PathNode:
    """Create the File or Directory node for an already canonical path."""
    if is_dir:
        return Directory(path=path)
    return File(path=path)


def node_path(node: TagNode) -> Path | None:
    """Return the path of a path-bearing node, None for anchors and tags."""
    if isinstance(node, (File, Directory)):
        return node.path
    if isinstance(node, (RootDirectory, RootTag, Tag)):
        return None
    raise TypeError(f"Unknown node type: {type(node).__name__}")


def node_label(node: TagNode) -> str:
    """Human-readable one-line description of a node."""
    if isinstance(node, File):
        return str(node.path)
    if isinstance(node, Directory):
        return f"{node.path}/"
    if isinstance(node, RootDirectory):
        return "ROOT_DIR"
    if isinstance(node, RootTag):
        return "ROOT_TAG"
    if isinstance(node, Tag):
        return f"[{node.name}]"
    raise TypeError(f"Unknown node type: {type(node).__name__}")

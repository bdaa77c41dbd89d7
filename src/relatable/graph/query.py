"""Queries over a built tag graph.

These answer "what tags apply to path P" and "what is tagged X" using only
the public TagGraph traversal API.
"""

from __future__ import annotations

from pathlib import Path

from relatable.errors import RelatableError
from relatable.graph.nodes import Directory, File, RootTag, Tag, TagNode
from relatable.graph.registry import NodeRegistry
from relatable.graph.relations import Relation


def find_path(registry: NodeRegistry, path: Path | str) -> int:
    """Find the File or Directory handle for a path.

    The path is canonicalized first, so relative paths and symlinks
    resolve to the node the builder recorded.

    Raises:
        RelatableError: If no node exists for the path.
    """
    canonical = Path(path).resolve()
    for node in (File(path=canonical), Directory(path=canonical)):
        handle = registry.find(node)
        if handle is not None:
            return handle
    raise RelatableError(f"Path not in graph: {path}")


def tags_for_path(registry: NodeRegistry, path: Path | str, inherited: bool = True) -> list[str]:
    """Return the names of the tags that apply to a path, sorted.

    Args:
        registry: Registry of a built graph.
        path: File or directory path.
        inherited: Also include tags of every enclosing directory.
    """
    start = find_path(registry, path)
    graph = registry.graph
    if inherited:
        relations = Relation.is_upward
    else:
        relations = {Relation.HAS_TAG}

    names = set()
    for handle in graph.walk(start, relations):
        node = graph.node(handle)
        if isinstance(node, Tag):
            names.add(node.name)
    return sorted(names)


def _sort_key(node: TagNode) -> tuple[str, str]:
    if isinstance(node, (File, Directory)):
        return (str(node.path), node.kind.value)
    return ("", node.kind.value)


def paths_with_tag(
    registry: NodeRegistry, name: str, include_descendants: bool = False
) -> list[TagNode]:
    """Return the File/Directory nodes a tag is assigned to, sorted by path.

    Args:
        registry: Registry of a built graph.
        name: Exact tag name.
        include_descendants: Also include everything inside tagged directories.

    Raises:
        RelatableError: If the tag does not exist.
    """
    tag = registry.find(Tag(name=name))
    if tag is None:
        raise RelatableError(f"Unknown tag: {name!r}")

    graph = registry.graph
    found: set[int] = set()
    for edge in graph.outgoing(tag, {Relation.TAG_ASSIGNED_TO}):
        if include_descendants:
            found.update(graph.walk(edge.target, {Relation.CHILD}))
        else:
            found.add(edge.target)
    return sorted((graph.node(handle) for handle in found), key=_sort_key)


def all_tags(registry: NodeRegistry) -> list[str]:
    """Return every tag owned by RootTag, sorted."""
    root = registry.find(RootTag())
    if root is None:
        return []
    graph = registry.graph
    names = []
    for edge in graph.outgoing(root, {Relation.HAS_TAG}):
        node = graph.node(edge.target)
        if isinstance(node, Tag):
            names.append(node.name)
    return sorted(names)

"""Filesystem Walker - Records the directory structure under a root.

Every entry under the root (the root included) becomes a File or
Directory node linked to its parent directory with a CHILD edge
(parent -> entry) and a PARENT edge (entry -> parent). The root hangs off
the RootDirectory anchor. Tag files are skipped.

The walk is lenient: an entry that fails is logged and skipped, and the
walk carries on with the rest of the tree.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from relatable.config import TagConfig
from relatable.graph.nodes import RootDirectory, path_node
from relatable.graph.registry import NodeRegistry
from relatable.graph.relations import Relation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Pending:
    """A worklist item: an entry path and the handle of its parent node."""

    path: str
    parent: int
    depth: int


@dataclass
class WalkStats:
    """Outcome of one walk.

    Attributes:
        visited: Entries recorded in the graph.
        skipped_tag_files: Entries skipped for carrying the tag extension.
        errors: Entries skipped because of an error.
    """

    visited: int = 0
    skipped_tag_files: int = 0
    errors: int = 0


def add_file_structure_to_graph(
    root: Path | str, registry: NodeRegistry, config: TagConfig | None = None
) -> WalkStats:
    """Walk root depth-first with an explicit stack and record structure.

    Directories are listed in name order. Symlinked directories are
    recorded but only descended into when config.follow_symlinks is set;
    a canonical directory is never entered twice.

    Returns:
        WalkStats for the walk.
    """
    config = config or TagConfig()
    graph = registry.graph
    stats = WalkStats()
    dir_root = registry.get_or_create(RootDirectory())
    entered: set[Path] = set()

    stack = [_Pending(path=os.fspath(root), parent=dir_root, depth=0)]
    while stack:
        item = stack.pop()

        if Path(item.path).suffix == config.suffix:
            stats.skipped_tag_files += 1
            continue

        try:
            canonical = Path(item.path).resolve(strict=True)
            is_dir = os.path.isdir(canonical)
        except (OSError, RuntimeError) as e:
            logger.error("Error when walking file structure: %s: %s", item.path, e)
            stats.errors += 1
            continue

        # A link may point at a tag file under another name
        if canonical.suffix == config.suffix:
            stats.skipped_tag_files += 1
            continue

        node = registry.get_or_create(path_node(canonical, is_dir))
        graph.update_edge(item.parent, node, Relation.CHILD)
        graph.update_edge(node, item.parent, Relation.PARENT)
        stats.visited += 1

        if not is_dir:
            continue
        if item.depth > 0 and os.path.islink(item.path) and not config.follow_symlinks:
            continue
        if canonical in entered:
            logger.debug("Already walked %s, not descending again", canonical)
            continue
        entered.add(canonical)

        try:
            with os.scandir(item.path) as it:
                names = sorted(entry.name for entry in it)
        except OSError as e:
            logger.error("Error when walking file structure: %s: %s", item.path, e)
            stats.errors += 1
            continue

        # Reversed so the stack pops children in name order
        for name in reversed(names):
            stack.append(
                _Pending(path=os.path.join(item.path, name), parent=node, depth=item.depth + 1)
            )

    return stats

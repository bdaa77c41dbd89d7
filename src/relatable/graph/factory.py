"""Graph Factory - Single entry point for building the tag graph.

Commands should use build() rather than running the passes themselves:
it runs the tag file scan, then the filesystem walk, against one shared
NodeRegistry and freezes the result.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

from relatable.config import TagConfig, get_config
from relatable.graph.registry import NodeRegistry, TagGraph
from relatable.graph.tagfiles import add_tags_to_graph
from relatable.graph.walker import add_file_structure_to_graph

logger = logging.getLogger(__name__)


def _tag_config(config: TagConfig | Mapping[str, Any] | None) -> TagConfig:
    if config is None:
        return TagConfig()
    if isinstance(config, TagConfig):
        return config
    return TagConfig.from_dict(config)


def get_tagged_files(
    root: Path | str, config: TagConfig | Mapping[str, Any] | None = None
) -> NodeRegistry:
    """Build the tag graph for root and return its registry.

    The graph is available as ``registry.graph``.

    Args:
        root: Directory to index.
        config: A TagConfig, a merged config dict, or None for defaults.

    Raises:
        TagFileError: If the tag file scan fails. No partial graph is returned.
    """
    tag_config = _tag_config(config)
    registry = NodeRegistry()

    tag_file_count = add_tags_to_graph(root, registry, tag_config)
    logger.info("Scanned %d tag files under %s", tag_file_count, root)

    stats = add_file_structure_to_graph(root, registry, tag_config)
    if stats.errors:
        logger.warning("Skipped %d entries that could not be walked", stats.errors)

    registry.graph.freeze()
    logger.info(
        "Built tag graph for %s: %d nodes, %d edges",
        root,
        registry.graph.node_count(),
        registry.graph.edge_count(),
    )
    return registry


def build(
    root: Path | str, config: TagConfig | Mapping[str, Any] | None = None
) -> tuple[TagGraph, NodeRegistry]:
    """Build the tag graph for root.

    Returns:
        Tuple of (frozen graph, registry resolving node values to handles).
    """
    registry = get_tagged_files(root, config)
    return registry.graph, registry


def build_graph(
    root: Path | str,
    config: Mapping[str, Any] | None = None,
    config_path: Path | None = None,
) -> tuple[TagGraph, NodeRegistry]:
    """Build the tag graph for root using its configuration.

    This is the standard way for commands to obtain a graph. When config is
    not given it is loaded from config_path, or from the nearest
    .relatable.toml above root.
    """
    if config is None:
        config = get_config(Path(root), config_path)
    return build(root, config)

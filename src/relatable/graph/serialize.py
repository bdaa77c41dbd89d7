"""Graph Serialization - Export a tag graph to JSON-compatible dicts.

Output only: nothing reads these dicts back. Every run rebuilds the graph.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from relatable.graph.nodes import Directory, File, RootDirectory, RootTag, Tag

if TYPE_CHECKING:
    from relatable.graph.nodes import TagNode
    from relatable.graph.registry import TagGraph


def serialize_node(node: TagNode) -> dict[str, Any]:
    """Serialize a node value to a JSON-compatible dict.

    Args:
        node: The node to serialize.

    Returns:
        Dict with ``kind`` plus ``path`` or ``name`` where the node has one.
    """
    if isinstance(node, (File, Directory)):
        return {"kind": node.kind.name, "path": str(node.path)}
    if isinstance(node, Tag):
        return {"kind": node.kind.name, "name": node.name}
    if isinstance(node, (RootDirectory, RootTag)):
        return {"kind": node.kind.name}
    raise TypeError(f"Unknown node type: {type(node).__name__}")


def serialize_graph(graph: TagGraph) -> dict[str, Any]:
    """Serialize a TagGraph to a JSON-compatible dict.

    Args:
        graph: The graph to serialize.

    Returns:
        Dict with nodes (keyed by handle), edges and metadata.
    """
    nodes = {}
    kind_counts: dict[str, int] = {}
    for handle, node in graph.iter_nodes():
        nodes[str(handle)] = serialize_node(node)
        kind_name = node.kind.name
        kind_counts[kind_name] = kind_counts.get(kind_name, 0) + 1

    edges = []
    relation_counts: dict[str, int] = {}
    for edge in graph.iter_edges():
        edges.append(
            {
                "source": edge.source,
                "target": edge.target,
                "relation": edge.relation.name,
            }
        )
        relation_counts[edge.relation.name] = relation_counts.get(edge.relation.name, 0) + 1

    return {
        "nodes": nodes,
        "edges": edges,
        "metadata": {
            "node_count": len(nodes),
            "edge_count": len(edges),
            "by_kind": kind_counts,
            "by_relation": relation_counts,
        },
    }

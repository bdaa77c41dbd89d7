"""
relatable.commands.summary - Show what a build found.

Prints node counts per kind and edge counts per relation.
"""

from __future__ import annotations

import argparse
import json
from typing import Any, Mapping

from relatable.graph.factory import build_graph
from relatable.graph.nodes import NodeKind
from relatable.graph.relations import Relation


def run(args: argparse.Namespace, config: Mapping[str, Any] | None = None) -> int:
    """Run the summary command."""
    graph, _ = build_graph(args.root, config=config, config_path=args.config)

    by_kind = {kind.name: 0 for kind in NodeKind}
    for _, node in graph.iter_nodes():
        by_kind[node.kind.name] += 1
    by_relation = {relation.name: 0 for relation in Relation}
    for edge in graph.iter_edges():
        by_relation[edge.relation.name] += 1

    if getattr(args, "json", False):
        print(
            json.dumps(
                {
                    "node_count": graph.node_count(),
                    "edge_count": graph.edge_count(),
                    "by_kind": by_kind,
                    "by_relation": by_relation,
                },
                indent=2,
            )
        )
        return 0

    print(f"Nodes: {graph.node_count()}")
    for name, count in by_kind.items():
        print(f"  {name:<16} {count}")
    print(f"Edges: {graph.edge_count()}")
    for name, count in by_relation.items():
        print(f"  {name:<16} {count}")
    return 0

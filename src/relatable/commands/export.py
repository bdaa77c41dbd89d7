"""
relatable.commands.export - Dump the graph as JSON on stdout.
"""

from __future__ import annotations

import argparse
import json
from typing import Any, Mapping

from relatable.graph.factory import build_graph
from relatable.graph.serialize import serialize_graph


def run(args: argparse.Namespace, config: Mapping[str, Any] | None = None) -> int:
    """Run the export command."""
    graph, _ = build_graph(args.root, config=config, config_path=args.config)
    print(json.dumps(serialize_graph(graph), indent=args.indent))
    return 0

"""
relatable.commands.tags - Tag queries.

- `relatable tags ROOT PATH` - tags that apply to PATH
- `relatable tagged ROOT TAG` - paths tagged TAG
- `relatable list-tags ROOT` - every known tag
"""

from __future__ import annotations

import argparse
import json
from typing import Any, Mapping

from relatable.graph.factory import build_graph
from relatable.graph.nodes import node_path
from relatable.graph.query import all_tags, paths_with_tag, tags_for_path


def run_tags(args: argparse.Namespace, config: Mapping[str, Any] | None = None) -> int:
    """Print the tags applying to a path."""
    _, registry = build_graph(args.root, config=config, config_path=args.config)
    names = tags_for_path(registry, args.path, inherited=not args.direct)
    _emit(names, args)
    return 0


def run_tagged(args: argparse.Namespace, config: Mapping[str, Any] | None = None) -> int:
    """Print the paths a tag is assigned to."""
    _, registry = build_graph(args.root, config=config, config_path=args.config)
    nodes = paths_with_tag(registry, args.tag, include_descendants=args.recursive)
    _emit([str(node_path(node)) for node in nodes], args)
    return 0


def run_list(args: argparse.Namespace, config: Mapping[str, Any] | None = None) -> int:
    """Print every known tag."""
    _, registry = build_graph(args.root, config=config, config_path=args.config)
    _emit(all_tags(registry), args)
    return 0


def _emit(values: list[str], args: argparse.Namespace) -> None:
    if getattr(args, "json", False):
        print(json.dumps(values, indent=2))
        return
    for value in values:
        print(value)

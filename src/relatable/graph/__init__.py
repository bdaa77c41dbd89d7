"""Graph module - Tag graph data structures and builder.

Exports:
- NodeKind, File, Directory, RootDirectory, RootTag, Tag: node values
- Relation: Enum of edge labels
- Edge: Labelled edge between node handles
- TagGraph: Multi-relation directed graph
- NodeRegistry: Deduplicating node value -> handle store
- build / get_tagged_files: Graph assembler entry points
"""

from relatable.graph.factory import build, get_tagged_files
from relatable.graph.nodes import (
    Directory,
    File,
    NodeKind,
    RootDirectory,
    RootTag,
    Tag,
    TagNode,
)
from relatable.graph.registry import NodeRegistry, TagGraph
from relatable.graph.relations import Edge, Relation

__all__ = [
    "NodeKind",
    "File",
    "Directory",
    "RootDirectory",
    "RootTag",
    "Tag",
    "TagNode",
    "Relation",
    "Edge",
    "TagGraph",
    "NodeRegistry",
    "build",
    "get_tagged_files",
]

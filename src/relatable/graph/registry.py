"""Registry - Deduplicating node store over a multi-relation graph.

This module provides:
- TagGraph: directed graph of node values and relation-labelled edges,
  addressed by integer handles
- NodeRegistry: get-or-create mapping from node value to handle

The registry owns the only mapping from value to handle. Canonicalizing
paths before lookup is the caller's job; the registry cannot tell that two
different paths name the same file.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Iterator

from relatable.errors import RelatableError
from relatable.graph.nodes import TagNode
from relatable.graph.relations import Edge, Relation, RelationFilter, relation_predicate


@dataclass
class TagGraph:
    """Directed graph allowing one edge per (source, target, relation).

    Nodes live in an arena indexed by handle. Edges are stored once and
    indexed per endpoint for traversal. Nothing is ever removed.
    """

    # Internal storage (prefixed) - excluded from constructor
    _nodes: list[TagNode] = field(default_factory=list, init=False)
    _edges: dict[Edge, None] = field(default_factory=dict, init=False, repr=False)
    _outgoing: list[list[Edge]] = field(default_factory=list, init=False, repr=False)
    _incoming: list[list[Edge]] = field(default_factory=list, init=False, repr=False)
    _frozen: bool = field(default=False, init=False)

    # ─────────────────────────────────────────────────────────────────────────
    # Construction
    # ─────────────────────────────────────────────────────────────────────────

    def add_node(self, node: TagNode) -> int:
        """Append a node and return its handle. Does not deduplicate."""
        self._check_mutable()
        self._nodes.append(node)
        self._outgoing.append([])
        self._incoming.append([])
        return len(self._nodes) - 1

    def update_edge(self, source: int, target: int, relation: Relation) -> Edge:
        """Add an edge unless the same (source, target, relation) exists.

        Edges that differ only by relation coexist.

        Returns:
            The stored Edge.
        """
        self._check_mutable()
        self._check_handle(source)
        self._check_handle(target)
        edge = Edge(source=source, target=target, relation=relation)
        if edge not in self._edges:
            self._edges[edge] = None
            self._outgoing[source].append(edge)
            self._incoming[target].append(edge)
        return edge

    def freeze(self) -> None:
        """Make the graph read-only."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_mutable(self) -> None:
        if self._frozen:
            raise RelatableError("Graph is frozen; it cannot be modified after build")

    def _check_handle(self, handle: int) -> None:
        if not 0 <= handle < len(self._nodes):
            raise KeyError(f"Node handle {handle} not found")

    # ─────────────────────────────────────────────────────────────────────────
    # Read API
    # ─────────────────────────────────────────────────────────────────────────

    def node(self, handle: int) -> TagNode:
        """Return the node value for a handle.

        Raises:
            KeyError: If the handle does not exist.
        """
        self._check_handle(handle)
        return self._nodes[handle]

    def node_count(self) -> int:
        """Return total number of nodes."""
        return len(self._nodes)

    def edge_count(self) -> int:
        """Return total number of edges."""
        return len(self._edges)

    def iter_nodes(self) -> Iterator[tuple[int, TagNode]]:
        """Iterate (handle, node) pairs in handle order."""
        yield from enumerate(self._nodes)

    def iter_edges(self) -> Iterator[Edge]:
        """Iterate all edges in insertion order."""
        yield from self._edges

    def has_edge(self, source: int, target: int, relation: Relation) -> bool:
        """Check for an edge with exactly this source, target and relation."""
        return Edge(source=source, target=target, relation=relation) in self._edges

    def outgoing(self, handle: int, relations: RelationFilter = None) -> Iterator[Edge]:
        """Iterate edges leaving a node, optionally filtered by relation."""
        self._check_handle(handle)
        accept = relation_predicate(relations)
        for edge in self._outgoing[handle]:
            if accept(edge.relation):
                yield edge

    def incoming(self, handle: int, relations: RelationFilter = None) -> Iterator[Edge]:
        """Iterate edges entering a node, optionally filtered by relation."""
        self._check_handle(handle)
        accept = relation_predicate(relations)
        for edge in self._incoming[handle]:
            if accept(edge.relation):
                yield edge

    def walk(self, start: int, relations: RelationFilter = None) -> Iterator[int]:
        """Breadth-first traversal over outgoing edges passing the filter.

        Args:
            start: Handle to start from (yielded first).
            relations: Restrict traversal to these relations, or to those
                accepted by a predicate. None follows every edge.

        Yields:
            Each reachable handle once.
        """
        self._check_handle(start)
        accept = relation_predicate(relations)
        visited = {start}
        queue: deque[int] = deque([start])
        while queue:
            handle = queue.popleft()
            yield handle
            for edge in self._outgoing[handle]:
                if edge.target not in visited and accept(edge.relation):
                    visited.add(edge.target)
                    queue.append(edge.target)


class NodeRegistry:
    """Get-or-create store mapping node values to TagGraph handles.

    The value-to-handle mapping is a bijection: a value equal to one
    already registered always resolves to the existing handle.

    Attributes:
        graph: The backing TagGraph.
    """

    def __init__(self, graph: TagGraph | None = None):
        self.graph = graph if graph is not None else TagGraph()
        self._index: dict[TagNode, int] = {}

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, node: object) -> bool:
        return node in self._index

    def get_or_create(self, node: TagNode) -> int:
        """Get the handle of a node, adding it to the graph if new.

        The caller keeps its value; node values are immutable, so the
        registry can key on it directly.
        """
        existing = self._index.get(node)
        if existing is not None:
            return existing
        handle = self.graph.add_node(node)
        self._index[node] = handle
        return handle

    def intern(self, node: TagNode) -> tuple[int, TagNode]:
        """Hand a node value to the registry.

        Deduplicates exactly like get_or_create, and also returns the
        registry's canonical instance for that value so callers can drop
        their own copy.

        Returns:
            Tuple of (handle, canonical node value).
        """
        handle = self.get_or_create(node)
        return handle, self.graph.node(handle)

    def find(self, node: TagNode) -> int | None:
        """Return the handle for a node value, or None if not registered."""
        return self._index.get(node)

    def node(self, handle: int) -> TagNode:
        """Return the node value for a handle."""
        return self.graph.node(handle)

    def connect(self, a: TagNode, b: TagNode, relation: Relation) -> Edge:
        """Add a relation edge from a to b, creating either node if needed."""
        ax = self.get_or_create(a)
        bx = self.get_or_create(b)
        return self.graph.update_edge(ax, bx, relation)

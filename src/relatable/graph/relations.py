"""Relations - Edge labels and edge values.

This module defines the typed edges between graph nodes:
- Relation: Enum of edge labels
- Edge: A labelled edge between two node handles
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Union


class Relation(Enum):
    """Labels for edges in the tag graph.

    - PARENT: Directory/File A's parent is directory B
    - CHILD: Directory A contains B
    - HAS_TAG: A (RootTag, File or Directory) has tag B
    - TAG_ASSIGNED_TO: Tag A has been assigned to B
    """

    PARENT = "parent"
    CHILD = "child"
    HAS_TAG = "has_tag"
    TAG_ASSIGNED_TO = "tag_assigned_to"

    def is_structural(self) -> bool:
        """True for the filesystem containment relations."""
        return self in (Relation.PARENT, Relation.CHILD)

    def is_upward(self) -> bool:
        """True for relations pointing from an entity toward what it belongs to.

        Following only upward edges from a path collects its own tags and
        the tags of every enclosing directory, without fanning out into
        siblings or other tagged entities.
        """
        return self in (Relation.PARENT, Relation.HAS_TAG)


@dataclass(frozen=True)
class Edge:
    """A labelled edge between two node handles.

    Two edges are equal only when source, target and relation all match,
    so edges that differ only in relation are distinct.

    Attributes:
        source: Handle of the source node.
        target: Handle of the target node.
        relation: The edge label.
    """

    source: int
    target: int
    relation: Relation


RelationFilter = Union[Iterable[Relation], Callable[[Relation], bool], None]


def relation_predicate(relations: RelationFilter) -> Callable[[Relation], bool]:
    """Normalize a relation filter into a predicate.

    Args:
        relations: None (every relation), an iterable of relations, or a
            predicate over relations.

    Returns:
        A predicate returning True for relations that pass the filter.
    """
    if relations is None:
        return lambda relation: True
    if callable(relations):
        return relations
    allowed = frozenset(relations)
    return lambda relation: relation in allowed

"""Pytest fixtures for core tests."""

import pytest


@pytest.fixture
def registry():
    """Fresh NodeRegistry instance."""
    from relatable.graph.registry import NodeRegistry

    return NodeRegistry()


@pytest.fixture
def photos_graph(photos):
    """The photos tree built into (graph, registry)."""
    from relatable.graph.factory import build

    return build(photos)

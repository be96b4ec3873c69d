"""Shared test fixtures for graphkeeper tests."""

import logging

import pytest

from graphkeeper.analysis.store import AnalysisStore
from graphkeeper.fingerprint import FingerprintStore, MemoryStorage
from graphkeeper.graph.models import GraphEdge, GraphNode, Position


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def reset_singletons():
    """Process-wide instances never leak between tests."""
    FingerprintStore.reset_instance()
    AnalysisStore.reset_instance()
    yield
    FingerprintStore.reset_instance()
    AnalysisStore.reset_instance()


@pytest.fixture(autouse=True)
def package_logger():
    """Handlers and level set by setup_logging are undone after each test."""
    logger = logging.getLogger("graphkeeper")
    handlers, level = list(logger.handlers), logger.level
    yield logger
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def fingerprints(storage):
    return FingerprintStore(storage)


def grid_nodes(count: int, columns: int = 10, spacing: float = 200.0) -> list[GraphNode]:
    """Nodes laid out on a grid, row-major, ids n0..n{count-1}."""
    return [
        GraphNode(
            id=f"n{i}",
            position=Position((i % columns) * spacing, (i // columns) * spacing),
        )
        for i in range(count)
    ]


def chain_edges(nodes: list[GraphNode]) -> list[GraphEdge]:
    """n0 -> n1 -> n2 ... as calls edges."""
    return [GraphEdge(a.id, b.id) for a, b in zip(nodes, nodes[1:])]


@pytest.fixture
def small_graph():
    """50 nodes on a grid, chained."""
    nodes = grid_nodes(50)
    return nodes, chain_edges(nodes)


@pytest.fixture
def large_graph():
    """150 nodes on a grid, chained."""
    nodes = grid_nodes(150)
    return nodes, chain_edges(nodes)


@pytest.fixture
def make_grid():
    """Factory for grid-laid-out nodes, see :func:`grid_nodes`."""
    return grid_nodes


@pytest.fixture
def make_chain():
    return chain_edges

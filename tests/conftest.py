"""Shared coupling-graph fixtures."""
from __future__ import annotations

import pytest

from TargetSelection.graph.model import CouplingGraph


class StepClock:
    """Deterministic clock advancing by ``step`` seconds on every read."""

    def __init__(self, step: float = 1.0) -> None:
        self.now = 0.0
        self.step = step
        self.reads = 0

    def __call__(self) -> float:
        value = self.now
        self.now += self.step
        self.reads += 1
        return value


@pytest.fixture
def make_clock():
    """Factory fixture producing deterministic step clocks."""

    def _make(step: float = 1.0) -> StepClock:
        return StepClock(step)

    return _make


@pytest.fixture
def triangle_graph() -> CouplingGraph:
    """A -> B, B -> C, A -> C, every edge of weight 1."""
    return CouplingGraph.from_edges(
        ["A", "B", "C"],
        [("A", "B", 1), ("B", "C", 1), ("A", "C", 1)],
    )


@pytest.fixture
def chain_graph() -> CouplingGraph:
    """A -> B -> C -> T plus D -> T; target T is four classes away from A."""
    return CouplingGraph.from_edges(
        ["A", "B", "C", "D", "T"],
        [("A", "B", 3), ("B", "C", 1), ("C", "T", 2), ("D", "T", 1)],
    )


@pytest.fixture
def two_target_graph() -> CouplingGraph:
    """A -> B -> T1 and C -> T2; no class reaches both targets."""
    return CouplingGraph.from_edges(
        ["A", "B", "C", "T1", "T2"],
        [("A", "B", 1), ("B", "T1", 1), ("C", "T2", 1)],
    )


@pytest.fixture
def layered_graph() -> CouplingGraph:
    """Twelve classes feeding two targets, plus two classes with no route."""
    nodes = [f"C{i}" for i in range(12)] + ["T1", "T2", "Iso", "Dead"]
    edges = [
        ("C0", "C1", 2), ("C1", "C2", 1), ("C2", "T1", 4),
        ("C3", "T1", 1), ("C4", "C3", 1), ("C5", "C4", 2),
        ("C6", "T2", 1), ("C7", "C6", 3), ("C8", "C7", 1),
        ("C9", "C2", 1), ("C9", "C6", 1), ("C10", "C9", 1),
        ("C11", "C0", 1), ("C11", "C5", 1), ("C2", "C9", 1),
        ("Dead", "Iso", 1),
    ]
    return CouplingGraph.from_edges(nodes, edges)

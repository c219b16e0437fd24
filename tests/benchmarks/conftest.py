"""Fixtures for benchmark tests generating large synthetic coupling graphs."""
from __future__ import annotations

import numpy as np
import pytest

from TargetSelection.graph.model import CouplingGraph


@pytest.fixture
def make_coupling_graph():
    """Factory fixture that generates a random sparse coupling graph.

    Returns the graph and ``n_targets`` target classes drawn from it.
    """

    def _make(
        n: int, out_degree: int = 3, n_targets: int = 3, seed: int = 42
    ) -> tuple[CouplingGraph, list[str]]:
        rng = np.random.RandomState(seed)
        nodes = [f"C{i:05d}" for i in range(n)]
        edges = []
        for i, source in enumerate(nodes):
            for j in rng.choice(n, size=out_degree, replace=False):
                if j != i:
                    edges.append((source, nodes[j], int(rng.randint(1, 5))))
        targets = [nodes[i] for i in rng.choice(n, size=n_targets, replace=False)]
        return CouplingGraph.from_edges(nodes, edges), targets

    return _make

"""Coupling graph: a frozen, directed, edge-weighted graph of project classes."""
from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

import networkx as nx

from TargetSelection.pipeline.errors import GraphError
from TargetSelection.shared.types import ClassId, CouplingEdge

logger = logging.getLogger(__name__)


class CouplingGraph:
    """Read-only coupling graph.

    Nodes are exactly the project's classes, in the order they were declared.
    Each ordered pair of classes carries at most one edge whose ``weight`` is
    the number of coupling occurrences from source to sink.
    """

    def __init__(self, graph: nx.DiGraph) -> None:
        self._graph = nx.freeze(graph)
        self._nodes: tuple[ClassId, ...] = tuple(graph.nodes)

    @classmethod
    def from_edges(
        cls,
        nodes: Iterable[ClassId],
        edges: Iterable[CouplingEdge | tuple[ClassId, ClassId, int]],
    ) -> CouplingGraph:
        """Build a graph from a node list and (source, sink, weight) edges."""
        builder = CouplingGraphBuilder()
        for node in nodes:
            builder.add_class(node)
        for edge in edges:
            if not isinstance(edge, CouplingEdge):
                edge = CouplingEdge(*edge)
            builder.add_edge(edge)
        return builder.freeze()

    @property
    def nodes(self) -> tuple[ClassId, ...]:
        return self._nodes

    @property
    def edge_count(self) -> int:
        return self._graph.number_of_edges()

    @property
    def view(self) -> nx.DiGraph:
        """The underlying frozen networkx graph."""
        return self._graph

    def edges(self) -> tuple[CouplingEdge, ...]:
        return tuple(
            CouplingEdge(source, sink, data["weight"])
            for source, sink, data in self._graph.edges(data=True)
        )

    def weight(self, source: ClassId, sink: ClassId) -> int:
        """Coupling strength from source to sink, 0 when not coupled."""
        data = self._graph.get_edge_data(source, sink)
        return 0 if data is None else data["weight"]

    def successors(self, node: ClassId) -> list[ClassId]:
        return list(self._graph.successors(node))

    def __contains__(self, node: object) -> bool:
        return node in self._graph

    def __iter__(self) -> Iterator[ClassId]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        return f"CouplingGraph(classes={len(self)}, edges={self.edge_count})"


class CouplingGraphBuilder:
    """Accumulates coupling occurrences, then freezes them into a CouplingGraph.

    Repeated occurrences of the same ordered pair add to a single edge's
    weight. Self-couplings are dropped.
    """

    def __init__(self) -> None:
        self._classes: dict[ClassId, None] = {}
        self._weights: dict[tuple[ClassId, ClassId], int] = {}
        self._frozen = False

    def add_class(self, name: ClassId) -> None:
        self._check_open()
        if not name:
            raise GraphError("Class identifiers must be non-empty strings")
        self._classes.setdefault(name, None)

    def add_coupling(self, source: ClassId, sink: ClassId, count: int = 1) -> None:
        """Record ``count`` coupling occurrences from source to sink."""
        self._check_open()
        for end in (source, sink):
            if end not in self._classes:
                raise GraphError(
                    f"Coupling {source!r} -> {sink!r} references unknown class {end!r}"
                )
        if count <= 0:
            raise GraphError(
                f"Coupling {source!r} -> {sink!r} has non-positive weight {count}"
            )
        if source == sink:
            return
        key = (source, sink)
        self._weights[key] = self._weights.get(key, 0) + count

    def add_edge(self, edge: CouplingEdge) -> None:
        self.add_coupling(edge.source, edge.sink, edge.weight)

    def freeze(self) -> CouplingGraph:
        self._check_open()
        graph = nx.DiGraph()
        graph.add_nodes_from(self._classes)
        for (source, sink), weight in self._weights.items():
            graph.add_edge(source, sink, weight=weight)
        self._frozen = True
        logger.debug(
            "[TARGET-SELECT] stage=graph event=frozen classes=%d edges=%d",
            graph.number_of_nodes(),
            graph.number_of_edges(),
        )
        return CouplingGraph(graph)

    def _check_open(self) -> None:
        if self._frozen:
            raise GraphError("Graph builder is already frozen")

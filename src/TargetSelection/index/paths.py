"""Shortest-path index from every non-target class to every target class."""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import networkx as nx

from TargetSelection.graph.model import CouplingGraph
from TargetSelection.pipeline.errors import ConfigurationError
from TargetSelection.shared.types import ClassId, PathRecord

logger = logging.getLogger(__name__)


def _unit_cost(source: ClassId, sink: ClassId, data: dict) -> int:
    return 1


@dataclass(frozen=True)
class PathIndex:
    """Cached shortest paths, per-target maximum distance and maximum coverage.

    Only classes with a finite path to at least one target are present in
    ``records``; ``classes`` lists them in graph order and is the universe
    every search strategy draws candidates from.
    """

    targets: tuple[ClassId, ...]
    classes: tuple[ClassId, ...]
    records: Mapping[ClassId, Mapping[ClassId, PathRecord]]
    max_distance: Mapping[ClassId, float]
    max_coverage: Mapping[ClassId, frozenset[ClassId]]

    def record(self, name: ClassId, target: ClassId) -> PathRecord:
        return self.records[name][target]

    def __contains__(self, name: object) -> bool:
        return name in self.records

    def __len__(self) -> int:
        return len(self.classes)

    @property
    def is_empty(self) -> bool:
        return not self.classes

    def summary(self) -> dict[ClassId, tuple[float, int]]:
        """Per target: (max distance, size of max coverage set)."""
        return {
            t: (self.max_distance[t], len(self.max_coverage[t]))
            for t in self.targets
        }


def resolve_targets(graph: CouplingGraph, targets: Iterable[ClassId]) -> tuple[ClassId, ...]:
    """Validate a target list against the graph.

    Duplicates collapse onto their first occurrence. Raises
    ConfigurationError for an empty list or a class missing from the graph.
    """
    resolved = tuple(dict.fromkeys(targets))
    if not resolved:
        raise ConfigurationError("Target set is empty")
    missing = [t for t in resolved if t not in graph]
    if missing:
        raise ConfigurationError(
            f"Targets not present in the coupling graph: {', '.join(missing)}"
        )
    return resolved


def _paths_from(
    graph: nx.DiGraph, source: ClassId, targets: Sequence[ClassId]
) -> dict[ClassId, PathRecord]:
    _, paths = nx.single_source_dijkstra(graph, source, weight=_unit_cost)
    records = {}
    for target in targets:
        path = paths.get(target)
        if path is None:
            records[target] = PathRecord.unreachable()
        else:
            # Length counts classes on the path, source and target included.
            records[target] = PathRecord(distance=float(len(path)), path=tuple(path))
    return records


def build_path_index(
    graph: CouplingGraph,
    targets: Iterable[ClassId],
    workers: int = 1,
) -> PathIndex:
    """Run Dijkstra from every non-target class and cache paths to the targets."""
    resolved = resolve_targets(graph, targets)
    target_set = set(resolved)
    sources = [c for c in graph.nodes if c not in target_set]

    if workers > 1 and len(sources) > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            per_source = list(
                executor.map(lambda s: _paths_from(graph.view, s, resolved), sources)
            )
    else:
        per_source = [_paths_from(graph.view, s, resolved) for s in sources]

    records: dict[ClassId, dict[ClassId, PathRecord]] = {}
    max_distance = {t: 0.0 for t in resolved}
    coverage: dict[ClassId, set[ClassId]] = {t: set() for t in resolved}

    for source, by_target in zip(sources, per_source):
        for target, rec in by_target.items():
            if rec.reachable and rec.distance > max_distance[target]:
                max_distance[target] = rec.distance
            coverage[target].update(rec.path)
        if any(rec.reachable for rec in by_target.values()):
            records[source] = by_target

    index = PathIndex(
        targets=resolved,
        classes=tuple(records),
        records=records,
        max_distance=max_distance,
        max_coverage={t: frozenset(nodes) for t, nodes in coverage.items()},
    )

    logger.info(
        "[TARGET-SELECT] stage=index event=complete classes=%d eligible=%d "
        "targets=%d",
        len(graph),
        len(index),
        len(resolved),
    )
    for target, (distance, cov) in index.summary().items():
        logger.debug(
            "[TARGET-SELECT] stage=index event=target target=%s "
            "max_distance=%g max_coverage=%d",
            target,
            distance,
            cov,
        )
    return index

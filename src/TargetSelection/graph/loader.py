"""Readers for the coupling graph and target list produced upstream."""
from __future__ import annotations

import csv
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from TargetSelection.graph.model import CouplingGraph, CouplingGraphBuilder
from TargetSelection.pipeline.errors import ConfigurationError, GraphError
from TargetSelection.shared.types import ClassId, CouplingEdge, qualified_to_simple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GraphDocument:
    """A loaded coupling graph plus the optional class-to-source-file mapping."""

    graph: CouplingGraph
    sources: dict[ClassId, str] = field(default_factory=dict)


def load_graph(path: Path) -> GraphDocument:
    """Load a coupling graph from JSON.

    Expected layout::

        {"nodes": ["A", "B"],
         "edges": [{"source": "A", "sink": "B", "weight": 2}, ["B", "A", 1]],
         "sources": {"A": "src/pkg/A.java"}}
    """
    if not path.exists():
        raise GraphError(f"Graph file not found: {path}")
    try:
        raw = json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        raise GraphError(f"Graph file {path} is not valid JSON: {exc}") from exc

    if not isinstance(raw, dict) or "nodes" not in raw:
        raise GraphError(f"Graph file {path} has no 'nodes' list")

    edges = [_parse_edge(item) for item in raw.get("edges", [])]
    graph = CouplingGraph.from_edges(raw["nodes"], edges)
    raw_sources = raw.get("sources", {})
    if not isinstance(raw_sources, dict):
        raise GraphError(f"Graph file {path} has a 'sources' entry that is not a mapping")
    sources = {str(k): str(v) for k, v in raw_sources.items()}

    logger.info(
        "[TARGET-SELECT] stage=load event=graph_loaded classes=%d edges=%d",
        len(graph),
        graph.edge_count,
    )
    return GraphDocument(graph=graph, sources=sources)


def _parse_edge(item: object) -> CouplingEdge:
    try:
        if isinstance(item, dict):
            return CouplingEdge(
                source=item["source"],
                sink=item["sink"],
                weight=int(item.get("weight", 1)),
            )
        if isinstance(item, (list, tuple)) and len(item) in (2, 3):
            weight = int(item[2]) if len(item) == 3 else 1
            return CouplingEdge(source=item[0], sink=item[1], weight=weight)
    except KeyError as exc:
        raise GraphError(f"Edge {item!r} is missing {exc}") from exc
    except (TypeError, ValueError) as exc:
        raise GraphError(f"Edge {item!r} has a non-integer weight") from exc
    raise GraphError(f"Malformed edge entry: {item!r}")


def load_coupling_csv(
    path: Path,
    classes: list[ClassId] | None = None,
) -> GraphDocument:
    """Build a graph from a ``file,Class.member,Coupled.member`` coupling report.

    Each row is one coupling occurrence. The class is the text before the
    first ``.`` and the first column is the source file of the row's class.
    When ``classes`` is omitted every class named in the report, as owner or
    as coupled class, is a project class. With an explicit ``classes`` list,
    couplings touching any other class are skipped.
    """
    if not path.exists():
        raise GraphError(f"Coupling report not found: {path}")

    rows: list[tuple[ClassId, ClassId]] = []
    sources: dict[ClassId, str] = {}
    with path.open(newline="") as handle:
        for row in csv.reader(handle):
            if not row or row[0].lstrip().startswith("#"):
                continue
            if len(row) < 3:
                raise GraphError(f"Malformed coupling row in {path}: {row!r}")
            source = row[1].strip().split(".", 1)[0]
            sink = row[2].strip().split(".", 1)[0]
            sources.setdefault(source, row[0].strip())
            rows.append((source, sink))

    if classes is None:
        classes = list(dict.fromkeys(name for pair in rows for name in pair))

    builder = CouplingGraphBuilder()
    for name in classes:
        builder.add_class(name)
    project = set(classes)
    skipped = 0
    for source, sink in rows:
        if source not in project or sink not in project:
            skipped += 1
            continue
        builder.add_coupling(source, sink)

    if skipped:
        logger.debug(
            "[TARGET-SELECT] stage=load event=non_project_couplings skipped=%d",
            skipped,
        )
    graph = builder.freeze()
    logger.info(
        "[TARGET-SELECT] stage=load event=report_loaded classes=%d edges=%d",
        len(graph),
        graph.edge_count,
    )
    return GraphDocument(
        graph=graph,
        sources={name: file for name, file in sources.items() if name in project},
    )


def load_targets(path: Path) -> list[ClassId]:
    """Read a newline-delimited target list, stripping package prefixes."""
    if not path.exists():
        raise ConfigurationError(f"Targets file not found: {path}")
    targets = []
    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        targets.append(qualified_to_simple(line))
    return targets

"""Selection stage: build the path index, search, and emit the class list."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from TargetSelection.graph.loader import load_coupling_csv, load_graph, load_targets
from TargetSelection.graph.model import CouplingGraph
from TargetSelection.index.paths import build_path_index, resolve_targets
from TargetSelection.pipeline.artifacts import SelectionResult, write_class_list
from TargetSelection.pipeline.errors import SelectionError, TargetSelectionError
from TargetSelection.search.fitness import FitnessEvaluator
from TargetSelection.search.registry import StrategyRegistry, default_registry
from TargetSelection.shared.config import SearchConfig
from TargetSelection.shared.types import ClassId

logger = logging.getLogger(__name__)

NO_EDGES_WARNING = "Coupling graph has no edges; no class can reach a target"
EMPTY_UNIVERSE_WARNING = (
    "No class has a path to any target; selection contains the targets only"
)


def select_classes(
    graph: CouplingGraph,
    targets: Iterable[ClassId],
    config: SearchConfig,
    registry: StrategyRegistry = default_registry,
) -> SelectionResult:
    """Select classes for test generation.

    Raises ConfigurationError before any search when the options or the
    targets are invalid. Degenerate graphs produce a result holding only the
    targets, with the condition recorded in ``warnings``.
    """
    config.validate()
    resolved = resolve_targets(graph, targets)
    warnings: list[str] = []

    if graph.edge_count == 0:
        warnings.append(NO_EDGES_WARNING)
        logger.warning(
            "[TARGET-SELECT] stage=select event=no_edges classes=%d", len(graph)
        )

    if config.strategy is None:
        logger.info("[TARGET-SELECT] stage=select event=skipped reason=no_strategy")
        return _result(config, resolved, graph, warnings=warnings)

    index = build_path_index(graph, resolved, workers=config.workers)
    if index.is_empty:
        if NO_EDGES_WARNING not in warnings:
            logger.warning(
                "[TARGET-SELECT] stage=select event=empty_universe targets=%d",
                len(resolved),
            )
        warnings.append(EMPTY_UNIVERSE_WARNING)
        return _result(config, resolved, graph, warnings=warnings)

    strategy = registry.get(config.strategy, **config.strategy_options())
    evaluator = FitnessEvaluator(index)
    outcome = strategy.run(index.classes, evaluator)
    if outcome.warning:
        warnings.append(outcome.warning)

    result = _result(
        config,
        resolved,
        graph,
        selected=tuple(sorted(outcome.best)),
        best_score=outcome.best_score,
        generations=outcome.generations,
        evaluations=outcome.evaluations,
        eligible=len(index),
        warnings=warnings,
    )
    logger.info(
        "[TARGET-SELECT] stage=select event=complete strategy=%s "
        "selected=%d targets=%d size=%d/%d score=%.4f",
        config.strategy,
        len(result.selected),
        len(resolved),
        len(result.classes),
        len(graph),
        outcome.best_score,
    )
    return result


def _result(
    config: SearchConfig,
    targets: tuple[ClassId, ...],
    graph: CouplingGraph,
    selected: tuple[ClassId, ...] = (),
    best_score: float | None = None,
    generations: int = 0,
    evaluations: int = 0,
    eligible: int = 0,
    warnings: list[str] | None = None,
) -> SelectionResult:
    return SelectionResult(
        strategy=config.strategy,
        seed=config.seed,
        targets=targets,
        selected=selected,
        best_score=best_score,
        generations=generations,
        evaluations=evaluations,
        eligible_classes=eligible,
        total_classes=len(graph),
        warnings=tuple(warnings or ()),
    )


def load_graph_file(path: Path) -> tuple[CouplingGraph, dict[ClassId, str]]:
    """Load a graph from ``.json`` or a ``.csv`` coupling report."""
    if path.suffix.lower() == ".csv":
        document = load_coupling_csv(path)
    else:
        document = load_graph(path)
    return document.graph, document.sources


def run_select(
    graph_file: Path,
    targets_file: Path,
    config: SearchConfig,
    output_file: Path | None = None,
    json_file: Path | None = None,
    source_root: str | None = None,
) -> SelectionResult:
    """Run the selection stage from files.

    Returns SelectionResult. Configuration problems propagate as
    ConfigurationError; anything else is raised as SelectionError.
    """
    try:
        graph, sources = load_graph_file(graph_file)
        targets = load_targets(targets_file)
        result = select_classes(graph, targets, config)

        if output_file is not None:
            write_class_list(output_file, result.classes, sources, source_root)
        if json_file is not None:
            result.to_json(json_file)
        return result

    except TargetSelectionError:
        raise
    except Exception as exc:
        logger.warning(
            "[TARGET-SELECT] stage=select event=error error=%s",
            str(exc),
        )
        raise SelectionError(str(exc)) from exc

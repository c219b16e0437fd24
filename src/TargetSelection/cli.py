"""CLI entry points for target-aware class selection."""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

logger = logging.getLogger("TargetSelection")


def _setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
    )


def _add_graph_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--graph", required=True, type=Path,
        help="Coupling graph (.json) or coupling report (.csv)",
    )
    p.add_argument(
        "--targets", required=True, type=Path,
        help="File listing target classes, one per line",
    )


def _add_select_parser(subparsers: argparse._SubParsersAction) -> None:
    default_strategy = os.environ.get("TARGET_SELECT_STRATEGY") or None
    default_population = int(os.environ.get("TARGET_SELECT_POPULATION", "100"))
    default_budget = float(os.environ.get("TARGET_SELECT_BUDGET", "120"))
    default_seed = int(os.environ.get("TARGET_SELECT_SEED", "42"))

    p = subparsers.add_parser("select", help="Select classes to generate tests for")
    _add_graph_arguments(p)
    p.add_argument(
        "--strategy", default=default_strategy,
        help="Search strategy: random or genetic (omit to skip the search)",
    )
    p.add_argument(
        "--population", type=int, default=default_population,
        help="Candidates per generation",
    )
    p.add_argument(
        "--budget", type=float, default=default_budget,
        help="Search budget in seconds",
    )
    p.add_argument(
        "--retention", type=float, default=0.1,
        help="Fraction of the population retained each generation (genetic)",
    )
    p.add_argument(
        "--mutation", type=float, default=0.15,
        help="Fraction of the population produced by mutation (genetic)",
    )
    p.add_argument(
        "--crossover", type=float, default=0.15,
        help="Fraction of the population produced by crossover (genetic)",
    )
    p.add_argument("--seed", type=int, default=default_seed, help="Random seed")
    p.add_argument("--workers", type=int, default=1, help="Scoring threads")
    p.add_argument("--output", type=Path, help="Write the class list here")
    p.add_argument("--json", type=Path, help="Write the full result as JSON")
    p.add_argument(
        "--source-root",
        help="Path prefix stripped from source files when naming classes",
    )
    p.set_defaults(func=_cmd_select)


def _add_index_parser(subparsers: argparse._SubParsersAction) -> None:
    p = subparsers.add_parser(
        "index", help="Build the shortest-path index and print per-target limits",
    )
    _add_graph_arguments(p)
    p.set_defaults(func=_cmd_index)


def _cmd_select(args: argparse.Namespace) -> int:
    from TargetSelection.pipeline.select import run_select
    from TargetSelection.shared.config import SearchConfig

    strategy = None if args.strategy in (None, "none") else args.strategy
    config = SearchConfig(
        strategy=strategy,
        population_size=args.population,
        budget_seconds=args.budget,
        retention_fraction=args.retention,
        mutation_fraction=args.mutation,
        crossover_fraction=args.crossover,
        seed=args.seed,
        workers=args.workers,
    )
    try:
        result = run_select(
            graph_file=args.graph,
            targets_file=args.targets,
            config=config,
            output_file=args.output,
            json_file=args.json,
            source_root=args.source_root,
        )
    except Exception as exc:
        logger.error("[TARGET-SELECT] Selection failed: %s", exc)
        return 2

    for warning in result.warnings:
        logger.warning("[TARGET-SELECT] Warning: %s", warning)
    logger.info(
        "[TARGET-SELECT] Size: %d / %d (strategy=%s)",
        len(result.classes),
        result.total_classes,
        result.strategy or "none",
    )
    if args.output is None:
        for name in result.classes:
            print(name)
    return 0


def _cmd_index(args: argparse.Namespace) -> int:
    from TargetSelection.graph.loader import load_targets
    from TargetSelection.index.paths import build_path_index
    from TargetSelection.pipeline.select import load_graph_file

    try:
        graph, _ = load_graph_file(args.graph)
        index = build_path_index(graph, load_targets(args.targets))
    except Exception as exc:
        logger.error("[TARGET-SELECT] Indexing failed: %s", exc)
        return 2

    print(f"eligible classes: {len(index)} / {len(graph)}")
    for target, (distance, coverage) in index.summary().items():
        print(f"{target}: max_distance={distance:g} max_coverage={coverage}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="target-select",
        description="Target-aware selection of classes for test generation",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    _add_select_parser(subparsers)
    _add_index_parser(subparsers)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(getattr(args, "verbose", False))

    if not args.command:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

"""Uniform random search over class subsets."""
from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence

import numpy as np

from TargetSelection.search.strategy import (
    BestSoFar,
    Scorer,
    SearchResult,
    random_candidate,
    score_population,
)
from TargetSelection.shared.types import ClassId

logger = logging.getLogger(__name__)


class RandomSearch:
    """Generates whole random populations until the budget expires.

    The budget is checked after each generation, so at least one generation
    always runs and the last one may overrun the budget.
    """

    name = "random"

    def __init__(
        self,
        population_size: int = 100,
        budget_seconds: float = 120,
        seed: int | None = 42,
        workers: int = 1,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._population_size = population_size
        self._budget = budget_seconds
        self._seed = seed
        self._workers = workers
        self._clock = clock

    def run(self, eligible: Sequence[ClassId], scorer: Scorer) -> SearchResult:
        if not eligible:
            msg = "No class has a path to any target; random search skipped"
            logger.warning("[TARGET-SELECT] stage=search event=empty_universe strategy=random")
            return SearchResult.empty(msg)

        eligible = list(eligible)
        rng = np.random.RandomState(self._seed)
        best = BestSoFar()
        history: list[float] = []
        generations = 0
        evaluations = 0
        start = self._clock()

        while True:
            population = [
                random_candidate(eligible, rng) for _ in range(self._population_size)
            ]
            scores = score_population(population, scorer, self._workers)
            evaluations += len(population)
            generations += 1
            if best.combine(population, scores):
                logger.debug(
                    "[TARGET-SELECT] stage=search event=improved strategy=random "
                    "generation=%d score=%.4f size=%d",
                    generations,
                    best.score,
                    len(best.candidate),
                )
            history.append(best.score)
            if self._clock() - start >= self._budget:
                break

        elapsed = self._clock() - start
        logger.info(
            "[TARGET-SELECT] stage=search event=complete strategy=random "
            "generations=%d evaluations=%d best_score=%.4f size=%d",
            generations,
            evaluations,
            best.score,
            len(best.candidate),
        )
        return SearchResult(
            best=best.candidate,
            best_score=best.score,
            generations=generations,
            evaluations=evaluations,
            elapsed_seconds=elapsed,
            history=tuple(history),
        )

"""Genetic search over class subsets: elitism, mutation, crossover, random fill."""
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

ADD = "add"
DELETE = "delete"
REPLACE = "replace"
MUTATIONS = (ADD, DELETE, REPLACE)


def mutate(
    candidate: frozenset[ClassId],
    eligible: Sequence[ClassId],
    rng: np.random.RandomState,
) -> frozenset[ClassId]:
    """Add, delete or replace one class, chosen uniformly.

    Fallbacks: a candidate holding every eligible class cannot grow, so add
    and replace become delete; an empty candidate can only grow, so delete
    and replace become add.
    """
    operation = MUTATIONS[rng.randint(len(MUTATIONS))]
    present = sorted(candidate)
    absent = [name for name in eligible if name not in candidate]

    if not present and not absent:
        return candidate
    if operation in (ADD, REPLACE) and not absent:
        operation = DELETE
    elif operation in (DELETE, REPLACE) and not present:
        operation = ADD

    if operation == ADD:
        return candidate | {absent[rng.randint(len(absent))]}
    removed = present[rng.randint(len(present))]
    if operation == DELETE:
        return candidate - {removed}
    return (candidate - {removed}) | {absent[rng.randint(len(absent))]}


def crossover(
    first: frozenset[ClassId],
    second: frozenset[ClassId],
    rng: np.random.RandomState,
) -> tuple[frozenset[ClassId], frozenset[ClassId]]:
    """Discrete recombination producing two children.

    Parents are laid out as sorted member lists. For every position up to the
    longer parent a fair coin picks which parent supplies that position; a
    position past the end of the chosen parent contributes nothing. Each
    child flips its own coins.
    """
    a, b = sorted(first), sorted(second)
    longest = max(len(a), len(b))

    def child() -> frozenset[ClassId]:
        members = set()
        for position, coin in enumerate(rng.randint(2, size=longest)):
            source = a if coin == 0 else b
            if position < len(source):
                members.add(source[position])
        return frozenset(members)

    return child(), child()


class GeneticSearch:
    """Evolves a population of subsets until the time budget expires.

    Each generation keeps the best ``retention_fraction`` of the population
    unchanged, derives mutants and crossover children from those survivors,
    and tops the population up with fresh random subsets.
    """

    name = "genetic"

    def __init__(
        self,
        population_size: int = 100,
        budget_seconds: float = 120,
        retention_fraction: float = 0.1,
        mutation_fraction: float = 0.15,
        crossover_fraction: float = 0.15,
        seed: int | None = 42,
        workers: int = 1,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._population_size = population_size
        self._budget = budget_seconds
        self._n_retain = int(retention_fraction * population_size)
        self._n_mutate = int(mutation_fraction * population_size)
        self._n_cross = int(crossover_fraction * population_size)
        self._seed = seed
        self._workers = workers
        self._clock = clock

    def run(self, eligible: Sequence[ClassId], scorer: Scorer) -> SearchResult:
        if not eligible:
            msg = "No class has a path to any target; genetic search skipped"
            logger.warning("[TARGET-SELECT] stage=search event=empty_universe strategy=genetic")
            return SearchResult.empty(msg)

        eligible = list(eligible)
        rng = np.random.RandomState(self._seed)
        best = BestSoFar()
        start = self._clock()

        population = [
            random_candidate(eligible, rng) for _ in range(self._population_size)
        ]
        scores = score_population(population, scorer, self._workers)
        best.combine(population, scores)
        evaluations = len(population)
        history = [best.score]
        generations = 0

        while self._clock() - start < self._budget:
            generations += 1
            population, scores, scored = self._next_generation(
                population, scores, eligible, scorer, rng, best
            )
            evaluations += scored
            history.append(best.score)

        elapsed = self._clock() - start
        logger.info(
            "[TARGET-SELECT] stage=search event=complete strategy=genetic "
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

    def _next_generation(
        self,
        population: list[frozenset[ClassId]],
        scores: list[float],
        eligible: list[ClassId],
        scorer: Scorer,
        rng: np.random.RandomState,
        best: BestSoFar,
    ) -> tuple[list[frozenset[ClassId]], list[float], int]:
        # Stable sort: equal scores keep their population order.
        ranked = sorted(range(len(population)), key=scores.__getitem__)
        kept = ranked[: self._n_retain]
        survivors = [population[i] for i in kept]
        survivor_scores = [scores[i] for i in kept]

        offspring: list[frozenset[ClassId]] = []
        if survivors:
            for _ in range(self._n_mutate):
                parent = survivors[rng.randint(len(survivors))]
                offspring.append(mutate(parent, eligible, rng))

        if len(survivors) >= 2:
            children = 0
            while children < self._n_cross:
                i = rng.randint(len(survivors))
                j = rng.randint(len(survivors) - 1)
                if j >= i:
                    j += 1
                offspring.extend(crossover(survivors[i], survivors[j], rng))
                children += 2

        fill = self._population_size - len(survivors) - len(offspring)
        fresh = offspring + [random_candidate(eligible, rng) for _ in range(max(fill, 0))]
        fresh_scores = score_population(fresh, scorer, self._workers)
        if best.combine(fresh, fresh_scores):
            logger.debug(
                "[TARGET-SELECT] stage=search event=improved strategy=genetic "
                "score=%.4f size=%d",
                best.score,
                len(best.candidate),
            )

        return survivors + fresh, survivor_scores + fresh_scores, len(fresh)

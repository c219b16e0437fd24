"""Search strategy protocol and the pieces shared by every strategy."""
from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import numpy as np

from TargetSelection.shared.types import ClassId

Scorer = Callable[[frozenset[ClassId]], float]


@runtime_checkable
class SearchStrategy(Protocol):
    """Protocol for budgeted subset searches.

    Implementations explore subsets of ``eligible`` and return the
    lowest-scoring one they saw before the time budget ran out.
    """

    @property
    def name(self) -> str: ...

    def run(self, eligible: Sequence[ClassId], scorer: Scorer) -> SearchResult: ...


@dataclass(frozen=True)
class SearchResult:
    """Outcome of one search run."""

    best: frozenset[ClassId]
    best_score: float
    generations: int
    evaluations: int
    elapsed_seconds: float
    history: tuple[float, ...] = ()
    warning: str | None = None

    @classmethod
    def empty(cls, warning: str) -> SearchResult:
        return cls(
            best=frozenset(),
            best_score=math.inf,
            generations=0,
            evaluations=0,
            elapsed_seconds=0.0,
            warning=warning,
        )


class BestSoFar:
    """Running best candidate, combined one batch at a time.

    Each scored batch is first reduced to its own best (lowest score, first
    one wins on ties); ``offer`` then keeps it only on strict improvement.
    """

    def __init__(self) -> None:
        self.candidate: frozenset[ClassId] = frozenset()
        self.score = math.inf

    def offer(self, candidate: frozenset[ClassId], score: float) -> bool:
        if score < self.score:
            self.candidate = candidate
            self.score = score
            return True
        return False

    def combine(
        self,
        candidates: Sequence[frozenset[ClassId]],
        scores: Sequence[float],
    ) -> bool:
        if not candidates:
            return False
        local = int(np.argmin(scores))
        return self.offer(candidates[local], scores[local])


def random_candidate(
    eligible: Sequence[ClassId], rng: np.random.RandomState
) -> frozenset[ClassId]:
    """Pick between 1 and ``len(eligible) - 1`` distinct classes uniformly.

    A one-class universe yields that class.
    """
    n = len(eligible)
    if n == 0:
        return frozenset()
    count = rng.randint(1, max(n, 2))
    picks = rng.choice(n, size=count, replace=False)
    return frozenset(eligible[i] for i in picks)


def score_population(
    candidates: Sequence[frozenset[ClassId]],
    scorer: Scorer,
    workers: int = 1,
) -> list[float]:
    """Score candidates, on a thread pool when ``workers > 1``.

    Results keep the input order.
    """
    if workers > 1 and len(candidates) > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(scorer, candidates))
    return [scorer(c) for c in candidates]

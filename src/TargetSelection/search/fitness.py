"""Multi-objective fitness for candidate class subsets.

For each target the score is the Euclidean distance from the ideal point
(minimal path distance, minimal subset size, full path coverage)::

    score_t = sqrt(distance_t**2 + size**2 + (coverage_t - 1)**2)

and the candidate's score is the sum over targets. Lower is better.

- distance_t: mean finite path length from members to the target, normalised
  over ``[2, max_distance[t]]``. Members with no path are left out of the
  mean; if none remain the worst case ``max_distance[t]`` is used.
- size: ``(|candidate| - 1) / (|eligible| - 1)``.
- coverage_t: distinct classes lying on members' paths to the target,
  normalised over ``[2, |max_coverage[t]|]``.
"""
from __future__ import annotations

from collections.abc import Iterable

import numpy as np
from numpy.typing import NDArray

from TargetSelection.index.paths import PathIndex
from TargetSelection.shared.types import MIN_PATH_LENGTH, ClassId


class FitnessEvaluator:
    """Scores candidates against a prebuilt PathIndex.

    Holds only read-only numpy arrays, so one evaluator may be shared by
    several scoring threads.
    """

    def __init__(self, index: PathIndex) -> None:
        self._index = index
        self._rows = {name: row for row, name in enumerate(index.classes)}
        targets = index.targets
        n = len(index.classes)

        self._distances: NDArray[np.float64] = np.full((n, len(targets)), np.inf)
        for row, name in enumerate(index.classes):
            for col, target in enumerate(targets):
                self._distances[row, col] = index.records[name][target].distance

        self._max_distance = np.array(
            [index.max_distance[t] for t in targets], dtype=np.float64
        )

        # One boolean matrix per target: rows are eligible classes, columns
        # the classes of max_coverage[t] that the row's path passes through.
        self._coverage: list[NDArray[np.bool_]] = []
        self._coverage_size = np.zeros(len(targets), dtype=np.float64)
        for col, target in enumerate(targets):
            columns = {name: i for i, name in enumerate(sorted(index.max_coverage[target]))}
            mask = np.zeros((n, len(columns)), dtype=bool)
            for row, name in enumerate(index.classes):
                for node in index.records[name][target].path:
                    mask[row, columns[node]] = True
            self._coverage.append(mask)
            self._coverage_size[col] = len(columns)

    @property
    def index(self) -> PathIndex:
        return self._index

    def __call__(self, candidate: Iterable[ClassId]) -> float:
        return float(self.per_target(candidate).sum())

    def per_target(self, candidate: Iterable[ClassId]) -> NDArray[np.float64]:
        """Score of the candidate against each target, in index target order."""
        distance, size, coverage = self.components(candidate)
        return np.sqrt(distance**2 + size**2 + coverage**2)

    def components(
        self, candidate: Iterable[ClassId]
    ) -> tuple[NDArray[np.float64], float, NDArray[np.float64]]:
        """Return (distance terms, size term, coverage terms) for the candidate."""
        members = set(candidate)
        rows = [self._rows[name] for name in members if name in self._rows]
        return (
            self._distance_terms(rows),
            self._size_term(len(members)),
            self._coverage_terms(rows),
        )

    def _distance_terms(self, rows: list[int]) -> NDArray[np.float64]:
        dists = self._distances[rows]
        finite = np.isfinite(dists)
        counts = finite.sum(axis=0)
        totals = np.where(finite, dists, 0.0).sum(axis=0)
        avg = np.divide(
            totals, counts, out=self._max_distance.copy(), where=counts > 0
        )
        span = self._max_distance - MIN_PATH_LENGTH
        return np.divide(
            avg - MIN_PATH_LENGTH,
            span,
            out=np.zeros_like(avg),
            where=self._max_distance > MIN_PATH_LENGTH,
        )

    def _size_term(self, size: int) -> float:
        universe = len(self._index.classes)
        if universe <= 1:
            return 0.0
        return (size - 1.0) / (universe - 1.0)

    def _coverage_terms(self, rows: list[int]) -> NDArray[np.float64]:
        covered = np.array(
            [mask[rows].any(axis=0).sum() for mask in self._coverage],
            dtype=np.float64,
        )
        span = self._coverage_size - MIN_PATH_LENGTH
        normalised = np.divide(
            covered - MIN_PATH_LENGTH,
            span,
            out=np.ones_like(covered),
            where=self._coverage_size > MIN_PATH_LENGTH,
        )
        return normalised - 1.0


def score_candidate(candidate: Iterable[ClassId], index: PathIndex) -> float:
    """Score a single candidate; builds a throwaway evaluator."""
    return FitnessEvaluator(index)(candidate)

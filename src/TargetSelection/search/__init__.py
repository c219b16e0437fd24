"""Search bounded context: fitness scoring and budgeted subset searches."""

from TargetSelection.search.fitness import FitnessEvaluator, score_candidate
from TargetSelection.search.genetic import GeneticSearch, crossover, mutate
from TargetSelection.search.random_search import RandomSearch
from TargetSelection.search.registry import StrategyRegistry, default_registry
from TargetSelection.search.strategy import (
    BestSoFar,
    SearchResult,
    SearchStrategy,
    random_candidate,
    score_population,
)

__all__ = [
    "BestSoFar",
    "FitnessEvaluator",
    "GeneticSearch",
    "RandomSearch",
    "SearchResult",
    "SearchStrategy",
    "StrategyRegistry",
    "crossover",
    "default_registry",
    "mutate",
    "random_candidate",
    "score_candidate",
    "score_population",
]

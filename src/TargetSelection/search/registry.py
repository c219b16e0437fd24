"""Strategy registry for subset search algorithms."""
from __future__ import annotations

from TargetSelection.search.genetic import GeneticSearch
from TargetSelection.search.random_search import RandomSearch
from TargetSelection.search.strategy import SearchStrategy


class StrategyRegistry:
    """Registry mapping strategy names to their implementation classes."""

    def __init__(self) -> None:
        self._strategies: dict[str, type] = {}

    def register(self, strategy_class: type) -> None:
        """Register a strategy class by its name attribute."""
        self._strategies[strategy_class.name] = strategy_class

    def get(self, name: str, **options: object) -> SearchStrategy:
        """Instantiate a strategy by name, passing options to its constructor."""
        if name not in self._strategies:
            available = ", ".join(sorted(self._strategies))
            msg = (
                f"Unknown strategy {name!r}. "
                f"Available: {available}"
            )
            raise KeyError(msg)
        return self._strategies[name](**options)

    def available(self) -> list[str]:
        """Return names of all registered strategies."""
        return sorted(self._strategies)

    def is_available(self, name: str) -> bool:
        """Check if a strategy is registered."""
        return name in self._strategies


def _build_default_registry() -> StrategyRegistry:
    registry = StrategyRegistry()
    registry.register(RandomSearch)
    registry.register(GeneticSearch)
    return registry


default_registry = _build_default_registry()

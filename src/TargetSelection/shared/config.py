from __future__ import annotations

from dataclasses import asdict, dataclass

from TargetSelection.pipeline.errors import ConfigurationError

STRATEGIES = ("random", "genetic")


@dataclass(frozen=True)
class SearchConfig:
    """Configuration for one selection run.

    ``strategy=None`` skips the search entirely; the run then yields the
    targets only.
    """

    strategy: str | None = None
    population_size: int = 100
    budget_seconds: float = 120
    retention_fraction: float = 0.1
    mutation_fraction: float = 0.15
    crossover_fraction: float = 0.15
    seed: int | None = 42
    workers: int = 1

    def validate(self) -> None:
        """Raise ConfigurationError if any option is out of range."""
        if self.strategy is not None and self.strategy not in STRATEGIES:
            msg = (
                f"Unknown strategy {self.strategy!r}. "
                f"Available: {', '.join(STRATEGIES)}"
            )
            raise ConfigurationError(msg)
        if self.population_size <= 0:
            raise ConfigurationError(
                f"population_size must be positive, got {self.population_size}"
            )
        if self.budget_seconds <= 0:
            raise ConfigurationError(
                f"budget_seconds must be positive, got {self.budget_seconds}"
            )
        for name in ("retention_fraction", "mutation_fraction", "crossover_fraction"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{name} must be in [0, 1], got {value}")
        if self.seed is not None and self.seed < 0:
            raise ConfigurationError(f"seed must be non-negative, got {self.seed}")
        if self.workers < 1:
            raise ConfigurationError(f"workers must be at least 1, got {self.workers}")

    def strategy_options(self) -> dict[str, object]:
        """Keyword arguments for constructing the configured strategy."""
        options: dict[str, object] = {
            "population_size": self.population_size,
            "budget_seconds": self.budget_seconds,
            "seed": self.seed,
            "workers": self.workers,
        }
        if self.strategy == "genetic":
            options.update(
                retention_fraction=self.retention_fraction,
                mutation_fraction=self.mutation_fraction,
                crossover_fraction=self.crossover_fraction,
            )
        return options

    def to_dict(self) -> dict[str, object]:
        return asdict(self)

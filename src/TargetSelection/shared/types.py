from __future__ import annotations

import math
from dataclasses import dataclass

ClassId = str
Candidate = frozenset

# A one-hop path (source, target) holds two classes.
MIN_PATH_LENGTH = 2.0


@dataclass(frozen=True)
class CouplingEdge:
    """Directed coupling from one project class to another.

    The weight counts the distinct coupling occurrences observed from
    source to sink.
    """

    source: ClassId
    sink: ClassId
    weight: int = 1


@dataclass(frozen=True)
class PathRecord:
    """Shortest path from a class to one target."""

    distance: float
    path: tuple[ClassId, ...] = ()

    @property
    def reachable(self) -> bool:
        return not math.isinf(self.distance)

    @classmethod
    def unreachable(cls) -> PathRecord:
        return cls(distance=math.inf, path=())


def qualified_to_simple(name: str) -> ClassId:
    """Strip package qualification: ``org.pkg.Foo`` becomes ``Foo``."""
    return name.rsplit(".", 1)[-1]

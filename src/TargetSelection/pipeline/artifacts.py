"""Selection result and the files it is persisted to."""
from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from TargetSelection.shared.types import ClassId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectionResult:
    """Aggregate root: the output of the selection stage.

    ``selected`` is the best candidate found (sorted), ``targets`` the
    requested target classes; ``classes`` is the final list handed to test
    generation.
    """

    strategy: str | None
    seed: int | None
    targets: tuple[ClassId, ...]
    selected: tuple[ClassId, ...]
    best_score: float | None
    generations: int
    evaluations: int
    eligible_classes: int
    total_classes: int
    warnings: tuple[str, ...] = ()

    @property
    def classes(self) -> tuple[ClassId, ...]:
        return self.selected + tuple(t for t in self.targets if t not in self.selected)

    def to_json(self, path: Path) -> None:
        data = {
            "strategy": self.strategy,
            "seed": self.seed,
            "targets": list(self.targets),
            "selected": list(self.selected),
            "classes": list(self.classes),
            "best_score": self.best_score,
            "generations": self.generations,
            "evaluations": self.evaluations,
            "eligible_classes": self.eligible_classes,
            "total_classes": self.total_classes,
            "warnings": list(self.warnings),
        }
        path.write_text(json.dumps(data, indent=2))

    @classmethod
    def from_json(cls, path: Path) -> SelectionResult:
        data = json.loads(path.read_text())
        return cls(
            strategy=data.get("strategy"),
            seed=data.get("seed"),
            targets=tuple(data["targets"]),
            selected=tuple(data.get("selected", [])),
            best_score=data.get("best_score"),
            generations=data.get("generations", 0),
            evaluations=data.get("evaluations", 0),
            eligible_classes=data.get("eligible_classes", 0),
            total_classes=data.get("total_classes", 0),
            warnings=tuple(data.get("warnings", [])),
        )


def source_name(
    name: ClassId,
    sources: Mapping[ClassId, str],
    source_root: str | None = None,
) -> str:
    """Translate a class identifier into the dotted name of its source file.

    ``src/org/pkg/Foo.java`` under root ``src`` becomes ``org.pkg.Foo``.
    Nested classes (``Foo$Bar``) resolve through their outer class. Classes
    without a known source are returned unchanged.
    """
    outer, sep, nested = name.partition("$")
    path = sources.get(name)
    suffix = ""
    if path is None and sep:
        path = sources.get(outer)
        suffix = sep + nested
    if path is None:
        return name

    pure = PurePosixPath(path.replace("\\", "/"))
    if source_root:
        root = PurePosixPath(source_root.replace("\\", "/"))
        if pure.is_relative_to(root):
            pure = pure.relative_to(root)
    parts = pure.with_suffix("").parts
    if pure.is_absolute():
        parts = parts[1:]
    return ".".join(parts) + suffix


def write_class_list(
    path: Path,
    classes: Sequence[ClassId],
    sources: Mapping[ClassId, str] | None = None,
    source_root: str | None = None,
) -> None:
    """Write one source-qualified class name per line."""
    sources = sources or {}
    lines = [source_name(c, sources, source_root) for c in classes]
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("".join(f"{line}\n" for line in lines))
    logger.info(
        "[TARGET-SELECT] stage=output event=written path=%s classes=%d",
        path,
        len(lines),
    )

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Sequence

from revo.creatures.creature import Creature
from revo.data.standardizer import Standardizer

__all__ = ["EvolvedModel"]


@dataclass
class EvolvedModel:
    """The refined creature plus the transform needed to predict in raw units."""

    creature: Creature
    standardizer: Standardizer
    target: str
    best_creatures: list[Creature] = field(default_factory=list)
    refinement_history: list[float] = field(default_factory=list)

    @property
    def error(self) -> float | None:
        """Training mean squared error of the refined creature, in standardized units."""
        return self.creature.cached_error_sum

    def predict(self, raw_point: Mapping[str, float]) -> float:
        point = {name: value for name, value in raw_point.items() if name != self.target}
        standardized = self.standardizer.standardize_point(point)
        return self.standardizer.destandardize(self.target, float(self.creature.evaluate(standardized)))

    predict_point = predict

    def predict_many(self, raw_points: Sequence[Mapping[str, float]]) -> list[float]:
        return [self.predict(point) for point in raw_points]

    def describe(self) -> str:
        return f"Target: {self.target}\nTraining error: {self.error}\n{self.creature}"

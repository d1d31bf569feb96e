from __future__ import annotations

from typing import Mapping, Sequence

from loguru import logger
import numpy as np
import pandas as pd
from pydantic import BaseModel, Field

from revo.exceptions import ConfigurationError, DataContractViolation

__all__ = ["ParameterStats", "Standardizer"]


class ParameterStats(BaseModel):
    """Fitted normalization statistics for one parameter."""

    mean: float = Field(description="Mean of the training values")
    std: float = Field(gt=0, description="Population standard deviation (1.0 for constant columns)")
    count: int = Field(default=0, ge=0, description="Number of training values seen")

    def standardize(self, value: float) -> float:
        return (value - self.mean) / self.std

    def destandardize(self, value: float) -> float:
        return value * self.std + self.mean


class Standardizer(BaseModel):
    """Per-parameter z-score transform fitted on training rows."""

    stats: dict[str, ParameterStats] = Field(default_factory=dict)

    @classmethod
    def fit(cls, rows: Sequence[Mapping[str, float]]) -> Standardizer:
        if not rows:
            raise ConfigurationError("Cannot fit a Standardizer without rows")

        values: dict[str, list[float]] = {}
        for row in rows:
            for name, value in row.items():
                values.setdefault(name, []).append(float(value))

        stats = {}
        for name, column in values.items():
            array = np.asarray(column, dtype=np.float64)
            std = float(np.std(array))
            if std == 0.0 or not np.isfinite(std):
                logger.warning("[Standardizer] Parameter '{}' has zero spread; using std=1.0", name)
                std = 1.0
            stats[name] = ParameterStats(mean=float(np.mean(array)), std=std, count=len(column))

        logger.debug("[Standardizer] Fitted {} parameter(s) on {} row(s)", len(stats), len(rows))
        return cls(stats=stats)

    def standardize_point(self, row: Mapping[str, float]) -> dict[str, float]:
        """Standardize one row; parameters without fitted statistics pass through."""
        return {
            name: self.stats[name].standardize(float(value)) if name in self.stats else float(value)
            for name, value in row.items()
        }

    def standardize_rows(self, rows: Sequence[Mapping[str, float]]) -> list[dict[str, float]]:
        return [self.standardize_point(row) for row in rows]

    def destandardize(self, parameter_name: str, value: float) -> float:
        if parameter_name not in self.stats:
            raise DataContractViolation(f"No fitted statistics for parameter '{parameter_name}'")
        return self.stats[parameter_name].destandardize(float(value))

    def describe(self) -> str:
        frame = pd.DataFrame.from_dict(
            {name: stat.model_dump() for name, stat in self.stats.items()},
            orient="index",
        )
        frame.index.name = "parameter"
        return frame.to_string(float_format=lambda v: f"{v:.6g}")

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Mapping, Sequence

import numpy as np

from revo.creatures.creature import Creature
from revo.exceptions import DataContractViolation

__all__ = ["RowBlock", "TrainingSet"]

Row = Mapping[str, float]


@dataclass(frozen=True, slots=True)
class RowBlock:
    """Rows sharing the same set of parameters, stored column-wise."""

    features: dict[str, np.ndarray]
    target: np.ndarray

    @property
    def num_rows(self) -> int:
        return len(self.target)


class TrainingSet:
    """Standardized training rows converted once into numpy columns.

    Rows are grouped by the parameters they carry so that a creature can be
    evaluated over whole columns while a parameter missing from a row still
    contributes nothing for that row.
    """

    def __init__(self, target: str, blocks: list[RowBlock], parameter_names: list[str]):
        self.target = target
        self.blocks = blocks
        self.parameter_names = parameter_names
        self.num_rows = sum(block.num_rows for block in blocks)

    @classmethod
    def from_rows(cls, rows: Sequence[Row], target: str) -> TrainingSet:
        if not rows:
            raise DataContractViolation("No training rows supplied")

        parameter_names: list[str] = []
        seen: set[str] = set()
        groups: dict[tuple[str, ...], list[Row]] = {}

        for index, row in enumerate(rows):
            if target not in row:
                raise DataContractViolation(f"Row {index} is missing target parameter '{target}'")
            keys = tuple(sorted(name for name in row if name != target))
            for name in row:
                if name != target and name not in seen:
                    seen.add(name)
                    parameter_names.append(name)
            groups.setdefault(keys, []).append(row)

        blocks = [
            RowBlock(
                features={
                    name: np.array([float(row[name]) for row in group], dtype=np.float64) for name in keys
                },
                target=np.array([float(row[target]) for row in group], dtype=np.float64),
            )
            for keys, group in groups.items()
        ]
        return cls(target=target, blocks=blocks, parameter_names=parameter_names)

    def mean_squared_error(self, creature: Creature) -> float:
        """``mean((creature(row) - row[target]) ** 2)`` over every row.

        Overflowing creatures score ``inf``; a NaN result is reported as ``inf``
        so that the error stays totally ordered.
        """
        squared = 0.0
        with np.errstate(all="ignore"):
            for block in self.blocks:
                residual = np.asarray(creature.evaluate(block.features)) - block.target
                squared += float(np.sum(np.square(residual)))

        error = squared / self.num_rows
        return math.inf if math.isnan(error) else error

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np

from revo.exceptions import ConfigurationError
from revo.utils.rng import ensure_rng

__all__ = ["Coefficients", "MutateSpeed", "TriangularRange"]


class MutateSpeed(Enum):
    """Standard deviation of the Gaussian noise added to each mutated field."""

    FINE = 0.005
    FAST = 0.05

    @property
    def sigma(self) -> float:
        return self.value


@dataclass(frozen=True, slots=True)
class TriangularRange:
    """Bounds of a triangular distribution: ``left <= mode <= right``, ``left < right``."""

    left: float
    mode: float
    right: float

    def __post_init__(self) -> None:
        if not (self.left <= self.mode <= self.right) or self.left >= self.right:
            raise ConfigurationError(
                f"Invalid triangular range: left={self.left}, mode={self.mode}, right={self.right}"
            )

    def sample(self, rng: np.random.Generator) -> float:
        return float(rng.triangular(self.left, self.mode, self.right))


SCALE_RANGE = TriangularRange(0.0, 1.0, 2.0)
OFFSET_RANGE = TriangularRange(-2.0, 0.0, 2.0)

# Cumulative thresholds for exponents 1 and 2; anything above picks 3.
EXPONENT_THRESHOLDS = ((0.4, 1), (0.75, 2))

EXPONENT_STEP_PROBABILITY = 0.2


@dataclass(frozen=True, slots=True)
class Coefficients:
    """A single power term ``c * (b * param + z) ^ x``."""

    c: float
    b: float
    z: float
    x: int

    def __post_init__(self) -> None:
        if self.x < 1:
            raise ConfigurationError(f"Exponent must be at least 1, got {self.x}")

    @classmethod
    def new(
        cls,
        rng: np.random.Generator | None = None,
        *,
        scale: TriangularRange = SCALE_RANGE,
        offset: TriangularRange = OFFSET_RANGE,
    ) -> Coefficients:
        """Sample a fresh term.

        ``c`` is 1.0 with probability 0.4, ``b`` is 1.0 with probability 0.3,
        otherwise both come from *scale*. ``z`` is 0.0 with probability 0.4,
        otherwise it comes from *offset*. ``c`` and ``b`` are then each negated
        with probability 0.5.
        """
        rng = ensure_rng(rng)

        c = 1.0 if rng.random() < 0.4 else scale.sample(rng)
        b = 1.0 if rng.random() < 0.3 else scale.sample(rng)
        z = 0.0 if rng.random() < 0.4 else offset.sample(rng)

        if rng.random() < 0.5:
            c = -c
        if rng.random() < 0.5:
            b = -b

        return cls(c=c, b=b, z=z, x=_sample_exponent(rng))

    def calculate(self, value):
        """Evaluate the term for a scalar or a numpy array of parameter values."""
        return self.c * np.power(self.b * value + self.z, self.x)

    def mutate(self, rng: np.random.Generator, sigma: float) -> Coefficients:
        c, b, z = rng.normal(0.0, sigma, size=3)

        x = self.x
        roll = rng.random()
        if roll < EXPONENT_STEP_PROBABILITY:
            x += 1
        elif roll < 2 * EXPONENT_STEP_PROBABILITY and x > 1:
            x -= 1

        return Coefficients(c=self.c + float(c), b=self.b + float(b), z=self.z + float(z), x=x)

    def __str__(self) -> str:
        return f"{self.c:.4f} * ({self.b:.4f} * param + {self.z:.4f}) ^ {self.x}"


def _sample_exponent(rng: np.random.Generator) -> int:
    roll = rng.random()
    for threshold, exponent in EXPONENT_THRESHOLDS:
        if roll <= threshold:
            return exponent
    return 3

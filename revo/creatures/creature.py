from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import TYPE_CHECKING, Mapping, Sequence

import numpy as np

from revo.creatures.coefficients import MutateSpeed
from revo.creatures.layer import LayerModifiers, Present
from revo.exceptions import ConfigurationError
from revo.utils.rng import ensure_rng

if TYPE_CHECKING:
    from revo.utils.worker_pool import WorkerPool

__all__ = ["Creature", "LAYER_CHOICES"]

# Drawn uniformly, so one layer is three times as likely as three layers.
LAYER_CHOICES = (1, 1, 1, 2, 2, 3)


def _sample_layer_count(rng: np.random.Generator, max_layers: int) -> int:
    return min(int(rng.choice(LAYER_CHOICES)), max_layers)


@dataclass(slots=True)
class Creature:
    """A randomly generated candidate function.

    The equation is a stack of :class:`LayerModifiers` evaluated like a small
    feed-forward network: each layer sums its parameter terms, a weighted copy
    of the previous layer's total and a bias.

    ``cached_error_sum`` is filled once by the fitness evaluator and travels
    with the value; construction and mutation always leave it unset.
    """

    equation: tuple[LayerModifiers, ...]
    cached_error_sum: float | None = None
    generation: int = 1

    @classmethod
    def create(
        cls,
        parameter_names: Sequence[str],
        max_layers: int,
        rng: np.random.Generator | None = None,
    ) -> Creature:
        if max_layers < 1:
            raise ConfigurationError(f"max_layers must be at least 1, got {max_layers}")
        rng = ensure_rng(rng)

        layers = _sample_layer_count(rng, max_layers)
        equation = tuple(LayerModifiers.new(index == 0, parameter_names, rng) for index in range(layers))
        return cls(equation=equation)

    new = create

    @classmethod
    def create_batch(
        cls,
        count: int,
        parameter_names: Sequence[str],
        max_layers: int,
        rng: np.random.Generator | None = None,
        *,
        parallel: bool = False,
        pool: WorkerPool | None = None,
    ) -> list[Creature]:
        """Build *count* independent creatures, optionally on the worker pool."""
        from revo.creatures.population import create_many, create_many_parallel

        if parallel:
            return create_many_parallel(count, parameter_names, max_layers, rng, pool=pool)
        return create_many(count, parameter_names, max_layers, rng)

    @property
    def num_layers(self) -> int:
        return len(self.equation)

    def referenced_parameters(self) -> set[str]:
        return {name for layer in self.equation for name in layer.modifiers}

    def evaluate(self, parameters: Mapping[str, object]):
        """Compute the creature's output for one row or for whole columns.

        Values may be floats or equally shaped numpy arrays. Parameters the
        equation does not reference are ignored; referenced parameters missing
        from *parameters* contribute nothing.
        """
        total = 0.0
        # Accumulates across layers; each layer's total feeds the next previous-layer term.
        inner_total = 0.0

        for layer in self.equation:
            for name, coefficients in layer.modifiers.items():
                value = parameters.get(name)
                if value is not None:
                    inner_total = inner_total + coefficients.calculate(value)

            if isinstance(layer.previous_layer, Present):
                inner_total = inner_total + layer.previous_layer.calculate(total)

            total = inner_total + layer.layer_bias

        return total

    calculate = evaluate

    def mutate(self, speed: MutateSpeed, rng: np.random.Generator | None = None) -> Creature:
        rng = ensure_rng(rng)
        equation = tuple(layer.mutate(rng, speed.sigma) for layer in self.equation)
        return Creature(equation=equation, cached_error_sum=None, generation=self.generation + 1)

    def clone(self) -> Creature:
        return copy.deepcopy(self)

    def __str__(self) -> str:
        lines = [" Creature"]
        for index, layer in enumerate(self.equation, start=1):
            lines.append(f"  Layer {index}")
            lines.append(str(layer))
        return "\n".join(lines)

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Sequence, Union

import numpy as np

from revo.creatures.coefficients import Coefficients
from revo.utils.rng import ensure_rng

__all__ = ["Absent", "LayerModifiers", "Present", "PreviousLayer"]

PARAMETER_USAGE = 2.5
ZERO_BIAS_PROBABILITY = 0.2
BIAS_SIGMA = 0.1
BIAS_MUTATION_PROBABILITY = 0.5


@dataclass(frozen=True, slots=True)
class Present:
    """Previous-layer term carried by every layer but the first."""

    coefficients: Coefficients

    def calculate(self, value):
        return self.coefficients.calculate(value)


@dataclass(frozen=True, slots=True)
class Absent:
    """Marker for the first layer, which has no predecessor output."""


PreviousLayer = Union[Present, Absent]


@dataclass(frozen=True, slots=True)
class LayerModifiers:
    """One additive layer of a creature.

    ``modifiers`` maps input parameter names to power terms, ``previous_layer``
    weights the prior layer's total and ``layer_bias`` is added last.
    """

    modifiers: Mapping[str, Coefficients] = field(default_factory=dict)
    previous_layer: PreviousLayer = field(default_factory=Absent)
    layer_bias: float = 0.0

    @classmethod
    def new(
        cls,
        is_first_layer: bool,
        parameter_names: Sequence[str],
        rng: np.random.Generator | None = None,
    ) -> LayerModifiers:
        rng = ensure_rng(rng)

        usage = PARAMETER_USAGE / (len(parameter_names) + 1)
        modifiers = {}
        for name in parameter_names:
            if rng.random() < usage:
                modifiers[name] = Coefficients.new(rng)

        previous_layer: PreviousLayer = Absent() if is_first_layer else Present(Coefficients.new(rng))

        layer_bias = 0.0 if rng.random() <= ZERO_BIAS_PROBABILITY else float(rng.normal(0.0, BIAS_SIGMA))
        return cls(modifiers=modifiers, previous_layer=previous_layer, layer_bias=layer_bias)

    @property
    def is_first_layer(self) -> bool:
        return isinstance(self.previous_layer, Absent)

    def mutate(self, rng: np.random.Generator, sigma: float) -> LayerModifiers:
        """Perturb numeric fields only; referenced names and the previous-layer variant are kept."""
        layer_bias = self.layer_bias
        if rng.random() < BIAS_MUTATION_PROBABILITY:
            layer_bias += float(rng.normal(0.0, sigma))

        previous_layer = self.previous_layer
        if isinstance(previous_layer, Present):
            previous_layer = Present(previous_layer.coefficients.mutate(rng, sigma))

        modifiers = {name: coefficients.mutate(rng, sigma) for name, coefficients in self.modifiers.items()}
        return LayerModifiers(modifiers=modifiers, previous_layer=previous_layer, layer_bias=layer_bias)

    def __str__(self) -> str:
        lines = [f"    Bias:  {self.layer_bias:.4f}"]
        if isinstance(self.previous_layer, Present):
            lines.append(f"    Previous Layer   ->   {self.previous_layer.coefficients}")
        for name, coefficients in self.modifiers.items():
            lines.append(f'    Param "{name}"   ->   {coefficients}')
        return "\n".join(lines)

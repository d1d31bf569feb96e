"""revo – symbolic regression by evolutionary search."""

from revo.creatures import Coefficients, Creature, LayerModifiers, MutateSpeed
from revo.data import Standardizer
from revo.evolution import Evolution, EvolutionConfig, EvolvedModel, RefinementConfig
from revo.exceptions import (
    ConfigurationError,
    DataContractViolation,
    InternalInvariantViolation,
    RevoError,
)

__all__ = [
    "Coefficients",
    "ConfigurationError",
    "Creature",
    "DataContractViolation",
    "Evolution",
    "EvolutionConfig",
    "EvolvedModel",
    "InternalInvariantViolation",
    "LayerModifiers",
    "MutateSpeed",
    "RefinementConfig",
    "RevoError",
    "Standardizer",
]

from revo.evolution.engine import (
    EngineMetrics,
    Evolution,
    EvolutionConfig,
    EvolutionState,
    RefinementConfig,
    RefinementResult,
    refine,
)
from revo.evolution.model import EvolvedModel

__all__ = [
    "EngineMetrics",
    "Evolution",
    "EvolutionConfig",
    "EvolutionState",
    "EvolvedModel",
    "RefinementConfig",
    "RefinementResult",
    "refine",
]

from __future__ import annotations

from revo.evolution.engine.config import EvolutionConfig, RefinementConfig, build_config
from revo.evolution.engine.core import Evolution, EvolutionState
from revo.evolution.engine.metrics import EngineMetrics
from revo.evolution.engine.refinement import RefinementResult, refine

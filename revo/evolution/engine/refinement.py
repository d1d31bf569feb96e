from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger
import numpy as np

from revo.creatures.coefficients import MutateSpeed
from revo.creatures.creature import Creature
from revo.creatures.population import mutate_many_parallel, score_population
from revo.data.dataset import TrainingSet
from revo.evolution.engine.config import RefinementConfig
from revo.evolution.engine.metrics import EngineMetrics
from revo.utils.rng import ensure_rng
from revo.utils.worker_pool import WorkerPool

__all__ = ["RefinementResult", "refine"]


@dataclass
class RefinementResult:
    creature: Creature
    history: list[float] = field(default_factory=list)
    switched_at: int | None = None
    speeds: list[MutateSpeed] = field(default_factory=list)

    @property
    def error(self) -> float:
        return self.creature.cached_error_sum


def _plateaued(history: list[float], config: RefinementConfig) -> bool:
    if len(history) < config.plateau_lookback:
        return False
    previous = history[-config.plateau_lookback]
    if previous == 0.0:
        return True
    return history[-1] / previous > config.plateau_ratio


def refine(
    start: Creature,
    data: TrainingSet,
    config: RefinementConfig | None = None,
    rng: np.random.Generator | None = None,
    *,
    pool: WorkerPool | None = None,
    metrics: EngineMetrics | None = None,
) -> RefinementResult:
    """Hill-climb around *start* with batches of mutants.

    Each round scores the current best together with ``mutants_per_round``
    mutants of it and adopts a mutant only when it is strictly better. Once
    the best error stalls (see ``RefinementConfig.plateau_ratio``) the
    mutation speed drops from FAST to FINE for the remaining rounds.
    """
    config = config or RefinementConfig()
    rng = ensure_rng(rng)

    best = start.clone()
    score_population([best], data, pool=pool)
    best_error = best.cached_error_sum

    speed = MutateSpeed.FAST
    result = RefinementResult(creature=best)
    logger.info("[Refinement] Start | error={:.6g}, rounds={}", best_error, config.iterations)

    for round_index in range(config.iterations):
        result.speeds.append(speed)
        mutants = mutate_many_parallel([best] * config.mutants_per_round, speed, rng, pool=pool)
        score_population([best, *mutants], data, pool=pool)

        challenger = min(mutants, key=lambda creature: creature.cached_error_sum)
        improved = challenger.cached_error_sum < best_error
        if improved:
            best, best_error = challenger, challenger.cached_error_sum

        result.history.append(best_error)
        if metrics is not None:
            metrics.record_refinement_round(improved)
        logger.debug(
            "[Refinement] Round {}/{} | error={:.6g}, improved={}, speed={}",
            round_index + 1,
            config.iterations,
            best_error,
            improved,
            speed.name,
        )

        if speed is MutateSpeed.FAST and round_index > config.switch_after_round and _plateaued(result.history, config):
            speed = MutateSpeed.FINE
            result.switched_at = round_index
            logger.info("[Refinement] Plateau at round {}; switching to FINE mutations", round_index + 1)

    result.creature = best
    logger.info("[Refinement] Done | error={:.6g}", best_error)
    return result

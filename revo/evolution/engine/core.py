from __future__ import annotations

from enum import Enum
from typing import Mapping, Sequence

from loguru import logger
import numpy as np

from revo.creatures.coefficients import MutateSpeed
from revo.creatures.creature import Creature
from revo.creatures.population import (
    create_many_parallel,
    mutate_many_parallel,
    score_population,
)
from revo.data.dataset import TrainingSet
from revo.data.standardizer import Standardizer
from revo.evolution.engine.config import EvolutionConfig, RefinementConfig, build_config
from revo.evolution.engine.metrics import EngineMetrics
from revo.evolution.engine.refinement import RefinementResult, refine
from revo.evolution.model import EvolvedModel
from revo.exceptions import InternalInvariantViolation
from revo.utils.rng import ensure_rng
from revo.utils.worker_pool import WorkerPool

__all__ = ["Evolution", "EvolutionState"]


class EvolutionState(Enum):
    INITIALIZING = "initializing"
    EVALUATING = "evaluating"
    SELECTING = "selecting"
    REPRODUCING = "reproducing"
    REFINING = "refining"
    DONE = "done"


class Evolution:
    """
    Population loop over standardized rows:
    - every cycle scores uncached creatures, records the champion, culls
      everything at or above the median error and breeds the best survivors;
    - the population is back to ``num_creatures`` at every cycle boundary;
    - after the last cycle the best champion is refined by local search.
    """

    def __init__(
        self,
        target: str,
        rows: Sequence[Mapping[str, float]],
        config: EvolutionConfig | None = None,
        *,
        rng: np.random.Generator | int | None = None,
        pool: WorkerPool | None = None,
    ):
        self.config = config or EvolutionConfig()
        self.target = target
        self.data = TrainingSet.from_rows(rows, target)
        self.rng = ensure_rng(rng)
        self._owns_pool = pool is None and self.config.workers is not None
        self.pool = pool or (WorkerPool(self.config.workers) if self.config.workers else WorkerPool.shared())

        self.state = EvolutionState.INITIALIZING
        self.population: list[Creature] = []
        self.best_creatures: list[Creature] = []
        self.cycle = 0
        self.metrics = EngineMetrics()
        self.refinement: RefinementResult | None = None

        logger.info(
            "[Evolution] Init | target={}, parameters={}, rows={}, creatures={}, cycles={}",
            self.target,
            self.data.parameter_names,
            self.data.num_rows,
            self.config.num_creatures,
            self.config.num_cycles,
        )

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    @classmethod
    def run(
        cls,
        target_name: str,
        standardized_rows: Sequence[Mapping[str, float]],
        population_size: int,
        cycle_count: int,
        max_layers: int,
        *,
        standardizer: Standardizer | None = None,
        refinement: RefinementConfig | None = None,
        rng: np.random.Generator | int | None = None,
        pool: WorkerPool | None = None,
    ) -> EvolvedModel:
        """Run the whole pipeline and return a model ready for prediction.

        When *standardizer* is omitted, one is fitted on *standardized_rows*
        and the rows are standardized with it first.
        """
        config = build_config(
            EvolutionConfig,
            num_creatures=population_size,
            num_cycles=cycle_count,
            max_layers=max_layers,
            refinement=refinement or RefinementConfig(),
        )
        if standardizer is None:
            standardizer = Standardizer.fit(standardized_rows)
            standardized_rows = standardizer.standardize_rows(standardized_rows)

        evolution = cls(target_name, standardized_rows, config, rng=rng, pool=pool)
        return evolution.fit(standardizer)

    def fit(self, standardizer: Standardizer) -> EvolvedModel:
        try:
            self.evolve()
            result = self.refine()
        finally:
            if self._owns_pool:
                self.pool.shutdown()

        self.state = EvolutionState.DONE
        logger.info("[Evolution] Done | {}", self._format_metrics())
        return EvolvedModel(
            creature=result.creature,
            standardizer=standardizer,
            target=self.target,
            best_creatures=list(self.best_creatures),
            refinement_history=list(result.history),
        )

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def initialize(self) -> None:
        self.state = EvolutionState.INITIALIZING
        self.population = self._create(self.config.num_creatures)
        self.metrics.creatures_created += len(self.population)
        logger.debug("[Evolution] Initial population: {}", len(self.population))

    def evolve(self) -> list[Creature]:
        """Run every cycle and return the per-cycle champions."""
        if not self.population:
            self.initialize()
        for _ in range(self.config.num_cycles):
            self.run_cycle()
        return self.best_creatures

    def run_cycle(self) -> Creature:
        self.evaluate()
        champion, min_error, median_error = self.select()
        self.reproduce(min_error, median_error)

        self.cycle += 1
        self.metrics.cycles_completed += 1
        logger.info(
            "[Evolution] Cycle {}/{} | min={:.6g}, median={:.6g}, best_ever={:.6g}, champion_generation={}",
            self.cycle,
            self.config.num_cycles,
            min_error,
            median_error,
            self.best_ever_errors()[-1],
            champion.generation,
        )
        return champion

    def evaluate(self) -> int:
        self.state = EvolutionState.EVALUATING
        scored = score_population(self.population, self.data, pool=self.pool)
        self.metrics.record_evaluation(scored, len(self.population))
        return scored

    def select(self) -> tuple[Creature, float, float]:
        """Locate min and median error and record a copy of the champion.

        The median is the upper median (``errors[len // 2]``). Among creatures
        tied at the minimum, the lowest generation wins, then population order.
        """
        self.state = EvolutionState.SELECTING
        if not self.population:
            raise InternalInvariantViolation("Cannot select from an empty population")

        errors = sorted(self._error(creature) for creature in self.population)
        min_error = errors[0]
        median_error = errors[len(errors) // 2]

        tied = [
            (creature.generation, index, creature)
            for index, creature in enumerate(self.population)
            if creature.cached_error_sum == min_error
        ]
        if not tied:
            raise InternalInvariantViolation(f"No creature matches the minimum error {min_error!r}")
        champion = min(tied, key=lambda entry: entry[:2])[2]

        self.best_creatures.append(champion.clone())
        self.metrics.record_champion(min_error)
        return champion, min_error, median_error

    def reproduce(self, min_error: float, median_error: float) -> None:
        self.state = EvolutionState.REPRODUCING
        target_size = self.config.num_creatures

        survivors = [creature for creature in self.population if creature.cached_error_sum < median_error]
        threshold = (min_error + median_error) / 2
        parents = [creature for creature in survivors if creature.cached_error_sum < threshold]
        mutants = mutate_many_parallel(parents, MutateSpeed.FAST, self.rng, pool=self.pool)

        next_population = survivors + mutants
        refills = 0
        if len(next_population) > target_size:
            next_population = next_population[:target_size]
        elif len(next_population) < target_size:
            refills = target_size - len(next_population)
            next_population.extend(self._create(refills))

        self.metrics.record_reproduction(
            culled=len(self.population) - len(survivors),
            mutants=len(mutants),
            refills=refills,
        )
        logger.debug(
            "[Evolution] Reproduce | survivors={}, mutants={}, refills={}",
            len(survivors),
            len(mutants),
            refills,
        )
        self.population = next_population

    def refine(self) -> RefinementResult:
        self.state = EvolutionState.REFINING
        if not self.best_creatures:
            raise InternalInvariantViolation("Refinement requires at least one recorded champion")

        start = min(self.best_creatures, key=self._error)
        self.refinement = refine(
            start,
            self.data,
            self.config.refinement,
            self.rng,
            pool=self.pool,
            metrics=self.metrics,
        )
        return self.refinement

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def best_ever_errors(self) -> list[float]:
        """Running minimum of the champion errors, one entry per cycle."""
        running: list[float] = []
        for creature in self.best_creatures:
            error = self._error(creature)
            running.append(error if not running else min(running[-1], error))
        return running

    def _create(self, count: int) -> list[Creature]:
        return create_many_parallel(
            count,
            self.data.parameter_names,
            self.config.max_layers,
            self.rng,
            pool=self.pool,
        )

    @staticmethod
    def _error(creature: Creature) -> float:
        if creature.cached_error_sum is None:
            raise InternalInvariantViolation("Creature reached selection without a cached error")
        return creature.cached_error_sum

    def _format_metrics(self) -> str:
        m = self.metrics.to_dict()
        return " | ".join(f"{k}={v:.2f}" if isinstance(v, float) else f"{k}={v}" for k, v in m.items())

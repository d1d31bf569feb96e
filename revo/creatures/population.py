"""Batch construction, mutation and scoring of creatures.

The ``*_parallel`` helpers fan work out over a :class:`WorkerPool`. Each chunk
draws from its own child generator, so results are statistically equivalent to
running the sequential form.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

import numpy as np

from revo.creatures.coefficients import MutateSpeed
from revo.creatures.creature import Creature
from revo.utils.rng import ensure_rng
from revo.utils.worker_pool import WorkerPool

if TYPE_CHECKING:
    from revo.data.dataset import TrainingSet

__all__ = [
    "create_many",
    "create_many_parallel",
    "mutate_many",
    "mutate_many_parallel",
    "score_population",
]


def create_many(
    count: int,
    parameter_names: Sequence[str],
    max_layers: int,
    rng: np.random.Generator | None = None,
) -> list[Creature]:
    rng = ensure_rng(rng)
    return [Creature.create(parameter_names, max_layers, rng) for _ in range(count)]


def create_many_parallel(
    count: int,
    parameter_names: Sequence[str],
    max_layers: int,
    rng: np.random.Generator | None = None,
    *,
    pool: WorkerPool | None = None,
) -> list[Creature]:
    pool = pool or WorkerPool.shared()
    names = list(parameter_names)

    def build(chunk: Sequence[int], stream: np.random.Generator | None) -> list[Creature]:
        return create_many(len(chunk), names, max_layers, stream)

    return pool.map_chunks(build, range(count), ensure_rng(rng))


def mutate_many(
    creatures: Sequence[Creature],
    speed: MutateSpeed,
    rng: np.random.Generator | None = None,
) -> list[Creature]:
    rng = ensure_rng(rng)
    return [creature.mutate(speed, rng) for creature in creatures]


def mutate_many_parallel(
    creatures: Sequence[Creature],
    speed: MutateSpeed,
    rng: np.random.Generator | None = None,
    *,
    pool: WorkerPool | None = None,
) -> list[Creature]:
    """One mutant per parent, in parent order."""
    pool = pool or WorkerPool.shared()

    def mutate(chunk: Sequence[Creature], stream: np.random.Generator | None) -> list[Creature]:
        return mutate_many(chunk, speed, stream)

    return pool.map_chunks(mutate, list(creatures), ensure_rng(rng))


def score_population(
    creatures: Sequence[Creature],
    data: TrainingSet,
    *,
    pool: WorkerPool | None = None,
) -> int:
    """Fill ``cached_error_sum`` for every creature that has no cached error.

    Creatures already carrying a cached error are never recomputed.
    Returns the number of creatures scored.
    """
    pending = [creature for creature in creatures if creature.cached_error_sum is None]
    if not pending:
        return 0

    pool = pool or WorkerPool.shared()

    def score(chunk: Sequence[Creature], _stream: np.random.Generator | None) -> list[float]:
        return [data.mean_squared_error(creature) for creature in chunk]

    errors = pool.map_chunks(score, pending)
    for creature, error in zip(pending, errors):
        creature.cached_error_sum = error
    return len(pending)

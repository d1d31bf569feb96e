"""Explicit random-source handling.

Every constructor and mutation takes a ``numpy.random.Generator``. Parallel
fan-out never shares one generator between threads: each task receives an
independent child stream spawned from the caller's generator.
"""

from __future__ import annotations

import numpy as np

__all__ = ["ensure_rng", "spawn_streams"]


def ensure_rng(rng: np.random.Generator | int | None = None) -> np.random.Generator:
    """Return *rng* unchanged, or a fresh generator (seeded when an int is given)."""
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


def spawn_streams(rng: np.random.Generator | None, count: int) -> list[np.random.Generator]:
    """Spawn *count* statistically independent child generators."""
    if count <= 0:
        return []
    return ensure_rng(rng).spawn(count)

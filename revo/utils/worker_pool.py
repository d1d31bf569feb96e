from __future__ import annotations

"""Shared thread pool for data-parallel work over a population.

`WorkerPool.map_chunks` splits a sequence into contiguous chunks, runs a
synchronous function on each chunk inside the pool and returns the flattened
results in input order. Each chunk gets its own random stream.
"""

from concurrent.futures import ThreadPoolExecutor
import math
import os
from typing import Callable, Sequence, TypeVar

from loguru import logger
import numpy as np

from revo.utils.rng import spawn_streams

__all__ = ["WorkerPool"]

T = TypeVar("T")
R = TypeVar("R")

ChunkFn = Callable[[Sequence[T], "np.random.Generator | None"], list[R]]


class WorkerPool:
    """Fixed-size pool performing map-style work over chunks of a population."""

    _shared: WorkerPool | None = None

    def __init__(self, max_workers: int | None = None, chunks_per_worker: int = 4):
        if max_workers is not None and max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self.max_workers = max_workers or max(4, os.cpu_count() or 4)
        self.chunks_per_worker = chunks_per_worker
        self._executor = ThreadPoolExecutor(
            max_workers=self.max_workers,
            thread_name_prefix="revo-worker",
        )
        logger.debug("[WorkerPool] Created ThreadPoolExecutor with {} workers", self.max_workers)

    # ------------------------------------------------------------------
    # Shared instance
    # ------------------------------------------------------------------

    @classmethod
    def shared(cls) -> WorkerPool:
        if cls._shared is None:
            cls._shared = cls()
        return cls._shared

    # ------------------------------------------------------------------
    # Work distribution
    # ------------------------------------------------------------------

    def num_chunks(self, total: int) -> int:
        return max(1, min(total, self.max_workers * self.chunks_per_worker))

    def map_chunks(
        self,
        fn: ChunkFn,
        items: Sequence[T],
        rng: np.random.Generator | None = None,
    ) -> list[R]:
        """Run ``fn(chunk, stream)`` on every chunk of *items* in parallel.

        Results are concatenated in chunk order. When *rng* is given, every
        chunk receives an independent child stream of it; otherwise ``None``.
        """
        total = len(items)
        if total == 0:
            return []

        size = math.ceil(total / self.num_chunks(total))
        chunks = [items[start : start + size] for start in range(0, total, size)]
        streams = spawn_streams(rng, len(chunks)) if rng is not None else [None] * len(chunks)

        futures = [self._executor.submit(fn, chunk, stream) for chunk, stream in zip(chunks, streams)]

        results: list[R] = []
        for future in futures:
            results.extend(future.result())
        return results

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)
        if WorkerPool._shared is self:
            WorkerPool._shared = None

    def __enter__(self) -> WorkerPool:
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()

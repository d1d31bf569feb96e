from revo.utils.logger_setup import setup_logger
from revo.utils.rng import ensure_rng, spawn_streams
from revo.utils.worker_pool import WorkerPool

__all__ = ["WorkerPool", "ensure_rng", "setup_logger", "spawn_streams"]

import numpy as np
import pytest

from revo.utils.worker_pool import WorkerPool

PARAMETERS = ["width", "height", "weight"]


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def parameters():
    return list(PARAMETERS)


@pytest.fixture
def pool():
    with WorkerPool(max_workers=2) as worker_pool:
        yield worker_pool

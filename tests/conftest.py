from concurrent.futures import ThreadPoolExecutor

import pytest

from scim_reconciler.reconciler import Reconciler
from scim_reconciler.support import Logger, Pools

from .fakes import FakeDirectory


@pytest.fixture
def logger(tmp_path):
    return Logger(prefix='test', log_dir=str(tmp_path / 'logs'))


@pytest.fixture
def pools():
    pools = Pools(directory_pool=ThreadPoolExecutor(max_workers=4))
    yield pools
    pools.shutdown()


@pytest.fixture
def directory():
    return FakeDirectory(users=['u1', 'u2', 'u3', 'u5', 'u6'])


@pytest.fixture
def reconciler(directory, logger, pools):
    return Reconciler(directory, logger, pools)

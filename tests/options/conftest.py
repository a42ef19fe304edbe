"""Shared fixtures for tests/options/.

Provides a small registry, a temp-file OptionStore and an initialized
SystemOptionManager. Tests that need the full catalog or boot config
build their own managers.
"""

import pytest
import pytest_asyncio

from nodeopts.options.registry import OptionRegistry
from nodeopts.options.store import OptionStore
from nodeopts.options.system import SystemOptionManager
from nodeopts.options.validators import (
    BooleanValidator,
    FloatValidator,
    PositiveIntegerValidator,
    RangeIntegerValidator,
    StringValidator,
)

SLICE_TARGET = PositiveIntegerValidator("planner.slice_target", 100000)
AFFINITY_FACTOR = FloatValidator("planner.affinity_factor", 1.2)
ENABLE_HASHAGG = BooleanValidator("planner.enable_hashagg", True)
QUEUE_LARGE = RangeIntegerValidator("exec.queue.large", 10, min_value=1, max_value=1000)
MOCK_PROP = StringValidator("mock.prop", "b", internal=True)


@pytest.fixture
def registry():
    return OptionRegistry.build([SLICE_TARGET, AFFINITY_FACTOR, ENABLE_HASHAGG, QUEUE_LARGE, MOCK_PROP])


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "options.db")


@pytest_asyncio.fixture
async def store(db_path):
    """Create and initialize an OptionStore with a temp DB."""
    s = OptionStore(db_path)
    await s.initialize()
    yield s
    await s.close()


@pytest_asyncio.fixture
async def manager(db_path, registry):
    """Create and initialize a SystemOptionManager with a temp DB."""
    m = SystemOptionManager(OptionStore(db_path), registry)
    await m.init()
    yield m
    await m.close()

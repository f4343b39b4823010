"""Pytest configuration and fixtures."""

import pytest

from stablepool.pool.state import PoolState
from stablepool.service import PairService
from tests.helpers import ALICE, BLUNA, UUSD, FakeClock, make_service, make_state


@pytest.fixture
def clock() -> FakeClock:
    """A clock starting at the pair creation time."""
    return FakeClock()


@pytest.fixture
def state() -> PoolState:
    """Fresh UUSD / BLUNA pair state at amp 100."""
    return make_state()


@pytest.fixture
def service(clock: FakeClock) -> PairService:
    """In-memory pair service with ALICE holding 10,000 units of each asset."""
    svc = make_service(clock)
    svc.fund(ALICE, UUSD, 10_000_000_000)
    svc.fund(ALICE, BLUNA, 10_000_000_000)
    return svc

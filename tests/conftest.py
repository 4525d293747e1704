"""Pytest configuration and fixtures."""

from collections.abc import Callable

import pytest

from cpamm.clock import ManualClock
from cpamm.events import ListEventSink
from cpamm.pool import Pool
from cpamm.tokens import MockToken
from tests.helpers import ALICE, BOB, fund, make_pool, seeded_pool


@pytest.fixture
def pool_parts() -> tuple[Pool, ListEventSink, ManualClock]:
    """Empty pool with its sink and clock (30 bps fee, 600 s TWAP interval)."""
    return make_pool()


@pytest.fixture
def pool(pool_parts) -> Pool:
    """Empty pool; ALICE and BOB are funded and have approved it."""
    p = pool_parts[0]
    fund(p, ALICE)
    fund(p, BOB)
    return p


@pytest.fixture
def sink(pool_parts) -> ListEventSink:
    return pool_parts[1]


@pytest.fixture
def clock(pool_parts) -> ManualClock:
    return pool_parts[2]


@pytest.fixture
def token_x(pool) -> MockToken:
    return pool.token_x


@pytest.fixture
def token_y(pool) -> MockToken:
    return pool.token_y


@pytest.fixture
def seeded() -> tuple[Pool, ListEventSink, ManualClock]:
    """Pool holding (1000, 1000) from ALICE, with BOB funded for trading."""
    p, s, c = seeded_pool(1_000, 1_000)
    fund(p, BOB)
    return p, s, c


@pytest.fixture
def share_sum() -> Callable[[Pool], int]:
    """Sum of all per-holder share balances."""

    def _sum(p: Pool) -> int:
        return sum(p.share_holders().values())

    return _sum

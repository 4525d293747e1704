"""Tests for TWAP sampling."""

from fractions import Fraction

import pytest

from cpamm.models.events import TwapSampled
from cpamm.oracle import TwapOracle, TwapSample
from cpamm.params import PoolParameters
from tests.helpers import ALICE, BOB, START_TIME, TWAP_INTERVAL


class TestTwapSample:
    def test_default_is_empty(self):
        sample = TwapSample()
        assert sample.is_empty
        assert (sample.price_x, sample.price_y, sample.timestamp) == (0, 0, 0)
        assert sample.price_of_x() is None
        assert sample.price_of_y() is None

    def test_prices_are_exact_ratios(self):
        sample = TwapSample(price_x=1_100, price_y=910, timestamp=5)
        assert sample.price_of_x() == Fraction(910, 1_100)
        assert sample.price_of_y() == Fraction(1_100, 910)


class TestTwapOracle:
    """Tests for the oracle in isolation."""

    @pytest.fixture
    def params(self) -> PoolParameters:
        return PoolParameters(fee_bps=30, twap_interval_seconds=100)

    @pytest.fixture
    def emitted(self) -> list:
        return []

    @pytest.fixture
    def oracle(self, params, emitted) -> TwapOracle:
        return TwapOracle(params, emitted.append)

    def test_first_sample_after_interval_from_zero(self, oracle, emitted):
        assert not oracle.maybe_sample(99, (10, 20))
        assert oracle.maybe_sample(100, (10, 20))
        assert oracle.sample == TwapSample(10, 20, 100)
        assert isinstance(emitted[-1], TwapSampled)

    def test_spacing_enforced(self, oracle):
        oracle.maybe_sample(1_000, (10, 20))
        assert not oracle.maybe_sample(1_099, (11, 19))
        assert oracle.sample.timestamp == 1_000
        assert oracle.maybe_sample(1_100, (11, 19))
        assert oracle.sample.price_x == 11

    def test_next_sample_at_and_age(self, oracle):
        oracle.maybe_sample(1_000, (10, 20))
        assert oracle.next_sample_at() == 1_100
        assert oracle.age(1_042) == 42
        assert not oracle.is_due(1_099)
        assert oracle.is_due(1_100)

    def test_interval_change_applies_immediately(self, oracle, params):
        oracle.maybe_sample(1_000, (10, 20))
        params.twap_interval_seconds = 10
        assert oracle.maybe_sample(1_010, (12, 18))

    def test_zero_interval_samples_every_call(self, oracle, params):
        params.twap_interval_seconds = 0
        assert oracle.maybe_sample(5, (1, 1))
        assert oracle.maybe_sample(5, (2, 2))
        assert oracle.sample.price_x == 2

    def test_restore(self, oracle):
        state = oracle.snapshot()
        oracle.maybe_sample(1_000, (10, 20))
        oracle.restore(state)
        assert oracle.sample.is_empty


class TestTwapThroughPool:
    """Sampling as driven by pool swaps."""

    def test_no_sample_before_first_swap(self, seeded):
        pool, sink, _ = seeded
        assert pool.get_twap() == TwapSample()
        assert sink.of_type(TwapSampled) == []

    def test_first_swap_records_post_swap_reserves(self, seeded):
        pool, _, _ = seeded
        pool.swap_x_for_y(BOB, 100)
        assert pool.get_twap() == TwapSample(1_100, 910, START_TIME)

    def test_at_most_one_sample_per_interval(self, seeded):
        pool, sink, clock = seeded
        pool.swap_x_for_y(BOB, 100)
        pool.swap_y_for_x(BOB, 50)
        clock.advance(TWAP_INTERVAL - 1)
        pool.swap_x_for_y(BOB, 10)
        assert len(sink.of_type(TwapSampled)) == 1
        assert pool.get_twap().timestamp == START_TIME

        clock.advance(1)
        pool.swap_x_for_y(BOB, 10)
        assert len(sink.of_type(TwapSampled)) == 2
        assert pool.get_twap().timestamp == START_TIME + TWAP_INTERVAL
        assert pool.get_twap().price_x == pool.get_reserves()[0]

    def test_liquidity_changes_do_not_sample(self, seeded):
        pool, sink, clock = seeded
        clock.advance(10 * TWAP_INTERVAL)
        pool.add_liquidity(ALICE, 500, 500)
        pool.remove_liquidity(ALICE, 200)
        assert pool.get_twap().is_empty
        assert sink.of_type(TwapSampled) == []

    def test_next_sample_at_follows_interval(self, seeded):
        pool, _, _ = seeded
        pool.swap_x_for_y(BOB, 100)
        assert pool.twap_next_sample_at() == START_TIME + TWAP_INTERVAL

    def test_sample_event_precedes_swap_event(self, seeded):
        pool, sink, _ = seeded
        pool.swap_x_for_y(BOB, 100)
        kinds = [e.kind for e in sink.events[-2:]]
        assert kinds == ["twap_sampled", "swapped"]

    def test_execute_swap_reports_refresh(self, seeded):
        pool, _, clock = seeded
        first = pool.execute_swap(BOB, 100, 0, "x_to_y")
        assert first.amount_out == 90
        assert first.twap_sampled
        clock.advance(TWAP_INTERVAL - 1)
        assert not pool.execute_swap(BOB, 10, 0, "y_to_x").twap_sampled

    def test_twap_age_uses_pool_clock(self, seeded):
        pool, _, clock = seeded
        pool.swap_x_for_y(BOB, 100)
        assert pool.twap_age() == 0
        clock.advance(42)
        assert pool.twap_age() == 42

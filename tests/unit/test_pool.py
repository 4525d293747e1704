"""Tests for the pool's call guard and all-or-nothing semantics."""

import pytest

from cpamm import ListEventSink, ManualClock, Pool, SystemClock
from cpamm.errors import NotGovernor, ReentrantCall
from cpamm.models.events import LiquidityAdded, Swapped
from cpamm.tokens import MockToken
from tests.helpers import ALICE, BOB, GOVERNOR, POOL, START_TIME, fund


class TestConstruction:
    def test_defaults(self):
        pool = Pool(MockToken("X", POOL), MockToken("Y", POOL), GOVERNOR)
        assert isinstance(pool.clock, SystemClock)
        assert isinstance(pool.sink, ListEventSink)
        assert pool.fee_bps == 30
        assert pool.twap_interval_seconds == 3_600
        assert pool.governors() == [GOVERNOR]
        assert pool.get_reserves() == (0, 0)
        assert not pool.in_call

    def test_caller_is_normalized(self, pool):
        mixed = "0x" + "aB" * 20
        fund(pool, mixed)
        pool.add_liquidity(mixed, 100, 100)
        assert pool.share_balance(mixed.lower()) == 100
        assert pool.share_holders() == {mixed.lower(): 100}
        assert pool.is_governor(GOVERNOR.upper().replace("0X", "0x"))


class TestReentrancy:
    """A token hook that calls back into the pool during a payout."""

    def test_nested_call_is_rejected(self, seeded):
        pool, _, _ = seeded
        seen = []

        def hook(token, sender, recipient, amount):
            assert pool.in_call
            with pytest.raises(ReentrantCall):
                pool.swap_x_for_y(BOB, 1)
            seen.append(amount)

        pool.token_y.on_receive(BOB, hook)
        out = pool.swap_x_for_y(BOB, 100)

        assert seen == [out]
        assert pool.get_reserves() == (1_100, 910)
        assert not pool.in_call

    def test_nested_call_rejected_during_withdrawal(self, seeded):
        pool, _, _ = seeded
        attempts = []

        def hook(token, sender, recipient, amount):
            try:
                pool.add_liquidity(ALICE, 10, 10)
            except ReentrantCall as err:
                attempts.append(err.code)

        pool.token_x.on_receive(ALICE, hook)
        pool.remove_liquidity(ALICE, 100)
        assert attempts == [ReentrantCall.code]
        assert pool.total_shares == 900

    def test_propagated_rejection_rolls_back_outer_call(self, seeded):
        pool, sink, _ = seeded
        events_before = sink.events
        bob_x = pool.token_x.balance_of(BOB)
        bob_y = pool.token_y.balance_of(BOB)

        def hook(token, sender, recipient, amount):
            pool.swap_y_for_x(BOB, 1)

        pool.token_y.on_receive(BOB, hook)
        with pytest.raises(ReentrantCall):
            pool.swap_x_for_y(BOB, 100)

        assert pool.get_reserves() == (1_000, 1_000)
        assert pool.get_twap().is_empty
        assert pool.token_x.balance_of(BOB) == bob_x
        assert pool.token_y.balance_of(BOB) == bob_y
        assert pool.token_x.balance_of(POOL) == 1_000
        assert sink.events == events_before
        assert not pool.in_call

    def test_pool_usable_after_rejection(self, seeded):
        pool, _, _ = seeded

        def hook(token, sender, recipient, amount):
            pool.set_fee(GOVERNOR, 0)

        pool.token_y.on_receive(BOB, hook)
        with pytest.raises(ReentrantCall):
            pool.swap_x_for_y(BOB, 100)

        pool.token_y.on_receive(BOB, None)
        assert pool.swap_x_for_y(BOB, 100) == 90


class TestAtomicity:
    """Any failure leaves no trace."""

    def test_foreign_exception_rolls_back(self, seeded):
        pool, sink, _ = seeded
        count = len(sink)

        def hook(token, sender, recipient, amount):
            raise RuntimeError("receiver refused")

        pool.token_y.on_receive(BOB, hook)
        with pytest.raises(RuntimeError):
            pool.swap_x_for_y(BOB, 100)

        assert pool.get_reserves() == (1_000, 1_000)
        assert pool.token_y.balance_of(POOL) == 1_000
        assert len(sink) == count

    def test_failed_withdrawal_keeps_shares(self, seeded):
        pool, _, _ = seeded

        def hook(token, sender, recipient, amount):
            raise RuntimeError("receiver refused")

        pool.token_y.on_receive(ALICE, hook)
        with pytest.raises(RuntimeError):
            pool.remove_liquidity(ALICE, 500)

        assert pool.share_balance(ALICE) == 1_000
        assert pool.total_shares == 1_000
        assert pool.token_x.balance_of(POOL) == 1_000

    def test_rejected_governance_emits_nothing(self, pool, sink):
        with pytest.raises(NotGovernor):
            pool.add_governor(ALICE, BOB)
        assert len(sink) == 0

    def test_failing_sink_rolls_back_the_call(self):
        """A sink that raises while publishing undoes the whole swap, log included."""

        class RejectingSink(ListEventSink):
            def emit(self, event):
                if isinstance(event, Swapped):
                    raise RuntimeError("audit log unavailable")
                super().emit(event)

        sink = RejectingSink()
        pool = Pool(
            MockToken("X", POOL),
            MockToken("Y", POOL),
            GOVERNOR,
            clock=ManualClock(START_TIME),
            sink=sink,
        )
        fund(pool, ALICE)
        fund(pool, BOB)
        pool.add_liquidity(ALICE, 1_000, 1_000)
        bob_y = pool.token_y.balance_of(BOB)

        with pytest.raises(RuntimeError):
            pool.swap_x_for_y(BOB, 100)

        assert pool.get_reserves() == (1_000, 1_000)
        assert pool.token_y.balance_of(BOB) == bob_y
        assert pool.token_x.balance_of(POOL) == 1_000
        assert pool.get_twap().is_empty
        assert [e.kind for e in sink.events] == ["liquidity_added"]
        assert not pool.in_call

    def test_events_only_published_on_success(self, pool, sink):
        pool.add_liquidity(ALICE, 1_000, 1_000)
        pool.swap_x_for_y(BOB, 10)
        kinds = [type(e) for e in sink.events]
        assert kinds[0] is LiquidityAdded
        assert kinds[-1] is Swapped


class TestLogging:
    def test_rejection_is_logged_with_code(self, pool, capsys):
        with pytest.raises(NotGovernor):
            pool.set_fee(BOB, 1)

        # structlog writes to stdout
        captured = capsys.readouterr()
        assert "operation_rejected" in captured.out
        assert "not_governor" in captured.out

    def test_reentrant_attempt_is_logged(self, seeded, capsys):
        pool, _, _ = seeded

        def hook(token, sender, recipient, amount):
            with pytest.raises(ReentrantCall):
                pool.swap_y_for_x(BOB, 1)

        pool.token_y.on_receive(BOB, hook)
        pool.swap_x_for_y(BOB, 100)
        assert "reentrant_call_rejected" in capsys.readouterr().out


class TestListEventSink:
    def test_restore_drops_later_events(self, seeded):
        pool, sink, _ = seeded
        mark = sink.snapshot()
        pool.swap_x_for_y(BOB, 100)
        assert len(sink) > mark
        sink.restore(mark)
        assert [e.kind for e in sink.events] == ["liquidity_added"]

"""Pool aggregate: the public entry points of a two-asset constant-product pool.

Every mutating entry point takes the acting account as its first argument
and runs inside ``_entry``, which provides two guarantees:

- Reentrancy exclusion: a second mutating call while one is in flight (for
  example from a token receive hook) fails with ReentrantCall.
- All-or-nothing: the reserve ledger, parameters, governor set, oracle
  sample, both token ledgers and the event sink are snapshotted on entry and
  restored if anything raises. Events are buffered and published as the last
  step of the call, so a sink that fails part way also rolls the call back.

The host is expected to serialize calls; the pool does no locking.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Any

import structlog

from cpamm.clock import SystemClock
from cpamm.config import DEFAULT_POOL_CONFIG, PoolConfig
from cpamm.errors import PoolError, ReentrantCall
from cpamm.events import ListEventSink
from cpamm.governance import GovernorRegistry, GovernorState
from cpamm.interfaces import Clock, EventSink, TokenLedger
from cpamm.ledger import LedgerState, ReserveLedger
from cpamm.liquidity import LiquidityManager
from cpamm.models.events import EventRecord
from cpamm.models.types import SwapDirection, normalize_address
from cpamm.oracle import TwapOracle, TwapSample
from cpamm.params import PoolParameters
from cpamm.swap import SwapExecutor, SwapResult

logger = structlog.get_logger()


@dataclass(frozen=True)
class _PoolSnapshot:
    ledger: LedgerState
    params: PoolParameters
    governors: GovernorState
    twap: TwapSample
    token_x: Any
    token_y: Any
    sink: Any


class Pool:
    """Two-asset constant-product pool.

    Usage:
        pool = Pool(token_x, token_y, deployer=GOV, clock=ManualClock(1_000))
        shares = pool.add_liquidity(ALICE, 1_000, 1_000)
        out = pool.swap_x_for_y(BOB, 100, min_amount_out=900)
    """

    def __init__(
        self,
        token_x: TokenLedger,
        token_y: TokenLedger,
        deployer: str,
        *,
        clock: Clock | None = None,
        sink: EventSink | None = None,
        config: PoolConfig = DEFAULT_POOL_CONFIG,
    ) -> None:
        self.token_x = token_x
        self.token_y = token_y
        self.clock: Clock = clock if clock is not None else SystemClock()
        self.sink: EventSink = sink if sink is not None else ListEventSink()

        self._params = PoolParameters.from_config(config)
        self._ledger = ReserveLedger()
        self._oracle = TwapOracle(self._params, self._record)
        self._governance = GovernorRegistry(deployer, self._params, self.clock, self._record)
        self._liquidity = LiquidityManager(
            self._ledger, token_x, token_y, self.clock, self._record
        )
        self._swaps = SwapExecutor(
            self._ledger,
            token_x,
            token_y,
            self._params,
            self._oracle,
            self.clock,
            self._record,
        )

        self._active: str | None = None
        self._pending: list[EventRecord] = []

        logger.info(
            "pool_created",
            deployer=normalize_address(deployer),
            fee_bps=self._params.fee_bps,
            twap_interval_seconds=self._params.twap_interval_seconds,
        )

    # --- Guard and transaction scope ---

    def _record(self, event: EventRecord) -> None:
        self._pending.append(event)

    def _snapshot(self) -> _PoolSnapshot:
        return _PoolSnapshot(
            ledger=self._ledger.snapshot(),
            params=replace(self._params),
            governors=self._governance.snapshot(),
            twap=self._oracle.snapshot(),
            token_x=self.token_x.snapshot(),
            token_y=self.token_y.snapshot(),
            sink=self.sink.snapshot(),
        )

    def _restore(self, snapshot: _PoolSnapshot) -> None:
        self._ledger.restore(snapshot.ledger)
        # Components hold a reference to _params, so update it in place
        self._params.fee_bps = snapshot.params.fee_bps
        self._params.twap_interval_seconds = snapshot.params.twap_interval_seconds
        self._governance.restore(snapshot.governors)
        self._oracle.restore(snapshot.twap)
        self.token_x.restore(snapshot.token_x)
        self.token_y.restore(snapshot.token_y)
        self.sink.restore(snapshot.sink)

    @contextmanager
    def _entry(self, operation: str, caller: str) -> Iterator[None]:
        if self._active is not None:
            logger.warning(
                "reentrant_call_rejected",
                operation=operation,
                caller=caller,
                active=self._active,
            )
            raise ReentrantCall(
                f"{operation} called while {self._active} is still running"
            )

        self._active = operation
        snapshot = self._snapshot()
        self._pending = []
        try:
            yield
            events, self._pending = self._pending, []
            for event in events:
                self.sink.emit(event)
        except Exception as err:
            self._restore(snapshot)
            self._pending = []
            logger.warning(
                "operation_rejected",
                operation=operation,
                caller=caller,
                error=err.code if isinstance(err, PoolError) else type(err).__name__,
                detail=str(err),
            )
            raise
        finally:
            self._active = None

    @property
    def in_call(self) -> bool:
        """True while a mutating entry point is running."""
        return self._active is not None

    # --- Liquidity ---

    def add_liquidity(self, caller: str, amount_x: int, amount_y: int) -> int:
        """Deposit (amount_x, amount_y) and return the shares minted to caller."""
        caller = normalize_address(caller)
        with self._entry("add_liquidity", caller):
            return self._liquidity.add_liquidity(caller, amount_x, amount_y)

    def remove_liquidity(self, caller: str, shares: int) -> tuple[int, int]:
        """Redeem caller's shares and return the (amount_x, amount_y) paid out."""
        caller = normalize_address(caller)
        with self._entry("remove_liquidity", caller):
            return self._liquidity.remove_liquidity(caller, shares)

    # --- Swaps ---

    def execute_swap(
        self,
        caller: str,
        amount_in: int,
        min_amount_out: int,
        direction: SwapDirection | str,
    ) -> SwapResult:
        """Swap an exact input and return the SwapResult, including ``twap_sampled``."""
        caller = normalize_address(caller)
        direction = SwapDirection(direction)
        with self._entry(f"swap_{direction.value}", caller):
            return self._swaps.swap(caller, amount_in, min_amount_out, direction)

    def swap(
        self,
        caller: str,
        amount_in: int,
        min_amount_out: int,
        direction: SwapDirection | str,
    ) -> int:
        """Swap an exact input in either direction and return the output amount."""
        return self.execute_swap(caller, amount_in, min_amount_out, direction).amount_out

    def swap_x_for_y(self, caller: str, amount_in: int, min_amount_out: int = 0) -> int:
        return self.swap(caller, amount_in, min_amount_out, SwapDirection.X_TO_Y)

    def swap_y_for_x(self, caller: str, amount_in: int, min_amount_out: int = 0) -> int:
        return self.swap(caller, amount_in, min_amount_out, SwapDirection.Y_TO_X)

    # --- Governance ---

    def set_fee(self, caller: str, fee_bps: int) -> None:
        caller = normalize_address(caller)
        with self._entry("set_fee", caller):
            self._governance.set_fee(caller, fee_bps)

    def set_twap_interval(self, caller: str, seconds: int) -> None:
        caller = normalize_address(caller)
        with self._entry("set_twap_interval", caller):
            self._governance.set_twap_interval(caller, seconds)

    def add_governor(self, caller: str, account: str) -> None:
        caller = normalize_address(caller)
        with self._entry("add_governor", caller):
            self._governance.add_governor(caller, account)

    def remove_governor(self, caller: str, account: str) -> None:
        caller = normalize_address(caller)
        with self._entry("remove_governor", caller):
            self._governance.remove_governor(caller, account)

    # --- Read-only views ---

    def get_reserves(self) -> tuple[int, int]:
        """Current (reserve_x, reserve_y)."""
        return self._ledger.reserves()

    def quote(self, amount_in: int, direction: SwapDirection | str) -> int:
        """Output a swap would currently receive, before slippage checks."""
        return self._swaps.quote(amount_in, SwapDirection(direction))

    def quote_x_for_y(self, amount_in: int) -> int:
        return self.quote(amount_in, SwapDirection.X_TO_Y)

    def quote_y_for_x(self, amount_in: int) -> int:
        return self.quote(amount_in, SwapDirection.Y_TO_X)

    def get_twap(self) -> TwapSample:
        """Last TWAP sample; all zeros before the first qualifying swap."""
        return self._oracle.sample

    def twap_next_sample_at(self) -> int:
        return self._oracle.next_sample_at()

    def twap_age(self) -> int:
        """Seconds since the last TWAP sample, by the pool's clock."""
        return self._oracle.age(self.clock.now())

    @property
    def fee_bps(self) -> int:
        return self._params.fee_bps

    @property
    def twap_interval_seconds(self) -> int:
        return self._params.twap_interval_seconds

    @property
    def total_shares(self) -> int:
        return self._ledger.total_shares

    def share_balance(self, holder: str) -> int:
        return self._ledger.balance_of(holder)

    def share_holders(self) -> dict[str, int]:
        return self._ledger.holders()

    def governors(self) -> list[str]:
        return self._governance.governors()

    def is_governor(self, account: str) -> bool:
        return self._governance.is_governor(account)

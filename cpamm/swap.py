"""Swap executor.

Both directions run the same steps: quote on pre-swap reserves, enforce the
caller's minimum output, move the tokens, update reserves, check that the
reserve product did not shrink, then give the oracle a chance to sample.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

import structlog

from cpamm.amm.pricing import quote_output
from cpamm.errors import InvalidAmount, InvariantViolation, SlippageExceeded, require_int
from cpamm.interfaces import Clock, TokenLedger
from cpamm.ledger import ReserveLedger
from cpamm.models.events import EventRecord, Swapped
from cpamm.models.types import SwapDirection, normalize_address
from cpamm.oracle import TwapOracle
from cpamm.params import PoolParameters
from cpamm.safe_int import S

logger = structlog.get_logger()


@dataclass(frozen=True)
class SwapResult:
    """Outcome of an executed swap."""

    amount_in: int
    amount_out: int
    direction: SwapDirection
    twap_sampled: bool = False


class SwapExecutor:
    """Executes exact-input swaps against the reserve ledger."""

    def __init__(
        self,
        ledger: ReserveLedger,
        token_x: TokenLedger,
        token_y: TokenLedger,
        params: PoolParameters,
        oracle: TwapOracle,
        clock: Clock,
        emit: Callable[[EventRecord], None],
    ) -> None:
        self._ledger = ledger
        self._token_x = token_x
        self._token_y = token_y
        self._params = params
        self._oracle = oracle
        self._clock = clock
        self._emit = emit

    def _oriented(self, direction: SwapDirection) -> tuple[int, int, TokenLedger, TokenLedger]:
        """(reserve_in, reserve_out, token_in, token_out) for a direction."""
        reserve_x, reserve_y = self._ledger.reserves()
        if direction is SwapDirection.X_TO_Y:
            return reserve_x, reserve_y, self._token_x, self._token_y
        return reserve_y, reserve_x, self._token_y, self._token_x

    def quote(self, amount_in: int, direction: SwapDirection) -> int:
        """Output a swap of ``amount_in`` would receive right now."""
        reserve_in, reserve_out, _, _ = self._oriented(direction)
        return quote_output(amount_in, reserve_in, reserve_out, self._params.fee_bps)

    def swap(
        self,
        trader: str,
        amount_in: int,
        min_amount_out: int,
        direction: SwapDirection,
    ) -> SwapResult:
        """Swap an exact input amount.

        Args:
            trader: Account paying the input and receiving the output
            amount_in: Exact input amount
            min_amount_out: Smallest acceptable output (slippage floor)
            direction: X_TO_Y or Y_TO_X

        Returns:
            SwapResult with the executed amounts

        Raises:
            InvalidAmount: If an amount is not an int, amount_in is not positive
                or min_amount_out is negative
            InsufficientReserves: If the pool has no liquidity
            SlippageExceeded: If the quoted output is below min_amount_out
            InvariantViolation: If the reserve product decreased (fatal)
        """
        trader = normalize_address(trader)
        direction = SwapDirection(direction)
        require_int(amount_in, "amount_in")
        require_int(min_amount_out, "min_amount_out")
        if amount_in <= 0:
            raise InvalidAmount(f"amount_in must be positive: {amount_in}")
        if min_amount_out < 0:
            raise InvalidAmount(f"min_amount_out cannot be negative: {min_amount_out}")

        reserve_in, reserve_out, token_in, token_out = self._oriented(direction)
        k_before = S(reserve_in) * S(reserve_out)

        amount_out = quote_output(amount_in, reserve_in, reserve_out, self._params.fee_bps)
        if amount_out < min_amount_out:
            raise SlippageExceeded(
                f"Output {amount_out} is below minimum {min_amount_out}"
            )

        token_in.pull(trader, amount_in)
        token_out.push(trader, amount_out)

        self._ledger.apply_swap(amount_in, amount_out, direction)

        new_in, new_out, _, _ = self._oriented(direction)
        k_after = S(new_in) * S(new_out)
        if k_after < k_before:
            logger.error(
                "invariant_violation",
                k_before=k_before.value,
                k_after=k_after.value,
                direction=direction.value,
            )
            raise InvariantViolation(
                f"Reserve product decreased: {k_after.value} < {k_before.value}"
            )

        now = self._clock.now()
        sampled = self._oracle.maybe_sample(now, self._ledger.reserves())

        logger.info(
            "swap_executed",
            trader=trader,
            direction=direction.value,
            amount_in=amount_in,
            amount_out=amount_out,
            reserve_in=new_in,
            reserve_out=new_out,
        )
        self._emit(
            Swapped(
                timestamp=now,
                trader=trader,
                amount_in=amount_in,
                amount_out=amount_out,
                direction=direction,
            )
        )
        return SwapResult(
            amount_in=amount_in,
            amount_out=amount_out,
            direction=direction,
            twap_sampled=sampled,
        )

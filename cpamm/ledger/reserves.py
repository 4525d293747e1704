"""Reserve ledger: the two reserve balances and the share book.

The ledger is the only place pool balances change. It knows nothing about
pricing or proportionality; the liquidity manager and the swap executor
compute amounts and hand them over. Its job is to keep every balance
non-negative and the per-holder shares summing to ``total_shares``.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from cpamm.errors import InsufficientReserves, InsufficientShares, InvalidAmount
from cpamm.models.types import SwapDirection, normalize_address
from cpamm.safe_int import S, Underflow

logger = structlog.get_logger()


@dataclass(frozen=True)
class LedgerState:
    """Complete ledger contents, used for rollback."""

    reserve_x: int
    reserve_y: int
    total_shares: int
    shares: dict[str, int]


class ReserveLedger:
    """Reserve pair plus per-holder share balances."""

    def __init__(self) -> None:
        self._reserve_x = 0
        self._reserve_y = 0
        self._total_shares = 0
        self._shares: dict[str, int] = {}

    @property
    def reserve_x(self) -> int:
        return self._reserve_x

    @property
    def reserve_y(self) -> int:
        return self._reserve_y

    @property
    def total_shares(self) -> int:
        return self._total_shares

    @property
    def is_empty(self) -> bool:
        """True before the first deposit and after every share is redeemed."""
        return self._total_shares == 0

    def reserves(self) -> tuple[int, int]:
        """Current (reserve_x, reserve_y)."""
        return self._reserve_x, self._reserve_y

    def balance_of(self, holder: str) -> int:
        return self._shares.get(normalize_address(holder), 0)

    def holders(self) -> dict[str, int]:
        """Copy of all non-zero share balances."""
        return dict(self._shares)

    # --- Reserve mutators ---

    def apply_deposit(self, amount_x: int, amount_y: int) -> None:
        _require_non_negative(amount_x, amount_y)
        self._reserve_x += amount_x
        self._reserve_y += amount_y

    def apply_withdrawal(self, amount_x: int, amount_y: int) -> None:
        """Shrink both reserves.

        Raises:
            InsufficientReserves: If either amount exceeds its reserve
        """
        _require_non_negative(amount_x, amount_y)
        new_x = _checked_sub(self._reserve_x, amount_x, "x")
        new_y = _checked_sub(self._reserve_y, amount_y, "y")
        self._reserve_x, self._reserve_y = new_x, new_y

    def apply_swap(self, amount_in: int, amount_out: int, direction: SwapDirection) -> None:
        """Credit the input reserve and debit the output reserve.

        Raises:
            InsufficientReserves: If amount_out exceeds the output reserve
        """
        _require_non_negative(amount_in, amount_out)
        if direction is SwapDirection.X_TO_Y:
            new_y = _checked_sub(self._reserve_y, amount_out, "y")
            self._reserve_x += amount_in
            self._reserve_y = new_y
        else:
            new_x = _checked_sub(self._reserve_x, amount_out, "x")
            self._reserve_y += amount_in
            self._reserve_x = new_x

    # --- Share book ---

    def mint(self, holder: str, shares: int) -> None:
        if shares <= 0:
            raise InvalidAmount(f"Shares to mint must be positive: {shares}")
        holder = normalize_address(holder)
        self._shares[holder] = self._shares.get(holder, 0) + shares
        self._total_shares += shares

    def burn(self, holder: str, shares: int) -> None:
        """Destroy ``shares`` owned by ``holder``.

        Raises:
            InsufficientShares: If the holder owns fewer shares
        """
        if shares <= 0:
            raise InvalidAmount(f"Shares to burn must be positive: {shares}")
        holder = normalize_address(holder)
        balance = self._shares.get(holder, 0)
        if balance < shares:
            raise InsufficientShares(f"Holder {holder} owns {balance} shares, cannot burn {shares}")
        remaining = balance - shares
        if remaining:
            self._shares[holder] = remaining
        else:
            del self._shares[holder]
        self._total_shares -= shares

    # --- Rollback support ---

    def snapshot(self) -> LedgerState:
        return LedgerState(
            reserve_x=self._reserve_x,
            reserve_y=self._reserve_y,
            total_shares=self._total_shares,
            shares=dict(self._shares),
        )

    def restore(self, state: LedgerState) -> None:
        self._reserve_x = state.reserve_x
        self._reserve_y = state.reserve_y
        self._total_shares = state.total_shares
        self._shares = dict(state.shares)


def _require_non_negative(*amounts: int) -> None:
    for amount in amounts:
        if amount < 0:
            raise InvalidAmount(f"Ledger amounts cannot be negative: {amount}")


def _checked_sub(reserve: int, amount: int, side: str) -> int:
    try:
        return (S(reserve) - S(amount)).value
    except Underflow as err:
        logger.error("reserve_underflow", side=side, reserve=reserve, amount=amount)
        raise InsufficientReserves(
            f"Reserve {side} is {reserve}, cannot remove {amount}"
        ) from err

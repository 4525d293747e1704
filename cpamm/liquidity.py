"""Liquidity manager: share issuance on deposit, redemption on withdrawal.

Deposits must match the current reserve ratio exactly; nothing is refunded
or rebalanced. Share counts always round down, so rounding dust accrues to
the remaining holders rather than the depositor.

Ordering matters for atomicity:
- add: pull both assets first, then mint and grow reserves
- remove: burn and shrink reserves first, then pay out
"""

from __future__ import annotations

from collections.abc import Callable

import structlog

from cpamm.errors import (
    InsufficientShares,
    InvalidAmount,
    InvalidShareAmount,
    UnbalancedDeposit,
    ZeroLiquidityMinted,
    require_int,
)
from cpamm.interfaces import Clock, TokenLedger
from cpamm.ledger import ReserveLedger
from cpamm.models.events import EventRecord, LiquidityAdded, LiquidityRemoved
from cpamm.models.types import normalize_address
from cpamm.safe_int import S

logger = structlog.get_logger()


class LiquidityManager:
    """Computes and applies share mints and burns."""

    def __init__(
        self,
        ledger: ReserveLedger,
        token_x: TokenLedger,
        token_y: TokenLedger,
        clock: Clock,
        emit: Callable[[EventRecord], None],
    ) -> None:
        self._ledger = ledger
        self._token_x = token_x
        self._token_y = token_y
        self._clock = clock
        self._emit = emit

    def shares_for_deposit(self, amount_x: int, amount_y: int) -> int:
        """Shares a deposit of (amount_x, amount_y) would mint.

        Empty pool: isqrt(amount_x * amount_y).
        Otherwise: min(amount_x * total // reserve_x, amount_y * total // reserve_y).

        Raises:
            InvalidAmount: If an amount is not an int, is negative, or is zero on
                a funded pool
            UnbalancedDeposit: If the amounts are not in the reserve ratio
            ZeroLiquidityMinted: If the result rounds down to zero
        """
        require_int(amount_x, "amount_x")
        require_int(amount_y, "amount_y")
        if amount_x < 0 or amount_y < 0:
            raise InvalidAmount(f"Deposit amounts cannot be negative: ({amount_x}, {amount_y})")

        ledger = self._ledger
        if ledger.is_empty:
            shares = (S(amount_x) * S(amount_y)).isqrt()
        else:
            if amount_x == 0 or amount_y == 0:
                raise InvalidAmount(
                    f"Deposit amounts must be positive: ({amount_x}, {amount_y})"
                )
            reserve_x, reserve_y = ledger.reserves()
            # Exact cross-multiplication; no tolerance
            if S(amount_x) * S(reserve_y) != S(amount_y) * S(reserve_x):
                raise UnbalancedDeposit(
                    f"Deposit ({amount_x}, {amount_y}) does not match reserve ratio "
                    f"({reserve_x}, {reserve_y})"
                )
            total = S(ledger.total_shares)
            shares_x = S(amount_x) * total // S(reserve_x)
            shares_y = S(amount_y) * total // S(reserve_y)
            shares = shares_x.min(shares_y)

        if shares == 0:
            raise ZeroLiquidityMinted(
                f"Deposit ({amount_x}, {amount_y}) is too small to mint a share"
            )
        return shares.value

    def amounts_for_shares(self, shares: int) -> tuple[int, int]:
        """Pro-rata (amount_x, amount_y) that ``shares`` redeem for, rounded down.

        Raises:
            InvalidShareAmount: If shares is not positive
            InsufficientShares: If shares exceeds the total supply
        """
        require_int(shares, "shares", InvalidShareAmount)
        if shares <= 0:
            raise InvalidShareAmount(f"Shares must be positive: {shares}")
        total = self._ledger.total_shares
        if shares > total:
            raise InsufficientShares(f"Only {total} shares exist, cannot redeem {shares}")

        reserve_x, reserve_y = self._ledger.reserves()
        amount_x = S(shares) * S(reserve_x) // S(total)
        amount_y = S(shares) * S(reserve_y) // S(total)
        return amount_x.value, amount_y.value

    def add_liquidity(self, provider: str, amount_x: int, amount_y: int) -> int:
        """Deposit both assets and mint shares to ``provider``.

        Returns:
            Number of shares minted
        """
        provider = normalize_address(provider)
        shares = self.shares_for_deposit(amount_x, amount_y)

        self._token_x.pull(provider, amount_x)
        self._token_y.pull(provider, amount_y)

        self._ledger.mint(provider, shares)
        self._ledger.apply_deposit(amount_x, amount_y)

        logger.info(
            "liquidity_added",
            provider=provider,
            amount_x=amount_x,
            amount_y=amount_y,
            shares=shares,
            total_shares=self._ledger.total_shares,
        )
        self._emit(
            LiquidityAdded(
                timestamp=self._clock.now(),
                provider=provider,
                amount_x=amount_x,
                amount_y=amount_y,
                shares=shares,
            )
        )
        return shares

    def remove_liquidity(self, provider: str, shares: int) -> tuple[int, int]:
        """Burn ``shares`` from ``provider`` and pay out the pro-rata reserves.

        Returns:
            Tuple of (amount_x, amount_y) paid out

        Raises:
            InvalidShareAmount: If shares is not positive
            InsufficientShares: If provider owns fewer shares
        """
        provider = normalize_address(provider)
        require_int(shares, "shares", InvalidShareAmount)
        if shares <= 0:
            raise InvalidShareAmount(f"Shares must be positive: {shares}")
        balance = self._ledger.balance_of(provider)
        if shares > balance:
            raise InsufficientShares(
                f"Provider {provider} owns {balance} shares, cannot redeem {shares}"
            )

        amount_x, amount_y = self.amounts_for_shares(shares)

        self._ledger.burn(provider, shares)
        self._ledger.apply_withdrawal(amount_x, amount_y)

        self._token_x.push(provider, amount_x)
        self._token_y.push(provider, amount_y)

        logger.info(
            "liquidity_removed",
            provider=provider,
            amount_x=amount_x,
            amount_y=amount_y,
            shares=shares,
            total_shares=self._ledger.total_shares,
        )
        self._emit(
            LiquidityRemoved(
                timestamp=self._clock.now(),
                provider=provider,
                amount_x=amount_x,
                amount_y=amount_y,
                shares=shares,
            )
        )
        return amount_x, amount_y

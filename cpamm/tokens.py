"""In-memory fungible token used as the pool's value-transfer ledger.

MockToken behaves like a minimal ERC-20 with allowances plus an optional
receive hook per account. Hooks run after a transfer has been booked, which
lets tests play the part of a contract that calls back into the pool while
a payout is in flight.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

import structlog

from cpamm.errors import InsufficientAllowance, InsufficientBalance, InvalidAmount
from cpamm.models.types import normalize_address

logger = structlog.get_logger()

ReceiveHook = Callable[["MockToken", str, str, int], None]


@dataclass(frozen=True)
class TokenSnapshot:
    """Balances and allowances captured by MockToken.snapshot()."""

    balances: dict[str, int]
    allowances: dict[tuple[str, str], int]
    total_supply: int


class MockToken:
    """Token ledger bound to one pool account.

    ``pull`` spends the sender's allowance for the pool account, ``push``
    pays out of the pool account's balance.

    Usage:
        token = MockToken("TKX", pool_account=POOL)
        token.mint(ALICE, 10_000)
        token.approve(ALICE, POOL, 10_000)
    """

    def __init__(self, symbol: str, pool_account: str) -> None:
        self.symbol = symbol
        self.pool_account = normalize_address(pool_account)
        self._balances: dict[str, int] = {}
        self._allowances: dict[tuple[str, str], int] = {}
        self._hooks: dict[str, ReceiveHook] = {}
        self.total_supply = 0

    def __repr__(self) -> str:
        return f"MockToken({self.symbol!r}, pool_account={self.pool_account!r})"

    # --- ERC-20 style surface ---

    def balance_of(self, account: str) -> int:
        return self._balances.get(normalize_address(account), 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((normalize_address(owner), normalize_address(spender)), 0)

    def mint(self, account: str, amount: int) -> None:
        """Create ``amount`` new tokens for ``account``."""
        if amount <= 0:
            raise InvalidAmount(f"Mint amount must be positive: {amount}")
        account = normalize_address(account)
        self._balances[account] = self._balances.get(account, 0) + amount
        self.total_supply += amount
        logger.debug("token_minted", token=self.symbol, account=account, amount=amount)

    def approve(self, owner: str, spender: str, amount: int) -> None:
        """Set the allowance ``spender`` may move out of ``owner``."""
        if amount < 0:
            raise InvalidAmount(f"Allowance cannot be negative: {amount}")
        self._allowances[(normalize_address(owner), normalize_address(spender))] = amount

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        """Move ``amount`` between two accounts.

        Raises:
            InvalidAmount: If amount is negative
            InsufficientBalance: If sender cannot cover the amount
        """
        if amount < 0:
            raise InvalidAmount(f"Transfer amount cannot be negative: {amount}")
        sender = normalize_address(sender)
        recipient = normalize_address(recipient)
        balance = self._balances.get(sender, 0)
        if balance < amount:
            raise InsufficientBalance(
                f"{self.symbol}: balance of {sender} is {balance}, needs {amount}"
            )
        self._balances[sender] = balance - amount
        self._balances[recipient] = self._balances.get(recipient, 0) + amount

        hook = self._hooks.get(recipient)
        if hook is not None:
            hook(self, sender, recipient, amount)

    def on_receive(self, account: str, hook: ReceiveHook | None) -> None:
        """Install (or clear, with None) the receive hook for ``account``."""
        account = normalize_address(account)
        if hook is None:
            self._hooks.pop(account, None)
        else:
            self._hooks[account] = hook

    # --- TokenLedger protocol ---

    def pull(self, sender: str, amount: int) -> None:
        sender = normalize_address(sender)
        allowed = self.allowance(sender, self.pool_account)
        if allowed < amount:
            raise InsufficientAllowance(
                f"{self.symbol}: allowance of {sender} is {allowed}, needs {amount}"
            )
        self.transfer(sender, self.pool_account, amount)
        self._allowances[(sender, self.pool_account)] = allowed - amount

    def push(self, recipient: str, amount: int) -> None:
        self.transfer(self.pool_account, recipient, amount)

    def snapshot(self) -> TokenSnapshot:
        return TokenSnapshot(
            balances=dict(self._balances),
            allowances=dict(self._allowances),
            total_supply=self.total_supply,
        )

    def restore(self, state: TokenSnapshot) -> None:
        self._balances = dict(state.balances)
        self._allowances = dict(state.allowances)
        self.total_supply = state.total_supply

"""Pool host for the harness service.

The host owns one pool, its two mock tokens and its event sink, and holds
the lock that serializes mutating requests against that pool.
"""

from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass, field

import structlog

from cpamm.clock import SystemClock
from cpamm.config import DEFAULT_POOL_CONFIG, PoolConfig
from cpamm.events import ListEventSink
from cpamm.interfaces import Clock
from cpamm.pool import Pool
from cpamm.tokens import MockToken

logger = structlog.get_logger()

# Account the pool's token balances are booked under
POOL_ACCOUNT = "0x" + "a1" * 20

# Default deployer (first governor); configurable via CPAMM_DEPLOYER
DEFAULT_DEPLOYER = "0x" + "0d" * 20


@dataclass
class PoolHost:
    """A pool plus the collaborators the harness drives it through."""

    pool: Pool
    token_x: MockToken
    token_y: MockToken
    sink: ListEventSink
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    def fund(self, account: str, amount_x: int, amount_y: int) -> None:
        """Mint tokens to ``account`` and raise its allowance for the pool."""
        for token, amount in ((self.token_x, amount_x), (self.token_y, amount_y)):
            if amount <= 0:
                continue
            token.mint(account, amount)
            allowance = token.allowance(account, POOL_ACCOUNT)
            token.approve(account, POOL_ACCOUNT, allowance + amount)
        logger.info("account_funded", account=account, amount_x=amount_x, amount_y=amount_y)


def build_host(
    deployer: str = DEFAULT_DEPLOYER,
    config: PoolConfig = DEFAULT_POOL_CONFIG,
    clock: Clock | None = None,
) -> PoolHost:
    """Create a host with fresh tokens, an empty pool and an empty event log."""
    token_x = MockToken("X", pool_account=POOL_ACCOUNT)
    token_y = MockToken("Y", pool_account=POOL_ACCOUNT)
    sink = ListEventSink()
    pool = Pool(
        token_x,
        token_y,
        deployer,
        clock=clock if clock is not None else SystemClock(),
        sink=sink,
        config=config,
    )
    return PoolHost(pool=pool, token_x=token_x, token_y=token_y, sink=sink)


def _int_from_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as err:
        raise ValueError(f"{name} must be an integer: {raw!r}") from err


def config_from_env() -> PoolConfig:
    """Read CPAMM_FEE_BPS and CPAMM_TWAP_INTERVAL, falling back to defaults.

    Raises:
        ValueError: If either variable is not an integer or is out of range
    """
    fee_bps = _int_from_env("CPAMM_FEE_BPS", DEFAULT_POOL_CONFIG.fee_bps)
    interval = _int_from_env(
        "CPAMM_TWAP_INTERVAL", DEFAULT_POOL_CONFIG.twap_interval_seconds
    )
    try:
        return PoolConfig(fee_bps=fee_bps, twap_interval_seconds=interval)
    except ValueError as err:
        raise ValueError(f"Invalid pool settings in environment: {err}") from err


_default_host: PoolHost | None = None


def get_default_host() -> PoolHost:
    """Process-wide host, built on first use from environment settings."""
    global _default_host
    if _default_host is None:
        _default_host = build_host(
            deployer=os.environ.get("CPAMM_DEPLOYER", DEFAULT_DEPLOYER),
            config=config_from_env(),
        )
    return _default_host

"""Pool error classes.

Every failed entry point raises exactly one of these. The pool rolls back
all state before the error reaches the caller, and nothing is retried
internally. Each class carries a stable ``code`` used by the HTTP host.
"""

from typing import ClassVar


class PoolError(Exception):
    """Base error for pool operations."""

    code: ClassVar[str] = "pool_error"


class InvalidAmount(PoolError):
    """Input amount is not a positive integer."""

    code = "invalid_amount"


class UnbalancedDeposit(PoolError):
    """Deposit is not exactly proportional to the current reserves."""

    code = "unbalanced_deposit"


class ZeroLiquidityMinted(PoolError):
    """Deposit is too small to mint a single share."""

    code = "zero_liquidity_minted"


class InsufficientReserves(PoolError):
    """Reserves cannot cover the requested amount (or the pool is empty)."""

    code = "insufficient_reserves"


class InsufficientShares(PoolError):
    """Holder does not own enough shares."""

    code = "insufficient_shares"


class InvalidShareAmount(PoolError):
    """Share amount is zero or negative."""

    code = "invalid_share_amount"


class SlippageExceeded(PoolError):
    """Quoted output is below the caller's minimum."""

    code = "slippage_exceeded"


class NotGovernor(PoolError):
    """Caller is not in the governor set."""

    code = "not_governor"


class InvalidFee(PoolError):
    """Fee must be in range [0, 10000) basis points."""

    code = "invalid_fee"


class InvalidTwapInterval(PoolError):
    """TWAP interval must be a non-negative number of seconds."""

    code = "invalid_twap_interval"


class InvalidGovernorAddress(PoolError):
    """Governor address is malformed or the zero address."""

    code = "invalid_governor_address"


class DuplicateGovernor(PoolError):
    """Address is already a governor."""

    code = "duplicate_governor"


class UnknownGovernor(PoolError):
    """Address is not a governor."""

    code = "unknown_governor"


class ReentrantCall(PoolError):
    """A mutating entry point was entered while another one was running."""

    code = "reentrant_call"


class InvariantViolation(PoolError):
    """Reserve product decreased across a swap. Fatal."""

    code = "invariant_violation"


class TransferError(PoolError):
    """Base error for value-transfer ledger failures."""

    code = "transfer_failed"


class InsufficientBalance(TransferError):
    """Account balance cannot cover the transfer."""

    code = "insufficient_balance"


class InsufficientAllowance(TransferError):
    """Spender allowance cannot cover the transfer."""

    code = "insufficient_allowance"


def require_int(value: object, name: str, error: type[PoolError] = InvalidAmount) -> int:
    """Return ``value`` unchanged if it is an int (bools excluded).

    Raises:
        error: If value is a float, bool, string or any other non-int
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise error(f"{name} must be an integer, got {type(value).__name__}: {value!r}")
    return value

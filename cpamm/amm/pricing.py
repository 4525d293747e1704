"""Constant-product pricing.

The pool holds x * y = k. A swap adds the fee-discounted input to one
reserve and takes out whatever keeps the product from falling:

    amount_out = (in * (10000 - fee) * res_out) / (res_in * 10000 + in * (10000 - fee))

The fee portion of the input stays in the pool, so k grows on every swap
with a non-zero fee.
"""

from __future__ import annotations

from cpamm.constants import BPS_DENOMINATOR, MAX_FEE_BPS
from cpamm.errors import InsufficientReserves, InvalidAmount, InvalidFee, require_int
from cpamm.safe_int import S


def fee_multiplier(fee_bps: int) -> int:
    """Fee multiplier for pool math (10000 - fee_bps).

    For 30 bps (0.3%), this returns 9970.

    Raises:
        InvalidFee: If fee_bps is outside [0, 10000)
    """
    require_int(fee_bps, "fee_bps", InvalidFee)
    if not (0 <= fee_bps <= MAX_FEE_BPS):
        raise InvalidFee(f"fee_bps must be in [0, {MAX_FEE_BPS}]: {fee_bps}")
    return BPS_DENOMINATOR - fee_bps


def quote_output(amount_in: int, reserve_in: int, reserve_out: int, fee_bps: int) -> int:
    """Calculate swap output for an exact input.

    Formula: amount_out = (in * fee * res_out) // (res_in * 10000 + in * fee)

    Args:
        amount_in: Input token amount
        reserve_in: Reserve of the input token
        reserve_out: Reserve of the output token
        fee_bps: Swap fee in basis points

    Returns:
        Output token amount, rounded down

    Raises:
        InvalidAmount: If amount_in is not positive
        InsufficientReserves: If either reserve is empty
        InvalidFee: If fee_bps is outside [0, 10000)
    """
    require_int(amount_in, "amount_in")
    if amount_in <= 0:
        raise InvalidAmount(f"amount_in must be positive: {amount_in}")
    if reserve_in <= 0 or reserve_out <= 0:
        raise InsufficientReserves(
            f"Pool has no liquidity: reserves ({reserve_in}, {reserve_out})"
        )

    amount_in_with_fee = S(amount_in) * S(fee_multiplier(fee_bps))
    numerator = amount_in_with_fee * S(reserve_out)
    denominator = S(reserve_in) * S(BPS_DENOMINATOR) + amount_in_with_fee

    return (numerator // denominator).value


def quote_input(amount_out: int, reserve_in: int, reserve_out: int, fee_bps: int) -> int:
    """Calculate the input needed to receive at least ``amount_out``.

    Formula: amount_in = (res_in * out * 10000) // ((res_out - out) * fee) + 1

    The +1 rounds in the pool's favour, so
    ``quote_output(quote_input(out, ...), ...) >= out``.

    Raises:
        InvalidAmount: If amount_out is not positive
        InsufficientReserves: If either reserve is empty or amount_out would
            drain the output reserve
        InvalidFee: If fee_bps is outside [0, 10000)
    """
    require_int(amount_out, "amount_out")
    if amount_out <= 0:
        raise InvalidAmount(f"amount_out must be positive: {amount_out}")
    if reserve_in <= 0 or reserve_out <= 0:
        raise InsufficientReserves(
            f"Pool has no liquidity: reserves ({reserve_in}, {reserve_out})"
        )
    if amount_out >= reserve_out:
        raise InsufficientReserves(
            f"Cannot drain full reserve: amount_out ({amount_out}) >= reserve_out ({reserve_out})"
        )

    numerator = S(reserve_in) * S(amount_out) * S(BPS_DENOMINATOR)
    denominator = (S(reserve_out) - S(amount_out)) * S(fee_multiplier(fee_bps))

    return ((numerator // denominator) + S(1)).value

"""Pydantic models for the harness API request/response bodies.

Token and share amounts travel as uint256 decimal strings so that values
beyond 2^53 survive JSON clients unchanged.
"""

from pydantic import BaseModel, Field

from cpamm.models.events import PoolEvent
from cpamm.models.types import Address, SwapDirection, Uint256


class FaucetRequest(BaseModel):
    """Mint test tokens to an account and approve the pool to pull them."""

    account: Address
    amount_x: Uint256 = "0"
    amount_y: Uint256 = "0"


class AddLiquidityRequest(BaseModel):
    caller: Address
    amount_x: Uint256
    amount_y: Uint256


class AddLiquidityResponse(BaseModel):
    shares: Uint256


class RemoveLiquidityRequest(BaseModel):
    caller: Address
    shares: Uint256


class RemoveLiquidityResponse(BaseModel):
    amount_x: Uint256
    amount_y: Uint256


class SwapRequest(BaseModel):
    caller: Address
    amount_in: Uint256
    min_amount_out: Uint256 = "0"
    direction: SwapDirection


class SwapResponse(BaseModel):
    amount_out: Uint256
    twap_sampled: bool = Field(description="Whether this swap refreshed the TWAP sample.")


class QuoteResponse(BaseModel):
    amount_in: Uint256
    amount_out: Uint256
    direction: SwapDirection


class SetFeeRequest(BaseModel):
    caller: Address
    fee_bps: int = Field(description="New fee in basis points; must be below 10000.")


class SetTwapIntervalRequest(BaseModel):
    caller: Address
    seconds: int


class GovernorRequest(BaseModel):
    caller: Address
    account: str = Field(description="Account to add or remove.")


class TwapView(BaseModel):
    price_x: Uint256
    price_y: Uint256
    timestamp: int
    next_sample_at: int
    age_seconds: int


class PoolView(BaseModel):
    """Snapshot of pool state returned by GET /pool."""

    reserve_x: Uint256
    reserve_y: Uint256
    total_shares: Uint256
    fee_bps: int
    twap_interval_seconds: int
    governors: list[str]
    twap: TwapView


class ReservesView(BaseModel):
    reserve_x: Uint256
    reserve_y: Uint256


class AccountView(BaseModel):
    account: str
    balance_x: Uint256
    balance_y: Uint256
    shares: Uint256


class EventsResponse(BaseModel):
    events: list[PoolEvent] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    error: str
    detail: str

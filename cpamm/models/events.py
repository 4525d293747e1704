"""Pydantic models for the pool's append-only event records.

One record type per state change: deposits, withdrawals, swaps, parameter
changes, governor changes and TWAP samples. Records are immutable and carry
a literal ``kind`` so a mixed stream can be parsed back with ``PoolEvent``.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from cpamm.models.types import SwapDirection


class EventRecord(BaseModel):
    """Common base for all pool events."""

    model_config = ConfigDict(frozen=True)

    timestamp: int = Field(ge=0, description="Logical clock reading when the event was emitted.")


class LiquidityAdded(EventRecord):
    kind: Literal["liquidity_added"] = "liquidity_added"
    provider: str
    amount_x: int = Field(ge=0)
    amount_y: int = Field(ge=0)
    shares: int = Field(ge=0)


class LiquidityRemoved(EventRecord):
    kind: Literal["liquidity_removed"] = "liquidity_removed"
    provider: str
    amount_x: int = Field(ge=0)
    amount_y: int = Field(ge=0)
    shares: int = Field(ge=0)


class Swapped(EventRecord):
    kind: Literal["swapped"] = "swapped"
    trader: str
    amount_in: int = Field(ge=0)
    amount_out: int = Field(ge=0)
    direction: SwapDirection


class FeeChanged(EventRecord):
    kind: Literal["fee_changed"] = "fee_changed"
    governor: str
    old_fee_bps: int = Field(ge=0)
    new_fee_bps: int = Field(ge=0)


class TwapIntervalChanged(EventRecord):
    kind: Literal["twap_interval_changed"] = "twap_interval_changed"
    governor: str
    old_interval_seconds: int = Field(ge=0)
    new_interval_seconds: int = Field(ge=0)


class GovernorAdded(EventRecord):
    kind: Literal["governor_added"] = "governor_added"
    governor: str
    account: str


class GovernorRemoved(EventRecord):
    kind: Literal["governor_removed"] = "governor_removed"
    governor: str
    account: str


class TwapSampled(EventRecord):
    """Reserve pair recorded by the oracle after a qualifying swap."""

    kind: Literal["twap_sampled"] = "twap_sampled"
    price_x: int = Field(ge=0)
    price_y: int = Field(ge=0)


PoolEvent = Annotated[
    LiquidityAdded
    | LiquidityRemoved
    | Swapped
    | FeeChanged
    | TwapIntervalChanged
    | GovernorAdded
    | GovernorRemoved
    | TwapSampled,
    Field(discriminator="kind"),
]

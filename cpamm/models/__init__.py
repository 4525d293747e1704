"""Pydantic models for pool events and the harness API."""

from cpamm.models.events import (
    EventRecord,
    FeeChanged,
    GovernorAdded,
    GovernorRemoved,
    LiquidityAdded,
    LiquidityRemoved,
    PoolEvent,
    Swapped,
    TwapIntervalChanged,
    TwapSampled,
)
from cpamm.models.types import Address, SwapDirection, Uint256, normalize_address

__all__ = [
    "Address",
    "EventRecord",
    "FeeChanged",
    "GovernorAdded",
    "GovernorRemoved",
    "LiquidityAdded",
    "LiquidityRemoved",
    "PoolEvent",
    "SwapDirection",
    "Swapped",
    "TwapIntervalChanged",
    "TwapSampled",
    "Uint256",
    "normalize_address",
]

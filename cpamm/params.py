"""Mutable protocol parameters shared by the pool's components."""

from __future__ import annotations

from dataclasses import dataclass

from cpamm.config import PoolConfig


@dataclass
class PoolParameters:
    """Current fee and TWAP spacing.

    Only the governance registry writes these; the swap executor and the
    oracle read them on every call.
    """

    fee_bps: int
    twap_interval_seconds: int

    @classmethod
    def from_config(cls, config: PoolConfig) -> PoolParameters:
        return cls(fee_bps=config.fee_bps, twap_interval_seconds=config.twap_interval_seconds)

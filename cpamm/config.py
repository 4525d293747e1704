"""Pool configuration."""

from dataclasses import dataclass

from cpamm.constants import DEFAULT_FEE_BPS, DEFAULT_TWAP_INTERVAL_SECONDS, MAX_FEE_BPS


@dataclass(frozen=True)
class PoolConfig:
    """Initial protocol parameters for a new pool.

    Governors can change both values after deployment; this only fixes
    the starting point.

    Attributes:
        fee_bps: Swap fee in basis points, 0 <= fee_bps < 10000 (default: 30)
        twap_interval_seconds: Minimum spacing between TWAP samples
            (default: 3600)
    """

    fee_bps: int = DEFAULT_FEE_BPS
    twap_interval_seconds: int = DEFAULT_TWAP_INTERVAL_SECONDS

    def __post_init__(self) -> None:
        if not (0 <= self.fee_bps <= MAX_FEE_BPS):
            raise ValueError(f"fee_bps must be in [0, {MAX_FEE_BPS}]: {self.fee_bps}")
        if self.twap_interval_seconds < 0:
            raise ValueError(
                f"twap_interval_seconds must be non-negative: {self.twap_interval_seconds}"
            )


# Default configuration instance
DEFAULT_POOL_CONFIG = PoolConfig()

"""Protocol constants for the constant-product pool.

Centralizes fee denominators, sentinel addresses and default parameters.
"""

# Maximum uint256 value; amounts on the wire must fit in it
UINT256_MAX = 2**256 - 1

# Fees are expressed in basis points out of this denominator
BPS_DENOMINATOR = 10_000

# A fee of 100% or more is rejected, so the largest valid fee is 9999 bps
MAX_FEE_BPS = BPS_DENOMINATOR - 1

# Standard 0.3% fee tier
DEFAULT_FEE_BPS = 30

# Minimum spacing between two TWAP samples
DEFAULT_TWAP_INTERVAL_SECONDS = 3600

# The null account; never a valid governor
ZERO_ADDRESS = "0x" + "0" * 40

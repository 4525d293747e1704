"""Test helpers module for shared test utilities.

- constants: Accounts and common parameters
- factories: Pool factory functions
"""

from tests.helpers.constants import (
    ALICE,
    BOB,
    CAROL,
    FEE_BPS,
    FUNDING,
    GOVERNOR,
    POOL,
    START_TIME,
    TWAP_INTERVAL,
    ZERO,
)
from tests.helpers.factories import fund, make_pool, seeded_pool

__all__ = [
    # Constants
    "ALICE",
    "BOB",
    "CAROL",
    "GOVERNOR",
    "POOL",
    "ZERO",
    "FEE_BPS",
    "FUNDING",
    "START_TIME",
    "TWAP_INTERVAL",
    # Factories
    "make_pool",
    "fund",
    "seeded_pool",
]

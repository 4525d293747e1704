"""Constant-product pool core - Python Implementation."""

from cpamm.clock import ManualClock, SystemClock
from cpamm.config import DEFAULT_POOL_CONFIG, PoolConfig
from cpamm.events import ListEventSink
from cpamm.models.types import SwapDirection
from cpamm.oracle import TwapSample
from cpamm.pool import Pool
from cpamm.tokens import MockToken

__version__ = "0.1.0"
__all__ = [
    "DEFAULT_POOL_CONFIG",
    "ListEventSink",
    "ManualClock",
    "MockToken",
    "Pool",
    "PoolConfig",
    "SwapDirection",
    "SystemClock",
    "TwapSample",
    "__version__",
]

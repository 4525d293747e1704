"""TWAP oracle.

Keeps one reserve sample, refreshed by swaps no more often than the
configured interval. Because a refresh needs the clock to have moved past
``timestamp + interval``, a single transaction can produce at most one
sample, which is what makes the reading costly to manipulate.

Only swaps refresh the sample. A pool that sees deposits and withdrawals
but no trades keeps reporting its last traded state.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from fractions import Fraction

import structlog

from cpamm.models.events import EventRecord, TwapSampled
from cpamm.params import PoolParameters

logger = structlog.get_logger()


@dataclass(frozen=True)
class TwapSample:
    """Reserve pair as of the last qualifying swap."""

    price_x: int = 0
    price_y: int = 0
    timestamp: int = 0

    @property
    def is_empty(self) -> bool:
        return self.price_x == 0 or self.price_y == 0

    def price_of_x(self) -> Fraction | None:
        """Units of Y per unit of X, or None before the first sample."""
        if self.is_empty:
            return None
        return Fraction(self.price_y, self.price_x)

    def price_of_y(self) -> Fraction | None:
        """Units of X per unit of Y, or None before the first sample."""
        if self.is_empty:
            return None
        return Fraction(self.price_x, self.price_y)


class TwapOracle:
    """Interval-gated reserve sampler."""

    def __init__(self, params: PoolParameters, emit: Callable[[EventRecord], None]) -> None:
        self._params = params
        self._emit = emit
        self._sample = TwapSample()

    @property
    def sample(self) -> TwapSample:
        return self._sample

    def next_sample_at(self) -> int:
        """Earliest timestamp at which a swap will refresh the sample."""
        return self._sample.timestamp + self._params.twap_interval_seconds

    def is_due(self, now: int) -> bool:
        return now >= self.next_sample_at()

    def age(self, now: int) -> int:
        """Seconds since the last sample."""
        return max(0, now - self._sample.timestamp)

    def maybe_sample(self, now: int, reserves: tuple[int, int]) -> bool:
        """Record ``reserves`` if the interval has elapsed.

        Args:
            now: Current clock reading
            reserves: Post-swap (reserve_x, reserve_y)

        Returns:
            True if a new sample was recorded
        """
        if not self.is_due(now):
            logger.debug("twap_sample_skipped", now=now, next_sample_at=self.next_sample_at())
            return False

        reserve_x, reserve_y = reserves
        self._sample = TwapSample(price_x=reserve_x, price_y=reserve_y, timestamp=now)
        logger.info("twap_sampled", price_x=reserve_x, price_y=reserve_y, timestamp=now)
        self._emit(TwapSampled(timestamp=now, price_x=reserve_x, price_y=reserve_y))
        return True

    def snapshot(self) -> TwapSample:
        return self._sample

    def restore(self, state: TwapSample) -> None:
        self._sample = state

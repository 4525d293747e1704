"""Logical clock implementations."""

import time


class SystemClock:
    """Wall-clock seconds, clamped so readings never go backwards."""

    def __init__(self) -> None:
        self._last = 0

    def now(self) -> int:
        self._last = max(self._last, int(time.time()))
        return self._last


class ManualClock:
    """Clock advanced explicitly by a test or harness.

    Usage:
        clock = ManualClock(start=1_000)
        clock.advance(60)
        assert clock.now() == 1_060
    """

    def __init__(self, start: int = 0) -> None:
        if start < 0:
            raise ValueError(f"start must be non-negative: {start}")
        self._now = start

    def now(self) -> int:
        return self._now

    def advance(self, seconds: int) -> int:
        """Move the clock forward and return the new reading."""
        if seconds < 0:
            raise ValueError(f"Clock cannot move backwards: {seconds}")
        self._now += seconds
        return self._now

    def set(self, timestamp: int) -> None:
        """Jump to ``timestamp`` (must not be earlier than the current reading)."""
        if timestamp < self._now:
            raise ValueError(f"Clock cannot move backwards: {timestamp} < {self._now}")
        self._now = timestamp

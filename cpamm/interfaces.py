"""Protocols for the collaborators a pool consumes but does not implement.

A pool is wired to two token ledgers (one per asset), a logical clock and an
event sink. Anything with the right methods can be plugged in; the in-memory
implementations in ``cpamm.tokens``, ``cpamm.clock`` and ``cpamm.events``
are what the tests and the harness service use.
"""

from typing import Any, Protocol, runtime_checkable

from cpamm.models.events import EventRecord


@runtime_checkable
class TokenLedger(Protocol):
    """Value-transfer ledger for one asset, seen from the pool's account.

    Both transfer methods either complete fully or raise a TransferError
    subclass without moving anything.
    """

    def pull(self, sender: str, amount: int) -> None:
        """Move ``amount`` from ``sender`` into the pool's account.

        Raises:
            TransferError: If the sender's balance or allowance is insufficient
        """
        ...

    def push(self, recipient: str, amount: int) -> None:
        """Move ``amount`` from the pool's account to ``recipient``.

        Raises:
            TransferError: If the pool's balance is insufficient
        """
        ...

    def balance_of(self, account: str) -> int:
        """Return the balance of ``account``."""
        ...

    def snapshot(self) -> Any:
        """Capture ledger state so a failed pool call can be rolled back."""
        ...

    def restore(self, state: Any) -> None:
        """Restore state captured by ``snapshot``."""
        ...


@runtime_checkable
class Clock(Protocol):
    """Monotonically non-decreasing logical clock, in seconds."""

    def now(self) -> int:
        """Return the current timestamp."""
        ...


@runtime_checkable
class EventSink(Protocol):
    """Append-only audit log for pool events.

    A pool publishes a call's events one by one after the call succeeds. If
    the sink raises part way, the pool restores the sink to its snapshot so
    the log never records half a call.
    """

    def emit(self, event: EventRecord) -> None:
        """Append one event."""
        ...

    def snapshot(self) -> Any:
        """Capture the log position so a failed pool call can be rolled back."""
        ...

    def restore(self, state: Any) -> None:
        """Drop everything emitted after ``snapshot``."""
        ...

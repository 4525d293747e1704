"""Reserve and share bookkeeping."""

from cpamm.ledger.reserves import LedgerState, ReserveLedger

__all__ = ["LedgerState", "ReserveLedger"]

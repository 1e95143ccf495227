"""Mutual-exclusion guard for trade execution.

Signals are evaluated every few seconds while a swap can take much longer
to confirm. The guard ensures at most one trade is in flight; a signal that
arrives while the guard is held is dropped, not queued.

All access happens on the event loop thread, so a plain flag is enough.
"""

from enum import Enum


class GuardState(str, Enum):
    IDLE = "idle"
    EXECUTING = "executing"


class TradeGuard:
    """Single in-flight flag with acquire/release as its only transitions."""

    def __init__(self) -> None:
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def state(self) -> GuardState:
        return GuardState.EXECUTING if self._in_flight else GuardState.IDLE

    def try_acquire(self) -> bool:
        """Move IDLE -> EXECUTING. Returns False (caller must skip) if already EXECUTING."""
        if self._in_flight:
            return False
        self._in_flight = True
        return True

    def release(self) -> None:
        """Move back to IDLE. Idempotent."""
        self._in_flight = False

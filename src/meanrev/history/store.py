"""Bounded, persisted rolling price history keyed by instrument.

Each instrument keeps at most ``capacity`` samples in chronological order;
appending beyond capacity evicts the OLDEST sample. After every append the
full mapping is written to snapshot storage. The in-memory state is
authoritative: a failed write is reported but never rolled back.
"""

import asyncio
from collections import deque
from enum import Enum

from meanrev.exceptions import PersistenceError
from meanrev.history.snapshot import Snapshot, SnapshotStorage
from meanrev.logging import LogCategory, get_logger
from meanrev.models import PriceSample

logger = get_logger(__name__)

DEFAULT_CAPACITY = 1000


class RestoreOutcome(str, Enum):
    """Result of restoring the price history at startup."""

    RESTORED = "restored"  # Snapshot loaded
    FRESH = "fresh"  # No snapshot present
    DEGRADED = "degraded"  # Snapshot present but unreadable or malformed


class PriceStore:
    """Per-instrument rolling price history with snapshot persistence.

    Args:
        storage: Whole-document snapshot storage.
        capacity: Maximum samples retained per instrument.
    """

    def __init__(self, storage: SnapshotStorage, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._storage = storage
        self._capacity = capacity
        self._history: dict[str, deque[PriceSample]] = {}
        self._restore_outcome: RestoreOutcome | None = None

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def restore_outcome(self) -> RestoreOutcome | None:
        """Outcome of the last restore(), or None if restore() was never called."""
        return self._restore_outcome

    @property
    def degraded(self) -> bool:
        """True if the last restore found a snapshot it could not use."""
        return self._restore_outcome is RestoreOutcome.DEGRADED

    def instruments(self) -> list[str]:
        return list(self._history)

    def size(self, instrument_id: str) -> int:
        history = self._history.get(instrument_id)
        return len(history) if history is not None else 0

    def window(self, instrument_id: str, n: int) -> list[PriceSample]:
        """Return the most recent ``min(n, length)`` samples, oldest-first.

        Unknown instruments (and ``n <= 0``) yield an empty list.
        """
        history = self._history.get(instrument_id)
        if history is None or n <= 0:
            return []
        return list(history)[-n:]

    def latest(self, instrument_id: str) -> PriceSample | None:
        history = self._history.get(instrument_id)
        return history[-1] if history else None

    def snapshot(self) -> Snapshot:
        """Return a plain-dict copy of the full history."""
        return {key: list(samples) for key, samples in self._history.items()}

    async def append(self, instrument_id: str, sample: PriceSample) -> None:
        """Append a sample, evict beyond capacity, then persist the full snapshot.

        Raises:
            ValueError: If the sample does not belong to ``instrument_id``, has a
                non-positive price, or is older than the latest stored sample.
                Nothing is mutated in that case.
            PersistenceError: If the snapshot write fails. The append and
                eviction have already taken effect.
        """
        if sample.instrument_id != instrument_id:
            raise ValueError(
                f"Sample instrument {sample.instrument_id} does not match {instrument_id}"
            )
        if not sample.price.is_finite() or sample.price <= 0:
            raise ValueError(f"Price must be positive and finite, got {sample.price}")

        history = self._history.get(instrument_id)
        if history and sample.timestamp < history[-1].timestamp:
            raise ValueError(
                f"Out-of-order sample for {instrument_id}: "
                f"{sample.timestamp} < {history[-1].timestamp}"
            )

        if history is None:
            history = deque()
            self._history[instrument_id] = history
        history.append(sample)
        while len(history) > self._capacity:
            history.popleft()

        await asyncio.to_thread(self._storage.save_snapshot, self.snapshot())

    async def restore(self) -> RestoreOutcome:
        """Load the persisted history, falling back to an empty history.

        Never raises for a missing or malformed snapshot: the outcome tells
        the caller whether continuity was preserved.
        """
        try:
            snapshot = await asyncio.to_thread(self._storage.load_snapshot)
        except PersistenceError as e:
            logger.warning(
                "price_history_unreadable",
                category=LogCategory.ERROR,
                error=str(e),
            )
            self._history = {}
            self._restore_outcome = RestoreOutcome.DEGRADED
            return self._restore_outcome

        if snapshot is None:
            self._history = {}
            self._restore_outcome = RestoreOutcome.FRESH
            return self._restore_outcome

        restored: dict[str, deque[PriceSample]] = {}
        for instrument_id, samples in snapshot.items():
            if any(s.instrument_id != instrument_id for s in samples):
                logger.warning(
                    "price_history_instrument_mismatch",
                    category=LogCategory.ERROR,
                    instrument_id=instrument_id,
                )
                self._history = {}
                self._restore_outcome = RestoreOutcome.DEGRADED
                return self._restore_outcome

            timestamps = [s.timestamp for s in samples]
            if timestamps != sorted(timestamps):
                logger.warning(
                    "price_history_out_of_order",
                    category=LogCategory.ERROR,
                    instrument_id=instrument_id,
                )
                self._history = {}
                self._restore_outcome = RestoreOutcome.DEGRADED
                return self._restore_outcome
            restored[instrument_id] = deque(samples[-self._capacity:])

        self._history = restored
        self._restore_outcome = RestoreOutcome.RESTORED
        return self._restore_outcome

"""Rolling price history: bounded per-instrument store and JSON snapshots."""

from meanrev.history.snapshot import JsonSnapshotStorage, SnapshotStorage
from meanrev.history.store import DEFAULT_CAPACITY, PriceStore, RestoreOutcome

__all__ = [
    "DEFAULT_CAPACITY",
    "JsonSnapshotStorage",
    "PriceStore",
    "RestoreOutcome",
    "SnapshotStorage",
]

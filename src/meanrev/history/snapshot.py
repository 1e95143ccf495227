"""Durable whole-document storage for the price history.

The snapshot is a single JSON object mapping instrument id to a list of
samples ordered oldest-first. Every save rewrites the full document; there
are no partial updates and no schema versioning. Prices are stored as
strings so Decimal values survive the round-trip exactly.
"""

import json
import os
from abc import ABC, abstractmethod
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

from meanrev.exceptions import PersistenceError
from meanrev.models import PriceSample

Snapshot = dict[str, list[PriceSample]]


def sample_to_dict(sample: PriceSample) -> dict[str, Any]:
    """Serialize a PriceSample to a JSON-compatible dict."""
    return {
        "timestamp": sample.timestamp,
        "price": str(sample.price),
        "instrument_id": sample.instrument_id,
        "symbol": sample.symbol,
    }


def sample_from_dict(data: Any, instrument_id: str) -> PriceSample:
    """Parse one persisted sample.

    Raises:
        PersistenceError: If the entry is not a well-formed sample.
    """
    if not isinstance(data, dict):
        raise PersistenceError(f"Sample for {instrument_id} is not an object: {data!r}")

    timestamp = data.get("timestamp")
    if isinstance(timestamp, bool) or not isinstance(timestamp, int):
        raise PersistenceError(f"Invalid timestamp for {instrument_id}: {timestamp!r}")

    try:
        price = Decimal(str(data["price"]))
    except (KeyError, InvalidOperation) as e:
        raise PersistenceError(f"Invalid price for {instrument_id}: {data.get('price')!r}") from e
    if not price.is_finite() or price <= 0:
        raise PersistenceError(f"Non-positive price for {instrument_id}: {price}")

    return PriceSample(
        timestamp=timestamp,
        price=price,
        instrument_id=str(data.get("instrument_id", instrument_id)),
        symbol=str(data.get("symbol", "")),
    )


class SnapshotStorage(ABC):
    """Abstract whole-document snapshot storage."""

    @abstractmethod
    def load_snapshot(self) -> Snapshot | None:
        """Return the persisted mapping, or None if nothing has been saved.

        Raises:
            PersistenceError: If a snapshot exists but cannot be read or parsed.
        """
        ...

    @abstractmethod
    def save_snapshot(self, snapshot: Snapshot) -> None:
        """Overwrite the persisted mapping with ``snapshot``.

        Raises:
            PersistenceError: If the write fails.
        """
        ...


class JsonSnapshotStorage(SnapshotStorage):
    """Snapshot storage backed by a single JSON file.

    Writes go to a temporary sibling file which then replaces the target,
    so an interrupted write never leaves a truncated snapshot behind.

    Args:
        path: Location of the JSON snapshot file.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        """Location of the snapshot file."""
        return self._path

    def load_snapshot(self) -> Snapshot | None:
        if not self._path.exists():
            return None

        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Cannot read snapshot {self._path}: {e}") from e

        if not isinstance(raw, dict):
            raise PersistenceError(f"Snapshot {self._path} is not a JSON object")

        snapshot: Snapshot = {}
        for instrument_id, entries in raw.items():
            if not isinstance(entries, list):
                raise PersistenceError(
                    f"Snapshot entry for {instrument_id} is not a list"
                )
            snapshot[instrument_id] = [
                sample_from_dict(entry, instrument_id) for entry in entries
            ]
        return snapshot

    def save_snapshot(self, snapshot: Snapshot) -> None:
        document = {
            instrument_id: [sample_to_dict(s) for s in samples]
            for instrument_id, samples in snapshot.items()
        }
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(document, indent=2), encoding="utf-8")
            os.replace(tmp_path, self._path)
        except OSError as e:
            raise PersistenceError(f"Cannot write snapshot {self._path}: {e}") from e

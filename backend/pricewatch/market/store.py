"""Append-only SQLite store of price samples."""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from threading import Lock

from ..core.models import Sample
from ..errors import StoreError

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS price_sample (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    symbol TEXT NOT NULL,
    price REAL NOT NULL,
    timestamp REAL NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_price_sample_symbol_ts ON price_sample (symbol, timestamp);
"""


def _to_epoch(timestamp: datetime) -> float:
    if timestamp.tzinfo is None:
        raise ValueError("timestamp must be timezone-aware")
    return timestamp.timestamp()


def _from_epoch(seconds: float) -> datetime:
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


class SampleStore:
    """Thread-safe append-only log of (price, timestamp) samples per symbol.

    Timestamps are stored as Unix seconds so range queries compare numerically.
    Samples are never updated or deleted. Every sqlite3 failure surfaces as
    StoreError.
    """

    def __init__(self, path: str = ":memory:", symbol: str = "XBT") -> None:
        self._path = path
        self._symbol = symbol
        self._lock = Lock()
        try:
            self._conn = sqlite3.connect(path, check_same_thread=False)
            self._conn.executescript(_SCHEMA)
        except sqlite3.Error as e:
            raise StoreError(f"Cannot open sample store {path}: {e}") from e
        logger.info("Sample store opened: %s", path)

    def append_sample(self, price: float, timestamp: datetime, symbol: str | None = None) -> Sample:
        """Persist one sample and return it (timestamp normalized to UTC)."""
        if price <= 0:
            raise ValueError(f"price must be positive, got {price}")
        epoch = _to_epoch(timestamp)
        with self._lock:
            try:
                with self._conn:
                    self._conn.execute(
                        "INSERT INTO price_sample (symbol, price, timestamp) VALUES (?, ?, ?)",
                        (symbol or self._symbol, price, epoch),
                    )
            except sqlite3.Error as e:
                raise StoreError(f"Failed to append sample: {e}") from e
        return Sample(price=price, timestamp=_from_epoch(epoch))

    def query_since(self, start: datetime, symbol: str | None = None) -> list[Sample]:
        """All samples with ``timestamp >= start``, oldest first."""
        return self._select(
            "timestamp >= ?",
            (_to_epoch(start),),
            symbol,
        )

    def query_range(self, start: datetime, end: datetime, symbol: str | None = None) -> list[Sample]:
        """Samples with ``start <= timestamp <= end``, oldest first."""
        return self._select(
            "timestamp >= ? AND timestamp <= ?",
            (_to_epoch(start), _to_epoch(end)),
            symbol,
        )

    def _select(self, condition: str, params: tuple, symbol: str | None) -> list[Sample]:
        query = (
            "SELECT price, timestamp FROM price_sample "
            f"WHERE symbol = ? AND {condition} ORDER BY timestamp, id"
        )
        with self._lock:
            try:
                rows = self._conn.execute(query, (symbol or self._symbol, *params)).fetchall()
            except sqlite3.Error as e:
                raise StoreError(f"Failed to query samples: {e}") from e
        return [Sample(price=price, timestamp=_from_epoch(ts)) for price, ts in rows]

    def close(self) -> None:
        """Close the connection. Safe to call multiple times."""
        with self._lock:
            self._conn.close()
        logger.info("Sample store closed: %s", self._path)

    def __enter__(self) -> SampleStore:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __len__(self) -> int:
        with self._lock:
            try:
                (count,) = self._conn.execute(
                    "SELECT COUNT(*) FROM price_sample WHERE symbol = ?", (self._symbol,)
                ).fetchone()
            except sqlite3.Error as e:
                raise StoreError(f"Failed to count samples: {e}") from e
        return count

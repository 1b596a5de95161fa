"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone

import pytest

from pricewatch.config import Settings
from pricewatch.errors import FetchError
from pricewatch.market.interface import PriceSource
from pricewatch.market.store import SampleStore

T0 = datetime(2024, 2, 10, 12, 0, tzinfo=timezone.utc)


class ScriptedPriceSource(PriceSource):
    """Returns the given prices in order; an Exception item is raised instead."""

    def __init__(self, prices: Iterable[float | Exception]) -> None:
        self._prices = list(prices)
        self.calls: list[str] = []
        self.closed = False

    async def fetch_price(self, symbol: str) -> float:
        self.calls.append(symbol)
        if not self._prices:
            raise FetchError("no more prices")
        item = self._prices.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def settings() -> Settings:
    return Settings(
        symbol="XBT",
        sleep_seconds=60,
        change_threshold_pct=10.0,
        moving_avg_days=1,
        db_path=":memory:",
        price_source="simulator",
        chart_width=10,
        chart_height=5,
        display_timezone="UTC",
        beep=False,
    )


@pytest.fixture
def store():
    with SampleStore(":memory:", symbol="XBT") as s:
        yield s


@pytest.fixture
def t0() -> datetime:
    """Fixed UTC reference time for deterministic windows."""
    return T0


@pytest.fixture
def make_source():
    """Factory for ScriptedPriceSource instances."""
    return ScriptedPriceSource

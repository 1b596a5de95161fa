"""Session loop: fetch, store, classify and render on a fixed interval."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from .config import Settings
from .core import (
    ChartGrid,
    Signal,
    classify,
    render,
    rolling_average,
    trailing_average_series,
    window_size_for,
)
from .errors import FetchError, StoreError
from .market.interface import PriceSource
from .market.store import SampleStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Evaluation:
    """Result of one monitor cycle."""

    symbol: str
    timestamp: datetime
    signal: Signal
    chart: ChartGrid
    window_size: int
    sample_count: int

    def to_dict(self) -> dict:
        return {
            "symbol": self.symbol,
            "timestamp": self.timestamp.isoformat(),
            "signal": self.signal.to_dict(),
            "chart": self.chart.to_dict(),
            "window_size": self.window_size,
            "sample_count": self.sample_count,
        }


class PriceMonitor:
    """Runs the fetch → store → classify → render cycle every ``sleep_seconds``.

    The latest Evaluation is kept in ``latest`` and ``version`` is bumped on
    every successful cycle so readers can detect changes. An optional
    ``on_evaluation`` callback receives each Evaluation as it is produced.
    """

    def __init__(
        self,
        source: PriceSource,
        store: SampleStore,
        settings: Settings,
        on_evaluation: Callable[[Evaluation], None] | None = None,
        interval: float | None = None,
    ) -> None:
        self._source = source
        self._store = store
        self._settings = settings
        self._interval = settings.sleep_seconds if interval is None else interval
        self._on_evaluation = on_evaluation
        self._task: asyncio.Task | None = None
        self._latest: Evaluation | None = None
        self._version: int = 0

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def latest(self) -> Evaluation | None:
        return self._latest

    @property
    def version(self) -> int:
        return self._version

    async def evaluate_once(self, now: datetime | None = None) -> Evaluation:
        """Run a single cycle. FetchError and StoreError propagate to the caller."""
        settings = self._settings
        now = now or datetime.now(timezone.utc)

        price = await self._source.fetch_price(settings.symbol)
        # SQLite and the chart work block; keep them off the event loop.
        evaluation = await asyncio.to_thread(self._record, price, now)

        self._latest = evaluation
        self._version += 1
        logger.debug(
            "%s %.2f avg %.2f diff %.2f%% -> %s",
            settings.symbol,
            price,
            evaluation.signal.moving_average,
            evaluation.signal.percent_change,
            evaluation.signal.action.value,
        )
        if self._on_evaluation:
            self._on_evaluation(evaluation)
        return evaluation

    def _record(self, price: float, now: datetime) -> Evaluation:
        """Store the sample, then classify and chart the window ending at ``now``."""
        settings = self._settings
        self._store.append_sample(price, now)

        window_start = now - settings.window
        samples = self._store.query_range(window_start, now)
        average = rolling_average(samples, window_start)
        signal = classify(
            price,
            average,
            settings.change_threshold_pct,
            holding=settings.holding,
            fee_pct=settings.fee_pct,
        )

        window_size = window_size_for(settings.window, settings.sample_interval)
        prices = [sample.price for sample in samples]
        chart = render(
            prices,
            trailing_average_series(prices, window_size),
            width=settings.chart_width,
            height=settings.chart_height,
        )

        return Evaluation(
            symbol=settings.symbol,
            timestamp=now,
            signal=signal,
            chart=chart,
            window_size=window_size,
            sample_count=len(samples),
        )

    async def start(self) -> None:
        """Start the background loop. Must be called at most once per stop()."""
        self._task = asyncio.create_task(self._run_loop(), name="price-monitor")
        logger.info(
            "Monitor started: %s every %ds, %dd window, %.2f%% threshold",
            self._settings.symbol,
            self._settings.sleep_seconds,
            self._settings.moving_avg_days,
            self._settings.change_threshold_pct,
        )

    async def stop(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        logger.info("Monitor stopped")

    async def run(self) -> None:
        """Start the loop and wait for it to finish (StoreError or cancellation)."""
        await self.start()
        task = self._task
        await task

    async def _run_loop(self) -> None:
        """Core loop: evaluate, sleep. Fetch failures skip the cycle."""
        while True:
            try:
                await self.evaluate_once()
            except FetchError as e:
                logger.warning("Error fetching price: %s", e)
            except StoreError:
                logger.exception("Sample store failed; stopping monitor")
                raise
            await asyncio.sleep(self._interval)

"""Tests for PriceMonitor."""

import asyncio
import threading
from datetime import timedelta

import httpx
import pytest

from pricewatch.core.models import Action, CellKind, Holding
from pricewatch.errors import FetchError, StoreError
from pricewatch.market.kraken import KrakenPriceSource
from pricewatch.market.store import SampleStore
from pricewatch.monitor import PriceMonitor


@pytest.mark.asyncio
class TestEvaluateOnce:
    """A single fetch → store → classify → render cycle."""

    async def test_sell_scenario(self, store, settings, make_source, t0):
        for minutes in (3, 2, 1):
            store.append_sample(100.0, t0 - timedelta(minutes=minutes))
        monitor = PriceMonitor(make_source([130.0]), store, settings)

        evaluation = await monitor.evaluate_once(now=t0)

        signal = evaluation.signal
        assert signal.action is Action.SELL
        assert signal.moving_average == pytest.approx(107.5)
        assert signal.percent_change == pytest.approx(20.93, abs=0.01)
        assert evaluation.sample_count == 4
        assert len(store) == 4

    async def test_chart_uses_window_samples(self, store, settings, make_source, t0):
        for minutes in (3, 2, 1):
            store.append_sample(100.0, t0 - timedelta(minutes=minutes))
        monitor = PriceMonitor(make_source([130.0]), store, settings)

        chart = (await monitor.evaluate_once(now=t0)).chart

        assert (chart.low, chart.high) == (100.0, 130.0)
        assert chart.width == 4
        assert chart.height == settings.chart_height
        assert chart.cells[0][:3] == (CellKind.BOTH,) * 3
        assert chart.cell(4, 3) is CellKind.PRICE
        assert chart.cell(1, 3) is CellKind.AVERAGE

    async def test_window_size_follows_interval(self, store, settings, make_source, t0):
        monitor = PriceMonitor(make_source([100.0]), store, settings)
        evaluation = await monitor.evaluate_once(now=t0)
        assert evaluation.window_size == 24 * 60

    async def test_first_sample_holds(self, store, settings, make_source, t0):
        monitor = PriceMonitor(make_source([100.0]), store, settings)
        evaluation = await monitor.evaluate_once(now=t0)
        assert evaluation.signal.action is Action.HOLD
        assert evaluation.signal.percent_change == 0.0

    async def test_samples_outside_window_are_ignored(self, store, settings, make_source, t0):
        store.append_sample(1000.0, t0 - timedelta(days=2))
        store.append_sample(100.0, t0 - timedelta(hours=1))
        monitor = PriceMonitor(make_source([100.0]), store, settings)

        evaluation = await monitor.evaluate_once(now=t0)

        assert evaluation.signal.moving_average == pytest.approx(100.0)
        assert evaluation.sample_count == 2

    async def test_sell_includes_profit_for_holding(self, store, settings, make_source, t0):
        store.append_sample(100.0, t0 - timedelta(minutes=1))
        settings = settings.with_overrides(holding=Holding(amount=1.0, buy_price=90.0), fee_pct=1.0)
        monitor = PriceMonitor(make_source([150.0]), store, settings)

        evaluation = await monitor.evaluate_once(now=t0)

        assert evaluation.signal.action is Action.SELL
        assert evaluation.signal.profit.profit == pytest.approx(150.0 - 0.9 - 90.0)

    async def test_publishes_latest_and_version(self, store, settings, make_source, t0):
        seen = []
        monitor = PriceMonitor(make_source([100.0, 101.0]), store, settings, on_evaluation=seen.append)
        assert monitor.latest is None
        assert monitor.version == 0

        first = await monitor.evaluate_once(now=t0)
        second = await monitor.evaluate_once(now=t0 + timedelta(minutes=1))

        assert monitor.latest is second
        assert monitor.version == 2
        assert seen == [first, second]

    async def test_fetch_error_propagates_without_storing(self, store, settings, make_source, t0):
        monitor = PriceMonitor(make_source([FetchError("timeout")]), store, settings)
        with pytest.raises(FetchError):
            await monitor.evaluate_once(now=t0)
        assert len(store) == 0
        assert monitor.latest is None

    async def test_store_and_chart_work_runs_off_the_event_loop(self, settings, make_source, t0):
        threads = []

        class RecordingStore(SampleStore):
            def append_sample(self, *args, **kwargs):
                threads.append(threading.get_ident())
                return super().append_sample(*args, **kwargs)

        with RecordingStore(":memory:") as store:
            monitor = PriceMonitor(make_source([100.0]), store, settings)
            await monitor.evaluate_once(now=t0)

        assert threads and threads[0] != threading.get_ident()
        assert monitor.version == 1

    async def test_to_dict(self, store, settings, make_source, t0):
        monitor = PriceMonitor(make_source([100.0]), store, settings)
        data = (await monitor.evaluate_once(now=t0)).to_dict()
        assert data["symbol"] == "XBT"
        assert data["signal"]["action"] == "HOLD"
        assert len(data["chart"]["rows"]) == settings.chart_height


@pytest.mark.asyncio
class TestMonitorLoop:
    """Background loop behavior."""

    async def test_loop_skips_failed_fetches(self, store, settings, make_source):
        source = make_source([FetchError("down"), 100.0, 101.0])
        monitor = PriceMonitor(source, store, settings, interval=0.01)

        await monitor.start()
        await asyncio.sleep(0.2)
        await monitor.stop()

        assert monitor.version == 2
        assert len(store) == 2
        assert len(source.calls) >= 3

    async def test_loop_survives_malformed_kraken_payload(self, store, settings):
        payloads = iter(
            [
                {"error": [], "result": "oops"},
                {"error": [], "result": {"XXBTZUSD": {"c": 5}}},
                {"error": [], "result": {"XXBTZUSD": {"c": ["65000.0", "0.1"]}}},
            ]
        )

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=next(payloads, {"error": ["EService:Unavailable"]}))

        source = KrakenPriceSource(transport=httpx.MockTransport(handler))
        monitor = PriceMonitor(source, store, settings, interval=0.01)

        await monitor.start()
        await asyncio.sleep(0.2)
        await monitor.stop()
        await source.close()

        assert monitor.version == 1
        assert monitor.latest.signal.current_price == 65000.0
        assert len(store) == 1

    async def test_store_error_stops_loop(self, settings, make_source):
        store = SampleStore(":memory:")
        store.close()
        monitor = PriceMonitor(make_source([100.0]), store, settings, interval=0.01)

        with pytest.raises(StoreError):
            await monitor.run()

    async def test_stop_is_idempotent(self, store, settings, make_source):
        monitor = PriceMonitor(make_source([]), store, settings, interval=0.01)
        await monitor.start()
        await monitor.stop()
        await monitor.stop()  # Should not raise

    async def test_stop_before_start(self, store, settings, make_source):
        monitor = PriceMonitor(make_source([]), store, settings)
        await monitor.stop()  # Should not raise

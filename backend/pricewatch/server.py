"""FastAPI application running the monitor in the background."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .config import Settings
from .market.factory import create_price_source
from .market.store import SampleStore
from .monitor import PriceMonitor
from .stream import create_stream_router

logger = logging.getLogger(__name__)


def create_app(settings: Settings) -> FastAPI:
    """Wire store, price source and monitor into an app.

    The monitor starts with the app and is stopped, with the source and store
    closed, on shutdown.
    """
    store = SampleStore(settings.db_path, symbol=settings.symbol)
    source = create_price_source(settings)
    monitor = PriceMonitor(source, store, settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await monitor.start()
        try:
            yield
        finally:
            await monitor.stop()
            await source.close()
            store.close()

    app = FastAPI(title="pricewatch", lifespan=lifespan)
    app.state.monitor = monitor
    app.include_router(create_stream_router(monitor))
    return app

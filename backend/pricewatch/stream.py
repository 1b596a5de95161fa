"""HTTP and SSE endpoints for the latest monitor evaluation."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncGenerator

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import StreamingResponse

from .monitor import Evaluation, PriceMonitor

logger = logging.getLogger(__name__)

# Milliseconds an EventSource waits before reconnecting.
RECONNECT_MS = 1000

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def create_stream_router(monitor: PriceMonitor) -> APIRouter:
    """Routes reading from ``monitor``; every app gets a fresh router."""
    router = APIRouter(prefix="/api", tags=["signal"])

    @router.get("/signal")
    async def get_signal() -> dict:
        """Latest evaluation: signal, chart rows and legend bounds."""
        evaluation = monitor.latest
        if evaluation is None:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="No evaluation yet",
            )
        return evaluation.to_dict()

    @router.get("/stream/signal")
    async def stream_signal(request: Request) -> StreamingResponse:
        """Server-sent events, one ``data:`` line per published evaluation."""
        return StreamingResponse(
            _generate_events(monitor, request),
            media_type="text/event-stream",
            headers=SSE_HEADERS,
        )

    return router


def _format_event(evaluation: Evaluation) -> str:
    return f"data: {json.dumps(evaluation.to_dict())}\n\n"


async def _generate_events(
    monitor: PriceMonitor,
    request: Request,
    interval: float = 1.0,
) -> AsyncGenerator[str, None]:
    """Poll ``monitor.version`` and emit the evaluation each time it moves.

    Ends once the client has gone away.
    """
    yield f"retry: {RECONNECT_MS}\n\n"

    peer = request.client.host if request.client else "unknown"
    logger.info("Signal stream opened for %s", peer)
    sent_version = -1

    try:
        while not await request.is_disconnected():
            version = monitor.version
            evaluation = monitor.latest
            if version != sent_version and evaluation is not None:
                sent_version = version
                yield _format_event(evaluation)
            await asyncio.sleep(interval)
        logger.info("Signal stream closed by %s", peer)
    except asyncio.CancelledError:
        logger.info("Signal stream cancelled for %s", peer)

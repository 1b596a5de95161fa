"""Kraken public REST API client for spot prices."""

from __future__ import annotations

import logging
import math
from typing import Any

import httpx

from ..errors import FetchError
from .interface import PriceSource

logger = logging.getLogger(__name__)

KRAKEN_API_URL = "https://api.kraken.com"

# Kraken names Bitcoin XBT; everything else uses the common code.
SYMBOL_ALIASES: dict[str, str] = {
    "BTC": "XBT",
}


def kraken_pair(symbol: str) -> str:
    """Kraken pair name quoted in USD, e.g. ``BTC`` -> ``XXBTZUSD``."""
    code = symbol.upper().strip()
    code = SYMBOL_ALIASES.get(code, code)
    return f"X{code}ZUSD"


def parse_ticker_price(payload: Any) -> float:
    """Extract the last trade price from a Kraken Ticker response body.

    The response looks like ``{"error": [], "result": {"XXBTZUSD": {"c": ["price", "volume"], ...}}}``.
    Any other shape raises FetchError.
    """
    if not isinstance(payload, dict):
        raise FetchError(f"Unexpected Kraken response: {payload!r}")

    errors = payload.get("error") or []
    if errors:
        if not isinstance(errors, (list, tuple)):
            errors = [errors]
        raise FetchError(f"Kraken error: {', '.join(map(str, errors))}")

    result = payload.get("result") or {}
    if not isinstance(result, dict):
        raise FetchError(f"Unexpected Kraken result: {result!r}")

    for ticker in result.values():
        last_trade = ticker.get("c") if isinstance(ticker, dict) else None
        if not last_trade:
            continue
        if not isinstance(last_trade, (list, tuple)):
            raise FetchError(f"Malformed Kraken last trade {last_trade!r}")
        raw_price = last_trade[0]
        try:
            price = float(raw_price)
        except (TypeError, ValueError) as e:
            raise FetchError(f"Malformed Kraken price {raw_price!r}") from e
        if not math.isfinite(price) or price <= 0:
            raise FetchError(f"Kraken returned unusable price {price}")
        return price

    raise FetchError(f"Price not found in Kraken response: {payload!r}")


class KrakenPriceSource(PriceSource):
    """PriceSource backed by Kraken's public Ticker endpoint.

    No API key is needed. One GET per fetch:
        /0/public/Ticker?pair=X{code}ZUSD
    """

    def __init__(
        self,
        base_url: str = KRAKEN_API_URL,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def fetch_price(self, symbol: str) -> float:
        pair = kraken_pair(symbol)
        try:
            response = await self._client.get("/0/public/Ticker", params={"pair": pair})
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            raise FetchError(f"Kraken request for {pair} failed: {e}") from e
        except ValueError as e:
            raise FetchError(f"Kraken returned invalid JSON for {pair}") from e

        price = parse_ticker_price(payload)
        logger.debug("Kraken %s: %.2f", pair, price)
        return price

    async def close(self) -> None:
        await self._client.aclose()

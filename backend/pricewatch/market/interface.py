"""Abstract interface for spot price sources."""

from __future__ import annotations

from abc import ABC, abstractmethod


class PriceSource(ABC):
    """Contract for spot price providers.

    The monitor asks the source for one price per cycle; it never caches or
    retries. Implementations raise FetchError for anything that prevents
    returning a positive price.

    Lifecycle:
        source = create_price_source(settings)
        price = await source.fetch_price("XBT")
        # ... one call per monitor cycle ...
        await source.close()
    """

    @abstractmethod
    async def fetch_price(self, symbol: str) -> float:
        """Return the latest spot price for ``symbol`` in USD.

        Raises FetchError on network failures or unusable responses.
        """

    @abstractmethod
    async def close(self) -> None:
        """Release resources (HTTP connections). Safe to call multiple times."""

"""Factory for creating price sources."""

from __future__ import annotations

import logging

from ..config import Settings
from .interface import PriceSource

logger = logging.getLogger(__name__)


def create_price_source(settings: Settings) -> PriceSource:
    """Create the price source named by ``settings.price_source``.

    - "kraken"    → KrakenPriceSource (real spot prices, no key needed)
    - "simulator" → SimulatorPriceSource (GBM simulation, offline)
    """
    source = settings.price_source.strip().lower()

    if source == "kraken":
        from .kraken import KrakenPriceSource

        logger.info("Price source: Kraken public API")
        return KrakenPriceSource()
    if source == "simulator":
        from .simulator import SimulatorPriceSource

        logger.info("Price source: GBM simulator")
        return SimulatorPriceSource()

    raise ValueError(f"Unknown price source: {settings.price_source!r}")

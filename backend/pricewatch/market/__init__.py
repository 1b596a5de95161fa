"""Price sources and sample storage for pricewatch.

Public API:
    PriceSource           - Abstract interface for spot price providers
    KrakenPriceSource     - Kraken public Ticker endpoint
    SimulatorPriceSource  - Offline GBM price simulation
    SampleStore           - Append-only SQLite sample log
    create_price_source   - Factory that selects Kraken or the simulator
"""

from .factory import create_price_source
from .interface import PriceSource
from .kraken import KrakenPriceSource
from .simulator import SimulatorPriceSource
from .store import SampleStore

__all__ = [
    "PriceSource",
    "KrakenPriceSource",
    "SimulatorPriceSource",
    "SampleStore",
    "create_price_source",
]

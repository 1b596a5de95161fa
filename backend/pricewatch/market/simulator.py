"""GBM-based spot price simulator for offline runs."""

from __future__ import annotations

import logging
import math
import random

import numpy as np

from .interface import PriceSource
from .seed_prices import ASSET_PARAMS, DEFAULT_PARAMS, SEED_PRICES, UNKNOWN_PRICE_RANGE

logger = logging.getLogger(__name__)


class GBMSimulator:
    """Geometric Brownian Motion simulator for independent asset prices.

    Math:
        S(t+dt) = S(t) * exp((mu - sigma^2/2) * dt + sigma * sqrt(dt) * Z)

    Where:
        S(t)   = current price
        mu     = annualized drift (expected return)
        sigma  = annualized volatility
        dt     = time step as fraction of a year
        Z      = standard normal random variable

    Crypto markets never close, so a year is 365 days of 24 hours.
    """

    SECONDS_PER_YEAR = 365 * 24 * 3600  # 31,536,000
    DEFAULT_DT = 60 / SECONDS_PER_YEAR  # one-minute steps, ~1.9e-6

    def __init__(
        self,
        dt: float = DEFAULT_DT,
        event_probability: float = 0.001,
        seed: int | None = None,
    ) -> None:
        self._dt = dt
        self._event_prob = event_probability
        self._rng = np.random.default_rng(seed)
        self._random = random.Random(seed)
        self._prices: dict[str, float] = {}
        self._params: dict[str, dict[str, float]] = {}

    def step(self, symbol: str) -> float:
        """Advance ``symbol`` by one time step and return its new price."""
        if symbol not in self._prices:
            self._add_symbol(symbol)

        params = self._params[symbol]
        mu = params["mu"]
        sigma = params["sigma"]

        drift = (mu - 0.5 * sigma**2) * self._dt
        diffusion = sigma * math.sqrt(self._dt) * self._rng.standard_normal()
        self._prices[symbol] *= math.exp(drift + diffusion)

        # Random event: occasional 2-5% jump to exercise the BUY/SELL bands
        if self._random.random() < self._event_prob:
            shock_magnitude = self._random.uniform(0.02, 0.05)
            shock_sign = self._random.choice([-1, 1])
            self._prices[symbol] *= 1 + shock_magnitude * shock_sign
            logger.debug(
                "Random event on %s: %.1f%% %s",
                symbol,
                shock_magnitude * 100,
                "up" if shock_sign > 0 else "down",
            )

        return round(self._prices[symbol], 2)

    def get_price(self, symbol: str) -> float | None:
        """Current price for a symbol, or None if it has never been stepped."""
        return self._prices.get(symbol)

    def _add_symbol(self, symbol: str) -> None:
        self._prices[symbol] = SEED_PRICES.get(symbol, self._random.uniform(*UNKNOWN_PRICE_RANGE))
        self._params[symbol] = ASSET_PARAMS.get(symbol, dict(DEFAULT_PARAMS))


class SimulatorPriceSource(PriceSource):
    """PriceSource backed by the GBM simulator; every fetch is one step."""

    def __init__(
        self,
        event_probability: float = 0.001,
        seed: int | None = None,
    ) -> None:
        self._sim = GBMSimulator(event_probability=event_probability, seed=seed)

    async def fetch_price(self, symbol: str) -> float:
        return self._sim.step(symbol.upper().strip())

    async def close(self) -> None:
        logger.debug("Simulator price source closed")

"""Seed prices and per-asset parameters for the offline price simulator."""

# Rough USD starting prices, keyed by the symbols the monitor is configured with
SEED_PRICES: dict[str, float] = {
    "XBT": 65000.00,
    "BTC": 65000.00,
    "ETH": 3200.00,
    "LTC": 85.00,
    "SOL": 150.00,
    "XRP": 0.55,
}

# Per-asset GBM parameters
# sigma: annualized volatility (crypto trades around the clock, so these are high)
# mu: annualized drift / expected return
ASSET_PARAMS: dict[str, dict[str, float]] = {
    "XBT": {"sigma": 0.60, "mu": 0.10},
    "BTC": {"sigma": 0.60, "mu": 0.10},
    "ETH": {"sigma": 0.75, "mu": 0.10},
    "LTC": {"sigma": 0.85, "mu": 0.05},
    "SOL": {"sigma": 1.00, "mu": 0.10},
    "XRP": {"sigma": 0.90, "mu": 0.05},
}

# Default parameters for symbols not listed above
DEFAULT_PARAMS: dict[str, float] = {"sigma": 0.80, "mu": 0.05}

# Starting price range for unknown symbols
UNKNOWN_PRICE_RANGE: tuple[float, float] = (50.0, 300.0)

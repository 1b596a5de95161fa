"""pricewatch: spot price sampling with a moving-average signal and text chart."""

__version__ = "0.1.0"

"""Signal generation and chart rendering core.

Public API:
    rolling_average          - Mean price of the samples inside a time window
    trailing_average_series  - Per-index trailing mean used for the chart overlay
    classify                 - BUY / SELL / HOLD from price vs. moving average
    estimate_profit          - Net profit of selling a holding at a price
    render                   - Price + average series quantized onto a ChartGrid
"""

from .chart import downsample_indices, render
from .classifier import classify, estimate_profit, percent_change
from .models import Action, CellKind, ChartGrid, Holding, ProfitEstimate, Sample, Signal
from .moving_average import rolling_average, trailing_average_series, window_size_for

__all__ = [
    "Action",
    "CellKind",
    "ChartGrid",
    "Holding",
    "ProfitEstimate",
    "Sample",
    "Signal",
    "classify",
    "downsample_indices",
    "estimate_profit",
    "percent_change",
    "render",
    "rolling_average",
    "trailing_average_series",
    "window_size_for",
]

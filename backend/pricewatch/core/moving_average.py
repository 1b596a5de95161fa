"""Moving average calculations over sample windows and price series."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta

from .models import Sample


def rolling_average(samples: Sequence[Sample], window_start: datetime) -> float | None:
    """Mean price of the samples at or after ``window_start``.

    Returns None when no sample falls inside the window. Callers must treat
    that as insufficient data, not as a zero average.
    """
    total = 0.0
    count = 0
    for sample in samples:
        if sample.timestamp >= window_start:
            total += sample.price
            count += 1
    if count == 0:
        return None
    return total / count


def trailing_average_series(prices: Sequence[float], window_size: int) -> list[float]:
    """Mean of the last ``min(window_size, i + 1)`` prices for every index ``i``.

    The window grows from a single price at the start of the series until it
    reaches ``window_size``; the output has the same length as the input.
    Runs in O(n) with a running sum.
    """
    if window_size < 1:
        raise ValueError("window_size must be >= 1")

    result: list[float] = []
    total = 0.0
    for i, price in enumerate(prices):
        total += price
        if i >= window_size:
            total -= prices[i - window_size]
        result.append(total / min(i + 1, window_size))
    return result


def window_size_for(window: timedelta, sample_interval: timedelta) -> int:
    """Number of samples a time window spans at the given sampling interval."""
    if sample_interval <= timedelta(0):
        raise ValueError("sample_interval must be positive")
    return max(1, int(window / sample_interval))

"""Quantize a price series and its rolling average onto a fixed-size grid."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from .models import CellKind, ChartGrid


def downsample_indices(length: int, width: int) -> list[int]:
    """Indices of the points plotted when ``length`` values share ``width`` columns.

    Takes every ``length // width``-th index starting at 0 (every index when the
    series already fits), never more than ``width`` of them.
    """
    if width < 1:
        raise ValueError("width must be >= 1")
    step = length // width if length > width else 1
    return list(range(0, length, step))[:width]


def _levels(values: np.ndarray, low: float, high: float, height: int) -> np.ndarray:
    """Row index for each value; 0 everywhere when the range is flat."""
    if high == low:
        return np.zeros(len(values), dtype=int)
    normalized = (values - low) / (high - low)
    return np.floor(normalized * (height - 1)).astype(int)


def render(
    prices: Sequence[float],
    averages: Sequence[float],
    width: int,
    height: int,
) -> ChartGrid:
    """Build the chart grid for ``prices`` overlaid with ``averages``.

    Both series are downsampled with the same index set. The vertical scale is
    the min/max of the plotted prices only; averages falling outside it are
    not drawn. A cell where price and average land on the same row is BOTH.
    """
    if height < 1:
        raise ValueError("height must be >= 1")
    if len(prices) != len(averages):
        raise ValueError(
            f"prices and averages differ in length ({len(prices)} != {len(averages)})"
        )

    indices = downsample_indices(len(prices), width)
    if not indices:
        empty_rows = tuple(() for _ in range(height))
        return ChartGrid(cells=empty_rows, low=0.0, high=0.0)

    price_points = np.asarray([prices[i] for i in indices], dtype=float)
    average_points = np.asarray([averages[i] for i in indices], dtype=float)
    low = float(price_points.min())
    high = float(price_points.max())

    price_levels = _levels(price_points, low, high, height)
    average_levels = _levels(average_points, low, high, height)

    rows = []
    for y in range(height):
        row = []
        for price_level, average_level in zip(price_levels, average_levels):
            if price_level == y and average_level == y:
                row.append(CellKind.BOTH)
            elif price_level == y:
                row.append(CellKind.PRICE)
            elif average_level == y:
                row.append(CellKind.AVERAGE)
            else:
                row.append(CellKind.EMPTY)
        rows.append(tuple(row))

    return ChartGrid(
        cells=tuple(rows),
        low=low,
        high=high,
        price_levels=tuple(int(level) for level in price_levels),
        average_levels=tuple(int(level) for level in average_levels),
    )

"""Data models for samples, signals and chart grids."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


@dataclass(frozen=True, slots=True)
class Sample:
    """Immutable price observation at a UTC point in time."""

    price: float
    timestamp: datetime

    def to_dict(self) -> dict:
        return {"price": self.price, "timestamp": self.timestamp.isoformat()}


class Action(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


@dataclass(frozen=True, slots=True)
class Holding:
    """A previously recorded purchase: how much was bought and at what price."""

    amount: float
    buy_price: float


@dataclass(frozen=True, slots=True)
class ProfitEstimate:
    """What selling a holding at the current price would return, net of fees."""

    amount: float
    buy_value: float
    fee: float
    sell_value: float
    profit: float

    def to_dict(self) -> dict:
        return {
            "amount": self.amount,
            "buy_value": self.buy_value,
            "fee": self.fee,
            "sell_value": self.sell_value,
            "profit": self.profit,
        }


@dataclass(frozen=True, slots=True)
class Signal:
    """Trading recommendation derived from the current price and moving average."""

    action: Action
    current_price: float
    moving_average: float
    percent_change: float
    recommendation: str = ""
    profit: ProfitEstimate | None = None

    def to_dict(self) -> dict:
        """Serialize for JSON / SSE transmission."""
        return {
            "action": self.action.value,
            "current_price": self.current_price,
            "moving_average": self.moving_average,
            "percent_change": round(self.percent_change, 4),
            "recommendation": self.recommendation,
            "profit": self.profit.to_dict() if self.profit else None,
        }


class CellKind(Enum):
    EMPTY = " "
    PRICE = "P"
    AVERAGE = "A"
    BOTH = "B"


@dataclass(frozen=True, slots=True)
class ChartGrid:
    """Categorized character grid for a price series and its rolling average.

    ``cells[y][x]`` holds the category of row ``y`` and column ``x``. Row 0 is
    the bottom of the chart (lowest value), row ``height - 1`` the top.
    ``low``/``high`` are the legend bounds taken from the plotted prices.
    """

    cells: tuple[tuple[CellKind, ...], ...]
    low: float
    high: float
    price_levels: tuple[int, ...] = ()
    average_levels: tuple[int, ...] = ()

    @property
    def height(self) -> int:
        return len(self.cells)

    @property
    def width(self) -> int:
        return len(self.cells[0]) if self.cells else 0

    def cell(self, y: int, x: int) -> CellKind:
        return self.cells[y][x]

    def rows_top_down(self) -> list[tuple[CellKind, ...]]:
        """Rows in display order, highest value first."""
        return list(reversed(self.cells))

    def to_dict(self) -> dict:
        return {
            "low": self.low,
            "high": self.high,
            "rows": ["".join(kind.value for kind in row) for row in self.rows_top_down()],
        }

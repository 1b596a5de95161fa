"""Colorized terminal output for monitor evaluations."""

from __future__ import annotations

import sys
from typing import TextIO
from zoneinfo import ZoneInfo

from colorama import Fore, Style

from .config import Settings
from .core import Action, CellKind, ChartGrid
from .monitor import Evaluation

RULE = "─" * 105
POINT = "•"
LINE = "─"

PRICE_COLOR = Fore.WHITE
AVERAGE_COLOR = Fore.GREEN
BOTH_COLOR = Fore.YELLOW

_CELL_TEXT: dict[CellKind, str] = {
    CellKind.PRICE: f"{PRICE_COLOR}{POINT}{Style.RESET_ALL}",
    CellKind.AVERAGE: f"{AVERAGE_COLOR}{LINE}{Style.RESET_ALL}",
    CellKind.BOTH: f"{BOTH_COLOR}{POINT}{Style.RESET_ALL}",
    CellKind.EMPTY: " ",
}


def format_header(evaluation: Evaluation, settings: Settings) -> str:
    signal = evaluation.signal
    local_time = evaluation.timestamp.astimezone(ZoneInfo(settings.display_timezone))
    header = (
        f"{local_time:%Y-%m-%d %H:%M:%S %Z} - {evaluation.symbol} ${signal.current_price:,.2f}, "
        f"{settings.moving_avg_days}d avg ${signal.moving_average:,.2f}, "
        f"diff {signal.percent_change:.2f}% {signal.recommendation}"
    )
    return header.rstrip()


def format_profit(evaluation: Evaluation) -> str | None:
    profit = evaluation.signal.profit
    if profit is None:
        return None
    return (
        f"Amount {profit.amount:.10f}, Buy Value: ${profit.buy_value:,.4f}, "
        f"Transaction Fee: ${profit.fee:,.4f}, Sell Value: ${profit.sell_value:,.4f}, "
        f"Profit: ${profit.profit:,.4f}"
    )


def format_legend(chart: ChartGrid, settings: Settings) -> str:
    return (
        f"Price: {PRICE_COLOR}{POINT}{Style.RESET_ALL} "
        f"{settings.moving_avg_days}d MA: {AVERAGE_COLOR}{POINT}{Style.RESET_ALL} "
        f"Both: {BOTH_COLOR}{POINT}{Style.RESET_ALL}  "
        f"High ${chart.high:,.2f} Low ${chart.low:,.2f}"
    )


def format_chart(chart: ChartGrid) -> str:
    """Chart rows, top row first."""
    return "\n".join("".join(_CELL_TEXT[kind] for kind in row) for row in chart.rows_top_down())


def format_evaluation(evaluation: Evaluation, settings: Settings) -> str:
    """The full block printed for one cycle."""
    lines = [RULE, format_header(evaluation, settings)]
    profit = format_profit(evaluation)
    if profit:
        lines.append(profit)
    lines.append(RULE)
    lines.append(format_legend(evaluation.chart, settings))
    if evaluation.chart.width:
        lines.append(format_chart(evaluation.chart))
    lines.append(RULE)
    return "\n".join(lines) + "\n"


def print_evaluation(
    evaluation: Evaluation,
    settings: Settings,
    stream: TextIO | None = None,
) -> None:
    """Write the evaluation block; ring the terminal bell on SELL when enabled."""
    out = stream or sys.stdout
    out.write(format_evaluation(evaluation, settings))
    if settings.beep and evaluation.signal.action is Action.SELL:
        out.write("\a")
    out.flush()

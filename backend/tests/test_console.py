"""Tests for the console formatter."""

import io
from datetime import datetime, timezone

from colorama import Fore

from pricewatch.console import format_chart, format_evaluation, format_header, print_evaluation
from pricewatch.core import Holding, classify, render
from pricewatch.monitor import Evaluation

NOW = datetime(2024, 2, 10, 17, 30, tzinfo=timezone.utc)


def _evaluation(price=130.0, average=107.5, holding=None) -> Evaluation:
    return Evaluation(
        symbol="XBT",
        timestamp=NOW,
        signal=classify(price, average, 10.0, holding=holding, fee_pct=1.0),
        chart=render([100.0, 100.0, 100.0, price], [100.0, 100.0, 100.0, average], 10, 5),
        window_size=1440,
        sample_count=4,
    )


class TestFormatEvaluation:
    """Tests for the per-cycle text block."""

    def test_header_line(self, settings):
        header = format_header(_evaluation(), settings)
        assert header == "2024-02-10 17:30:00 UTC - XBT $130.00, 1d avg $107.50, diff 20.93% ** SELL **"

    def test_header_uses_display_timezone(self, settings):
        settings = settings.with_overrides(display_timezone="America/New_York")
        assert format_header(_evaluation(), settings).startswith("2024-02-10 12:30:00 EST")

    def test_hold_header_has_no_recommendation(self, settings):
        header = format_header(_evaluation(price=108.0), settings)
        assert header.endswith("diff 0.47%")

    def test_thousands_separator(self, settings):
        header = format_header(_evaluation(price=116438.805, average=110000.0), settings)
        assert "$116,438.80" in header or "$116,438.81" in header

    def test_profit_line_on_sell_with_holding(self, settings):
        text = format_evaluation(_evaluation(holding=Holding(amount=0.5, buy_price=100.0)), settings)
        assert "Buy Value: $50.0000" in text
        assert "Transaction Fee: $0.5000" in text
        assert "Profit: $14.5000" in text

    def test_no_profit_line_without_holding(self, settings):
        assert "Profit" not in format_evaluation(_evaluation(), settings)

    def test_legend_has_bounds(self, settings):
        text = format_evaluation(_evaluation(), settings)
        assert "High $130.00 Low $100.00" in text
        assert "1d MA:" in text

    def test_chart_rows_top_down(self):
        chart = render([1.0, 2.0], [1.0, 1.5], 2, 3)
        lines = format_chart(chart).split("\n")
        assert len(lines) == 3
        assert lines[0].endswith(f"{Fore.WHITE}•\x1b[0m")  # price at the top
        assert lines[1].endswith(f"{Fore.GREEN}─\x1b[0m")  # average in the middle
        assert lines[2].startswith(f"{Fore.YELLOW}•")  # both at the bottom


class TestPrintEvaluation:
    def test_bell_on_sell_when_enabled(self, settings):
        out = io.StringIO()
        print_evaluation(_evaluation(), settings.with_overrides(beep=True), stream=out)
        assert out.getvalue().endswith("\a")

    def test_no_bell_when_disabled(self, settings):
        out = io.StringIO()
        print_evaluation(_evaluation(), settings, stream=out)
        assert "\a" not in out.getvalue()

    def test_no_bell_on_hold(self, settings):
        out = io.StringIO()
        print_evaluation(_evaluation(price=108.0), settings.with_overrides(beep=True), stream=out)
        assert "\a" not in out.getvalue()

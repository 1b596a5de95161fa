"""Runtime settings read from environment variables."""

from __future__ import annotations

import logging
import math
import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from datetime import timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .core.models import Holding

logger = logging.getLogger(__name__)

PRICE_SOURCES = ("kraken", "simulator")


@dataclass(frozen=True, slots=True)
class Settings:
    """Everything the monitor and its presentation need, passed explicitly.

    Build from the environment with ``Settings.from_env()``; override single
    fields with ``settings.with_overrides(...)``.
    """

    symbol: str = "XBT"
    sleep_seconds: int = 60
    change_threshold_pct: float = 10.0
    moving_avg_days: int = 1
    holding: Holding | None = None
    fee_pct: float = 0.0
    db_path: str = "btc_prices.db"
    price_source: str = "kraken"
    chart_width: int = 100
    chart_height: int = 20
    display_timezone: str = "America/New_York"
    beep: bool = True

    @property
    def window(self) -> timedelta:
        """Time span covered by the moving average and the chart."""
        return timedelta(days=self.moving_avg_days)

    @property
    def sample_interval(self) -> timedelta:
        return timedelta(seconds=self.sleep_seconds)

    def with_overrides(self, **changes) -> Settings:
        """Copy with the given fields replaced; None values are ignored."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Read settings from ``environ`` (``os.environ`` by default).

        Missing values use the defaults. Values that fail to parse, or are out
        of range, fall back to the default with a warning.
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        price_source = env.get("PRICE_SOURCE", defaults.price_source).strip().lower()
        if price_source not in PRICE_SOURCES:
            logger.warning(
                "Ignoring PRICE_SOURCE=%r (expected one of %s)", price_source, PRICE_SOURCES
            )
            price_source = defaults.price_source

        return cls(
            symbol=env.get("TICKER", "").strip().upper() or defaults.symbol,
            sleep_seconds=_positive_int(env, "SLEEP_SECONDS", defaults.sleep_seconds),
            change_threshold_pct=_float(
                env, "CHANGE_THRESHOLD", defaults.change_threshold_pct, non_negative=True
            ),
            moving_avg_days=_positive_int(env, "MOVING_AVG_DAYS", defaults.moving_avg_days),
            holding=_holding(env),
            fee_pct=_float(env, "TRANSACTION_FEE_PCT", defaults.fee_pct, non_negative=True),
            db_path=env.get("DB_PATH", "").strip() or defaults.db_path,
            price_source=price_source,
            chart_width=_positive_int(env, "CHART_WIDTH", defaults.chart_width),
            chart_height=_positive_int(env, "CHART_HEIGHT", defaults.chart_height),
            display_timezone=_timezone(env, "DISPLAY_TIMEZONE", defaults.display_timezone),
            beep=_bool(env, "BEEP", defaults.beep),
        )


def _positive_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", name, raw)
        return default
    if value <= 0:
        logger.warning("Ignoring %s=%r: must be positive", name, raw)
        return default
    return value


def _float(env: Mapping[str, str], name: str, default: float, non_negative: bool = False) -> float:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number", name, raw)
        return default
    if not math.isfinite(value):
        logger.warning("Ignoring %s=%r: not a finite number", name, raw)
        return default
    if non_negative and value < 0:
        logger.warning("Ignoring %s=%r: must not be negative", name, raw)
        return default
    return value


def _timezone(env: Mapping[str, str], name: str, default: str) -> str:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        ZoneInfo(raw)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Ignoring %s=%r: unknown time zone", name, raw)
        return default
    return raw


def _bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name, "").strip().lower()
    if not raw:
        return default
    if raw in ("1", "true", "yes", "on"):
        return True
    if raw in ("0", "false", "no", "off"):
        return False
    logger.warning("Ignoring %s=%r: not a boolean", name, raw)
    return default


def _holding(env: Mapping[str, str]) -> Holding | None:
    """Previous purchase, only when both amount and price are given."""
    amount = _float(env, "PREVIOUS_BUY_AMOUNT", 0.0)
    buy_price = _float(env, "PREVIOUS_BUY_PRICE", 0.0)
    if amount <= 0 or buy_price <= 0:
        return None
    return Holding(amount=amount, buy_price=buy_price)

"""Command line entry point: ``pricewatch [run|once|serve]``."""

from __future__ import annotations

import argparse
import asyncio
import logging
import math
from functools import partial

from colorama import just_fix_windows_console
from dotenv import load_dotenv

from .config import PRICE_SOURCES, Settings
from .console import print_evaluation
from .errors import PricewatchError
from .market.factory import create_price_source
from .market.store import SampleStore
from .monitor import PriceMonitor

logger = logging.getLogger("pricewatch")


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"{value!r} must be positive")
    return number


def _non_negative_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not a number") from None
    if not math.isfinite(number) or number < 0:
        raise argparse.ArgumentTypeError(f"{value!r} must be a finite, non-negative number")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pricewatch",
        description="Sample a spot price, persist it and print a moving-average signal and chart.",
    )
    parser.add_argument(
        "command",
        nargs="?",
        default="run",
        choices=("run", "once", "serve"),
        help="run: console loop (default); once: single evaluation; serve: HTTP/SSE API",
    )
    parser.add_argument("--symbol", help="asset to watch (TICKER)")
    parser.add_argument("--interval", type=_positive_int, help="seconds between samples (SLEEP_SECONDS)")
    parser.add_argument(
        "--threshold",
        type=_non_negative_float,
        help="percent band around the average (CHANGE_THRESHOLD)",
    )
    parser.add_argument("--days", type=_positive_int, help="moving average window in days (MOVING_AVG_DAYS)")
    parser.add_argument("--source", choices=PRICE_SOURCES, help="price source (PRICE_SOURCE)")
    parser.add_argument("--db", help="SQLite database path (DB_PATH)")
    parser.add_argument("--env-file", default=".env", help="dotenv file to load first")
    parser.add_argument("--log-level", default="WARNING", help="logging level")
    parser.add_argument("--host", default="127.0.0.1", help="bind address for serve")
    parser.add_argument("--port", type=_positive_int, default=8000, help="port for serve")
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    return Settings.from_env().with_overrides(
        symbol=args.symbol.upper() if args.symbol else None,
        sleep_seconds=args.interval,
        change_threshold_pct=args.threshold,
        moving_avg_days=args.days,
        price_source=args.source,
        db_path=args.db,
    )


async def run_console(settings: Settings, once: bool = False) -> None:
    """Run the monitor, printing each evaluation to stdout."""
    source = create_price_source(settings)
    try:
        with SampleStore(settings.db_path, symbol=settings.symbol) as store:
            monitor = PriceMonitor(
                source,
                store,
                settings,
                on_evaluation=partial(print_evaluation, settings=settings),
            )
            if once:
                await monitor.evaluate_once()
            else:
                await monitor.run()
    finally:
        await source.close()


def serve(settings: Settings, host: str, port: int) -> None:
    import uvicorn

    from .server import create_app

    uvicorn.run(create_app(settings), host=host, port=port)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    load_dotenv(args.env_file)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    just_fix_windows_console()
    settings = settings_from_args(args)

    if args.command == "serve":
        serve(settings, args.host, args.port)
        return 0

    try:
        asyncio.run(run_console(settings, once=args.command == "once"))
    except KeyboardInterrupt:
        logger.info("Interrupted")
    except PricewatchError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

# src/dcafolio/app.py
"""
Application Entry Point - Portfolio Report Command

This module serves as the composition root for the dcafolio command. It
loads already-normalized purchase records from a JSON file, wires the FX
and price providers from settings, runs the engine and prints a report.

Files that USE this module:
- dcafolio.__main__ (python -m dcafolio)
- the `dcafolio` console script

Files that this module USES:
- dcafolio.shared.logging_conf (setup_logging for logging configuration)
- dcafolio.config (settings for defaults, provider keys and fallback rates)
- dcafolio.application (metrics, performance, currency detection, period filter,
  strategy comparison, derived metrics)
- dcafolio.adapters.providers (FX and BTC price providers)
- dcafolio.adapters.formatting (report text)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations for forward references

import argparse  # Command-line argument parsing
import json  # Reading purchase records
import logging  # Standard library for logging messages and errors
import sys  # System-specific parameters and functions for exit codes
from pathlib import Path  # Object-oriented filesystem paths
from typing import List, Optional, Sequence

from dcafolio.adapters.formatting.formatter import (
    comparison_lines,
    derived_lines,
    metrics_lines,
    performance_lines,
)
from dcafolio.adapters.providers import (
    CoinGeckoPriceProvider,
    FastForexFXProvider,
    FXProviderChain,
    FXRateProvider,
    StaticFXProvider,
)
from dcafolio.application import (
    compare_strategies,
    compute_derived_metrics,
    compute_metrics,
    compute_performance,
    detect_currencies,
    filter_by_period,
)
from dcafolio.config import settings
from dcafolio.domain import (
    ConfigurationError,
    CostBasis,
    CurrencyOptions,
    DCAOptions,
    InvalidPurchaseError,
    MetricOptions,
    Period,
    Purchase,
    ValuationMode,
)
from dcafolio.shared.logging_conf import setup_logging

log = logging.getLogger(__name__)


def load_purchases(path: Path) -> List[Purchase]:
    """
    Load normalized purchase records from a JSON file.

    The file holds a list of objects using the normalized field names
    (date, amount_btc, price_usd, fiat_amount, fiat_currency, ...).

    Raises:
        InvalidPurchaseError: If the file is not a list or a record is invalid
    """
    with open(path, "r", encoding="utf-8") as f:
        rows = json.load(f)
    if not isinstance(rows, list):
        raise InvalidPurchaseError(f"{path} must contain a JSON list of purchases")

    purchases = []
    for i, row in enumerate(rows, start=1):
        if not isinstance(row, dict):
            raise InvalidPurchaseError(f"Row {i}: expected an object, got {type(row).__name__}")
        try:
            purchases.append(Purchase.from_mapping(row))
        except InvalidPurchaseError as e:
            raise InvalidPurchaseError(f"Row {i}: {e}") from e
    log.info("Loaded %d purchases from %s", len(purchases), path)
    return purchases


def build_fx_provider() -> FXRateProvider:
    """
    Build the FX provider from settings.

    Live FastForex rates are used when an API key is configured, backed by
    the approximate fallback rates; otherwise only the fallback rates.
    """
    fallback = StaticFXProvider(settings.fallback_rate_table)
    if not settings.fastforex_key:
        log.info("FASTFOREX_API_KEY not set; using fallback FX rates only")
        return fallback
    return FXProviderChain(
        FastForexFXProvider(), fallback, primary_name="fastforex", fallback_name="fallback"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dcafolio", description="Bitcoin DCA portfolio metrics report"
    )
    parser.add_argument("purchases", type=Path, help="JSON file with normalized purchase records")
    parser.add_argument("--currency", default=settings.target_fiat, help="Target fiat currency")
    parser.add_argument(
        "--basis", default=settings.cost_basis.value, choices=[b.value for b in CostBasis],
        help="Cost basis: execution excludes fees, effective includes them",
    )
    parser.add_argument("--price", type=float, help="Current BTC price (fetched from CoinGecko if omitted)")
    parser.add_argument("--price-currency", help="Currency of --price (defaults to --currency)")
    parser.add_argument(
        "--mode", default=ValuationMode.TO_DATE.value, choices=[m.value for m in ValuationMode],
        help="Valuation mode for the historical performance columns",
    )
    parser.add_argument("--history-days", type=int, default=365, help="Days of price history for mark_to_market")
    parser.add_argument(
        "--period", default=Period.ALL.value,
        choices=[p.value for p in Period if p is not Period.CUSTOM],
        help="Only include purchases from the last 7d, 30d, 90d or 1y",
    )
    parser.add_argument("--start", help="Only include purchases on or after this date (YYYY-MM-DD)")
    parser.add_argument("--end", help="Only include purchases on or before this date (YYYY-MM-DD)")
    parser.add_argument("--compare", action="store_true", help="Compare against monthly, weekly and lump-sum strategies")
    parser.add_argument("--no-table", action="store_true", help="Omit the per-purchase performance table")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Run the report command.

    Returns:
        Process exit code (0 on success)
    """
    args = build_parser().parse_args(argv)
    setup_logging(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        log_file=settings.log_file,
        log_dir=settings.log_dir,
        log_console=settings.log_console,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
    )

    target = args.currency.upper()
    try:
        purchases = load_purchases(args.purchases)
        period = Period.CUSTOM if (args.start or args.end) else Period(args.period)
        purchases = filter_by_period(purchases, period, start=args.start, end=args.end)
    except (OSError, json.JSONDecodeError, InvalidPurchaseError, ConfigurationError) as e:
        log.error("Cannot load purchases: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 2

    currency = CurrencyOptions(target_fiat=target, fx=build_fx_provider())
    prices = CoinGeckoPriceProvider()

    try:
        if args.price is not None:
            current_price = args.price
            price_currency = (args.price_currency or target).upper()
        else:
            current_price = prices.current_price(target)
            price_currency = target

        history = None
        if args.mode == ValuationMode.MARK_TO_MARKET.value:
            history = prices.price_history(days=args.history_days, currency=target)
    except RuntimeError as e:
        log.error("Market data unavailable: %s", e)
        print(f"Error: market data unavailable: {e}", file=sys.stderr)
        return 1

    basis = CostBasis(args.basis)
    metric_options = MetricOptions(basis=basis, currency=currency)
    metrics = compute_metrics(purchases, current_price, price_currency, metric_options)
    try:
        points = compute_performance(
            purchases, current_price, price_currency,
            DCAOptions(
                basis=basis,
                currency=currency,
                mode=ValuationMode(args.mode),
                get_historical_price=history,
                historical_price_currency=target,
            ),
        )
    except ConfigurationError as e:
        log.error("Invalid configuration: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 2

    print(metrics_lines(metrics, detect_currencies(purchases)))
    if metrics.purchase_count:
        print(derived_lines(compute_derived_metrics(metrics), metrics.currency))
    if not args.no_table and points:
        print()
        print(performance_lines(points, metrics.currency))
    if args.compare:
        print()
        results = compare_strategies(purchases, current_price, price_currency, metric_options)
        print(comparison_lines(results, metrics.currency))
    return 0


if __name__ == "__main__":
    sys.exit(main())

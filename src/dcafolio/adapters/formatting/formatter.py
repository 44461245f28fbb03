# src/dcafolio/adapters/formatting/formatter.py
"""
Report Formatter - Text Formatting and Presentation

This module handles text formatting for portfolio reports: currency
amounts, percentages, BTC quantities, the metrics summary, derived
figures and the performance and strategy comparison tables. The engine
never formats; display rounding happens here.

Files that USE this module:
- dcafolio.app (report output)
- tests.test_formatter (unit tests)

Files that this module USES:
- dcafolio.domain.models (PortfolioMetrics, PerformancePoint, DerivedMetrics, Strategy)
"""
from __future__ import annotations

from typing import List, Mapping, Optional, Sequence

from dcafolio.domain.models import DerivedMetrics, PerformancePoint, PortfolioMetrics, Strategy

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "CAD": "C$",
    "AUD": "A$",
    "JPY": "¥",
    "CHF": "CHF ",
    "CNY": "¥",
    "SEK": "kr ",
    "NOK": "kr ",
    "DKK": "kr ",
}

STRATEGY_LABELS = {
    Strategy.ACTUAL: "Actual DCA",
    Strategy.MONTHLY_DCA: "Monthly DCA",
    Strategy.WEEKLY_DCA: "Weekly DCA",
    Strategy.LUMP_SUM: "Lump Sum",
}


def format_currency(amount: float, currency: str = "USD", decimals: int = 2) -> str:
    """
    Format an amount with its currency symbol and thousands separators.

    Args:
        amount: Amount to format
        currency: Currency code; unknown codes are used as their own prefix
        decimals: Number of decimal places (default: 2)

    Returns:
        Formatted string like '$1,234.56' or '-€42.00'
    """
    code = currency.upper()
    symbol = CURRENCY_SYMBOLS.get(code, f"{code} ")
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.{decimals}f}"


def format_percent(value: float) -> str:
    """Format a percentage with an explicit sign for gains, e.g. '+8.70%'."""
    sign = "+" if value > 0 else ""
    return f"{sign}{value:.2f}%"


def format_btc(value: float, decimals: int = 8) -> str:
    """Format a BTC quantity, e.g. '₿0.00250000'."""
    return f"₿{value:.{decimals}f}"


def metrics_lines(metrics: PortfolioMetrics, detected_currencies: Optional[Sequence[str]] = None) -> str:
    """
    Format a metrics snapshot as a plain text summary.

    Args:
        metrics: Snapshot to format
        detected_currencies: Optional currencies found in the data

    Returns:
        Multi-line summary string
    """
    cur = metrics.currency
    if metrics.purchase_count == 0:
        return "No purchases."

    lines = [
        f"Purchases: {metrics.purchase_count} ({metrics.first_purchase_date} → {metrics.last_purchase_date})",
        f"Total BTC: {format_btc(metrics.total_btc)}",
        f"Total invested ({metrics.basis.value}): {format_currency(metrics.total_invested, cur)}",
        f"Total fees: {format_currency(metrics.total_fees, cur)} "
        f"({metrics.fee_percent_of_investment:.2f}% of investment)",
        f"Average cost basis: {format_currency(metrics.average_cost_basis, cur)}",
        f"  execution: {format_currency(metrics.average_execution_price, cur)}"
        f" / effective: {format_currency(metrics.average_effective_price, cur)}",
        f"Current value: {format_currency(metrics.current_value, cur)}",
        f"Unrealized P&L: {format_currency(metrics.unrealized_pnl, cur)} "
        f"({format_percent(metrics.unrealized_pnl_percent)})",
        f"Primary fiat currency: {metrics.primary_fiat_currency}",
    ]

    if detected_currencies:
        lines.append(f"Currencies in data: {', '.join(detected_currencies)}")

    if metrics.exchange_breakdown:
        lines.append("By exchange:")
        for name, stats in metrics.exchange_breakdown.items():
            lines.append(
                f"  {name}: {stats.count} buys, {format_btc(stats.total_btc)}, "
                f"{format_currency(stats.total_fiat, cur)} @ {format_currency(stats.avg_price, cur)}"
            )

    if metrics.largest_purchase.date:
        lines.append(
            f"Largest purchase: {format_btc(metrics.largest_purchase.amount)} "
            f"on {metrics.largest_purchase.date}"
        )
        lines.append(
            f"Smallest purchase: {format_btc(metrics.smallest_purchase.amount)} "
            f"on {metrics.smallest_purchase.date}"
        )

    if metrics.timezone_most_used:
        lines.append(f"Most used timezone: {metrics.timezone_most_used}")

    for warning in metrics.warnings:
        lines.append(f"⚠️ {warning}")

    return "\n".join(lines)


def performance_lines(points: Sequence[PerformancePoint], currency: str = "USD") -> str:
    """
    Format a performance sequence as a fixed-width text table.

    Args:
        points: Performance points in chronological order
        currency: Currency the points are expressed in

    Returns:
        Table with one row per purchase
    """
    header = f"{'#':>4}  {'date':<25} {'BTC held':>14} {'invested':>14} {'P&L (then)':>12} {'P&L (now)':>12}"
    rows: List[str] = [header]
    for p in points:
        rows.append(
            f"{p.purchase_index:>4}  {p.date:<25} {p.running_btc:>14.8f} "
            f"{format_currency(p.running_invested, currency):>14} "
            f"{format_percent(p.pnl_percent_mtm):>12} {format_percent(p.pnl_percent_to_date):>12}"
        )
    return "\n".join(rows)


def derived_lines(derived: DerivedMetrics, currency: str = "USD") -> str:
    """Format derived figures as summary lines."""
    return "\n".join([
        f"Average purchase: {format_currency(derived.average_purchase_amount, currency)}",
        f"Price vs cost basis: {format_percent(derived.price_vs_cost_basis_percent)}",
        f"BTC per 1 {currency.upper()}: {format_btc(derived.btc_per_fiat_unit)}",
        f"Days since first purchase: {derived.days_since_first_purchase}",
        f"Days since last purchase: {derived.days_since_last_purchase}",
    ])


def comparison_lines(results: Mapping[Strategy, PortfolioMetrics], currency: str = "USD") -> str:
    """
    Format a strategy comparison as a fixed-width text table.

    Args:
        results: Metrics per strategy, in display order
        currency: Currency the metrics are expressed in

    Returns:
        Table with one row per strategy
    """
    header = f"{'strategy':<12} {'buys':>5} {'BTC':>12} {'invested':>14} {'value':>14} {'P&L':>9}"
    rows: List[str] = [header]
    for strategy, m in results.items():
        rows.append(
            f"{STRATEGY_LABELS[strategy]:<12} {m.purchase_count:>5} {format_btc(m.total_btc, 4):>12} "
            f"{format_currency(m.total_invested, currency, 0):>14} "
            f"{format_currency(m.current_value, currency, 0):>14} "
            f"{format_percent(m.unrealized_pnl_percent):>9}"
        )
    return "\n".join(rows)

# src/dcafolio/application/metrics.py
"""
Metrics Aggregator - Portfolio Snapshot Computation

This module reduces a set of purchases and a current BTC price into a single
PortfolioMetrics snapshot: totals, averages under both cost bases, current
value, unrealized P&L, breakdowns by exchange, currency and transaction
type, extremes and data-completeness flags.

Every row is resolved through the graceful resolver, so one missing FX rate
degrades that row to the legacy USD basis instead of aborting the snapshot.

Files that USE this module:
- dcafolio.app (report command)
- dcafolio.application.strategies (metrics per simulated strategy)
- dcafolio.application.performance (sort_chronologically)
- tests.test_metrics (unit tests)

Files that this module USES:
- dcafolio.application.currency_resolver (try_resolve_cost, try_resolve_fee, convert_price)
- dcafolio.domain.models (Purchase, MetricOptions, PortfolioMetrics and breakdown types)
- dcafolio.shared.numbers (safe_div, pct)
"""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from dcafolio.application.currency_resolver import convert_price, try_resolve_cost, try_resolve_fee
from dcafolio.domain.models import (
    CostBasis,
    CurrencyStats,
    ExchangeStats,
    MetricOptions,
    PortfolioMetrics,
    Purchase,
    PurchaseExtreme,
)
from dcafolio.shared.numbers import pct, safe_div
from dcafolio.shared.validators import normalize_currency, parse_date, to_float

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Row:
    """A purchase with its resolved cost and fee in target fiat."""
    purchase: Purchase
    amount_btc: float
    cost: float
    fee: float


def sort_chronologically(purchases: Sequence[Purchase]) -> List[Purchase]:
    """Return purchases sorted ascending by date; ties keep input order."""
    return sorted(purchases, key=lambda p: parse_date(p.date))


def exchange_key(purchase: Purchase) -> str:
    """Exchange label: exchange, else description, else 'Unknown'."""
    return purchase.exchange or purchase.description or "Unknown"


def currency_of_record(purchase: Purchase) -> str:
    """Currency the purchase was paid in: fiat_currency, else currency_sent, else USD."""
    return (
        normalize_currency(purchase.fiat_currency)
        or normalize_currency(purchase.currency_sent)
        or "USD"
    )


def amount_of_record(purchase: Purchase) -> float:
    """Amount paid in the currency of record (unconverted)."""
    fiat_amount = to_float(purchase.fiat_amount)
    if fiat_amount > 0:
        return fiat_amount
    return to_float(purchase.amount_btc) * to_float(purchase.price_usd)


def _empty_metrics(target: str, basis: CostBasis) -> PortfolioMetrics:
    return PortfolioMetrics(
        total_btc=0.0,
        total_invested=0.0,
        total_cost_excl_fees=0.0,
        average_cost_basis=0.0,
        average_execution_price=0.0,
        average_effective_price=0.0,
        current_value=0.0,
        unrealized_pnl=0.0,
        unrealized_pnl_percent=0.0,
        total_fees=0.0,
        fee_percent_of_investment=0.0,
        purchase_count=0,
        first_purchase_date="",
        last_purchase_date="",
        primary_fiat_currency=target,
        currency=target,
        basis=basis,
    )


def _extreme(row: _Row) -> PurchaseExtreme:
    return PurchaseExtreme(
        amount=row.amount_btc,
        fiat_amount=row.cost,
        date=row.purchase.date,
        price=safe_div(row.cost, row.amount_btc),
    )


def _exchange_breakdown(rows: Sequence[_Row]) -> Dict[str, ExchangeStats]:
    grouped: Dict[str, List[_Row]] = {}
    for row in rows:
        grouped.setdefault(exchange_key(row.purchase), []).append(row)

    breakdown: Dict[str, ExchangeStats] = {}
    for name, members in grouped.items():
        total_btc = sum(r.amount_btc for r in members)
        total_fiat = sum(r.cost for r in members)
        breakdown[name] = ExchangeStats(
            count=len(members),
            total_btc=total_btc,
            total_fiat=total_fiat,
            avg_price=safe_div(total_fiat, total_btc),
        )
    return breakdown


def _currency_breakdown(rows: Sequence[_Row]) -> Dict[str, CurrencyStats]:
    totals: Dict[str, float] = {}
    counts: Dict[str, int] = {}
    for row in rows:
        code = currency_of_record(row.purchase)
        totals[code] = totals.get(code, 0.0) + amount_of_record(row.purchase)
        counts[code] = counts.get(code, 0) + 1
    return {
        code: CurrencyStats(total_amount=totals[code], purchase_count=counts[code])
        for code in totals
    }


def _most_used_timezone(rows: Sequence[_Row]) -> Optional[str]:
    counts = Counter(r.purchase.timezone for r in rows if r.purchase.timezone)
    if not counts:
        return None
    return counts.most_common(1)[0][0]


def compute_metrics(
    purchases: Sequence[Purchase],
    current_price: float,
    current_price_currency: str = "USD",
    options: Optional[MetricOptions] = None,
) -> PortfolioMetrics:
    """
    Compute a portfolio snapshot.

    Args:
        purchases: Purchase records in any order
        current_price: Current BTC price
        current_price_currency: Currency current_price is quoted in
        options: Basis and currency options (defaults: effective basis, USD)

    Returns:
        PortfolioMetrics expressed in options.currency.target_fiat.
        Empty input yields the zero snapshot.
    """
    options = options or MetricOptions()
    currency_options = options.currency
    target = normalize_currency(currency_options.target_fiat) or "USD"
    basis = CostBasis(options.basis)

    if not purchases:
        return _empty_metrics(target, basis)

    warnings: List[str] = []
    rows: List[_Row] = []
    for purchase in sort_chronologically(purchases):
        cost = try_resolve_cost(purchase, currency_options)
        fee = try_resolve_fee(purchase, currency_options)
        warnings.extend(w for w in (cost.warning, fee.warning) if w)
        rows.append(_Row(
            purchase=purchase,
            amount_btc=to_float(purchase.amount_btc),
            cost=cost.amount,
            fee=fee.amount,
        ))

    total_btc = sum(r.amount_btc for r in rows)
    total_cost = sum(r.cost for r in rows)
    total_fees = sum(r.fee for r in rows)
    total_effective = total_cost + total_fees
    total_invested = total_effective if basis is CostBasis.EFFECTIVE else total_cost

    price = convert_price(current_price, current_price_currency, currency_options)
    if price.warning:
        warnings.append(price.warning)
    current_value = total_btc * price.amount
    unrealized_pnl = current_value - total_invested

    currency_breakdown = _currency_breakdown(rows)
    primary_fiat_currency = max(
        currency_breakdown, key=lambda code: currency_breakdown[code].total_amount
    )

    type_counts: Dict[str, int] = {}
    for row in rows:
        kind = row.purchase.type or "Purchase"
        type_counts[kind] = type_counts.get(kind, 0) + 1

    if warnings:
        log.warning("Metrics computed with %d fallback warning(s)", len(warnings))

    return PortfolioMetrics(
        total_btc=total_btc,
        total_invested=total_invested,
        total_cost_excl_fees=total_cost,
        average_cost_basis=safe_div(total_invested, total_btc),
        average_execution_price=safe_div(total_cost, total_btc),
        average_effective_price=safe_div(total_effective, total_btc),
        current_value=current_value,
        unrealized_pnl=unrealized_pnl,
        unrealized_pnl_percent=pct(unrealized_pnl, total_invested),
        total_fees=total_fees,
        fee_percent_of_investment=pct(total_fees, total_invested),
        purchase_count=len(rows),
        first_purchase_date=rows[0].purchase.date,
        last_purchase_date=rows[-1].purchase.date,
        primary_fiat_currency=primary_fiat_currency,
        currency=target,
        basis=basis,
        exchange_breakdown=_exchange_breakdown(rows),
        currency_breakdown=currency_breakdown,
        transaction_type_breakdown=type_counts,
        largest_purchase=_extreme(max(rows, key=lambda r: r.amount_btc)),
        smallest_purchase=_extreme(min(rows, key=lambda r: r.amount_btc)),
        largest_purchase_fiat=_extreme(max(rows, key=lambda r: r.cost)),
        smallest_purchase_fiat=_extreme(min(rows, key=lambda r: r.cost)),
        has_transaction_hashes=any(r.purchase.transaction_hash for r in rows),
        has_addresses=any(r.purchase.address for r in rows),
        timezone_most_used=_most_used_timezone(rows),
        warnings=tuple(dict.fromkeys(warnings)),
    )



# src/dcafolio/application/insights.py
"""
Derived Metrics - Secondary Figures From a Snapshot

Files that USE this module:
- dcafolio.app (report summary)
- tests.test_insights (unit tests)

Files that this module USES:
- dcafolio.domain.models (PortfolioMetrics, DerivedMetrics)
- dcafolio.shared.numbers (safe_div, pct)
- dcafolio.shared.validators (parse_date)
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from dcafolio.domain.models import DerivedMetrics, PortfolioMetrics
from dcafolio.shared.numbers import pct, safe_div
from dcafolio.shared.validators import parse_date


def _days_since(value: str, now: datetime) -> int:
    return (now - parse_date(value)).days


def compute_derived_metrics(metrics: PortfolioMetrics, now: Optional[datetime] = None) -> DerivedMetrics:
    """
    Derive summary figures from a metrics snapshot.

    The current price is recovered from the snapshot (current_value /
    total_btc), so every figure stays in the snapshot's currency.

    Args:
        metrics: Snapshot from compute_metrics
        now: Reference time for the day counts (defaults to the current UTC time)

    Returns:
        DerivedMetrics; all zeros for an empty snapshot
    """
    if metrics.purchase_count == 0:
        return DerivedMetrics(
            average_purchase_amount=0.0,
            price_vs_cost_basis_percent=0.0,
            btc_per_fiat_unit=0.0,
            days_since_first_purchase=0,
            days_since_last_purchase=0,
        )

    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    current_price = safe_div(metrics.current_value, metrics.total_btc)
    return DerivedMetrics(
        average_purchase_amount=safe_div(metrics.total_invested, metrics.purchase_count),
        price_vs_cost_basis_percent=pct(current_price - metrics.average_cost_basis, metrics.average_cost_basis),
        btc_per_fiat_unit=safe_div(metrics.total_btc, metrics.total_invested),
        days_since_first_purchase=_days_since(metrics.first_purchase_date, now),
        days_since_last_purchase=_days_since(metrics.last_purchase_date, now),
    )

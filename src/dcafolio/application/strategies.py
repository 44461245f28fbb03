# src/dcafolio/application/strategies.py
"""
Strategy Comparison - What-If Simulations Against the Actual History

This module replays the same total USD outlay under alternative strategies
and runs the metrics aggregator on each:

- ACTUAL: the purchases as recorded
- MONTHLY_DCA / WEEKLY_DCA: equal buys every month / week between the
  first and last purchase, each priced at the recorded purchase closest in
  time, with a 1% fee
- LUMP_SUM: everything bought on the first purchase date at that price,
  with a 0.5% fee

Simulated purchases carry only the legacy USD fields, so the aggregator
converts them into the target fiat like any other USD row.

Files that USE this module:
- dcafolio.app (--compare flag)
- tests.test_strategies (unit tests)

Files that this module USES:
- dcafolio.application.metrics (compute_metrics, sort_chronologically)
- dcafolio.domain.models (Purchase, Strategy, MetricOptions, PortfolioMetrics)
- dcafolio.shared.validators (parse_date, to_float)
"""
from __future__ import annotations

import calendar
import math
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional, Sequence

from dcafolio.application.metrics import compute_metrics, sort_chronologically
from dcafolio.domain.models import MetricOptions, PortfolioMetrics, Purchase, Strategy
from dcafolio.shared.validators import parse_date, to_float

DCA_FEE_RATE = 0.01
LUMP_SUM_FEE_RATE = 0.005
SIMULATED_EXCHANGE = "Simulated"


def _add_months(day: date, months: int) -> date:
    """Shift a date by whole months, clamping to the last day of the month."""
    index = day.month - 1 + months
    year, month = day.year + index // 12, index % 12 + 1
    return day.replace(year=year, month=month, day=min(day.day, calendar.monthrange(year, month)[1]))


def _add_weeks(day: date, weeks: int) -> date:
    return day + timedelta(weeks=weeks)


def _closest(purchases: Sequence[Purchase], when: datetime) -> Purchase:
    # min keeps the earliest purchase on ties
    return min(purchases, key=lambda p: abs(parse_date(p.date) - when))


def _total_usd(purchases: Sequence[Purchase]) -> float:
    return sum(to_float(p.amount_btc) * to_float(p.price_usd) for p in purchases)


def _periodic(purchases: List[Purchase], step_days: int, shift: Callable[[date, int], date],
              label: str) -> List[Purchase]:
    first = parse_date(purchases[0].date)
    last = parse_date(purchases[-1].date)
    count = max(math.ceil((last - first) / timedelta(days=step_days)), 1)
    amount = _total_usd(purchases) / count

    simulated = []
    for i in range(count):
        day = shift(first.date(), i)
        when = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
        price = to_float(_closest(purchases, when).price_usd)
        simulated.append(Purchase(
            date=day.isoformat(),
            amount_btc=amount / price,
            price_usd=price,
            fee_usd=amount * DCA_FEE_RATE,
            exchange=SIMULATED_EXCHANGE,
            notes=f"{label} DCA simulation",
        ))
    return simulated


def simulate_purchases(purchases: Sequence[Purchase], strategy: Strategy) -> List[Purchase]:
    """
    Build the purchase list a strategy would have produced.

    Args:
        purchases: Actual purchase records in any order
        strategy: Strategy to simulate

    Returns:
        Purchases in chronological order (empty for no purchases)
    """
    strategy = Strategy(strategy)
    ordered = sort_chronologically(purchases)
    if not ordered or strategy is Strategy.ACTUAL:
        return ordered

    if strategy is Strategy.MONTHLY_DCA:
        return _periodic(ordered, 30, _add_months, "Monthly")
    if strategy is Strategy.WEEKLY_DCA:
        return _periodic(ordered, 7, _add_weeks, "Weekly")

    total = _total_usd(ordered)
    first = ordered[0]
    price = to_float(first.price_usd)
    return [Purchase(
        date=first.date,
        amount_btc=total / price,
        price_usd=price,
        fee_usd=total * LUMP_SUM_FEE_RATE,
        exchange=SIMULATED_EXCHANGE,
        notes="Lump sum simulation",
    )]


def compare_strategies(
    purchases: Sequence[Purchase],
    current_price: float,
    current_price_currency: str = "USD",
    options: Optional[MetricOptions] = None,
    strategies: Sequence[Strategy] = tuple(Strategy),
) -> Dict[Strategy, PortfolioMetrics]:
    """
    Compute metrics for each strategy over the same capital.

    Args:
        purchases: Actual purchase records in any order
        current_price: Current BTC price
        current_price_currency: Currency current_price is quoted in
        options: Basis and currency options shared by every strategy
        strategies: Strategies to compare, in output order

    Returns:
        Mapping of strategy to its metrics snapshot, in the requested order
    """
    return {
        Strategy(strategy): compute_metrics(
            simulate_purchases(purchases, strategy), current_price, current_price_currency, options
        )
        for strategy in strategies
    }

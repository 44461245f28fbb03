# src/dcafolio/application/performance.py
"""
Time-Series Performance Engine - Running DCA Performance

This module walks the chronologically sorted purchases once and emits one
PerformancePoint per purchase. Each point carries the running BTC held,
the running amount invested and two valuations of the holdings:

- to-date: valued at the current BTC price (converted into target fiat once)
- mark-to-market: valued at the price prevailing at that purchase. In
  TO_DATE mode this is the row's own execution price; in MARK_TO_MARKET
  mode it comes from the caller's historical price lookup.

Files that USE this module:
- dcafolio.app (report command)
- tests.test_performance (unit tests)

Files that this module USES:
- dcafolio.application.currency_resolver (graceful per-row resolution, price conversion)
- dcafolio.application.metrics (sort_chronologically)
- dcafolio.domain.models (Purchase, DCAOptions, PerformancePoint)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from dcafolio.application.currency_resolver import convert_price, try_resolve_cost, try_resolve_fee
from dcafolio.application.metrics import sort_chronologically
from dcafolio.domain.errors import ConfigurationError
from dcafolio.domain.models import CostBasis, DCAOptions, PerformancePoint, Purchase, ValuationMode
from dcafolio.shared.numbers import pct, safe_div
from dcafolio.shared.validators import to_float

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Running:
    """Accumulator threaded through the fold."""
    btc: float = 0.0
    cost_excl_fees: float = 0.0
    fees: float = 0.0

    def add(self, btc: float, cost: float, fee: float) -> "_Running":
        return _Running(
            btc=self.btc + btc,
            cost_excl_fees=self.cost_excl_fees + cost,
            fees=self.fees + fee,
        )

    def invested(self, basis: CostBasis) -> float:
        if basis is CostBasis.EFFECTIVE:
            return self.cost_excl_fees + self.fees
        return self.cost_excl_fees


def _historical_price(purchase: Purchase, options: DCAOptions, fallback: float) -> float:
    """Historical price for a purchase date in target fiat, or fallback if unusable."""
    quoted = to_float(options.get_historical_price(purchase.date))  # type: ignore[misc]
    if quoted <= 0:
        log.warning(
            "No usable historical price for %s; valuing at execution price", purchase.date
        )
        return fallback
    return convert_price(
        quoted, options.historical_price_currency, options.currency, as_of_date=purchase.date
    ).amount


def compute_performance(
    purchases: Sequence[Purchase],
    current_price: float,
    current_price_currency: str = "USD",
    options: Optional[DCAOptions] = None,
) -> List[PerformancePoint]:
    """
    Compute the running performance sequence of a DCA position.

    Args:
        purchases: Purchase records in any order
        current_price: Current BTC price
        current_price_currency: Currency current_price is quoted in
        options: Basis, valuation mode, historical lookup and currency options

    Returns:
        One PerformancePoint per purchase in chronological order (empty for no purchases)

    Raises:
        ConfigurationError: If MARK_TO_MARKET is requested without get_historical_price
    """
    options = options or DCAOptions()
    mode = ValuationMode(options.mode)
    basis = CostBasis(options.basis)
    if mode is ValuationMode.MARK_TO_MARKET and options.get_historical_price is None:
        raise ConfigurationError(
            "Mark-to-market valuation requires a get_historical_price function"
        )

    if not purchases:
        return []

    today_price = convert_price(current_price, current_price_currency, options.currency).amount

    points: List[PerformancePoint] = []
    running = _Running()
    for index, purchase in enumerate(sort_chronologically(purchases), start=1):
        amount_btc = to_float(purchase.amount_btc)
        cost = try_resolve_cost(purchase, options.currency).amount
        fee = try_resolve_fee(purchase, options.currency).amount
        running = running.add(amount_btc, cost, fee)
        invested = running.invested(basis)

        price_at_buy = safe_div(cost, amount_btc)
        if mode is ValuationMode.MARK_TO_MARKET:
            mtm_price = _historical_price(purchase, options, price_at_buy)
        else:
            mtm_price = price_at_buy

        value_mtm = running.btc * mtm_price
        value_to_date = running.btc * today_price
        points.append(PerformancePoint(
            date=purchase.date,
            purchase_index=index,
            running_btc=running.btc,
            running_invested=invested,
            avg_cost_basis=safe_div(invested, running.btc),
            price_at_buy=price_at_buy,
            value_mtm=value_mtm,
            pnl_mtm=value_mtm - invested,
            pnl_percent_mtm=pct(value_mtm - invested, invested),
            value_to_date=value_to_date,
            pnl_to_date=value_to_date - invested,
            pnl_percent_to_date=pct(value_to_date - invested, invested),
        ))
    return points

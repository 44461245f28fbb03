# src/dcafolio/adapters/providers/static.py
"""
Static FX Provider - In-Memory Rate Tables

Serves FX rates from fixed tables: an undated table keyed by currency pair
and an optional dated table keyed by (pair, date). Useful for tests, for
pre-fetched rate snapshots and for the configurable fallback rates.

Files that USE this module:
- dcafolio.app (fallback rates from settings)
- tests.* (fixed-rate test doubles)

Files that this module USES:
- dcafolio.adapters.providers.base (FXRateProvider interface)
- dcafolio.shared.validators (normalize_currency, parse_date)
"""
from __future__ import annotations

from typing import Dict, Mapping, Optional, Tuple

from dcafolio.adapters.providers.base import FXRateProvider
from dcafolio.shared.validators import normalize_currency, parse_date

Pair = Tuple[str, str]


def _day(value: str) -> str:
    """Reduce a date or timestamp to its YYYY-MM-DD day."""
    return parse_date(value).date().isoformat()


class StaticFXProvider(FXRateProvider):
    """
    FX provider backed by in-memory tables.

    Lookups try the direct pair first, then the inverse pair (1 / rate).
    Equal currencies always resolve to 1.0.
    """

    def __init__(self, rates: Optional[Mapping[Pair, float]] = None,
                 dated_rates: Optional[Mapping[Tuple[str, str, str], float]] = None):
        """
        Initialize static provider.

        Args:
            rates: Undated rates keyed by (from, to)
            dated_rates: Dated rates keyed by (from, to, 'YYYY-MM-DD')
        """
        self.rates: Dict[Pair, float] = {
            (normalize_currency(a), normalize_currency(b)): float(r)
            for (a, b), r in (rates or {}).items()
        }
        self.dated_rates: Dict[Tuple[str, str, str], float] = {
            (normalize_currency(a), normalize_currency(b), _day(d)): float(r)
            for (a, b, d), r in (dated_rates or {}).items()
        }

    @staticmethod
    def _pick(direct: Optional[float], inverse: Optional[float]) -> Optional[float]:
        if direct:
            return direct
        if inverse:
            return 1.0 / inverse
        return None

    def get_rate(self, from_currency: str, to_currency: str,
                 as_of_date: Optional[str] = None) -> Optional[float]:
        source = normalize_currency(from_currency)
        target = normalize_currency(to_currency)
        if source is None or target is None:
            return None
        if source == target:
            return 1.0

        if as_of_date is not None:
            try:
                day = _day(as_of_date)
            except ValueError:
                return None
            return self._pick(
                self.dated_rates.get((source, target, day)),
                self.dated_rates.get((target, source, day)),
            )

        return self._pick(self.rates.get((source, target)), self.rates.get((target, source)))

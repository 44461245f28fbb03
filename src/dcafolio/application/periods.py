# src/dcafolio/application/periods.py
"""
Period Filter - Restricting Purchases to a Time Range

This module selects the purchases that fall inside a reporting window:
a rolling preset (last 7/30/90 days, last year) measured back from "now",
or a custom inclusive start/end range. The result is an ordinary purchase
list, so every engine component runs on it unchanged.

Files that USE this module:
- dcafolio.app (--period/--start/--end flags)
- tests.test_periods (unit tests)

Files that this module USES:
- dcafolio.domain.models (Purchase, Period)
- dcafolio.domain.errors (ConfigurationError for bad bounds)
- dcafolio.shared.validators (parse_date)
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence

from dcafolio.domain.errors import ConfigurationError
from dcafolio.domain.models import Period, Purchase
from dcafolio.shared.validators import parse_date

PERIOD_DAYS = {
    Period.DAYS_7: 7,
    Period.DAYS_30: 30,
    Period.DAYS_90: 90,
    Period.YEAR_1: 365,
}


def _bound(value: Optional[str], name: str, end_of_day: bool = False) -> Optional[datetime]:
    if not value:
        return None
    try:
        bound = parse_date(value)
    except ValueError as e:
        raise ConfigurationError(f"Invalid {name} date: {value!r}") from e
    # A date-only end bound covers the whole day
    if end_of_day and len(value.strip()) == 10:
        bound += timedelta(days=1) - timedelta(microseconds=1)
    return bound


def filter_by_period(
    purchases: Sequence[Purchase],
    period: Period = Period.ALL,
    now: Optional[datetime] = None,
    start: Optional[str] = None,
    end: Optional[str] = None,
) -> List[Purchase]:
    """
    Keep the purchases dated inside the requested period.

    Args:
        purchases: Purchase records in any order
        period: Preset window, or CUSTOM to use start/end
        now: Reference time for presets (defaults to the current UTC time)
        start: Inclusive lower bound for CUSTOM (open if omitted)
        end: Inclusive upper bound for CUSTOM (open if omitted)

    Returns:
        Matching purchases in their input order

    Raises:
        ConfigurationError: If a custom bound is not a date or start is after end
    """
    period = Period(period)
    if period is Period.ALL:
        return list(purchases)

    if period is Period.CUSTOM:
        lower = _bound(start, "start")
        upper = _bound(end, "end", end_of_day=True)
        if lower is not None and upper is not None and lower > upper:
            raise ConfigurationError(f"Start date {start} is after end date {end}")
        return [
            p for p in purchases
            if (lower is None or parse_date(p.date) >= lower)
            and (upper is None or parse_date(p.date) <= upper)
        ]

    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    cutoff = now - timedelta(days=PERIOD_DAYS[period])
    return [p for p in purchases if parse_date(p.date) >= cutoff]

# src/dcafolio/shared/numbers.py
"""
Numeric Helpers - Division Guards

Averages and percentages across the engine go through these helpers so an
empty position or zero investment yields 0 instead of NaN or infinity.

Files that USE this module:
- dcafolio.application.metrics
- dcafolio.application.performance
- dcafolio.application.insights
"""


def safe_div(numerator: float, denominator: float) -> float:
    """Divide, returning 0.0 when the denominator is zero."""
    if denominator == 0:
        return 0.0
    return numerator / denominator


def pct(part: float, whole: float) -> float:
    """Return part / whole * 100, or 0.0 when whole is zero."""
    return safe_div(part, whole) * 100.0

# src/dcafolio/application/__init__.py
"""
Application Layer - Portfolio Engine

This package contains the pure engine components: currency resolution,
metrics aggregation, time-series performance, currency detection, period
filtering, strategy comparison and derived metrics.
No I/O - providers are injected through the domain interfaces.
"""

from dcafolio.application.currency_resolver import (
    convert_price,
    resolve_cost,
    resolve_fee,
    try_resolve_cost,
    try_resolve_fee,
)
from dcafolio.application.metrics import compute_metrics
from dcafolio.application.performance import compute_performance
from dcafolio.application.currency_detection import detect_currencies
from dcafolio.application.insights import compute_derived_metrics
from dcafolio.application.periods import filter_by_period
from dcafolio.application.strategies import compare_strategies, simulate_purchases

__all__ = [
    "resolve_cost",
    "resolve_fee",
    "try_resolve_cost",
    "try_resolve_fee",
    "convert_price",
    "compute_metrics",
    "compute_performance",
    "detect_currencies",
    "compute_derived_metrics",
    "filter_by_period",
    "simulate_purchases",
    "compare_strategies",
]

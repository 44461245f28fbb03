# src/dcafolio/adapters/formatting/__init__.py
"""
Formatting Adapters - Report Formatting

This package contains text formatting adapters for report output.
"""

from dcafolio.adapters.formatting.formatter import (
    comparison_lines,
    derived_lines,
    format_btc,
    format_currency,
    format_percent,
    metrics_lines,
    performance_lines,
)

__all__ = [
    "format_currency",
    "format_percent",
    "format_btc",
    "metrics_lines",
    "performance_lines",
    "derived_lines",
    "comparison_lines",
]

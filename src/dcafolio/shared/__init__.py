# src/dcafolio/shared/__init__.py
"""
Shared Utilities - Cross-cutting Concerns

This package contains shared utilities used across all layers:
- Validation and numeric coercion
- Division guards
- Logging configuration
"""

from dcafolio.shared.validators import (
    is_number,
    is_valid_date,
    normalize_currency,
    parse_date,
    to_float,
    validate_currency_code,
)
from dcafolio.shared.numbers import pct, safe_div

__all__ = [
    "to_float",
    "is_number",
    "normalize_currency",
    "validate_currency_code",
    "parse_date",
    "is_valid_date",
    "safe_div",
    "pct",
]

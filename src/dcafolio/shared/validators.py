# src/dcafolio/shared/validators.py
"""
Input Validation Utilities - Numeric Coercion and Field Validation

This module provides the small, total helpers every layer uses to read
loosely-typed purchase fields: numeric coercion that never yields NaN,
currency code normalization and ISO date parsing.

Files that USE this module:
- dcafolio.config.settings (currency code validation in Settings validators)
- dcafolio.domain.models (Purchase invariants and from_mapping coercion)
- dcafolio.application.* (reading optional numeric fields)

Files that this module USES:
- None (pure utility functions)
"""
import math
import re
from datetime import datetime, timezone
from typing import Any, Optional

_CURRENCY_RE = re.compile(r"^[A-Z]{3}$")
_THOUSANDS_RE = re.compile(r"^[+-]?[1-9]\d{0,2}(,\d{3})+(\.\d+)?$")
_DECIMAL_COMMA_RE = re.compile(r"^[+-]?\d*,\d+$")
_EUROPEAN_RE = re.compile(r"^[+-]?[1-9]\d{0,2}(\.\d{3})+,\d+$")


def _clean_number(text: str) -> Optional[str]:
    """
    Normalize comma usage in a numeric string.

    '1,234.5' (grouped thousands) drops the commas, '0,5' (a lone decimal
    comma) becomes '0.5' and '1.234,56' (European grouping) becomes
    '1234.56'. Any other comma placement is ambiguous and yields None.
    """
    if "," not in text:
        return text
    if _THOUSANDS_RE.match(text):
        return text.replace(",", "")
    if _DECIMAL_COMMA_RE.match(text):
        return text.replace(",", ".")
    if _EUROPEAN_RE.match(text):
        return text.replace(".", "").replace(",", ".")
    return None


def to_float(value: Any, default: float = 0.0) -> float:
    """
    Coerce a loosely-typed value to a finite float.

    Accepts ints, floats and numeric strings. Surrounding whitespace,
    grouped thousands ('1,234.5') and a single decimal comma ('0,5') are
    tolerated. Anything else, including NaN, infinities and ambiguous comma
    placements such as '1,5,0', yields ``default``.

    Args:
        value: Value to coerce
        default: Value returned when coercion fails

    Returns:
        Finite float
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        value = _clean_number(value.strip())
        if not value:
            return default
    try:
        num = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(num):
        return default
    return num


def is_number(value: Any) -> bool:
    """Return True if value coerces to a finite float."""
    return math.isfinite(to_float(value, default=math.nan))


def normalize_currency(code: Any) -> Optional[str]:
    """
    Normalize a currency code to upper case.

    Args:
        code: Raw currency code (e.g. ' eur ')

    Returns:
        Upper-cased code, or None for empty/non-string input
    """
    if not isinstance(code, str):
        return None
    code = code.strip().upper()
    return code or None


def validate_currency_code(code: str) -> bool:
    """
    Validate an ISO-4217 style currency code.

    Args:
        code: Currency code to validate

    Returns:
        True if the code is three upper-case letters, False otherwise
    """
    if not code:
        return False
    return bool(_CURRENCY_RE.match(code))


def parse_date(value: str) -> datetime:
    """
    Parse an ISO-8601 date or timestamp string.

    Naive values are treated as UTC so that date-only and zoned timestamps
    sort together.

    Args:
        value: ISO date string (e.g. '2024-01-15' or '2024-01-15T10:00:00Z')

    Returns:
        Timezone-aware datetime

    Raises:
        ValueError: If the string cannot be parsed
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid date: {value!r}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def is_valid_date(value: str) -> bool:
    """Return True if value is an ISO-parseable date string."""
    try:
        parse_date(value)
    except (TypeError, ValueError):
        return False
    return True

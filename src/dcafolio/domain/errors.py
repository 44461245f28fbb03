# src/dcafolio/domain/errors.py
"""
Domain Errors - Business Logic Exceptions

This module defines domain-specific exceptions raised by the portfolio
engine: missing FX conversions on strict paths, invalid configuration and
purchase records that break their construction invariants.
"""
from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for domain errors."""
    pass


class CurrencyConversionError(DomainError):
    """
    Raised when an amount must be converted but no FX rate can be found.

    Attributes:
        from_currency: Source currency code
        to_currency: Target currency code
        date: Transaction date the rate was requested for (if any)
    """

    def __init__(self, from_currency: str, to_currency: str, date: Optional[str] = None,
                 message: Optional[str] = None):
        self.from_currency = from_currency
        self.to_currency = to_currency
        self.date = date
        if message is None:
            message = f"Missing FX {from_currency}->{to_currency} on {date or 'n/a'}"
        super().__init__(message)


class ConfigurationError(DomainError):
    """Raised when a computation is requested with inconsistent options."""
    pass


class InvalidPurchaseError(DomainError):
    """Raised when a purchase record violates its invariants (e.g. amount_btc <= 0)."""
    pass

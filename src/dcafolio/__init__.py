# src/dcafolio/__init__.py
"""
dcafolio - Bitcoin DCA Portfolio Metrics

Normalizes Bitcoin purchase records recorded in mixed fiat currencies into a
single target currency and computes cost basis, unrealized P&L, breakdowns
and running DCA performance.
"""

__version__ = "1.0.0"

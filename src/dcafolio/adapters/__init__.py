# src/dcafolio/adapters/__init__.py
"""
Adapters Layer - External Interfaces

This package contains all adapters for external systems:
- Providers (FX rates and BTC prices)
- Formatting (report output)
"""

__all__ = []

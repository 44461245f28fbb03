# src/dcafolio/__main__.py
"""Module entry point: python -m dcafolio."""
import sys

from dcafolio.app import main

sys.exit(main())

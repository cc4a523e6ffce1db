"""API route handlers."""
from . import portfolio, stocks

__all__ = ["portfolio", "stocks"]

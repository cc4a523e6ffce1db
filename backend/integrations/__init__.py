"""External API integrations.

This package contains:
- Quote protocol: Common interface for upstream price sources
- Twelve Data client: Integration with the Twelve Data REST API
- Exceptions: Typed provider error hierarchy
"""

from integrations.quote_protocol import QuoteProvider, StockReference
from integrations.twelve_data_client import TwelveDataClient

__all__ = [
    "QuoteProvider",
    "StockReference",
    "TwelveDataClient",
]

"""Process-wide memory of last-known-good prices."""

import logging
import threading
from collections.abc import Mapping
from decimal import Decimal
from typing import Optional

logger = logging.getLogger(__name__)

# Fallback prices for popular symbols, used until a live fetch succeeds.
DEFAULT_PRICES: dict[str, Decimal] = {
    "AAPL": Decimal("190.50"),
    "MSFT": Decimal("425.00"),
    "GOOGL": Decimal("175.00"),
    "AMZN": Decimal("185.00"),
    "TSLA": Decimal("240.00"),
    "META": Decimal("500.00"),
    "NVDA": Decimal("900.00"),
    "INTC": Decimal("30.00"),
    "AMD": Decimal("160.00"),
    "NFLX": Decimal("600.00"),
}


class PriceCache:
    """Thread-safe mapping of symbol to the most recently observed price.

    Entries are only ever added or overwritten, never removed, and carry
    no timestamp: a cached price may be arbitrarily old.
    """

    def __init__(self, seed: Optional[Mapping[str, Decimal]] = None):
        """Initialize the cache.

        Args:
            seed: Initial prices. Defaults to :data:`DEFAULT_PRICES`.
        """
        self._lock = threading.Lock()
        self._prices: dict[str, Decimal] = dict(DEFAULT_PRICES if seed is None else seed)

    def get(self, symbol: str) -> Optional[Decimal]:
        """Return the cached price for a symbol, or None if never seen."""
        with self._lock:
            return self._prices.get(symbol)

    def upsert(self, symbol: str, price: Decimal) -> None:
        """Insert or overwrite a single symbol's price."""
        with self._lock:
            self._prices[symbol] = price

    def bulk_upsert(self, prices: Mapping[str, Decimal]) -> None:
        """Insert or overwrite several prices under one lock acquisition."""
        if not prices:
            return
        with self._lock:
            self._prices.update(prices)
        logger.debug("Price cache updated for %d symbols", len(prices))

    def snapshot(self) -> dict[str, Decimal]:
        """Return a copy of all cached prices."""
        with self._lock:
            return dict(self._prices)

    def __contains__(self, symbol: object) -> bool:
        with self._lock:
            return symbol in self._prices

    def __len__(self) -> int:
        with self._lock:
            return len(self._prices)

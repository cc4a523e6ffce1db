"""Searchable reference list of tradable stocks, cached on disk."""

import json
import logging
import threading
import time
from dataclasses import asdict
from decimal import Decimal
from pathlib import Path
from typing import Optional

from integrations.exceptions import ProviderError
from integrations.quote_protocol import QuoteProvider, StockReference
from services.price_resolver import PriceResolver

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LIMIT = 20

# Shown for an empty search query
POPULAR_SYMBOLS: tuple[str, ...] = ("AAPL", "MSFT", "TSLA", "GOOG", "AMZN", "NVDA")


class StockDirectory:
    """Lazily loaded list of stocks, backed by a JSON cache file.

    On first use the cache file is read if it is younger than
    ``max_age_seconds``; otherwise the list is downloaded from the
    provider and the file rewritten. If the download fails, a stale
    file is still better than nothing.
    """

    def __init__(self, provider: QuoteProvider, cache_path: str | Path, max_age_seconds: int):
        self._provider = provider
        self._cache_path = Path(cache_path)
        self._max_age_seconds = max_age_seconds
        self._lock = threading.Lock()
        self._stocks: Optional[list[StockReference]] = None

    def _cache_age_seconds(self) -> Optional[float]:
        try:
            return time.time() - self._cache_path.stat().st_mtime
        except OSError:
            return None

    def _read_cache_file(self) -> list[StockReference]:
        """Read the cache file; returns [] if missing or unreadable."""
        try:
            with self._cache_path.open(encoding="utf-8") as f:
                rows = json.load(f)
        except (OSError, ValueError):
            logger.warning("Could not read stock list cache %s", self._cache_path, exc_info=True)
            return []
        if not isinstance(rows, list):
            logger.warning("Stock list cache %s is not a list", self._cache_path)
            return []
        return [
            StockReference(symbol=str(row["symbol"]), name=str(row.get("name") or ""))
            for row in rows
            if isinstance(row, dict) and row.get("symbol")
        ]

    def _write_cache_file(self, stocks: list[StockReference]) -> None:
        try:
            self._cache_path.parent.mkdir(parents=True, exist_ok=True)
            with self._cache_path.open("w", encoding="utf-8") as f:
                json.dump([asdict(s) for s in stocks], f)
        except OSError:
            logger.warning("Could not write stock list cache %s", self._cache_path, exc_info=True)

    def _load(self) -> list[StockReference]:
        age = self._cache_age_seconds()
        if age is not None and age < self._max_age_seconds:
            stocks = self._read_cache_file()
            if stocks:
                logger.info(
                    "Loaded %d stocks from %s (cache age: %d hours)",
                    len(stocks), self._cache_path, int(age // 3600),
                )
                return stocks
        elif age is not None:
            logger.info("Stock list cache %s is outdated; refetching", self._cache_path)

        try:
            stocks = self._provider.get_stock_list()
        except ProviderError as e:
            logger.warning("Stock list download failed: %s", e)
            return self._read_cache_file() if age is not None else []

        if stocks:
            self._write_cache_file(stocks)
            logger.info("Downloaded and saved %d stocks", len(stocks))
            return stocks
        return self._read_cache_file() if age is not None else []

    @property
    def stocks(self) -> list[StockReference]:
        """All known stocks, loading them on first access.

        An empty load is not kept, so the next access tries again.
        """
        with self._lock:
            if self._stocks is None:
                stocks = self._load()
                if not stocks:
                    return []
                self._stocks = stocks
            return list(self._stocks)

    def search(self, query: Optional[str], limit: int = DEFAULT_SEARCH_LIMIT) -> list[StockReference]:
        """Find stocks whose symbol or name contains ``query``.

        Matching is case-insensitive. A blank query returns the popular
        symbols that are present in the list.
        """
        stocks = self.stocks
        if query is None or not query.strip():
            return [s for s in stocks if s.symbol in POPULAR_SYMBOLS]

        needle = query.strip().lower()
        matches = [
            s for s in stocks
            if needle in s.symbol.lower() or needle in s.name.lower()
        ]
        return matches[:limit]


class StockService:
    """Stock search and price lookup for the API layer."""

    def __init__(self, directory: StockDirectory, resolver: PriceResolver):
        self._directory = directory
        self._resolver = resolver

    def search_stocks(self, query: Optional[str]) -> list[tuple[StockReference, Decimal]]:
        """Search the directory and attach a resolved price to each result.

        Makes one price resolution for all results.
        """
        results = self._directory.search(query)
        prices = self._resolver.resolve_prices(s.symbol for s in results)
        return [(s, prices[s.symbol]) for s in results]

    def get_current_prices(self, symbols: list[str]) -> dict[str, Decimal]:
        """Resolve prices for arbitrary symbols."""
        return self._resolver.resolve_prices(symbols)

"""Best-effort current price resolution with last-known-good fallback."""

import logging
from collections.abc import Iterable
from decimal import Decimal
from typing import Optional

from integrations.exceptions import ProviderError
from integrations.quote_protocol import QuoteProvider
from services.price_cache import PriceCache

logger = logging.getLogger(__name__)

# Reported for symbols with neither a live nor a cached price. Note that a
# genuine price of zero is indistinguishable from "unknown" in the output.
UNKNOWN_PRICE = Decimal("0")


class PriceResolver:
    """Turns a set of symbols into a price for every one of them.

    Makes one batched live request per call. Live prices refresh the
    shared :class:`PriceCache`; anything not priced live is filled from
    the cache, or :data:`UNKNOWN_PRICE` if the symbol was never seen.
    Upstream failures are logged and never raised.
    """

    def __init__(self, provider: QuoteProvider, cache: Optional[PriceCache] = None):
        """Initialize with a quote provider and an optional shared cache.

        Args:
            provider: Upstream quote source.
            cache: Price cache to read and enrich. A new cache seeded with
                   the default prices is created if omitted.
        """
        self._provider = provider
        self._cache = cache if cache is not None else PriceCache()

    @property
    def cache(self) -> PriceCache:
        return self._cache

    @property
    def provider(self) -> QuoteProvider:
        return self._provider

    def _fetch_live(self, symbols: list[str]) -> dict[str, Decimal]:
        """Make the single live attempt. Returns {} on any failure."""
        try:
            live = self._provider.get_current_prices(symbols)
        except ProviderError as e:
            # Transient failures at WARNING; ones that need attention at ERROR
            level = logging.WARNING if getattr(e, "retriable", False) else logging.ERROR
            logger.log(
                level,
                "Live price fetch failed (%s): %s; using cached prices for %d symbols",
                type(e).__name__, e, len(symbols),
            )
            return {}
        except Exception:
            logger.warning(
                "Live price fetch raised unexpectedly; using cached prices for %d symbols",
                len(symbols),
                exc_info=True,
            )
            return {}

        # Ignore anything the provider returned that was not asked for
        return {s: live[s] for s in symbols if s in live}

    def resolve_prices(self, symbols: Iterable[Optional[str]]) -> dict[str, Decimal]:
        """Resolve a price for every requested symbol.

        Args:
            symbols: Ticker symbols (case-sensitive). Duplicates, ``None``
                     and empty strings are ignored.

        Returns:
            Dict mapping every distinct requested symbol to a price, in
            first-seen order. Never raises for upstream problems.
        """
        requested = list(dict.fromkeys(s for s in symbols if s))
        if not requested:
            return {}

        live = self._fetch_live(requested)

        # Refresh the cache before filling gaps from it; fill from one
        # consistent copy
        self._cache.bulk_upsert(live)
        cached_prices = self._cache.snapshot()

        result: dict[str, Decimal] = {}
        fallback: list[str] = []
        unknown: list[str] = []
        for symbol in requested:
            if symbol in live:
                result[symbol] = live[symbol]
                continue
            cached = cached_prices.get(symbol)
            if cached is None:
                result[symbol] = UNKNOWN_PRICE
                unknown.append(symbol)
            else:
                result[symbol] = cached
                fallback.append(symbol)

        if live and (fallback or unknown):
            logger.info(
                "Live prices for %d of %d symbols", len(live), len(requested)
            )
        if fallback:
            logger.debug("Using cached prices for %s", ", ".join(fallback))
        if unknown:
            logger.warning(
                "No live or cached price for %s; reporting %s",
                ", ".join(unknown), UNKNOWN_PRICE,
            )
        return result

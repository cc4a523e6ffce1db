"""Shared API helpers for route handlers.

Process-wide service instances and the dependencies that hand them to
route handlers. Tests replace them through ``app.dependency_overrides``.
"""

from functools import lru_cache

from fastapi import Depends, Header, HTTPException

from config import settings
from integrations.twelve_data_client import TwelveDataClient
from services.portfolio_service import PortfolioService
from services.price_cache import PriceCache
from services.price_resolver import PriceResolver
from services.stock_directory_service import StockDirectory, StockService


@lru_cache
def get_quote_provider() -> TwelveDataClient:
    """Get the upstream quote client (cached)."""
    return TwelveDataClient(
        api_key=settings.QUOTE_API_KEY,
        base_url=settings.QUOTE_API_BASE_URL,
        timeout=settings.QUOTE_API_TIMEOUT_SECONDS,
    )


@lru_cache
def get_price_resolver() -> PriceResolver:
    """Get the resolver that owns the process-wide price cache (cached)."""
    return PriceResolver(get_quote_provider(), PriceCache())


@lru_cache
def get_stock_directory() -> StockDirectory:
    """Get the stock reference directory (cached)."""
    return StockDirectory(
        get_quote_provider(),
        settings.STOCK_LIST_PATH,
        settings.STOCK_LIST_MAX_AGE_SECONDS,
    )


@lru_cache
def _portfolio_service_for(resolver: PriceResolver) -> PortfolioService:
    return PortfolioService(resolver)


def get_portfolio_service(
    resolver: PriceResolver = Depends(get_price_resolver),
) -> PortfolioService:
    """One PortfolioService per resolver, so per-user trade locks are shared."""
    return _portfolio_service_for(resolver)


def get_stock_service(
    directory: StockDirectory = Depends(get_stock_directory),
    resolver: PriceResolver = Depends(get_price_resolver),
) -> StockService:
    return StockService(directory, resolver)


def get_current_username(x_username: str | None = Header(default=None)) -> str:
    """Identify the caller from the ``X-Username`` header.

    Authentication happens upstream of this service; a request without
    a user identity is treated as not logged in.

    Raises:
        HTTPException: 401 if the header is missing or blank.
    """
    if x_username is None or not x_username.strip():
        raise HTTPException(status_code=401, detail="Not logged in")
    return x_username.strip()

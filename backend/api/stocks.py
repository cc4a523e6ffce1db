"""Stock search and price API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.helpers import get_stock_service
from schemas.stock import PricesResponse, StockQuoteResponse, StockSearchResponse
from services.stock_directory_service import StockService

router = APIRouter(prefix="/api", tags=["stocks"])


@router.get("/stocks", response_model=StockSearchResponse)
def search_stocks(
    q: Optional[str] = Query(None, description="Symbol or company name fragment"),
    service: StockService = Depends(get_stock_service),
):
    """Search listed stocks by symbol or name, with current prices.

    An empty query returns a short list of popular stocks.
    """
    results = service.search_stocks(q)
    return StockSearchResponse(
        stocks=[
            StockQuoteResponse(symbol=stock.symbol, name=stock.name, price=price)
            for stock, price in results
        ]
    )


@router.get("/prices", response_model=PricesResponse)
def get_prices(
    symbols: str = Query("", description="Comma-separated ticker symbols"),
    service: StockService = Depends(get_stock_service),
):
    """Resolve current prices for the given symbols.

    Every requested symbol appears in the result; symbols with no known
    price are reported as 0.
    """
    requested = [s.strip() for s in symbols.split(",")]
    return PricesResponse(prices=service.get_current_prices(requested))

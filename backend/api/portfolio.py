"""Portfolio API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from api.helpers import get_current_username, get_portfolio_service
from database import get_db
from schemas.portfolio import (
    BuyStockRequest,
    HoldingRowResponse,
    PortfolioResponse,
    SellStockRequest,
    TradeResponse,
)
from services.lot_ledger_service import TradeError
from services.portfolio_service import AggregatedRow, PortfolioService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["portfolio"])


def _row_response(row: AggregatedRow) -> HoldingRowResponse:
    return HoldingRowResponse(
        symbol=row.symbol,
        company_name=row.company_name,
        quantity=row.quantity,
        average_acquisition_price=row.average_acquisition_price,
        total_acquisition_cost=row.total_acquisition_cost,
        current_price=row.current_price,
        current_value=row.current_value,
        gain=row.gain,
    )


@router.get("/portfolio", response_model=PortfolioResponse)
def get_portfolio(
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db),
    service: PortfolioService = Depends(get_portfolio_service),
):
    """
    Get the caller's holdings aggregated per symbol at current prices.

    Prices come from a live fetch when the upstream is available and from
    the last known prices otherwise; this endpoint does not fail on
    upstream errors.
    """
    summary = service.get_portfolio(db, username)
    return PortfolioResponse(
        username=summary.username,
        holdings=[_row_response(row) for row in summary.holdings],
        total_value=summary.total_value,
        total_gain=summary.total_gain,
        total_cost=summary.total_cost,
    )


@router.post("/buy-stock", response_model=TradeResponse)
def buy_stock(
    request: BuyStockRequest,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db),
    service: PortfolioService = Depends(get_portfolio_service),
):
    """
    Buy shares at the given unit price.

    Raises:
        HTTPException: 400 if the request is malformed
    """
    try:
        service.buy(
            db,
            username,
            symbol=request.symbol,
            company_name=request.name,
            unit_price=request.price,
            quantity=request.quantity,
        )
    except TradeError as e:
        logger.warning("Rejected buy for %s: %s", username, e)
        raise HTTPException(status_code=400, detail=str(e))

    return TradeResponse(success=True, message="Stock purchased successfully")


@router.post("/sell-stock", response_model=TradeResponse)
def sell_stock(
    request: SellStockRequest,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db),
    service: PortfolioService = Depends(get_portfolio_service),
):
    """
    Sell the caller's oldest shares of a symbol.

    Raises:
        HTTPException: 400 if the request is malformed or more shares are
            requested than owned (the holding is left unchanged)
    """
    try:
        service.sell(db, username, symbol=request.symbol, quantity=request.quantity)
    except TradeError as e:
        logger.warning("Rejected sell for %s: %s", username, e)
        raise HTTPException(status_code=400, detail=str(e))

    return TradeResponse(success=True, message="Stock sold successfully")

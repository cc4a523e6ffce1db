"""Portfolio aggregation and trading for user holdings."""

import logging
import threading
import weakref
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal

from sqlalchemy.orm import Session

from services.holding_record_service import HoldingRecordService
from services.lot_ledger_service import Lot, LotLedgerService
from services.price_resolver import PriceResolver

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass
class AggregatedRow:
    """Per-symbol summary of a holding at current prices."""

    symbol: str
    company_name: str
    quantity: int
    total_acquisition_cost: Decimal
    current_price: Decimal
    current_value: Decimal
    gain: Decimal

    @property
    def average_acquisition_price(self) -> Decimal:
        return self.total_acquisition_cost / self.quantity


@dataclass
class PortfolioSummary:
    """A user's aggregated holdings plus portfolio-level totals."""

    username: str
    holdings: list[AggregatedRow] = field(default_factory=list)
    total_value: Decimal = ZERO
    total_gain: Decimal = ZERO
    total_cost: Decimal = ZERO


def aggregate_lots(
    lots: Iterable[Lot], price_by_symbol: Mapping[str, Decimal]
) -> list[AggregatedRow]:
    """Collapse lots into one row per symbol.

    Rows come out in first-seen symbol order. The current price is taken
    from ``price_by_symbol``; a symbol missing from it falls back to the
    average ``current_price_hint`` of its lots. A resolved price of zero is
    used as given, even though it usually means "unknown" rather than
    "worthless".

    Args:
        lots: Lots in insertion order.
        price_by_symbol: Current price per symbol.

    Returns:
        List of AggregatedRow, each with quantity > 0.
    """
    groups: dict[str, list[Lot]] = {}
    for lot in lots:
        groups.setdefault(lot.symbol, []).append(lot)

    rows: list[AggregatedRow] = []
    for symbol, members in groups.items():
        quantity = len(members)
        total_cost = sum((lot.acquisition_price for lot in members), ZERO)

        if symbol in price_by_symbol:
            current_price = price_by_symbol[symbol]
            if current_price == ZERO:
                logger.warning("Price for %s is 0; it may be unknown rather than zero", symbol)
        else:
            current_price = sum((lot.current_price_hint for lot in members), ZERO) / quantity

        current_value = current_price * quantity
        rows.append(
            AggregatedRow(
                symbol=symbol,
                company_name=members[0].company_name,
                quantity=quantity,
                total_acquisition_cost=total_cost,
                current_price=current_price,
                current_value=current_value,
                gain=current_value - total_cost,
            )
        )
    return rows


class PortfolioService:
    """Reads and trades user portfolios.

    Trades for the same user are serialized so that a concurrent buy and
    sell cannot interleave their load-modify-save of the lot list. Trades
    commit inside the per-user lock.
    """

    def __init__(self, resolver: PriceResolver):
        self._resolver = resolver
        self._locks_guard = threading.Lock()
        # Entries disappear once no request holds the user's lock
        self._user_locks: weakref.WeakValueDictionary[str, threading.Lock] = (
            weakref.WeakValueDictionary()
        )

    def _user_lock(self, username: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._user_locks.get(username)
            if lock is None:
                lock = threading.Lock()
                self._user_locks[username] = lock
            return lock

    def get_portfolio(self, db: Session, username: str) -> PortfolioSummary:
        """Aggregate a user's holding at current prices.

        Makes exactly one price resolution covering every distinct symbol.
        """
        with self._user_lock(username):
            holding = HoldingRecordService.load_holding(db, username)

        prices = self._resolver.resolve_prices(holding.symbols()) if len(holding) else {}
        rows = aggregate_lots(holding.lots, prices)

        summary = PortfolioSummary(
            username=username,
            holdings=rows,
            total_value=sum((r.current_value for r in rows), ZERO),
            total_gain=sum((r.gain for r in rows), ZERO),
            total_cost=sum((r.total_acquisition_cost for r in rows), ZERO),
        )
        logger.debug(
            "Portfolio for %s: %d symbols, value %s", username, len(rows), summary.total_value
        )
        return summary

    def buy(
        self,
        db: Session,
        username: str,
        symbol: str,
        company_name: str,
        unit_price: Decimal,
        quantity: int,
    ) -> list[Lot]:
        """Buy shares for a user and persist the holding.

        Raises:
            MalformedRequestError: Invalid input; nothing is persisted.
        """
        with self._user_lock(username):
            holding = HoldingRecordService.load_holding(db, username)
            lots = LotLedgerService.buy(holding, symbol, company_name, unit_price, quantity)
            HoldingRecordService.save_holding(db, username, holding)
            db.commit()
        return lots

    def sell(self, db: Session, username: str, symbol: str, quantity: int) -> list[Lot]:
        """Sell a user's oldest shares of a symbol and persist the holding.

        Raises:
            MalformedRequestError: Invalid input; nothing is persisted.
            InsufficientHoldingsError: Not enough shares; nothing is persisted.
        """
        with self._user_lock(username):
            holding = HoldingRecordService.load_holding(db, username)
            lots = LotLedgerService.sell(holding, symbol, quantity)
            HoldingRecordService.save_holding(db, username, holding)
            db.commit()
        return lots

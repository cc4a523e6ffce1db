"""Service for unit-lot holdings.

A holding is an ordered list of lots, one lot per owned share, each
carrying the price it was bought at. Buying appends lots; selling
removes the oldest matching lots first. This module is pure in-memory
logic with no knowledge of persistence.
"""

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from decimal import Decimal

logger = logging.getLogger(__name__)

# Largest share count accepted in one buy or sell. Holdings are kept as one
# lot per share, so this also bounds how much a single trade can grow them.
MAX_TRADE_QUANTITY = 100_000


class TradeError(ValueError):
    """Base class for rejected buy/sell requests."""

    pass


class MalformedRequestError(TradeError):
    """Buy/sell input is invalid (missing symbol, non-positive quantity, ...)."""

    pass


class InsufficientHoldingsError(TradeError):
    """A sell asked for more shares of a symbol than are owned."""

    def __init__(self, symbol: str, requested: int, owned: int):
        self.symbol = symbol
        self.requested = requested
        self.owned = owned
        super().__init__(
            f"Cannot sell {requested} share(s) of {symbol}. You only own {owned}."
        )


@dataclass(frozen=True)
class Lot:
    """One purchased share of a symbol."""

    symbol: str
    company_name: str
    acquisition_price: Decimal
    current_price_hint: Decimal  # Price known at creation; display only


class Holding:
    """A user's ordered multiset of lots."""

    def __init__(self, lots: Sequence[Lot] = ()):
        self._lots: list[Lot] = list(lots)

    @property
    def lots(self) -> tuple[Lot, ...]:
        return tuple(self._lots)

    def count(self, symbol: str) -> int:
        """Number of owned shares of a symbol (exact, case-sensitive match)."""
        return sum(1 for lot in self._lots if lot.symbol == symbol)

    def symbols(self) -> list[str]:
        """Distinct symbols in first-seen order."""
        return list(dict.fromkeys(lot.symbol for lot in self._lots))

    def __iter__(self) -> Iterator[Lot]:
        return iter(tuple(self._lots))

    def __len__(self) -> int:
        return len(self._lots)

    def __repr__(self) -> str:
        return f"Holding({len(self._lots)} lots, symbols={self.symbols()!r})"


def _validate_symbol(symbol: object) -> str:
    if not isinstance(symbol, str) or not symbol.strip():
        raise MalformedRequestError("Symbol is required")
    return symbol


def _validate_quantity(quantity: object) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise MalformedRequestError(f"Quantity must be a whole number, got {quantity!r}")
    if quantity <= 0:
        raise MalformedRequestError(f"Quantity must be positive, got {quantity}")
    if quantity > MAX_TRADE_QUANTITY:
        raise MalformedRequestError(
            f"Quantity must be at most {MAX_TRADE_QUANTITY}, got {quantity}"
        )
    return quantity


class LotLedgerService:
    """Buys and sells against a :class:`Holding`."""

    @staticmethod
    def buy(
        holding: Holding,
        symbol: str,
        company_name: str,
        unit_price: Decimal,
        quantity: int,
    ) -> list[Lot]:
        """Append ``quantity`` lots of ``symbol`` bought at ``unit_price``.

        There is no funds check; a valid request always succeeds.

        Returns:
            The newly created lots.

        Raises:
            MalformedRequestError: Blank symbol, non-positive quantity or
                negative price. The holding is not modified.
        """
        symbol = _validate_symbol(symbol)
        quantity = _validate_quantity(quantity)
        try:
            price = Decimal(str(unit_price))
        except ArithmeticError as e:
            raise MalformedRequestError(f"Invalid price: {unit_price!r}") from e
        if not price.is_finite() or price < 0:
            raise MalformedRequestError(f"Price must be non-negative, got {unit_price}")

        lot = Lot(
            symbol=symbol,
            company_name=company_name or "",
            acquisition_price=price,
            current_price_hint=price,
        )
        new_lots = [lot] * quantity
        holding._lots.extend(new_lots)
        logger.info("Bought %d share(s) of %s at %s", quantity, symbol, price)
        return new_lots

    @staticmethod
    def sell(holding: Holding, symbol: str, quantity: int) -> list[Lot]:
        """Remove the ``quantity`` earliest-inserted lots of ``symbol``.

        All-or-nothing: either exactly ``quantity`` lots are removed or
        the holding is left untouched.

        Returns:
            The removed lots, oldest first.

        Raises:
            MalformedRequestError: Blank symbol or non-positive quantity.
            InsufficientHoldingsError: Fewer than ``quantity`` shares owned.
        """
        symbol = _validate_symbol(symbol)
        quantity = _validate_quantity(quantity)

        owned = holding.count(symbol)
        if quantity > owned:
            logger.warning(
                "Rejected sell of %d share(s) of %s: only %d owned", quantity, symbol, owned
            )
            raise InsufficientHoldingsError(symbol, quantity, owned)

        removed: list[Lot] = []
        kept: list[Lot] = []
        for lot in holding._lots:
            if lot.symbol == symbol and len(removed) < quantity:
                removed.append(lot)
            else:
                kept.append(lot)
        holding._lots[:] = kept
        logger.info("Sold %d share(s) of %s", quantity, symbol)
        return removed

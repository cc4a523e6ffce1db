"""Tests for LotLedgerService: unit-lot buys and FIFO sells."""

from decimal import Decimal

import pytest

from services.lot_ledger_service import (
    MAX_TRADE_QUANTITY,
    Holding,
    InsufficientHoldingsError,
    LotLedgerService,
    MalformedRequestError,
    TradeError,
)
from tests.fixtures import make_holding


class TestHolding:
    def test_empty(self):
        holding = Holding()
        assert len(holding) == 0
        assert holding.symbols() == []
        assert holding.count("AAPL") == 0

    def test_symbols_first_seen_order(self):
        holding = make_holding(("MSFT", "400", 1), ("AAPL", "190", 2), ("MSFT", "410", 1))
        assert holding.symbols() == ["MSFT", "AAPL"]
        assert holding.count("MSFT") == 2

    def test_count_is_case_sensitive(self):
        holding = make_holding(("AAPL", "190", 2))
        assert holding.count("aapl") == 0


class TestBuy:
    def test_appends_one_lot_per_share(self):
        holding = Holding()
        lots = LotLedgerService.buy(holding, "AAPL", "Apple Inc", Decimal("190"), 3)

        assert len(lots) == 3
        assert len(holding) == 3
        assert all(lot.acquisition_price == Decimal("190") for lot in holding)
        assert all(lot.current_price_hint == Decimal("190") for lot in holding)
        assert holding.lots[0].company_name == "Apple Inc"

    def test_appends_after_existing_lots(self):
        holding = make_holding(("MSFT", "400", 1))
        LotLedgerService.buy(holding, "AAPL", "Apple Inc", Decimal("190"), 1)
        assert [lot.symbol for lot in holding] == ["MSFT", "AAPL"]

    def test_accepts_numeric_price_types(self):
        holding = Holding()
        LotLedgerService.buy(holding, "AAPL", "", 190.5, 1)
        assert holding.lots[0].acquisition_price == Decimal("190.5")

    def test_zero_price_allowed(self):
        holding = Holding()
        LotLedgerService.buy(holding, "FREE", "", Decimal("0"), 1)
        assert holding.count("FREE") == 1

    def test_missing_name_defaults_to_empty(self):
        holding = Holding()
        LotLedgerService.buy(holding, "AAPL", None, Decimal("1"), 1)
        assert holding.lots[0].company_name == ""

    @pytest.mark.parametrize("symbol", [None, "", "   "])
    def test_missing_symbol_rejected(self, symbol):
        holding = Holding()
        with pytest.raises(MalformedRequestError):
            LotLedgerService.buy(holding, symbol, "", Decimal("1"), 1)
        assert len(holding) == 0

    @pytest.mark.parametrize("quantity", [0, -2, 1.5, "3", True, None, MAX_TRADE_QUANTITY + 1, 10**12])
    def test_invalid_quantity_rejected(self, quantity):
        holding = Holding()
        with pytest.raises(MalformedRequestError):
            LotLedgerService.buy(holding, "AAPL", "", Decimal("1"), quantity)
        assert len(holding) == 0

    @pytest.mark.parametrize("price", [Decimal("-1"), "abc", Decimal("NaN"), float("inf")])
    def test_invalid_price_rejected(self, price):
        holding = Holding()
        with pytest.raises(MalformedRequestError):
            LotLedgerService.buy(holding, "AAPL", "", price, 1)
        assert len(holding) == 0


class TestSell:
    def test_removes_oldest_lots_first(self):
        holding = make_holding(("AAPL", "100", 1), ("AAPL", "200", 1), ("AAPL", "300", 1))
        removed = LotLedgerService.sell(holding, "AAPL", 2)

        assert [lot.acquisition_price for lot in removed] == [Decimal("100"), Decimal("200")]
        assert [lot.acquisition_price for lot in holding] == [Decimal("300")]

    def test_other_symbols_keep_their_order(self):
        holding = make_holding(("AAPL", "100", 1), ("MSFT", "400", 1), ("AAPL", "110", 1), ("TSLA", "240", 1))
        LotLedgerService.sell(holding, "AAPL", 1)
        assert [(lot.symbol, lot.acquisition_price) for lot in holding] == [
            ("MSFT", Decimal("400")),
            ("AAPL", Decimal("110")),
            ("TSLA", Decimal("240")),
        ]

    def test_sell_entire_position(self):
        holding = make_holding(("AAPL", "190", 3))
        LotLedgerService.sell(holding, "AAPL", 3)
        assert holding.count("AAPL") == 0
        assert "AAPL" not in holding.symbols()

    def test_oversell_rejected_without_change(self):
        holding = make_holding(("AAPL", "190", 2), ("MSFT", "400", 1))
        before = holding.lots

        with pytest.raises(InsufficientHoldingsError) as exc_info:
            LotLedgerService.sell(holding, "AAPL", 3)

        assert holding.lots == before
        err = exc_info.value
        assert (err.symbol, err.requested, err.owned) == ("AAPL", 3, 2)
        assert str(err) == "Cannot sell 3 share(s) of AAPL. You only own 2."

    def test_sell_unowned_symbol(self):
        holding = make_holding(("AAPL", "190", 1))
        with pytest.raises(InsufficientHoldingsError, match="You only own 0"):
            LotLedgerService.sell(holding, "MSFT", 1)

    @pytest.mark.parametrize("quantity", [0, -1, 2.0])
    def test_invalid_quantity_rejected(self, quantity):
        holding = make_holding(("AAPL", "190", 3))
        with pytest.raises(MalformedRequestError):
            LotLedgerService.sell(holding, "AAPL", quantity)
        assert len(holding) == 3

    def test_missing_symbol_rejected(self):
        with pytest.raises(MalformedRequestError):
            LotLedgerService.sell(make_holding(("AAPL", "190", 1)), None, 1)

    def test_trade_errors_are_value_errors(self):
        assert issubclass(MalformedRequestError, TradeError)
        assert issubclass(InsufficientHoldingsError, TradeError)
        assert issubclass(TradeError, ValueError)


class TestQuantityLimit:
    def test_buy_at_limit_accepted(self):
        holding = Holding()
        LotLedgerService.buy(holding, "AAPL", "", Decimal("1"), MAX_TRADE_QUANTITY)
        assert holding.count("AAPL") == MAX_TRADE_QUANTITY

    def test_oversized_sell_is_malformed(self):
        holding = make_holding(("AAPL", "190", 1))
        with pytest.raises(MalformedRequestError, match="at most"):
            LotLedgerService.sell(holding, "AAPL", MAX_TRADE_QUANTITY + 1)
        assert len(holding) == 1

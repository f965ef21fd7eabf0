"""
Tests for Position and the portfolio valuation helpers.
"""

import pandas as pd
import pytest

from quant_common.amount import Amount
from quant_common.asset import Option, Stock
from quant_common.constants import MIN_TIME
from quant_common.currency import Currency
from quant_common.interfaces import PriceSource
from quant_common.position import (
    Position,
    exposure,
    long_positions,
    mark_to_market,
    market_value,
    short_positions,
    unrealized_pnl,
)
from quant_common.size import Size
from quant_common.wallet import Wallet


class FixedPrices:
    """Price source backed by a dictionary."""

    def __init__(self, prices):
        self.prices = prices
        self.calls = []

    def get_price(self, asset, time):
        self.calls.append((asset, time))
        return self.prices[asset.symbol]


@pytest.fixture
def positions():
    return {
        Stock("AAPL"): Position(Size(10), avg_price=100.0, mkt_price=110.0),
        Stock("ASML", Currency.EUR): Position(Size(-5), avg_price=600.0, mkt_price=580.0),
        Option("SPY"): Position(Size(2), avg_price=1.5),
    }


class TestPosition:

    def test_defaults(self):
        p = Position(Size(10), avg_price=100.0)
        assert p.mkt_price == 100.0
        assert p.last_update == MIN_TIME

    def test_size_is_coerced(self):
        assert Position("1.5", 10.0).size == Size("1.5")
        assert Position(3).size == Size(3)

    def test_empty(self):
        p = Position.empty()
        assert p.closed and not p.open
        assert not p.long and not p.short

    def test_direction(self):
        assert Position(Size(1)).long
        assert Position(Size(-1)).short
        assert Position(Size(-1)).open

    def test_with_market_price(self):
        p = Position(Size(10), avg_price=100.0)
        updated = p.with_market_price(105.0, "2022-01-03T20:00:00Z")
        assert updated.mkt_price == 105.0
        assert updated.last_update == pd.Timestamp("2022-01-03T20:00:00Z")
        assert p.mkt_price == 100.0

    def test_immutable(self):
        with pytest.raises(AttributeError):
            Position(Size(1)).size = Size(2)


class TestPortfolioHelpers:

    def test_market_value(self, positions):
        value = market_value(positions)
        assert value.get_value("USD") == pytest.approx(1100.0 + 300.0)
        assert value.get_value("EUR") == pytest.approx(-2900.0)

    def test_unrealized_pnl(self, positions):
        pnl = unrealized_pnl(positions)
        assert pnl.get_value("USD") == pytest.approx(100.0)
        assert pnl.get_value("EUR") == pytest.approx(100.0)

    def test_exposure_counts_shorts_positive(self, positions):
        gross = exposure(positions)
        assert gross.get_value("EUR") == pytest.approx(2900.0)

    def test_long_and_short(self, positions):
        assert set(a.symbol for a in long_positions(positions)) == {"AAPL", "SPY"}
        assert list(a.symbol for a in short_positions(positions)) == ["ASML"]

    def test_empty_portfolio(self):
        assert market_value({}) == Wallet()

    def test_mark_to_market(self, positions):
        source = FixedPrices({"AAPL": 120.0, "ASML": 590.0, "SPY": 2.0})
        assert isinstance(source, PriceSource)

        marked = mark_to_market(positions, source, "2022-01-03")
        assert marked[Stock("AAPL")].mkt_price == 120.0
        assert marked[Stock("AAPL")].last_update == pd.Timestamp("2022-01-03", tz="UTC")
        assert positions[Stock("AAPL")].mkt_price == 110.0
        assert market_value(marked).get_amount("USD") == Amount("USD", 1200.0 + 400.0)
        assert all(t == pd.Timestamp("2022-01-03", tz="UTC") for _, t in source.calls)

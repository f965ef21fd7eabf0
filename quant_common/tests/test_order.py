"""
Tests for orders and time-in-force policies.
"""

import pandas as pd
import pytest

from quant_common.asset import Stock
from quant_common.errors import InvalidArgumentError
from quant_common.order import DAY, FOK, GTC, GTD, IOC, Order, TimeInForce
from quant_common.size import Size


@pytest.fixture
def order():
    return Order(Stock("AAPL"), Size(10), 150.0, tag="entry")


class TestTimeInForce:

    def test_names(self):
        assert str(GTC()) == "GTC"
        assert str(IOC()) == "IOC"
        assert str(DAY()) == "DAY"
        assert str(FOK()) == "FOK"
        assert str(GTD("2024-01-01")).startswith("GTD(2024-01-01")

    def test_gtc(self):
        assert GTC().max_days == 90
        assert GTC(30) != GTC()
        with pytest.raises(InvalidArgumentError):
            GTC(0)

    def test_gtd_date_is_utc(self):
        assert GTD("2024-01-01").date == pd.Timestamp("2024-01-01", tz="UTC")

    def test_value_semantics(self):
        assert IOC() == IOC()
        assert IOC() != FOK()
        assert isinstance(DAY(), TimeInForce)


class TestOrder:

    def test_defaults(self, order):
        assert order.tif == GTC()
        assert order.id == ""
        assert order.fill == Size.ZERO
        assert order.remaining == Size(10)

    def test_size_is_coerced(self):
        order = Order(Stock("AAPL"), "-2.5", 100.0)
        assert order.size == Size("-2.5")
        assert order.is_sell and not order.is_buy

    def test_remaining_after_fill(self, order):
        order.fill = Size(4)
        assert order.remaining == Size(6)

    def test_cancel_requires_id(self, order):
        with pytest.raises(InvalidArgumentError):
            order.cancel()
        with pytest.raises(InvalidArgumentError):
            order.modify(size=5)

    def test_cancel(self, order):
        order.id = "42"
        cancellation = order.cancel()
        assert cancellation.is_cancellation
        assert cancellation.id == "42"
        assert cancellation.size.is_zero
        assert not order.is_cancellation

    def test_modify(self, order):
        order.id = "42"
        modified = order.modify(size=5)
        assert modified.size == Size(5)
        assert modified.limit == 150.0
        assert modified.id == "42"
        assert modified.tag == "entry"

        modified = order.modify(limit=149.0)
        assert modified.size == Size(10)
        assert modified.limit == 149.0

    def test_zero_size_without_id_is_not_cancellation(self):
        assert not Order(Stock("AAPL"), Size.ZERO, 1.0).is_cancellation

    def test_not_hashable(self, order):
        with pytest.raises(TypeError):
            hash(order)

    def test_str(self, order):
        assert str(order) == "id= asset=AAPL size=10 limit=150.0 tif=GTC tag=entry"

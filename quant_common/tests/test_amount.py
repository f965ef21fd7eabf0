"""
Tests for Amount.
"""

from decimal import Decimal

import pandas as pd
import pytest

from quant_common.amount import Amount
from quant_common.config import Config
from quant_common.currency import Currency
from quant_common.errors import CurrencyMismatchError, NoRateAvailableError
from quant_common.exchange_rates import FixedExchangeRates
from quant_common.wallet import Wallet


@pytest.fixture
def fixed_rates():
    Config.exchange_rates = FixedExchangeRates("USD", {"EUR": 1.2, "JPY": 0.01})
    return Config.exchange_rates


class TestAmount:
    """Construction, arithmetic and ordering."""

    def test_construction(self):
        a = Amount("USD", 10)
        assert a.currency is Currency.USD
        assert a.value == 10.0
        assert isinstance(a.value, float)
        assert a == Amount(Currency.USD, 10.0)

    def test_queries(self):
        assert Amount("USD", 1.0).is_positive
        assert Amount("USD", -1.0).is_negative
        assert Amount("USD", 0.0).is_zero

    def test_number_arithmetic(self):
        a = Amount("EUR", 10.0)
        assert (a + 5).value == 15.0
        assert (a - 5).value == 5.0
        assert (a * 3).value == 30.0
        assert (3 * a).value == 30.0
        assert (a / 4).value == 2.5
        assert (-a).value == -10.0
        assert abs(Amount("EUR", -2.0)).value == 2.0
        assert (a + 5).currency is Currency.EUR

    def test_amount_plus_amount_is_wallet(self):
        w = Amount("USD", 10.0) + Amount("EUR", 5.0)
        assert isinstance(w, Wallet)
        assert w.get_value("USD") == 10.0
        assert w.get_value("EUR") == 5.0

        w = Amount("USD", 10.0) - Amount("USD", 4.0)
        assert w == Wallet(Amount("USD", 6.0))

    def test_ordering(self):
        assert Amount("USD", 1.0) < Amount("USD", 2.0)
        assert Amount("USD", 2.0) >= 2
        with pytest.raises(CurrencyMismatchError):
            Amount("USD", 1.0) < Amount("EUR", 2.0)

    def test_hashable(self):
        assert len({Amount("USD", 1.0), Amount("USD", 1.0), Amount("EUR", 1.0)}) == 2


class TestAmountFormatting:
    """Display digits and decimal rounding."""

    def test_str(self):
        assert str(Amount("USD", 1500.0)) == "USD 1,500.00"
        assert str(Amount("JPY", 1234567.8)) == "JPY 1,234,568"
        assert str(Amount("USD", -12.5)) == "USD -12.50"

    def test_format_value_digits(self):
        assert Amount("USD", 1.23456).format_value(4) == "1.2346"

    def test_increased_digits(self):
        Currency.increase_digits(2)
        assert str(Amount("USD", 1.5)) == "USD 1.5000"

    def test_to_decimal_rounds_half_down(self):
        assert Amount("USD", 1.125).to_decimal() == Decimal("1.12")
        assert Amount("USD", 1.126).to_decimal() == Decimal("1.13")
        assert Amount("JPY", 100.5).to_decimal() == Decimal("100")

    def test_to_decimal_large_values(self):
        assert Amount("USD", 1e30).to_decimal() == Decimal(10 ** 30)
        assert Amount("EUR", -2.5e40).to_decimal() == Decimal("-2.5e40")
        assert Amount("USD", 1e30).to_decimal(4) == Decimal(10 ** 30)


class TestAmountConversion:
    """Conversion through the configured exchange rates."""

    def test_same_currency_needs_no_rates(self):
        a = Amount("USD", 10.0)
        assert a.convert("USD") is a

    def test_zero_needs_no_rates(self):
        assert Amount("USD", 0.0).convert("EUR") == Amount("EUR", 0.0)

    def test_without_rates_fails(self):
        with pytest.raises(NoRateAvailableError):
            Amount("USD", 10.0).convert("EUR")

    def test_with_fixed_rates(self, fixed_rates):
        eur = Amount("EUR", 100.0).convert("USD", pd.Timestamp("2020-01-01"))
        assert eur.currency is Currency.USD
        assert eur.value == pytest.approx(120.0)

        jpy = Amount("EUR", 1.0).convert(Currency.JPY)
        assert jpy.value == pytest.approx(120.0)

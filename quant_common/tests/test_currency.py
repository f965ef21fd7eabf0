"""
Tests for the currency registry and currency pair parsing.
"""

import pickle
import threading

import pytest

from quant_common.currency import Currency, to_currency, to_currency_pair
from quant_common.errors import InvalidArgumentError


class TestCurrencyRegistry:
    """Interning and registry behaviour."""

    def test_interned(self):
        assert Currency("USD") is Currency.USD
        assert Currency.get_instance("EUR") is Currency("EUR")
        assert to_currency("JPY") is Currency.JPY
        assert to_currency(Currency.GBP) is Currency.GBP

    def test_new_currency_is_registered(self):
        xyz = Currency("XYZ")
        assert xyz in Currency.currencies()
        assert xyz.default_fraction_digits == 2
        assert xyz.display_name == "XYZ"

    def test_fraction_digits(self):
        assert Currency.USD.default_fraction_digits == 2
        assert Currency.JPY.default_fraction_digits == 0
        assert Currency.BTC.default_fraction_digits == 8

    def test_explicit_digits_only_used_on_creation(self):
        abc = Currency("ABC", 4)
        assert abc.default_fraction_digits == 4
        assert Currency("ABC", 1).default_fraction_digits == 4

    def test_blank_code_fails(self):
        with pytest.raises(InvalidArgumentError):
            Currency("")
        with pytest.raises(ValueError):
            Currency("   ")

    def test_increase_digits(self):
        Currency.increase_digits()
        assert Currency.USD.default_fraction_digits == 5
        assert Currency.JPY.default_fraction_digits == 3

    def test_concurrent_creation_yields_one_instance(self):
        results = []

        def create():
            results.append(Currency("CONCURRENT"))

        threads = [threading.Thread(target=create) for _ in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len({id(c) for c in results}) == 1

    def test_pickle_preserves_identity(self):
        assert pickle.loads(pickle.dumps(Currency.EUR)) is Currency.EUR

    def test_ordering_and_text(self):
        assert sorted([Currency.USD, Currency.EUR]) == [Currency.EUR, Currency.USD]
        assert str(Currency.USD) == "USD"
        assert repr(Currency.USD) == "Currency('USD')"
        assert Currency.EUR.display_name == "Euro"


class TestCurrencyPair:
    """Parsing of currency pair symbols."""

    @pytest.mark.parametrize("text", ["EUR/USD", "EUR_USD", "EUR-USD", "EUR:USD", "EUR USD", "EURUSD", "eur/usd"])
    def test_formats(self, text):
        assert to_currency_pair(text) == (Currency.EUR, Currency.USD)

    def test_longer_codes(self):
        assert to_currency_pair("BTC/USDT") == (Currency.BTC, Currency.USDT)

    @pytest.mark.parametrize("text", ["EUR", "EUR/USD/JPY", "EURUSDX", "/USD"])
    def test_unrecognized(self, text):
        assert to_currency_pair(text) is None

"""
Exchange rates used to convert amounts between currencies.

Implementations provide ``get_rate``; ``convert`` is shared and returns the
converted Amount. All rates are expressed against a base currency: the rate
of a currency is the value of one unit of it in the base currency, so a
conversion goes ``value * rate(from) / rate(to)``.

"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Mapping, Union

import pandas as pd

from .amount import Amount
from .currency import Currency, to_currency
from .errors import InvalidArgumentError, NoRateAvailableError

logger = logging.getLogger(__name__)


class ExchangeRates(ABC):
    """Source of exchange rates between currencies."""

    @abstractmethod
    def get_rate(self, amount: Amount, to: Currency, time: pd.Timestamp) -> float:
        """
        Rate to multiply ``amount.value`` with to express it in ``to``.

        Raises
        ------
        NoRateAvailableError
            When no rate is known for the currency pair at ``time``
        """
        pass

    def convert(self, amount: Amount, to: Union[Currency, str], time: pd.Timestamp) -> Amount:
        """Convert ``amount`` into currency ``to`` at ``time``."""
        to = to_currency(to)
        if amount.currency == to or amount.value == 0.0:
            return Amount(to, amount.value)
        return Amount(to, amount.value * self.get_rate(amount, to, time))


class NoExchangeRates(ExchangeRates):
    """Default converter that refuses every cross-currency conversion."""

    def get_rate(self, amount: Amount, to: Currency, time: pd.Timestamp) -> float:
        raise NoRateAvailableError(
            f"no exchange rates configured, cannot convert {amount.currency} to {to}"
        )

    def __repr__(self) -> str:
        return "NoExchangeRates()"


class FixedExchangeRates(ExchangeRates):
    """
    Constant exchange rates relative to a base currency.

    Parameters
    ----------
    base_currency : Currency or str
        Currency in which all rates are expressed
    rates : mapping of Currency/str to float
        Value of one unit of each currency in the base currency

    Examples
    --------
    >>> rates = FixedExchangeRates("USD", {"EUR": 1.5, "GBP": 3.0})
    >>> rates.convert(Amount("EUR", 100.0), "GBP", None).value
    50.0
    """

    def __init__(self, base_currency: Union[Currency, str], rates: Mapping[Union[Currency, str], float]):
        self.base_currency = to_currency(base_currency)
        self.rates: Dict[Currency, float] = {}
        for currency, rate in rates.items():
            if not rate > 0.0:
                raise InvalidArgumentError(f"rate for {currency} must be positive, got {rate}")
            self.rates[to_currency(currency)] = float(rate)
        self.rates[self.base_currency] = 1.0

    def _rate(self, currency: Currency) -> float:
        try:
            return self.rates[currency]
        except KeyError:
            raise NoRateAvailableError(f"no exchange rate for {currency}") from None

    def get_rate(self, amount: Amount, to: Currency, time: pd.Timestamp) -> float:
        return self._rate(amount.currency) / self._rate(to)

    def __repr__(self) -> str:
        return f"FixedExchangeRates(base={self.base_currency}, currencies={len(self.rates)})"


class TimedExchangeRates(ExchangeRates):
    """
    Time-varying exchange rates relative to a base currency.

    The rate in force at a time is the latest observation at or before it.
    Times before the first observation use the first observation.

    Parameters
    ----------
    base_currency : Currency or str
        Currency in which all rates are expressed
    rates : mapping of Currency/str to pd.Series
        Per currency, the value of one unit in the base currency indexed by
        time. Naive indices are interpreted as UTC.
    """

    def __init__(self, base_currency: Union[Currency, str], rates: Mapping[Union[Currency, str], pd.Series]):
        self.base_currency = to_currency(base_currency)
        self.rates: Dict[Currency, pd.Series] = {}
        for currency, series in rates.items():
            series = series.dropna().sort_index()
            if series.empty:
                raise InvalidArgumentError(f"no rates provided for {currency}")
            if (series <= 0.0).any():
                raise InvalidArgumentError(f"rates for {currency} must be positive")
            index = pd.DatetimeIndex(series.index)
            index = index.tz_localize("UTC") if index.tz is None else index.tz_convert("UTC")
            self.rates[to_currency(currency)] = pd.Series(series.to_numpy(dtype=float), index=index)

    @classmethod
    def from_frame(cls, frame: pd.DataFrame, base_currency: Union[Currency, str]) -> "TimedExchangeRates":
        """Build from a DataFrame indexed by time with one column per currency code."""
        return cls(base_currency, {column: frame[column] for column in frame.columns})

    def _rate(self, currency: Currency, time: pd.Timestamp) -> float:
        if currency == self.base_currency:
            return 1.0
        series = self.rates.get(currency)
        if series is None:
            raise NoRateAvailableError(f"no exchange rate for {currency}")
        rate = series.asof(time)
        if pd.isna(rate):
            logger.debug(
                f"No {currency} rate at {time}, using first observation at {series.index[0]}"
            )
            rate = series.iloc[0]
        return float(rate)

    def get_rate(self, amount: Amount, to: Currency, time: pd.Timestamp) -> float:
        return self._rate(amount.currency, time) / self._rate(to, time)

    def __repr__(self) -> str:
        return f"TimedExchangeRates(base={self.base_currency}, currencies={len(self.rates)})"

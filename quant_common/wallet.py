"""
Multi-currency wallet.

A Wallet is a sparse ledger of balances per currency. It never converts
implicitly: depositing EUR into a wallet that holds USD simply adds a second
balance. Balances within EPS of zero are removed, so an emptied wallet
compares equal to a fresh one.

A Wallet is mutable and not thread-safe; callers that share one across
threads must synchronize externally.

"""

import numbers
from typing import Dict, Iterable, Iterator, List, Union

import pandas as pd

from .amount import Amount
from .constants import EPS
from .currency import Currency, to_currency
from .timeframe import to_utc


class Wallet:
    """
    Mutable container of balances in one or more currencies.

    Parameters
    ----------
    *amounts : Amount
        Initial deposits

    Examples
    --------
    >>> w = Wallet(Amount("USD", 100.0), Amount("EUR", 50.0))
    >>> w.get_value("USD")
    100.0
    >>> w.withdraw(Amount("USD", 100.0))
    >>> w.currencies
    [Currency('EUR')]
    """

    __hash__ = None

    def __init__(self, *amounts: Amount):
        self._data: Dict[Currency, float] = {}
        for amount in amounts:
            self.deposit(amount)

    @classmethod
    def from_amounts(cls, amounts: Iterable[Amount]) -> "Wallet":
        return cls(*amounts)

    def _put(self, currency: Currency, value: float) -> None:
        if abs(value) < EPS:
            self._data.pop(currency, None)
        else:
            self._data[currency] = value

    # ========================================================================
    # Mutation
    # ========================================================================

    def deposit(self, other: Union[Amount, "Wallet"]) -> None:
        """Add an amount, or every balance of another wallet."""
        if isinstance(other, Amount):
            self._put(other.currency, self._data.get(other.currency, 0.0) + other.value)
        elif isinstance(other, Wallet):
            for currency, value in list(other._data.items()):
                self._put(currency, self._data.get(currency, 0.0) + value)
        else:
            raise TypeError(f"cannot deposit {type(other).__name__}")

    def withdraw(self, other: Union[Amount, "Wallet"]) -> None:
        """Subtract an amount, or every balance of another wallet."""
        if isinstance(other, Amount):
            self._put(other.currency, self._data.get(other.currency, 0.0) - other.value)
        elif isinstance(other, Wallet):
            for currency, value in list(other._data.items()):
                self._put(currency, self._data.get(currency, 0.0) - value)
        else:
            raise TypeError(f"cannot withdraw {type(other).__name__}")

    def set(self, currency: Union[Currency, str], value: float) -> None:
        """Overwrite the balance of a currency, removing it when (near) zero."""
        self._put(to_currency(currency), float(value))

    def clear(self) -> None:
        self._data.clear()

    # ========================================================================
    # Queries
    # ========================================================================

    def get_value(self, currency: Union[Currency, str]) -> float:
        """Balance for ``currency``, 0.0 when the wallet holds none."""
        return self._data.get(to_currency(currency), 0.0)

    __getitem__ = get_value

    def get_amount(self, currency: Union[Currency, str]) -> Amount:
        currency = to_currency(currency)
        return Amount(currency, self._data.get(currency, 0.0))

    @property
    def currencies(self) -> List[Currency]:
        return list(self._data.keys())

    def is_empty(self) -> bool:
        return not self._data

    def is_multi_currency(self) -> bool:
        """True when more than one currency has a non-negligible balance."""
        return len(self._data) > 1

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[Amount]:
        return iter(self.to_amounts())

    def __contains__(self, currency) -> bool:
        return to_currency(currency) in self._data

    def to_dict(self) -> Dict[Currency, float]:
        return dict(self._data)

    def to_amounts(self) -> List[Amount]:
        return [Amount(currency, value) for currency, value in self._data.items()]

    def copy(self) -> "Wallet":
        result = Wallet()
        result._data = dict(self._data)
        return result

    # ========================================================================
    # Arithmetic (always returns a new wallet)
    # ========================================================================

    def __add__(self, other):
        if not isinstance(other, (Amount, Wallet)):
            return NotImplemented
        result = self.copy()
        result.deposit(other)
        return result

    def __radd__(self, other):
        # Allows sum() over wallets, which starts from 0
        if isinstance(other, numbers.Real) and other == 0:
            return self.copy()
        return NotImplemented

    def __sub__(self, other):
        if not isinstance(other, (Amount, Wallet)):
            return NotImplemented
        result = self.copy()
        result.withdraw(other)
        return result

    def __mul__(self, other):
        if not isinstance(other, numbers.Real):
            return NotImplemented
        result = Wallet()
        for currency, value in self._data.items():
            result._put(currency, value * other)
        return result

    __rmul__ = __mul__

    def __truediv__(self, other):
        if not isinstance(other, numbers.Real):
            return NotImplemented
        result = Wallet()
        for currency, value in self._data.items():
            result._put(currency, value / other)
        return result

    def __neg__(self) -> "Wallet":
        return self * -1

    # ========================================================================
    # Conversion
    # ========================================================================

    def convert(self, currency: Union[Currency, str], time=None) -> Amount:
        """
        Total value of the wallet expressed in a single currency.

        No exchange-rate lookup happens when the wallet is empty or only
        holds the target currency.
        """
        currency = to_currency(currency)
        if not self._data or (len(self._data) == 1 and currency in self._data):
            return Amount(currency, self._data.get(currency, 0.0))

        time = pd.Timestamp.now(tz="UTC") if time is None else to_utc(time)
        total = 0.0
        for amount in self.to_amounts():
            total += amount.convert(currency, time).value
        return Amount(currency, total)

    def __eq__(self, other):
        if isinstance(other, Wallet):
            return self._data == other._data
        return NotImplemented

    def __str__(self) -> str:
        return ", ".join(str(amount) for amount in self.to_amounts())

    def __repr__(self) -> str:
        return f"Wallet({self})"

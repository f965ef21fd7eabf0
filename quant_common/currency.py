"""
Currency registry.

Currencies are interned: there is exactly one Currency object per code for
the lifetime of the process, so ``Currency("USD") is Currency.USD``.
Creation on first use is atomic under a lock.

The number of display digits comes from the ISO-4217 minor units table in
``constants`` (falling back to 2) and is purely cosmetic: it only affects
formatting, never arithmetic.

"""

import logging
import re
import threading
from typing import Dict, List, Optional, Tuple

from .constants import (
    CRYPTO_FRACTION_DIGITS,
    CURRENCY_FRACTION_DIGITS,
    DEFAULT_FRACTION_DIGITS,
)
from .errors import InvalidArgumentError

logger = logging.getLogger(__name__)

_registry_lock = threading.Lock()
_registry: Dict[str, "Currency"] = {}

_DISPLAY_NAMES = {
    "USD": "US Dollar",
    "EUR": "Euro",
    "JPY": "Japanese Yen",
    "GBP": "British Pound",
    "AUD": "Australian Dollar",
    "CAD": "Canadian Dollar",
    "CHF": "Swiss Franc",
    "CNY": "Chinese Yuan",
    "HKD": "Hong Kong Dollar",
    "NZD": "New Zealand Dollar",
    "RUB": "Russian Ruble",
    "INR": "Indian Rupee",
    "BTC": "Bitcoin",
    "ETH": "Ether",
    "USDT": "Tether",
}

_PAIR_SEPARATORS = re.compile(r"[_\- /:]")


class Currency:
    """
    An interned currency identified by its code.

    Attributes
    ----------
    code : str
        Currency code, e.g. "USD", "EUR" or "BTC"
    default_fraction_digits : int
        Number of digits used when displaying amounts in this currency

    Examples
    --------
    >>> Currency("EUR") is Currency.get_instance("EUR")
    True
    >>> Currency.JPY.default_fraction_digits
    0
    """

    USD: "Currency"
    EUR: "Currency"
    JPY: "Currency"
    GBP: "Currency"
    AUD: "Currency"
    CAD: "Currency"
    CHF: "Currency"
    CNY: "Currency"
    HKD: "Currency"
    NZD: "Currency"
    RUB: "Currency"
    INR: "Currency"
    BTC: "Currency"
    ETH: "Currency"
    USDT: "Currency"

    code: str
    default_fraction_digits: int

    def __new__(cls, code: str, fraction_digits: Optional[int] = None):
        return cls.get_instance(code, fraction_digits)

    @classmethod
    def get_instance(cls, code: str, fraction_digits: Optional[int] = None) -> "Currency":
        """
        Return the interned currency for ``code``, creating it on first use.

        ``fraction_digits`` is only used when the currency is created; an
        existing instance keeps its current digits.
        """
        if not isinstance(code, str) or not code.strip():
            raise InvalidArgumentError(f"currency code must be a non-blank string, got {code!r}")

        currency = _registry.get(code)
        if currency is not None:
            return currency

        with _registry_lock:
            currency = _registry.get(code)
            if currency is None:
                if fraction_digits is None:
                    fraction_digits = CRYPTO_FRACTION_DIGITS.get(
                        code, CURRENCY_FRACTION_DIGITS.get(code, DEFAULT_FRACTION_DIGITS)
                    )
                currency = object.__new__(cls)
                currency.code = code
                currency.default_fraction_digits = fraction_digits
                _registry[code] = currency
                logger.debug(f"Registered currency {code} ({fraction_digits} digits)")
            return currency

    @classmethod
    def increase_digits(cls, extra: int = 3) -> None:
        """Increase the display digits of every registered currency."""
        with _registry_lock:
            for currency in _registry.values():
                currency.default_fraction_digits += extra

    @classmethod
    def currencies(cls) -> List["Currency"]:
        """All registered currencies, in registration order."""
        with _registry_lock:
            return list(_registry.values())

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES.get(self.code, self.code)

    def __reduce__(self):
        return (Currency.get_instance, (self.code,))

    def __eq__(self, other):
        if isinstance(other, Currency):
            return self.code == other.code
        return NotImplemented

    def __hash__(self):
        return hash(self.code)

    def __lt__(self, other: "Currency") -> bool:
        return self.code < other.code

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"Currency('{self.code}')"


# Seed the well-known currencies in a fixed order
for _code in ("USD", "EUR", "JPY", "GBP", "AUD", "CAD", "CHF", "CNY",
              "HKD", "NZD", "RUB", "INR", "BTC", "ETH", "USDT"):
    setattr(Currency, _code, Currency.get_instance(_code))
del _code


def to_currency(value) -> Currency:
    """Accept either a Currency or a currency code."""
    if isinstance(value, Currency):
        return value
    return Currency.get_instance(value)


def to_currency_pair(text: str) -> Optional[Tuple[Currency, Currency]]:
    """
    Parse a currency pair such as "EUR/USD", "EUR_USD" or "EURUSD".

    Returns
    -------
    tuple of (Currency, Currency) or None
        (base, quote), or None when the text is not a recognizable pair

    Examples
    --------
    >>> to_currency_pair("eur-usd")
    (Currency('EUR'), Currency('USD'))
    """
    codes = _PAIR_SEPARATORS.split(text)
    if len(codes) == 2 and codes[0] and codes[1]:
        return Currency.get_instance(codes[0].upper()), Currency.get_instance(codes[1].upper())
    if len(codes) == 1 and len(text) == 6:
        return Currency.get_instance(text[:3].upper()), Currency.get_instance(text[3:].upper())
    return None

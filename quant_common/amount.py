"""
Monetary amount in a single currency.

Arithmetic with plain numbers stays in the same currency. Adding or
subtracting two Amounts never converts implicitly: the result is a Wallet
that holds both contributions.

"""

import numbers
from dataclasses import dataclass
from decimal import ROUND_HALF_DOWN, Decimal, localcontext
from typing import TYPE_CHECKING, Optional, Union

import pandas as pd

from .currency import Currency, to_currency
from .errors import CurrencyMismatchError
from .timeframe import to_utc

if TYPE_CHECKING:
    from .wallet import Wallet


@dataclass(frozen=True)
class Amount:
    """
    A value in a specific currency.

    Attributes
    ----------
    currency : Currency
        Currency of the amount (a code such as "USD" is also accepted)
    value : float
        The monetary value

    Examples
    --------
    >>> a = Amount("USD", 1500.0)
    >>> str(a)
    'USD 1,500.00'
    >>> (a * 2).value
    3000.0
    """

    currency: Currency
    value: float

    def __post_init__(self):
        object.__setattr__(self, "currency", to_currency(self.currency))
        object.__setattr__(self, "value", float(self.value))

    # ========================================================================
    # Queries
    # ========================================================================

    @property
    def is_positive(self) -> bool:
        return self.value > 0.0

    @property
    def is_negative(self) -> bool:
        return self.value < 0.0

    @property
    def is_zero(self) -> bool:
        return self.value == 0.0

    # ========================================================================
    # Arithmetic
    # ========================================================================

    def __add__(self, other):
        if isinstance(other, Amount):
            return self.to_wallet() + other
        if isinstance(other, numbers.Real):
            return Amount(self.currency, self.value + other)
        return NotImplemented

    def __radd__(self, other):
        # Allows sum() over amounts, which starts from 0
        if isinstance(other, numbers.Real):
            return Amount(self.currency, other + self.value)
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, Amount):
            return self.to_wallet() - other
        if isinstance(other, numbers.Real):
            return Amount(self.currency, self.value - other)
        return NotImplemented

    def __mul__(self, other):
        if isinstance(other, numbers.Real):
            return Amount(self.currency, self.value * other)
        return NotImplemented

    __rmul__ = __mul__

    def __truediv__(self, other):
        if isinstance(other, numbers.Real):
            return Amount(self.currency, self.value / other)
        return NotImplemented

    def __neg__(self) -> "Amount":
        return Amount(self.currency, -self.value)

    def __abs__(self) -> "Amount":
        return Amount(self.currency, abs(self.value))

    # ========================================================================
    # Ordering
    # ========================================================================

    def _other_value(self, other) -> Optional[float]:
        if isinstance(other, Amount):
            if other.currency != self.currency:
                raise CurrencyMismatchError(
                    f"cannot compare {self.currency} amount with {other.currency} amount"
                )
            return other.value
        if isinstance(other, numbers.Real):
            return float(other)
        return None

    def __lt__(self, other):
        value = self._other_value(other)
        return NotImplemented if value is None else self.value < value

    def __le__(self, other):
        value = self._other_value(other)
        return NotImplemented if value is None else self.value <= value

    def __gt__(self, other):
        value = self._other_value(other)
        return NotImplemented if value is None else self.value > value

    def __ge__(self, other):
        value = self._other_value(other)
        return NotImplemented if value is None else self.value >= value

    # ========================================================================
    # Conversion
    # ========================================================================

    def convert(self, to: Union[Currency, str], time=None) -> "Amount":
        """
        Convert this amount into another currency.

        Parameters
        ----------
        to : Currency or str
            Target currency
        time : timestamp-like, optional
            Time of the conversion, defaults to now

        Returns
        -------
        Amount
            The converted amount. No exchange-rate lookup happens when the
            currency already matches or when the value is zero.
        """
        to = to_currency(to)
        if to == self.currency:
            return self
        if self.value == 0.0:
            return Amount(to, 0.0)

        from .config import Config

        time = pd.Timestamp.now(tz="UTC") if time is None else to_utc(time)
        return Config.exchange_rates.convert(self, to, time)

    def format_value(self, fraction_digits: Optional[int] = None) -> str:
        """Format the value with comma grouping and the currency display digits."""
        digits = self.currency.default_fraction_digits if fraction_digits is None else fraction_digits
        return f"{self.value:,.{digits}f}"

    def to_decimal(self, fraction_digits: Optional[int] = None) -> Decimal:
        """Value as a Decimal, rounded HALF_DOWN to the currency display digits."""
        digits = self.currency.default_fraction_digits if fraction_digits is None else fraction_digits
        value = Decimal(repr(self.value))
        with localcontext() as ctx:
            # Room for every integer digit plus the requested fraction digits
            ctx.prec = max(ctx.prec, value.adjusted() + digits + 2)
            return value.quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_DOWN)

    def to_wallet(self) -> "Wallet":
        from .wallet import Wallet

        return Wallet(self)

    def __str__(self) -> str:
        return f"{self.currency.code} {self.format_value()}"

"""
Exceptions raised by the value-type layer.

All failures are local and synchronous: the calling operation fails and
nothing is retried. Every exception derives from QuantCommonError so callers
can catch the whole family, while also deriving from the closest builtin so
generic handlers (ValueError, LookupError) keep working.
"""

from datetime import date


class QuantCommonError(Exception):
    """Base class for all quant_common errors."""
    pass


class InvalidArgumentError(QuantCommonError, ValueError):
    """Raised when an object cannot be constructed from the given arguments."""
    pass


class InvalidIntervalError(InvalidArgumentError):
    """Raised when a timeframe would have end < start or leave the legal range."""
    pass


class CurrencyMismatchError(QuantCommonError, ValueError):
    """Raised when two amounts of different currencies are compared."""
    pass


class PrecisionLossError(QuantCommonError, ArithmeticError):
    """Raised when a decimal value has more fraction digits than a Size can hold."""
    pass


class NoTradingError(QuantCommonError):
    """Raised when opening or closing times are requested for a non-trading day."""

    def __init__(self, day: date):
        self.day = day
        super().__init__(f"{day} is not a trading day")


class UnknownAssetTypeError(QuantCommonError, LookupError):
    """Raised when deserializing an asset whose type tag is not registered."""
    pass


class NoRateAvailableError(QuantCommonError, LookupError):
    """Raised when no exchange rate exists between two currencies at a time."""
    pass

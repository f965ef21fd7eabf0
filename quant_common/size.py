"""
Fixed-point quantity used for order, position and trade sizes.

A Size stores its value as a signed integer count of 10^-8 units, so
decimal quantities such as 0.1 shares or 0.00000001 BTC are represented
exactly and addition/subtraction never drift.

Exact paths
-----------
- construction from ``int``, ``str``, ``Decimal`` or another ``Size``
- ``+``, ``-``, unary ``-``, ``abs()``
- ``*`` by an ``int``
- comparison against ``Size``, ``int`` and ``float``

Lossy paths
-----------
- construction from ``float`` (truncated toward zero at 8 digits)
- ``*`` by a ``float`` and any ``/``
- ``to_float()``

Examples
--------
>>> Size("0.1") + Size("0.2") == Size("0.3")
True
>>> str(Size("10.500"))
'10.5'
"""

import math
import numbers
from decimal import ROUND_DOWN, Decimal, Inexact, InvalidOperation, localcontext
from typing import Union

from .constants import SIZE_FRACTION, SIZE_MAX_UNITS, SIZE_MIN_UNITS, SIZE_SCALE
from .errors import InvalidArgumentError, PrecisionLossError

SizeLike = Union["Size", int, str, Decimal, float]


def _check_units(units: int) -> int:
    if units > SIZE_MAX_UNITS or units < SIZE_MIN_UNITS:
        raise OverflowError(f"size out of range: {units} units")
    return units


def _units_from_decimal(value: Decimal) -> int:
    if not value.is_finite():
        raise InvalidArgumentError(f"size must be finite, got {value}")
    with localcontext() as ctx:
        ctx.prec = 60
        ctx.traps[Inexact] = True
        try:
            scaled = value.scaleb(SIZE_SCALE)
        except Inexact as exc:
            raise PrecisionLossError(f"{value} cannot be represented exactly") from exc
        if scaled != scaled.to_integral_value():
            raise PrecisionLossError(
                f"{value} has more than {SIZE_SCALE} fraction digits"
            )
        return int(scaled)


def _units_from_float(value: float) -> int:
    if not math.isfinite(value):
        raise InvalidArgumentError(f"size must be finite, got {value}")
    # Shortest round-tripping representation, so 0.1 becomes exactly 0.1
    with localcontext() as ctx:
        ctx.prec = 60
        scaled = Decimal(repr(value)).scaleb(SIZE_SCALE)
        return int(scaled.to_integral_value(rounding=ROUND_DOWN))


class Size:
    """
    Immutable fixed-point quantity with 8 fractional digits.

    Parameters
    ----------
    value : int, str, Decimal, float or Size
        The quantity. Decimal strings must fit in 8 fraction digits,
        otherwise PrecisionLossError is raised. Floats are converted through
        their shortest decimal form and truncated toward zero.

    Raises
    ------
    TypeError
        For bool or unsupported types
    PrecisionLossError
        When a decimal value needs more than 8 fraction digits
    OverflowError
        When the value does not fit the signed 64-bit unit count
    """

    __slots__ = ("_value",)

    ZERO: "Size"
    ONE: "Size"

    def __init__(self, value: SizeLike = 0):
        if isinstance(value, Size):
            units = value._value
        elif isinstance(value, bool):
            raise TypeError("bool is not a valid size")
        elif isinstance(value, numbers.Integral):
            units = int(value) * SIZE_FRACTION
        elif isinstance(value, Decimal):
            units = _units_from_decimal(value)
        elif isinstance(value, str):
            try:
                parsed = Decimal(value.strip().replace("_", ""))
            except InvalidOperation as exc:
                raise InvalidArgumentError(f"invalid size: {value!r}") from exc
            units = _units_from_decimal(parsed)
        elif isinstance(value, numbers.Real):
            units = _units_from_float(float(value))
        else:
            raise TypeError(f"cannot create Size from {type(value).__name__}")
        object.__setattr__(self, "_value", _check_units(units))

    @classmethod
    def from_units(cls, units: int) -> "Size":
        """Create a Size directly from its raw count of 10^-8 units."""
        obj = object.__new__(cls)
        object.__setattr__(obj, "_value", _check_units(int(units)))
        return obj

    def __setattr__(self, name, value):
        raise AttributeError("Size is immutable")

    def __reduce__(self):
        return (Size.from_units, (self._value,))

    @property
    def units(self) -> int:
        """Raw signed count of 10^-8 units."""
        return self._value

    # ========================================================================
    # Queries
    # ========================================================================

    @property
    def is_zero(self) -> bool:
        return self._value == 0

    @property
    def nonzero(self) -> bool:
        return self._value != 0

    @property
    def is_positive(self) -> bool:
        return self._value > 0

    @property
    def is_negative(self) -> bool:
        return self._value < 0

    @property
    def sign(self) -> int:
        return (self._value > 0) - (self._value < 0)

    @property
    def is_fractional(self) -> bool:
        """True when the value has a non-zero fractional part."""
        return self._value % SIZE_FRACTION != 0

    def __bool__(self) -> bool:
        return self._value != 0

    # ========================================================================
    # Arithmetic
    # ========================================================================

    def __add__(self, other):
        if isinstance(other, Size):
            return Size.from_units(self._value + other._value)
        if isinstance(other, numbers.Integral) and not isinstance(other, bool):
            return Size.from_units(self._value + int(other) * SIZE_FRACTION)
        return NotImplemented

    __radd__ = __add__

    def __sub__(self, other):
        if isinstance(other, Size):
            return Size.from_units(self._value - other._value)
        if isinstance(other, numbers.Integral) and not isinstance(other, bool):
            return Size.from_units(self._value - int(other) * SIZE_FRACTION)
        return NotImplemented

    def __rsub__(self, other):
        if isinstance(other, numbers.Integral) and not isinstance(other, bool):
            return Size.from_units(int(other) * SIZE_FRACTION - self._value)
        return NotImplemented

    def __mul__(self, other):
        if isinstance(other, bool):
            return NotImplemented
        if isinstance(other, numbers.Integral):
            return Size.from_units(self._value * int(other))
        if isinstance(other, numbers.Real):
            return Size(self.to_float() * float(other))
        return NotImplemented

    __rmul__ = __mul__

    def __truediv__(self, other):
        if isinstance(other, bool) or not isinstance(other, numbers.Real):
            return NotImplemented
        return Size(self.to_float() / float(other))

    def __neg__(self) -> "Size":
        return Size.from_units(-self._value)

    def __pos__(self) -> "Size":
        return self

    def __abs__(self) -> "Size":
        return self if self._value >= 0 else Size.from_units(-self._value)

    # ========================================================================
    # Comparison
    # ========================================================================

    def _compare(self, other, op):
        if isinstance(other, Size):
            return op(self._value, other._value)
        if isinstance(other, bool):
            return NotImplemented
        if isinstance(other, numbers.Integral):
            return op(self._value, int(other) * SIZE_FRACTION)
        if isinstance(other, numbers.Real):
            other = float(other)
            if math.isnan(other):
                return False
            return op(self.to_decimal(), Decimal(other))
        return NotImplemented

    def __eq__(self, other):
        return self._compare(other, lambda a, b: a == b)

    def __lt__(self, other):
        return self._compare(other, lambda a, b: a < b)

    def __le__(self, other):
        return self._compare(other, lambda a, b: a <= b)

    def __gt__(self, other):
        return self._compare(other, lambda a, b: a > b)

    def __ge__(self, other):
        return self._compare(other, lambda a, b: a >= b)

    def __hash__(self):
        # Equal to hash(int) / hash(float) for numerically equal values
        return hash(self.to_decimal())

    # ========================================================================
    # Conversion
    # ========================================================================

    def round(self, scale: int) -> "Size":
        """
        Truncate toward zero, keeping at most ``scale`` fraction digits.

        Examples
        --------
        >>> Size("1.789").round(1)
        Size('1.7')
        >>> Size("-1.789").round(0)
        Size('-1')
        """
        if scale < 0:
            raise InvalidArgumentError(f"scale must be >= 0, got {scale}")
        if scale >= SIZE_SCALE:
            return self
        factor = 10 ** (SIZE_SCALE - scale)
        units = abs(self._value) // factor * factor
        return Size.from_units(units if self._value >= 0 else -units)

    def to_float(self) -> float:
        """Lossy conversion to float."""
        return self._value / SIZE_FRACTION

    def __float__(self) -> float:
        return self.to_float()

    def __int__(self) -> int:
        return int(self.to_decimal())

    def to_decimal(self) -> Decimal:
        """Exact value as a Decimal with 8 fraction digits."""
        with localcontext() as ctx:
            ctx.prec = 60
            return Decimal(self._value).scaleb(-SIZE_SCALE)

    def __str__(self) -> str:
        with localcontext() as ctx:
            ctx.prec = 60
            return format(self.to_decimal().normalize(), "f")

    def __repr__(self) -> str:
        return f"Size('{self}')"


Size.ZERO = Size(0)
Size.ONE = Size(1)

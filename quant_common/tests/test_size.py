"""
Tests for the fixed-point Size, including property-based tests using Hypothesis.
"""

import pickle
from decimal import Decimal

import pytest
from hypothesis import given, settings, strategies as st

from quant_common.constants import SIZE_MAX_UNITS
from quant_common.errors import InvalidArgumentError, PrecisionLossError
from quant_common.size import Size

# Unit counts small enough that sums of three never overflow
units_strategy = st.integers(min_value=-(10 ** 17), max_value=10 ** 17)


def canonical(units: int) -> str:
    text = format(Decimal(units).scaleb(-8), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


class TestConstruction:
    """Exact and lossy construction paths."""

    def test_from_int(self):
        assert Size(10).units == 1_000_000_000
        assert Size(-3).units == -300_000_000

    def test_from_string(self):
        assert Size("0.1").units == 10_000_000
        assert Size("0.00000001").units == 1
        assert Size("  -12.5 ").units == -1_250_000_000

    def test_from_decimal(self):
        assert Size(Decimal("1.25")) == Size("1.25")

    def test_from_size(self):
        s = Size("3.3")
        assert Size(s) == s

    def test_too_many_digits_fails(self):
        with pytest.raises(PrecisionLossError):
            Size("0.000000001")
        with pytest.raises(PrecisionLossError):
            Size(Decimal("1.123456789"))

    def test_long_decimal_input_fails(self):
        with pytest.raises(PrecisionLossError):
            Size("1." + "0" * 60 + "1")
        with pytest.raises(PrecisionLossError):
            Size(Decimal("0.1" + "0" * 70 + "1"))
        assert Size("1." + "0" * 70) == Size(1)

    def test_trailing_zeros_beyond_scale_are_exact(self):
        assert Size("1.1000000000") == Size("1.1")

    def test_float_is_truncated_toward_zero(self):
        assert Size(0.1) == Size("0.1")
        assert Size(1.123456789) == Size("1.12345678")
        assert Size(-1.123456789) == Size("-1.12345678")

    def test_invalid_inputs(self):
        with pytest.raises(TypeError):
            Size(True)
        with pytest.raises(TypeError):
            Size([1])
        with pytest.raises(InvalidArgumentError):
            Size("abc")
        with pytest.raises(InvalidArgumentError):
            Size(float("nan"))
        with pytest.raises(ValueError):
            Size(float("inf"))

    def test_overflow(self):
        with pytest.raises(OverflowError):
            Size(92233720369)
        with pytest.raises(OverflowError):
            Size.from_units(SIZE_MAX_UNITS) + Size.from_units(1)
        assert Size.from_units(SIZE_MAX_UNITS).units == SIZE_MAX_UNITS


class TestArithmetic:
    """Integer-domain arithmetic."""

    def test_no_floating_drift(self):
        assert Size("0.1") + Size("0.2") == Size("0.3")
        assert Size("0.3") - Size("0.1") == Size("0.2")

    def test_int_operands(self):
        assert Size("1.5") + 1 == Size("2.5")
        assert 1 - Size("0.25") == Size("0.75")
        assert sum([Size("0.1")] * 10) == Size(1)

    def test_multiply(self):
        assert Size("0.00000001") * 3 == Size("0.00000003")
        assert 3 * Size("1.1") == Size("3.3")
        assert Size(3) * 0.5 == Size("1.5")

    def test_divide(self):
        assert Size(1) / 4 == Size("0.25")
        assert Size(10) / 3 == Size("3.33333333")
        with pytest.raises(ZeroDivisionError):
            Size(1) / 0

    def test_unary(self):
        assert -Size("1.5") == Size("-1.5")
        assert abs(Size("-1.5")) == Size("1.5")
        assert +Size(2) == Size(2)


class TestComparison:
    """Comparisons and hashing."""

    def test_against_size_and_int(self):
        assert Size("1.5") > Size(1)
        assert Size("1.5") < 2
        assert Size(2) == 2
        assert Size(2) >= 2

    def test_against_float_is_exact(self):
        assert Size("0.5") == 0.5
        assert Size("0.25") < 0.3
        # 0.1 has no exact binary representation
        assert Size("0.1") != 0.1
        assert not Size(1) == float("nan")

    def test_hash_consistent_with_equality(self):
        assert hash(Size(2)) == hash(2)
        assert hash(Size("0.5")) == hash(0.5)
        assert len({Size("1.0"), Size(1), Size("1.00000000")}) == 1


class TestQueries:
    """Derived queries and conversions."""

    def test_sign_and_flags(self):
        assert Size.ZERO.is_zero and not Size.ZERO
        assert Size.ONE.nonzero and Size.ONE
        assert Size(-2).is_negative and Size(-2).sign == -1
        assert Size(2).is_positive and Size(2).sign == 1
        assert Size.ZERO.sign == 0

    def test_is_fractional(self):
        assert Size("1.5").is_fractional
        assert not Size(3).is_fractional
        assert Size("-0.00000001").is_fractional

    def test_round_truncates(self):
        assert Size("1.789").round(1) == Size("1.7")
        assert Size("-1.789").round(0) == Size(-1)
        assert Size("1.5").round(8) == Size("1.5")
        with pytest.raises(InvalidArgumentError):
            Size(1).round(-1)

    def test_conversions(self):
        assert Size("1.5").to_float() == 1.5
        assert float(Size("-0.25")) == -0.25
        assert int(Size("-2.7")) == -2
        assert Size("1.5").to_decimal() == Decimal("1.5")

    def test_str_and_repr(self):
        assert str(Size("10.500")) == "10.5"
        assert str(Size(100)) == "100"
        assert str(Size.ZERO) == "0"
        assert str(Size("-0.00000001")) == "-0.00000001"
        assert repr(Size("1.5")) == "Size('1.5')"

    def test_immutable(self):
        with pytest.raises(AttributeError):
            Size(1)._value = 5

    def test_pickle(self):
        s = Size("123.456")
        assert pickle.loads(pickle.dumps(s)) == s


class TestSizeProperties:
    """Property-based tests for Size."""

    @given(units=st.integers(min_value=-SIZE_MAX_UNITS, max_value=SIZE_MAX_UNITS))
    @settings(max_examples=200, deadline=None)
    def test_string_round_trip(self, units):
        """str(Size(s)) reproduces the canonical form of s."""
        text = format(Decimal(units).scaleb(-8), "f")
        assert str(Size(text)) == canonical(units)
        assert Size(str(Size(text))).units == units

    @given(a=units_strategy, b=units_strategy, c=units_strategy)
    @settings(max_examples=200, deadline=None)
    def test_addition_is_exact(self, a, b, c):
        x, y, z = Size.from_units(a), Size.from_units(b), Size.from_units(c)
        assert x + y == y + x
        assert (x + y) + z == x + (y + z)
        assert x + y - y == x
        assert (x + y).units == a + b

    @given(
        a=st.integers(min_value=-(10 ** 15), max_value=10 ** 15),
        n=st.integers(min_value=-1000, max_value=1000),
    )
    @settings(max_examples=100, deadline=None)
    def test_int_multiplication_is_exact(self, a, n):
        assert (Size.from_units(a) * n).units == a * n

    def test_int_multiplication_overflow(self):
        with pytest.raises(OverflowError):
            Size.from_units(SIZE_MAX_UNITS // 2 + 1) * 2
        assert (Size.from_units(SIZE_MAX_UNITS // 2) * 2).units == SIZE_MAX_UNITS - 1

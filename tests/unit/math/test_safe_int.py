"""Tests for SafeInt safe arithmetic wrapper."""

import pytest

from stablepool.safe_int import (
    UINT128_MAX,
    UINT256_MAX,
    DivisionByZero,
    S,
    SafeInt,
    SafeIntError,
    Uint128Overflow,
    Uint256Overflow,
    Underflow,
)


class TestSafeIntConstruction:
    """Tests for SafeInt construction."""

    def test_from_int(self):
        """SafeInt can be constructed from int."""
        assert SafeInt(42).value == 42

    def test_from_safeint(self):
        """SafeInt can be constructed from another SafeInt."""
        assert SafeInt(SafeInt(42)).value == 42

    def test_from_invalid_type_raises(self):
        """SafeInt rejects str, float and bool."""
        with pytest.raises(TypeError):
            SafeInt("42")  # type: ignore
        with pytest.raises(TypeError):
            SafeInt(3.14)  # type: ignore
        with pytest.raises(TypeError):
            SafeInt(True)

    def test_alias_and_zero(self):
        """S is an alias for SafeInt; zero() is 0."""
        assert S is SafeInt
        assert SafeInt.zero().value == 0


class TestSafeIntArithmetic:
    """Tests for SafeInt arithmetic operations."""

    def test_add_and_radd(self):
        assert (S(10) + S(5)).value == 15
        assert (S(10) + 5).value == 15
        assert (5 + S(10)).value == 15

    def test_sub(self):
        assert (S(10) - 3).value == 7
        assert (10 - S(3)).value == 7

    def test_sub_underflow_raises(self):
        """Subtraction below zero raises Underflow."""
        with pytest.raises(Underflow):
            S(3) - 5
        with pytest.raises(Underflow):
            3 - S(5)

    def test_floordiv(self):
        assert (S(10) // 3).value == 3
        assert (10 // S(3)).value == 3

    def test_division_by_zero_raises(self):
        with pytest.raises(DivisionByZero):
            S(10) // 0
        with pytest.raises(DivisionByZero):
            10 // S(0)

    def test_pow(self):
        assert (S(10) ** 3).value == 1000

    def test_comparisons(self):
        assert S(1) < S(2)
        assert S(2) <= 2
        assert S(3) > 2
        assert S(3) >= S(3)
        assert S(3) == 3
        assert S(3) != S(4)


class TestSafeIntNamedOperations:
    """Tests for abs_diff, saturating_sub, multiply_ratio, wrapping_add."""

    def test_abs_diff(self):
        assert S(3).abs_diff(10).value == 7
        assert S(10).abs_diff(3).value == 7

    def test_saturating_sub_clamps(self):
        assert S(3).saturating_sub(5).value == 0
        assert S(5).saturating_sub(3).value == 2

    def test_multiply_ratio_floors(self):
        """Product is taken before dividing; only the final result floors."""
        assert S(10).multiply_ratio(3, 4).value == 7
        assert S(10**30).multiply_ratio(10**30, 10**30).value == 10**30

    def test_multiply_ratio_zero_denominator_raises(self):
        with pytest.raises(DivisionByZero):
            S(10).multiply_ratio(3, 0)

    def test_wrapping_add_wraps_at_128_bits(self):
        assert S(UINT128_MAX).wrapping_add(2).value == 1
        assert S(5).wrapping_add(7).value == 12

    def test_wrapping_add_custom_width(self):
        assert S(255).wrapping_add(1, bits=8).value == 0


class TestSafeIntConversion:
    """Tests for uint128 / uint256 bound checks."""

    def test_to_uint128_bounds(self):
        assert S(UINT128_MAX).to_uint128() == UINT128_MAX
        with pytest.raises(Uint128Overflow):
            S(UINT128_MAX + 1).to_uint128()
        with pytest.raises(Uint128Overflow):
            S(-1).to_uint128()

    def test_to_uint256_bounds(self):
        assert S(UINT256_MAX).to_uint256() == UINT256_MAX
        with pytest.raises(Uint256Overflow):
            S(UINT256_MAX + 1).to_uint256()

    def test_checked_u256_returns_self(self):
        s = S(10**60)
        assert s.checked_u256() is s
        with pytest.raises(Uint256Overflow):
            S(UINT256_MAX + 1).checked_u256()

    def test_errors_are_arithmetic_errors(self):
        """All SafeInt errors can be caught as ArithmeticError."""
        for error in (DivisionByZero, Underflow, Uint128Overflow, Uint256Overflow):
            assert issubclass(error, SafeIntError)
            assert issubclass(error, ArithmeticError)

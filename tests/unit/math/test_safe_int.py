"""Tests for SafeInt checked uint256 arithmetic."""

import pytest

from pairpool.safe_int import (
    UINT256_MAX,
    DivisionByZero,
    S,
    SafeInt,
    SafeIntError,
    Uint256Overflow,
    Underflow,
    is_uint256,
)


class TestSafeIntConstruction:
    """Tests for SafeInt construction."""

    def test_from_int(self):
        """SafeInt can be constructed from int."""
        assert SafeInt(42).value == 42

    def test_from_safeint(self):
        """SafeInt can be constructed from another SafeInt."""
        assert SafeInt(SafeInt(42)).value == 42

    def test_bounds_accepted(self):
        """Zero and UINT256_MAX are valid."""
        assert SafeInt(0).value == 0
        assert SafeInt(UINT256_MAX).value == UINT256_MAX

    def test_negative_rejected(self):
        """Negative values never fit in a uint256."""
        with pytest.raises(Uint256Overflow):
            SafeInt(-1)

    def test_too_large_rejected(self):
        """Values above UINT256_MAX are rejected on construction."""
        with pytest.raises(Uint256Overflow):
            SafeInt(UINT256_MAX + 1)

    def test_invalid_type_raises(self):
        """SafeInt rejects non-int types, including bool."""
        with pytest.raises(TypeError):
            SafeInt("42")  # type: ignore
        with pytest.raises(TypeError):
            SafeInt(3.14)  # type: ignore
        with pytest.raises(TypeError):
            SafeInt(True)

    def test_alias_s(self):
        """S is an alias for SafeInt."""
        assert S is SafeInt

    def test_zero_constructor(self):
        """SafeInt.zero() creates zero value."""
        assert SafeInt.zero().value == 0


class TestSafeIntArithmetic:
    """Tests for SafeInt arithmetic operations."""

    def test_add(self):
        """Addition works with SafeInt and int operands."""
        assert (S(10) + S(5)).value == 15
        assert (S(10) + 5).value == 15
        assert (5 + S(10)).value == 15

    def test_add_overflow_raises(self):
        """Addition past UINT256_MAX raises."""
        with pytest.raises(Uint256Overflow):
            S(UINT256_MAX) + 1

    def test_sub(self):
        """Subtraction with non-negative result works."""
        assert (S(10) - S(3)).value == 7
        assert (10 - S(3)).value == 7
        assert (S(5) - S(5)).value == 0

    def test_sub_underflow_raises(self):
        """Subtraction below zero raises Underflow with the operands."""
        with pytest.raises(Underflow) as exc_info:
            S(5) - S(10)
        assert "5 - 10" in str(exc_info.value)

    def test_rsub_underflow_raises(self):
        """Reverse subtraction underflow raises Underflow."""
        with pytest.raises(Underflow):
            5 - S(10)

    def test_mul(self):
        """Multiplication works with SafeInt and int operands."""
        assert (S(6) * S(7)).value == 42
        assert (6 * S(7)).value == 42

    def test_mul_overflow_raises(self):
        """Multiplication past UINT256_MAX raises."""
        with pytest.raises(Uint256Overflow):
            S(2**128) * S(2**128)

    def test_floordiv_truncates(self):
        """Division rounds toward zero."""
        assert (S(9_960_000_000) // S(10_000_009_960)).value == 0
        assert (S(17) // S(5)).value == 3

    def test_division_by_zero_raises(self):
        """Division by zero raises DivisionByZero."""
        with pytest.raises(DivisionByZero):
            S(1) // 0

    def test_mul_div(self):
        """mul_div multiplies then truncates once."""
        assert S(10_000).mul_div(30, 10_000).value == 30
        assert S(333).mul_div(30, 10_000).value == 0

    def test_checked_sub(self):
        """checked_sub returns None instead of raising."""
        assert S(10).checked_sub(4) == 6
        assert S(4).checked_sub(10) is None

    def test_errors_are_arithmetic_errors(self):
        """All SafeInt errors derive from ArithmeticError."""
        for error in (DivisionByZero, Underflow, Uint256Overflow):
            assert issubclass(error, SafeIntError)
            assert issubclass(error, ArithmeticError)


class TestSafeIntComparison:
    """Tests for comparisons and conversions."""

    def test_comparisons_with_int(self):
        """SafeInt compares against ints and SafeInts."""
        assert S(5) == 5
        assert S(5) == S(5)
        assert S(4) < 5
        assert S(5) <= S(5)
        assert S(6) > 5
        assert S(6) >= 6

    def test_bool_and_int(self):
        """Zero is falsy; int() unwraps."""
        assert not S(0)
        assert S(1)
        assert int(S(77)) == 77


class TestIsUint256:
    """Tests for the is_uint256 predicate."""

    @pytest.mark.parametrize("value", [0, 1, UINT256_MAX])
    def test_valid(self, value):
        assert is_uint256(value)

    @pytest.mark.parametrize("value", [-1, UINT256_MAX + 1, True, 1.0, "1", None])
    def test_invalid(self, value):
        assert not is_uint256(value)

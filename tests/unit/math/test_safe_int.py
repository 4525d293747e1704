"""Tests for SafeInt safe arithmetic wrapper."""

import pytest

from cpamm.constants import UINT256_MAX
from cpamm.safe_int import (
    DivisionByZero,
    S,
    SafeInt,
    SafeIntError,
    Underflow,
)


class TestSafeIntConstruction:
    """Tests for SafeInt construction."""

    def test_from_int(self):
        assert SafeInt(42).value == 42

    def test_from_safeint(self):
        assert SafeInt(SafeInt(42)).value == 42

    def test_rejects_float_and_str(self):
        """SafeInt rejects non-integer types."""
        with pytest.raises(TypeError):
            SafeInt(3.14)  # type: ignore
        with pytest.raises(TypeError):
            SafeInt("42")  # type: ignore

    def test_rejects_bool(self):
        """Booleans are ints in Python but never valid amounts."""
        with pytest.raises(TypeError):
            SafeInt(True)  # type: ignore

    def test_alias_s(self):
        assert S is SafeInt


class TestSafeIntArithmetic:
    """Tests for checked operators."""

    def test_add_and_mul(self):
        assert (S(3) + S(4)).value == 7
        assert (S(3) * 4).value == 12
        assert (5 * S(3)).value == 15

    def test_sub_underflow_raises(self):
        with pytest.raises(Underflow):
            S(1) - S(2)

    def test_sub_to_zero_allowed(self):
        assert (S(5) - 5).value == 0

    def test_floordiv_rounds_down(self):
        assert (S(997_000_000) // S(10_997_000)).value == 90

    def test_floordiv_by_zero_raises(self):
        with pytest.raises(DivisionByZero):
            S(1) // S(0)

    def test_errors_are_arithmetic_errors(self):
        """All SafeInt errors derive from ArithmeticError."""
        assert issubclass(SafeIntError, ArithmeticError)
        assert issubclass(Underflow, SafeIntError)
        assert issubclass(DivisionByZero, SafeIntError)

    def test_products_exceed_uint256_without_overflow(self):
        """Intermediates are arbitrary precision."""
        big = S(UINT256_MAX) * S(UINT256_MAX)
        assert big.value == UINT256_MAX * UINT256_MAX


class TestSafeIntHelpers:
    """Tests for named operations."""

    def test_min(self):
        assert S(3).min(5).value == 3
        assert S(7).min(S(2)).value == 2

    def test_isqrt_rounds_down(self):
        assert S(1_000_000).isqrt().value == 1_000
        assert S(1_000_001).isqrt().value == 1_000
        assert S(999_999).isqrt().value == 999

    def test_isqrt_negative_raises(self):
        with pytest.raises(Underflow):
            S(-1).isqrt()

    def test_comparisons(self):
        assert S(1) < S(2)
        assert S(2) >= 2
        assert S(2) == 2
        assert S(2) != S(3)
        assert not S(0)

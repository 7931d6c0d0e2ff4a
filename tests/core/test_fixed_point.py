"""Tests for cpamm/core/fixed_point.py: width-checked integer helpers."""

import pytest

from cpamm.core.errors import CurveError
from cpamm.core.fixed_point import (
    U64_MAX,
    U128_MAX,
    checked_add,
    checked_mul,
    checked_sub,
    div_ceil,
    isqrt,
    mul_div_ceil,
    mul_div_floor,
    require_u64,
)


class TestRequireU64:
    def test_accepts_bounds(self):
        assert require_u64("v", 0) == 0
        assert require_u64("v", U64_MAX) == U64_MAX

    def test_rejects_negative(self):
        with pytest.raises(CurveError):
            require_u64("v", -1)

    def test_rejects_too_wide(self):
        with pytest.raises(CurveError):
            require_u64("v", U64_MAX + 1)

    def test_rejects_bool_and_float(self):
        with pytest.raises(TypeError):
            require_u64("v", True)
        with pytest.raises(TypeError):
            require_u64("v", 1.0)  # type: ignore[arg-type]


class TestChecked:
    def test_add_overflow(self):
        assert checked_add(U64_MAX - 1, 1) == U64_MAX
        with pytest.raises(CurveError):
            checked_add(U64_MAX, 1)

    def test_sub_underflow(self):
        assert checked_sub(5, 5) == 0
        with pytest.raises(CurveError):
            checked_sub(4, 5)

    def test_mul_u64_by_u64_fits_u128(self):
        assert checked_mul(U64_MAX, U64_MAX) == U64_MAX * U64_MAX

    def test_mul_overflow(self):
        with pytest.raises(CurveError):
            checked_mul(U128_MAX, 2)

    def test_mul_custom_limit(self):
        with pytest.raises(CurveError):
            checked_mul(1 << 32, 1 << 32, limit=U64_MAX)


class TestMulDiv:
    def test_floor_and_ceil(self):
        assert mul_div_floor(7, 3, 2) == 10
        assert mul_div_ceil(7, 3, 2) == 11
        assert mul_div_ceil(6, 3, 2) == 9

    def test_wide_intermediate(self):
        # The product exceeds u64 but the quotient does not.
        assert mul_div_floor(U64_MAX, U64_MAX, U64_MAX) == U64_MAX
        assert mul_div_ceil(U64_MAX, 3, 4) == (U64_MAX * 3 + 3) // 4

    def test_quotient_overflow(self):
        with pytest.raises(CurveError):
            mul_div_floor(U64_MAX, 2, 1)
        with pytest.raises(CurveError):
            mul_div_ceil(U64_MAX, 2, 1)

    def test_division_by_zero(self):
        with pytest.raises(CurveError):
            mul_div_floor(1, 1, 0)
        with pytest.raises(CurveError):
            mul_div_ceil(1, 1, 0)
        with pytest.raises(CurveError):
            div_ceil(1, 0)

    def test_div_ceil(self):
        assert div_ceil(0, 3) == 0
        assert div_ceil(7, 2) == 4
        assert div_ceil(8, 2) == 4


def test_isqrt_exact_for_large_values() -> None:
    n = (1 << 70) + 12345
    assert isqrt(n * n) == n
    assert isqrt(n * n - 1) == n - 1
    with pytest.raises(CurveError):
        isqrt(-1)

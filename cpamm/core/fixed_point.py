"""Overflow-checked integer arithmetic for pool math.

Python ints never wrap, so the widths below are enforced explicitly: amounts,
reserves and LP supply live in u64, and every product of two u64 quantities is
formed in u128 before being divided back down. Anything outside its width is a
``CurveError``.

Rounding is chosen per call site (``mul_div_floor`` / ``mul_div_ceil``); the
curve module documents which direction favors the pool.
"""

from __future__ import annotations

import math

from .errors import CurveError

U64_MAX: int = (1 << 64) - 1
U128_MAX: int = (1 << 128) - 1
BPS_DENOM: int = 10_000


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def require_u64(name: str, value: int) -> int:
    """Return *value* if it is a u64, else raise."""
    _require_int(name, value)
    if value < 0:
        raise CurveError(f"{name} must be non-negative: {value}")
    if value > U64_MAX:
        raise CurveError(f"{name} exceeds u64: {value}")
    return value


def _bounded(result: int, limit: int, what: str) -> int:
    if result < 0:
        raise CurveError(f"{what} underflow")
    if result > limit:
        raise CurveError(f"{what} overflow")
    return result


def checked_add(a: int, b: int, *, limit: int = U64_MAX) -> int:
    return _bounded(a + b, limit, "add")


def checked_sub(a: int, b: int) -> int:
    return _bounded(a - b, U64_MAX, "sub")


def checked_mul(a: int, b: int, *, limit: int = U128_MAX) -> int:
    return _bounded(a * b, limit, "mul")


def div_ceil(numerator: int, denominator: int) -> int:
    if denominator == 0:
        raise CurveError("division by zero")
    if numerator < 0 or denominator < 0:
        raise CurveError("div_ceil operands must be non-negative")
    return (numerator + denominator - 1) // denominator


def mul_div_floor(a: int, b: int, denominator: int) -> int:
    """``floor(a * b / denominator)`` with a u128 intermediate and u64 result."""
    if denominator == 0:
        raise CurveError("division by zero")
    product = checked_mul(a, b)
    return _bounded(product // denominator, U64_MAX, "mul_div_floor")


def mul_div_ceil(a: int, b: int, denominator: int) -> int:
    """``ceil(a * b / denominator)`` with a u128 intermediate and u64 result."""
    product = checked_mul(a, b)
    return _bounded(div_ceil(product, denominator), U64_MAX, "mul_div_ceil")


def isqrt(n: int) -> int:
    """Integer square root (floor). Exact for arbitrarily large *n*."""
    if n < 0:
        raise CurveError("isqrt of a negative number")
    return math.isqrt(n)

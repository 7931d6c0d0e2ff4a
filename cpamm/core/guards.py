"""Guard functions wrapped around every mutating pool operation.

Each guard raises the specific ``AmmError`` subclass on failure and returns
None otherwise, so an operation reads as a straight sequence of checks.
"""

from __future__ import annotations

from typing import Optional

from ..state.pools import Pool
from .errors import CurveError, InvalidAmount, PoolLocked, SlippageExceeded, Unauthorized
from .fixed_point import U64_MAX
from .invariants import check_all


# -- Entry -------------------------------------------------------------------

def require_unlocked(pool: Pool) -> None:
    if pool.locked:
        raise PoolLocked(f"pool {pool.pool_id} is locked")


def require_amount(name: str, amount: int) -> None:
    """Caller-supplied amounts must be u64 ints."""
    if not isinstance(amount, int) or isinstance(amount, bool):
        raise TypeError(f"{name} must be an int")
    if not (0 <= amount <= U64_MAX):
        raise InvalidAmount(f"{name} out of range: {amount}")


def require_nonzero(name: str, amount: int) -> None:
    if amount == 0:
        raise InvalidAmount(f"{name} must be non-zero")


# -- Slippage ----------------------------------------------------------------

def require_within_max(x: int, y: int, max_x: int, max_y: int) -> None:
    """Deposit bound: the pool may not take more than the caller allowed."""
    if x > max_x or y > max_y:
        raise SlippageExceeded(f"deposit ({x}, {y}) exceeds max ({max_x}, {max_y})")


def require_at_least(name: str, amount: int, minimum: int) -> None:
    """Output floor for swaps and withdrawals."""
    if amount < minimum:
        raise SlippageExceeded(f"{name} ({amount}) < minimum ({minimum})")


# -- Exit --------------------------------------------------------------------

def require_k_non_decreasing(k_before: int, k_after: int) -> None:
    """A decrease means the curve math is wrong; never user-correctable."""
    if k_after < k_before:
        raise CurveError(f"Invariant violation: k_after ({k_after}) < k_before ({k_before})")


def require_invariants(pool: Pool) -> None:
    violations = check_all(pool)
    if violations:
        raise CurveError(f"invariant violations: {', '.join(violations)}", violations)


# -- Administrative ----------------------------------------------------------

def require_authority(pool: Pool, caller: Optional[str]) -> None:
    if pool.authority is None:
        raise Unauthorized(f"pool {pool.pool_id} has no authority")
    if caller is None or caller != pool.authority:
        raise Unauthorized("caller is not the pool authority")

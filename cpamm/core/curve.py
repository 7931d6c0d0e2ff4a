"""
Constant-product curve math.

Pure functions computing deposit/withdraw/swap amounts from current reserves
and pool parameters. Every rounding decision favors the pool:

- amounts the pool *receives* round up (proportional deposit, swap fee),
- amounts the pool *pays out* round down (proportional withdraw, swap output).

Algorithm Design:
- Type: Fixed-Point Integer Arithmetic / Deterministic Rounding
- Time Complexity: O(1) per operation
- Invariant: after each swap, x' * y' >= x * y
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import Tuple

from .errors import CurveError, InvalidAmount
from .fixed_point import (
    BPS_DENOM,
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


@dataclass(frozen=True)
class SwapQuote:
    deposit: int
    withdraw: int
    fee: int
    amount_in_after_fee: int
    new_reserve_in: int
    new_reserve_out: int
    k_before: int
    k_after: int


def _require_fee_bps(fee_bps: int) -> None:
    if not isinstance(fee_bps, int) or isinstance(fee_bps, bool):
        raise TypeError("fee_bps must be an int")
    if not (0 <= fee_bps <= BPS_DENOM):
        raise InvalidAmount(f"fee_bps must be in [0, {BPS_DENOM}]: {fee_bps}")


def constant_product(reserve_x: int, reserve_y: int) -> int:
    """k = reserve_x * reserve_y, formed in u128."""
    return checked_mul(require_u64("reserve_x", reserve_x), require_u64("reserve_y", reserve_y))


def compute_initial_deposit(max_x: int, max_y: int) -> Tuple[int, int]:
    """
    First deposit into an empty pool: consumes exactly ``(max_x, max_y)`` and
    thereby fixes the initial price. Both legs must be non-zero so the pool
    leaves the empty state fully seeded.
    """
    require_u64("max_x", max_x)
    require_u64("max_y", max_y)
    if max_x == 0 or max_y == 0:
        raise InvalidAmount(f"initial deposit must seed both reserves: ({max_x}, {max_y})")
    return max_x, max_y


def suggest_initial_lp(max_x: int, max_y: int) -> int:
    """
    Geometric mean ``floor(sqrt(max_x * max_y))``.

    The initial deposit mints whatever the depositor asks for; this is the
    conventional choice that makes one share worth one unit of sqrt(k).
    """
    x, y = compute_initial_deposit(max_x, max_y)
    return isqrt(checked_mul(x, y))


def compute_proportional_deposit(
    reserve_x: int,
    reserve_y: int,
    lp_supply: int,
    lp_wanted: int,
) -> Tuple[int, int]:
    """
    Amounts required to mint ``lp_wanted`` shares of a seeded pool:

        x = ceil(lp_wanted * reserve_x / lp_supply)
        y = ceil(lp_wanted * reserve_y / lp_supply)

    Ceiling rounding: the pool never mints more proportional value than it receives.
    """
    for name, v in (
        ("reserve_x", reserve_x),
        ("reserve_y", reserve_y),
        ("lp_supply", lp_supply),
        ("lp_wanted", lp_wanted),
    ):
        require_u64(name, v)
    if lp_supply == 0:
        raise CurveError("proportional deposit into a pool with zero LP supply")
    x = mul_div_ceil(lp_wanted, reserve_x, lp_supply)
    y = mul_div_ceil(lp_wanted, reserve_y, lp_supply)
    return x, y


def compute_proportional_withdraw(
    reserve_x: int,
    reserve_y: int,
    lp_supply: int,
    lp_burned: int,
) -> Tuple[int, int]:
    """
    Amounts paid out for burning ``lp_burned`` shares:

        x = floor(lp_burned * reserve_x / lp_supply)
        y = floor(lp_burned * reserve_y / lp_supply)

    Floor rounding: the pool never pays more than the burned share's exact value.
    """
    for name, v in (
        ("reserve_x", reserve_x),
        ("reserve_y", reserve_y),
        ("lp_supply", lp_supply),
        ("lp_burned", lp_burned),
    ):
        require_u64(name, v)
    if lp_supply == 0:
        raise CurveError("withdraw from a pool with zero LP supply")
    if lp_burned > lp_supply:
        raise InvalidAmount(f"Cannot burn more LP than supply: {lp_burned} > {lp_supply}")
    x = mul_div_floor(lp_burned, reserve_x, lp_supply)
    y = mul_div_floor(lp_burned, reserve_y, lp_supply)
    return x, y


def compute_swap_output(
    reserve_in: int,
    reserve_out: int,
    amount_in: int,
    fee_bps: int,
) -> SwapQuote:
    """
    Exact-in swap against the constant-product curve.

        amount_in_after_fee = floor(amount_in * (10_000 - fee_bps) / 10_000)
        new_reserve_out     = ceil(reserve_in * reserve_out / (reserve_in + amount_in_after_fee))
        withdraw            = reserve_out - new_reserve_out
        deposit             = amount_in

    The fee (``amount_in - amount_in_after_fee``, i.e. the fee rounded up) stays
    in the pool. Rounding the post-trade output reserve up means the caller can
    never receive a unit the curve does not pay for, so k never decreases.

    Raises:
        InvalidAmount: If the trade is too small to move any output
        CurveError: On empty reserves or arithmetic overflow
    """
    for name, v in (
        ("reserve_in", reserve_in),
        ("reserve_out", reserve_out),
        ("amount_in", amount_in),
    ):
        require_u64(name, v)
    _require_fee_bps(fee_bps)

    if reserve_in == 0 or reserve_out == 0:
        raise CurveError("cannot swap against an empty reserve")
    if amount_in == 0:
        raise InvalidAmount("amount_in must be positive")

    amount_in_after_fee = mul_div_floor(amount_in, BPS_DENOM - fee_bps, BPS_DENOM)
    fee = amount_in - amount_in_after_fee

    k_before = checked_mul(reserve_in, reserve_out)
    # Width check on the full deposit; the pricing denominator is never larger.
    new_reserve_in = checked_add(reserve_in, amount_in)
    pricing_reserve_in = checked_add(reserve_in, amount_in_after_fee)

    new_reserve_out = div_ceil(k_before, pricing_reserve_in)
    withdraw = checked_sub(reserve_out, new_reserve_out)

    if withdraw == 0:
        raise InvalidAmount("amount_out is zero (trade too small)")

    k_after = checked_mul(new_reserve_in, new_reserve_out, limit=U128_MAX)

    return SwapQuote(
        deposit=amount_in,
        withdraw=withdraw,
        fee=fee,
        amount_in_after_fee=amount_in_after_fee,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
        k_before=k_before,
        k_after=k_after,
    )


def spot_price(reserve_in: int, reserve_out: int) -> Fraction:
    """Marginal price of the input asset in output units, ignoring fees."""
    require_u64("reserve_in", reserve_in)
    require_u64("reserve_out", reserve_out)
    if reserve_in == 0:
        raise CurveError("spot price of an empty reserve")
    return Fraction(reserve_out, reserve_in)

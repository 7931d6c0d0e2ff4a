"""Pool state transitions.

Each operation is a pure function of a ``Pool`` snapshot and caller-supplied
arguments. It:

1. Runs entry guards (lock flag, non-zero amounts).
2. Computes exact amounts with the curve module.
3. Runs slippage and exit guards (k non-decrease, record invariants).
4. Returns the ledger instructions plus the next ``Pool`` to commit.

Nothing here touches balances or storage; the first failing check raises and
no partial result ever exists. ``integration/service.py`` is the shell that
executes the instructions and commits the record.

State machine (``locked`` gates everything except ``set_locked``):

    EMPTY  --deposit(initial)-->  SEEDED
    SEEDED --deposit/swap-->      SEEDED
    SEEDED --withdraw-->          SEEDED, or EMPTY when the full supply is burned
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional, Tuple

from ..state.pools import Pool
from .curve import (
    SwapQuote,
    compute_initial_deposit,
    compute_proportional_deposit,
    compute_proportional_withdraw,
    compute_swap_output,
)
from .errors import InvalidAmount
from .fixed_point import BPS_DENOM, U64_MAX, checked_add, checked_sub
from .guards import (
    require_amount,
    require_at_least,
    require_authority,
    require_invariants,
    require_k_non_decreasing,
    require_nonzero,
    require_unlocked,
    require_within_max,
)
from .types import (
    BurnShare,
    DepositResult,
    Direction,
    Instruction,
    MintShare,
    Signer,
    SwapResult,
    Transfer,
    WithdrawResult,
)


def initialize(
    seed: int,
    asset_x: str,
    asset_y: str,
    fee_bps: int,
    authority: Optional[str] = None,
) -> Pool:
    """Create an empty, unlocked pool record."""
    if not isinstance(fee_bps, int) or isinstance(fee_bps, bool):
        raise TypeError("fee_bps must be an int")
    if not (0 <= fee_bps <= BPS_DENOM):
        raise InvalidAmount(f"fee_bps must be in [0, {BPS_DENOM}]: {fee_bps}")
    if not isinstance(seed, int) or isinstance(seed, bool):
        raise TypeError("seed must be an int")
    if not (0 <= seed <= U64_MAX):
        raise InvalidAmount(f"seed must fit in u64: {seed}")
    if asset_x == asset_y:
        raise InvalidAmount(f"pool assets must differ: {asset_x}")

    pool = Pool(
        seed=seed,
        asset_x=asset_x,
        asset_y=asset_y,
        fee_bps=fee_bps,
        authority=authority,
        locked=False,
    )
    require_invariants(pool)
    return pool


def deposit(pool: Pool, user: str, lp_wanted: int, max_x: int, max_y: int) -> DepositResult:
    """
    Mint ``lp_wanted`` shares to ``user``.

    The first deposit takes exactly ``(max_x, max_y)`` and mints ``lp_wanted``.
    Balances sent straight to a pool with no shares outstanding are folded into
    the new reserves instead of blocking it. Later deposits take the
    ceiling-rounded proportional amounts and fail if either exceeds its maximum.
    """
    require_unlocked(pool)
    for name, v in (("lp_wanted", lp_wanted), ("max_x", max_x), ("max_y", max_y)):
        require_amount(name, v)
    require_nonzero("lp_wanted", lp_wanted)

    if pool.lp_supply == 0:
        x, y = compute_initial_deposit(max_x, max_y)
    else:
        require_invariants(pool)
        x, y = compute_proportional_deposit(pool.reserve_x, pool.reserve_y, pool.lp_supply, lp_wanted)

    require_within_max(x, y, max_x, max_y)

    next_pool = replace(
        pool,
        reserve_x=checked_add(pool.reserve_x, x),
        reserve_y=checked_add(pool.reserve_y, y),
        lp_supply=checked_add(pool.lp_supply, lp_wanted),
    )
    require_invariants(next_pool)

    pool_id = pool.pool_id
    instructions: Tuple[Instruction, ...] = (
        Transfer(pool.asset_x, user, pool_id, x, Signer.USER),
        Transfer(pool.asset_y, user, pool_id, y, Signer.USER),
        MintShare(pool_id, user, lp_wanted),
    )
    return DepositResult(x_spent=x, y_spent=y, lp_minted=lp_wanted, pool=next_pool, instructions=instructions)


def withdraw(pool: Pool, user: str, lp_burned: int, min_x: int, min_y: int) -> WithdrawResult:
    """
    Burn ``lp_burned`` shares from ``user`` and pay out the floor-rounded
    proportional reserves. At least one of ``min_x``/``min_y`` must be set.
    """
    require_unlocked(pool)
    for name, v in (("lp_burned", lp_burned), ("min_x", min_x), ("min_y", min_y)):
        require_amount(name, v)
    require_nonzero("lp_burned", lp_burned)
    if min_x == 0 and min_y == 0:
        raise InvalidAmount("withdraw requires a non-zero minimum for at least one asset")
    if pool.lp_supply == 0:
        raise InvalidAmount("cannot withdraw from a pool with no shares outstanding")
    require_invariants(pool)

    x, y = compute_proportional_withdraw(pool.reserve_x, pool.reserve_y, pool.lp_supply, lp_burned)
    if x == 0 and y == 0:
        raise InvalidAmount("withdrawal rounds to zero")

    require_at_least("x_received", x, min_x)
    require_at_least("y_received", y, min_y)

    next_pool = replace(
        pool,
        reserve_x=checked_sub(pool.reserve_x, x),
        reserve_y=checked_sub(pool.reserve_y, y),
        lp_supply=checked_sub(pool.lp_supply, lp_burned),
    )
    require_invariants(next_pool)

    pool_id = pool.pool_id
    instructions: list[Instruction] = [BurnShare(pool_id, user, lp_burned)]
    if x:
        instructions.append(Transfer(pool.asset_x, pool_id, user, x, Signer.POOL))
    if y:
        instructions.append(Transfer(pool.asset_y, pool_id, user, y, Signer.POOL))
    return WithdrawResult(
        x_received=x, y_received=y, lp_burned=lp_burned, pool=next_pool, instructions=tuple(instructions)
    )


def quote_swap(pool: Pool, direction: Direction, amount_in: int) -> SwapQuote:
    """Read-only swap quote in the given direction (no lock or slippage checks)."""
    if direction is Direction.X_FOR_Y:
        return compute_swap_output(pool.reserve_x, pool.reserve_y, amount_in, pool.fee_bps)
    if direction is Direction.Y_FOR_X:
        return compute_swap_output(pool.reserve_y, pool.reserve_x, amount_in, pool.fee_bps)
    raise TypeError(f"direction must be a Direction, got {direction!r}")


def swap(pool: Pool, user: str, direction: Direction, amount_in: int, min_out: int) -> SwapResult:
    """Exact-in swap; ``min_out`` is the caller's output floor (0 disables it)."""
    require_unlocked(pool)
    require_amount("amount_in", amount_in)
    require_amount("min_out", min_out)
    require_nonzero("amount_in", amount_in)
    require_invariants(pool)

    quote = quote_swap(pool, direction, amount_in)
    require_nonzero("deposit", quote.deposit)
    require_nonzero("withdraw", quote.withdraw)
    require_at_least("amount_out", quote.withdraw, min_out)

    if direction is Direction.X_FOR_Y:
        asset_in, asset_out = pool.asset_x, pool.asset_y
        next_pool = replace(pool, reserve_x=quote.new_reserve_in, reserve_y=quote.new_reserve_out)
    else:
        asset_in, asset_out = pool.asset_y, pool.asset_x
        next_pool = replace(pool, reserve_y=quote.new_reserve_in, reserve_x=quote.new_reserve_out)

    require_k_non_decreasing(pool.constant_product(), next_pool.constant_product())
    require_invariants(next_pool)

    pool_id = pool.pool_id
    instructions: Tuple[Instruction, ...] = (
        Transfer(asset_in, user, pool_id, quote.deposit, Signer.USER),
        Transfer(asset_out, pool_id, user, quote.withdraw, Signer.POOL),
    )
    return SwapResult(
        direction=direction,
        amount_in=quote.deposit,
        amount_out=quote.withdraw,
        fee=quote.fee,
        k_before=quote.k_before,
        k_after=quote.k_after,
        pool=next_pool,
        instructions=instructions,
    )


def set_locked(pool: Pool, locked: bool, caller: Optional[str]) -> Pool:
    """Toggle the pause flag. Only the pool authority may do this, locked or not."""
    if not isinstance(locked, bool):
        raise TypeError("locked must be a bool")
    require_authority(pool, caller)
    return replace(pool, locked=locked)

"""Invariant checkers for pool records.

Each function returns True when the invariant holds, and `check_all()` returns
the list of violated invariant IDs (empty = all pass). The engine runs
`check_all()` on every post-state before handing it back.
"""

from __future__ import annotations

from typing import Callable

from ..state.pools import Pool
from .fixed_point import BPS_DENOM, U64_MAX


def inv_fee_in_range(p: Pool) -> bool:
    return 0 <= p.fee_bps <= BPS_DENOM


def inv_u64_bounds(p: Pool) -> bool:
    return all(0 <= v <= U64_MAX for v in (p.seed, p.reserve_x, p.reserve_y, p.lp_supply))


def inv_empty_or_seeded(p: Pool) -> bool:
    # reserve_x == 0 <=> reserve_y == 0 <=> lp_supply == 0
    return (p.reserve_x == 0) == (p.reserve_y == 0) == (p.lp_supply == 0)


def inv_distinct_assets(p: Pool) -> bool:
    return p.asset_x != p.asset_y


INVARIANT_REGISTRY: dict[str, Callable[[Pool], bool]] = {
    "inv_fee_in_range": inv_fee_in_range,
    "inv_u64_bounds": inv_u64_bounds,
    "inv_empty_or_seeded": inv_empty_or_seeded,
    "inv_distinct_assets": inv_distinct_assets,
}


def check_all(pool: Pool) -> list[str]:
    """Return list of violated invariant IDs (empty = all pass)."""
    return [
        inv_id
        for inv_id, check_fn in INVARIANT_REGISTRY.items()
        if not check_fn(pool)
    ]

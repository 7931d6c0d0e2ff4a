"""
Pool record and deterministic pool addressing.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..core.fixed_point import U64_MAX
from .balances import AccountId, Amount, AssetId
from .canonical import domain_sep_bytes, encode_str, sha256_hex

PoolId = str


class PoolPhase(Enum):
    """Reserve state of a pool. ``locked`` is an orthogonal flag."""
    EMPTY = "EMPTY"
    SEEDED = "SEEDED"


def derive_pool_id(seed: int, asset_x: AssetId, asset_y: AssetId) -> PoolId:
    """
    Deterministically compute a pool_id:

        pool_id = H(domain_sep("pool") || u64_le(seed) || len||asset_x || len||asset_y)

    The pool id doubles as the account that holds the pool's reserves on the ledger.
    """
    if not isinstance(seed, int) or isinstance(seed, bool):
        raise TypeError("seed must be an int")
    if not (0 <= seed <= U64_MAX):
        raise ValueError(f"seed must fit in u64: {seed}")
    data = (
        domain_sep_bytes("pool", version=1)
        + seed.to_bytes(8, "little")
        + encode_str(asset_x)
        + encode_str(asset_y)
    )
    return sha256_hex(data)


@dataclass(frozen=True)
class Pool:
    """
    State of one constant-product pool.

    Attributes:
        seed: Opaque u64 distinguishing pools over the same asset pair
        asset_x: First tradable asset (immutable)
        asset_y: Second tradable asset (immutable)
        fee_bps: Swap fee in basis points (0-10000, immutable)
        authority: Account allowed to toggle ``locked``; None means nobody can
        locked: When True every mutating operation except lock/unlock is rejected
        reserve_x: Logical mirror of the pool's asset_x balance on the ledger
        reserve_y: Logical mirror of the pool's asset_y balance on the ledger
        lp_supply: Logical mirror of the outstanding LP share supply
    """
    seed: int
    asset_x: AssetId
    asset_y: AssetId
    fee_bps: int
    authority: Optional[AccountId] = None
    locked: bool = False
    reserve_x: Amount = 0
    reserve_y: Amount = 0
    lp_supply: Amount = 0

    def __post_init__(self) -> None:
        for name in ("asset_x", "asset_y"):
            if not isinstance(getattr(self, name), str):
                raise TypeError(f"{name} must be a str")
        if self.authority is not None and not isinstance(self.authority, str):
            raise TypeError("authority must be a str or None")
        for name in ("seed", "fee_bps", "reserve_x", "reserve_y", "lp_supply"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError(f"{name} must be an int")

    @property
    def pool_id(self) -> PoolId:
        return derive_pool_id(self.seed, self.asset_x, self.asset_y)

    @property
    def phase(self) -> PoolPhase:
        if self.reserve_x == 0 and self.reserve_y == 0 and self.lp_supply == 0:
            return PoolPhase.EMPTY
        return PoolPhase.SEEDED

    def reserve_of(self, asset: AssetId) -> Amount:
        if asset == self.asset_x:
            return self.reserve_x
        if asset == self.asset_y:
            return self.reserve_y
        raise ValueError(f"Asset {asset} not in pool {self.pool_id}")

    def constant_product(self) -> int:
        """k = reserve_x * reserve_y."""
        return self.reserve_x * self.reserve_y

    def __repr__(self) -> str:
        return (
            f"Pool(pool_id={self.pool_id[:18]}..., "
            f"assets=({self.asset_x}, {self.asset_y}), fee_bps={self.fee_bps}, "
            f"reserves=({self.reserve_x}, {self.reserve_y}), "
            f"lp_supply={self.lp_supply}, locked={self.locked})"
        )

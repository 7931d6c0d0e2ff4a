"""
In-memory pool record storage.

Stands in for whatever persists pool records in a deployment. Records are
immutable ``Pool`` values, so a committed record can never be mutated behind
the store's back.
"""

from __future__ import annotations

from typing import Dict, Iterator

from ..core.errors import PoolExists, PoolNotFound
from .pools import Pool, PoolId


class PoolStore:
    def __init__(self) -> None:
        self._pools: Dict[PoolId, Pool] = {}

    def create(self, pool: Pool) -> PoolId:
        """Record a new pool. A pool id can only ever be created once."""
        pool_id = pool.pool_id
        if pool_id in self._pools:
            raise PoolExists(f"pool already exists: {pool_id}")
        self._pools[pool_id] = pool
        return pool_id

    def get(self, pool_id: PoolId) -> Pool:
        try:
            return self._pools[pool_id]
        except KeyError:
            raise PoolNotFound(f"unknown pool: {pool_id}") from None

    def commit(self, pool: Pool) -> None:
        """Replace an existing record (the pool must already exist)."""
        pool_id = pool.pool_id
        if pool_id not in self._pools:
            raise PoolNotFound(f"unknown pool: {pool_id}")
        self._pools[pool_id] = pool

    def __contains__(self, pool_id: object) -> bool:
        return pool_id in self._pools

    def __iter__(self) -> Iterator[PoolId]:
        return iter(sorted(self._pools))

    def __len__(self) -> int:
        return len(self._pools)

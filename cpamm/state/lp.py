"""
LP share balance tracking.

Shares are scoped per pool_id and tracked separately from asset balances. The
table also keeps each pool's total outstanding supply, which the curve reads as
``lp_supply``.
"""

from __future__ import annotations

from typing import Dict, Tuple

from ..core.errors import LedgerError
from .balances import AccountId, Amount

PoolId = str


class LPTable:
    """
    LP balance table mapping (account, pool_id) -> shares, plus per-pool supply.

    Invariant: for every pool, supply equals the sum of its holders' balances.
    """

    def __init__(self) -> None:
        self._balances: Dict[Tuple[AccountId, PoolId], Amount] = {}
        self._supply: Dict[PoolId, Amount] = {}

    def get(self, account: AccountId, pool_id: PoolId) -> Amount:
        return self._balances.get((account, pool_id), 0)

    def supply(self, pool_id: PoolId) -> Amount:
        return self._supply.get(pool_id, 0)

    def mint(self, account: AccountId, pool_id: PoolId, amount: Amount) -> None:
        if amount < 0:
            raise LedgerError(f"Mint amount must be non-negative: {amount}")
        self._set(account, pool_id, self.get(account, pool_id) + amount)
        self._supply[pool_id] = self.supply(pool_id) + amount

    def burn(self, account: AccountId, pool_id: PoolId, amount: Amount) -> None:
        if amount < 0:
            raise LedgerError(f"Burn amount must be non-negative: {amount}")
        current = self.get(account, pool_id)
        if amount > current:
            raise LedgerError(f"Insufficient LP balance: {current} < {amount}")
        self._set(account, pool_id, current - amount)
        remaining = self.supply(pool_id) - amount
        if remaining == 0:
            self._supply.pop(pool_id, None)
        else:
            self._supply[pool_id] = remaining

    def _set(self, account: AccountId, pool_id: PoolId, amount: Amount) -> None:
        if amount == 0:
            self._balances.pop((account, pool_id), None)
        else:
            self._balances[(account, pool_id)] = amount

    def copy(self) -> "LPTable":
        out = LPTable()
        out._balances = dict(self._balances)
        out._supply = dict(self._supply)
        return out

    def verify_supply(self) -> bool:
        """Verify every pool's supply equals the sum of its holders' balances."""
        totals: Dict[PoolId, Amount] = {}
        for (_, pool_id), amount in self._balances.items():
            totals[pool_id] = totals.get(pool_id, 0) + amount
        return totals == self._supply

    def __repr__(self) -> str:
        return f"LPTable({len(self._balances)} entries, {len(self._supply)} pools)"

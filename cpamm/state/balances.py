"""
Asset balance tracking for the in-memory ledger.

Implements BalanceTable[AccountId, AssetId] -> Amount
"""

from typing import Dict, Tuple

from ..core.errors import LedgerError


# Type aliases
AccountId = str  # user public key or a pool's vault account (its pool id)
AssetId = str
Amount = int  # non-negative, bounded to u64 by the curve layer


class BalanceTable:
    """
    Balance table mapping (account, asset) -> amount.

    Zero balances are dropped so two tables holding the same funds compare equal.
    """

    def __init__(self):
        self._balances: Dict[Tuple[AccountId, AssetId], Amount] = {}

    def get(self, account: AccountId, asset: AssetId) -> Amount:
        """Get balance for (account, asset). Returns 0 if not found."""
        return self._balances.get((account, asset), 0)

    def set(self, account: AccountId, asset: AssetId, amount: Amount) -> None:
        if amount < 0:
            raise LedgerError(f"Balance cannot be negative: {amount}")
        if amount == 0:
            self._balances.pop((account, asset), None)
        else:
            self._balances[(account, asset)] = amount

    def add(self, account: AccountId, asset: AssetId, delta: int) -> None:
        """
        Add delta to balance (delta may be negative).

        Raises:
            LedgerError: If the resulting balance would be negative
        """
        current = self.get(account, asset)
        new_balance = current + delta
        if new_balance < 0:
            raise LedgerError(
                f"Insufficient balance of {asset} in {account}: {current} < {-delta}"
            )
        self.set(account, asset, new_balance)

    def subtract(self, account: AccountId, asset: AssetId, delta: Amount) -> None:
        if delta < 0:
            raise LedgerError(f"Delta must be non-negative: {delta}")
        self.add(account, asset, -delta)

    def copy(self) -> "BalanceTable":
        out = BalanceTable()
        out._balances = dict(self._balances)
        return out

    def get_all_balances(self) -> Dict[Tuple[AccountId, AssetId], Amount]:
        return dict(self._balances)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BalanceTable):
            return NotImplemented
        return self._balances == other._balances

    def __repr__(self) -> str:
        return f"BalanceTable({len(self._balances)} entries)"

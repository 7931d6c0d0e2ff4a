"""
Pool records, balance tables and record storage
"""

from .balances import BalanceTable
from .lp import LPTable
from .pools import Pool, PoolPhase, derive_pool_id
from .store import PoolStore

__all__ = [
    "BalanceTable",
    "LPTable",
    "Pool",
    "PoolPhase",
    "derive_pool_id",
    "PoolStore",
]

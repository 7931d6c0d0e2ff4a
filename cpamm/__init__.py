"""
cpamm: accounting and pricing core of a two-asset constant-product pool.

Public API:
- `PoolService` (initialize / deposit / withdraw / swap / set_locked by pool id)
- `InMemoryLedger`, `Caller` (reference ledger collaborator)
- `Direction`, `Pool`, and the `AmmError` taxonomy
"""

from .core.errors import (
    AmmError,
    CurveError,
    InvalidAmount,
    LedgerError,
    PoolExists,
    PoolLocked,
    PoolNotFound,
    SlippageExceeded,
    Unauthorized,
)
from .core.types import Direction
from .integration.config import AmmConfig, load_config
from .integration.ledger import Caller, InMemoryLedger
from .integration.service import PoolService, request_payload
from .state.pools import Pool, PoolPhase, derive_pool_id

__all__ = [
    "AmmError",
    "CurveError",
    "InvalidAmount",
    "LedgerError",
    "PoolExists",
    "PoolLocked",
    "PoolNotFound",
    "SlippageExceeded",
    "Unauthorized",
    "Direction",
    "AmmConfig",
    "load_config",
    "Caller",
    "InMemoryLedger",
    "PoolService",
    "request_payload",
    "Pool",
    "PoolPhase",
    "derive_pool_id",
]

"""Exception types for the pool core.

Every rejection surfaces to the immediate caller as one of these. The first
four mirror the pool's error taxonomy; the rest belong to the collaborators
(authorization, storage, ledger) but share the base class so callers can catch
``AmmError`` uniformly.
"""

from __future__ import annotations

from typing import Optional, Sequence


class AmmError(Exception):
    """Base class. ``code`` is a stable identifier for logs and API layers."""

    code = "amm_error"


class InvalidAmount(AmmError):
    """Zero, out-of-range, or degenerate (rounds-to-zero) amount."""

    code = "invalid_amount"


class PoolLocked(AmmError):
    """The pool is administratively paused."""

    code = "pool_locked"


class SlippageExceeded(AmmError):
    """Computed amounts violate caller-supplied bounds."""

    code = "slippage_exceeded"


class CurveError(AmmError):
    """Overflow, division by zero, or a post-computation invariant violation."""

    code = "curve_error"

    def __init__(self, message: str, violations: Optional[Sequence[str]] = None) -> None:
        self.violations = list(violations or [])
        super().__init__(message)


class Unauthorized(AmmError):
    """Caller is not permitted to perform the operation."""

    code = "unauthorized"


class PoolExists(AmmError):
    code = "pool_exists"


class PoolNotFound(AmmError):
    code = "pool_not_found"


class LedgerError(AmmError):
    """Raised by the ledger on insufficient balance or a capability mismatch."""

    code = "ledger_error"

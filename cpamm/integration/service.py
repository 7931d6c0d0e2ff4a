"""
Pool service: the imperative shell around the pure engine.

For each request it:
- loads the pool record and overlays reserves/supply read from the ledger,
- authorizes the caller (with ``require_signatures``, a BLS signature over the
  exact request, verified against ``config.chain_id``),
- runs the pure engine operation,
- inside ``ledger.atomic()``: executes the emitted instructions, cross-checks the
  ledger's post balances against the engine's next state, and commits the record.

Any failure leaves the ledger and the store exactly as they were. Rejections are
logged and re-raised, never swallowed.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import replace
from typing import Any, Iterator, Optional, Sequence, Tuple

from ..core import engine
from ..core.curve import SwapQuote
from ..core.errors import AmmError, CurveError, PoolExists, Unauthorized
from ..core.types import BurnShare, Direction, Instruction, MintShare, Signer, Transfer
from ..state.canonical import canonical_json_bytes
from ..state.pools import Pool, PoolId
from ..state.store import PoolStore
from .config import AmmConfig
from .ledger import AuthContext, BlsSignatureAuthorizer, Caller, Ledger

logger = logging.getLogger(__name__)


def request_payload(op: str, pool_id: PoolId, **fields: Any) -> bytes:
    """Canonical bytes a caller signs to authorize exactly one request."""
    body = {k: (v.value if isinstance(v, Direction) else v) for k, v in fields.items()}
    return canonical_json_bytes({"op": op, "pool_id": pool_id, "fields": body})


class PoolService:
    def __init__(self, ledger: Ledger, store: Optional[PoolStore] = None, config: Optional[AmmConfig] = None) -> None:
        self._ledger = ledger
        self._store = store if store is not None else PoolStore()
        self._config = config if config is not None else AmmConfig()
        self._verifier = (
            BlsSignatureAuthorizer(self._config.chain_id) if self._config.require_signatures else None
        )

    @property
    def store(self) -> PoolStore:
        return self._store

    # -- Reads ---------------------------------------------------------------

    def snapshot(self, pool_id: PoolId) -> Pool:
        """Pool record with reserves and supply as the ledger currently holds them."""
        record = self._store.get(pool_id)
        return replace(
            record,
            reserve_x=self._ledger.balance_of(record.asset_x, pool_id),
            reserve_y=self._ledger.balance_of(record.asset_y, pool_id),
            lp_supply=self._ledger.share_supply(pool_id),
        )

    def quote(self, pool_id: PoolId, direction: Direction, amount_in: int) -> SwapQuote:
        return engine.quote_swap(self.snapshot(pool_id), direction, amount_in)

    # -- Operations ----------------------------------------------------------

    def initialize(
        self,
        seed: int,
        asset_x: str,
        asset_y: str,
        fee_bps: int,
        authority: Optional[str] = None,
    ) -> Pool:
        with self._logged("initialize", f"seed={seed}"):
            pool = engine.initialize(seed, asset_x, asset_y, fee_bps, authority)
            pool_id = pool.pool_id
            if pool_id in self._store:
                raise PoolExists(f"pool already exists: {pool_id}")
            self._ledger.register_pool(pool_id)
            self._store.create(pool)
        logger.info("initialized pool %s (%s/%s, fee_bps=%d)", pool_id, asset_x, asset_y, fee_bps)
        return pool

    def deposit(self, pool_id: PoolId, caller: Caller, lp_wanted: int, max_x: int, max_y: int) -> Tuple[int, int]:
        with self._logged("deposit", pool_id):
            with self._session(
                caller, "deposit", pool_id, lp_wanted=lp_wanted, max_x=max_x, max_y=max_y
            ) as session:
                result = engine.deposit(self.snapshot(pool_id), caller.account, lp_wanted, max_x, max_y)
                self._apply(pool_id, result.instructions, result.pool, session)
        logger.info(
            "deposit %s: %s spent (%d, %d) for %d LP", pool_id, caller.account, result.x_spent, result.y_spent, lp_wanted
        )
        return result.x_spent, result.y_spent

    def withdraw(self, pool_id: PoolId, caller: Caller, lp_burned: int, min_x: int, min_y: int) -> Tuple[int, int]:
        with self._logged("withdraw", pool_id):
            with self._session(
                caller, "withdraw", pool_id, lp_burned=lp_burned, min_x=min_x, min_y=min_y
            ) as session:
                result = engine.withdraw(self.snapshot(pool_id), caller.account, lp_burned, min_x, min_y)
                self._apply(pool_id, result.instructions, result.pool, session)
        logger.info(
            "withdraw %s: %s burned %d LP for (%d, %d)",
            pool_id, caller.account, lp_burned, result.x_received, result.y_received,
        )
        return result.x_received, result.y_received

    def swap(
        self, pool_id: PoolId, caller: Caller, direction: Direction, amount_in: int, min_out: int
    ) -> Tuple[int, int]:
        with self._logged("swap", pool_id):
            with self._session(
                caller, "swap", pool_id, direction=direction, amount_in=amount_in, min_out=min_out
            ) as session:
                result = engine.swap(self.snapshot(pool_id), caller.account, direction, amount_in, min_out)
                self._apply(pool_id, result.instructions, result.pool, session)
        logger.info(
            "swap %s %s: %s paid %d (fee %d), received %d",
            pool_id, direction.value, caller.account, result.amount_in, result.fee, result.amount_out,
        )
        return result.amount_in, result.amount_out

    def set_locked(self, pool_id: PoolId, locked: bool, caller: Caller) -> Pool:
        with self._logged("set_locked", pool_id):
            with self._session(caller, "set_locked", pool_id, locked=locked):
                pool = engine.set_locked(self._store.get(pool_id), locked, caller.account)
                self._store.commit(pool)
        logger.info("pool %s %s by %s", pool_id, "locked" if locked else "unlocked", caller.account)
        return pool

    # -- Internals -----------------------------------------------------------

    @contextmanager
    def _session(self, caller: Caller, op: str, pool_id: PoolId, **fields: Any) -> Iterator[AuthContext]:
        """User capability for one operation, closed when the operation ends."""
        if self._verifier is not None:
            if caller.signature is None:
                raise Unauthorized("request signature required")
            if caller.payload != request_payload(op, pool_id, **fields):
                raise Unauthorized("signed payload does not match request")
            if not self._verifier(caller):
                raise Unauthorized("invalid request signature")
        session = self._ledger.open_session(caller)
        try:
            yield session
        finally:
            self._ledger.close_session(session)

    def _apply(
        self, pool_id: PoolId, instructions: Sequence[Instruction], next_pool: Pool, session: AuthContext
    ) -> None:
        pool_auth = self._ledger.pool_authority(pool_id)
        try:
            with self._ledger.atomic():
                for ins in instructions:
                    if isinstance(ins, Transfer):
                        auth = session if ins.signer is Signer.USER else pool_auth
                        self._ledger.transfer(ins.asset, ins.source, ins.destination, ins.amount, auth=auth)
                    elif isinstance(ins, MintShare):
                        self._ledger.mint_share(ins.pool_id, ins.to, ins.amount, auth=pool_auth)
                    elif isinstance(ins, BurnShare):
                        self._ledger.burn_share(ins.pool_id, ins.source, ins.amount, auth=session)
                    else:
                        raise TypeError(f"unknown instruction: {ins!r}")
                self._verify_committed(pool_id, next_pool)
                self._store.commit(next_pool)
        finally:
            self._ledger.close_session(pool_auth)

    def _verify_committed(self, pool_id: PoolId, expected: Pool) -> None:
        actual = (
            self._ledger.balance_of(expected.asset_x, pool_id),
            self._ledger.balance_of(expected.asset_y, pool_id),
            self._ledger.share_supply(pool_id),
        )
        wanted = (expected.reserve_x, expected.reserve_y, expected.lp_supply)
        if actual != wanted:
            raise CurveError(f"ledger state {actual} diverges from computed state {wanted}")

    @contextmanager
    def _logged(self, op: str, target: str) -> Iterator[None]:
        try:
            yield
        except AmmError as exc:
            logger.warning("%s on %s rejected: %s: %s", op, target, exc.code, exc)
            raise


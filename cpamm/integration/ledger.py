"""
Ledger collaborator: asset balances, LP shares and caller authorization.

The pool core never moves funds. It emits instructions; a ``Ledger`` executes
them. Every movement is checked against an explicit ``AuthContext`` capability
instead of ambient signing state:

- a *user* context is issued by ``open_session(caller)`` only after the
  ledger's authorizer accepts the caller,
- a *pool* context is issued by ``pool_authority(pool_id)`` and is the only way
  to move funds out of a pool's reserve account or mint its shares.

Contexts live until ``close_session``; the service closes every context it
opens as soon as the operation finishes.

``InMemoryLedger`` is the reference implementation used by tests and local
tooling. ``atomic()`` gives all-or-nothing execution of an instruction batch.
"""

from __future__ import annotations

import hashlib
import itertools
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Optional, Protocol, Set

from py_ecc.bls import G2Basic

from ..core.errors import LedgerError, Unauthorized
from ..core.types import Signer
from ..state.balances import AccountId, Amount, AssetId, BalanceTable
from ..state.canonical import domain_sep_bytes, hex_to_bytes_allow_0x
from ..state.lp import LPTable, PoolId


@dataclass(frozen=True)
class Caller:
    """
    A party requesting an operation.

    ``payload`` is the canonical request the caller signed (see
    ``service.request_payload``); ``signature`` is hex, absent for
    capability-only deployments.
    """
    account: AccountId
    payload: bytes = b""
    signature: Optional[str] = None


@dataclass(frozen=True, eq=False)
class AuthContext:
    """
    Capability to move funds out of ``account`` (one per issued session).

    Compared by identity: an equal-looking copy is not the issued capability.
    """
    account: AccountId
    signer: Signer
    nonce: int


Authorizer = Callable[[Caller], bool]


class CapabilityAuthorizer:
    """Accepts callers whose account has been explicitly granted."""

    def __init__(self, accounts: Iterable[AccountId] = ()) -> None:
        self._granted: Set[AccountId] = set(accounts)

    def grant(self, account: AccountId) -> None:
        self._granted.add(account)

    def revoke(self, account: AccountId) -> None:
        self._granted.discard(account)

    def __call__(self, caller: Caller) -> bool:
        return caller.account in self._granted


def request_digest(payload: bytes, *, chain_id: str) -> bytes:
    """Message a caller signs: sha256(domain_sep("request:<chain_id>") || payload)."""
    return hashlib.sha256(domain_sep_bytes(f"request:{chain_id}", version=1) + payload).digest()


class BlsSignatureAuthorizer:
    """
    Accepts callers whose BLS12-381 (G2Basic) signature over the request digest
    verifies against the public key in ``caller.account`` (0x-prefixed, 48 bytes).
    """

    def __init__(self, chain_id: str) -> None:
        self._chain_id = chain_id

    def __call__(self, caller: Caller) -> bool:
        if caller.signature is None:
            return False
        try:
            pubkey = hex_to_bytes_allow_0x(caller.account, name="account", expected_nbytes=48)
            sig = hex_to_bytes_allow_0x(caller.signature, name="signature", expected_nbytes=96)
        except ValueError:
            return False
        digest = request_digest(caller.payload, chain_id=self._chain_id)
        return bool(G2Basic.Verify(pubkey, digest, sig))


class Ledger(Protocol):
    def balance_of(self, asset: AssetId, account: AccountId) -> Amount: ...

    def share_balance_of(self, pool_id: PoolId, account: AccountId) -> Amount: ...

    def share_supply(self, pool_id: PoolId) -> Amount: ...

    def authorize(self, caller: Caller) -> bool: ...

    def open_session(self, caller: Caller) -> AuthContext: ...

    def pool_authority(self, pool_id: PoolId) -> AuthContext: ...

    def close_session(self, auth: AuthContext) -> None: ...

    def register_pool(self, pool_id: PoolId) -> None: ...

    def transfer(
        self, asset: AssetId, source: AccountId, destination: AccountId, amount: Amount, *, auth: AuthContext
    ) -> None: ...

    def mint_share(self, pool_id: PoolId, to: AccountId, amount: Amount, *, auth: AuthContext) -> None: ...

    def burn_share(self, pool_id: PoolId, source: AccountId, amount: Amount, *, auth: AuthContext) -> None: ...

    def atomic(self) -> Iterator[None]: ...


class InMemoryLedger:
    def __init__(self, authorizer: Optional[Authorizer] = None) -> None:
        self._balances = BalanceTable()
        self._lp = LPTable()
        self._pools: Set[PoolId] = set()
        self._issued: Set[AuthContext] = set()
        self._nonces = itertools.count(1)
        self._authorizer: Authorizer = authorizer if authorizer is not None else CapabilityAuthorizer()

    # -- Reads ---------------------------------------------------------------

    def balance_of(self, asset: AssetId, account: AccountId) -> Amount:
        return self._balances.get(account, asset)

    def share_balance_of(self, pool_id: PoolId, account: AccountId) -> Amount:
        return self._lp.get(account, pool_id)

    def share_supply(self, pool_id: PoolId) -> Amount:
        return self._lp.supply(pool_id)

    # -- Authorization -------------------------------------------------------

    def authorize(self, caller: Caller) -> bool:
        return bool(self._authorizer(caller))

    def open_session(self, caller: Caller) -> AuthContext:
        if not self.authorize(caller):
            raise Unauthorized(f"caller {caller.account} not authorized")
        if caller.account in self._pools:
            raise Unauthorized("pool accounts cannot act as callers")
        return self._issue(caller.account, Signer.USER)

    def pool_authority(self, pool_id: PoolId) -> AuthContext:
        if pool_id not in self._pools:
            raise LedgerError(f"unknown pool account: {pool_id}")
        return self._issue(pool_id, Signer.POOL)

    def close_session(self, auth: AuthContext) -> None:
        """Withdraw an issued capability. Idempotent; later use of ``auth`` fails."""
        self._issued.discard(auth)

    def _issue(self, account: AccountId, signer: Signer) -> AuthContext:
        ctx = AuthContext(account=account, signer=signer, nonce=next(self._nonces))
        self._issued.add(ctx)
        return ctx

    def _require_capability(self, auth: AuthContext, account: AccountId, signer: Signer) -> None:
        if auth not in self._issued:
            raise LedgerError("auth context was not issued by this ledger")
        if auth.signer is not signer or auth.account != account:
            raise LedgerError(f"auth context does not cover {signer.value} account {account}")

    # -- Mutations -----------------------------------------------------------

    def register_pool(self, pool_id: PoolId) -> None:
        if pool_id in self._pools:
            raise LedgerError(f"pool account already in use: {pool_id}")
        self._pools.add(pool_id)

    def credit(self, asset: AssetId, account: AccountId, amount: Amount) -> None:
        """Fund an account from outside the pool system (genesis, faucet, bridge)."""
        if amount < 0:
            raise LedgerError(f"credit amount must be non-negative: {amount}")
        self._balances.add(account, asset, amount)

    def transfer(
        self, asset: AssetId, source: AccountId, destination: AccountId, amount: Amount, *, auth: AuthContext
    ) -> None:
        signer = Signer.POOL if source in self._pools else Signer.USER
        self._require_capability(auth, source, signer)
        if amount < 0:
            raise LedgerError(f"transfer amount must be non-negative: {amount}")
        self._balances.subtract(source, asset, amount)
        self._balances.add(destination, asset, amount)

    def mint_share(self, pool_id: PoolId, to: AccountId, amount: Amount, *, auth: AuthContext) -> None:
        self._require_capability(auth, pool_id, Signer.POOL)
        self._lp.mint(to, pool_id, amount)

    def burn_share(self, pool_id: PoolId, source: AccountId, amount: Amount, *, auth: AuthContext) -> None:
        self._require_capability(auth, source, Signer.USER)
        self._lp.burn(source, pool_id, amount)

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """All-or-nothing: any exception restores balances and shares."""
        balances = self._balances.copy()
        lp = self._lp.copy()
        try:
            yield
        except BaseException:
            self._balances = balances
            self._lp = lp
            raise

    def __repr__(self) -> str:
        return f"InMemoryLedger({self._balances!r}, {self._lp!r}, pools={len(self._pools)})"

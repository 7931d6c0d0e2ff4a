# [TESTER] v1

from __future__ import annotations

from py_ecc.bls import G2Basic

from cpamm import AmmConfig, Caller, Direction, InMemoryLedger, PoolService, request_payload
from cpamm.integration.ledger import BlsSignatureAuthorizer, request_digest

CHAIN_ID = "cpamm-test"


def _keypair(seed: int) -> tuple[int, str]:
    sk = G2Basic.KeyGen(bytes([seed]) * 32)
    return sk, "0x" + G2Basic.SkToPk(sk).hex()


def _signed(sk: int, account: str, payload: bytes, chain_id: str = CHAIN_ID) -> Caller:
    sig = G2Basic.Sign(sk, request_digest(payload, chain_id=chain_id))
    return Caller(account, payload=payload, signature="0x" + sig.hex())


def test_valid_signature_accepted() -> None:
    sk, pk = _keypair(1)
    auth = BlsSignatureAuthorizer(CHAIN_ID)
    assert auth(_signed(sk, pk, b"hello"))


def test_tampered_payload_rejected() -> None:
    sk, pk = _keypair(1)
    caller = _signed(sk, pk, b"hello")
    tampered = Caller(caller.account, payload=b"hellp", signature=caller.signature)
    assert not BlsSignatureAuthorizer(CHAIN_ID)(tampered)


def test_signature_bound_to_chain_id() -> None:
    sk, pk = _keypair(1)
    assert not BlsSignatureAuthorizer(CHAIN_ID)(_signed(sk, pk, b"hello", chain_id="other-chain"))


def test_wrong_key_and_malformed_inputs_rejected() -> None:
    sk, pk = _keypair(1)
    _, other_pk = _keypair(2)
    auth = BlsSignatureAuthorizer(CHAIN_ID)
    good = _signed(sk, pk, b"hello")
    assert not auth(Caller(other_pk, payload=b"hello", signature=good.signature))
    assert not auth(Caller(pk, payload=b"hello"))
    assert not auth(Caller("alice", payload=b"hello", signature=good.signature))
    assert not auth(Caller(pk, payload=b"hello", signature="0x1234"))


def test_signed_swap_end_to_end() -> None:
    lp_sk, lp_pk = _keypair(3)
    trader_sk, trader_pk = _keypair(4)
    ledger = InMemoryLedger(BlsSignatureAuthorizer(CHAIN_ID))
    service = PoolService(ledger, config=AmmConfig(chain_id=CHAIN_ID, require_signatures=True))
    pool_id = service.initialize(1, "X", "Y", 30).pool_id
    ledger.credit("X", lp_pk, 1_000)
    ledger.credit("Y", lp_pk, 2_000)
    ledger.credit("X", trader_pk, 100)

    payload = request_payload("deposit", pool_id, lp_wanted=1_000, max_x=1_000, max_y=2_000)
    service.deposit(pool_id, _signed(lp_sk, lp_pk, payload), 1_000, 1_000, 2_000)

    payload = request_payload("swap", pool_id, direction=Direction.X_FOR_Y, amount_in=100, min_out=170)
    assert service.swap(pool_id, _signed(trader_sk, trader_pk, payload), Direction.X_FOR_Y, 100, 170) == (100, 180)
    assert ledger.balance_of("Y", trader_pk) == 180

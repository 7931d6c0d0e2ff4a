# [TESTER] v1

from __future__ import annotations

import random
from fractions import Fraction

import pytest

from cpamm.core.curve import (
    compute_initial_deposit,
    compute_proportional_deposit,
    compute_proportional_withdraw,
    compute_swap_output,
    constant_product,
    spot_price,
    suggest_initial_lp,
)
from cpamm.core.errors import CurveError, InvalidAmount
from cpamm.core.fixed_point import U64_MAX


def test_initial_deposit_consumes_exact_amounts() -> None:
    assert compute_initial_deposit(1000, 2000) == (1000, 2000)


def test_initial_deposit_requires_both_legs() -> None:
    with pytest.raises(InvalidAmount):
        compute_initial_deposit(0, 2000)
    with pytest.raises(InvalidAmount):
        compute_initial_deposit(1000, 0)


def test_suggest_initial_lp_is_geometric_mean() -> None:
    assert suggest_initial_lp(1000, 1000) == 1000
    assert suggest_initial_lp(1000, 2000) == 1414


def test_swap_scenario_x_for_y_with_30_bps() -> None:
    # amount_in_after_fee = 99; withdraw = 2000 - ceil(2_000_000 / 1099) = 2000 - 1820
    q = compute_swap_output(1000, 2000, 100, 30)
    assert q.deposit == 100
    assert q.amount_in_after_fee == 99
    assert q.fee == 1
    assert q.withdraw == 180
    assert q.new_reserve_in == 1100
    assert q.new_reserve_out == 1820
    assert q.k_before == 2_000_000
    assert q.k_after == 2_002_000
    assert q.k_after > q.k_before


def test_swap_other_direction() -> None:
    # after fee: floor(200 * 9970 / 10000) = 199; ceil(2_000_000 / 2199) = 910
    q = compute_swap_output(2000, 1000, 200, 30)
    assert q.amount_in_after_fee == 199
    assert q.withdraw == 90
    assert q.k_after == 2200 * 910


def test_zero_fee_exact_swap_conserves_k() -> None:
    q = compute_swap_output(1000, 2000, 1000, 0)
    assert q.withdraw == 1000
    assert q.fee == 0
    assert q.k_after == q.k_before == 2_000_000


def test_swap_zero_amount_rejected() -> None:
    with pytest.raises(InvalidAmount):
        compute_swap_output(1000, 2000, 0, 30)


def test_swap_too_small_to_register() -> None:
    # Fee eats the whole input.
    with pytest.raises(InvalidAmount):
        compute_swap_output(1000, 2000, 1, 30)
    # No fee, but the output reserve cannot move by a whole unit.
    with pytest.raises(InvalidAmount):
        compute_swap_output(1_000_000, 10, 1, 0)


def test_swap_with_full_fee_moves_nothing() -> None:
    with pytest.raises(InvalidAmount):
        compute_swap_output(1000, 2000, 500, 10_000)


def test_swap_against_empty_reserve() -> None:
    with pytest.raises(CurveError):
        compute_swap_output(0, 0, 100, 30)
    with pytest.raises(CurveError):
        compute_swap_output(1000, 0, 100, 30)


def test_swap_reserve_overflow() -> None:
    with pytest.raises(CurveError):
        compute_swap_output(U64_MAX, 10, 1, 0)
    with pytest.raises(CurveError):
        compute_swap_output(1000, 2000, U64_MAX, 0)


def test_swap_fee_out_of_range() -> None:
    with pytest.raises(InvalidAmount):
        compute_swap_output(1000, 2000, 100, 10_001)


def test_swap_at_u64_extremes_stays_exact() -> None:
    half = U64_MAX // 2
    q = compute_swap_output(half, U64_MAX, half, 0)
    assert q.k_after >= q.k_before
    assert q.withdraw <= U64_MAX


def test_swap_invariants_hold_across_random_inputs() -> None:
    rng = random.Random(20240601)
    checked = 0
    for _ in range(2000):
        reserve_in = rng.randint(1, 10**15)
        reserve_out = rng.randint(1, 10**15)
        amount_in = rng.randint(1, 10**12)
        fee_bps = rng.choice([0, 1, 5, 30, 100, 997, rng.randint(0, 10_000)])
        try:
            q = compute_swap_output(reserve_in, reserve_out, amount_in, fee_bps)
        except InvalidAmount:
            continue
        checked += 1
        assert q.k_after >= q.k_before
        assert 0 < q.withdraw < reserve_out
        assert q.deposit == amount_in
        # Never pays more than the exact real-valued curve output.
        assert q.withdraw * (reserve_in + q.amount_in_after_fee) <= reserve_out * q.amount_in_after_fee
        # The fee is the input fee rounded up.
        assert q.fee * 10_000 >= amount_in * fee_bps
        assert (q.fee - 1) * 10_000 < amount_in * fee_bps
    assert checked > 1000


def test_proportional_deposit_exact() -> None:
    assert compute_proportional_deposit(1000, 2000, 1000, 100) == (100, 200)


def test_proportional_deposit_rounds_up() -> None:
    # ceil(1000/3) = 334, ceil(2000/3) = 667
    assert compute_proportional_deposit(1000, 2000, 3, 1) == (334, 667)


def test_proportional_deposit_zero_supply_is_inconsistent() -> None:
    with pytest.raises(CurveError):
        compute_proportional_deposit(1000, 2000, 0, 1)


def test_proportional_deposit_overflow() -> None:
    with pytest.raises(CurveError):
        compute_proportional_deposit(U64_MAX, 1, 1, 2)


def test_proportional_withdraw_rounds_down() -> None:
    assert compute_proportional_withdraw(1000, 2000, 3, 1) == (333, 666)
    assert compute_proportional_withdraw(1100, 2200, 1100, 100) == (100, 200)


def test_proportional_withdraw_full_supply_drains_pool() -> None:
    assert compute_proportional_withdraw(1000, 2000, 7, 7) == (1000, 2000)


def test_proportional_withdraw_rejects_burn_above_supply() -> None:
    with pytest.raises(InvalidAmount):
        compute_proportional_withdraw(1000, 2000, 10, 11)
    with pytest.raises(CurveError):
        compute_proportional_withdraw(0, 0, 0, 1)


def test_proportionality_within_one_unit() -> None:
    rng = random.Random(7)
    for _ in range(1000):
        reserve_x = rng.randint(1, 10**15)
        reserve_y = rng.randint(1, 10**15)
        lp_supply = rng.randint(10**6, 10**15)
        lp = rng.randint(1, 10**9)

        x, y = compute_proportional_deposit(reserve_x, reserve_y, lp_supply, lp)
        for amount, reserve in ((x, reserve_x), (y, reserve_y)):
            assert amount * lp_supply >= lp * reserve
            assert (amount - 1) * lp_supply < lp * reserve

        lp_burn = rng.randint(1, lp_supply)
        wx, wy = compute_proportional_withdraw(reserve_x, reserve_y, lp_supply, lp_burn)
        for amount, reserve in ((wx, reserve_x), (wy, reserve_y)):
            assert amount * lp_supply <= lp_burn * reserve
            assert (amount + 1) * lp_supply > lp_burn * reserve


def test_deposit_then_withdraw_never_favors_caller() -> None:
    rng = random.Random(99)
    cases = [(1000, 2000, 3, 1)]
    for _ in range(500):
        cases.append(
            (rng.randint(1, 10**12), rng.randint(1, 10**12), rng.randint(10**3, 10**9), rng.randint(1, 10**9))
        )
    for reserve_x, reserve_y, lp_supply, lp in cases:
        x, y = compute_proportional_deposit(reserve_x, reserve_y, lp_supply, lp)
        x2, y2 = compute_proportional_withdraw(reserve_x + x, reserve_y + y, lp_supply + lp, lp)
        assert x2 <= x
        assert y2 <= y


def test_constant_product_and_spot_price() -> None:
    assert constant_product(1000, 2000) == 2_000_000
    assert constant_product(U64_MAX, U64_MAX) == U64_MAX * U64_MAX
    assert spot_price(1000, 2000) == Fraction(2)
    with pytest.raises(CurveError):
        spot_price(0, 2000)

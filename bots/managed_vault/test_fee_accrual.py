#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Tests for watermark fee accrual."""

from __future__ import annotations

import pytest

from bots.managed_vault.conftest import ALICE, BASE, WRAPPER
from bots.managed_vault.errors import ArithmeticFault, ValidationError
from bots.managed_vault.fee_accrual import FeeAccrualEngine, FeeState, accrue


def test_uninitialised_watermark_takes_current_rate():
    state = accrue(FeeState(), rate_now=3 * BASE, vault_share_balance=10**24, fee_pct=50, base_unit=BASE)
    assert state == FeeState(watermark=3 * BASE)


def test_gain_is_split_by_fee_pct():
    start = FeeState(watermark=BASE)
    state = accrue(start, rate_now=2 * BASE, vault_share_balance=100 * BASE, fee_pct=20, base_unit=BASE)

    # 100 shares gained 100 underlying, 20 of it at a rate of 2 is 10 shares
    assert state.earned_shares == 10 * BASE
    assert state.watermark == 2 * BASE
    assert state.claimed_shares == 0


def test_manager_position_is_not_discounted_again():
    start = FeeState(watermark=BASE, earned_shares=30 * BASE, claimed_shares=10 * BASE)
    state = accrue(start, rate_now=2 * BASE, vault_share_balance=120 * BASE, fee_pct=10, base_unit=BASE)

    depositors_fee = 100 * BASE * 10 // 100
    own = 20 * BASE
    assert state.earned_shares == 30 * BASE + (depositors_fee + own) // 2
    assert state.claimed_shares == 10 * BASE


def test_trailing_policy_follows_rate_down_and_charges_recovery():
    state = FeeState(watermark=BASE)
    state = accrue(state, 9 * BASE // 10, 1000 * BASE, 10, BASE, policy="trailing")
    assert state.watermark == 9 * BASE // 10
    assert state.earned_shares == 0

    state = accrue(state, BASE, 1000 * BASE, 10, BASE, policy="trailing")
    assert state.watermark == BASE
    assert state.earned_shares == 10 * BASE


def test_high_water_policy_keeps_peak():
    state = FeeState(watermark=BASE)
    state = accrue(state, 9 * BASE // 10, 1000 * BASE, 10, BASE, policy="high_water")
    assert state.watermark == BASE

    state = accrue(state, BASE, 1000 * BASE, 10, BASE, policy="high_water")
    assert state.earned_shares == 0

    state = accrue(state, 11 * BASE // 10, 1000 * BASE, 10, BASE, policy="high_water")
    assert state.watermark == 11 * BASE // 10
    assert state.earned_shares == 10**20 // 11


def test_equal_rate_accrues_nothing():
    state = accrue(FeeState(watermark=BASE), BASE, 1000 * BASE, 10, BASE)
    assert state == FeeState(watermark=BASE)


def test_zero_rate_is_fatal():
    with pytest.raises(ArithmeticFault):
        accrue(FeeState(watermark=BASE), 0, 1000 * BASE, 10, BASE)


def test_unclaimed_above_balance_is_fatal():
    start = FeeState(watermark=BASE, earned_shares=5 * BASE)
    with pytest.raises(ArithmeticFault):
        accrue(start, 2 * BASE, 4 * BASE, 10, BASE)


def test_overflow_is_fatal():
    start = FeeState(watermark=1)
    with pytest.raises(ArithmeticFault):
        accrue(start, 2**200, 2**200, 10, BASE)


def test_fee_state_helpers():
    state = FeeState(watermark=BASE, earned_shares=7, claimed_shares=3)
    assert state.unclaimed_shares == 4
    assert state.depositor_shares(10) == 6
    assert state.as_dict() == {"watermark": BASE, "earned_shares": 7, "claimed_shares": 3}


def test_engine_reconcile_and_preview(vault, fund, wrapper):
    fund(ALICE, 100 * BASE)
    wrapper.deposit(ALICE, 100 * BASE)
    engine = FeeAccrualEngine(vault, WRAPPER, fee_pct=50, base_unit=BASE)

    assert engine.reconcile() == 0
    vault.set_exchange_rate(2 * BASE)
    preview = engine.preview()
    assert engine.state.earned_shares == 0
    assert engine.reconcile() == 25 * BASE
    assert engine.state == preview


def test_engine_settle_claim(vault):
    engine = FeeAccrualEngine(vault, WRAPPER, fee_pct=10, base_unit=BASE)
    engine.load(FeeState(watermark=BASE, earned_shares=9, claimed_shares=4))

    assert engine.settle_claim() == 5
    assert engine.state.claimed_shares == 9
    assert engine.settle_claim() == 0


def test_engine_rejects_bad_configuration(vault):
    with pytest.raises(ValidationError):
        FeeAccrualEngine(vault, WRAPPER, fee_pct=101, base_unit=BASE)
    with pytest.raises(ValidationError):
        FeeAccrualEngine(vault, WRAPPER, fee_pct=10, base_unit=BASE, policy="peak")


def test_engine_load_rejects_claimed_above_earned(vault):
    engine = FeeAccrualEngine(vault, WRAPPER, fee_pct=10, base_unit=BASE)
    with pytest.raises(ValidationError):
        engine.load(FeeState(watermark=BASE, earned_shares=1, claimed_shares=2))

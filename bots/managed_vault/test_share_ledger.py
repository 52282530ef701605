#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import pytest
from web3 import Web3

from bots.managed_vault.conftest import ALICE, BOB
from bots.managed_vault.constants import MAX_UINT256
from bots.managed_vault.errors import ArithmeticFault, InsufficientBalanceError, ValidationError
from bots.managed_vault.share_ledger import ShareLedger


def test_mint_and_burn_track_supply():
    ledger = ShareLedger()
    ledger.mint(ALICE, 100)
    ledger.mint(BOB, 50)
    ledger.burn(ALICE, 30)

    assert ledger.balance_of(ALICE) == 70
    assert ledger.balance_of(Web3.to_checksum_address(ALICE)) == 70
    assert ledger.total_supply() == 120


def test_burn_above_balance():
    ledger = ShareLedger()
    ledger.mint(ALICE, 10)
    with pytest.raises(InsufficientBalanceError) as excinfo:
        ledger.burn(ALICE, 11)
    assert excinfo.value.available == 10
    assert excinfo.value.requested == 11
    assert ledger.balance_of(ALICE) == 10


def test_mint_overflow():
    ledger = ShareLedger()
    ledger.mint(ALICE, MAX_UINT256)
    with pytest.raises(ArithmeticFault):
        ledger.mint(BOB, 1)
    assert ledger.balance_of(BOB) == 0


def test_balances_skip_empty_accounts():
    ledger = ShareLedger()
    ledger.mint(ALICE, 5)
    ledger.mint(BOB, 5)
    ledger.burn(BOB, 5)
    assert ledger.balances() == {Web3.to_checksum_address(ALICE): 5}


def test_load_merges_address_forms():
    ledger = ShareLedger()
    ledger.load({ALICE: 3, "0x00000000000000000000000000000000000000C1": 4, BOB: 0})
    assert ledger.balance_of(ALICE) == 7
    assert ledger.total_supply() == 7


@pytest.mark.parametrize("bad", [-1, "5", 1.5, True])
def test_load_rejects_bad_amounts(bad):
    with pytest.raises(ValidationError):
        ShareLedger().load({ALICE: bad})


def test_snapshot_restore():
    ledger = ShareLedger()
    ledger.mint(ALICE, 5)
    snap = ledger.snapshot()
    ledger.mint(BOB, 9)
    ledger.burn(ALICE, 5)
    ledger.restore(snap)
    assert ledger.balance_of(ALICE) == 5
    assert ledger.balance_of(BOB) == 0
    assert ledger.total_supply() == 5

#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Shared fixtures: an in-memory token and vault wrapped by a ManagedVault."""

from __future__ import annotations

import pytest

from bots.managed_vault.adapters.memory import InMemoryToken, InMemoryVault
from bots.managed_vault.wrapper import ManagedVault

BASE = 10**18

WRAPPER = "0x00000000000000000000000000000000000000a0"
MANAGER = "0x00000000000000000000000000000000000000b0"
ALICE = "0x00000000000000000000000000000000000000c1"
BOB = "0x00000000000000000000000000000000000000c2"
CAROL = "0x00000000000000000000000000000000000000c3"


@pytest.fixture
def token():
    return InMemoryToken(WRAPPER, name="USD Coin", symbol="USDC", decimals=18)


@pytest.fixture
def vault(token):
    return InMemoryVault(token, rate=BASE)


@pytest.fixture
def make_wrapper(token, vault):
    def _make(fee_pct=10, policy="trailing"):
        return ManagedVault(token, vault, beneficiary=MANAGER, fee_pct=fee_pct, address=WRAPPER, watermark_policy=policy)

    return _make


@pytest.fixture
def wrapper(make_wrapper):
    return make_wrapper()


@pytest.fixture
def fund(token):
    """Mint underlying to a user and approve the wrapper for it."""

    def _fund(user, amount):
        token.mint(user, amount)
        token.approve_as(user, WRAPPER, token.allowance(user, WRAPPER) + amount)

    return _fund

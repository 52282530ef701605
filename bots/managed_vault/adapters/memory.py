#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Deterministic in-memory token and vault used by tests and the simulator.

Both collaborators act on behalf of a single ``holder`` (the wrapper's
identity) for the adapter interface, expose ``*_as`` helpers for other
accounts, and support ``snapshot()``/``restore()`` so the wrapper can undo
them together with its own state.
"""

from __future__ import annotations

import copy
from typing import Callable, Dict, List, Optional, Set, Tuple

from ..errors import InsufficientFundsError, RevertError
from ..input_validation import normalize_address
from ..safe_math import base_unit_for, fdiv, fmul
from .base import UnderlyingTokenAdapter, VaultAdapter

DEFAULT_TOKEN_ADDRESS = "0x00000000000000000000000000000000000a55e7"
DEFAULT_VAULT_ADDRESS = "0x000000000000000000000000000000000000fa17"


class InMemoryToken(UnderlyingTokenAdapter):
    def __init__(
        self,
        holder: str,
        name: str = "Test Token",
        symbol: str = "TST",
        decimals: int = 18,
        address: str = DEFAULT_TOKEN_ADDRESS,
    ):
        self.holder = normalize_address(holder, "holder")
        self.address = normalize_address(address, "token address")
        self._name = name
        self._symbol = symbol
        self._decimals = decimals
        self.balances: Dict[str, int] = {}
        self.allowances: Dict[Tuple[str, str], int] = {}
        self.total_supply = 0

    # Ledger -------------------------------------------------------------
    def mint(self, to: str, amount: int) -> None:
        to = normalize_address(to)
        self.balances[to] = self.balances.get(to, 0) + amount
        self.total_supply += amount

    def move(self, src: str, dst: str, amount: int) -> None:
        src = normalize_address(src)
        dst = normalize_address(dst)
        available = self.balances.get(src, 0)
        if available < amount:
            raise InsufficientFundsError(
                f"transfer amount exceeds balance ({available} < {amount})",
                reason="insufficient balance",
            )
        self.balances[src] = available - amount
        self.balances[dst] = self.balances.get(dst, 0) + amount

    def approve_as(self, owner: str, spender: str, amount: int) -> None:
        key = (normalize_address(owner), normalize_address(spender))
        self.allowances[key] = amount

    def transfer_from_as(self, spender: str, owner: str, to: str, amount: int) -> None:
        key = (normalize_address(owner), normalize_address(spender))
        allowed = self.allowances.get(key, 0)
        if allowed < amount:
            raise InsufficientFundsError(
                f"transfer amount exceeds allowance ({allowed} < {amount})",
                reason="insufficient allowance",
            )
        self.move(owner, to, amount)
        self.allowances[key] = allowed - amount

    def allowance(self, owner: str, spender: str) -> int:
        return self.allowances.get((normalize_address(owner), normalize_address(spender)), 0)

    # Adapter API --------------------------------------------------------
    def transfer(self, to: str, amount: int) -> None:
        self.move(self.holder, to, amount)

    def transfer_from(self, owner: str, to: str, amount: int) -> None:
        self.transfer_from_as(self.holder, owner, to, amount)

    def approve(self, spender: str, amount: int) -> None:
        self.approve_as(self.holder, spender, amount)

    def balance_of(self, owner: str) -> int:
        return self.balances.get(normalize_address(owner), 0)

    def decimals(self) -> int:
        return self._decimals

    def name(self) -> str:
        return self._name

    def symbol(self) -> str:
        return self._symbol

    # Rollback -----------------------------------------------------------
    def snapshot(self):
        return (dict(self.balances), dict(self.allowances), self.total_supply)

    def restore(self, snap) -> None:
        balances, allowances, total_supply = snap
        self.balances = dict(balances)
        self.allowances = dict(allowances)
        self.total_supply = total_supply


class InMemoryVault(VaultAdapter):
    """Vault whose exchange rate is set explicitly.

    Yield is simulated by minting underlying into the vault whenever its
    reserve cannot cover a payout. Share conversions floor, like the
    wrapper's own arithmetic. ``hooks`` are called with the operation name
    before each mutating call; operations listed in ``fail_on`` revert.
    """

    def __init__(
        self,
        token: InMemoryToken,
        rate: Optional[int] = None,
        address: str = DEFAULT_VAULT_ADDRESS,
    ):
        self.token = token
        self.holder = token.holder
        self.address = normalize_address(address, "vault address")
        self._base_unit = base_unit_for(token.decimals())
        self.rate = self._base_unit if rate is None else rate
        self.shares: Dict[str, int] = {}
        self.total_supply = 0
        self.hooks: List[Callable[[str], None]] = []
        self.fail_on: Set[str] = set()

    def set_exchange_rate(self, rate: int) -> None:
        if rate <= 0:
            raise RevertError("exchange rate must be positive")
        self.rate = rate

    def _before(self, operation: str) -> None:
        for hook in list(self.hooks):
            hook(operation)
        if operation in self.fail_on:
            raise RevertError(f"vault {operation} reverted", reason="injected failure")

    def _pay_out(self, to: str, amount: int) -> None:
        reserve = self.token.balance_of(self.address)
        if reserve < amount:
            self.token.mint(self.address, amount - reserve)
        self.token.move(self.address, to, amount)

    def _burn(self, owner: str, shares: int) -> None:
        available = self.shares.get(owner, 0)
        if available < shares:
            raise InsufficientFundsError(
                f"burn amount exceeds share balance ({available} < {shares})",
                reason="insufficient shares",
            )
        self.shares[owner] = available - shares
        self.total_supply -= shares

    # Adapter API --------------------------------------------------------
    def exchange_rate(self) -> int:
        return self.rate

    def base_unit(self) -> int:
        return self._base_unit

    def balance_of(self, owner: str) -> int:
        return self.shares.get(normalize_address(owner), 0)

    def deposit(self, amount: int) -> None:
        self._before("deposit")
        shares = fdiv(amount, self.rate, self._base_unit)
        if shares == 0:
            raise RevertError("vault deposit would mint zero shares", reason="ZERO_SHARES")
        self.token.transfer_from_as(self.address, self.holder, self.address, amount)
        self.shares[self.holder] = self.shares.get(self.holder, 0) + shares
        self.total_supply += shares

    def withdraw(self, amount: int) -> None:
        self._before("withdraw")
        self._burn(self.holder, fdiv(amount, self.rate, self._base_unit))
        self._pay_out(self.holder, amount)

    def redeem(self, shares: int) -> None:
        self._before("redeem")
        self._burn(self.holder, shares)
        self._pay_out(self.holder, fmul(shares, self.rate, self._base_unit))

    # Rollback -----------------------------------------------------------
    def snapshot(self):
        return (copy.copy(self.shares), self.total_supply, self.rate)

    def restore(self, snap) -> None:
        shares, total_supply, rate = snap
        self.shares = dict(shares)
        self.total_supply = total_supply
        self.rate = rate

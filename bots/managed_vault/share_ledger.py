#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Vshare balances: depositors' claim on the wrapper's vault shares, net of fees."""

from __future__ import annotations

from typing import Dict

from .errors import InsufficientBalanceError, ValidationError
from .input_validation import normalize_address
from .safe_math import check_uint


class ShareLedger:
    def __init__(self):
        self._balances: Dict[str, int] = {}
        self._total_supply = 0

    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, owner: str) -> int:
        return self._balances.get(normalize_address(owner), 0)

    def balances(self) -> Dict[str, int]:
        return {owner: amount for owner, amount in self._balances.items() if amount}

    def mint(self, to: str, amount: int) -> None:
        to = normalize_address(to)
        self._total_supply = check_uint(self._total_supply + amount, "vshare supply")
        self._balances[to] = self._balances.get(to, 0) + amount

    def burn(self, owner: str, amount: int) -> None:
        owner = normalize_address(owner)
        available = self._balances.get(owner, 0)
        if available < amount:
            raise InsufficientBalanceError(
                f"burn of {amount} vshares exceeds balance {available}",
                available=available,
                requested=amount,
            )
        self._balances[owner] = available - amount
        self._total_supply -= amount

    def load(self, balances: Dict[str, int]) -> None:
        loaded: Dict[str, int] = {}
        for owner, amount in balances.items():
            if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
                raise ValidationError(f"invalid vshare balance for {owner}: {amount!r}")
            key = normalize_address(owner)
            loaded[key] = loaded.get(key, 0) + amount
        self._balances = loaded
        self._total_supply = check_uint(sum(loaded.values()), "vshare supply")

    def snapshot(self):
        return (dict(self._balances), self._total_supply)

    def restore(self, snap) -> None:
        balances, total_supply = snap
        self._balances = dict(balances)
        self._total_supply = total_supply

#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Abstract collaborator interfaces consumed by the wrapper."""

from __future__ import annotations

from abc import ABC, abstractmethod


class UnderlyingTokenAdapter(ABC):
    """The raw asset depositors hold value in."""

    address: str

    @abstractmethod
    def transfer(self, to: str, amount: int) -> None:
        """Send ``amount`` from the wrapper to ``to``."""

    @abstractmethod
    def transfer_from(self, owner: str, to: str, amount: int) -> None:
        """Pull ``amount`` from ``owner`` using the wrapper's allowance."""

    @abstractmethod
    def approve(self, spender: str, amount: int) -> None:
        """Allow ``spender`` to pull ``amount`` from the wrapper."""

    @abstractmethod
    def balance_of(self, owner: str) -> int:
        """Raw token balance of ``owner``."""

    @abstractmethod
    def decimals(self) -> int:
        ...

    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    def symbol(self) -> str:
        ...


class VaultAdapter(ABC):
    """The interest-bearing vault wrapped by the Managed Vault.

    Amounts passed to ``deposit`` and ``withdraw`` are in underlying units,
    ``redeem`` takes vault shares. All three act on the wrapper's own
    position.
    """

    address: str

    @abstractmethod
    def exchange_rate(self) -> int:
        """Underlying per vault share, scaled by ``base_unit()``."""

    @abstractmethod
    def deposit(self, amount: int) -> None:
        ...

    @abstractmethod
    def withdraw(self, amount: int) -> None:
        ...

    @abstractmethod
    def redeem(self, shares: int) -> None:
        ...

    @abstractmethod
    def balance_of(self, owner: str) -> int:
        """Vault shares held by ``owner``."""

    @abstractmethod
    def base_unit(self) -> int:
        ...

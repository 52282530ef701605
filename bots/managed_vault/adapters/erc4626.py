#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""ERC-4626 adapter exposing the wrapped vault to the Managed Vault."""

from __future__ import annotations

from typing import Optional

from web3 import Web3

from ..abi_min import ERC20_ABI, ERC4626_ABI
from ..safe_math import base_unit_for, safe_decimals
from .base import VaultAdapter
from .onchain import OnchainSender


class ERC4626VaultAdapter(VaultAdapter):
    """Reads the vault rate and moves the operator account's position.

    The exchange rate is ``convertToAssets(base_unit)``: the underlying
    value of ``base_unit`` raw shares, where ``base_unit`` comes from the
    underlying asset's decimals, so the vault share must carry the same
    decimals (no ERC-4626 decimals offset).
    """

    def __init__(self, w3: Web3, vault_address: str, signer, sender: str):
        self.w3 = w3
        self.address = Web3.to_checksum_address(vault_address)
        self.vault = w3.eth.contract(address=self.address, abi=ERC4626_ABI)
        self.tx = OnchainSender(w3, signer, sender)
        self._base_unit: Optional[int] = None

    @property
    def sender(self) -> str:
        return self.tx.sender

    def asset_address(self) -> str:
        return Web3.to_checksum_address(self.vault.functions.asset().call())

    def base_unit(self) -> int:
        if self._base_unit is None:
            asset = self.w3.eth.contract(address=self.asset_address(), abi=ERC20_ABI)
            self._base_unit = base_unit_for(asset.functions.decimals().call())
        return self._base_unit

    def share_decimals(self) -> int:
        return safe_decimals(self.vault.functions.decimals().call())

    def exchange_rate(self) -> int:
        return int(self.vault.functions.convertToAssets(self.base_unit()).call())

    def balance_of(self, owner: str) -> int:
        return int(self.vault.functions.balanceOf(Web3.to_checksum_address(owner)).call())

    def deposit(self, amount: int) -> None:
        self.tx.send(self.vault.functions.deposit(amount, self.sender), "vault deposit")

    def withdraw(self, amount: int) -> None:
        fn = self.vault.functions.withdraw(amount, self.sender, self.sender)
        self.tx.send(fn, "vault withdraw")

    def redeem(self, shares: int) -> None:
        fn = self.vault.functions.redeem(shares, self.sender, self.sender)
        self.tx.send(fn, "vault redeem")

#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""ERC-20 adapter for the underlying asset."""

from __future__ import annotations

from web3 import Web3

from ..abi_min import ERC20_ABI
from ..safe_math import safe_decimals
from .base import UnderlyingTokenAdapter
from .onchain import OnchainSender


class ERC20TokenAdapter(UnderlyingTokenAdapter):
    def __init__(self, w3: Web3, token_address: str, signer, sender: str):
        self.w3 = w3
        self.address = Web3.to_checksum_address(token_address)
        self.token = w3.eth.contract(address=self.address, abi=ERC20_ABI)
        self.tx = OnchainSender(w3, signer, sender)
        self._decimals = None

    # Reads --------------------------------------------------------------
    def balance_of(self, owner: str) -> int:
        return int(self.token.functions.balanceOf(Web3.to_checksum_address(owner)).call())

    def allowance(self, owner: str, spender: str) -> int:
        return int(
            self.token.functions.allowance(
                Web3.to_checksum_address(owner), Web3.to_checksum_address(spender)
            ).call()
        )

    def decimals(self) -> int:
        if self._decimals is None:
            self._decimals = safe_decimals(self.token.functions.decimals().call())
        return self._decimals

    def name(self) -> str:
        return str(self.token.functions.name().call())

    def symbol(self) -> str:
        return str(self.token.functions.symbol().call())

    # Writes -------------------------------------------------------------
    def transfer(self, to: str, amount: int) -> None:
        fn = self.token.functions.transfer(Web3.to_checksum_address(to), amount)
        self.tx.send(fn, "transfer")

    def transfer_from(self, owner: str, to: str, amount: int) -> None:
        fn = self.token.functions.transferFrom(
            Web3.to_checksum_address(owner), Web3.to_checksum_address(to), amount
        )
        self.tx.send(fn, "transferFrom")

    def approve(self, spender: str, amount: int) -> None:
        spender = Web3.to_checksum_address(spender)
        if self.allowance(self.tx.sender, spender) >= amount:
            return
        self.tx.send(self.token.functions.approve(spender, amount), "approve")

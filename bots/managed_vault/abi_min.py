#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Minimal ABI fragments for the ERC-20 and ERC-4626 calls the adapters make."""

from __future__ import annotations


def _view(name, inputs, output_type):
    return {
        "name": name,
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": arg, "type": kind} for arg, kind in inputs],
        "outputs": [{"name": "", "type": output_type}],
    }


def _write(name, inputs, output_type=None):
    return {
        "name": name,
        "type": "function",
        "stateMutability": "nonpayable",
        "inputs": [{"name": arg, "type": kind} for arg, kind in inputs],
        "outputs": [{"name": "", "type": output_type}] if output_type else [],
    }


ERC20_ABI = [
    _view("name", [], "string"),
    _view("symbol", [], "string"),
    _view("decimals", [], "uint8"),
    _view("totalSupply", [], "uint256"),
    _view("balanceOf", [("owner", "address")], "uint256"),
    _view("allowance", [("owner", "address"), ("spender", "address")], "uint256"),
    _write("transfer", [("to", "address"), ("value", "uint256")], "bool"),
    _write("transferFrom", [("from", "address"), ("to", "address"), ("value", "uint256")], "bool"),
    _write("approve", [("spender", "address"), ("value", "uint256")], "bool"),
]

ERC4626_ABI = ERC20_ABI + [
    _view("asset", [], "address"),
    _view("totalAssets", [], "uint256"),
    _view("convertToAssets", [("shares", "uint256")], "uint256"),
    _view("convertToShares", [("assets", "uint256")], "uint256"),
    _view("maxRedeem", [("owner", "address")], "uint256"),
    _view("previewRedeem", [("shares", "uint256")], "uint256"),
    _write("deposit", [("assets", "uint256"), ("receiver", "address")], "uint256"),
    _write(
        "withdraw",
        [("assets", "uint256"), ("receiver", "address"), ("owner", "address")],
        "uint256",
    ),
    _write(
        "redeem",
        [("shares", "uint256"), ("receiver", "address"), ("owner", "address")],
        "uint256",
    ),
]

#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Tests for fixed-point helpers and input validation."""

from __future__ import annotations

import pytest
from web3 import Web3

from bots.managed_vault.constants import MAX_UINT256
from bots.managed_vault.errors import ArithmeticFault, ValidationError
from bots.managed_vault.input_validation import (
    normalize_address,
    require_amount,
    require_fee_pct,
    sanitize_string_for_log,
    validate_ethereum_address,
    validate_fee_pct,
)
from bots.managed_vault.safe_math import (
    base_unit_for,
    check_uint,
    checked_add,
    checked_sub,
    fdiv,
    fmul,
    format_amount,
    mul_div_down,
    safe_decimals,
    to_base_units,
)

BASE = 10**18


def test_fmul_and_fdiv_truncate():
    """Results are floored, never rounded up."""
    assert fmul(3, BASE // 3, BASE) == 0
    assert fmul(3 * BASE, BASE // 3, BASE) == 999999999999999999
    assert fdiv(BASE, 3 * BASE, BASE) == 333333333333333333
    assert fdiv(2 * BASE, BASE, BASE) == 2 * BASE


def test_fixed_point_at_six_decimals():
    base = 10**6
    assert fmul(1_500_000, 2_000_000, base) == 3_000_000
    assert fdiv(1_000_000, 1_100_000, base) == 909_090


def test_division_by_zero_raises():
    with pytest.raises(ArithmeticFault):
        fdiv(BASE, 0, BASE)
    with pytest.raises(ArithmeticFault):
        mul_div_down(1, 1, 0)


def test_intermediate_overflow_raises():
    with pytest.raises(ArithmeticFault):
        fmul(MAX_UINT256, 2, BASE)
    # fits once divided, but the product does not
    with pytest.raises(ArithmeticFault):
        mul_div_down(2**200, 2**100, 2**100)


def test_checked_add_and_sub():
    assert checked_add(1, 2) == 3
    assert checked_sub(5, 5) == 0
    with pytest.raises(ArithmeticFault):
        checked_sub(1, 2)
    with pytest.raises(ArithmeticFault):
        checked_add(MAX_UINT256, 1)
    assert check_uint(MAX_UINT256) == MAX_UINT256


def test_safe_decimals():
    assert safe_decimals(6) == 6
    assert safe_decimals(None) == 18
    assert safe_decimals(True) == 18
    assert safe_decimals(77) == 77
    with pytest.raises(ValidationError):
        safe_decimals(78)
    with pytest.raises(ValidationError):
        safe_decimals(-1)
    assert base_unit_for(6) == 10**6


def test_to_base_units_and_format():
    assert to_base_units("1.5", 6) == 1_500_000
    assert to_base_units("0.0000019", 6) == 1
    assert to_base_units(2, 18) == 2 * BASE
    assert format_amount(1_500_000, 6, precision=2) == "1.50"
    assert format_amount(BASE // 3, 18) == "0.333333"
    with pytest.raises(ValidationError):
        to_base_units("abc", 18)
    with pytest.raises(ValidationError):
        to_base_units("-1", 18)


def test_address_validation():
    lower = "0x00000000000000000000000000000000000000c1"
    assert validate_ethereum_address(lower)
    assert not validate_ethereum_address("0x123")
    assert not validate_ethereum_address(None)
    assert normalize_address(lower) == Web3.to_checksum_address(lower)
    with pytest.raises(ValidationError, match="beneficiary"):
        normalize_address("not-an-address", "beneficiary")


def test_fee_pct_validation():
    assert validate_fee_pct(0)
    assert validate_fee_pct(100)
    assert not validate_fee_pct(101)
    assert not validate_fee_pct(-1)
    assert not validate_fee_pct(True)
    assert not validate_fee_pct(12.5)
    assert require_fee_pct(25) == 25
    with pytest.raises(ValidationError):
        require_fee_pct("10")


def test_require_amount():
    assert require_amount(1) == 1
    with pytest.raises(ValidationError, match="zero amount"):
        require_amount(0)
    for bad in (-1, MAX_UINT256 + 1, 1.0, False):
        with pytest.raises(ValidationError):
            require_amount(bad)


def test_sanitize_string_for_log():
    assert sanitize_string_for_log("USD\nCoin\x00") == "USDCoin"
    assert sanitize_string_for_log("x" * 10, max_length=4) == "xxxx...(truncated)"
    assert sanitize_string_for_log(42) == "42"

#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Fixed-point integer arithmetic at a token base unit.

Every helper works on non-negative integers that must fit in a uint256.
Division always truncates toward zero. Results outside that range, and
division by zero, raise ArithmeticFault instead of being clamped.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_DOWN
from typing import Union

from .constants import DEFAULT_TOKEN_DECIMALS, MAX_TOKEN_DECIMALS, MAX_UINT256
from .errors import ArithmeticFault, ValidationError


def check_uint(value: int, label: str = "value") -> int:
    """Return ``value`` if it is a valid uint256, raise ArithmeticFault otherwise."""
    if value < 0:
        raise ArithmeticFault(f"{label} underflow: {value}")
    if value > MAX_UINT256:
        raise ArithmeticFault(f"{label} overflow")
    return value


def mul_div_down(x: int, y: int, denominator: int) -> int:
    """Compute ``x * y / denominator`` rounded down, checking the intermediate product."""
    if denominator == 0:
        raise ArithmeticFault("division by zero")
    check_uint(x, "x")
    check_uint(y, "y")
    check_uint(denominator, "denominator")
    return check_uint(x * y, "product") // denominator


def fmul(x: int, y: int, base_unit: int) -> int:
    """Multiply two base-unit scaled numbers."""
    return mul_div_down(x, y, base_unit)


def fdiv(x: int, y: int, base_unit: int) -> int:
    """Divide two base-unit scaled numbers."""
    return mul_div_down(x, base_unit, y)


def checked_sub(x: int, y: int, label: str = "difference") -> int:
    return check_uint(x - y, label)


def checked_add(x: int, y: int, label: str = "sum") -> int:
    return check_uint(x + y, label)


def safe_decimals(value: int, default: int = DEFAULT_TOKEN_DECIMALS) -> int:
    """
    Safely handle token decimals value.

    Args:
        value: Decimals value from contract
        default: Default decimals if value is not an integer

    Returns:
        Valid decimals value (0-77)

    Raises:
        ValidationError: decimals outside 0-77 cannot form a uint256 base unit
    """
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    if value < 0 or value > MAX_TOKEN_DECIMALS:
        raise ValidationError(f"unsupported token decimals: {value}")
    return value


def base_unit_for(decimals: int) -> int:
    return 10 ** safe_decimals(decimals)


def to_base_units(amount: Union[int, float, Decimal, str], decimals: int) -> int:
    """
    Convert a human-readable amount to integer base units, rounding down.

    Args:
        amount: Amount in whole tokens (e.g. "1.5")
        decimals: Token decimals

    Returns:
        Integer amount in smallest units
    """
    try:
        dec_amount = Decimal(str(amount))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(f"invalid amount: {amount!r}") from exc
    if dec_amount < 0:
        raise ValidationError(f"negative amount: {amount!r}")
    scaled = dec_amount * Decimal(10 ** safe_decimals(decimals))
    return check_uint(int(scaled.quantize(Decimal(1), rounding=ROUND_DOWN)), "amount")


def format_amount(amount: int, decimals: int = DEFAULT_TOKEN_DECIMALS, precision: int = 6) -> str:
    """
    Format base-unit amount as human-readable string.

    Args:
        amount: Amount in smallest units
        decimals: Token decimals
        precision: Decimal places to display

    Returns:
        Formatted string
    """
    value = Decimal(amount) / Decimal(10 ** safe_decimals(decimals))
    quantum = Decimal(1).scaleb(-precision)
    return str(value.quantize(quantum, rounding=ROUND_DOWN))

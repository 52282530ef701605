#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Input validation utilities for wrapper operations and configuration."""

from __future__ import annotations

from web3 import Web3

from .constants import MAX_FEE_PCT, MAX_UINT256, MIN_FEE_PCT
from .errors import ValidationError


def validate_ethereum_address(address: str) -> bool:
    """Validate Ethereum address format.

    Both lowercase and checksummed forms are accepted; mixed case must
    carry a valid checksum.

    Args:
        address: Ethereum address string to validate

    Returns:
        True if address is well formed, False otherwise
    """
    if not address or not isinstance(address, str):
        return False
    try:
        return bool(Web3.is_address(address))
    except (TypeError, ValueError):
        return False


def normalize_address(address: str, label: str = "address") -> str:
    """Return the checksum form of ``address`` or raise ValidationError."""
    if not validate_ethereum_address(address):
        raise ValidationError(f"invalid {label}: {address!r}")
    return Web3.to_checksum_address(address)


def validate_fee_pct(value: int) -> bool:
    """Validate that a fee is a whole percentage between 0 and 100 inclusive."""
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return MIN_FEE_PCT <= value <= MAX_FEE_PCT


def require_fee_pct(value: int) -> int:
    if not validate_fee_pct(value):
        raise ValidationError(f"fee_pct must be an integer in [{MIN_FEE_PCT}, {MAX_FEE_PCT}], got {value!r}")
    return value


def require_amount(amount: int) -> int:
    """Check a raw token amount: a non-zero uint256.

    Raises:
        ValidationError: zero, negative, oversized or non-integer amount
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValidationError(f"amount must be an integer, got {type(amount).__name__}")
    if amount == 0:
        raise ValidationError("zero amount")
    if amount < 0 or amount > MAX_UINT256:
        raise ValidationError(f"amount out of range: {amount}")
    return amount


def sanitize_string_for_log(text: str, max_length: int = 1000) -> str:
    """Sanitize string for safe logging by removing control characters.

    Args:
        text: String to sanitize
        max_length: Maximum length to keep

    Returns:
        Sanitized string safe for logging
    """
    if not isinstance(text, str):
        text = str(text)

    sanitized = "".join(c for c in text if c.isprintable())

    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length] + "...(truncated)"

    return sanitized

#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Error classes for the Managed Vault wrapper and revert decoding for collaborators."""

from __future__ import annotations

from typing import Optional


class ManagedVaultError(Exception):
    """Base class for all wrapper errors."""


class ValidationError(ManagedVaultError):
    """Bad input: zero amounts, out-of-range fee, malformed address or settings."""


class InsufficientBalanceError(ManagedVaultError):
    """Caller does not own enough vshares or underlying value for the request."""

    def __init__(self, message: str, available: int = 0, requested: int = 0):
        super().__init__(message)
        self.available = available
        self.requested = requested


class ArithmeticFault(ManagedVaultError):
    """Fixed-point overflow, underflow or division by zero."""


class ExternalCollaboratorFailure(ManagedVaultError):
    """Failure surfaced by the wrapped vault or the underlying token."""

    def __init__(
        self,
        message: str,
        reason: Optional[str] = None,
        tx_hash: Optional[str] = None,
    ):
        super().__init__(message)
        self.reason = reason
        self.tx_hash = tx_hash


class RevertError(ExternalCollaboratorFailure):
    """Collaborator call reverted."""
    pass


class InsufficientFundsError(ExternalCollaboratorFailure):
    """Transfer rejected for lack of balance or allowance."""
    pass


class TransactionTimeoutError(ExternalCollaboratorFailure):
    """Transaction confirmation timeout."""
    pass


_PANIC_REASONS = {
    0x00: "Generic panic",
    0x01: "Assertion failed",
    0x11: "Arithmetic overflow/underflow",
    0x12: "Division by zero",
    0x21: "Invalid enum value",
    0x22: "Invalid storage access",
    0x31: "Pop from empty array",
    0x32: "Array index out of bounds",
    0x41: "Out of memory",
    0x51: "Invalid internal function",
}


def decode_revert_reason(error_data: Optional[str]) -> Optional[str]:
    """
    Decode revert reason from error data.

    Args:
        error_data: Hex-encoded revert data returned by the node

    Returns:
        Decoded revert reason string or None
    """
    if not error_data or not isinstance(error_data, str):
        return None

    data = error_data[2:] if error_data.startswith("0x") else error_data

    # Error(string) selector: 0x08c379a0
    if data.startswith("08c379a0"):
        # Selector, 32-byte offset, 32-byte length, then the UTF-8 payload
        length_start = 8 + 64
        length_end = length_start + 64
        if len(data) <= length_end:
            return None
        try:
            length = int(data[length_start:length_end], 16)
            payload = data[length_end:length_end + length * 2]
            if len(payload) < length * 2:
                return None
            return bytes.fromhex(payload).decode("utf-8", errors="ignore")
        except ValueError:
            return None

    # Panic(uint256) selector: 0x4e487b71
    if data.startswith("4e487b71"):
        try:
            panic_code = int(data[8:72], 16)
        except ValueError:
            return None
        return _PANIC_REASONS.get(panic_code, f"Panic code: 0x{panic_code:02x}")

    return None


def classify_error(
    error_message: str,
    error_data: Optional[str] = None,
    tx_hash: Optional[str] = None,
) -> ExternalCollaboratorFailure:
    """
    Classify a raw collaborator failure based on message and data.

    Args:
        error_message: Error message from the underlying exception
        error_data: Optional revert data for decoding
        tx_hash: Hash of the transaction that failed, if one was sent

    Returns:
        Classified ExternalCollaboratorFailure subclass
    """
    message_lower = error_message.lower()
    reason = decode_revert_reason(error_data) if error_data else None

    if any(phrase in message_lower for phrase in (
        "insufficient funds",
        "insufficient balance",
        "insufficient allowance",
        "exceeds balance",
        "exceeds allowance",
    )):
        return InsufficientFundsError(error_message, reason=reason, tx_hash=tx_hash)

    if "revert" in message_lower or reason is not None:
        return RevertError(error_message, reason=reason, tx_hash=tx_hash)

    if "timeout" in message_lower or "timed out" in message_lower:
        return TransactionTimeoutError(error_message, tx_hash=tx_hash)

    return ExternalCollaboratorFailure(error_message, reason=reason, tx_hash=tx_hash)

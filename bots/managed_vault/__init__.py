"""Managed Vault: fee-sharing wrapper around an interest-bearing vault."""

from .errors import (
    ArithmeticFault,
    ExternalCollaboratorFailure,
    InsufficientBalanceError,
    ManagedVaultError,
    ValidationError,
)
from .events import AssetManagerWithdraw, Deposit, EventLog, Withdraw
from .fee_accrual import FeeAccrualEngine, FeeState, accrue
from .share_ledger import ShareLedger
from .wrapper import ManagedVault, ManagedVaultConfig

__all__ = [
    "ArithmeticFault",
    "AssetManagerWithdraw",
    "Deposit",
    "EventLog",
    "ExternalCollaboratorFailure",
    "FeeAccrualEngine",
    "FeeState",
    "InsufficientBalanceError",
    "ManagedVault",
    "ManagedVaultConfig",
    "ManagedVaultError",
    "ShareLedger",
    "ValidationError",
    "Withdraw",
    "accrue",
]

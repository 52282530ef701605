"""Collaborator adapters for the Managed Vault wrapper."""

from __future__ import annotations

from typing import Dict, Tuple, Type

from ..errors import ValidationError
from .base import UnderlyingTokenAdapter, VaultAdapter
from .erc20 import ERC20TokenAdapter
from .erc4626 import ERC4626VaultAdapter
from .memory import InMemoryToken, InMemoryVault

VAULT_ADAPTER_TYPES: Dict[str, Type[VaultAdapter]] = {
    "erc4626": ERC4626VaultAdapter,
    "memory": InMemoryVault,
}

TOKEN_ADAPTER_TYPES: Dict[str, Type[UnderlyingTokenAdapter]] = {
    "erc20": ERC20TokenAdapter,
    "memory": InMemoryToken,
}


def get_vault_adapter(kind: str, *args, **kwargs) -> VaultAdapter:
    """Instantiate the vault adapter registered under ``kind``.

    Raises:
        ValidationError: no adapter of that type
    """
    adapter_cls = VAULT_ADAPTER_TYPES.get(kind)
    if adapter_cls is None:
        raise ValidationError(
            f"unknown vault adapter type {kind!r}, expected one of {', '.join(sorted(VAULT_ADAPTER_TYPES))}"
        )
    return adapter_cls(*args, **kwargs)


def build_onchain_adapters(w3, settings, signer, sender: str) -> Tuple[ERC20TokenAdapter, ERC4626VaultAdapter]:
    """Create the token and vault adapters for ``settings`` acting as ``sender``.

    Raises:
        ValidationError: the vault's asset is not the configured underlying,
            or its shares use different decimals than the underlying
    """
    token = TOKEN_ADAPTER_TYPES["erc20"](w3, settings.asset, signer, sender)
    vault = get_vault_adapter("erc4626", w3, settings.vault, signer, sender)
    asset = vault.asset_address()
    if asset != token.address:
        raise ValidationError(f"vault {vault.address} holds {asset}, not {token.address}")
    # Rates are scaled by the underlying's base unit and applied to raw vault shares
    share_decimals = vault.share_decimals()
    if share_decimals != token.decimals():
        raise ValidationError(
            f"vault {vault.address} shares use {share_decimals} decimals, "
            f"underlying uses {token.decimals()}; decimals offsets are not supported"
        )
    return token, vault


__all__ = [
    "ERC20TokenAdapter",
    "ERC4626VaultAdapter",
    "InMemoryToken",
    "InMemoryVault",
    "TOKEN_ADAPTER_TYPES",
    "UnderlyingTokenAdapter",
    "VAULT_ADAPTER_TYPES",
    "VaultAdapter",
    "build_onchain_adapters",
    "get_vault_adapter",
]

#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Report the persisted wrapper state valued at the live vault exchange rate.

Only read calls are made. The operator address is taken from ``--operator``
or derived from ``PRIVATE_KEY``.
"""

from __future__ import annotations

import argparse
import json
from typing import Optional, Sequence

from eth_account import Account
from web3 import HTTPProvider, Web3

from .adapters import build_onchain_adapters
from .errors import ManagedVaultError, ValidationError
from .input_validation import normalize_address
from .logging_config import get_logger
from .settings import ManagedVaultSettings, load_settings
from .state_store import restore_into
from .wrapper import ManagedVault

logger = get_logger(__name__)


def connect(settings: ManagedVaultSettings) -> Web3:
    if not settings.rpc_url:
        raise ValidationError("RPC_URL is not set")
    w3 = Web3(HTTPProvider(settings.rpc_url, request_kwargs={"timeout": settings.rpc_timeout}))
    if not w3.is_connected():
        raise ValidationError(f"cannot connect to {settings.rpc_url}")
    return w3


def build_wrapper(settings: ManagedVaultSettings, w3: Web3, operator: Optional[str] = None) -> ManagedVault:
    signer = Account.from_key(settings.private_key) if settings.private_key else None
    if operator is None:
        if signer is None:
            raise ValidationError("pass --operator or set PRIVATE_KEY")
        operator = signer.address
    operator = normalize_address(operator, "operator")

    token, vault = build_onchain_adapters(w3, settings, signer, operator)
    return ManagedVault(
        token,
        vault,
        beneficiary=settings.beneficiary,
        fee_pct=settings.fee_pct,
        address=operator,
        watermark_policy=settings.watermark_policy,
    )


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--operator", type=str, default=None, help="Address holding the vault position")
    parser.add_argument("--user", type=str, default=None, help="Also report this depositor's balances")
    args = parser.parse_args(argv)

    try:
        settings = load_settings()
        w3 = connect(settings)
        wrapper = build_wrapper(settings, w3, args.operator)
        if not restore_into(wrapper, settings.state_path):
            logger.warning("no saved state at %s, reporting an empty wrapper", settings.state_path)
        summary = wrapper.summary(args.user)
    except ManagedVaultError as exc:
        logger.error("status report failed: %s", exc)
        return 1

    print(json.dumps({key: str(value) if isinstance(value, int) else value for key, value in summary.items()}, indent=2))
    return 0


if __name__ == "__main__":  # pragma: no cover - entrypoint CLI
    raise SystemExit(main())

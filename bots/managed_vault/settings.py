#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Environment-driven settings for running the wrapper against a live vault."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .constants import (
    DEFAULT_FEE_PCT,
    DEFAULT_RPC_TIMEOUT,
    DEFAULT_STATE_FILE,
    WATERMARK_POLICIES,
    WATERMARK_TRAILING,
)
from .errors import ValidationError
from .input_validation import normalize_address, require_fee_pct


@dataclass(frozen=True)
class ManagedVaultSettings:
    asset: str
    vault: str
    beneficiary: str
    fee_pct: int = DEFAULT_FEE_PCT
    watermark_policy: str = WATERMARK_TRAILING
    state_path: Path = Path(DEFAULT_STATE_FILE)
    rpc_url: Optional[str] = None
    private_key: Optional[str] = None
    rpc_timeout: float = DEFAULT_RPC_TIMEOUT


def _require(name: str) -> str:
    value = os.getenv(name, "").strip()
    if not value:
        raise ValidationError(f"{name} is not set")
    return value


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValidationError(f"{name} must be an integer, got {raw!r}") from exc


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValidationError(f"{name} must be a number, got {raw!r}") from exc


def load_settings(env_file: Optional[Path] = None) -> ManagedVaultSettings:
    """Read settings from the process environment, after loading ``.env``.

    Variables already present in the environment win over the file.

    Raises:
        ValidationError: missing addresses or invalid values
    """
    if env_file is not None:
        load_dotenv(env_file)
    else:
        load_dotenv()

    policy = os.getenv("MANAGED_VAULT_WATERMARK", WATERMARK_TRAILING).strip().lower()
    if policy not in WATERMARK_POLICIES:
        raise ValidationError(
            f"MANAGED_VAULT_WATERMARK must be one of {', '.join(WATERMARK_POLICIES)}, got {policy!r}"
        )

    return ManagedVaultSettings(
        asset=normalize_address(_require("MANAGED_VAULT_ASSET"), "MANAGED_VAULT_ASSET"),
        vault=normalize_address(_require("MANAGED_VAULT_VAULT"), "MANAGED_VAULT_VAULT"),
        beneficiary=normalize_address(
            _require("MANAGED_VAULT_BENEFICIARY"), "MANAGED_VAULT_BENEFICIARY"
        ),
        fee_pct=require_fee_pct(_int_env("MANAGED_VAULT_FEE_PCT", DEFAULT_FEE_PCT)),
        watermark_policy=policy,
        state_path=Path(os.getenv("MANAGED_VAULT_STATE_PATH", DEFAULT_STATE_FILE)),
        rpc_url=os.getenv("RPC_URL") or None,
        private_key=os.getenv("PRIVATE_KEY") or None,
        rpc_timeout=_float_env("RPC_TIMEOUT_S", DEFAULT_RPC_TIMEOUT),
    )

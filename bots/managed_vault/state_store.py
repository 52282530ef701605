#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""JSON persistence for the wrapper's fee state and vshare ledger."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

from .constants import STATE_FORMAT_VERSION
from .errors import ValidationError


def save_state(vault, path: Path) -> None:
    payload: Dict[str, Any] = {"version": STATE_FORMAT_VERSION, **vault.export_state()}
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    tmp_path.write_text(json.dumps(payload, indent=2, sort_keys=True))
    tmp_path.replace(path)


def load_state(path: Path) -> Optional[Dict[str, Any]]:
    if not path.exists():
        return None
    try:
        payload = json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        raise ValidationError(f"state file {path} is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ValidationError(f"state file {path} must hold a JSON object")
    version = payload.get("version")
    if version != STATE_FORMAT_VERSION:
        raise ValidationError(f"unsupported state version {version!r} in {path}")
    return payload


def restore_into(vault, path: Path) -> bool:
    """Load ``path`` into ``vault``. Returns False when there is no saved state."""
    payload = load_state(path)
    if payload is None:
        return False
    vault.restore_state(payload)
    return True

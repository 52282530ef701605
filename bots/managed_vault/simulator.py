#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Replay deposit/withdraw/claim scenarios against in-memory collaborators.

Steps are written as a comma separated list:

    deposit:alice:1000,rate:1.1,claim,withdraw:alice:500

``rate`` sets the wrapped vault's exchange rate (underlying per share),
amounts are whole tokens. Actor names map to deterministic addresses.
The output is a table (or JSON) with the rates and fee state after each
step.
"""

from __future__ import annotations

import argparse
import json
from dataclasses import asdict, dataclass
from decimal import Decimal
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from web3 import Web3

from .adapters.memory import InMemoryToken, InMemoryVault
from .constants import DEFAULT_FEE_PCT, WATERMARK_POLICIES, WATERMARK_TRAILING
from .errors import ManagedVaultError, ValidationError
from .logging_config import get_logger, set_log_level
from .safe_math import format_amount, to_base_units
from .state_store import save_state
from .wrapper import ManagedVault

logger = get_logger(__name__)

WRAPPER_NAME = "managed-vault"
MANAGER_NAME = "asset-manager"
ACTIONS = ("deposit", "withdraw", "claim", "rate")


def actor_address(name: str) -> str:
    """Deterministic address for a scenario actor name."""
    return Web3.to_checksum_address(Web3.keccak(text=name)[-20:])


@dataclass
class ScenarioStep:
    action: str
    actor: str = ""
    value: str = ""


@dataclass
class StepResult:
    index: int
    action: str
    actor: str
    amount: int
    status: str
    vault_rate: int
    vshare_rate: int
    effective_rate: int
    earned_shares: int
    claimed_shares: int
    total_supply: int
    total_underlying: int
    actor_underlying: int

    def as_dict(self) -> dict:
        return asdict(self)


def parse_steps(raw: str) -> List[ScenarioStep]:
    """Parse ``deposit:alice:1000,rate:1.1,claim`` into steps."""
    if not raw or not raw.strip():
        raise ValidationError("at least one step is required")
    steps: List[ScenarioStep] = []
    for part in (chunk.strip() for chunk in raw.split(",")):
        if not part:
            continue
        fields = [field.strip() for field in part.split(":")]
        action = fields[0].lower()
        if action in ("deposit", "withdraw"):
            if len(fields) != 3 or not fields[1]:
                raise ValidationError(f"{action} step needs actor and amount: {part!r}")
            steps.append(ScenarioStep(action, fields[1], fields[2]))
        elif action == "rate":
            if len(fields) != 2:
                raise ValidationError(f"rate step needs a value: {part!r}")
            steps.append(ScenarioStep(action, value=fields[1]))
        elif action == "claim":
            steps.append(ScenarioStep(action, actor=fields[1] if len(fields) > 1 else MANAGER_NAME))
        else:
            raise ValidationError(f"unknown action {action!r}, expected one of {', '.join(ACTIONS)}")
    if not steps:
        raise ValidationError("at least one step is required")
    return steps


def build_environment(
    fee_pct: int = DEFAULT_FEE_PCT,
    initial_rate: str = "1",
    decimals: int = 18,
    watermark_policy: str = WATERMARK_TRAILING,
) -> Tuple[ManagedVault, InMemoryToken, InMemoryVault]:
    wrapper_address = actor_address(WRAPPER_NAME)
    token = InMemoryToken(wrapper_address, name="Simulated Dollar", symbol="SIM", decimals=decimals)
    vault = InMemoryVault(token, rate=to_base_units(initial_rate, decimals))
    wrapper = ManagedVault(
        token,
        vault,
        beneficiary=actor_address(MANAGER_NAME),
        fee_pct=fee_pct,
        address=wrapper_address,
        watermark_policy=watermark_policy,
    )
    return wrapper, token, vault


def _apply(step: ScenarioStep, wrapper: ManagedVault, token: InMemoryToken, vault: InMemoryVault) -> int:
    decimals = token.decimals()
    if step.action == "rate":
        vault.set_exchange_rate(to_base_units(step.value, decimals))
        return 0

    actor = actor_address(step.actor)
    if step.action == "claim":
        return wrapper.claim_manager_interest(actor)

    amount = to_base_units(step.value, decimals)
    if step.action == "deposit":
        shortfall = amount - token.balance_of(actor)
        if shortfall > 0:
            token.mint(actor, shortfall)
        token.approve_as(actor, wrapper.address, amount)
        wrapper.deposit(actor, amount)
    else:
        wrapper.withdraw(actor, amount)
    return amount


def run_scenario(
    steps: Sequence[ScenarioStep],
    fee_pct: int = DEFAULT_FEE_PCT,
    initial_rate: str = "1",
    decimals: int = 18,
    watermark_policy: str = WATERMARK_TRAILING,
) -> Tuple[List[StepResult], ManagedVault]:
    """Run ``steps`` in order. A failing step is recorded and the run continues."""
    wrapper, token, vault = build_environment(fee_pct, initial_rate, decimals, watermark_policy)
    results: List[StepResult] = []

    for index, step in enumerate(steps, start=1):
        try:
            amount = _apply(step, wrapper, token, vault)
            status = "ok"
        except ManagedVaultError as exc:
            logger.info("step %d (%s) failed: %s", index, step.action, exc)
            amount = 0
            status = type(exc).__name__

        state = wrapper.fee_state()
        actor_underlying = wrapper.balance_of_underlying(actor_address(step.actor)) if step.actor else 0
        results.append(
            StepResult(
                index=index,
                action=step.action,
                actor=step.actor,
                amount=amount,
                status=status,
                vault_rate=wrapper.vault_exchange_rate(),
                vshare_rate=wrapper.vshare_to_share_rate(),
                effective_rate=wrapper.effective_exchange_rate(),
                earned_shares=state.earned_shares,
                claimed_shares=state.claimed_shares,
                total_supply=wrapper.total_supply(),
                total_underlying=wrapper.total_underlying(),
                actor_underlying=actor_underlying,
            )
        )
    return results, wrapper


def render_table(results: Sequence[StepResult], decimals: int = 18) -> str:
    """Text table of step results with amounts in whole tokens."""
    headers = [
        "step",
        "action",
        "actor",
        "amount",
        "status",
        "vault_rate",
        "vshare_rate",
        "effective_rate",
        "earned",
        "claimed",
        "supply",
        "tvl",
    ]

    def _fmt(value: int) -> str:
        return format_amount(value, decimals)

    rows = []
    for r in results:
        rows.append([
            str(r.index),
            r.action,
            r.actor or "-",
            _fmt(r.amount),
            r.status,
            _fmt(r.vault_rate),
            _fmt(r.vshare_rate),
            _fmt(r.effective_rate),
            _fmt(r.earned_shares),
            _fmt(r.claimed_shares),
            _fmt(r.total_supply),
            _fmt(r.total_underlying),
        ])

    widths = [len(h) for h in headers]
    for row in rows:
        for idx, value in enumerate(row):
            widths[idx] = max(widths[idx], len(value))

    def _format_line(items: Sequence[str]) -> str:
        return " | ".join(value.ljust(widths[idx]) for idx, value in enumerate(items))

    sep = "-+-".join("-" * width for width in widths)
    lines = [_format_line(headers), sep]
    for row in rows:
        lines.append(_format_line(row))
    return "\n".join(lines)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--steps", type=str, required=True, help="Comma separated scenario steps")
    parser.add_argument("--fee-pct", type=int, default=DEFAULT_FEE_PCT, help="Asset manager fee (0-100)")
    parser.add_argument("--initial-rate", type=str, default="1", help="Vault exchange rate at start")
    parser.add_argument("--decimals", type=int, default=18, help="Underlying token decimals")
    parser.add_argument("--watermark", choices=WATERMARK_POLICIES, default=WATERMARK_TRAILING)
    parser.add_argument("--state-out", type=Path, default=None, help="Write final wrapper state as JSON")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON instead of a table",
    )
    parser.add_argument("--log-level", type=str, default=None, help="Override LOG_LEVEL for this run")
    args = parser.parse_args(argv)

    if args.log_level:
        set_log_level(args.log_level)

    try:
        steps = parse_steps(args.steps)
        results, wrapper = run_scenario(
            steps,
            fee_pct=args.fee_pct,
            initial_rate=args.initial_rate,
            decimals=args.decimals,
            watermark_policy=args.watermark,
        )
    except ValidationError as exc:
        parser.error(str(exc))
        return 2

    if args.state_out is not None:
        save_state(wrapper, args.state_out)

    summary = {
        key: str(value) if isinstance(value, int) and not isinstance(value, bool) else value
        for key, value in wrapper.summary().items()
    }
    summary["effective_rate_whole"] = str(Decimal(wrapper.effective_exchange_rate()) / Decimal(wrapper.base_unit))

    if args.json:
        payload = {
            "steps": [{k: str(v) if isinstance(v, int) else v for k, v in r.as_dict().items()} for r in results],
            "summary": summary,
        }
        print(json.dumps(payload, indent=2))
    else:
        print(render_table(results, args.decimals))
        print()
        print(json.dumps(summary, indent=2))
    return 0


if __name__ == "__main__":  # pragma: no cover - entrypoint CLI
    raise SystemExit(main())

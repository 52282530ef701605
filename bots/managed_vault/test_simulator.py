#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Tests for the scenario simulator CLI."""

from __future__ import annotations

import json
import logging

import pytest
from web3 import Web3

from bots.managed_vault.errors import ValidationError
from bots.managed_vault.logging_config import set_log_level
from bots.managed_vault.simulator import (
    ScenarioStep,
    actor_address,
    main,
    parse_steps,
    render_table,
    run_scenario,
)

BASE = 10**18


def test_actor_address_is_deterministic():
    assert actor_address("alice") == actor_address("alice")
    assert actor_address("alice") != actor_address("bob")
    assert Web3.is_checksum_address(actor_address("alice"))


def test_parse_steps():
    steps = parse_steps(" deposit:alice:1000 , rate:1.1,claim,withdraw:alice:500,claim:bob")
    assert steps == [
        ScenarioStep("deposit", "alice", "1000"),
        ScenarioStep("rate", value="1.1"),
        ScenarioStep("claim", actor="asset-manager"),
        ScenarioStep("withdraw", "alice", "500"),
        ScenarioStep("claim", actor="bob"),
    ]


@pytest.mark.parametrize("raw", ["", " , ", "deposit:alice", "rate", "borrow:alice:1", "withdraw::5"])
def test_parse_steps_rejects(raw):
    with pytest.raises(ValidationError):
        parse_steps(raw)


def test_run_scenario_appreciation():
    results, wrapper = run_scenario(parse_steps("deposit:alice:1000,rate:1.1,claim"))

    assert [r.status for r in results] == ["ok", "ok", "ok"]
    deposit, rate, claim = results
    assert deposit.actor_underlying == 1000 * BASE
    assert rate.earned_shares == 10**20 // 11
    assert rate.effective_rate == 1089999999999999999
    assert claim.amount == 9999999999999999999
    assert claim.claimed_shares == claim.earned_shares
    assert wrapper.events.to_frame()["event"].tolist() == ["Deposit", "AssetManagerWithdraw"]


def test_run_scenario_records_failures_and_continues():
    results, wrapper = run_scenario(parse_steps("deposit:alice:10,withdraw:bob:1,withdraw:alice:20,deposit:bob:5"))

    assert [r.status for r in results] == ["ok", "InsufficientBalanceError", "InsufficientBalanceError", "ok"]
    assert results[1].amount == 0
    assert wrapper.total_supply() == 15 * BASE


def test_six_decimal_underlying():
    results, _ = run_scenario(parse_steps("deposit:alice:2.5,rate:1.2"), decimals=6, fee_pct=0)
    assert results[0].amount == 2_500_000
    assert results[1].vault_rate == 1_200_000
    assert results[1].earned_shares == 0


def test_render_table():
    results, _ = run_scenario(parse_steps("deposit:alice:1,claim"))
    table = render_table(results)
    lines = table.splitlines()
    assert lines[0].startswith("step")
    assert "deposit" in lines[2]
    assert "1.000000" in lines[2]
    assert len(lines) == 4


def test_main_json(capsys):
    assert main(["--steps", "deposit:alice:100,rate:2", "--fee-pct", "50", "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)

    assert len(payload["steps"]) == 2
    assert payload["steps"][1]["earned_shares"] == str(25 * BASE)
    assert payload["summary"]["effective_rate"] == str(15 * BASE // 10)
    assert payload["summary"]["symbol"] == "shareSIM"


def test_main_writes_state(tmp_path, capsys):
    out = tmp_path / "state.json"
    assert main(["--steps", "deposit:alice:1", "--state-out", str(out)]) == 0
    saved = json.loads(out.read_text())
    assert saved["total_supply"] == BASE
    assert "step" in capsys.readouterr().out


def test_main_rejects_bad_steps():
    with pytest.raises(SystemExit) as excinfo:
        main(["--steps", "fly:alice:1"])
    assert excinfo.value.code == 2


def test_main_log_level_override(capsys):
    package_logger = logging.getLogger("bots.managed_vault")
    previous = package_logger.level
    try:
        assert main(["--steps", "rate:1.2", "--log-level", "debug"]) == 0
        assert package_logger.level == logging.DEBUG
    finally:
        set_log_level(logging.getLevelName(previous))
    capsys.readouterr()

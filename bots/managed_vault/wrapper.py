#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Managed Vault: deposit/withdraw coordinator in front of an interest-bearing vault.

Depositors receive vshares. A fixed percentage of the wrapped vault's
appreciation is attributed to the asset-manager beneficiary as vault
shares, which anyone can trigger to be paid out in underlying.

Every state-changing operation runs in the same order:

    checks -> reconcile fees -> ledger / fee-state mutation -> external calls

and inside an atomic section that restores all internal state (and any
collaborator supporting ``snapshot``/``restore``) if any step raises.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from .adapters.base import UnderlyingTokenAdapter, VaultAdapter
from .constants import NAME_PREFIX, SYMBOL_PREFIX, WATERMARK_TRAILING
from .errors import InsufficientBalanceError, ValidationError
from .events import AssetManagerWithdraw, Deposit, EventLog, Notification, Withdraw
from .fee_accrual import FeeAccrualEngine, FeeState
from .input_validation import normalize_address, require_amount, require_fee_pct, sanitize_string_for_log
from .logging_config import get_logger
from .safe_math import base_unit_for, fdiv, fmul
from .share_ledger import ShareLedger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ManagedVaultConfig:
    """Immutable configuration fixed at construction."""

    asset: str
    vault: str
    address: str
    beneficiary: str
    fee_pct: int
    base_unit: int
    name: str
    symbol: str
    watermark_policy: str = WATERMARK_TRAILING


class ManagedVault:
    def __init__(
        self,
        underlying: UnderlyingTokenAdapter,
        vault: VaultAdapter,
        beneficiary: str,
        fee_pct: int,
        address: str,
        watermark_policy: str = WATERMARK_TRAILING,
    ):
        fee_pct = require_fee_pct(fee_pct)
        beneficiary = normalize_address(beneficiary, "beneficiary")
        address = normalize_address(address, "wrapper address")

        base_unit = base_unit_for(underlying.decimals())
        vault_base_unit = vault.base_unit()
        if vault_base_unit != base_unit:
            raise ValidationError(
                f"vault base unit {vault_base_unit} does not match underlying base unit {base_unit}"
            )

        self.underlying = underlying
        self.vault = vault
        self.config = ManagedVaultConfig(
            asset=underlying.address,
            vault=vault.address,
            address=address,
            beneficiary=beneficiary,
            fee_pct=fee_pct,
            base_unit=base_unit,
            name=NAME_PREFIX + sanitize_string_for_log(underlying.name(), 100),
            symbol=SYMBOL_PREFIX + sanitize_string_for_log(underlying.symbol(), 32),
            watermark_policy=watermark_policy,
        )
        self.fees = FeeAccrualEngine(vault, address, fee_pct, base_unit, watermark_policy)
        self.ledger = ShareLedger()
        self.events = EventLog(base_unit)
        logger.info(
            "%s (%s) wrapping vault %s, fee %d%% to %s",
            self.config.name,
            self.config.symbol,
            self.config.vault,
            fee_pct,
            beneficiary,
        )

    # Properties ---------------------------------------------------------
    @property
    def address(self) -> str:
        return self.config.address

    @property
    def base_unit(self) -> int:
        return self.config.base_unit

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def symbol(self) -> str:
        return self.config.symbol

    # Atomicity ----------------------------------------------------------
    def _participants(self) -> List[object]:
        parts: List[object] = [self.fees, self.ledger, self.events]
        for collaborator in (self.underlying, self.vault):
            if hasattr(collaborator, "snapshot") and hasattr(collaborator, "restore"):
                if collaborator not in parts:
                    parts.append(collaborator)
        return parts

    @contextmanager
    def _atomic(self, operation: str) -> Iterator[None]:
        snapshots: List[Tuple[object, object]] = [(part, part.snapshot()) for part in self._participants()]
        try:
            yield
        except Exception as exc:
            for part, snap in reversed(snapshots):
                part.restore(snap)
            logger.warning("%s rolled back: %s: %s", operation, type(exc).__name__, exc)
            raise

    def _emit(self, event: Notification) -> None:
        self.events.append(event)
        logger.info(
            "%s actor=%s amount=%d vault_rate=%d vshare_rate=%d",
            event.event,
            event.actor,
            event.amount,
            event.vault_rate,
            event.vshare_rate,
        )

    # Rates --------------------------------------------------------------
    def vault_exchange_rate(self) -> int:
        return self.vault.exchange_rate()

    def _vshare_rate_for(self, state: FeeState) -> int:
        supply = self.ledger.total_supply()
        if supply == 0:
            return self.base_unit
        depositors = state.depositor_shares(self.vault.balance_of(self.address))
        return fdiv(depositors, supply, self.base_unit)

    def vshare_to_share_rate(self) -> int:
        """Vault shares per vshare, scaled by the base unit, with fees accrued to now."""
        return self._vshare_rate_for(self.fees.preview())

    def effective_exchange_rate(self) -> int:
        """Underlying per vshare, scaled by the base unit."""
        return fmul(self.vshare_to_share_rate(), self.vault_exchange_rate(), self.base_unit)

    # Read-only queries --------------------------------------------------
    def balance_of_shares(self, user: str) -> int:
        return self.ledger.balance_of(user)

    def balance_of_underlying(self, user: str) -> int:
        return fmul(self.ledger.balance_of(user), self.effective_exchange_rate(), self.base_unit)

    def total_supply(self) -> int:
        return self.ledger.total_supply()

    def fee_state(self) -> FeeState:
        return self.fees.preview()

    def depositor_shares(self) -> int:
        return self.fees.preview().depositor_shares(self.vault.balance_of(self.address))

    def pending_manager_shares(self) -> int:
        return self.fees.preview().unclaimed_shares

    def total_underlying(self) -> int:
        """Underlying value of every vault share the wrapper holds, fees included."""
        return fmul(self.vault.balance_of(self.address), self.vault_exchange_rate(), self.base_unit)

    # Operations ---------------------------------------------------------
    def deposit(self, caller: str, amount: int) -> int:
        """Deposit ``amount`` underlying from ``caller`` and mint vshares.

        Returns:
            Vshares minted to the caller
        """
        amount = require_amount(amount)
        caller = normalize_address(caller, "caller")

        with self._atomic("deposit"):
            self.fees.reconcile()
            vault_er = self.vault_exchange_rate()
            c_er = self._vshare_rate_for(self.fees.state)

            shares_to_mint = fdiv(amount, vault_er, self.base_unit)
            vshares_to_mint = fdiv(shares_to_mint, c_er, self.base_unit)
            self.ledger.mint(caller, vshares_to_mint)
            self._emit(Deposit(caller, amount, vault_er, c_er))

            self.underlying.transfer_from(caller, self.address, amount)
            self.underlying.approve(self.vault.address, amount)
            self.vault.deposit(amount)
        return vshares_to_mint

    def withdraw(self, caller: str, amount: int) -> int:
        """Withdraw ``amount`` underlying to ``caller``, burning the matching vshares.

        Returns:
            Vshares burned from the caller
        """
        amount = require_amount(amount)
        caller = normalize_address(caller, "caller")
        available = self.balance_of_underlying(caller)
        if available < amount:
            raise InsufficientBalanceError(
                f"withdraw of {amount} exceeds underlying balance {available}",
                available=available,
                requested=amount,
            )

        with self._atomic("withdraw"):
            self.fees.reconcile()
            vault_er = self.vault_exchange_rate()
            c_er = self._vshare_rate_for(self.fees.state)

            shares_to_withdraw = fdiv(amount, vault_er, self.base_unit)
            vshares_to_burn = fdiv(shares_to_withdraw, c_er, self.base_unit)
            self.ledger.burn(caller, vshares_to_burn)

            self.vault.withdraw(amount)
            self.underlying.transfer(caller, amount)
            self._emit(Withdraw(caller, amount, vault_er, c_er))
        return vshares_to_burn

    def claim_manager_interest(self, caller: str) -> int:
        """Pay every accrued manager share out to the beneficiary.

        Anyone may call this; the payout always goes to the configured
        beneficiary.

        Returns:
            Underlying paid out, 0 when nothing was owed
        """
        caller = normalize_address(caller, "caller")

        with self._atomic("claim_manager_interest"):
            self.fees.reconcile()
            claim = self.fees.settle_claim()
            if claim <= 0:
                return 0

            # Claimed shares stay in the vault balance until redeem, so c_er here
            # counts them as depositor shares
            vault_er = self.vault_exchange_rate()
            c_er = self._vshare_rate_for(self.fees.state)
            underlying_out = fmul(claim, vault_er, self.base_unit)

            self.vault.redeem(claim)
            self.underlying.transfer(self.config.beneficiary, underlying_out)
            self._emit(AssetManagerWithdraw(caller, underlying_out, vault_er, c_er))
        return underlying_out

    # Persistence --------------------------------------------------------
    def export_state(self) -> Dict[str, object]:
        return {
            "fee_state": self.fees.state.as_dict(),
            "balances": self.ledger.balances(),
            "total_supply": self.ledger.total_supply(),
        }

    def restore_state(self, payload: Dict[str, object]) -> None:
        """Rebuild fee state and vshare balances from ``export_state`` output."""
        try:
            raw_fee = dict(payload["fee_state"])
            balances = dict(payload["balances"])
            total_supply = payload["total_supply"]
            fee_state = FeeState(
                watermark=raw_fee["watermark"],
                earned_shares=raw_fee["earned_shares"],
                claimed_shares=raw_fee["claimed_shares"],
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ValidationError(f"malformed wrapper state: {exc}") from exc

        ledger = ShareLedger()
        ledger.load(balances)
        if ledger.total_supply() != total_supply:
            raise ValidationError(
                f"total supply {total_supply} does not match balances sum {ledger.total_supply()}"
            )
        self.fees.load(fee_state)
        self.ledger = ledger

    def summary(self, user: Optional[str] = None) -> Dict[str, object]:
        """Read-only snapshot of rates and fee state, for reports."""
        state = self.fee_state()
        data: Dict[str, object] = {
            "name": self.name,
            "symbol": self.symbol,
            "fee_pct": self.config.fee_pct,
            "vault_rate": self.vault_exchange_rate(),
            "vshare_rate": self.vshare_to_share_rate(),
            "effective_rate": self.effective_exchange_rate(),
            "total_supply": self.total_supply(),
            "total_underlying": self.total_underlying(),
            "pending_manager_shares": state.unclaimed_shares,
            **state.as_dict(),
        }
        if user is not None:
            data["user_vshares"] = self.balance_of_shares(user)
            data["user_underlying"] = self.balance_of_underlying(user)
        return data

#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Asset-manager fee accrual against a watermark exchange rate.

The engine owns the only record of how many vault shares belong to the
asset manager. It never stores history: every call measures the vault
appreciation since the watermark, converts the manager's cut into vault
shares at the new rate and moves the watermark.

    depositors = balance - (earned - claimed)
    increment  = (fmul(depositors, dr) * fee_pct / 100 + fmul(unclaimed, dr)) / r_now

where ``dr = r_now - watermark``. The manager's own unclaimed position
appreciates in full; only the depositors' gain is fee-discounted.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .constants import PERCENT_DENOMINATOR, WATERMARK_HIGH_WATER, WATERMARK_POLICIES, WATERMARK_TRAILING
from .errors import ArithmeticFault, ValidationError
from .input_validation import require_fee_pct
from .logging_config import get_logger
from .safe_math import checked_add, checked_sub, fdiv, fmul

logger = get_logger(__name__)


@dataclass(frozen=True)
class FeeState:
    """Watermark plus the cumulative earned/claimed manager shares.

    A watermark of 0 means no reconciliation has happened yet.
    """

    watermark: int = 0
    earned_shares: int = 0
    claimed_shares: int = 0

    @property
    def unclaimed_shares(self) -> int:
        return self.earned_shares - self.claimed_shares

    def depositor_shares(self, vault_share_balance: int) -> int:
        return checked_sub(vault_share_balance, self.unclaimed_shares, "depositor shares")

    def as_dict(self) -> dict:
        return {
            "watermark": self.watermark,
            "earned_shares": self.earned_shares,
            "claimed_shares": self.claimed_shares,
        }


def accrue(
    state: FeeState,
    rate_now: int,
    vault_share_balance: int,
    fee_pct: int,
    base_unit: int,
    policy: str = WATERMARK_TRAILING,
) -> FeeState:
    """Return ``state`` brought up to ``rate_now``. Pure function."""
    if rate_now <= 0:
        raise ArithmeticFault(f"vault exchange rate must be positive, got {rate_now}")

    if state.watermark == 0:
        return replace(state, watermark=rate_now)

    if rate_now <= state.watermark:
        if policy == WATERMARK_HIGH_WATER:
            return state
        return replace(state, watermark=rate_now)

    delta = rate_now - state.watermark
    unclaimed = state.unclaimed_shares
    depositors = state.depositor_shares(vault_share_balance)

    gain_to_depositors = fmul(depositors, delta, base_unit)
    fee_from_gain = gain_to_depositors * fee_pct // PERCENT_DENOMINATOR
    own_gain = fmul(unclaimed, delta, base_unit)
    increment = fdiv(checked_add(fee_from_gain, own_gain), rate_now, base_unit)

    return FeeState(
        watermark=rate_now,
        earned_shares=checked_add(state.earned_shares, increment, "earned shares"),
        claimed_shares=state.claimed_shares,
    )


class FeeAccrualEngine:
    """Mutable holder of the FeeState, driven by the wrapped vault's rate."""

    def __init__(self, vault, holder: str, fee_pct: int, base_unit: int, policy: str = WATERMARK_TRAILING):
        if policy not in WATERMARK_POLICIES:
            raise ValidationError(f"unknown watermark policy: {policy!r}")
        self.vault = vault
        self.holder = holder
        self.fee_pct = require_fee_pct(fee_pct)
        self.base_unit = base_unit
        self.policy = policy
        self.state = FeeState()

    def preview(self) -> FeeState:
        """Fee state as it would be after a reconcile now, without mutating."""
        return accrue(
            self.state,
            self.vault.exchange_rate(),
            self.vault.balance_of(self.holder),
            self.fee_pct,
            self.base_unit,
            self.policy,
        )

    def reconcile(self) -> int:
        """Bring the state up to the vault's current rate.

        Returns:
            Vault shares newly attributed to the asset manager
        """
        before = self.state
        self.state = self.preview()
        increment = self.state.earned_shares - before.earned_shares
        if before.watermark == 0:
            logger.debug("watermark initialised at %d", self.state.watermark)
        elif increment:
            logger.debug(
                "accrued %d manager shares (watermark %d -> %d)",
                increment,
                before.watermark,
                self.state.watermark,
            )
        return increment

    def settle_claim(self) -> int:
        """Mark every earned share as claimed and return how many were outstanding."""
        claim = self.state.unclaimed_shares
        self.state = replace(self.state, claimed_shares=self.state.earned_shares)
        return claim

    def load(self, state: FeeState) -> None:
        if state.claimed_shares > state.earned_shares:
            raise ValidationError("claimed shares exceed earned shares")
        if min(state.watermark, state.earned_shares, state.claimed_shares) < 0:
            raise ValidationError("fee state values must be non-negative")
        self.state = state

    def snapshot(self) -> FeeState:
        return self.state

    def restore(self, snap: FeeState) -> None:
        self.state = snap

#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Notifications emitted by the wrapper and their rate history.

Each notification carries the two exchange rates captured during the
operation, so historical vshare values can be rebuilt from the log alone.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Iterator, List

import pandas as pd

FRAME_COLUMNS = ["seq", "event", "actor", "amount", "vault_rate", "vshare_rate", "effective_rate"]


@dataclass(frozen=True)
class Notification:
    actor: str
    amount: int
    vault_rate: int
    vshare_rate: int

    @property
    def event(self) -> str:
        return type(self).__name__


class Deposit(Notification):
    pass


class Withdraw(Notification):
    pass


class AssetManagerWithdraw(Notification):
    pass


class EventLog:
    """Append-only list of notifications."""

    def __init__(self, base_unit: int):
        self.base_unit = base_unit
        self._events: List[Notification] = []

    def append(self, event: Notification) -> None:
        self._events.append(event)

    def __iter__(self) -> Iterator[Notification]:
        return iter(list(self._events))

    def __len__(self) -> int:
        return len(self._events)

    def __getitem__(self, index):
        return self._events[index]

    def of_type(self, kind) -> List[Notification]:
        return [event for event in self._events if isinstance(event, kind)]

    def to_frame(self) -> pd.DataFrame:
        """Notifications as a DataFrame, one row per event in emission order.

        Amounts and rates are Python ints (object dtype) so uint256 values
        keep full precision. ``effective_rate`` is the underlying value of
        one vshare at the moment of the event.
        """
        rows = []
        for seq, event in enumerate(self._events):
            row = asdict(event)
            row["seq"] = seq
            row["event"] = event.event
            row["effective_rate"] = event.vshare_rate * event.vault_rate // self.base_unit
            rows.append(row)
        frame = pd.DataFrame(rows, columns=FRAME_COLUMNS)
        for column in ("amount", "vault_rate", "vshare_rate", "effective_rate"):
            frame[column] = frame[column].astype(object)
        return frame

    def rate_history(self) -> pd.Series:
        """Effective underlying-per-vshare rate, in whole units, indexed by event sequence."""
        frame = self.to_frame()
        values = [rate / self.base_unit for rate in frame["effective_rate"]]
        return pd.Series(values, index=frame["seq"], name="effective_rate", dtype=float)

    # Rollback -----------------------------------------------------------
    def snapshot(self) -> int:
        return len(self._events)

    def restore(self, snap: int) -> None:
        del self._events[snap:]

"""
Vesting schedule record and its store.

The store owns the single schedule of an engine together with the
reserved-value counter, and is the only place either is mutated.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Dict

from ..blockchain_exceptions import (
    InvalidScheduleError,
    InvalidScheduleReason,
    SafeMathError,
)
from ..constants import ZERO_ADDRESS
from ..defi.safe_math import SafeMath, assert_reserve_invariant


@dataclass
class VestingSchedule:
    """
    A cliff-then-linear grant to a single beneficiary.

    Timestamps and durations are unix seconds; amounts are integer base units
    of the underlying token.
    """

    initialized: bool = False
    beneficiary: str = ""
    start: int = 0
    cliff: int = 0  # start + cliff duration
    duration: int = 0
    slice_period_seconds: int = 0
    amount_total: int = 0
    released: int = 0

    @property
    def end(self) -> int:
        return self.start + self.duration

    @property
    def fully_released(self) -> bool:
        return self.initialized and self.released == self.amount_total

    def to_dict(self) -> Dict[str, Any]:
        """Serialize schedule to dictionary."""
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VestingSchedule":
        """Deserialize schedule from dictionary."""
        return cls(
            initialized=bool(data.get("initialized", False)),
            beneficiary=str(data.get("beneficiary", "")).lower(),
            start=int(data.get("start", 0)),
            cliff=int(data.get("cliff", 0)),
            duration=int(data.get("duration", 0)),
            slice_period_seconds=int(data.get("slice_period_seconds", 0)),
            amount_total=int(data.get("amount_total", 0)),
            released=int(data.get("released", 0)),
        )


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class ScheduleStore:
    """Holds the engine's schedule and reserved-value counter."""

    def __init__(self) -> None:
        self._schedule = VestingSchedule()
        self.total_reserved = 0

    @property
    def schedule(self) -> VestingSchedule:
        return self._schedule

    def snapshot(self) -> VestingSchedule:
        """Copy of the current schedule; mutating it does not touch the store."""
        return dataclasses.replace(self._schedule)

    def create(
        self,
        beneficiary: str,
        start: int,
        cliff_duration: int,
        duration: int,
        slice_period_seconds: int,
        amount_total: int,
        available_balance: int,
    ) -> VestingSchedule:
        """
        Store the one schedule this engine will ever hold.

        Checks run in a fixed order and the first failure wins: funds,
        duration, amount, slice period, then already-initialized.

        Args:
            beneficiary: Sole recipient of released value
            start: Schedule epoch (unix seconds)
            cliff_duration: Seconds after start before anything unlocks
            duration: Total vesting length from start, > 0
            slice_period_seconds: Unlock granularity, >= 1
            amount_total: Value committed, > 0
            available_balance: Ledger balance currently held by the engine

        Returns:
            The stored schedule

        Raises:
            InvalidScheduleError: If any precondition fails (state unchanged)
        """
        for name, value in (
            ("start", start),
            ("cliff_duration", cliff_duration),
            ("duration", duration),
            ("slice_period_seconds", slice_period_seconds),
            ("amount_total", amount_total),
        ):
            if not _is_int(value):
                raise InvalidScheduleError(
                    f"TokenVesting: {name} must be an integer",
                    reason=InvalidScheduleReason.NON_INTEGER,
                    details={name: value},
                )

        if available_balance < amount_total:
            raise InvalidScheduleError(
                "TokenVesting: cannot create vesting schedule because not sufficient tokens",
                reason=InvalidScheduleReason.INSUFFICIENT_FUNDS,
                details={"available": available_balance, "amount_total": amount_total},
            )
        if duration <= 0:
            raise InvalidScheduleError(
                "TokenVesting: duration must be > 0",
                reason=InvalidScheduleReason.ZERO_DURATION,
                details={"duration": duration},
            )
        if amount_total <= 0:
            raise InvalidScheduleError(
                "TokenVesting: amount must be > 0",
                reason=InvalidScheduleReason.ZERO_AMOUNT,
                details={"amount_total": amount_total},
            )
        if slice_period_seconds < 1:
            raise InvalidScheduleError(
                "TokenVesting: slicePeriodSeconds must be >= 1",
                reason=InvalidScheduleReason.SLICE_TOO_SMALL,
                details={"slice_period_seconds": slice_period_seconds},
            )
        if self._schedule.initialized:
            raise InvalidScheduleError(
                "TokenVesting: vesting schedule already initialized",
                reason=InvalidScheduleReason.ALREADY_INITIALIZED,
            )

        beneficiary_norm = (beneficiary or "").lower()
        if not beneficiary_norm or beneficiary_norm == ZERO_ADDRESS:
            raise InvalidScheduleError(
                "TokenVesting: beneficiary is zero address",
                reason=InvalidScheduleReason.INVALID_BENEFICIARY,
            )
        if start < 0 or cliff_duration < 0:
            raise InvalidScheduleError(
                "TokenVesting: start and cliff must be non-negative",
                reason=InvalidScheduleReason.INVALID_TIMING,
                details={"start": start, "cliff_duration": cliff_duration},
            )

        cliff = SafeMath.safe_add(start, cliff_duration)
        SafeMath.safe_add(start, duration)
        total_reserved = SafeMath.safe_add(self.total_reserved, amount_total)

        self._schedule = VestingSchedule(
            initialized=True,
            beneficiary=beneficiary_norm,
            start=start,
            cliff=cliff,
            duration=duration,
            slice_period_seconds=slice_period_seconds,
            amount_total=amount_total,
            released=0,
        )
        self.total_reserved = total_reserved
        return self._schedule

    def record_release(self, amount: int) -> None:
        """Account for `amount` leaving the engine."""
        released = SafeMath.safe_add(self._schedule.released, amount, self._schedule.amount_total)
        total_reserved = SafeMath.safe_sub(self.total_reserved, amount)
        self._schedule.released = released
        self.total_reserved = total_reserved

    def restore(self, released: int, total_reserved: int) -> None:
        """Put the counters back to values captured before a failed release."""
        self._schedule.released = released
        self.total_reserved = total_reserved

    def load(self, schedule: VestingSchedule, total_reserved: int) -> None:
        """
        Replace state from a snapshot.

        Raises:
            InvalidScheduleError: If the snapshot breaks the accounting invariants
        """
        if schedule.initialized:
            valid = (
                schedule.duration > 0
                and schedule.amount_total > 0
                and schedule.slice_period_seconds >= 1
                and bool(schedule.beneficiary)
                and schedule.start >= 0
                and schedule.cliff >= schedule.start
            )
            if valid:
                try:
                    assert_reserve_invariant(
                        schedule.amount_total, schedule.released, total_reserved
                    )
                except SafeMathError:
                    valid = False
        else:
            valid = schedule == VestingSchedule() and total_reserved == 0
        if not valid:
            raise InvalidScheduleError(
                "TokenVesting: snapshot violates schedule invariants",
                reason=InvalidScheduleReason.CORRUPTED_SNAPSHOT,
                details={"schedule": schedule.to_dict(), "total_reserved": total_reserved},
            )
        self._schedule = schedule
        self.total_reserved = total_reserved

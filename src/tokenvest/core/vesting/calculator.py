"""
Unlock calculation for cliff-then-linear schedules.

Pure functions of (schedule, now). Elapsed time is quantized down to whole
slices and the vested amount is floored, so rounding never over-releases.
"""

from __future__ import annotations

from ..defi.safe_math import SafeMath
from .schedule import VestingSchedule


def compute_vested(schedule: VestingSchedule, now: int) -> int:
    """
    Total amount vested at `now`, including anything already released.

    Args:
        schedule: Schedule to evaluate
        now: Unix timestamp

    Returns:
        Vested amount in base units (0 for an uninitialized schedule)
    """
    if not schedule.initialized or now < schedule.cliff:
        return 0
    if now >= schedule.end:
        return schedule.amount_total

    elapsed = now - schedule.start
    whole_slices = elapsed // schedule.slice_period_seconds
    vested_seconds = whole_slices * schedule.slice_period_seconds
    return SafeMath.mul_div(schedule.amount_total, vested_seconds, schedule.duration)


def compute_releasable(schedule: VestingSchedule, now: int) -> int:
    """
    Amount unlocked at `now` but not yet released.

    Before the cliff this is 0; from the end of the schedule on it is
    everything not yet released.

    Args:
        schedule: Schedule to evaluate
        now: Unix timestamp

    Returns:
        Releasable amount in base units
    """
    if not schedule.initialized or now < schedule.cliff:
        return 0
    if now >= schedule.end:
        return schedule.amount_total - schedule.released

    vested = compute_vested(schedule, now)
    # A clock set back inside the window can put vested below released.
    if vested <= schedule.released:
        return 0
    return vested - schedule.released

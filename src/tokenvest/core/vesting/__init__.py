"""
Vesting schedule engine.

- ScheduleStore: the single schedule record and reserved-value counter
- Calculator: pure cliff/linear/slice unlock math
- ReleaseController: guarded checks-effects-interactions withdrawals
- TokenVesting: facade wiring the above to a ledger, access control and clock
- VestingFactory: one engine per grant
"""

from .calculator import compute_releasable, compute_vested
from .clock import ManualClock, system_time
from .controller import ReleaseController, VestingEvent
from .engine import TokenVesting
from .factory import VestingFactory
from .schedule import ScheduleStore, VestingSchedule

__all__ = [
    "ScheduleStore",
    "VestingSchedule",
    "compute_releasable",
    "compute_vested",
    "ReleaseController",
    "VestingEvent",
    "TokenVesting",
    "VestingFactory",
    "ManualClock",
    "system_time",
]

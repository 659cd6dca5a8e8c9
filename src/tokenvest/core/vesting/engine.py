"""
Token Vesting Contract.

Holds a pool of an underlying token and releases it to one beneficiary on a
cliff-then-linear schedule:
- Administrator creates the schedule once, after funding the contract
- Beneficiary (or administrator) releases whatever has unlocked
- Anyone can query the releasable amount

Composition: ScheduleStore owns state, the calculator prices it against the
injected clock, and ReleaseController performs guarded withdrawals.
"""

from __future__ import annotations

import hashlib
import logging
import time
from typing import Any, Dict, List

from ..blockchain_exceptions import UnauthorizedError
from ..protocols import IAdministrator, ILedger, TimeProvider
from ..units import format_amount
from .calculator import compute_releasable, compute_vested
from .clock import read_timestamp, system_time
from .controller import ReleaseController, VestingEvent
from .schedule import ScheduleStore, VestingSchedule

logger = logging.getLogger(__name__)


class TokenVesting:
    """
    Single-grant vesting engine.

    Usage:
        vesting = TokenVesting(token, AdminAccessControl("0xadmin"))
        token.transfer("0xadmin", vesting.address, 100)
        vesting.create_schedule("0xadmin", "0xbob", start, cliff, duration, slice, 100)
        vesting.release("0xbob", vesting.compute_releasable())
    """

    def __init__(
        self,
        token: ILedger,
        access_control: IAdministrator,
        address: str = "",
        time_provider: TimeProvider | None = None,
    ) -> None:
        self.token = token
        self.access_control = access_control
        self._time_provider = time_provider or system_time
        self.address = (address or self._generate_address()).lower()

        self.events: List[VestingEvent] = []
        self._store = ScheduleStore()
        self._controller = ReleaseController(
            store=self._store,
            ledger=token,
            access_control=access_control,
            engine_address=self.address,
            time_provider=self._time_provider,
            emit=self.events.append,
        )

        logger.info(
            "TokenVesting deployed",
            extra={
                "event": "vesting.deployed",
                "address": self.address[:10],
                "token": token.address[:10],
                "deterministic_clock": time_provider is not None,
            },
        )

    # ==================== View Functions ====================

    def get_underlying_asset(self) -> str:
        """Address of the token this contract vests."""
        return self.token.address

    def get_current_time(self) -> int:
        return read_timestamp(self._time_provider)

    def get_schedule(self) -> VestingSchedule:
        """Copy of the schedule record."""
        return self._store.snapshot()

    def compute_releasable(self) -> int:
        """Amount that can be released right now."""
        return compute_releasable(self._store.schedule, self.get_current_time())

    def get_total_reserved(self) -> int:
        """Value committed to the schedule and not yet released."""
        return self._store.total_reserved

    def get_withdrawable_amount(self) -> int:
        """Balance held above what the schedule has reserved."""
        balance = self.token.balance_of(self.address)
        return max(0, balance - self._store.total_reserved)

    def get_schedule_summary(self) -> Dict[str, Any]:
        """Human-oriented snapshot of the grant at the current time."""
        schedule = self._store.schedule
        now = self.get_current_time()
        decimals = getattr(self.token, "decimals", 0)
        vested = compute_vested(schedule, now)
        releasable = compute_releasable(schedule, now)
        return {
            "address": self.address,
            "token": self.token.address,
            "initialized": schedule.initialized,
            "beneficiary": schedule.beneficiary,
            "now": now,
            "cliff": schedule.cliff,
            "end": schedule.end,
            "amount_total": schedule.amount_total,
            "vested": vested,
            "released": schedule.released,
            "releasable": releasable,
            "total_reserved": self._store.total_reserved,
            "display": {
                "amount_total": format_amount(schedule.amount_total, decimals),
                "vested": format_amount(vested, decimals),
                "released": format_amount(schedule.released, decimals),
                "releasable": format_amount(releasable, decimals),
            },
        }

    # ==================== State-Changing Functions ====================

    def create_schedule(
        self,
        caller: str,
        beneficiary: str,
        start: int,
        cliff_duration: int,
        duration: int,
        slice_period_seconds: int,
        amount_total: int,
    ) -> bool:
        """
        Create the vesting schedule (administrator only, once).

        Args:
            caller: Must be the administrator
            beneficiary: Recipient of released tokens
            start: Start time (unix seconds)
            cliff_duration: Seconds from start before anything unlocks
            duration: Total vesting seconds from start
            slice_period_seconds: Unlock granularity in seconds
            amount_total: Base units to vest

        Returns:
            True if successful

        Raises:
            UnauthorizedError: If caller is not the administrator
            InvalidScheduleError: If a creation precondition fails
        """
        with self._controller.guard():
            self._require_admin(caller)
            schedule = self._store.create(
                beneficiary=beneficiary,
                start=start,
                cliff_duration=cliff_duration,
                duration=duration,
                slice_period_seconds=slice_period_seconds,
                amount_total=amount_total,
                available_balance=self.token.balance_of(self.address),
            )

        logger.info(
            "Vesting schedule created",
            extra={
                "event": "vesting.created",
                "address": self.address[:10],
                "beneficiary": schedule.beneficiary[:10],
                "start": schedule.start,
                "cliff": schedule.cliff,
                "duration": schedule.duration,
                "slice_period_seconds": schedule.slice_period_seconds,
                "amount_total": schedule.amount_total,
            },
        )
        return True

    def release(self, caller: str, amount: int) -> bool:
        """
        Release `amount` vested base units to the beneficiary.

        See ReleaseController.release for the failure modes.
        """
        return self._controller.release(caller, amount)

    # ==================== Helpers ====================

    def _require_admin(self, caller: str) -> None:
        if not self.access_control.is_administrator(caller):
            logger.warning(
                "Schedule creation denied: caller is not administrator",
                extra={
                    "event": "vesting.unauthorized",
                    "address": self.address[:10],
                    "caller": (caller or "")[:10],
                },
            )
            raise UnauthorizedError(
                "TokenVesting: caller is not the administrator",
                details={"caller": caller},
            )

    def _generate_address(self) -> str:
        addr_input = f"vesting:{self.token.address}:{time.time_ns()}".encode()
        addr_hash = hashlib.sha3_256(addr_input).digest()
        return f"0x{addr_hash[-20:].hex()}"

    # ==================== Serialization ====================

    def to_dict(self) -> Dict[str, Any]:
        """Serialize engine state to dictionary."""
        return {
            "address": self.address,
            "token": self.token.address,
            "schedule": self._store.schedule.to_dict(),
            "total_reserved": self._store.total_reserved,
            "events": [
                {
                    "event_type": e.event_type,
                    "beneficiary": e.beneficiary,
                    "amount": e.amount,
                    "block_time": e.block_time,
                }
                for e in self.events
            ],
        }

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        token: ILedger,
        access_control: IAdministrator,
        time_provider: TimeProvider | None = None,
    ) -> "TokenVesting":
        """
        Restore an engine from to_dict() output.

        Raises:
            ValueError: If the snapshot belongs to a different token
            InvalidScheduleError: If the snapshot breaks the schedule invariants
        """
        if data.get("token", "").lower() != token.address.lower():
            raise ValueError("Snapshot token does not match the supplied ledger")

        engine = cls(
            token=token,
            access_control=access_control,
            address=data["address"],
            time_provider=time_provider,
        )
        engine._store.load(
            VestingSchedule.from_dict(data.get("schedule", {})),
            int(data.get("total_reserved", 0)),
        )
        engine.events.extend(
            VestingEvent(
                event_type=e["event_type"],
                beneficiary=e["beneficiary"],
                amount=int(e["amount"]),
                block_time=int(e["block_time"]),
            )
            for e in data.get("events", [])
        )
        return engine

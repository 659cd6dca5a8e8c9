"""
Release orchestration for a vesting engine.

Security features:
- Reentrancy protection: a release triggered from inside the ledger transfer
  (e.g. by a recipient receive hook) is rejected
- Thread serialization: one operation at a time per engine
- Checks-effects-interactions: state is committed before the transfer and
  rolled back if the transfer fails
"""

from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Iterator

from ..blockchain_exceptions import (
    InsufficientVestedError,
    InvalidAmountError,
    ReentrancyError,
    ScheduleNotInitializedError,
    TransferFailedError,
    UnauthorizedError,
    get_error_context,
)
from ..protocols import IAdministrator, ILedger, TimeProvider
from .calculator import compute_releasable
from .clock import read_timestamp
from .schedule import ScheduleStore

logger = logging.getLogger(__name__)


@dataclass
class VestingEvent:
    """Represents a vesting notification."""

    event_type: str  # "Released"
    beneficiary: str
    amount: int
    block_time: int  # engine clock at emission
    timestamp: float = field(default_factory=time.time)


class ReleaseController:
    """
    Authorizes and executes withdrawals from the store.

    The guard is both a reentrancy flag and an instance lock. The flag
    remembers which thread holds the lock, so a nested call on that thread
    fails fast while other threads simply wait their turn.
    """

    def __init__(
        self,
        store: ScheduleStore,
        ledger: ILedger,
        access_control: IAdministrator,
        engine_address: str,
        time_provider: TimeProvider,
        emit: Callable[[VestingEvent], None],
    ) -> None:
        self.store = store
        self.ledger = ledger
        self.access_control = access_control
        self.engine_address = engine_address
        self._time_provider = time_provider
        self._emit = emit

        # Reentrancy guard
        self._mutex = threading.Lock()
        self._locked = False
        self._owner_thread: int | None = None

    @contextmanager
    def guard(self) -> Iterator[None]:
        """Hold the engine for one operation."""
        self._require_not_locked()
        with self._mutex:
            self._locked = True
            self._owner_thread = threading.get_ident()
            try:
                yield
            finally:
                self._locked = False
                self._owner_thread = None

    def release(self, caller: str, amount: int) -> bool:
        """
        Release vested value to the beneficiary.

        Args:
            caller: Beneficiary or administrator
            amount: Base units to release

        Returns:
            True if successful

        Raises:
            ReentrancyError: If called from inside an in-progress release
            UnauthorizedError: If caller is neither beneficiary nor administrator
            InvalidAmountError: If amount is not a non-negative integer
            ScheduleNotInitializedError: If no schedule exists yet
            InsufficientVestedError: If amount exceeds the releasable amount
            TransferFailedError: If the ledger transfer failed (state rolled back)
        """
        with self.guard():
            return self._release(caller, amount)

    def _release(self, caller: str, amount: int) -> bool:
        self._require_beneficiary_or_admin(caller)

        if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
            raise InvalidAmountError(
                f"TokenVesting: invalid release amount {amount!r}",
                details={"amount": amount},
            )

        schedule = self.store.schedule

        if not schedule.initialized:
            raise ScheduleNotInitializedError("TokenVesting: no vesting schedule")

        now = read_timestamp(self._time_provider)
        releasable = compute_releasable(schedule, now)
        if amount > releasable:
            logger.info(
                "Release exceeds vested amount",
                extra={
                    "event": "vesting.release_denied",
                    "engine": self.engine_address[:10],
                    "requested": amount,
                    "releasable": releasable,
                },
            )
            raise InsufficientVestedError(
                "TokenVesting: cannot release tokens, not enough vested tokens",
                details={"requested": amount, "releasable": releasable, "now": now},
            )

        # Effects
        released_before = schedule.released
        reserved_before = self.store.total_reserved
        self.store.record_release(amount)

        # Interaction
        try:
            transferred = self.ledger.transfer(
                self.engine_address, schedule.beneficiary, amount
            )
        except Exception as exc:
            self.store.restore(released_before, reserved_before)
            logger.error(
                "Ledger transfer failed, release rolled back",
                extra={
                    "event": "vesting.transfer_failed",
                    "engine": self.engine_address[:10],
                    "amount": amount,
                    **get_error_context(exc),
                },
            )
            raise TransferFailedError(
                f"TokenVesting: transfer failed ({exc})",
                details={"amount": amount, "beneficiary": schedule.beneficiary},
            ) from exc

        if not transferred:
            self.store.restore(released_before, reserved_before)
            logger.error(
                "Ledger refused transfer, release rolled back",
                extra={
                    "event": "vesting.transfer_failed",
                    "engine": self.engine_address[:10],
                    "amount": amount,
                },
            )
            raise TransferFailedError(
                "TokenVesting: transfer failed",
                details={"amount": amount, "beneficiary": schedule.beneficiary},
            )

        self._emit(
            VestingEvent(
                event_type="Released",
                beneficiary=schedule.beneficiary,
                amount=amount,
                block_time=now,
            )
        )

        logger.info(
            "Vested tokens released",
            extra={
                "event": "vesting.released",
                "engine": self.engine_address[:10],
                "beneficiary": schedule.beneficiary[:10],
                "amount": amount,
                "released_total": schedule.released,
            },
        )

        return True

    # ==================== Helpers ====================

    def _require_not_locked(self) -> None:
        if self._locked and self._owner_thread == threading.get_ident():
            logger.warning(
                "Reentrant call blocked",
                extra={
                    "event": "vesting.reentrancy_blocked",
                    "engine": self.engine_address[:10],
                },
            )
            raise ReentrancyError("TokenVesting: reentrant call")

    def _require_beneficiary_or_admin(self, caller: str) -> None:
        beneficiary = self.store.schedule.beneficiary
        caller_norm = (caller or "").lower()
        is_beneficiary = bool(beneficiary) and caller_norm == beneficiary
        if is_beneficiary or self.access_control.is_administrator(caller_norm):
            return
        logger.warning(
            "Release denied: caller is neither beneficiary nor administrator",
            extra={
                "event": "vesting.unauthorized",
                "engine": self.engine_address[:10],
                "caller": caller_norm[:10],
            },
        )
        raise UnauthorizedError(
            "TokenVesting: only beneficiary and owner can release vested tokens",
            details={"caller": caller_norm},
        )

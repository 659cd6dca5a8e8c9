"""Time providers for the vesting engine."""

from __future__ import annotations

import time
from typing import Any, Callable


def system_time() -> int:
    """Current wall-clock time as a whole unix timestamp."""
    return int(time.time())


def read_timestamp(time_provider: Callable[[], Any]) -> int:
    """
    Call `time_provider` and coerce the result to whole seconds.

    Raises:
        ValueError: If the provider returns something that is not a timestamp
    """
    timestamp = time_provider()
    try:
        return int(timestamp)
    except (TypeError, ValueError) as exc:
        raise ValueError("time_provider must return an integer timestamp") from exc


class ManualClock:
    """Deterministic clock for tests and simulations.

    Pass ``clock.now`` wherever a time provider is expected.
    """

    def __init__(self, start_time: int = 0):
        self.current_time = int(start_time)

    def now(self) -> int:
        return self.current_time

    def set(self, timestamp: int) -> None:
        self.current_time = int(timestamp)

    def advance(self, seconds: int) -> None:
        self.current_time += int(seconds)

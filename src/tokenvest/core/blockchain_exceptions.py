"""
Exception hierarchy for tokenvest contracts.

Provides typed exceptions for ledger, arithmetic and vesting operations so
callers can handle each failure precisely instead of catching bare Exception.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class BlockchainError(Exception):
    """Base exception for all tokenvest errors.

    Attributes:
        message: Human-readable error description
        details: Additional context about the error
        recoverable: Whether the caller can fix the inputs (or wait) and retry
    """

    recoverable: bool = False

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        recoverable: Optional[bool] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if recoverable is not None:
            self.recoverable = recoverable


# ==================== Ledger Errors ====================


class LedgerError(BlockchainError):
    """Raised when a token ledger operation fails.

    Examples: transfer amount exceeds balance, token paused, zero address.
    """
    pass


# ==================== Arithmetic Errors ====================


class SafeMathError(BlockchainError):
    """Raised when checked arithmetic would overflow, underflow or divide by zero."""
    pass


# ==================== Vesting Errors ====================


class VestingError(BlockchainError):
    """Base class for vesting engine failures.

    None of these are fatal: the caller corrects its inputs or waits for
    more value to vest.
    """
    recoverable = True


class UnauthorizedError(VestingError):
    """Raised when the caller lacks the capability the operation requires."""
    pass


class InvalidScheduleReason(Enum):
    """Why a schedule creation was rejected."""
    INSUFFICIENT_FUNDS = "insufficient_funds"
    ZERO_DURATION = "zero_duration"
    ZERO_AMOUNT = "zero_amount"
    SLICE_TOO_SMALL = "slice_too_small"
    ALREADY_INITIALIZED = "already_initialized"
    INVALID_BENEFICIARY = "invalid_beneficiary"
    INVALID_TIMING = "invalid_timing"
    NON_INTEGER = "non_integer"
    CORRUPTED_SNAPSHOT = "corrupted_snapshot"


class InvalidScheduleError(VestingError):
    """Raised when a schedule creation precondition is violated."""

    def __init__(
        self,
        message: str,
        reason: InvalidScheduleReason,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.reason = reason


class ScheduleNotInitializedError(VestingError):
    """Raised when a release is attempted before any schedule exists."""
    pass


class InvalidAmountError(VestingError):
    """Raised when a release amount is not a non-negative integer."""
    pass


class InsufficientVestedError(VestingError):
    """Raised when the requested release exceeds the currently unlocked amount."""
    pass


class TransferFailedError(VestingError):
    """Raised when the ledger transfer of released value did not succeed."""
    pass


class ReentrancyError(VestingError):
    """Raised when release is re-entered while a release is in progress."""
    pass


# ==================== Configuration Errors ====================


class ConfigurationError(BlockchainError):
    """Raised when configuration is missing or invalid."""
    recoverable = False


# ==================== Utility Functions ====================


def is_recoverable_error(exc: Exception) -> bool:
    """Check if an exception represents a recoverable error.

    Args:
        exc: The exception to check

    Returns:
        True if the caller can correct its inputs or wait and retry
    """
    if isinstance(exc, BlockchainError):
        return exc.recoverable
    return False


def get_error_context(exc: Exception) -> Dict[str, Any]:
    """Extract error context from an exception for logging.

    Args:
        exc: The exception to extract context from

    Returns:
        Dictionary containing error type, message, and any additional details
    """
    context: Dict[str, Any] = {
        "error_type": type(exc).__name__,
        "error_message": str(exc),
    }

    if isinstance(exc, BlockchainError):
        context["recoverable"] = exc.recoverable
        if exc.details:
            context["details"] = exc.details

    if isinstance(exc, InvalidScheduleError):
        context["reason"] = exc.reason.value

    return context

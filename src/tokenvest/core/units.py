"""
Token unit helpers.

The ledger and the vesting engine only handle integer base units. These
helpers convert human-readable whole-token amounts to and from base units
without relying on floats.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_DOWN
from typing import Any

from tokenvest.core.constants import MAX_TOKEN_DECIMALS, TOKEN_DECIMALS


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError("Amount cannot be a boolean")
    if isinstance(value, (int, float, str)):
        return Decimal(str(value))
    raise ValueError("Amount must be int, float, str, or Decimal")


def _quantizer(decimals: int) -> Decimal:
    if not 0 <= decimals <= MAX_TOKEN_DECIMALS:
        raise ValueError(f"Decimals must be between 0 and {MAX_TOKEN_DECIMALS}")
    return Decimal(1).scaleb(-decimals)


def quantize_amount(value: Any, decimals: int = TOKEN_DECIMALS) -> Decimal:
    """Convert to a Decimal token amount truncated to `decimals` places."""
    try:
        dec = _to_decimal(value)
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise ValueError(f"Invalid amount value: {value}") from exc

    if dec.is_nan():
        raise ValueError("Amount cannot be NaN")
    if dec.is_infinite():
        raise ValueError("Amount cannot be infinite")

    return dec.quantize(_quantizer(decimals), rounding=ROUND_DOWN)


def to_base_units(value: Any, decimals: int = TOKEN_DECIMALS) -> int:
    """Convert a token amount to integer base units."""
    dec = quantize_amount(value, decimals)
    if dec < 0:
        raise ValueError("Amount cannot be negative")
    return int(dec.scaleb(decimals).to_integral_value(rounding=ROUND_DOWN))


def from_base_units(value: int, decimals: int = TOKEN_DECIMALS) -> Decimal:
    """Convert integer base units to a Decimal token amount."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError("Base units must be an int")
    return Decimal(value).scaleb(-decimals).quantize(
        _quantizer(decimals), rounding=ROUND_DOWN
    )


def format_amount(value: int, decimals: int = TOKEN_DECIMALS) -> str:
    """Format base units as a fixed-precision token string."""
    return f"{from_base_units(value, decimals):f}"

"""
Checked integer arithmetic for contract accounting.

Python integers never wrap, so the bound that matters is the 256-bit word the
ledger stores amounts in. Every helper here raises SafeMathError instead of
producing a value outside [0, MAX_UINT256].
"""

from __future__ import annotations

from ..blockchain_exceptions import SafeMathError
from ..constants import MAX_UINT256


class SafeMath:
    """Overflow-checked unsigned arithmetic."""

    @staticmethod
    def safe_add(a: int, b: int, max_value: int = MAX_UINT256) -> int:
        result = a + b
        if result > max_value:
            raise SafeMathError(
                f"SafeMath: addition overflow ({a} + {b} > {max_value})",
                details={"a": a, "b": b, "max_value": max_value},
            )
        return result

    @staticmethod
    def safe_sub(a: int, b: int) -> int:
        if b > a:
            raise SafeMathError(
                f"SafeMath: subtraction underflow ({a} - {b})",
                details={"a": a, "b": b},
            )
        return a - b

    @staticmethod
    def safe_mul(a: int, b: int, max_value: int = MAX_UINT256) -> int:
        result = a * b
        if result > max_value:
            raise SafeMathError(
                "SafeMath: multiplication overflow",
                details={"a": a, "b": b, "max_value": max_value},
            )
        return result

    @staticmethod
    def safe_div(a: int, b: int) -> int:
        """Floor division that refuses a zero divisor."""
        if b == 0:
            raise SafeMathError("SafeMath: division by zero", details={"a": a})
        return a // b

    @staticmethod
    def mul_div(a: int, b: int, denominator: int) -> int:
        """
        Calculate floor(a * b / denominator).

        The product is bounds-checked before dividing so the intermediate
        value can never exceed MAX_UINT256. Rounds toward zero.
        """
        return SafeMath.safe_div(SafeMath.safe_mul(a, b), denominator)


def assert_reserve_invariant(amount_total: int, released: int, total_reserved: int) -> None:
    """Check that reserved value equals committed minus released value."""
    if not 0 <= released <= amount_total:
        raise SafeMathError(
            f"Invariant violated: released {released} outside [0, {amount_total}]",
            details={"amount_total": amount_total, "released": released},
        )
    if total_reserved != amount_total - released:
        raise SafeMathError(
            f"Invariant violated: reserved {total_reserved} != "
            f"{amount_total} - {released}",
            details={
                "amount_total": amount_total,
                "released": released,
                "total_reserved": total_reserved,
            },
        )

"""
tokenvest DeFi primitives.

- Access Control: administrator capability checks
- SafeMath: overflow-checked integer arithmetic
"""

from .access_control import AdminAccessControl
from .safe_math import SafeMath, assert_reserve_invariant

__all__ = [
    "AdminAccessControl",
    "SafeMath",
    "assert_reserve_invariant",
]

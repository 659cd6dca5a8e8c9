"""
tokenvest constants

Magic numbers shared by the token ledger, checked arithmetic and the vesting
engine, organized by category.
"""

from typing import Final

# =============================================================================
# TIME CONSTANTS (in seconds)
# =============================================================================

SECONDS_PER_DAY: Final[int] = 86400  # 60 * 60 * 24
SECONDS_PER_30_DAYS: Final[int] = 2592000  # 60 * 60 * 24 * 30

# =============================================================================
# TOKEN CONSTANTS
# =============================================================================

TOKEN_DECIMALS: Final[int] = 18
WEI_PER_TOKEN: Final[int] = 10**TOKEN_DECIMALS
MAX_TOKEN_DECIMALS: Final[int] = 18

ZERO_ADDRESS: Final[str] = "0x" + "0" * 40

# =============================================================================
# ARITHMETIC BOUNDS
# =============================================================================

MAX_UINT256: Final[int] = 2**256 - 1

"""
tokenvest - Token vesting engine

Time-gated release of a fixed token pool to one beneficiary on a
cliff-then-linear schedule.

Main Components:
- core.vesting: schedule store, unlock calculator, guarded release controller
- core.contracts: in-memory ERC20-style ledger used as the underlying asset
- core.defi: administrator access control and checked arithmetic
"""

__version__ = "0.1.0"
__author__ = "tokenvest Development Team"

__all__ = []

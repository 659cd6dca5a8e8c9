"""
tokenvest ledger contracts.

- ERC20: fungible token used as the underlying asset of vesting engines
"""

from .erc20 import ERC20Token, TokenEvent

__all__ = [
    "ERC20Token",
    "TokenEvent",
]

"""
tokenvest - Collaborator Protocol Interfaces

The vesting engine depends on these structural interfaces rather than on the
concrete token and access-control classes, which enables:
- Mock implementations in tests
- Dependency injection without class inheritance
- Swapping in another ledger without touching the engine
"""

from __future__ import annotations

from typing import Callable, Protocol, runtime_checkable

# Returns the current unix timestamp in whole seconds.
TimeProvider = Callable[[], int]


@runtime_checkable
class ILedger(Protocol):
    """
    Protocol for a fungible-value ledger.

    The engine queries its own balance once, at schedule creation, and calls
    transfer once per successful release.
    """

    @property
    def address(self) -> str:
        """Address identifying the underlying asset."""
        ...

    def balance_of(self, account: str) -> int:
        """
        Get the balance held by an account, in base units.

        Args:
            account: Address to check

        Returns:
            Balance (0 for unknown accounts)
        """
        ...

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        """
        Move `amount` base units from sender to recipient.

        Returns:
            True if the transfer happened. Implementations either return
            False or raise on failure; in both cases no balance may change.
        """
        ...


@runtime_checkable
class IAdministrator(Protocol):
    """Protocol answering whether a caller holds the administrator capability."""

    def is_administrator(self, caller: str) -> bool:
        ...

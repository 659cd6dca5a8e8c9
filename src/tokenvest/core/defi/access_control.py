"""
Administrator Access Control for vesting contracts.

Answers "is this caller the administrator?" for the vesting engine and keeps
an audit trail of administrator changes. Addresses are compared
case-insensitively.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..blockchain_exceptions import UnauthorizedError
from ..constants import ZERO_ADDRESS

logger = logging.getLogger(__name__)


@dataclass
class AdminAccessControl:
    """
    Single-administrator capability check.

    Usage:
        ac = AdminAccessControl(admin_address="0xadmin")
        ac.require_administrator(caller)
        perform_privileged_operation()
    """

    # Admin address (can create schedules and release on the beneficiary's behalf)
    admin_address: str = ""

    # Audit log
    admin_changes: List[Dict[str, Any]] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.admin_address = self.admin_address.lower()

    def is_administrator(self, caller: str) -> bool:
        """
        Check whether caller is the administrator.

        An unset administrator matches nobody.
        """
        if not self.admin_address or not caller:
            return False
        return caller.lower() == self.admin_address

    def require_administrator(self, caller: str) -> None:
        """
        Raise unless caller is the administrator.

        Raises:
            UnauthorizedError: If caller is not the administrator
        """
        if not self.is_administrator(caller):
            logger.warning(
                "Access denied: caller is not administrator",
                extra={
                    "event": "access_control.not_admin",
                    "caller": (caller or "")[:10],
                },
            )
            raise UnauthorizedError(
                f"Unauthorized: caller {(caller or '')[:10]} is not the administrator",
                details={"caller": caller},
            )

    def transfer_administration(self, caller: str, new_admin: str) -> bool:
        """
        Hand the administrator capability to another address.

        Args:
            caller: Current administrator
            new_admin: Address receiving the capability

        Returns:
            True if transferred

        Raises:
            UnauthorizedError: If caller is not the administrator or new_admin is empty
        """
        self.require_administrator(caller)

        new_norm = (new_admin or "").lower()
        if not new_norm or new_norm == ZERO_ADDRESS:
            raise UnauthorizedError("Unauthorized: new administrator is zero address")

        previous = self.admin_address
        self.admin_address = new_norm

        self.admin_changes.append({
            "action": "transfer",
            "previous": previous,
            "new": new_norm,
            "timestamp": time.time(),
        })

        logger.info(
            "Administrator transferred",
            extra={
                "event": "access_control.admin_transferred",
                "previous": previous[:10],
                "new": new_norm[:10],
            },
        )

        return True

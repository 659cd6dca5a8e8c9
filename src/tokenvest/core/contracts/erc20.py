"""
ERC20-style Token Ledger.

In-memory fungible token that vesting engines hold and pay out from:
- Balance queries and transfers between addresses
- Owner-only minting to seed grants
- Owner-controlled pause (every transfer fails while paused)
- Receive hooks, so a recipient can run code when it is credited

Transfers are atomic: if a receive hook raises, balances and the event log
are put back exactly as they were and the caller gets a LedgerError.
"""

from __future__ import annotations

import hashlib
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple

from ..blockchain_exceptions import LedgerError
from ..constants import MAX_UINT256, ZERO_ADDRESS

logger = logging.getLogger(__name__)

# Called as hook(token, sender, amount) after the recipient has been credited.
ReceiveHook = Callable[["ERC20Token", str, int], None]


@dataclass
class TokenEvent:
    """A Transfer notification; mints come from the zero address."""

    event_type: str
    from_address: str
    to_address: str
    value: int
    timestamp: float = field(default_factory=time.time)


@dataclass
class ERC20Token:
    """
    Fungible token ledger keyed by lowercase address.

    Usage:
        token = ERC20Token(name="Grant Token", symbol="GT", owner="0xadmin")
        token.mint("0xadmin", "0xadmin", 1_000)
        token.transfer("0xadmin", vesting.address, 100)
    """

    name: str
    symbol: str
    decimals: int = 18
    total_supply: int = 0
    address: str = ""
    owner: str = ""  # may mint and pause

    balances: Dict[str, int] = field(default_factory=dict)
    events: list[TokenEvent] = field(default_factory=list)
    paused: bool = False
    receive_hooks: Dict[str, ReceiveHook] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        if not self.address:
            seed = f"erc20:{self.name}:{self.symbol}:{time.time_ns()}".encode()
            self.address = f"0x{hashlib.sha3_256(seed).digest()[-20:].hex()}"
        self.address = self.address.lower()
        self.owner = self.owner.lower()

    def balance_of(self, account: str) -> int:
        """Balance of `account` in base units (0 if never credited)."""
        return self.balances.get(account.lower(), 0)

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        """
        Move `amount` base units from sender to recipient.

        The recipient's receive hook, if any, runs after the credit. An
        exception from the hook undoes the whole transfer.

        Returns:
            True on success

        Raises:
            LedgerError: Paused token, zero recipient, bad amount, short
                balance, or a rejecting receive hook
        """
        if self.paused:
            raise LedgerError("ERC20: token is paused")
        src = sender.lower()
        dst = self._checked_recipient(recipient)
        self._check_amount(amount)

        available = self.balances.get(src, 0)
        if available < amount:
            raise LedgerError(
                f"ERC20: transfer amount exceeds balance ({amount} > {available})",
                details={"sender": src, "balance": available, "amount": amount},
            )

        saved = self._save(src, dst)
        self.balances[src] = available - amount
        self.balances[dst] = self.balances.get(dst, 0) + amount
        self.events.append(TokenEvent("Transfer", src, dst, amount))

        hook = self.receive_hooks.get(dst)
        if hook is not None:
            try:
                hook(self, src, amount)
            except Exception as exc:
                self._load(saved)
                logger.warning(
                    "Receive hook rejected transfer, balances restored",
                    extra={
                        "event": "erc20.hook_rejected",
                        "token": self.symbol,
                        "to": dst[:10],
                        "error_type": type(exc).__name__,
                    },
                )
                raise LedgerError(
                    f"ERC20: recipient rejected transfer ({type(exc).__name__}: {exc})",
                    details={"recipient": dst, "amount": amount},
                ) from exc

        logger.debug(
            "ERC20 transfer",
            extra={
                "event": "erc20.transfer",
                "token": self.symbol,
                "from": src[:10],
                "to": dst[:10],
                "amount": amount,
            },
        )
        return True

    def register_receive_hook(self, account: str, hook: ReceiveHook) -> None:
        """Run `hook` every time `account` is credited."""
        self.receive_hooks[account.lower()] = hook

    def remove_receive_hook(self, account: str) -> None:
        self.receive_hooks.pop(account.lower(), None)

    def mint(self, minter: str, to: str, amount: int) -> bool:
        """
        Create `amount` new base units for `to` (owner only).

        Raises:
            LedgerError: Paused, caller not owner, zero recipient, bad amount,
                or supply beyond 256 bits
        """
        if self.paused:
            raise LedgerError("ERC20: token is paused")
        self._only_owner(minter)
        dst = self._checked_recipient(to)
        self._check_amount(amount)
        if self.total_supply + amount > MAX_UINT256:
            raise LedgerError("ERC20: total supply exceeds uint256")

        self.total_supply += amount
        self.balances[dst] = self.balances.get(dst, 0) + amount
        self.events.append(TokenEvent("Transfer", ZERO_ADDRESS, dst, amount))

        logger.info(
            "ERC20 mint",
            extra={
                "event": "erc20.mint",
                "token": self.symbol,
                "to": dst[:10],
                "amount": amount,
                "total_supply": self.total_supply,
            },
        )
        return True

    def pause(self, caller: str) -> bool:
        self._only_owner(caller)
        self.paused = True
        return True

    def unpause(self, caller: str) -> bool:
        self._only_owner(caller)
        self.paused = False
        return True

    # ==================== Helpers ====================

    def _checked_recipient(self, recipient: str) -> str:
        dst = (recipient or "").lower()
        if not dst or dst == ZERO_ADDRESS:
            raise LedgerError("ERC20: recipient is zero address")
        return dst

    @staticmethod
    def _check_amount(amount: Any) -> None:
        if not isinstance(amount, int) or isinstance(amount, bool):
            raise LedgerError("ERC20: amount must be an integer")
        if not 0 <= amount <= MAX_UINT256:
            raise LedgerError(f"ERC20: amount {amount} outside [0, 2**256 - 1]")

    def _only_owner(self, caller: str) -> None:
        if (caller or "").lower() != self.owner:
            raise LedgerError("ERC20: caller is not owner")

    def _save(self, *accounts: str) -> Tuple[Dict[str, Optional[int]], int]:
        return {a: self.balances.get(a) for a in accounts}, len(self.events)

    def _load(self, saved: Tuple[Dict[str, Optional[int]], int]) -> None:
        balances, event_count = saved
        for account, balance in balances.items():
            if balance is None:
                self.balances.pop(account, None)
            else:
                self.balances[account] = balance
        del self.events[event_count:]

    # ==================== Serialization ====================

    def to_dict(self) -> Dict[str, Any]:
        """Snapshot metadata and balances (hooks are not serialized)."""
        return {
            "name": self.name,
            "symbol": self.symbol,
            "decimals": self.decimals,
            "total_supply": self.total_supply,
            "address": self.address,
            "owner": self.owner,
            "balances": dict(self.balances),
            "paused": self.paused,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ERC20Token":
        return cls(
            name=data["name"],
            symbol=data["symbol"],
            decimals=data.get("decimals", 18),
            total_supply=data.get("total_supply", 0),
            address=data.get("address", ""),
            owner=data.get("owner", ""),
            balances=dict(data.get("balances", {})),
            paused=data.get("paused", False),
        )

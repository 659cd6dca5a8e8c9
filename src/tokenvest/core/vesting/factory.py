"""
Factory for deploying vesting engines.

One engine holds one grant; a sponsor with several grants deploys one engine
per grant through this factory and looks them up by address.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Any, Dict, List

from ..protocols import IAdministrator, ILedger, TimeProvider
from .engine import TokenVesting

logger = logging.getLogger(__name__)


class VestingFactory:
    """Deploys TokenVesting engines and keeps a registry of them."""

    def __init__(self, address: str = "0xvestingfactory") -> None:
        self.address = address.lower()
        self.deployed: Dict[str, TokenVesting] = {}
        self._nonce = 0

    def deploy(
        self,
        token: ILedger,
        access_control: IAdministrator,
        time_provider: TimeProvider | None = None,
    ) -> TokenVesting:
        """
        Deploy a new vesting engine for `token`.

        Engine addresses derive from the factory address, the token and a
        deployment nonce, so they are unique and reproducible.

        Returns:
            The deployed engine (unfunded, no schedule yet)
        """
        self._nonce += 1
        addr_hash = hashlib.sha3_256(
            f"{self.address}:{token.address.lower()}:{self._nonce}".encode()
        ).digest()
        engine = TokenVesting(
            token=token,
            access_control=access_control,
            address=f"0x{addr_hash[-20:].hex()}",
            time_provider=time_provider,
        )
        self.deployed[engine.address] = engine

        logger.info(
            "Vesting engine deployed",
            extra={
                "event": "vesting_factory.deployed",
                "engine": engine.address[:10],
                "token": token.address[:10],
                "nonce": self._nonce,
            },
        )
        return engine

    def get_vesting(self, address: str) -> TokenVesting | None:
        """Get a deployed engine by address."""
        return self.deployed.get(address.lower())

    def list_vestings(self) -> List[Dict[str, Any]]:
        """List deployed engines with their grant status."""
        vestings = []
        for address, engine in self.deployed.items():
            schedule = engine.get_schedule()
            vestings.append({
                "address": address,
                "token": engine.get_underlying_asset(),
                "initialized": schedule.initialized,
                "beneficiary": schedule.beneficiary,
                "amount_total": schedule.amount_total,
                "released": schedule.released,
            })
        return vestings

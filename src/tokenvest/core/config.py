"""
tokenvest configuration

Settings come from TOKENVEST_* environment variables. load_config() reads and
validates them; tests pass an explicit mapping instead of mutating os.environ.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

from tokenvest.core.blockchain_exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class NetworkType(Enum):
    TESTNET = "testnet"
    MAINNET = "mainnet"


_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class VestingConfig:
    """Validated runtime settings."""

    network: NetworkType = NetworkType.TESTNET
    environment: str = "development"
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @property
    def is_mainnet(self) -> bool:
        return self.network is NetworkType.MAINNET


def _parse_network(raw: str) -> NetworkType:
    try:
        return NetworkType(raw.strip().lower())
    except ValueError as exc:
        raise ConfigurationError(
            f"TOKENVEST_NETWORK must be one of "
            f"{[n.value for n in NetworkType]}, got {raw!r}"
        ) from exc


def load_config(env: Optional[Mapping[str, str]] = None) -> VestingConfig:
    """
    Build a validated VestingConfig from environment variables.

    Args:
        env: Mapping to read from (defaults to os.environ)

    Returns:
        VestingConfig

    Raises:
        ConfigurationError: If any value is invalid
    """
    source = os.environ if env is None else env

    network = _parse_network(source.get("TOKENVEST_NETWORK", "testnet"))
    log_level = source.get("TOKENVEST_LOG_LEVEL", "INFO").strip().upper()
    if log_level not in _VALID_LOG_LEVELS:
        raise ConfigurationError(
            f"TOKENVEST_LOG_LEVEL must be one of {_VALID_LOG_LEVELS}, got {log_level!r}"
        )

    environment = source.get("TOKENVEST_ENVIRONMENT", "").strip()
    if not environment:
        environment = "production" if network is NetworkType.MAINNET else "development"

    config = VestingConfig(
        network=network,
        environment=environment,
        log_level=log_level,
        log_file=source.get("TOKENVEST_LOG_FILE", "").strip() or None,
    )
    logger.debug(
        "Configuration loaded",
        extra={
            "event": "config.loaded",
            "network": config.network.value,
            "environment": config.environment,
        },
    )
    return config

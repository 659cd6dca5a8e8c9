"""
Structured JSON logging for tokenvest.

Every module logs through `logging.getLogger(__name__)` and passes context in
`extra={"event": "vesting.released", ...}`. Configuring the package logger
once makes all of those records come out as one JSON object per line, tagged
with the deployment environment and the emitting code location.

Usage:
    from tokenvest.core.logging_config import setup_logging

    setup_logging(level="DEBUG", environment="staging")
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from pythonjsonlogger import jsonlogger

if TYPE_CHECKING:
    from tokenvest.core.config import VestingConfig

PACKAGE_LOGGER = "tokenvest"
DEFAULT_MAX_BYTES = 50 * 1024 * 1024
DEFAULT_BACKUP_COUNT = 5


class VestingJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter adding UTC timestamp, environment, service and source."""

    def __init__(self, environment: str = "production", service: str = PACKAGE_LOGGER):
        super().__init__(fmt="%(timestamp)s %(level)s %(name)s %(message)s")
        self.environment = environment
        self.service = service

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        if not log_record.get("timestamp"):
            stamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
            log_record["timestamp"] = stamp.isoformat().replace("+00:00", "Z")
        log_record["level"] = record.levelname.lower()
        log_record["environment"] = self.environment
        log_record["service"] = self.service
        log_record["source"] = {
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }


def _build_handlers(
    log_file: Optional[str],
    enable_console: bool,
    stream: Any,
    max_bytes: int,
    backup_count: int,
) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []
    if enable_console:
        handlers.append(logging.StreamHandler(stream or sys.stdout))
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                log_file, maxBytes=max_bytes, backupCount=backup_count
            )
        )
    return handlers


def setup_logging(
    name: str = PACKAGE_LOGGER,
    log_file: Optional[str] = None,
    level: str = "INFO",
    environment: str = "production",
    enable_console: bool = True,
    stream: Any = None,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
) -> logging.Logger:
    """
    Attach JSON handlers to logger `name`, replacing any it already had.

    Configuring the package logger covers every `tokenvest.*` module logger.

    Args:
        name: Logger to configure
        log_file: Optional path of a size-rotated JSON log file
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        environment: Value of the `environment` field on every record
        enable_console: Also write to `stream`
        stream: Console stream (stdout by default)
        max_bytes: Rotation threshold of the log file
        backup_count: Rotated files kept

    Returns:
        The configured logger
    """
    numeric_level = getattr(logging, level.upper())
    logger = logging.getLogger(name)
    logger.setLevel(numeric_level)

    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    formatter = VestingJsonFormatter(environment=environment, service=name.split(".")[0])
    try:
        handlers = _build_handlers(log_file, enable_console, stream, max_bytes, backup_count)
    except OSError as exc:
        # Unwritable log file: keep console logging only
        handlers = _build_handlers(None, enable_console, stream, max_bytes, backup_count)
        failure = exc
    else:
        failure = None

    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    if failure is not None:
        logger.warning(
            "Could not open log file %s: %s",
            log_file,
            failure,
            extra={"event": "logging.file_handler_failed"},
        )
    return logger


def setup_logging_from_config(config: "VestingConfig", **kwargs: Any) -> logging.Logger:
    """Configure the package logger from validated settings."""
    return setup_logging(
        name=PACKAGE_LOGGER,
        log_file=config.log_file,
        level=config.log_level,
        environment=config.environment,
        **kwargs,
    )

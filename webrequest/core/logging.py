# Centralized logging configuration for the webrequest package.

import logging
import sys
from datetime import UTC, datetime
from typing import Any, Dict, Optional, TextIO
from uuid import UUID

from webrequest.settings import Settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Used when neither the caller nor LOG_LEVEL names a level
DEFAULT_LOG_LEVEL = "INFO"

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Transport libraries whose per-connection chatter drowns out transaction logs
NOISY_LIBRARIES = ["httpx", "httpcore"]

PACKAGE_LOGGER_NAME = "webrequest"
TRANSACTION_LOGGER_NAME = "webrequest.transaction"

_console_handler: Optional[logging.Handler] = None


def setup_logging(level: Optional[str] = None, stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Sends webrequest log records to a console handler.

    Only the ``webrequest`` logger is configured, so an application's own
    root logger setup is left alone. Calling this again replaces the handler
    installed by the previous call.

    Args:
        level: Log level name. Falls back to the LOG_LEVEL environment
            variable, then to INFO. An unknown name also falls back to INFO.
        stream: Where records are written. Defaults to stderr.

    Returns:
        The configured ``webrequest`` logger.
    """
    global _console_handler

    if level is not None:
        log_level_name = level.upper()
    else:
        log_level_name = Settings().get_log_level(default=DEFAULT_LOG_LEVEL)

    if log_level_name not in VALID_LOG_LEVELS:
        print(
            f"WARNING: Invalid log level '{log_level_name}'. "
            f"Defaulting to {DEFAULT_LOG_LEVEL}. "
            f"Valid levels are: {', '.join(VALID_LOG_LEVELS)}",
            file=sys.stderr,
        )
        log_level_name = DEFAULT_LOG_LEVEL

    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.setLevel(log_level_name)

    if _console_handler is not None:
        package_logger.removeHandler(_console_handler)
    _console_handler = logging.StreamHandler(stream or sys.stderr)
    _console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(_console_handler)
    # Records stop here instead of also reaching the root logger's handlers
    package_logger.propagate = False

    for lib_name in NOISY_LIBRARIES:
        logging.getLogger(lib_name).setLevel(logging.WARNING)

    package_logger.debug(f"Logging configured with level {log_level_name}.")
    return package_logger


def log_transaction_state(transaction_id: UUID, stage: str, details: Dict[str, Any]) -> None:
    """Log transaction state at the stages of request processing."""
    logger = logging.getLogger(TRANSACTION_LOGGER_NAME)
    logger.debug(
        f"[{transaction_id}] Transaction state at {stage}",
        extra={"stage": stage, "timestamp": datetime.now(UTC).isoformat(), **details},
    )

"""
Logging utilities for the PrepChef data layer.

Library modules use plain ``logging.getLogger(__name__)`` and inherit the
root configuration set by ``configure_logging``. Entry points (routes,
scripts) may use ``get_logger`` for a logger that works before the root
logger is configured.

CRITICAL SECURITY RULES:
- NEVER log Supabase Auth tokens, passwords, or the anon key
- NEVER log full row payloads (prep notes and profiles may contain PII)

Acceptable logging:
- High-level events (e.g., "Connection test successful")
- Non-sensitive metadata (e.g., "table='prep_lists'", "user_id=...")
- Error codes and sanitized error messages
"""

import logging
from typing import Optional, Union

from prepchef.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(level: Union[int, str, None]) -> int:
    if level is None:
        level = settings.LOG_LEVEL
    if isinstance(level, str):
        # getLevelName maps registered names back to their number
        resolved = logging.getLevelName(level.strip().upper())
        return resolved if isinstance(resolved, int) else logging.INFO
    return level


def configure_logging(level: Union[int, str, None] = None) -> None:
    """Configure the root logger once for the process (LOG_LEVEL by default)."""
    logging.basicConfig(level=_resolve_level(level), format=LOG_FORMAT, datefmt=DATE_FORMAT)


def get_logger(name: str, level: Union[int, str, None] = None) -> logging.Logger:
    """
    Get a logger with its own handler.

    Args:
        name: Module name (typically __name__)
        level: Logging level name or number (defaults to LOG_LEVEL)

    Returns:
        Configured logger instance

    Usage:
        >>> from prepchef.utils.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("Diagnostics requested")
    """
    logger = logging.getLogger(name)
    logger.setLevel(_resolve_level(level))

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
        # The handler above already emits; don't repeat through the root logger
        logger.propagate = False

    return logger

#!/usr/bin/env python3
"""
Environment variable helpers.

Values are cleaned of stray whitespace and CRLF line endings, which show up
when a .env file is edited on Windows and read inside a Linux container.
"""

import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)


def getenv_clean(key: str, default: str = None) -> Optional[str]:
    """Get an environment variable with whitespace and line endings removed.

    Args:
        key: Environment variable name
        default: Value returned when the variable is not set

    Returns:
        Cleaned value, or default if not set

    Example:
        >>> # .env file has: TCX_DATA_DIR=/data/models\r\n
        >>> getenv_clean("TCX_DATA_DIR", ".")
        '/data/models'
    """
    raw_value = os.getenv(key, default)

    if raw_value is None:
        return None

    cleaned = raw_value.strip()

    if raw_value != cleaned:
        logger.warning(
            f"Environment variable {key} had trailing whitespace/line endings: "
            f"raw={repr(raw_value)}, cleaned={repr(cleaned)}"
        )

    return cleaned


def getenv_bool(key: str, default: bool = False) -> bool:
    """Get an environment variable as a boolean.

    "true", "1", "yes" and "on" are True; "false", "0", "no", "off" and the
    empty string are False. Anything else logs a warning and yields default.
    """
    raw_value = getenv_clean(key, None)

    if raw_value is None:
        return default

    lowered = raw_value.lower()
    if lowered in ("true", "1", "yes", "on"):
        return True
    elif lowered in ("false", "0", "no", "off", ""):
        return False
    else:
        logger.warning(
            f"Environment variable {key} has unexpected boolean value: {repr(raw_value)}. "
            f"Using default: {default}"
        )
        return default


def getenv_int(key: str, default: int) -> int:
    """Get an environment variable as an integer, falling back to default when invalid."""
    raw_value = getenv_clean(key, None)

    if raw_value is None or raw_value == "":
        return default

    try:
        return int(raw_value)
    except ValueError:
        logger.warning(
            f"Environment variable {key} is not a valid integer: {repr(raw_value)}. "
            f"Using default: {default}"
        )
        return default

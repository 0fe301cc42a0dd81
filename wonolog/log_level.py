"""Minimum log level resolution for the default handler."""

import logging
import os
from typing import Any, Mapping, Optional

logger = logging.getLogger("wonolog.log-level")

ENV_MIN_LEVEL = "WONOLOG_DEFAULT_MIN_LEVEL"
DEFAULT_MIN_LEVEL = logging.WARNING

# PSR-3 severities that have no stdlib counterpart
NOTICE = 25
ALERT = 45
EMERGENCY = 50

_EXTRA_LEVELS = {
    "NOTICE": NOTICE,
    "ALERT": ALERT,
    "EMERGENCY": EMERGENCY,
}


def parse_level(value: Any) -> Optional[int]:
    """
    Convert an int, numeric string or level name into a level number.

    Returns None when the value is not recognised.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if not isinstance(value, str) or not value.strip():
        return None

    name = value.strip().upper()
    if name.isdigit():
        return int(name)
    if name in _EXTRA_LEVELS:
        return _EXTRA_LEVELS[name]

    level = logging.getLevelName(name)
    return level if isinstance(level, int) else None


def resolve_min_level(
    explicit: Any = None,
    environ: Optional[Mapping[str, str]] = None,
) -> int:
    """
    Pick the minimum level for the default handler.

    Order: explicit value, then $WONOLOG_DEFAULT_MIN_LEVEL, then WARNING.
    """
    environ = environ if environ is not None else os.environ

    for source, value in (("explicit", explicit), (ENV_MIN_LEVEL, environ.get(ENV_MIN_LEVEL))):
        if value is None or value == "":
            continue
        level = parse_level(value)
        if level is not None:
            return level
        logger.warning(f"Invalid {source} log level {value!r}, ignoring it")

    return DEFAULT_MIN_LEVEL

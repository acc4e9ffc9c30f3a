"""Environment variable resolution utilities."""

from __future__ import annotations

import logging
import os

_LOGGER = logging.getLogger(__name__)

_TRUE_VALUES = frozenset({"1", "true", "yes", "y"})
_FALSE_VALUES = frozenset({"0", "false", "no", "n"})


def env_text(name: str, *, default: str) -> str:
    """Return a stripped environment variable string.

    Parameters
    ----------
    name
        Environment variable name.
    default
        Value returned when the variable is unset or blank.

    Returns
    -------
    str
        Stripped value, or the default when missing.
    """
    raw = os.environ.get(name)
    if raw is None:
        return default
    value = raw.strip()
    return value or default


def env_bool(name: str, *, default: bool) -> bool:
    """Parse environment variable as boolean.

    Unrecognized values are logged as a warning and fall back to the default.

    Parameters
    ----------
    name
        Environment variable name.
    default
        Value returned when the variable is unset or invalid.

    Returns
    -------
    bool
        Parsed boolean or the default.
    """
    raw = os.environ.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    _LOGGER.warning("Invalid boolean for %s: %r", name, raw)
    return default


__all__ = ["env_bool", "env_text"]

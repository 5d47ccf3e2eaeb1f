"""Environment helper utilities."""

from __future__ import annotations

import os
from typing import Optional


_FALSE_VALUES = {"0", "false", "no", "off"}


def get_bool_env(name: str, *, default: bool = False) -> bool:
    """Return True/False for an environment flag."""
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if not value:
        return default
    return value not in _FALSE_VALUES


def get_int_env(name: str, *, default: Optional[int] = None) -> Optional[int]:
    """
    Read an integer from the environment.

    Empty values fall back to ``default``; anything else that does not parse
    raises ``ValueError`` naming the variable.
    """
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc

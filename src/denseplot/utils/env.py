"""Environment flags and optional-package capability checks.

IS_NOT_BINDER gates the memory-heavy examples (10 million points and up);
hosted notebook sessions leave it unset.
"""

from __future__ import annotations

import importlib.util
import os
from typing import Optional

IS_NOT_BINDER_ENV = "IS_NOT_BINDER"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def parse_bool(raw: object) -> Optional[bool]:
    """Parse a bool or a truthy/falsy string; None if it is neither."""
    if isinstance(raw, bool):
        return raw
    if not isinstance(raw, str):
        return None
    v = raw.strip().lower()
    if v in _TRUTHY:
        return True
    if v in _FALSY:
        return False
    return None


def env_bool(name: str, default: bool) -> bool:
    """Parse env var as bool; if unset/invalid returns default."""
    parsed = parse_bool(os.getenv(name))
    return default if parsed is None else parsed


def env_int(name: str, default: int) -> int:
    """Parse env var as int; if unset/invalid returns default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def is_not_binder(default: bool = False) -> bool:
    """True when memory-heavy examples are allowed to run."""
    return env_bool(IS_NOT_BINDER_ENV, default)


def has_package(name: str) -> bool:
    """Return True if `name` is importable, without importing it."""
    try:
        return importlib.util.find_spec(name) is not None
    except (ImportError, ValueError):
        return False

"""Utility functions for denseplot."""

from .env import env_bool, env_int, has_package, is_not_binder, parse_bool
from .logging import configure_logging, get_logger, log_elapsed

__all__ = [
    "configure_logging",
    "env_bool",
    "env_int",
    "get_logger",
    "has_package",
    "is_not_binder",
    "log_elapsed",
    "parse_bool",
]

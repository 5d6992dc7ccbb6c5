"""
Logging for denseplot.

Library modules get a module logger with ``get_logger(__name__)`` and never
configure handlers; the package logger carries a NullHandler (see
``denseplot/__init__.py``). The notebook and the gallery app call
``configure_logging()`` once to print records to stderr. Nothing here touches
the root logger and no log files are written.

The memory-heavy examples bin tens of millions of points, so the slow steps
(binning, density estimates, gallery figures) are wrapped in ``log_elapsed``
to record how long each one took:

    ```python
    from denseplot.utils.logging import get_logger, log_elapsed
    logger = get_logger(__name__)

    with log_elapsed(logger, "bin 10M points"):
        grid = bin_points(x, y, bins=400)
    ```

Set ``DENSEPLOT_LOG_LEVEL=DEBUG`` to see per-figure timings in the gallery.
"""

from __future__ import annotations

import logging
import os
import sys
import time
from contextlib import contextmanager
from typing import Iterator, Optional, Union

# Default format for denseplot logs
DEFAULT_FMT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d:%(funcName)s: %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"

LOGGER_NAME = "denseplot"


def configure_logging(
    level: Optional[Union[str, int]] = None,
    *,
    fmt: Optional[str] = None,
    datefmt: Optional[str] = None,
    force: bool = False,
) -> None:
    """
    Configure logging for the denseplot logger only (never root).

    Use this in notebooks, scripts and the gallery app to enable log output.

    Parameters
    ----------
    level:
        Logging level (e.g. "DEBUG", "INFO"). Defaults to DENSEPLOT_LOG_LEVEL
        env var, or "INFO" if unset.
    fmt:
        Log message format. Defaults to a standard format.
    datefmt:
        Date format. Defaults to "%Y-%m-%d %H:%M:%S".
    force:
        If True, remove existing handlers before adding new ones (allows
        reconfiguration). If False, skip if handler already present.
    """
    if level is None:
        level = os.environ.get("DENSEPLOT_LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    formatter = logging.Formatter(fmt=fmt or DEFAULT_FMT, datefmt=datefmt or DEFAULT_DATEFMT)

    if force:
        for h in logger.handlers[:]:
            h.close()
            logger.removeHandler(h)
    else:
        # Skip if we already have a stderr StreamHandler (e.g. from previous configure_logging)
        for h in logger.handlers:
            if isinstance(h, logging.StreamHandler) and h.stream is sys.stderr:
                return

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(formatter)
    logger.addHandler(console)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger by name.

    If name is None, returns the 'denseplot' logger.
    Otherwise, returns logging.getLogger(name).
    """
    if name is None:
        name = LOGGER_NAME
    return logging.getLogger(name)


@contextmanager
def log_elapsed(
    logger: logging.Logger,
    what: str,
    *,
    level: int = logging.DEBUG,
) -> Iterator[None]:
    """
    Log the wall time of the enclosed block as "<what> took 0.123s".

    The record is emitted even when the block raises, with "failed after"
    instead of "took"; the exception propagates.
    """
    start = time.perf_counter()
    try:
        yield
    except BaseException:
        logger.log(level, f"{what} failed after {time.perf_counter() - start:.3f}s")
        raise
    logger.log(level, f"{what} took {time.perf_counter() - start:.3f}s")

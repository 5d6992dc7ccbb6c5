"""Unit tests for denseplot logging helpers."""

from __future__ import annotations

import logging
import sys

import pytest

import denseplot  # noqa: F401  (installs the NullHandler)
from denseplot.utils.logging import configure_logging, get_logger, log_elapsed


@pytest.fixture
def clean_logger():
    logger = logging.getLogger("denseplot")
    saved_handlers, saved_level = logger.handlers[:], logger.level
    yield logger
    logger.handlers[:] = saved_handlers
    logger.setLevel(saved_level)


def _stderr_handlers(logger):
    return [h for h in logger.handlers if isinstance(h, logging.StreamHandler) and h.stream is sys.stderr]


def test_get_logger_default_name():
    assert get_logger().name == "denseplot"
    assert get_logger("denseplot.points").name == "denseplot.points"


def test_package_logger_has_null_handler():
    assert any(isinstance(h, logging.NullHandler) for h in logging.getLogger("denseplot").handlers)


def test_configure_logging_is_idempotent(clean_logger):
    configure_logging(level="DEBUG")
    configure_logging(level="DEBUG")
    assert len(_stderr_handlers(clean_logger)) == 1
    assert clean_logger.level == logging.DEBUG


def test_configure_logging_env_level(clean_logger, monkeypatch):
    monkeypatch.setenv("DENSEPLOT_LOG_LEVEL", "warning")
    configure_logging(force=True)
    assert clean_logger.level == logging.WARNING
    assert len(_stderr_handlers(clean_logger)) == 1


def test_configure_logging_never_touches_root(clean_logger):
    root_handlers = logging.getLogger().handlers[:]
    configure_logging(level="INFO", force=True)
    assert logging.getLogger().handlers == root_handlers


def test_log_elapsed_records_duration(caplog):
    logger = get_logger("denseplot.tests")
    with caplog.at_level(logging.DEBUG, logger="denseplot"):
        with log_elapsed(logger, "binning"):
            pass
    assert "binning took" in caplog.text


def test_log_elapsed_reports_failure_and_reraises(caplog):
    logger = get_logger("denseplot.tests")
    with caplog.at_level(logging.INFO, logger="denseplot"):
        with pytest.raises(RuntimeError):
            with log_elapsed(logger, "kde", level=logging.INFO):
                raise RuntimeError("boom")
    assert "kde failed after" in caplog.text

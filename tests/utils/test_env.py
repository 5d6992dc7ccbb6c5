"""Unit tests for env helpers and capability checks."""

from __future__ import annotations

import pytest

from denseplot.utils.env import env_bool, env_int, has_package, is_not_binder, parse_bool


@pytest.mark.parametrize("val", ["1", "true", "True", "yes", "on", " ON "])
def test_env_bool_truthy_values(val, monkeypatch):
    monkeypatch.setenv("_TEST_DENSEPLOT_BOOL", val)
    assert env_bool("_TEST_DENSEPLOT_BOOL", False) is True


@pytest.mark.parametrize("val", ["0", "false", "False", "no", "off"])
def test_env_bool_falsy_values(val, monkeypatch):
    monkeypatch.setenv("_TEST_DENSEPLOT_BOOL", val)
    assert env_bool("_TEST_DENSEPLOT_BOOL", True) is False


def test_env_bool_unset_or_invalid_returns_default(monkeypatch):
    monkeypatch.delenv("_TEST_DENSEPLOT_BOOL", raising=False)
    assert env_bool("_TEST_DENSEPLOT_BOOL", True) is True
    monkeypatch.setenv("_TEST_DENSEPLOT_BOOL", "maybe")
    assert env_bool("_TEST_DENSEPLOT_BOOL", False) is False


def test_env_int(monkeypatch):
    monkeypatch.delenv("_TEST_DENSEPLOT_INT", raising=False)
    assert env_int("_TEST_DENSEPLOT_INT", 42) == 42
    monkeypatch.setenv("_TEST_DENSEPLOT_INT", "123")
    assert env_int("_TEST_DENSEPLOT_INT", 0) == 123
    monkeypatch.setenv("_TEST_DENSEPLOT_INT", "not_a_number")
    assert env_int("_TEST_DENSEPLOT_INT", 99) == 99


def test_is_not_binder(monkeypatch):
    monkeypatch.delenv("IS_NOT_BINDER", raising=False)
    assert is_not_binder() is False
    monkeypatch.setenv("IS_NOT_BINDER", "1")
    assert is_not_binder() is True


def test_has_package():
    assert has_package("json") is True
    assert has_package("numpy") is True
    assert has_package("not_a_real_package_xyz") is False
    assert has_package("not_a_real_package_xyz.sub") is False


def test_parse_bool():
    assert parse_bool(True) is True
    assert parse_bool(" No ") is False
    assert parse_bool("1") is True
    assert parse_bool("maybe") is None
    assert parse_bool(1) is None
    assert parse_bool(None) is None

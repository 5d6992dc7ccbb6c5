"""Unit tests for the gallery app entry point."""

from __future__ import annotations

import pytest

pytestmark = pytest.mark.requires_nicegui

gallery_app = pytest.importorskip("denseplot.gallery.gallery_app")


@pytest.fixture
def run_calls(monkeypatch):
    calls: list[dict] = []
    monkeypatch.setattr(gallery_app.ui, "run", lambda **kwargs: calls.append(kwargs))
    return calls


def test_main_web_mode_defaults(run_calls, monkeypatch):
    for key in ("PORT", "HOST", "DENSEPLOT_GUI_NATIVE", "DENSEPLOT_GUI_RELOAD"):
        monkeypatch.delenv(key, raising=False)
    gallery_app.main()
    assert run_calls == [{
        "host": "0.0.0.0",
        "port": 8080,
        "reload": False,
        "native": False,
        "title": gallery_app.TITLE,
    }]


def test_main_reads_env(run_calls, monkeypatch):
    monkeypatch.setenv("PORT", "9001")
    monkeypatch.setenv("HOST", "127.0.0.1")
    gallery_app.main(reload=False, native_bool=False)
    assert run_calls[0]["port"] == 9001
    assert run_calls[0]["host"] == "127.0.0.1"

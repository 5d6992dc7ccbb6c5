"""Unit tests for the gallery example sequence and build_gallery()."""

from __future__ import annotations

import pytest

import denseplot.gallery.entries as entries_mod
from denseplot.gallery.entries import (
    GalleryEntry,
    apply_config,
    build_gallery,
    default_entries,
    skip_reason,
)
from denseplot.gallery.gallery_config import GalleryConfigData
from denseplot.points.plot_state import PlotState, PlotType


@pytest.fixture
def small_config():
    return GalleryConfigData(
        n_points=150,
        n_points_large=300,
        bins=20,
        contour_resolution=15,
        max_kde_points=400,
    )


@pytest.fixture
def no_datashader(monkeypatch):
    monkeypatch.setattr(entries_mod, "has_package", lambda name: False)


def test_default_entries_keys_unique():
    keys = [e.key for e in default_entries()]
    assert len(keys) == len(set(keys))
    assert keys[0] == "scatter"
    assert {e.state.plot_type for e in default_entries()} == set(PlotType)


def test_large_entries_skipped_without_flag(small_config, no_datashader):
    result = build_gallery(small_config)
    rendered = {r.entry.key for r in result.rendered}
    skipped = {s.entry.key: s.reason for s in result.skipped}
    assert "binned_log_large" in skipped
    assert "IS_NOT_BINDER" in skipped["binned_log_large"]
    assert "datashader" in skipped["rasterized"]
    assert {"scatter", "alpha_scatter", "binned_log", "binned_mean", "binned_sample",
            "binned_first_shuffled", "density_contour", "faceted_binned"} <= rendered
    assert len(result.rendered) + len(result.skipped) == len(default_entries())


def test_large_entries_run_with_flag(small_config, no_datashader):
    small_config.is_not_binder = True
    result = build_gallery(small_config)
    rendered = {r.entry.key for r in result.rendered}
    assert "binned_log_large" in rendered
    assert "rasterized_large" not in rendered


def test_rendered_order_follows_entries(small_config, no_datashader):
    result = build_gallery(small_config)
    keys = [e.key for e in default_entries()]
    rendered = [r.entry.key for r in result.rendered]
    assert rendered == [k for k in keys if k in rendered]


def test_failing_entry_does_not_stop_the_rest(small_config):
    entries = [
        GalleryEntry("bad", "Bad", "", PlotState(plot_type=PlotType.BINNED, xcol="missing")),
        GalleryEntry("good", "Good", "", PlotState(plot_type=PlotType.BINNED)),
    ]
    result = build_gallery(small_config, entries)
    assert [r.entry.key for r in result.rendered] == ["good"]
    assert result.skipped[0].entry.key == "bad"
    assert result.skipped[0].reason.startswith("failed")


def test_skip_reason(small_config, monkeypatch):
    monkeypatch.setattr(entries_mod, "has_package", lambda name: True)
    large = GalleryEntry("l", "L", "", PlotState(), large=True)
    optional = GalleryEntry("o", "O", "", PlotState(), requires="datashader")
    assert skip_reason(large, small_config) is not None
    assert skip_reason(optional, small_config) is None
    small_config.is_not_binder = True
    assert skip_reason(large, small_config) is None


def test_apply_config_keeps_explicit_bins(small_config):
    assert apply_config(PlotState(), small_config).bins == 20
    assert apply_config(PlotState(bins=400), small_config).bins == 400
    state = apply_config(PlotState(bandwidth=0.5), small_config)
    assert state.bandwidth == 0.5
    assert state.contour_resolution == 15
    assert state.sample_seed == small_config.seed

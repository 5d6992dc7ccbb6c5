"""Unit tests for PlotState serialization."""

import pytest

from denseplot.points.plot_state import PlotState, PlotType


def test_to_dict_from_dict_roundtrip():
    state = PlotState(
        plot_type=PlotType.FACETED_BINNED,
        value_col="value",
        bins=64,
        bins_y=32,
        reduction="mean",
        bandwidth=0.4,
        overlay_contour=True,
        max_kde_points=None,
    )
    d = state.to_dict()
    assert d["plot_type"] == "faceted_binned"
    assert PlotState.from_dict(d) == state


def test_from_dict_missing_keys_use_defaults():
    assert PlotState.from_dict({}) == PlotState()


def test_from_dict_unknown_plot_type_raises():
    with pytest.raises(ValueError):
        PlotState.from_dict({"plot_type": "hexbin"})


def test_bins_xy():
    assert PlotState(bins=50).bins_xy() == (50, 50)
    assert PlotState(bins=50, bins_y=20).bins_xy() == (50, 20)

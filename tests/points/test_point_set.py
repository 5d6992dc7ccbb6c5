"""Unit tests for PointSetProcessor."""

import numpy as np
import pandas as pd
import pytest

from denseplot.points.point_set import PointSetProcessor


@pytest.fixture
def sample_df():
    return pd.DataFrame({
        "group": [0, 0, 1, 1, 2],
        "x": [0.0, 2.0, 5.0, 7.0, 10.0],
        "y": [1.0, 3.0, 5.0, 5.0, 9.0],
        "value": [0.0, 0.0, 1.0, 1.0, 2.0],
    })


@pytest.fixture
def processor(sample_df):
    return PointSetProcessor(sample_df, value_col="value")


def test_missing_coordinate_column_raises(sample_df):
    with pytest.raises(ValueError) as exc_info:
        PointSetProcessor(sample_df, x_col="lon")
    assert "lon" in str(exc_info.value)


def test_non_numeric_coordinate_raises(sample_df):
    df = sample_df.assign(x=["a", "b", "c", "d", "e"])
    with pytest.raises(ValueError):
        PointSetProcessor(df)


def test_missing_group_or_value_column_raises(sample_df):
    with pytest.raises(ValueError):
        PointSetProcessor(sample_df, group_col="cluster")
    with pytest.raises(ValueError):
        PointSetProcessor(sample_df, value_col="weight")


def test_group_values_sorted_strings(processor):
    assert processor.get_group_values() == ["0", "1", "2"]


def test_no_group_column(sample_df):
    proc = PointSetProcessor(sample_df, group_col=None)
    assert proc.get_group_values() == []
    assert proc.calculate_group_stats() == {}
    with pytest.raises(ValueError):
        proc.filter_by_group("0")


def test_filter_by_group_matches_string_label(processor):
    df_f = processor.filter_by_group("1")
    assert df_f["x"].tolist() == [5.0, 7.0]


def test_get_xy_and_values(processor):
    x, y = processor.get_xy()
    assert x.dtype == float and y.dtype == float
    np.testing.assert_array_equal(x, [0.0, 2.0, 5.0, 7.0, 10.0])
    np.testing.assert_array_equal(processor.get_values(processor.filter_by_group(2)), [2.0])


def test_get_values_none_without_value_col(sample_df):
    assert PointSetProcessor(sample_df).get_values() is None


def test_bounds(processor):
    assert processor.bounds() == ((0.0, 10.0), (1.0, 9.0))


def test_shuffled_is_seeded_permutation(processor, sample_df):
    a = processor.shuffled(seed=7)
    b = processor.shuffled(seed=7)
    assert a.is_shuffled is True
    assert processor.is_shuffled is False
    assert a.value_col == "value"
    pd.testing.assert_frame_equal(a.df, b.df)
    pd.testing.assert_frame_equal(
        a.df.sort_values("x").reset_index(drop=True),
        sample_df.sort_values("x").reset_index(drop=True),
    )


def test_calculate_group_stats(processor):
    stats = processor.calculate_group_stats()
    assert set(stats.keys()) == {"0", "1", "2"}
    assert stats["0"]["count"] == 2
    assert stats["0"]["x_mean"] == pytest.approx(1.0)
    assert stats["0"]["x_std"] == pytest.approx(np.sqrt(2.0))
    assert stats["1"]["y_std"] == 0.0
    # single-point group
    assert stats["2"]["x_std"] == 0.0

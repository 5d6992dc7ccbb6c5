"""Unit tests for the Gaussian mixture sampler."""

import numpy as np
import pandas as pd
import pytest

from denseplot.errors import InvalidParameter
from denseplot.points.sampler import DEFAULT_SPECS, GaussianSpec, sample_gaussian_mixture


def test_total_count_and_labels():
    """Each spec contributes exactly its count, labeled by spec index."""
    specs = [GaussianSpec(0, 0, 1), GaussianSpec(5, 5, 0.5), GaussianSpec(-3, 2, 2)]
    df = sample_gaussian_mixture(specs, [10, 20, 30], seed=1)
    assert len(df) == 60
    assert list(df.columns) == ["group", "x", "y"]
    assert df["group"].value_counts().sort_index().tolist() == [10, 20, 30]
    # rows emitted spec by spec
    assert df["group"].is_monotonic_increasing


def test_single_count_applies_to_every_spec():
    df = sample_gaussian_mixture(DEFAULT_SPECS, 7, seed=0)
    assert len(df) == 7 * len(DEFAULT_SPECS)
    assert sorted(df["group"].unique().tolist()) == list(range(len(DEFAULT_SPECS)))


def test_same_seed_is_bit_identical():
    a = sample_gaussian_mixture(DEFAULT_SPECS, 100, seed=42, with_value=True)
    b = sample_gaussian_mixture(DEFAULT_SPECS, 100, seed=42, with_value=True)
    pd.testing.assert_frame_equal(a, b)


def test_different_seed_differs():
    a = sample_gaussian_mixture(DEFAULT_SPECS, 100, seed=1)
    b = sample_gaussian_mixture(DEFAULT_SPECS, 100, seed=2)
    assert not np.array_equal(a["x"].to_numpy(), b["x"].to_numpy())


def test_points_follow_spec_center_and_spread():
    df = sample_gaussian_mixture([GaussianSpec(3.0, -1.0, 0.5)], 20_000, seed=0)
    assert df["x"].mean() == pytest.approx(3.0, abs=0.02)
    assert df["y"].mean() == pytest.approx(-1.0, abs=0.02)
    assert df["x"].std() == pytest.approx(0.5, abs=0.02)


def test_with_value_holds_group_index():
    df = sample_gaussian_mixture(DEFAULT_SPECS, 5, seed=0, with_value=True)
    np.testing.assert_array_equal(df["value"].to_numpy(), df["group"].to_numpy().astype(float))


@pytest.mark.parametrize("count", [0, -5, [10, 0, 10, 10, 10]])
def test_non_positive_count_raises(count):
    with pytest.raises(InvalidParameter):
        sample_gaussian_mixture(DEFAULT_SPECS, count, seed=0)


def test_count_sequence_length_mismatch_raises():
    with pytest.raises(InvalidParameter) as exc_info:
        sample_gaussian_mixture(DEFAULT_SPECS, [10, 10], seed=0)
    assert "specs" in str(exc_info.value)


@pytest.mark.parametrize("std", [0.0, -1.0])
def test_non_positive_std_raises(std):
    with pytest.raises(InvalidParameter):
        sample_gaussian_mixture([GaussianSpec(0, 0, std)], 10, seed=0)


def test_empty_specs_raises():
    with pytest.raises(InvalidParameter):
        sample_gaussian_mixture([], 10, seed=0)


def test_invalid_parameter_is_value_error():
    with pytest.raises(ValueError):
        sample_gaussian_mixture(DEFAULT_SPECS, 0, seed=0)

"""Synthetic point clouds for overplotting examples.

Draws a labeled mixture of isotropic 2D Gaussians into a flat
``(group, x, y[, value])`` DataFrame.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np
import pandas as pd

from denseplot.errors import InvalidParameter
from denseplot.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class GaussianSpec:
    """Center and spread of one isotropic Gaussian cluster."""
    mean_x: float
    mean_y: float
    std: float


# Five clusters, from very tight to very wide, so that no single
# color mapping shows all of them well on a raw scatter.
DEFAULT_SPECS: tuple[GaussianSpec, ...] = (
    GaussianSpec(2.0, 2.0, 0.03),
    GaussianSpec(2.0, -2.0, 0.1),
    GaussianSpec(-2.0, -2.0, 0.5),
    GaussianSpec(-2.0, 2.0, 1.0),
    GaussianSpec(0.0, 0.0, 3.0),
)


def _counts_per_spec(specs: Sequence[GaussianSpec], count: Union[int, Sequence[int]]) -> list[int]:
    if isinstance(count, (int, np.integer)):
        counts = [int(count)] * len(specs)
    else:
        counts = [int(c) for c in count]
        if len(counts) != len(specs):
            raise InvalidParameter(
                f"count has {len(counts)} entries but there are {len(specs)} specs"
            )
    for i, c in enumerate(counts):
        if c <= 0:
            raise InvalidParameter(f"count for spec {i} must be positive, got {c}")
    return counts


def sample_gaussian_mixture(
    specs: Sequence[GaussianSpec] = DEFAULT_SPECS,
    count: Union[int, Sequence[int]] = 10_000,
    *,
    seed: int = 0,
    with_value: bool = False,
) -> pd.DataFrame:
    """Draw points from each spec and stack them into one table.

    Args:
        specs: One GaussianSpec per cluster; cluster i is labeled ``group == i``.
        count: Points per spec, either one int for all specs or one per spec.
        seed: Seed for ``numpy.random.default_rng``. Same seed and specs give
            bit-identical output.
        with_value: If True, add a ``value`` column holding the float group
            index (the scalar used by mean / select-one color examples).

    Returns:
        DataFrame with columns ``group`` (int), ``x``, ``y`` and optionally
        ``value``, rows emitted spec by spec.

    Raises:
        InvalidParameter: If specs is empty, a count is not positive, a count
            sequence does not match specs, or a std is not positive.
    """
    if len(specs) == 0:
        raise InvalidParameter("at least one GaussianSpec is required")
    counts = _counts_per_spec(specs, count)
    for i, spec in enumerate(specs):
        if not spec.std > 0:
            raise InvalidParameter(f"std for spec {i} must be positive, got {spec.std}")

    rng = np.random.default_rng(seed)
    total = sum(counts)
    xs = np.empty(total, dtype=float)
    ys = np.empty(total, dtype=float)
    groups = np.empty(total, dtype=np.int64)

    start = 0
    for i, (spec, n) in enumerate(zip(specs, counts)):
        stop = start + n
        xs[start:stop] = rng.normal(spec.mean_x, spec.std, n)
        ys[start:stop] = rng.normal(spec.mean_y, spec.std, n)
        groups[start:stop] = i
        start = stop

    df = pd.DataFrame({"group": groups, "x": xs, "y": ys})
    if with_value:
        df["value"] = groups.astype(float)

    logger.debug(f"sampled {total} points from {len(specs)} specs (seed={seed})")
    return df

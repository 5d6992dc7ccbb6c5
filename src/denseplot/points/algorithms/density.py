"""
Density contour precomputation — pure numpy/scipy reference.

Evaluates a 2D Gaussian kernel density estimate on a regular ``n × n`` grid
and flattens it to a long-form ``(x, y, density)`` table that a contour trace
can consume directly. The grid is independent of any binning grid.

For faceted overlays the same overall-population table can be replicated
once per group label, so every facet shows the same reference contour.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence, Union

import numpy as np
import pandas as pd
from scipy import stats

from denseplot.errors import InvalidParameter
from denseplot.points.algorithms.binning import Bounds, check_bounds, data_bounds
from denseplot.utils.logging import get_logger, log_elapsed

logger = get_logger(__name__)


BANDWIDTH_RULES = ("scott", "silverman")


def _check_bandwidth(bandwidth: Optional[Union[float, str]]) -> Optional[Union[float, str]]:
    if bandwidth is None:
        return None
    if isinstance(bandwidth, str):
        rule = bandwidth.strip().lower()
        if rule not in BANDWIDTH_RULES:
            raise InvalidParameter(
                f"bandwidth must be a positive number or one of {BANDWIDTH_RULES}, got {bandwidth!r}"
            )
        return rule
    try:
        bw = float(bandwidth)
    except (TypeError, ValueError):
        raise InvalidParameter(f"bandwidth must be a number, got {bandwidth!r}")
    if not bw > 0:
        raise InvalidParameter(f"bandwidth must be positive, got {bandwidth!r}")
    return bw


def density_contour_grid(
    x: Any,
    y: Any,
    *,
    n: int = 100,
    bandwidth: Optional[Union[float, str]] = None,
    bounds: Optional[Bounds] = None,
    groups: Optional[Sequence[Any]] = None,
    group_col: str = "group",
    max_points: Optional[int] = None,
    seed: int = 0,
) -> pd.DataFrame:
    """
    Kernel density estimate on a regular grid, as a long-form table.

    Args:
        x, y: Point coordinates. Non-finite points are ignored.
        n: Grid resolution per axis (n >= 2).
        bandwidth: Bandwidth factor passed to ``gaussian_kde(bw_method=...)``.
            None uses Scott's rule; "scott" / "silverman" are accepted too.
        bounds: ((xmin, xmax), (ymin, ymax)) of the grid. Defaults to the
            data extent.
        groups: If given, replicate the table once per label with a
            ``group_col`` column.
        max_points: If set and exceeded, estimate from a fixed-seed random
            subsample of this size.
        seed: Seed for the subsample.

    Returns:
        DataFrame with columns x, y, density (x varies fastest), n * n rows
        per group.

    Raises:
        InvalidParameter: If n < 2, bandwidth <= 0, fewer than 2 finite
            points, or the points are degenerate (singular covariance).
    """
    if int(n) < 2:
        raise InvalidParameter(f"n must be at least 2, got {n}")
    n = int(n)
    bw_method = _check_bandwidth(bandwidth)
    if max_points is not None and int(max_points) < 2:
        raise InvalidParameter(f"max_points must be at least 2, got {max_points}")

    x = np.asarray(x, dtype=float).ravel()
    y = np.asarray(y, dtype=float).ravel()
    if x.shape != y.shape:
        raise InvalidParameter(f"x and y lengths differ: {x.size} != {y.size}")
    finite = np.isfinite(x) & np.isfinite(y)
    x, y = x[finite], y[finite]
    if x.size < 2:
        raise InvalidParameter(f"density estimate needs at least 2 finite points, got {x.size}")

    if bounds is None:
        (xmin, xmax), (ymin, ymax) = data_bounds(x, y)
    else:
        (xmin, xmax), (ymin, ymax) = check_bounds(bounds)

    if max_points is not None and x.size > int(max_points):
        idx = np.random.default_rng(seed).choice(x.size, size=int(max_points), replace=False)
        x, y = x[idx], y[idx]
        logger.debug(f"density_contour_grid: subsampled to {x.size} points")

    xs = np.linspace(xmin, xmax, n)
    ys = np.linspace(ymin, ymax, n)
    xx, yy = np.meshgrid(xs, ys)
    try:
        with log_elapsed(logger, f"KDE of {x.size} points on {n}x{n} grid"):
            kde = stats.gaussian_kde(np.vstack([x, y]), bw_method=bw_method)
            density = kde(np.vstack([xx.ravel(), yy.ravel()]))
    except np.linalg.LinAlgError as e:
        raise InvalidParameter(f"points are degenerate, cannot estimate density: {e}")

    table = pd.DataFrame({
        "x": xx.ravel(),
        "y": yy.ravel(),
        "density": density,
    })
    logger.debug(
        f"density_contour_grid: n={n} points={x.size} bandwidth={bw_method!r} "
        f"max_density={float(density.max()):.4g}"
    )

    if groups is None:
        return table

    parts = []
    for group_value in groups:
        part = table.copy()
        part.insert(0, group_col, group_value)
        parts.append(part)
    if not parts:
        return pd.DataFrame(columns=[group_col, "x", "y", "density"])
    return pd.concat(parts, ignore_index=True)


def contour_matrix(table: pd.DataFrame) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Reshape one long-form (x, y, density) table back to (xs, ys, z[ny, nx])."""
    xs = np.sort(table["x"].unique())
    ys = np.sort(table["y"].unique())
    z = (
        table.pivot_table(index="y", columns="x", values="density", aggfunc="first")
        .reindex(index=ys, columns=xs)
        .to_numpy()
    )
    return xs, ys, z

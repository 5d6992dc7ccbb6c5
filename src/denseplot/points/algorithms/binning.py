"""
Binned aggregation — pure numpy/pandas reference.

This module holds the one piece of real logic behind the "binned" and
"faceted binned" plot types. It partitions the plane spanned by a point set
into a fixed ``bins_x × bins_y`` grid and reduces every non-empty cell to a
single number:

  1. Bounds are the data extent unless given explicitly.
  2. Each point gets a (row, col) cell index. Cells are half-open
     ``[lo, hi)`` except the last cell on each axis, which also takes
     points lying exactly on the upper bound.
  3. One pass of array-indexed accumulation (``np.bincount`` /
     ``np.minimum.at``) produces the per-cell reduction, so the cost is
     linear in the number of points.

Cells without contributing points are absent (NaN), never zero, so that a
log color scale never sees log(0).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence, Union

import numpy as np
import pandas as pd

from denseplot.errors import InvalidParameter
from denseplot.utils.logging import get_logger

logger = get_logger(__name__)

Bounds = tuple[tuple[float, float], tuple[float, float]]
BinsArg = Union[int, Sequence[int]]


class Reduction(Enum):
    """Per-cell reduction applied by bin_points()."""
    COUNT = "count"
    SUM = "sum"
    MEAN = "mean"
    SAMPLE = "sample"  # one member drawn uniformly at random (seeded)
    FIRST = "first"    # first member in input order


@dataclass
class BinnedGrid:
    """Result of bin_points().

    Dense arrays have shape ``(bins_y, bins_x)``; row indexes y, col indexes x.

    Attributes:
        reduction: Reduction that produced ``values``.
        x_edges: ``bins_x + 1`` breakpoints along x.
        y_edges: ``bins_y + 1`` breakpoints along y.
        counts: Number of points per cell.
        values: Reduced value per cell, NaN where the cell is absent.
        members: For sample/first, input row position of the chosen point
            per cell (-1 where empty). None for other reductions.
        n_points: Points assigned to a cell.
        n_excluded: Points dropped for non-finite coordinates or lying
            outside explicit bounds.
        is_uniform_sample: True when ``values`` is a uniform per-cell sample.
    """
    reduction: Reduction
    x_edges: np.ndarray
    y_edges: np.ndarray
    counts: np.ndarray
    values: np.ndarray
    members: Optional[np.ndarray] = None
    n_points: int = 0
    n_excluded: int = 0
    is_uniform_sample: bool = False

    @property
    def bins_x(self) -> int:
        return len(self.x_edges) - 1

    @property
    def bins_y(self) -> int:
        return len(self.y_edges) - 1

    @property
    def present(self) -> np.ndarray:
        """Boolean mask of cells holding a value."""
        return ~np.isnan(self.values)

    @property
    def n_present(self) -> int:
        return int(self.present.sum())

    @property
    def x_centers(self) -> np.ndarray:
        return (self.x_edges[:-1] + self.x_edges[1:]) / 2.0

    @property
    def y_centers(self) -> np.ndarray:
        return (self.y_edges[:-1] + self.y_edges[1:]) / 2.0

    @property
    def extent(self) -> tuple[float, float, float, float]:
        """(xmin, xmax, ymin, ymax) of the grid."""
        return (
            float(self.x_edges[0]), float(self.x_edges[-1]),
            float(self.y_edges[0]), float(self.y_edges[-1]),
        )

    def cells(self) -> dict[tuple[int, int], float]:
        """Map (row, col) -> value for present cells only."""
        rows, cols = np.nonzero(self.present)
        return {
            (int(r), int(c)): float(self.values[r, c])
            for r, c in zip(rows, cols)
        }

    def to_frame(self) -> pd.DataFrame:
        """Long-form table of present cells.

        Columns: row, col, x (cell center), y (cell center), value, count.
        """
        rows, cols = np.nonzero(self.present)
        return pd.DataFrame({
            "row": rows.astype(np.int64),
            "col": cols.astype(np.int64),
            "x": self.x_centers[cols],
            "y": self.y_centers[rows],
            "value": self.values[rows, cols],
            "count": self.counts[rows, cols].astype(np.int64),
        })


# -----------------------------------------------------------------------------
# Parameter handling
# -----------------------------------------------------------------------------


def normalize_bins(bins: BinsArg) -> tuple[int, int]:
    """Return (bins_x, bins_y) from a single int or a pair.

    Raises:
        InvalidParameter: If either value is not a positive int.
    """
    if isinstance(bins, (int, np.integer)):
        bins_x = bins_y = int(bins)
    else:
        try:
            bins_x, bins_y = (int(b) for b in bins)
        except (TypeError, ValueError):
            raise InvalidParameter(f"bins must be an int or a (bins_x, bins_y) pair, got {bins!r}")
    if bins_x <= 0 or bins_y <= 0:
        raise InvalidParameter(f"bins must be positive, got ({bins_x}, {bins_y})")
    return bins_x, bins_y


def _axis_extent(v: np.ndarray) -> tuple[float, float]:
    """Data extent of finite values; zero-width extents widen to +/- 0.5."""
    if v.size == 0:
        return 0.0, 1.0
    lo, hi = float(v.min()), float(v.max())
    if hi == lo:
        return lo - 0.5, hi + 0.5
    return lo, hi


def data_bounds(x: Any, y: Any) -> Bounds:
    """Bounds ((xmin, xmax), (ymin, ymax)) spanned by the finite points."""
    x = np.asarray(x, dtype=float).ravel()
    y = np.asarray(y, dtype=float).ravel()
    finite = np.isfinite(x) & np.isfinite(y)
    return _axis_extent(x[finite]), _axis_extent(y[finite])


def check_bounds(bounds: Any) -> Bounds:
    """Validate explicit bounds.

    Raises:
        InvalidParameter: If bounds are malformed, non-finite, or zero-size.
    """
    try:
        (xmin, xmax), (ymin, ymax) = bounds
        xmin, xmax, ymin, ymax = float(xmin), float(xmax), float(ymin), float(ymax)
    except (TypeError, ValueError):
        raise InvalidParameter(f"bounds must be ((xmin, xmax), (ymin, ymax)), got {bounds!r}")
    if not all(np.isfinite([xmin, xmax, ymin, ymax])):
        raise InvalidParameter(f"bounds must be finite, got {bounds!r}")
    if xmax <= xmin or ymax <= ymin:
        raise InvalidParameter(f"bounds span a zero-size grid: {bounds!r}")
    return (xmin, xmax), (ymin, ymax)


def _axis_index(v: np.ndarray, lo: float, hi: float, nbins: int) -> np.ndarray:
    """Cell index along one axis for values already inside [lo, hi]."""
    idx = np.floor((v - lo) / (hi - lo) * nbins).astype(np.intp)
    # v == hi lands on nbins; it belongs to the last cell
    return np.clip(idx, 0, nbins - 1)


# -----------------------------------------------------------------------------
# Aggregation
# -----------------------------------------------------------------------------


def bin_points(
    x: Any,
    y: Any,
    *,
    bins: BinsArg,
    bounds: Optional[Bounds] = None,
    values: Any = None,
    reduction: Union[Reduction, str] = Reduction.COUNT,
    seed: Optional[int] = None,
    input_shuffled: bool = False,
) -> BinnedGrid:
    """
    Aggregate points into a fixed-resolution grid.

    Args:
        x, y: Point coordinates (array-likes of equal length).
        bins: Cells per axis, one int for both or (bins_x, bins_y).
        bounds: ((xmin, xmax), (ymin, ymax)). Defaults to the data extent.
            Points outside explicit bounds are excluded.
        values: Per-point scalar, required for every reduction but count.
        reduction: count, sum, mean, sample or first.
        seed: Random seed, required for sample.
        input_shuffled: Caller guarantees the input order was randomly
            shuffled, so that "first" is a uniform per-cell sample.

    Returns:
        BinnedGrid with absent cells as NaN.

    Raises:
        InvalidParameter: On non-positive bins, bad bounds, mismatched array
            lengths, missing values, or sample without a seed.
    """
    bins_x, bins_y = normalize_bins(bins)
    try:
        reduction = Reduction(reduction)
    except ValueError:
        raise InvalidParameter(f"unknown reduction {reduction!r}")

    x = np.asarray(x, dtype=float).ravel()
    y = np.asarray(y, dtype=float).ravel()
    if x.shape != y.shape:
        raise InvalidParameter(f"x and y lengths differ: {x.size} != {y.size}")
    if reduction is not Reduction.COUNT:
        if values is None:
            raise InvalidParameter(f"reduction {reduction.value!r} requires values")
        values = np.asarray(values, dtype=float).ravel()
        if values.shape != x.shape:
            raise InvalidParameter(f"values length {values.size} != point count {x.size}")
    if reduction is Reduction.SAMPLE and seed is None:
        raise InvalidParameter("reduction 'sample' requires a seed")

    finite = np.isfinite(x) & np.isfinite(y)
    if bounds is None:
        (xmin, xmax), (ymin, ymax) = data_bounds(x[finite], y[finite])
    else:
        (xmin, xmax), (ymin, ymax) = check_bounds(bounds)

    keep = finite & (x >= xmin) & (x <= xmax) & (y >= ymin) & (y <= ymax)
    rows = np.flatnonzero(keep)
    n_excluded = int(x.size - rows.size)

    col = _axis_index(x[rows], xmin, xmax, bins_x)
    row = _axis_index(y[rows], ymin, ymax, bins_y)
    flat = row * bins_x + col
    n_cells = bins_x * bins_y

    counts = np.bincount(flat, minlength=n_cells)
    members = None

    if reduction is Reduction.COUNT:
        out = counts.astype(float)
        out[counts == 0] = np.nan
    elif reduction in (Reduction.SUM, Reduction.MEAN):
        v = values[rows]
        ok = ~np.isnan(v)
        sums = np.bincount(flat[ok], weights=v[ok], minlength=n_cells)
        n_vals = np.bincount(flat[ok], minlength=n_cells)
        if reduction is Reduction.SUM:
            out = sums
        else:
            out = sums / np.maximum(n_vals, 1)
        out[n_vals == 0] = np.nan
    else:
        # Visit points in input order (first) or a seeded permutation (sample);
        # the winner per cell is the point visited earliest.
        if reduction is Reduction.SAMPLE:
            order = np.random.default_rng(seed).permutation(rows.size)
        else:
            order = np.arange(rows.size)
        rank = np.empty(rows.size, dtype=np.int64)
        rank[order] = np.arange(rows.size)
        best = np.full(n_cells, rows.size, dtype=np.int64)
        np.minimum.at(best, flat, rank)
        hit = best < rows.size
        members = np.full(n_cells, -1, dtype=np.int64)
        members[hit] = rows[order[best[hit]]]
        out = np.full(n_cells, np.nan)
        out[hit] = values[members[hit]]
        members = members.reshape(bins_y, bins_x)
        if reduction is Reduction.FIRST and not input_shuffled:
            logger.debug("first-member reduction on unshuffled input depends on input order")

    grid = BinnedGrid(
        reduction=reduction,
        x_edges=np.linspace(xmin, xmax, bins_x + 1),
        y_edges=np.linspace(ymin, ymax, bins_y + 1),
        counts=counts.reshape(bins_y, bins_x),
        values=out.reshape(bins_y, bins_x),
        members=members,
        n_points=int(rows.size),
        n_excluded=n_excluded,
        is_uniform_sample=(
            reduction is Reduction.SAMPLE
            or (reduction is Reduction.FIRST and input_shuffled)
        ),
    )
    logger.debug(
        f"bin_points: reduction={reduction.value} bins=({bins_x}, {bins_y}) "
        f"points={grid.n_points} excluded={n_excluded} present={grid.n_present}"
    )
    return grid


def log_scale(values: np.ndarray) -> np.ndarray:
    """log10 of a dense grid; absent and non-positive cells become NaN."""
    values = np.asarray(values, dtype=float)
    out = np.full(values.shape, np.nan)
    pos = values > 0
    out[pos] = np.log10(values[pos])
    return out


# -----------------------------------------------------------------------------
# Group-faceted aggregation
# -----------------------------------------------------------------------------


def bin_points_by_group(
    df: pd.DataFrame,
    *,
    bins: BinsArg,
    group_col: str = "group",
    x_col: str = "x",
    y_col: str = "y",
    value_col: Optional[str] = None,
    bounds: Optional[Bounds] = None,
    reduction: Union[Reduction, str] = Reduction.COUNT,
    seed: Optional[int] = None,
    input_shuffled: bool = False,
) -> dict[str, BinnedGrid]:
    """
    Bin each group separately on one shared grid.

    Bounds default to the extent of the whole point set so that facets are
    directly comparable cell by cell.

    Returns:
        Dict mapping group label (as string, sorted) to its BinnedGrid.
    """
    normalize_bins(bins)
    if bounds is None:
        bounds = data_bounds(df[x_col], df[y_col])

    grids: dict[str, BinnedGrid] = {}
    for group_value, sub in df.groupby(group_col, sort=True):
        grids[str(group_value)] = bin_points(
            sub[x_col].to_numpy(),
            sub[y_col].to_numpy(),
            bins=bins,
            bounds=bounds,
            values=None if value_col is None else sub[value_col].to_numpy(),
            reduction=reduction,
            seed=seed,
            input_shuffled=input_shuffled,
        )
    return grids


def grouped_grid_frame(grids: dict[str, BinnedGrid], group_col: str = "group") -> pd.DataFrame:
    """Stack the to_frame() tables of per-group grids with a group column."""
    parts = []
    for group_value, grid in grids.items():
        part = grid.to_frame()
        part.insert(0, group_col, group_value)
        parts.append(part)
    if not parts:
        return pd.DataFrame(columns=[group_col, "row", "col", "x", "y", "value", "count"])
    return pd.concat(parts, ignore_index=True)


if __name__ == "__main__":
    # Four points, 2x2 grid over [0, 10]^2: three points share the lower-left cell.
    _grid = bin_points(
        [0.0, 0.5, 1.0, 9.0],
        [0.0, 0.5, 1.0, 9.0],
        bins=2,
        bounds=((0.0, 10.0), (0.0, 10.0)),
    )
    print("--- counts (row = y, col = x) ---")
    print(_grid.counts)
    print("--- present cells ---")
    print(_grid.to_frame().to_string(index=False))

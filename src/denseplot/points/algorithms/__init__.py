"""Algorithms behind the dense scatter figures.

Pure numpy/pandas/scipy implementations with no Plotly dependency:
binned aggregation (binning) and KDE contour precomputation (density).
"""

from denseplot.points.algorithms.binning import (
    BinnedGrid,
    Reduction,
    bin_points,
    bin_points_by_group,
    grouped_grid_frame,
    log_scale,
)
from denseplot.points.algorithms.density import contour_matrix, density_contour_grid

__all__ = [
    "BinnedGrid",
    "Reduction",
    "bin_points",
    "bin_points_by_group",
    "contour_matrix",
    "density_contour_grid",
    "grouped_grid_frame",
    "log_scale",
]

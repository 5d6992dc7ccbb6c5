"""
denseplot: strategies for plotting large 2D scatter datasets.

This package provides:
- sample_gaussian_mixture: seeded synthetic point clouds
- bin_points: linear-time binned aggregation (count, sum, mean, sample, first)
- density_contour_grid: KDE contours as a long-form table
- FigureGenerator / PlotState: Plotly figures for each strategy
- Logging utilities for library and application use

For logging configuration in notebooks and scripts:
    ```python
    from denseplot.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```
"""

import logging

from denseplot.errors import InvalidParameter
from denseplot.points import (
    DEFAULT_SPECS,
    FigureGenerator,
    GaussianSpec,
    PlotState,
    PlotType,
    PointSetProcessor,
    sample_gaussian_mixture,
)
from denseplot.points.algorithms import (
    BinnedGrid,
    Reduction,
    bin_points,
    bin_points_by_group,
    density_contour_grid,
)
from denseplot.utils.logging import configure_logging, get_logger

# Ensure denseplot logger has NullHandler so logs don't propagate to root
# when no application has configured logging.
_logger = logging.getLogger("denseplot")
if not _logger.handlers:
    _logger.addHandler(logging.NullHandler())

__all__ = [
    "BinnedGrid",
    "DEFAULT_SPECS",
    "FigureGenerator",
    "GaussianSpec",
    "InvalidParameter",
    "PlotState",
    "PlotType",
    "PointSetProcessor",
    "Reduction",
    "bin_points",
    "bin_points_by_group",
    "configure_logging",
    "density_contour_grid",
    "get_logger",
    "sample_gaussian_mixture",
]

__version__ = "0.1.0"

"""Plot state for dense scatter figures.

This module defines the PlotType enum and PlotState dataclass used to
serialize and describe one figure of the overplotting gallery.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class PlotType(Enum):
    """Enumeration of available plot types."""
    SCATTER = "scatter"
    ALPHA_SCATTER = "alpha_scatter"
    BINNED = "binned"
    DENSITY_CONTOUR = "density_contour"
    FACETED_BINNED = "faceted_binned"
    RASTERIZED = "rasterized"


@dataclass
class PlotState:
    """Configuration state for a single figure.

    Holds data selection (x/y/group/value columns), the plot type, binning
    and density parameters, and visual options.
    """
    plot_type: PlotType = PlotType.SCATTER
    xcol: str = "x"
    ycol: str = "y"
    group_col: Optional[str] = "group"  # per-group traces (scatter) and facets (faceted_binned)
    value_col: Optional[str] = None     # scalar reduced by sum/mean/sample/first
    bins: int = 200                     # cells along x (and y when bins_y is None)
    bins_y: Optional[int] = None
    reduction: str = "count"            # count, sum, mean, sample, first
    sample_seed: int = 0                # seed for the "sample" reduction
    log_color: bool = True              # log10 color mapping of cell values
    colorscale: str = "Viridis"
    point_size: int = 4
    opacity: float = 1.0                # marker alpha for scatter types
    contour_resolution: int = 100       # n for the n x n density grid
    bandwidth: Optional[float] = None   # KDE bandwidth factor; None = Scott's rule
    max_kde_points: Optional[int] = 20_000
    show_points: bool = False           # raw points under density contours
    overlay_contour: bool = False       # overall-population contour on every facet
    facet_columns: int = 3
    show_legend: bool = True

    def bins_xy(self) -> tuple[int, int]:
        """(bins_x, bins_y) for the binning plot types."""
        return self.bins, self.bins if self.bins_y is None else self.bins_y

    def to_dict(self) -> dict[str, Any]:
        """Serialize PlotState to a JSON-friendly dictionary."""
        return {
            "plot_type": self.plot_type.value,
            "xcol": self.xcol,
            "ycol": self.ycol,
            "group_col": self.group_col,
            "value_col": self.value_col,
            "bins": self.bins,
            "bins_y": self.bins_y,
            "reduction": self.reduction,
            "sample_seed": self.sample_seed,
            "log_color": self.log_color,
            "colorscale": self.colorscale,
            "point_size": self.point_size,
            "opacity": self.opacity,
            "contour_resolution": self.contour_resolution,
            "bandwidth": self.bandwidth,
            "max_kde_points": self.max_kde_points,
            "show_points": self.show_points,
            "overlay_contour": self.overlay_contour,
            "facet_columns": self.facet_columns,
            "show_legend": self.show_legend,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlotState":
        """Deserialize PlotState from a dictionary; missing keys take defaults.

        Raises:
            ValueError: If plot_type is not a known PlotType value.
        """
        bins_y = data.get("bins_y")
        bandwidth = data.get("bandwidth")
        max_kde_points = data.get("max_kde_points", 20_000)
        return cls(
            plot_type=PlotType(data.get("plot_type", PlotType.SCATTER.value)),
            xcol=str(data.get("xcol", "x")),
            ycol=str(data.get("ycol", "y")),
            group_col=data.get("group_col", "group"),  # Can be None
            value_col=data.get("value_col"),  # Can be None
            bins=int(data.get("bins", 200)),
            bins_y=None if bins_y is None else int(bins_y),
            reduction=str(data.get("reduction", "count")),
            sample_seed=int(data.get("sample_seed", 0)),
            log_color=bool(data.get("log_color", True)),
            colorscale=str(data.get("colorscale", "Viridis")),
            point_size=int(data.get("point_size", 4)),
            opacity=float(data.get("opacity", 1.0)),
            contour_resolution=int(data.get("contour_resolution", 100)),
            bandwidth=None if bandwidth is None else float(bandwidth),
            max_kde_points=None if max_kde_points is None else int(max_kde_points),
            show_points=bool(data.get("show_points", False)),
            overlay_contour=bool(data.get("overlay_contour", False)),
            facet_columns=int(data.get("facet_columns", 3)),
            show_legend=bool(data.get("show_legend", True)),
        )

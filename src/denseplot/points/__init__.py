"""Point sampling, aggregation and Plotly figures for dense scatter data."""

from denseplot.points.figure_generator import FigureGenerator
from denseplot.points.plot_state import PlotState, PlotType
from denseplot.points.point_set import PointSetProcessor
from denseplot.points.sampler import DEFAULT_SPECS, GaussianSpec, sample_gaussian_mixture

__all__ = [
    "DEFAULT_SPECS",
    "FigureGenerator",
    "GaussianSpec",
    "PlotState",
    "PlotType",
    "PointSetProcessor",
    "sample_gaussian_mixture",
]

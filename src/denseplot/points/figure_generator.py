"""Plotly figure generation for dense scatter plots.

This module provides the FigureGenerator class for creating Plotly figure
dictionaries from a point table and a PlotState: raw and alpha-blended
scatter, binned heatmaps, KDE contours, group-faceted heatmaps, and
rasterized points when datashader is installed.
"""

from __future__ import annotations

import math

import numpy as np
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from denseplot.errors import InvalidParameter
from denseplot.points.algorithms.binning import (
    BinnedGrid,
    Reduction,
    bin_points,
    bin_points_by_group,
    log_scale,
)
from denseplot.points.algorithms.density import contour_matrix, density_contour_grid
from denseplot.points.plot_state import PlotState, PlotType
from denseplot.points.point_set import PointSetProcessor
from denseplot.utils.env import has_package
from denseplot.utils.logging import get_logger, log_elapsed

logger = get_logger(__name__)

# Contour lines drawn over heatmaps
OVERLAY_CONTOUR_COLOR = "rgba(255, 255, 255, 0.8)"

# Qualitative colors for per-group scatter traces
GROUP_COLORS = [
    "#1f77b4", "#ff7f0e", "#2ca02c", "#d62728", "#9467bd",
    "#8c564b", "#e377c2", "#7f7f7f", "#bcbd22", "#17becf",
]


class FigureGenerator:
    """Generates Plotly figure dictionaries from a point table and plot state.

    Attributes:
        data_processor: PointSetProcessor over the point table.
    """

    def __init__(self, data_processor: PointSetProcessor) -> None:
        self.data_processor = data_processor

    def make_figure(self, state: PlotState) -> dict:
        """Generate Plotly figure dictionary based on plot state.

        Configurations a plot type cannot honor fall back to a simpler plot
        type with a warning instead of raising.

        Raises:
            ValueError: If the state names columns missing from the table.
            InvalidParameter: On invalid bins, bandwidth or resolution.
        """
        proc = self._processor_for(state)
        logger.info(
            f"FigureGenerator.make_figure: plot_type={state.plot_type.value}, "
            f"rows={len(proc)}, xcol={state.xcol}, ycol={state.ycol}, "
            f"reduction={state.reduction}"
        )

        if state.plot_type == PlotType.SCATTER:
            result = self._figure_scatter(proc, state)
        elif state.plot_type == PlotType.ALPHA_SCATTER:
            result = self._figure_alpha_scatter(proc, state)
        elif state.plot_type == PlotType.BINNED:
            result = self._figure_binned(proc, state)
        elif state.plot_type == PlotType.DENSITY_CONTOUR:
            result = self._figure_density_contour(proc, state)
        elif state.plot_type == PlotType.FACETED_BINNED:
            if proc.group_col is None:
                logger.warning("Faceted plot requires group_col. Falling back to binned.")
                result = self._figure_binned(proc, state)
            else:
                result = self._figure_faceted_binned(proc, state)
        elif state.plot_type == PlotType.RASTERIZED:
            if not has_package("datashader"):
                logger.warning("datashader is not installed. Falling back to binned.")
                result = self._figure_binned(proc, state)
            else:
                result = self._figure_rasterized(proc, state)
        else:
            result = self._figure_scatter(proc, state)

        logger.debug(f"Figure generated: {len(result.get('data', []))} traces")
        return result

    def _processor_for(self, state: PlotState) -> PointSetProcessor:
        """Processor over the same table using the state's column names."""
        dp = self.data_processor
        return PointSetProcessor(
            dp.df,
            x_col=state.xcol,
            y_col=state.ycol,
            group_col=state.group_col,
            value_col=state.value_col,
            is_shuffled=dp.is_shuffled,
        )

    def _reduction_for(self, proc: PointSetProcessor, state: PlotState) -> Reduction:
        try:
            reduction = Reduction(state.reduction)
        except ValueError:
            raise InvalidParameter(f"unknown reduction {state.reduction!r}")
        if reduction is not Reduction.COUNT and proc.value_col is None:
            logger.warning(
                f"Reduction {reduction.value!r} requires value_col. Falling back to count."
            )
            return Reduction.COUNT
        return reduction

    def _bin(self, proc: PointSetProcessor, state: PlotState, reduction: Reduction) -> BinnedGrid:
        x, y = proc.get_xy()
        with log_elapsed(logger, f"Binning {x.size} points ({reduction.value})"):
            return bin_points(
                x, y,
                bins=state.bins_xy(),
                values=proc.get_values(),
                reduction=reduction,
                seed=state.sample_seed,
                input_shuffled=proc.is_shuffled,
            )

    def _color_values(self, values: np.ndarray, reduction: Reduction, state: PlotState) -> tuple[np.ndarray, str]:
        """Values for the color axis and their colorbar title."""
        if reduction is Reduction.COUNT:
            label = "count"
        else:
            label = f"{reduction.value}({state.value_col})"
        if state.log_color and reduction in (Reduction.COUNT, Reduction.SUM):
            n_dropped = int(np.count_nonzero(values[np.isfinite(values)] <= 0))
            if n_dropped:
                logger.warning(
                    f"log color hides {n_dropped} cells with {label} <= 0; "
                    f"set log_color=False to show them"
                )
            return log_scale(values), f"log10 {label}"
        return values, label

    def _layout(self, fig: go.Figure, state: PlotState, title: str) -> None:
        fig.update_layout(
            title=title,
            margin=dict(l=40, r=20, t=50, b=40),
            xaxis_title=state.xcol,
            yaxis_title=state.ycol,
            showlegend=state.show_legend,
            uirevision="keep",
        )

    def _figure_scatter(self, proc: PointSetProcessor, state: PlotState) -> dict:
        """Raw scatter, one trace per group; later groups draw over earlier ones."""
        fig = go.Figure()
        if proc.group_col is None:
            x, y = proc.get_xy()
            fig.add_trace(go.Scattergl(
                x=x, y=y,
                mode="markers",
                name="points",
                marker=dict(size=state.point_size, opacity=state.opacity),
            ))
        else:
            for i, group_value in enumerate(proc.get_group_values()):
                x, y = proc.get_xy(proc.filter_by_group(group_value))
                fig.add_trace(go.Scattergl(
                    x=x, y=y,
                    mode="markers",
                    name=f"{proc.group_col}={group_value}",
                    marker=dict(
                        size=state.point_size,
                        opacity=state.opacity,
                        color=GROUP_COLORS[i % len(GROUP_COLORS)],
                    ),
                ))
        self._layout(fig, state, f"Scatter ({len(proc):,} points)")
        return fig.to_dict()

    def _figure_alpha_scatter(self, proc: PointSetProcessor, state: PlotState) -> dict:
        """Single-color scatter with translucent markers (alpha blending)."""
        x, y = proc.get_xy()
        fig = go.Figure()
        fig.add_trace(go.Scattergl(
            x=x, y=y,
            mode="markers",
            name="points",
            marker=dict(size=state.point_size, opacity=state.opacity, color="black"),
            hoverinfo="skip",
        ))
        self._layout(fig, state, f"Alpha-blended scatter (opacity={state.opacity:g})")
        return fig.to_dict()

    def _figure_binned(self, proc: PointSetProcessor, state: PlotState) -> dict:
        """Heatmap of a binned aggregate; absent cells stay transparent."""
        reduction = self._reduction_for(proc, state)
        grid = self._bin(proc, state, reduction)
        z, colorbar_title = self._color_values(grid.values, reduction, state)

        fig = go.Figure()
        fig.add_trace(go.Heatmap(
            x=grid.x_centers,
            y=grid.y_centers,
            z=z,
            customdata=grid.counts,
            colorscale=state.colorscale,
            colorbar=dict(title=colorbar_title),
            hovertemplate=(
                f"{state.xcol}=%{{x:.3g}}<br>{state.ycol}=%{{y:.3g}}<br>"
                f"{colorbar_title}=%{{z:.3g}}<br>points=%{{customdata}}<extra></extra>"
            ),
        ))
        bins_x, bins_y = state.bins_xy()
        self._layout(fig, state, f"Binned {reduction.value} ({bins_x} x {bins_y} cells)")
        return fig.to_dict()

    def _figure_density_contour(self, proc: PointSetProcessor, state: PlotState) -> dict:
        """KDE contour lines, optionally over the raw points."""
        x, y = proc.get_xy()
        table = density_contour_grid(
            x, y,
            n=state.contour_resolution,
            bandwidth=state.bandwidth,
            max_points=state.max_kde_points,
            seed=state.sample_seed,
        )
        xs, ys, z = contour_matrix(table)

        fig = go.Figure()
        if state.show_points:
            fig.add_trace(go.Scattergl(
                x=x, y=y,
                mode="markers",
                name="points",
                marker=dict(size=state.point_size, opacity=state.opacity, color="gray"),
                hoverinfo="skip",
            ))
        fig.add_trace(go.Contour(
            x=xs, y=ys, z=z,
            name="density",
            colorscale=state.colorscale,
            contours=dict(coloring="lines" if state.show_points else "fill"),
            colorbar=dict(title="density"),
        ))
        self._layout(fig, state, f"Density contours ({state.contour_resolution} x {state.contour_resolution} grid)")
        return fig.to_dict()

    def _figure_faceted_binned(self, proc: PointSetProcessor, state: PlotState) -> dict:
        """One heatmap per group on a shared grid and a shared color axis."""
        reduction = self._reduction_for(proc, state)
        bounds = proc.bounds()
        grids = bin_points_by_group(
            proc.df,
            bins=state.bins_xy(),
            group_col=proc.group_col,
            x_col=proc.x_col,
            y_col=proc.y_col,
            value_col=proc.value_col if reduction is not Reduction.COUNT else None,
            bounds=bounds,
            reduction=reduction,
            seed=state.sample_seed,
            input_shuffled=proc.is_shuffled,
        )
        labels = list(grids.keys())
        group_stats = proc.calculate_group_stats()
        n_cols = max(1, min(state.facet_columns, len(labels)))
        n_rows = max(1, math.ceil(len(labels) / n_cols))

        fig = make_subplots(
            rows=n_rows,
            cols=n_cols,
            shared_xaxes=True,
            shared_yaxes=True,
            subplot_titles=[
                f"{proc.group_col}={g} (n={int(group_stats.get(g, {}).get('count', 0))})" for g in labels
            ],
        )

        contour_by_group = {}
        if state.overlay_contour and labels:
            x, y = proc.get_xy()
            table = density_contour_grid(
                x, y,
                n=state.contour_resolution,
                bandwidth=state.bandwidth,
                bounds=bounds,
                groups=labels,
                max_points=state.max_kde_points,
                seed=state.sample_seed,
            )
            contour_by_group = {
                g: contour_matrix(sub) for g, sub in table.groupby("group", sort=False)
            }

        colorbar_title = reduction.value
        for i, (group_value, grid) in enumerate(grids.items()):
            row, col = divmod(i, n_cols)
            z, colorbar_title = self._color_values(grid.values, reduction, state)
            fig.add_trace(
                go.Heatmap(
                    x=grid.x_centers,
                    y=grid.y_centers,
                    z=z,
                    coloraxis="coloraxis",
                    name=f"{proc.group_col}={group_value}",
                ),
                row=row + 1,
                col=col + 1,
            )
            if group_value in contour_by_group:
                xs, ys, cz = contour_by_group[group_value]
                fig.add_trace(
                    go.Contour(
                        x=xs, y=ys, z=cz,
                        showscale=False,
                        contours=dict(coloring="none"),
                        line=dict(color=OVERLAY_CONTOUR_COLOR, width=1),
                        hoverinfo="skip",
                        name="all points",
                    ),
                    row=row + 1,
                    col=col + 1,
                )

        fig.update_layout(
            title=f"Binned {reduction.value} by {proc.group_col}",
            coloraxis=dict(colorscale=state.colorscale, colorbar=dict(title=colorbar_title)),
            margin=dict(l=40, r=20, t=60, b=40),
            showlegend=False,
            uirevision="keep",
        )
        return fig.to_dict()

    def _figure_rasterized(self, proc: PointSetProcessor, state: PlotState) -> dict:
        """Count raster produced by datashader, drawn as a heatmap."""
        import datashader as ds

        bins_x, bins_y = state.bins_xy()
        (xmin, xmax), (ymin, ymax) = proc.bounds()
        canvas = ds.Canvas(
            plot_width=bins_x,
            plot_height=bins_y,
            x_range=(xmin, xmax),
            y_range=(ymin, ymax),
        )
        agg = canvas.points(proc.df, proc.x_col, proc.y_col, agg=ds.count())
        counts = np.asarray(agg.values, dtype=float)
        counts[counts == 0] = np.nan
        z, colorbar_title = self._color_values(counts, Reduction.COUNT, state)

        fig = go.Figure()
        fig.add_trace(go.Heatmap(
            x=np.asarray(agg.coords[proc.x_col].values),
            y=np.asarray(agg.coords[proc.y_col].values),
            z=z,
            colorscale=state.colorscale,
            colorbar=dict(title=colorbar_title),
        ))
        self._layout(fig, state, f"Rasterized ({bins_x} x {bins_y} pixels)")
        return fig.to_dict()


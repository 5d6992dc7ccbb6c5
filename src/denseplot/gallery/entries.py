"""Gallery of overplotting strategies.

The ordered list of examples shown by the notebook and the gallery app,
each a PlotState plus a short commentary, and build_gallery() which samples
the points and renders every example that is allowed to run.

Examples marked ``large`` need tens of millions of points and only run when
``is_not_binder`` is set. Examples with ``requires`` only run when that
optional package is importable.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional

import pandas as pd

from denseplot.gallery.gallery_config import GalleryConfigData
from denseplot.points.figure_generator import FigureGenerator
from denseplot.points.plot_state import PlotState, PlotType
from denseplot.points.point_set import PointSetProcessor
from denseplot.points.sampler import DEFAULT_SPECS, sample_gaussian_mixture
from denseplot.utils.env import has_package
from denseplot.utils.logging import get_logger, log_elapsed

logger = get_logger(__name__)


@dataclass(frozen=True)
class GalleryEntry:
    """One example: a figure configuration and its commentary."""
    key: str
    title: str
    description: str
    state: PlotState
    large: bool = False
    requires: Optional[str] = None
    shuffle: bool = False


@dataclass
class RenderedEntry:
    entry: GalleryEntry
    figure: dict


@dataclass
class SkippedEntry:
    entry: GalleryEntry
    reason: str


@dataclass
class GalleryResult:
    rendered: list[RenderedEntry] = field(default_factory=list)
    skipped: list[SkippedEntry] = field(default_factory=list)


def default_entries() -> list[GalleryEntry]:
    """The example sequence, from raw scatter to rasterized aggregation."""
    return [
        GalleryEntry(
            key="scatter",
            title="Raw scatter",
            description=(
                "Every point drawn with full opacity, one color per cluster. "
                "Clusters drawn last hide the ones underneath, and the two tight "
                "clusters look no denser than the wide background cloud."
            ),
            state=PlotState(plot_type=PlotType.SCATTER, point_size=4),
        ),
        GalleryEntry(
            key="alpha_scatter",
            title="Alpha blending",
            description=(
                "Translucent markers let stacked points add up. Dense regions now "
                "look darker, but the opacity has to be tuned to the data: too low "
                "and sparse regions vanish, too high and dense regions saturate."
            ),
            state=PlotState(plot_type=PlotType.ALPHA_SCATTER, group_col=None, point_size=3, opacity=0.05),
        ),
        GalleryEntry(
            key="binned_linear",
            title="2D binning, linear color",
            description=(
                "Counting points per cell removes overplotting entirely. With a "
                "linear color scale, the tightest cluster takes the whole color "
                "range and everything else looks empty."
            ),
            state=PlotState(plot_type=PlotType.BINNED, log_color=False),
        ),
        GalleryEntry(
            key="binned_log",
            title="2D binning, log color",
            description=(
                "The same counts on a log scale show all five clusters at once. "
                "Empty cells are left blank rather than colored as zero."
            ),
            state=PlotState(plot_type=PlotType.BINNED, log_color=True),
        ),
        GalleryEntry(
            key="binned_mean",
            title="Mean of a per-point value",
            description=(
                "Cells colored by the mean cluster index of their points. Where "
                "clusters overlap the mean blends their labels."
            ),
            state=PlotState(plot_type=PlotType.BINNED, value_col="value", reduction="mean", colorscale="Turbo"),
        ),
        GalleryEntry(
            key="binned_sample",
            title="One random point per cell",
            description=(
                "Each cell shows the cluster of one of its points, drawn uniformly "
                "at random. Unlike the mean, colors never blend."
            ),
            state=PlotState(plot_type=PlotType.BINNED, value_col="value", reduction="sample", colorscale="Turbo"),
        ),
        GalleryEntry(
            key="binned_first_shuffled",
            title="First point per cell, shuffled input",
            description=(
                "Taking the first point of each cell is only a fair sample when "
                "the rows were shuffled first; this example shuffles explicitly."
            ),
            state=PlotState(plot_type=PlotType.BINNED, value_col="value", reduction="first", colorscale="Turbo"),
            shuffle=True,
        ),
        GalleryEntry(
            key="density_contour",
            title="Kernel density contours",
            description=(
                "A smoothed density estimate drawn as contours. Smoothing hides "
                "fine structure: the tight clusters blur into the bandwidth."
            ),
            state=PlotState(plot_type=PlotType.DENSITY_CONTOUR, show_points=True, opacity=0.05, point_size=2),
        ),
        GalleryEntry(
            key="faceted_binned",
            title="Binned counts per cluster",
            description=(
                "One panel per cluster on a shared grid and color scale, each "
                "overlaid with the contours of the full population for reference."
            ),
            state=PlotState(plot_type=PlotType.FACETED_BINNED, bins=80, overlay_contour=True),
        ),
        GalleryEntry(
            key="rasterized",
            title="Rasterized points",
            description="The same counts computed by datashader, one bin per pixel.",
            state=PlotState(plot_type=PlotType.RASTERIZED, bins=400),
            requires="datashader",
        ),
        GalleryEntry(
            key="binned_log_large",
            title="2D binning, 10 million points",
            description=(
                "Binning is linear in the number of points, so the same figure "
                "works for tens of millions of rows where a scatter cannot."
            ),
            state=PlotState(plot_type=PlotType.BINNED, log_color=True, bins=400),
            large=True,
        ),
        GalleryEntry(
            key="rasterized_large",
            title="Rasterized points, 10 million points",
            description="datashader aggregation of the large point set.",
            state=PlotState(plot_type=PlotType.RASTERIZED, bins=600),
            large=True,
            requires="datashader",
        ),
    ]


def skip_reason(entry: GalleryEntry, config: GalleryConfigData) -> Optional[str]:
    """Why an entry cannot run with this config, or None if it can."""
    if entry.large and not config.is_not_binder:
        return "memory-heavy example; set IS_NOT_BINDER=1 to run it"
    if entry.requires is not None and not has_package(entry.requires):
        return f"optional package {entry.requires!r} is not installed"
    return None


def apply_config(state: PlotState, config: GalleryConfigData) -> PlotState:
    """Fill seed and density defaults from config; bins only where left at default."""
    bins = config.bins if state.bins == PlotState().bins else state.bins
    return replace(
        state,
        bins=bins,
        sample_seed=config.seed,
        contour_resolution=config.contour_resolution,
        bandwidth=state.bandwidth if state.bandwidth is not None else config.bandwidth,
        max_kde_points=config.max_kde_points,
    )


def sample_points(config: GalleryConfigData, *, large: bool = False) -> pd.DataFrame:
    """Default five-cluster mixture with a value column."""
    n = config.n_points_large if large else config.n_points
    return sample_gaussian_mixture(DEFAULT_SPECS, n, seed=config.seed, with_value=True)


def build_gallery(
    config: Optional[GalleryConfigData] = None,
    entries: Optional[list[GalleryEntry]] = None,
) -> GalleryResult:
    """
    Render every runnable entry in order.

    Point sets are sampled once (the large one only if a large entry runs).
    An entry that fails is logged and reported as skipped; later entries
    still render.
    """
    config = config if config is not None else GalleryConfigData()
    entries = entries if entries is not None else default_entries()
    result = GalleryResult()
    processors: dict[tuple[bool, bool], PointSetProcessor] = {}

    for entry in entries:
        reason = skip_reason(entry, config)
        if reason is not None:
            logger.info(f"Skipping gallery entry {entry.key!r}: {reason}")
            result.skipped.append(SkippedEntry(entry, reason))
            continue

        try:
            proc_key = (entry.large, entry.shuffle)
            if proc_key not in processors:
                base_key = (entry.large, False)
                if base_key not in processors:
                    processors[base_key] = PointSetProcessor(
                        sample_points(config, large=entry.large), value_col="value"
                    )
                if entry.shuffle:
                    processors[proc_key] = processors[base_key].shuffled(config.seed)
            generator = FigureGenerator(processors[proc_key])
            with log_elapsed(logger, f"Gallery entry {entry.key!r}"):
                figure = generator.make_figure(apply_config(entry.state, config))
        except Exception as e:
            logger.exception(f"Gallery entry {entry.key!r} failed: {e}")
            result.skipped.append(SkippedEntry(entry, f"failed: {e}"))
            continue

        result.rendered.append(RenderedEntry(entry, figure))

    logger.info(
        f"Gallery built: {len(result.rendered)} rendered, {len(result.skipped)} skipped"
    )
    return result

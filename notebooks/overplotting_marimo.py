"""
Overplotting strategies — Marimo notebook

Walks through raw scatter, alpha blending, 2D binning, density contours and
group-faceted binning on a synthetic five-cluster point cloud, using the
denseplot gallery entries. Memory-heavy examples run only with IS_NOT_BINDER=1;
rasterized examples only when datashader is installed.

Run:
  uv run marimo edit notebooks/overplotting_marimo.py
  IS_NOT_BINDER=1 uv run marimo run notebooks/overplotting_marimo.py

Requires: pip install -e ".[notebook]"
"""

import marimo

__generated_with = "0.19.11"
app = marimo.App(width="medium")


@app.cell(hide_code=True)
def _():
    import marimo as mo
    import plotly.graph_objects as go

    from denseplot.gallery.entries import build_gallery, default_entries, sample_points
    from denseplot.gallery.gallery_config import GalleryConfig
    from denseplot.points.algorithms.binning import bin_points
    from denseplot.utils.logging import configure_logging

    configure_logging(level="INFO")
    return GalleryConfig, bin_points, build_gallery, default_entries, go, mo, sample_points


@app.cell
def _(GalleryConfig, mo):
    cfg = GalleryConfig.load().data
    mo.md(
        f"""
        ### Overplotting strategies

        {cfg.n_points:,} points per cluster, seed {cfg.seed}, {cfg.bins} bins per axis.
        Large examples: **{"on" if cfg.is_not_binder else "off"}** (`IS_NOT_BINDER`).
        """
    )
    return (cfg,)


@app.cell
def _(bin_points, cfg, mo, sample_points):
    # The binned aggregate underneath the heatmaps, as a table
    df = sample_points(cfg)
    grid = bin_points(df["x"], df["y"], bins=cfg.bins)
    mo.vstack(
        [
            mo.md(
                f"**{len(df):,}** points in **{grid.n_present:,}** non-empty cells "
                f"of {cfg.bins * cfg.bins:,}; counts sum to {int(grid.counts.sum()):,}."
            ),
            mo.ui.table(grid.to_frame().sort_values("count", ascending=False).head(20)),
        ],
        gap=1,
    )
    return


@app.cell
def _(build_gallery, cfg, default_entries):
    result = build_gallery(cfg, default_entries())
    return (result,)


@app.cell
def _(go, mo, result):
    mo.vstack(
        [
            mo.vstack(
                [
                    mo.md(f"#### {r.entry.title}\n\n{r.entry.description}"),
                    mo.ui.plotly(go.Figure(r.figure)),
                ],
                gap=1,
            )
            for r in result.rendered
        ],
        gap=2,
    )
    return


@app.cell
def _(mo, result):
    mo.md(
        "\n".join(
            ["#### Skipped examples", ""]
            + [f"- **{s.entry.title}**: {s.reason}" for s in result.skipped]
        )
        if result.skipped
        else ""
    )
    return


if __name__ == "__main__":
    app.run()

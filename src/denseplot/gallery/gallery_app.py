"""Gallery app: standalone NiceGUI page showing the overplotting examples.

Runs in native or web mode via env vars. Uses @ui.page("/") pattern.

Run:
    python -m denseplot.gallery.gallery_app

Env vars:
    DENSEPLOT_GUI_NATIVE: 1/0 (default 0)
    DENSEPLOT_GUI_RELOAD: 1/0 (default 0)
    IS_NOT_BINDER: 1/0, run the memory-heavy examples (default 0)
    HOST: bind host (default 127.0.0.1 native, 0.0.0.0 web)
    PORT: bind port (default find_open_port native, 8080 web)
"""

from __future__ import annotations

import multiprocessing as mp
import os
from multiprocessing import freeze_support

from nicegui import ui

from denseplot.gallery.entries import GalleryResult, build_gallery
from denseplot.gallery.gallery_config import GalleryConfig
from denseplot.utils.env import env_bool, env_int
from denseplot.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

TITLE = "Overplotting strategies"


def render_gallery(result: GalleryResult) -> None:
    """Add one card per rendered entry, then a list of skipped entries."""
    for rendered in result.rendered:
        with ui.card().classes("w-full"):
            ui.label(rendered.entry.title).classes("text-lg font-bold")
            ui.markdown(rendered.entry.description)
            ui.plotly(rendered.figure).classes("w-full h-96")

    if result.skipped:
        with ui.expansion(f"Skipped examples ({len(result.skipped)})").classes("w-full"):
            for skipped in result.skipped:
                ui.label(f"{skipped.entry.title}: {skipped.reason}")


# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------

@ui.page("/")
def home() -> None:
    """Home page: every gallery entry in order."""
    ui.page_title(TITLE)
    with ui.column().classes("w-full max-w-5xl mx-auto gap-4 p-4"):
        ui.label(TITLE).classes("text-2xl")
        cfg = GalleryConfig.load()
        render_gallery(build_gallery(cfg.data))


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(*, reload: bool | None = None, native_bool: bool | None = None) -> None:
    """Start the gallery application.

    Env vars (used when arg is None):
      - DENSEPLOT_GUI_NATIVE: 1/0
      - DENSEPLOT_GUI_RELOAD: 1/0
      - HOST: bind host
      - PORT: bind port
    """
    configure_logging()

    native_bool = env_bool("DENSEPLOT_GUI_NATIVE", False) if native_bool is None else native_bool
    reload = env_bool("DENSEPLOT_GUI_RELOAD", False) if reload is None else reload

    if native_bool:
        from nicegui import native as native_module
        port = env_int("PORT", native_module.find_open_port())
    else:
        port = env_int("PORT", 8080)

    default_host = "127.0.0.1" if native_bool else "0.0.0.0"
    host = os.getenv("HOST", default_host)

    logger.info(
        "Starting gallery app: port=%s reload=%s native=%s",
        port,
        reload,
        native_bool,
    )

    run_kwargs: dict = {
        "host": host,
        "port": port,
        "reload": reload,
        "native": native_bool,
        "title": TITLE,
    }
    if native_bool:
        run_kwargs["window_size"] = (1200, 800)
    ui.run(**run_kwargs)


if __name__ == "__main__":
    freeze_support()
    if mp.current_process().name == "MainProcess":
        main()
    else:
        logger.debug("Skipping GUI startup in worker process: %s", mp.current_process().name)

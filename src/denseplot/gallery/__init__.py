"""Gallery of overplotting strategies: example sequence, config and app."""

from denseplot.gallery.entries import (
    GalleryEntry,
    GalleryResult,
    build_gallery,
    default_entries,
)
from denseplot.gallery.gallery_config import GalleryConfig, GalleryConfigData

__all__ = [
    "GalleryConfig",
    "GalleryConfigData",
    "GalleryEntry",
    "GalleryResult",
    "build_gallery",
    "default_entries",
]

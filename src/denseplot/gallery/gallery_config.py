"""
Gallery config persistence for denseplot (platformdirs + JSON).

Persisted items (schema v1):
- sample sizes, seed, binning and density defaults
- is_not_binder: allow the memory-heavy examples

Behavior:
- If config file missing or unreadable -> defaults are used
- If schema_version mismatches:
  - default: reset to defaults
  - optional: keep loaded but update version
- Unknown keys in loaded JSON are ignored with warnings
- IS_NOT_BINDER in the environment overrides the stored is_not_binder
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from platformdirs import user_config_dir

from denseplot.utils.env import is_not_binder, parse_bool
from denseplot.utils.logging import get_logger

logger = get_logger(__name__)

# Increment when you make a breaking change to the on-disk JSON schema.
SCHEMA_VERSION: int = 1

_INT_FIELDS = ("n_points", "n_points_large", "seed", "bins", "contour_resolution", "max_kde_points")


@dataclass
class GalleryConfigData:
    """
    JSON-serializable config payload.

    n_points and n_points_large are per cluster; with the five default
    clusters n_points_large = 2_000_000 gives 10 million points.
    """
    schema_version: int = SCHEMA_VERSION
    n_points: int = 20_000
    n_points_large: int = 2_000_000
    seed: int = 0
    bins: int = 200
    contour_resolution: int = 100
    bandwidth: Optional[float] = None
    max_kde_points: int = 20_000
    is_not_binder: bool = False

    def to_json_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "schema_version": self.schema_version,
            "n_points": self.n_points,
            "n_points_large": self.n_points_large,
            "seed": self.seed,
            "bins": self.bins,
            "contour_resolution": self.contour_resolution,
            "bandwidth": self.bandwidth,
            "max_kde_points": self.max_kde_points,
            "is_not_binder": self.is_not_binder,
        }

    @classmethod
    def from_json_dict(cls, d: Dict[str, Any]) -> "GalleryConfigData":
        """
        Tolerant loader:
        - ignores unknown keys
        - missing or malformed values fall back to defaults
        """
        defaults = cls()
        try:
            version = int(d.get("schema_version", -1))
        except (TypeError, ValueError):
            logger.warning(f"Invalid schema_version={d['schema_version']!r} in gallery config")
            version = -1
        kwargs: Dict[str, Any] = {"schema_version": version}

        for key in _INT_FIELDS:
            if key not in d:
                continue
            try:
                v = int(d[key])
            except (TypeError, ValueError):
                logger.warning(f"Invalid {key}={d[key]!r} in gallery config, using default")
                continue
            if v <= 0 and key != "seed":
                logger.warning(f"Non-positive {key}={v} in gallery config, using default")
                continue
            kwargs[key] = v

        if "bandwidth" in d and d["bandwidth"] is not None:
            try:
                bw = float(d["bandwidth"])
                if bw > 0:
                    kwargs["bandwidth"] = bw
                else:
                    logger.warning(f"Non-positive bandwidth={bw} in gallery config, using default")
            except (TypeError, ValueError):
                logger.warning(f"Invalid bandwidth={d['bandwidth']!r} in gallery config, using default")

        if "is_not_binder" in d:
            flag = parse_bool(d["is_not_binder"])
            if flag is None:
                logger.warning(f"Invalid is_not_binder={d['is_not_binder']!r} in gallery config, using default")
            else:
                kwargs["is_not_binder"] = flag

        known_keys = set(defaults.to_json_dict().keys())
        for key in d.keys():
            if key not in known_keys:
                logger.warning(f"Unknown key '{key}' in gallery config, ignoring")

        return cls(**kwargs)


class GalleryConfig:
    """
    Manager for loading/saving GalleryConfigData to disk.
    """

    def __init__(self, *, path: Path, data: Optional[GalleryConfigData] = None):
        self.path = path
        self.data = data if data is not None else GalleryConfigData()

    # -----------------------------
    # Construction / persistence
    # -----------------------------
    @staticmethod
    def default_config_path(
        app_name: str = "denseplot",
        filename: str = "gallery_config.json",
        app_author: str | None = None,
    ) -> Path:
        """
        Determine OS-appropriate per-user config path.

        macOS:   ~/Library/Application Support/denseplot/gallery_config.json
        Linux:   ~/.config/denseplot/gallery_config.json
        Windows: %APPDATA%\\denseplot\\gallery_config.json
        """
        d = Path(user_config_dir(app_name, app_author))
        d.mkdir(parents=True, exist_ok=True)
        return d / filename

    @classmethod
    def load(
        cls,
        *,
        config_path: Optional[Path] = None,
        app_name: str = "denseplot",
        filename: str = "gallery_config.json",
        app_author: str | None = None,
        schema_version: int = SCHEMA_VERSION,
        reset_on_version_mismatch: bool = True,
        create_if_missing: bool = False,
        apply_env: bool = True,
    ) -> "GalleryConfig":
        """
        Load config from disk.

        If file doesn't exist or is unreadable -> defaults.
        If schema mismatch:
          - reset_on_version_mismatch=True -> defaults
          - else -> keep loaded but overwrite schema_version

        If create_if_missing=True and file is missing -> immediately write defaults.
        If apply_env=True, IS_NOT_BINDER (when set) overrides is_not_binder.
        """
        path = config_path or cls.default_config_path(app_name=app_name, filename=filename, app_author=app_author)
        cfg = cls._load_file(
            path,
            schema_version=schema_version,
            reset_on_version_mismatch=reset_on_version_mismatch,
            create_if_missing=create_if_missing,
        )
        if apply_env:
            cfg.data.is_not_binder = is_not_binder(default=cfg.data.is_not_binder)
        return cfg

    @classmethod
    def _load_file(
        cls,
        path: Path,
        *,
        schema_version: int,
        reset_on_version_mismatch: bool,
        create_if_missing: bool,
    ) -> "GalleryConfig":
        default_data = GalleryConfigData(schema_version=schema_version)

        if not path.exists():
            cfg = cls(path=path, data=default_data)
            if create_if_missing:
                cfg.save()
            return cfg

        try:
            parsed = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to read gallery config at {path}: {e}, using defaults")
            return cls(path=path, data=default_data)

        if not isinstance(parsed, dict):
            logger.warning(f"Gallery config file at {path} does not contain a dict, using defaults")
            return cls(path=path, data=default_data)

        loaded = GalleryConfigData.from_json_dict(parsed)

        if int(loaded.schema_version) != int(schema_version):
            if reset_on_version_mismatch:
                logger.warning(
                    f"Gallery config schema version mismatch: loaded={loaded.schema_version}, "
                    f"expected={schema_version}, resetting to defaults"
                )
                return cls(path=path, data=default_data)
            loaded.schema_version = schema_version

        return cls(path=path, data=loaded)

    def save(self) -> None:
        """Write config JSON to disk, creating parent directories."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(self.data.to_json_dict(), indent=2, sort_keys=True)
        self.path.write_text(payload, encoding="utf-8")
        logger.debug(f"Saved gallery config to {self.path}")

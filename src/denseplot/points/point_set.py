"""Point table processing for dense scatter plotting.

This module provides the PointSetProcessor class for validating a point
table and extracting what the figure generator needs (coordinates, values,
groups, bounds, per-group statistics), separating data handling from
plotting concerns.
"""

from __future__ import annotations

from typing import Optional

import numpy as np
import pandas as pd

from denseplot.points.algorithms.binning import Bounds, data_bounds
from denseplot.utils.logging import get_logger

logger = get_logger(__name__)


class PointSetProcessor:
    """Validates and slices a point table.

    The table holds one row per point. Row order only matters for rendering
    order and for the "first" binning reduction; ``is_shuffled`` records
    whether the order was randomized by ``shuffled()``.

    Attributes:
        df: The point table.
        x_col: Column with x coordinates.
        y_col: Column with y coordinates.
        group_col: Column with group labels, or None.
        value_col: Column with the per-point scalar, or None.
        is_shuffled: True if rows were put in random order by shuffled().
    """

    def __init__(
        self,
        df: pd.DataFrame,
        *,
        x_col: str = "x",
        y_col: str = "y",
        group_col: Optional[str] = "group",
        value_col: Optional[str] = None,
        is_shuffled: bool = False,
    ) -> None:
        """Initialize PointSetProcessor with a point table and column names.

        Raises:
            ValueError: If a named column is missing or x/y are not numeric.
        """
        self.df = df
        self.x_col = x_col
        self.y_col = y_col
        self.group_col = group_col
        self.value_col = value_col
        self.is_shuffled = is_shuffled

        for col in (x_col, y_col):
            if col not in df.columns:
                raise ValueError(f"df must contain coordinate column {col!r}")
            if getattr(df[col].dtype, "kind", None) not in {"i", "u", "f"}:
                raise ValueError(f"coordinate column {col!r} must be numeric")
        if group_col is not None and group_col not in df.columns:
            raise ValueError(f"df must contain group column {group_col!r}")
        if value_col is not None and value_col not in df.columns:
            raise ValueError(f"df must contain value column {value_col!r}")

    def __len__(self) -> int:
        return len(self.df)

    def shuffled(self, seed: int) -> "PointSetProcessor":
        """Return a new processor over a seeded random permutation of the rows."""
        order = np.random.default_rng(seed).permutation(len(self.df))
        df_s = self.df.iloc[order].reset_index(drop=True)
        logger.debug(f"shuffled {len(df_s)} rows (seed={seed})")
        return PointSetProcessor(
            df_s,
            x_col=self.x_col,
            y_col=self.y_col,
            group_col=self.group_col,
            value_col=self.value_col,
            is_shuffled=True,
        )

    def get_group_values(self) -> list[str]:
        """Sorted unique group labels as strings (empty if no group column)."""
        if self.group_col is None:
            return []
        s = self.df[self.group_col].dropna()
        return [str(v) for v in sorted(s.unique().tolist())]

    def filter_by_group(self, group_value: object) -> pd.DataFrame:
        """Rows whose group label matches, compared as strings."""
        if self.group_col is None:
            raise ValueError("no group column configured")
        return self.df[self.df[self.group_col].astype(str) == str(group_value)]

    def get_xy(self, df_f: Optional[pd.DataFrame] = None) -> tuple[np.ndarray, np.ndarray]:
        """Float x and y arrays of df_f (defaults to the whole table)."""
        if df_f is None:
            df_f = self.df
        x = pd.to_numeric(df_f[self.x_col], errors="coerce").to_numpy(dtype=float)
        y = pd.to_numeric(df_f[self.y_col], errors="coerce").to_numpy(dtype=float)
        return x, y

    def get_values(self, df_f: Optional[pd.DataFrame] = None) -> Optional[np.ndarray]:
        """Float value array of df_f, or None when no value column is set."""
        if self.value_col is None:
            return None
        if df_f is None:
            df_f = self.df
        return pd.to_numeric(df_f[self.value_col], errors="coerce").to_numpy(dtype=float)

    def bounds(self) -> Bounds:
        """((xmin, xmax), (ymin, ymax)) of the finite points in the table."""
        x, y = self.get_xy()
        return data_bounds(x, y)

    def calculate_group_stats(self) -> dict[str, dict[str, float]]:
        """Count plus mean and sample std of x and y within each group.

        Returns:
            Dictionary mapping group label (as string) to a dict with keys
            ``count``, ``x_mean``, ``x_std``, ``y_mean``, ``y_std``. std is 0.0
            for single-point groups.
        """
        if self.group_col is None:
            return {}
        x, y = self.get_xy()
        tmp = pd.DataFrame({
            "x": x,
            "y": y,
            "g": self.df[self.group_col].astype(str).to_numpy(),
        }).dropna(subset=["x", "y"])

        stats: dict[str, dict[str, float]] = {}
        for group_value, sub in tmp.groupby("g", sort=True):
            n = len(sub)
            stats[str(group_value)] = {
                "count": float(n),
                "x_mean": float(sub["x"].mean()),
                "x_std": float(sub["x"].std(ddof=1)) if n > 1 else 0.0,
                "y_mean": float(sub["y"].mean()),
                "y_std": float(sub["y"].std(ddof=1)) if n > 1 else 0.0,
            }
        return stats

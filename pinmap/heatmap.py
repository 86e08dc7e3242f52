# pinmap/heatmap.py
"""Grid-based heat map of post activity.

Posts are bucketed on a 1/1000 degree grid (~111 m). Each cell reports its
mean coordinate, post count, an engagement intensity in [0, 1] and a radius
that grows with the number of posts.
"""
from __future__ import annotations

from typing import List

import numpy as np
import pandas as pd
from loguru import logger

from pinmap import config
from pinmap.coord_utils import _to_float_series
from pinmap.geo import valid_mask
from pinmap.models import Coordinate, HeatMapPoint


def heat_intensity(post_count: int, total_likes: int, total_comments: int) -> float:
    w = config.HEAT_WEIGHTS
    raw = post_count * w["posts"] + total_likes * w["likes"] + total_comments * w["comments"]
    return min(1.0, raw / config.HEAT_NORMALIZER)


def heat_radius_m(post_count: int) -> float:
    return max(config.HEAT_MIN_RADIUS_M, post_count * config.HEAT_RADIUS_PER_POST_M)


def generate_heat_map(df: pd.DataFrame, lat_col: str = "latitude", lon_col: str = "longitude",
                      likes_col: str = "likes_count", comments_col: str = "comments_count") -> List[HeatMapPoint]:
    """Return one HeatMapPoint per occupied grid cell, ordered by cell key."""
    if not isinstance(df, pd.DataFrame) or df.empty:
        return []

    cells = pd.DataFrame({
        "lat": _to_float_series(df[lat_col]).to_numpy(),
        "lon": _to_float_series(df[lon_col]).to_numpy(),
        "likes": _count_column(df, likes_col),
        "comments": _count_column(df, comments_col),
    })
    ok = valid_mask(cells["lat"], cells["lon"])
    if not ok.all():
        logger.warning(f"generate_heat_map: skipping {int((~ok).sum())} post(s) with invalid coordinates")
    cells = cells[ok].copy()
    if cells.empty:
        return []

    # truncate toward zero; the cells at key 0 are twice as wide
    p = config.HEAT_GRID_PRECISION
    cells["lat_key"] = np.trunc(cells["lat"] * p).astype(int)
    cells["lon_key"] = np.trunc(cells["lon"] * p).astype(int)

    grouped = cells.groupby(["lat_key", "lon_key"], sort=True).agg(
        lat=("lat", "mean"),
        lon=("lon", "mean"),
        post_count=("lat", "size"),
        likes=("likes", "sum"),
        comments=("comments", "sum"),
    )

    points = []
    for row in grouped.itertuples(index=False):
        count = int(row.post_count)
        points.append(HeatMapPoint(
            center=Coordinate(float(row.lat), float(row.lon)),
            intensity=heat_intensity(count, int(row.likes), int(row.comments)),
            post_count=count,
            radius_m=heat_radius_m(count),
        ))
    logger.debug(f"generate_heat_map: {len(cells)} post(s) -> {len(points)} cell(s)")
    return points


def _count_column(df: pd.DataFrame, col: str) -> np.ndarray:
    if col not in df.columns:
        return np.zeros(len(df), dtype=int)
    return pd.to_numeric(df[col], errors="coerce").fillna(0).astype(int).to_numpy()

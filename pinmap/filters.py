# pinmap/filters.py
# Post filters applied before clustering / heat map generation.
# Works on a DataFrame of posts; expected columns (names configurable on MapFilters):
#   latitude, longitude, created_at, tags, rating, author_id

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple

import numpy as np
import pandas as pd
from loguru import logger

from pinmap import config
from pinmap.coord_utils import _to_float_series
from pinmap.geo import distances_from, valid_mask

AUTHOR_SCOPES = ("all", "friends", "following", "none")


@dataclass
class MapFilters:
    author_scope: str = "all"
    friend_ids: FrozenSet[str] = frozenset()
    user_location: Optional[Tuple[float, float]] = None
    max_distance_km: float = config.DEFAULT_MAX_DISTANCE_KM
    time_filter: str = "all_time"
    categories: FrozenSet[str] = frozenset()
    minimum_rating: float = 0.0

    lat_col: str = "latitude"
    lon_col: str = "longitude"
    created_col: str = "created_at"
    tags_col: str = "tags"
    rating_col: str = "rating"
    author_col: str = "author_id"

    def __post_init__(self):
        if self.author_scope not in AUTHOR_SCOPES:
            raise ValueError(f"author_scope must be one of {AUTHOR_SCOPES}, got {self.author_scope!r}")
        if self.time_filter.lower() not in config.TIME_WINDOWS:
            raise ValueError(f"unknown time filter: {self.time_filter!r}")
        self.friend_ids = frozenset(str(f) for f in self.friend_ids)
        if isinstance(self.categories, str):
            self.categories = {self.categories}
        self.categories = frozenset(c.lower() for c in self.categories)


# ─────────────────────────────────────────────────────────────────────────────
# Masks
# ─────────────────────────────────────────────────────────────────────────────

def author_mask(df: pd.DataFrame, f: MapFilters) -> pd.Series:
    if f.author_scope in ("all", "following"):
        # the following feed only ever contains followed authors
        return pd.Series(True, index=df.index)
    if f.author_scope == "none":
        return pd.Series(False, index=df.index)
    authors = df[f.author_col].astype(str)
    return authors.isin(f.friend_ids) & df[f.author_col].notna()


def distance_mask(df: pd.DataFrame, f: MapFilters) -> pd.Series:
    if f.user_location is None or f.max_distance_km >= config.UNLIMITED_DISTANCE_KM:
        return pd.Series(True, index=df.index)
    lats = _to_float_series(df[f.lat_col]).to_numpy(dtype=float)
    lons = _to_float_series(df[f.lon_col]).to_numpy(dtype=float)
    ok = valid_mask(lats, lons)
    user_lat, user_lon = f.user_location
    with np.errstate(invalid="ignore"):
        km = distances_from(user_lat, user_lon, lats, lons) / 1000.0
        keep = ok & (km <= f.max_distance_km)
    return pd.Series(keep, index=df.index)


def time_mask(df: pd.DataFrame, f: MapFilters, now=None) -> pd.Series:
    now = pd.Timestamp.now(tz="UTC") if now is None else pd.Timestamp(now)
    since = config.get_time_window(f.time_filter, now)
    if since is None:
        return pd.Series(True, index=df.index)
    created = _to_timestamps(df[f.created_col], now.tz)
    keep = created >= since
    if f.time_filter.lower() == "today":
        keep &= created < since + pd.Timedelta(days=1)
    return keep.fillna(False).astype(bool)


def category_mask(df: pd.DataFrame, f: MapFilters) -> pd.Series:
    if not f.categories:
        return pd.Series(True, index=df.index)

    def _matches(tags):
        if not isinstance(tags, (list, tuple, set, frozenset, np.ndarray)):
            return False
        return not f.categories.isdisjoint(str(t).lower() for t in tags)

    return df[f.tags_col].apply(_matches).astype(bool)


def rating_mask(df: pd.DataFrame, f: MapFilters) -> pd.Series:
    if f.minimum_rating <= 0.0:
        return pd.Series(True, index=df.index)
    ratings = pd.to_numeric(df[f.rating_col], errors="coerce")
    # posts without a rating never pass a minimum
    return (ratings >= f.minimum_rating).fillna(False).astype(bool)


def _to_timestamps(s: pd.Series, tz) -> pd.Series:
    """Parse created_at values: epoch milliseconds (backend) or ISO-8601 strings."""
    if pd.api.types.is_numeric_dtype(s):
        ts = pd.to_datetime(s, unit="ms", errors="coerce", utc=True)
    else:
        ts = pd.to_datetime(s, errors="coerce", utc=True, format="ISO8601")
    if tz is None:
        return ts.dt.tz_convert(None)
    return ts.dt.tz_convert(tz)


# ─────────────────────────────────────────────────────────────────────────────
# Main API
# ─────────────────────────────────────────────────────────────────────────────

def apply_filters(df: pd.DataFrame, filters: MapFilters, now=None) -> pd.DataFrame:
    """Rows of ``df`` passing author, distance, time, category and rating filters.

    Returns a copy; the index is preserved.
    """
    if not isinstance(df, pd.DataFrame):
        return pd.DataFrame()
    if df.empty:
        return df.copy()

    keep = author_mask(df, filters)
    keep &= distance_mask(df, filters)
    keep &= time_mask(df, filters, now=now)
    keep &= category_mask(df, filters)
    keep &= rating_mask(df, filters)

    out = df[keep].copy()
    logger.debug(f"apply_filters: {len(df)} -> {len(out)} post(s)")
    return out

# pinmap/coord_utils.py
# Input conversion for pinmap
# - Builds GeoPoints from backend records or DataFrames
# - Skip-and-continue policy for NaN / infinite / out-of-range coordinates
# - Camera region framing a set of coordinates
# - Viewport selection (shapely box, boundary inclusive)

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

import pandas as pd
from loguru import logger
from shapely.geometry import Point, box
from shapely.prepared import prep

from pinmap import config
from pinmap.geo import check_coordinate, is_valid_coordinate
from pinmap.models import Coordinate, GeoPoint, MapRegion

# ─────────────────────────────────────────────────────────────────────────────
# Parsing
# ─────────────────────────────────────────────────────────────────────────────


def _to_float_series(s: pd.Series) -> pd.Series:
    """
    Robust numeric coercion:
    - accepts comma decimal separators
    - strips spaces
    - returns NaN for non-numeric
    """
    return pd.to_numeric(
        s.astype(str).str.strip().str.replace(',', '.', regex=False),
        errors="coerce"
    )


def _to_float(val) -> float:
    try:
        return float(str(val).strip().replace(',', '.'))
    except (TypeError, ValueError):
        return float("nan")


def _to_weight(val) -> int:
    if val is None:
        return 0
    num = pd.to_numeric(str(val).strip(), errors="coerce")
    if pd.isna(num):
        return 0
    return int(num)


def make_point(id, latitude, longitude, weight=0, strict=False) -> GeoPoint:
    """Build a GeoPoint.

    With ``strict=True`` an invalid coordinate raises InvalidCoordinateError;
    otherwise the point is returned as-is and ``split_valid`` decides later.
    """
    lat, lon = _to_float(latitude), _to_float(longitude)
    if strict:
        lat, lon = check_coordinate(lat, lon)
    return GeoPoint(id=str(id), latitude=lat, longitude=lon, weight=_to_weight(weight))


def points_from_records(records: Iterable[dict], id_key="id", lat_key="latitude",
                        lon_key="longitude", weight_key="likes_count") -> List[GeoPoint]:
    """GeoPoints from backend post dicts.

    Posts may carry their location flat or under a ``location`` dict. Posts
    without any location get NaN coordinates and are dropped by ``split_valid``.
    """
    points = []
    for rec in records:
        loc = rec.get("location") or rec
        points.append(make_point(
            rec.get(id_key),
            loc.get(lat_key),
            loc.get(lon_key),
            rec.get(weight_key, 0),
        ))
    return points


def points_from_frame(df: pd.DataFrame, id_col="id", lat_col="latitude",
                      lon_col="longitude", weight_col=None) -> List[GeoPoint]:
    """GeoPoints from a DataFrame, one per row, in row order.

    Without ``id_col`` in the frame the row index is used as the id.
    """
    if not isinstance(df, pd.DataFrame) or df.empty:
        return []
    lats = _to_float_series(df[lat_col])
    lons = _to_float_series(df[lon_col])
    ids = df[id_col].astype(str) if id_col in df.columns else df.index.astype(str)
    if weight_col and weight_col in df.columns:
        weights = pd.to_numeric(df[weight_col], errors="coerce").fillna(0).astype(int)
    else:
        weights = [0] * len(df)
    return [
        GeoPoint(id=i, latitude=float(lat), longitude=float(lon), weight=int(w))
        for i, lat, lon, w in zip(ids, lats, lons, weights)
    ]


# ─────────────────────────────────────────────────────────────────────────────
# Validation
# ─────────────────────────────────────────────────────────────────────────────

def split_valid(points: Iterable[GeoPoint]) -> Tuple[List[GeoPoint], List[GeoPoint]]:
    """Return (valid, skipped), both in input order."""
    valid, skipped = [], []
    for p in points:
        (valid if is_valid_coordinate(p.latitude, p.longitude) else skipped).append(p)
    if skipped:
        logger.warning(
            f"Skipping {len(skipped)} point(s) with invalid coordinates: "
            f"{[p.id for p in skipped[:5]]}{'...' if len(skipped) > 5 else ''}"
        )
    return valid, skipped


# ─────────────────────────────────────────────────────────────────────────────
# Regions
# ─────────────────────────────────────────────────────────────────────────────

def calculate_region(coords: Sequence) -> MapRegion:
    """Region framing every coordinate with 20% padding.

    ``coords`` holds Coordinates, GeoPoints, Clusters or (lat, lon) pairs.
    Empty input gives the default region.
    """
    pairs = [_lat_lon(c) for c in coords]
    pairs = [(lat, lon) for lat, lon in pairs if is_valid_coordinate(lat, lon)]
    if not pairs:
        lat, lon = config.DEFAULT_CENTER
        return MapRegion(Coordinate(lat, lon), config.DEFAULT_SPAN, config.DEFAULT_SPAN)

    lats = [p[0] for p in pairs]
    lons = [p[1] for p in pairs]
    min_lat, max_lat = min(lats), max(lats)
    min_lon, max_lon = min(lons), max(lons)
    return MapRegion(
        center=Coordinate((min_lat + max_lat) / 2, (min_lon + max_lon) / 2),
        latitude_delta=max(config.MIN_SPAN, (max_lat - min_lat) * config.SPAN_PADDING),
        longitude_delta=max(config.MIN_SPAN, (max_lon - min_lon) * config.SPAN_PADDING),
    )


def _lat_lon(c) -> Tuple[float, float]:
    if hasattr(c, "center"):
        c = c.center
    elif hasattr(c, "coordinate"):
        c = c.coordinate
    if hasattr(c, "latitude"):
        return c.latitude, c.longitude
    lat, lon = c
    return lat, lon


def points_in_viewport(points: Iterable[GeoPoint], bounds) -> List[GeoPoint]:
    """Points inside ``bounds`` = (min_lon, max_lon, min_lat, max_lat), edges included."""
    min_lon, max_lon, min_lat, max_lat = bounds
    if min_lon > max_lon or min_lat > max_lat:
        raise ValueError(f"degenerate viewport bounds: {bounds!r}")
    area = prep(box(min_lon, min_lat, max_lon, max_lat))
    inside = [
        p for p in points
        if is_valid_coordinate(p.latitude, p.longitude)
        and area.covers(Point(p.longitude, p.latitude))
    ]
    logger.debug(f"Viewport {bounds}: kept {len(inside)} point(s)")
    return inside

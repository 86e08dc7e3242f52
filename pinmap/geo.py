# pinmap/geo.py
"""Great-circle helpers. Every function accepts scalars or numpy arrays."""
from __future__ import annotations

import numpy as np

EARTH_R_M = 6371008.8


class InvalidCoordinateError(ValueError):
    """Latitude/longitude that is not finite or out of range."""


def haversine_m(lat1, lon1, lat2, lon2):
    """Distance in meters between (lat1, lon1) and (lat2, lon2), given in degrees."""
    lat1, lon1, lat2, lon2 = map(np.radians, (lat1, lon1, lat2, lon2))
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = np.sin(dlat / 2) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlon / 2) ** 2
    a = np.minimum(a, 1.0)  # rounding can push antipodal pairs past 1
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    return EARTH_R_M * c


def distances_from(lat, lon, lats, lons) -> np.ndarray:
    """Meters from one origin to each of ``lats``/``lons``."""
    lats = np.asarray(lats, dtype=float)
    lons = np.asarray(lons, dtype=float)
    return np.asarray(haversine_m(lat, lon, lats, lons), dtype=float)


def is_valid_coordinate(lat, lon) -> bool:
    try:
        lat = float(lat)
        lon = float(lon)
    except (TypeError, ValueError):
        return False
    if not (np.isfinite(lat) and np.isfinite(lon)):
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0


def valid_mask(lats, lons) -> np.ndarray:
    """Vectorised ``is_valid_coordinate``."""
    lats = np.asarray(lats, dtype=float)
    lons = np.asarray(lons, dtype=float)
    with np.errstate(invalid="ignore"):
        return (
            np.isfinite(lats) & np.isfinite(lons)
            & (np.abs(lats) <= 90.0) & (np.abs(lons) <= 180.0)
        )


def check_coordinate(lat, lon):
    """Return (lat, lon) as floats or raise InvalidCoordinateError."""
    if not is_valid_coordinate(lat, lon):
        raise InvalidCoordinateError(f"invalid coordinate: ({lat!r}, {lon!r})")
    return float(lat), float(lon)

# pinmap/models.py
"""Value types shared by the clustering, heat map and region helpers.

All of them are frozen dataclasses: a clustering pass builds new objects and
never mutates its input.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class GeoPoint:
    """A geotagged post as handed to the clusterer. ``weight`` is its likes count."""
    id: str
    latitude: float
    longitude: float
    weight: int = 0

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)


@dataclass(frozen=True)
class Cluster:
    """Points grouped around a seed.

    ``members`` keeps discovery order, so ``members[0]`` is the seed.
    ``center`` is the centroid of all members, not the seed position.
    """
    center: Coordinate
    members: Tuple[GeoPoint, ...]
    total_weight: int

    @property
    def count(self) -> int:
        return len(self.members)

    @property
    def is_singleton(self) -> bool:
        return len(self.members) == 1

    @property
    def seed(self) -> GeoPoint:
        return self.members[0]

    @property
    def ids(self) -> Tuple[str, ...]:
        return tuple(p.id for p in self.members)

    @property
    def representative(self) -> GeoPoint:
        # most liked post; first one wins on ties
        return max(self.members, key=lambda p: p.weight)


@dataclass(frozen=True)
class HeatMapPoint:
    center: Coordinate
    intensity: float  # 0.0 .. 1.0
    post_count: int
    radius_m: float

    @property
    def display_radius_m(self) -> float:
        return self.radius_m * (0.5 + self.intensity * 0.5)


@dataclass(frozen=True)
class MapRegion:
    center: Coordinate
    latitude_delta: float
    longitude_delta: float

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """(min_lon, max_lon, min_lat, max_lat), the same order as ``set_extent``."""
        half_lat = self.latitude_delta / 2.0
        half_lon = self.longitude_delta / 2.0
        return (
            self.center.longitude - half_lon,
            self.center.longitude + half_lon,
            self.center.latitude - half_lat,
            self.center.latitude + half_lat,
        )

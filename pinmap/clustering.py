# pinmap/clustering.py
"""Greedy geographic clustering of map pins (no sklearn).

Usage (minimal):

from pinmap.clustering import cluster

clusters = cluster(points, radius_m=402.336)
# each Cluster carries center, members (seed first) and total_weight

Seed-only greedy pass: a point joins a cluster only if it lies within
``radius_m`` of that cluster's *seed*. Points near another member but not
near the seed start their own cluster, so the output depends on input order.
This is O(n^2) and meant for per-viewport sets of tens to a few hundred
points; cap the input upstream for anything larger.
"""
from __future__ import annotations

import math
from typing import Dict, Iterable, List, Sequence, Tuple

import pandas as pd
from loguru import logger

from pinmap.config import CLUSTER_RADIUS_M, MAP_CLUSTER_RADIUS_M
from pinmap.coord_utils import _to_float_series, split_valid
from pinmap.geo import haversine_m, valid_mask
from pinmap.models import Cluster, Coordinate, GeoPoint


class InvalidRadiusError(ValueError):
    """Radius that is negative, NaN or infinite."""


def _check_radius(radius_m) -> float:
    try:
        r = float(radius_m)
    except (TypeError, ValueError):
        raise InvalidRadiusError(f"radius must be a number, got {radius_m!r}") from None
    if not math.isfinite(r) or r < 0:
        raise InvalidRadiusError(f"radius must be finite and >= 0, got {radius_m!r}")
    return r


def _greedy_groups(lats: Sequence[float], lons: Sequence[float], radius_m: float) -> List[List[int]]:
    """Positional index groups, seed first, in seed order."""
    n = len(lats)
    assigned = [False] * n
    groups: List[List[int]] = []

    for i in range(n):
        if assigned[i]:
            continue
        assigned[i] = True
        members = [i]
        lat_i, lon_i = lats[i], lons[i]
        # expand once around seed i
        for j in range(i + 1, n):
            if assigned[j]:
                continue
            if haversine_m(lat_i, lon_i, lats[j], lons[j]) <= radius_m:
                members.append(j)
                assigned[j] = True
        groups.append(members)

    return groups


def _build_cluster(members: Sequence[GeoPoint]) -> Cluster:
    n = len(members)
    center = Coordinate(
        sum(p.latitude for p in members) / n,
        sum(p.longitude for p in members) / n,
    )
    return Cluster(
        center=center,
        members=tuple(members),
        total_weight=sum(p.weight for p in members),
    )


def cluster(points: Iterable[GeoPoint], radius_m: float = CLUSTER_RADIUS_M) -> List[Cluster]:
    """Partition ``points`` into seed-centred clusters.

    Every valid point ends up in exactly one cluster; clusters come out in the
    order their seeds appear in ``points``. Points with invalid coordinates
    are skipped (and logged) instead of failing the run.

    Raises InvalidRadiusError for a negative or non-finite radius.
    """
    radius_m = _check_radius(radius_m)
    valid, skipped = split_valid(points)
    if not valid:
        return []

    lats = [p.latitude for p in valid]
    lons = [p.longitude for p in valid]
    groups = _greedy_groups(lats, lons, radius_m)
    clusters = [_build_cluster([valid[k] for k in g]) for g in groups]

    logger.debug(
        f"Clustered {len(valid)} point(s) into {len(clusters)} cluster(s) "
        f"(radius={radius_m:.1f} m, skipped={len(skipped)})"
    )
    return clusters


def split_singletons(clusters: Iterable[Cluster]) -> Tuple[List[Cluster], List[GeoPoint]]:
    """Return (groups, singles): clusters of 2+ points, and lone points as plain pins."""
    groups, singles = [], []
    for c in clusters:
        if c.is_singleton:
            singles.append(c.seed)
        else:
            groups.append(c)
    return groups, singles


def group_pins(points: Iterable[GeoPoint], radius_m: float = MAP_CLUSTER_RADIUS_M) -> Tuple[List[Cluster], List[GeoPoint]]:
    """Friends-map grouping: badges for 2+ posts within ``radius_m``, plain pins otherwise."""
    return split_singletons(cluster(points, radius_m))


def greedy_cluster(df: pd.DataFrame, lat_col: str = "latitude", lon_col: str = "longitude",
                   weight_col: str = None, threshold_m: float = CLUSTER_RADIUS_M):
    """Return (rep_df, clusters)

    - rep_df: one centroid row per cluster with columns:
      cluster_id, cluster_size, total_weight, latitude, longitude
    - clusters: dict[int, list[int]] mapping cluster_id -> positional df row indices

    Rows with invalid coordinates belong to no cluster.
    """
    threshold_m = _check_radius(threshold_m)
    columns = ["cluster_id", "cluster_size", "total_weight", "latitude", "longitude"]
    if not isinstance(df, pd.DataFrame) or df.empty:
        return pd.DataFrame(columns=columns), {}

    lats = _to_float_series(df[lat_col]).to_numpy()
    lons = _to_float_series(df[lon_col]).to_numpy()
    if weight_col and weight_col in df.columns:
        weights = pd.to_numeric(df[weight_col], errors="coerce").fillna(0).astype(int).to_numpy()
    else:
        weights = [0] * len(df)

    ok = valid_mask(lats, lons)
    positions = [k for k in range(len(df)) if ok[k]]
    if len(positions) < len(df):
        logger.warning(f"greedy_cluster: ignoring {len(df) - len(positions)} row(s) with invalid coordinates")

    groups = _greedy_groups([lats[k] for k in positions], [lons[k] for k in positions], threshold_m)
    clusters: Dict[int, List[int]] = {
        cid: [positions[k] for k in g] for cid, g in enumerate(groups)
    }

    # build representatives
    rows = []
    for cid, idxs in clusters.items():
        rows.append({
            "cluster_id": cid,
            "cluster_size": int(len(idxs)),
            "total_weight": int(sum(int(weights[k]) for k in idxs)),
            "latitude": float(sum(lats[k] for k in idxs) / len(idxs)),
            "longitude": float(sum(lons[k] for k in idxs) / len(idxs)),
        })
    rep_df = pd.DataFrame(rows, columns=columns)
    logger.info(f"greedy_cluster: {len(positions)} row(s) -> {len(rep_df)} cluster(s)")
    return rep_df, clusters

# pinmap/config.py
# Map constants for pinmap

from datetime import timedelta

import pandas as pd

# 0.25 mile, used by the explore map
CLUSTER_RADIUS_M = 402.336
# tighter radius used by the friends map view
MAP_CLUSTER_RADIUS_M = 100.0

# distance filter: anything at or above this is "unlimited"
UNLIMITED_DISTANCE_KM = 1000.0
DEFAULT_MAX_DISTANCE_KM = 50.0

# heat map grid: 1/1000 degree ~ 111 m
HEAT_GRID_PRECISION = 1000
HEAT_WEIGHTS = {"posts": 0.4, "likes": 0.35, "comments": 0.25}
HEAT_NORMALIZER = 100.0
HEAT_MIN_RADIUS_M = 50.0
HEAT_RADIUS_PER_POST_M = 25.0

# camera region
DEFAULT_CENTER = (37.7749, -122.4194)  # San Francisco
DEFAULT_SPAN = 0.1
MIN_SPAN = 0.01
SPAN_PADDING = 1.2

TIME_WINDOWS = {
    "today": "day",
    "this_week": timedelta(days=7),
    "this_month": pd.DateOffset(months=1),
    "all_time": None,
}


def get_time_window(name, now):
    """Return the earliest timestamp a post may have for the named window.

    ``None`` means no lower bound. "today" starts at local midnight of ``now``.
    """
    try:
        window = TIME_WINDOWS[name.lower()]
    except KeyError:
        raise ValueError(f"unknown time filter: {name!r}") from None
    now = pd.Timestamp(now)
    if window is None:
        return None
    if isinstance(window, str):
        return now.normalize()
    return now - window

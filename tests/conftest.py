import pandas as pd
import pytest

from pinmap.models import GeoPoint


@pytest.fixture
def abc_points():
    # A-B ~333.6 m, B-C ~333.6 m, A-C ~667 m
    return [
        GeoPoint("A", 0.0, 0.0, 1),
        GeoPoint("B", 0.0, 0.003, 2),
        GeoPoint("C", 0.0, 0.006, 3),
    ]


@pytest.fixture
def posts_df():
    return pd.DataFrame({
        "id": ["p1", "p2", "p3", "p4", "p5"],
        "latitude": [37.7749, 37.7748, 37.8044, 34.0522, None],
        "longitude": [-122.4194, -122.4195, -122.2712, -118.2437, None],
        "likes_count": [10, 4, 7, 1, 3],
        "comments_count": [2, 0, 1, 0, 0],
        "author_id": ["u1", "u2", "u1", "u3", "u2"],
        "tags": [["Pizza", "italian"], ["coffee"], [], ["tacos"], None],
        "rating": [4.5, None, 3.0, 5.0, 2.0],
        "created_at": [
            "2026-10-17T09:00:00",
            "2026-10-12T18:30:00",
            "2026-09-20T12:00:00",
            "2026-10-16T23:00:00",
            "2026-10-17T01:00:00",
        ],
    })

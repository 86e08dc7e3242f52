import pandas as pd
import pytest

from pinmap.filters import MapFilters, apply_filters

NOW = "2026-10-17T12:00:00"
SF = (37.7749, -122.4194)


def _ids(df):
    return df["id"].tolist()


def test_no_filters_keeps_everything(posts_df):
    out = apply_filters(posts_df, MapFilters(), now=NOW)
    assert _ids(out) == ["p1", "p2", "p3", "p4", "p5"]
    assert out is not posts_df


@pytest.mark.parametrize("scope,expected", [
    ("all", ["p1", "p2", "p3", "p4", "p5"]),
    ("following", ["p1", "p2", "p3", "p4", "p5"]),
    ("friends", ["p1", "p3"]),
    ("none", []),
])
def test_author_scope(posts_df, scope, expected):
    f = MapFilters(author_scope=scope, friend_ids={"u1"})
    assert _ids(apply_filters(posts_df, f, now=NOW)) == expected


def test_distance_filter(posts_df):
    f = MapFilters(user_location=SF, max_distance_km=20)
    assert _ids(apply_filters(posts_df, f, now=NOW)) == ["p1", "p2", "p3"]
    f = MapFilters(user_location=SF, max_distance_km=5)
    assert _ids(apply_filters(posts_df, f, now=NOW)) == ["p1", "p2"]


def test_distance_filter_accepts_comma_decimals():
    df = pd.DataFrame({"id": ["p"], "latitude": ["37,7749"], "longitude": ["-122,4194"]})
    f = MapFilters(user_location=SF, max_distance_km=5)
    assert _ids(apply_filters(df, f, now=NOW)) == ["p"]


def test_distance_filter_unlimited_or_without_location(posts_df):
    unlimited = MapFilters(user_location=SF, max_distance_km=1000)
    assert len(apply_filters(posts_df, unlimited, now=NOW)) == 5
    no_location = MapFilters(max_distance_km=1)
    assert len(apply_filters(posts_df, no_location, now=NOW)) == 5


@pytest.mark.parametrize("window,expected", [
    ("today", ["p1", "p5"]),
    ("this_week", ["p1", "p2", "p4", "p5"]),
    ("this_month", ["p1", "p2", "p3", "p4", "p5"]),
    ("all_time", ["p1", "p2", "p3", "p4", "p5"]),
])
def test_time_filter(posts_df, window, expected):
    f = MapFilters(time_filter=window)
    assert _ids(apply_filters(posts_df, f, now=NOW)) == expected


def test_time_filter_epoch_milliseconds():
    now = pd.Timestamp("2026-10-17T12:00:00", tz="UTC")
    df = pd.DataFrame({
        "id": ["new", "old"],
        "created_at": [
            int((now - pd.Timedelta(hours=2)).timestamp() * 1000),
            int((now - pd.Timedelta(days=9)).timestamp() * 1000),
        ],
    })
    out = apply_filters(df, MapFilters(time_filter="this_week"), now=now)
    assert _ids(out) == ["new"]


def test_category_filter_is_case_insensitive(posts_df):
    assert _ids(apply_filters(posts_df, MapFilters(categories={"pizza"}), now=NOW)) == ["p1"]
    f = MapFilters(categories={"COFFEE", "tacos"})
    assert _ids(apply_filters(posts_df, f, now=NOW)) == ["p2", "p4"]


def test_rating_filter_drops_unrated(posts_df):
    f = MapFilters(minimum_rating=4.0)
    assert _ids(apply_filters(posts_df, f, now=NOW)) == ["p1", "p4"]


def test_filters_combine(posts_df):
    f = MapFilters(
        author_scope="friends",
        friend_ids={"u1", "u3"},
        user_location=SF,
        max_distance_km=50,
        time_filter="this_week",
    )
    assert _ids(apply_filters(posts_df, f, now=NOW)) == ["p1"]


def test_empty_frame_passes_through():
    df = pd.DataFrame(columns=["id", "latitude", "longitude"])
    out = apply_filters(df, MapFilters(author_scope="none"))
    assert out.empty
    assert list(out.columns) == ["id", "latitude", "longitude"]


def test_invalid_filter_values():
    with pytest.raises(ValueError):
        MapFilters(author_scope="everyone")
    with pytest.raises(ValueError):
        MapFilters(time_filter="yesterday")


def test_single_category_string_is_one_category(posts_df):
    f = MapFilters(categories="Pizza")
    assert f.categories == frozenset({"pizza"})
    assert _ids(apply_filters(posts_df, f, now=NOW)) == ["p1"]

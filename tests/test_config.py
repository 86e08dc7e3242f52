import pandas as pd
import pytest

from pinmap.config import get_time_window


def test_time_windows():
    now = pd.Timestamp("2026-03-31T15:30:00")
    assert get_time_window("all_time", now) is None
    assert get_time_window("today", now) == pd.Timestamp("2026-03-31")
    assert get_time_window("this_week", now) == pd.Timestamp("2026-03-24T15:30:00")
    # calendar month, clipped to the end of February
    assert get_time_window("this_month", now) == pd.Timestamp("2026-02-28T15:30:00")
    assert get_time_window("THIS_WEEK", now) == pd.Timestamp("2026-03-24T15:30:00")


def test_unknown_time_window():
    with pytest.raises(ValueError):
        get_time_window("fortnight", pd.Timestamp("2026-01-01"))

from datetime import date, timedelta

from handlog.utils.dates import utc_now, week_start, window_start


def test_week_start_is_monday():
    # 2025-01-08 is a Wednesday
    assert week_start(date(2025, 1, 8)) == date(2025, 1, 6)
    assert week_start(date(2025, 1, 6)) == date(2025, 1, 6)
    assert week_start(date(2025, 1, 12)) == date(2025, 1, 6)


def test_window_start():
    assert window_start(date(2025, 3, 10), 7) == date(2025, 3, 3)


def test_utc_now_is_timezone_aware():
    now = utc_now()
    assert now.tzinfo is not None
    assert now.utcoffset() == timedelta(0)

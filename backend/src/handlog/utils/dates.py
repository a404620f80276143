from datetime import date, datetime, timedelta, timezone

WEEKDAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


def utc_now() -> datetime:
    """Timezone-aware current time in UTC; used for every stored timestamp."""
    return datetime.now(timezone.utc)


def window_start(today: date, days: int) -> date:
    """First day of a trailing window of ``days`` days ending on ``today``."""
    return today - timedelta(days=days)


def week_start(d: date) -> date:
    """Monday of the ISO week containing ``d``."""
    return d - timedelta(days=d.weekday())

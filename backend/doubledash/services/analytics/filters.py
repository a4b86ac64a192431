"""
Activity filters used before aggregation.
"""
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Sequence

from doubledash.services.analytics.adapter import Activity
from doubledash.services.analytics.calendar import CalendarPolicy, parse_start_date

TIME_RANGES: Dict[str, Optional[timedelta]] = {
    "30d": timedelta(days=30),
    "90d": timedelta(days=90),
    "1y": timedelta(days=365),
    "all": None,
}

# Sort key name -> key function; every sort is descending
SORT_KEYS: Dict[str, Callable[[Activity], Any]] = {
    "date": parse_start_date,
    "distance": lambda a: a.distance,
    "duration": lambda a: a.moving_time,
}


def filter_by_type(
    activities: Sequence[Activity],
    activity_type: Optional[str] = None,
) -> List[Activity]:
    """Keep activities of one type; None or "all" keeps everything."""
    if not activity_type or activity_type == "all":
        return list(activities)
    return [a for a in activities if a.type == activity_type]


def filter_by_date_range(
    activities: Sequence[Activity],
    start: date,
    end: date,
    calendar: Optional[CalendarPolicy] = None,
) -> List[Activity]:
    """Keep activities whose local start date falls in [start, end]."""
    calendar = calendar or CalendarPolicy.from_settings()
    return [a for a in activities if start <= calendar.local_date(a) <= end]


def filter_by_time_range(
    activities: Sequence[Activity],
    time_range: str = "all",
    calendar: Optional[CalendarPolicy] = None,
    now: Optional[datetime] = None,
) -> List[Activity]:
    """
    Keep activities started within a trailing window ("30d", "90d", "1y").

    Raises:
        ValueError: If the range name is unknown
    """
    if time_range not in TIME_RANGES:
        raise ValueError(f"Unknown time range: {time_range}")

    window = TIME_RANGES[time_range]
    if window is None:
        return list(activities)

    calendar = calendar or CalendarPolicy.from_settings()
    cutoff = calendar.now(now) - window
    return [a for a in activities if parse_start_date(a) >= cutoff]


def search_activities(activities: Sequence[Activity], term: Optional[str]) -> List[Activity]:
    """Case-insensitive substring match on activity name."""
    if not term:
        return list(activities)
    needle = term.lower()
    return [a for a in activities if needle in (a.name or "").lower()]


def sort_activities(activities: Sequence[Activity], sort_by: str = "date") -> List[Activity]:
    """
    Sort newest / longest first.

    Raises:
        ValueError: If the sort key is unknown
    """
    if sort_by not in SORT_KEYS:
        raise ValueError(f"Unknown sort key: {sort_by}")
    return sorted(activities, key=SORT_KEYS[sort_by], reverse=True)

"""
Personal records per canonical race distance.
"""
from typing import List, Optional, Sequence, Tuple

from doubledash.models.stats import PersonalRecord
from doubledash.services.analytics.adapter import Activity
from doubledash.services.analytics.calendar import CalendarPolicy
from doubledash.services.analytics.units import (
    format_duration,
    format_pace,
    meters_to_miles,
    pace_per_mile,
)

# Target distance in miles and its display label
TARGET_DISTANCES: Tuple[Tuple[float, str], ...] = (
    (1.0, "1 Mile"),
    (3.1, "5K"),
    (6.2, "10K"),
    (13.1, "Half Marathon"),
    (26.2, "Marathon"),
)

# An activity qualifies when within this fraction of the target distance
DISTANCE_TOLERANCE = 0.1


def _qualifies(activity: Activity, target_miles: float) -> bool:
    miles = meters_to_miles(activity.distance)
    return abs(miles - target_miles) / target_miles <= DISTANCE_TOLERANCE


def find_personal_records(
    activities: Sequence[Activity],
    calendar: Optional[CalendarPolicy] = None,
) -> List[PersonalRecord]:
    """
    Fastest qualifying activity for each target distance.

    The activity with the lowest moving time wins; on equal times the first
    one in input order is kept. Targets without a qualifying activity are
    left out of the result.
    """
    calendar = calendar or CalendarPolicy.from_settings()
    records = []

    for target, label in TARGET_DISTANCES:
        fastest: Optional[Activity] = None
        for activity in activities:
            if not _qualifies(activity, target):
                continue
            if fastest is None or activity.moving_time < fastest.moving_time:
                fastest = activity

        if fastest is None:
            continue

        pace = pace_per_mile(fastest.moving_time, fastest.distance)
        records.append(PersonalRecord(
            distance=target,
            distance_label=label,
            time=fastest.moving_time,
            time_formatted=format_duration(fastest.moving_time),
            pace=format_pace(pace),
            pace_minutes=pace,
            date=calendar.local_date(fastest).strftime("%b %d, %Y"),
            activity_id=fastest.activity_id,
        ))

    return records

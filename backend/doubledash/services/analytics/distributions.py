"""
Distributions - Fixed-bucket histograms over activity measures.

Each bucket set is an ordered partition with no gaps or overlaps: buckets
are half-open [min, max) and the last one is unbounded above.
"""
from typing import List, Optional, Sequence, Tuple

from doubledash.models.stats import DayOfWeekCount, DistributionBucket, HeartRateZone
from doubledash.services.analytics.adapter import Activity
from doubledash.services.analytics.calendar import CalendarPolicy
from doubledash.services.analytics.units import meters_to_miles, pace_per_mile

# (label, min, max) with max None for the open-ended bucket
PACE_BUCKETS: Tuple[Tuple[str, float, Optional[float]], ...] = (
    ("< 6:00", 0, 6),
    ("6:00-7:00", 6, 7),
    ("7:00-8:00", 7, 8),
    ("8:00-9:00", 8, 9),
    ("9:00-10:00", 9, 10),
    ("10:00+", 10, None),
)

DISTANCE_BUCKETS: Tuple[Tuple[str, float, Optional[float]], ...] = (
    ("< 3 miles", 0, 3),
    ("3-5 miles", 3, 5),
    ("5-10 miles", 5, 10),
    ("10-15 miles", 10, 15),
    ("15+ miles", 15, None),
)

HEART_RATE_ZONES: Tuple[Tuple[str, float, Optional[float]], ...] = (
    ("Recovery", 0, 140),
    ("Aerobic", 140, 160),
    ("Threshold", 160, 180),
    ("VO2 Max", 180, 200),
    ("Anaerobic", 200, None),
)

# Paces outside (0, MAX_PLAUSIBLE_PACE) min/mile are left out of the histogram
MAX_PLAUSIBLE_PACE = 20

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


def _fill_buckets(
    definitions: Sequence[Tuple[str, float, Optional[float]]],
    values: Sequence[float],
) -> List[DistributionBucket]:
    buckets = [DistributionBucket(range=label, min=low, max=high) for label, low, high in definitions]
    for value in values:
        for bucket in buckets:
            if bucket.contains(value):
                bucket.count += 1
                break
    return buckets


def analyze_pace_distribution(activities: Sequence[Activity]) -> List[DistributionBucket]:
    """
    Histogram of per-activity pace in minutes per mile.

    Zero-distance sentinels and paces of 20 min/mile or more are excluded
    rather than counted.
    """
    paces = [pace_per_mile(a.moving_time, a.distance) for a in activities]
    paces = [p for p in paces if 0 < p < MAX_PLAUSIBLE_PACE]
    return _fill_buckets(PACE_BUCKETS, paces)


def analyze_distance_distribution(activities: Sequence[Activity]) -> List[DistributionBucket]:
    """Histogram of per-activity distance in miles. Every activity is counted."""
    distances = [meters_to_miles(a.distance) for a in activities]
    return _fill_buckets(DISTANCE_BUCKETS, distances)


def analyze_heart_rate_zones(activities: Sequence[Activity]) -> Optional[List[HeartRateZone]]:
    """
    Count activities per average heart rate zone.

    Only activities flagged `has_heartrate` with both average and max heart
    rate present are considered. Returns None when there are none, which is
    different from every zone having a count of 0.
    """
    hr_activities = [a for a in activities if a.has_hr_data()]

    if not hr_activities:
        return None

    zones = [HeartRateZone(zone=name, min=low, max=high) for name, low, high in HEART_RATE_ZONES]

    for activity in hr_activities:
        for zone in zones:
            if zone.contains(activity.average_heartrate):
                zone.count += 1
                break

    return zones


def analyze_day_of_week_distribution(
    activities: Sequence[Activity],
    calendar: Optional[CalendarPolicy] = None,
) -> List[DayOfWeekCount]:
    """Activities per weekday, Sunday first, always seven entries."""
    calendar = calendar or CalendarPolicy.from_settings()
    counts = [DayOfWeekCount(day=name) for name in DAY_NAMES]

    for activity in activities:
        # Python weekday: Monday=0 .. Sunday=6
        index = (calendar.local_date(activity).weekday() + 1) % 7
        counts[index].count += 1

    return counts

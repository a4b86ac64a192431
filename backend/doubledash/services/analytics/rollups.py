"""
Rollups - Totals and periodic (monthly / weekly) aggregates.

Monthly stats only list months that have activities, while weekly stats
always return a fixed window with empty weeks zero-filled. Charts rely on
both shapes, so keep them different.
"""
from datetime import date, datetime, timedelta
from typing import List, Optional, Sequence

from doubledash.models.stats import (
    ActivityOverview,
    ActivitySummary,
    MonthComparison,
    MonthlyStat,
    PerformanceTrends,
    WeeklyStat,
    YearlyProgress,
)
from doubledash.services.analytics.adapter import Activity
from doubledash.services.analytics.calendar import (
    CalendarPolicy,
    group_by_month,
    group_by_week,
)
from doubledash.services.analytics.units import (
    meters_to_feet,
    meters_to_miles,
    pace_per_mile,
    seconds_to_hours,
)


def percent_change(previous: float, current: float) -> Optional[float]:
    """
    Percentage change from `previous` to `current`.

    0 -> 0 is no change; 0 -> anything else has no defined percentage and
    returns None.
    """
    if previous == 0:
        return 0.0 if current == 0 else None
    return (current - previous) / previous * 100


def average_pace(activities: Sequence[Activity]) -> float:
    """
    Arithmetic mean of per-activity paces, skipping zero-distance sentinels.

    Returns 0 when no activity has a usable pace.
    """
    paces = [pace_per_mile(a.moving_time, a.distance) for a in activities]
    paces = [p for p in paces if p > 0]
    if not paces:
        return 0.0
    return sum(paces) / len(paces)


def calculate_summary(activities: Sequence[Activity]) -> ActivitySummary:
    """Plain sums of distance, elevation and moving time plus type counts."""
    summary = ActivitySummary(total_activities=len(activities))

    for activity in activities:
        summary.total_distance += activity.distance or 0
        summary.total_elevation += activity.total_elevation_gain or 0
        summary.total_moving_time += activity.moving_time or 0
        summary.activity_types[activity.type] = summary.activity_types.get(activity.type, 0) + 1

    return summary


def calculate_overview(activities: Sequence[Activity]) -> ActivityOverview:
    """
    Headline totals and averages.

    Average heart rate only considers activities that report one; it is
    None when none do.
    """
    if not activities:
        return ActivityOverview()

    hr_values = [
        a.average_heartrate for a in activities
        if a.has_heartrate and a.average_heartrate is not None
    ]

    return ActivityOverview(
        total_activities=len(activities),
        total_distance=sum(a.distance for a in activities),
        total_time=sum(a.moving_time for a in activities),
        total_elevation=sum(a.total_elevation_gain for a in activities),
        avg_speed=sum(a.average_speed for a in activities) / len(activities),
        avg_heart_rate=sum(hr_values) / len(hr_values) if hr_values else None,
    )


def calculate_monthly_stats(
    activities: Sequence[Activity],
    calendar: Optional[CalendarPolicy] = None,
) -> List[MonthlyStat]:
    """One entry per month with data, ascending by month."""
    grouped = group_by_month(activities, calendar)

    stats = []
    for month in sorted(grouped):
        month_activities = grouped[month]
        count = len(month_activities)
        total_distance = sum(meters_to_miles(a.distance) for a in month_activities)

        stats.append(MonthlyStat(
            month=month,
            month_name=datetime.strptime(month, "%Y-%m").strftime("%b %Y"),
            total_runs=count,
            total_distance=total_distance,
            total_time=sum(seconds_to_hours(a.moving_time) for a in month_activities),
            total_elevation=sum(meters_to_feet(a.total_elevation_gain) for a in month_activities),
            avg_pace=average_pace(month_activities),
            avg_distance=total_distance / count if count else 0.0,
        ))

    return stats


def calculate_weekly_stats(
    activities: Sequence[Activity],
    weeks: int = 12,
    calendar: Optional[CalendarPolicy] = None,
    now: Optional[datetime] = None,
) -> List[WeeklyStat]:
    """
    Exactly `weeks` entries for the most recent calendar weeks, oldest first.

    The last entry is the week containing `now`. Weeks without activities
    are zero-filled.
    """
    calendar = calendar or CalendarPolicy.from_settings()
    if weeks <= 0:
        return []

    grouped = group_by_week(activities, calendar)
    current_week = calendar.start_of_week(calendar.now(now).date())

    stats = []
    for offset in range(weeks - 1, -1, -1):
        week_start = current_week - timedelta(weeks=offset)
        week_activities = grouped.get(week_start.isoformat(), [])

        stats.append(WeeklyStat(
            week=week_start.isoformat(),
            week_label=week_start.strftime("%b %d"),
            total_runs=len(week_activities),
            total_distance=sum(meters_to_miles(a.distance) for a in week_activities),
            total_time=sum(seconds_to_hours(a.moving_time) for a in week_activities),
            avg_pace=average_pace(week_activities),
        ))

    return stats


def calculate_performance_trends(
    activities: Sequence[Activity],
    calendar: Optional[CalendarPolicy] = None,
) -> Optional[PerformanceTrends]:
    """
    Change between the two latest months with data.

    Returns None with fewer than two months.
    """
    monthly = calculate_monthly_stats(activities, calendar)
    if len(monthly) < 2:
        return None

    latest = monthly[-1]
    previous = monthly[-2]

    # A 0 average pace means the month had no usable pace
    if previous.avg_pace > 0 and latest.avg_pace > 0:
        pace_trend = percent_change(previous.avg_pace, latest.avg_pace)
    else:
        pace_trend = None

    return PerformanceTrends(
        distance_trend=percent_change(previous.total_distance, latest.total_distance),
        pace_trend=pace_trend,
        volume_trend=percent_change(previous.total_runs, latest.total_runs),
        elevation_trend=percent_change(previous.total_elevation, latest.total_elevation),
    )


def _previous_month(day: date) -> date:
    first = day.replace(day=1)
    return (first - timedelta(days=1)).replace(day=1)


def calculate_month_comparison(
    activities: Sequence[Activity],
    calendar: Optional[CalendarPolicy] = None,
    now: Optional[datetime] = None,
) -> Optional[MonthComparison]:
    """
    The current calendar month against the previous one.

    Returns None for an empty collection.
    """
    if not activities:
        return None

    calendar = calendar or CalendarPolicy.from_settings()
    today = calendar.now(now).date()
    this_key = today.strftime("%Y-%m")
    last_key = _previous_month(today).strftime("%Y-%m")

    grouped = group_by_month(activities, calendar)
    this_month = grouped.get(this_key, [])
    last_month = grouped.get(last_key, [])

    this_distance = sum(meters_to_miles(a.distance) for a in this_month)
    last_distance = sum(meters_to_miles(a.distance) for a in last_month)

    return MonthComparison(
        this_month_distance=this_distance,
        last_month_distance=last_distance,
        distance_change=percent_change(last_distance, this_distance),
        this_month_activities=len(this_month),
        last_month_activities=len(last_month),
        activity_change=percent_change(len(last_month), len(this_month)),
    )


def calculate_yearly_progress(
    activities: Sequence[Activity],
    year: int,
    goal_miles: float,
    calendar: Optional[CalendarPolicy] = None,
    activity_type: Optional[str] = "Run",
) -> YearlyProgress:
    """Miles toward a yearly goal; progress is capped at 100%."""
    calendar = calendar or CalendarPolicy.from_settings()

    in_year = [
        a for a in activities
        if (activity_type is None or a.type == activity_type)
        and calendar.local_date(a).year == year
    ]
    total_miles = sum(meters_to_miles(a.distance) for a in in_year)
    progress = min(total_miles / goal_miles * 100, 100.0) if goal_miles > 0 else 0.0

    return YearlyProgress(
        year=year,
        total_runs=len(in_year),
        total_miles=total_miles,
        goal_miles=goal_miles,
        progress_percentage=progress,
    )

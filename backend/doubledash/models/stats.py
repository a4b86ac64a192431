"""
Derived analytics models.

Every record here is computed on demand from a list of activities and is
never persisted. `to_dict()` produces the camelCase shape served to the
frontend charts.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class ActivitySummary:
    """Plain totals over an activity collection (meters / seconds)."""
    total_activities: int = 0
    total_distance: float = 0.0
    total_elevation: float = 0.0
    total_moving_time: float = 0.0
    activity_types: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "totalActivities": self.total_activities,
            "totalDistance": self.total_distance,
            "totalElevation": self.total_elevation,
            "totalMovingTime": self.total_moving_time,
            "activityTypes": dict(self.activity_types),
        }


@dataclass
class MonthlyStat:
    """One calendar month of converted measures."""
    month: str  # YYYY-MM
    month_name: str
    total_runs: int
    total_distance: float  # miles
    total_time: float  # hours
    total_elevation: float  # feet
    avg_pace: float  # min/mile
    avg_distance: float  # miles

    def to_dict(self) -> dict:
        return {
            "month": self.month,
            "monthName": self.month_name,
            "totalRuns": self.total_runs,
            "totalDistance": self.total_distance,
            "totalTime": self.total_time,
            "totalElevation": self.total_elevation,
            "avgPace": self.avg_pace,
            "avgDistance": self.avg_distance,
        }


@dataclass
class WeeklyStat:
    """One calendar week of converted measures."""
    week: str  # ISO date of the week start
    week_label: str
    total_runs: int
    total_distance: float  # miles
    total_time: float  # hours
    avg_pace: float  # min/mile

    def to_dict(self) -> dict:
        return {
            "week": self.week,
            "weekLabel": self.week_label,
            "totalRuns": self.total_runs,
            "totalDistance": self.total_distance,
            "totalTime": self.total_time,
            "avgPace": self.avg_pace,
        }


@dataclass
class DistributionBucket:
    """
    Histogram bucket over a half-open interval [min, max).

    `max` of None means the bucket is unbounded above.
    """
    range: str
    min: float
    max: Optional[float]
    count: int = 0

    def contains(self, value: float) -> bool:
        if value < self.min:
            return False
        return self.max is None or value < self.max

    def to_dict(self) -> dict:
        return {
            "range": self.range,
            "min": self.min,
            "max": self.max,
            "count": self.count,
        }


@dataclass
class HeartRateZone:
    """Average heart rate zone, same interval rules as DistributionBucket."""
    zone: str
    min: float
    max: Optional[float]
    count: int = 0

    def contains(self, bpm: float) -> bool:
        if bpm < self.min:
            return False
        return self.max is None or bpm < self.max

    def to_dict(self) -> dict:
        return {
            "zone": self.zone,
            "min": self.min,
            "max": self.max,
            "count": self.count,
        }


@dataclass
class DayOfWeekCount:
    day: str
    count: int = 0

    def to_dict(self) -> dict:
        return {"day": self.day, "count": self.count}


@dataclass
class PersonalRecord:
    """Fastest qualifying activity for a canonical race distance."""
    distance: float  # target, miles
    distance_label: str
    time: float  # moving time, seconds
    time_formatted: str
    pace: str
    pace_minutes: float
    date: str
    activity_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "distance": self.distance,
            "distanceLabel": self.distance_label,
            "time": self.time,
            "timeFormatted": self.time_formatted,
            "pace": self.pace,
            "paceMinutes": self.pace_minutes,
            "date": self.date,
            "activityId": self.activity_id,
        }


@dataclass
class PerformanceTrends:
    """
    Percentage change between the two latest months.

    A value is None when the previous month was zero and the latest was not.
    `pace_trend` is also None when either month has no usable pace.
    """
    distance_trend: Optional[float]
    pace_trend: Optional[float]
    volume_trend: Optional[float]
    elevation_trend: Optional[float]

    def to_dict(self) -> dict:
        return {
            "distanceTrend": self.distance_trend,
            "paceTrend": self.pace_trend,
            "volumeTrend": self.volume_trend,
            "elevationTrend": self.elevation_trend,
        }


@dataclass
class ActivityOverview:
    """Headline numbers for the analytics page (raw units)."""
    total_activities: int = 0
    total_distance: float = 0.0
    total_time: float = 0.0
    total_elevation: float = 0.0
    avg_speed: float = 0.0
    avg_heart_rate: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "totalActivities": self.total_activities,
            "totalDistance": self.total_distance,
            "totalTime": self.total_time,
            "totalElevation": self.total_elevation,
            "avgSpeed": self.avg_speed,
            "avgHeartRate": self.avg_heart_rate,
        }


@dataclass
class MonthComparison:
    """Current calendar month against the one before it."""
    this_month_distance: float
    last_month_distance: float
    distance_change: Optional[float]
    this_month_activities: int
    last_month_activities: int
    activity_change: Optional[float]

    def to_dict(self) -> dict:
        return {
            "thisMonthDistance": self.this_month_distance,
            "lastMonthDistance": self.last_month_distance,
            "distanceChange": self.distance_change,
            "thisMonthActivities": self.this_month_activities,
            "lastMonthActivities": self.last_month_activities,
            "activityChange": self.activity_change,
        }


@dataclass
class YearlyProgress:
    year: int
    total_runs: int
    total_miles: float
    goal_miles: float
    progress_percentage: float

    def to_dict(self) -> dict:
        return {
            "year": self.year,
            "totalRuns": self.total_runs,
            "totalMiles": self.total_miles,
            "goalMiles": self.goal_miles,
            "progressPercentage": self.progress_percentage,
        }


@dataclass
class AnalyticsReport:
    """Every analytics view computed for one activity collection."""
    summary: ActivitySummary
    overview: ActivityOverview
    monthly_stats: List[MonthlyStat] = field(default_factory=list)
    weekly_stats: List[WeeklyStat] = field(default_factory=list)
    pace_distribution: List[DistributionBucket] = field(default_factory=list)
    distance_distribution: List[DistributionBucket] = field(default_factory=list)
    heart_rate_zones: Optional[List[HeartRateZone]] = None
    day_of_week: List[DayOfWeekCount] = field(default_factory=list)
    personal_records: List[PersonalRecord] = field(default_factory=list)
    trends: Optional[PerformanceTrends] = None
    month_comparison: Optional[MonthComparison] = None
    yearly_progress: Optional[YearlyProgress] = None
    filters: Dict[str, Any] = field(default_factory=dict)
    skipped_activities: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary for API response."""
        return {
            "summary": self.summary.to_dict(),
            "overview": self.overview.to_dict(),
            "monthlyStats": [m.to_dict() for m in self.monthly_stats],
            "weeklyStats": [w.to_dict() for w in self.weekly_stats],
            "paceDistribution": [b.to_dict() for b in self.pace_distribution],
            "distanceDistribution": [b.to_dict() for b in self.distance_distribution],
            "heartRateZones": (
                [z.to_dict() for z in self.heart_rate_zones]
                if self.heart_rate_zones is not None else None
            ),
            "dayOfWeek": [d.to_dict() for d in self.day_of_week],
            "personalRecords": [r.to_dict() for r in self.personal_records],
            "trends": self.trends.to_dict() if self.trends else None,
            "monthComparison": self.month_comparison.to_dict() if self.month_comparison else None,
            "yearlyProgress": self.yearly_progress.to_dict() if self.yearly_progress else None,
            "filters": dict(self.filters),
            "skippedActivities": self.skipped_activities,
        }

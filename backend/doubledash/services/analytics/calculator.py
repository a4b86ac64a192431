"""
Analytics Calculator - Main engine for building activity analytics.

Orchestrates:
- Data adaptation from raw payloads
- Filtering by type and time range
- Every aggregation view
- Text rendering for the CLI
"""
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from doubledash.core.config import settings
from doubledash.core.logging import get_logger, track_aggregation
from doubledash.models.stats import AnalyticsReport
from doubledash.services.analytics.adapter import Activity, get_adapter
from doubledash.services.analytics.calendar import CalendarPolicy
from doubledash.services.analytics.distributions import (
    analyze_day_of_week_distribution,
    analyze_distance_distribution,
    analyze_heart_rate_zones,
    analyze_pace_distribution,
)
from doubledash.services.analytics.exceptions import DataError
from doubledash.services.analytics.filters import filter_by_time_range, filter_by_type
from doubledash.services.analytics.records import find_personal_records
from doubledash.services.analytics.rollups import (
    calculate_month_comparison,
    calculate_monthly_stats,
    calculate_overview,
    calculate_performance_trends,
    calculate_summary,
    calculate_weekly_stats,
    calculate_yearly_progress,
)
from doubledash.services.analytics.units import format_pace, meters_to_feet, meters_to_miles

logger = get_logger(__name__)

INVALID_DATE_POLICIES = ("raise", "skip")


class AnalyticsCalculator:
    """
    Main analytics engine.

    Usage:
        calculator = AnalyticsCalculator()
        report = calculator.build_report_from_raw(items, source="strava")
        print(calculator.format_report(report))
    """

    def __init__(
        self,
        calendar: Optional[CalendarPolicy] = None,
        invalid_date_policy: Optional[str] = None,
    ):
        self.calendar = calendar or CalendarPolicy.from_settings()
        self.invalid_date_policy = invalid_date_policy or settings.INVALID_DATE_POLICY

        if self.invalid_date_policy not in INVALID_DATE_POLICIES:
            raise ValueError(f"Unknown invalid date policy: {self.invalid_date_policy}")

    def normalize(self, raw_items: Iterable[Dict[str, Any]], source: str = "stored") -> List[Activity]:
        """Normalize raw payloads using the adapter for `source`."""
        adapter = get_adapter(source)
        return adapter.normalize_many(raw_items)

    def build_report_from_raw(
        self,
        raw_items: Iterable[Dict[str, Any]],
        source: str = "stored",
        **options: Any,
    ) -> AnalyticsReport:
        """Normalize raw payloads, then build the report."""
        return self.build_report(self.normalize(raw_items, source), **options)

    def build_report(
        self,
        activities: Sequence[Activity],
        activity_type: Optional[str] = None,
        time_range: str = "all",
        weeks: Optional[int] = None,
        now: Optional[datetime] = None,
        year: Optional[int] = None,
        goal_miles: Optional[float] = None,
    ) -> AnalyticsReport:
        """
        Compute every analytics view for a collection.

        Args:
            activities: Normalized activities
            activity_type: Only include this type (None or "all" for every type)
            time_range: Trailing window: 30d, 90d, 1y or all
            weeks: Weekly window size (defaults to settings)
            now: Reference time for weekly / monthly windows
            year: Year for goal progress (defaults to the year of `now`)
            goal_miles: Yearly goal (defaults to settings)

        Returns:
            AnalyticsReport

        Raises:
            DataError: If an activity has an unparsable start_date and the
                invalid date policy is "raise"
            ValueError: If a filter value is unknown
        """
        weeks = weeks if weeks is not None else settings.WEEKLY_WINDOW_WEEKS
        goal_miles = goal_miles if goal_miles is not None else settings.YEARLY_GOAL_MILES
        reference = self.calendar.now(now)
        year = year or reference.year

        with track_aggregation(
            logger,
            "build_report",
            activity_type=activity_type or "all",
            time_range=time_range,
        ) as run:
            valid, skipped = self._check_dates(activities)

            filtered = filter_by_type(valid, activity_type)
            filtered = filter_by_time_range(filtered, time_range, self.calendar, reference)
            run.set_activity_count(len(filtered))

            report = AnalyticsReport(
                summary=calculate_summary(filtered),
                overview=calculate_overview(filtered),
                monthly_stats=calculate_monthly_stats(filtered, self.calendar),
                weekly_stats=calculate_weekly_stats(filtered, weeks, self.calendar, reference),
                pace_distribution=analyze_pace_distribution(filtered),
                distance_distribution=analyze_distance_distribution(filtered),
                heart_rate_zones=analyze_heart_rate_zones(filtered),
                day_of_week=analyze_day_of_week_distribution(filtered, self.calendar),
                personal_records=find_personal_records(filtered, self.calendar),
                trends=calculate_performance_trends(filtered, self.calendar),
                month_comparison=calculate_month_comparison(filtered, self.calendar, reference),
                yearly_progress=calculate_yearly_progress(valid, year, goal_miles, self.calendar),
                filters={
                    "activityType": activity_type or "all",
                    "timeRange": time_range,
                    "weeks": weeks,
                    "timezone": self.calendar.timezone,
                },
                skipped_activities=skipped,
            )

        return report

    def _check_dates(self, activities: Sequence[Activity]) -> Tuple[List[Activity], int]:
        """
        Validate start dates up front, in the calendar timezone.

        With the "skip" policy bad records are dropped and counted; otherwise
        the first one raises DataError.
        """
        valid = []
        skipped = 0

        for activity in activities:
            try:
                # Parses, localizes and places the start on a week
                self.calendar.week_key(activity)
            except DataError as e:
                if self.invalid_date_policy == "raise":
                    raise
                skipped += 1
                logger.warning(
                    "Skipping activity with invalid start_date",
                    activity_id=e.activity_id,
                    value=e.value,
                )
                continue
            valid.append(activity)

        return valid, skipped

    def format_report(self, report: AnalyticsReport) -> str:
        """
        Format a report as plain text.

        Args:
            report: AnalyticsReport to format

        Returns:
            Multi-line string
        """
        summary = report.summary
        lines = ["=== Activity Summary ==="]
        lines.append(f"Activities: {summary.total_activities}")
        lines.append(f"Distance: {meters_to_miles(summary.total_distance):.1f} mi")
        lines.append(f"Moving time: {summary.total_moving_time / 3600:.1f} h")
        lines.append(f"Elevation: {meters_to_feet(summary.total_elevation):.0f} ft")

        if summary.activity_types:
            types = ", ".join(
                f"{name}: {count}" for name, count in sorted(summary.activity_types.items())
            )
            lines.append(f"Types: {types}")

        if report.overview.avg_heart_rate is not None:
            lines.append(f"Avg heart rate: {report.overview.avg_heart_rate:.0f} bpm")

        if report.skipped_activities:
            lines.append(f"Skipped (invalid date): {report.skipped_activities}")

        if report.monthly_stats:
            lines.append("\n=== Monthly ===")
            for stat in report.monthly_stats:
                lines.append(
                    f"{stat.month_name}: {stat.total_runs} runs, "
                    f"{stat.total_distance:.1f} mi, avg pace {format_pace(stat.avg_pace)}"
                )

        lines.append("\n=== Weekly ===")
        for stat in report.weekly_stats:
            lines.append(f"{stat.week_label}: {stat.total_runs} runs, {stat.total_distance:.1f} mi")

        lines.append("\n=== Pace Distribution (min/mi) ===")
        for bucket in report.pace_distribution:
            lines.append(f"{bucket.range}: {bucket.count}")

        lines.append("\n=== Distance Distribution ===")
        for bucket in report.distance_distribution:
            lines.append(f"{bucket.range}: {bucket.count}")

        if report.heart_rate_zones is not None:
            lines.append("\n=== Heart Rate Zones ===")
            for zone in report.heart_rate_zones:
                lines.append(f"{zone.zone}: {zone.count}")

        if report.personal_records:
            lines.append("\n=== Personal Records ===")
            for record in report.personal_records:
                lines.append(
                    f"{record.distance_label}: {record.time_formatted} "
                    f"({record.pace}/mi) on {record.date}"
                )

        if report.trends:
            lines.append("\n=== Month over Month ===")
            for label, value in (
                ("Distance", report.trends.distance_trend),
                ("Pace", report.trends.pace_trend),
                ("Runs", report.trends.volume_trend),
                ("Elevation", report.trends.elevation_trend),
            ):
                lines.append(f"{label}: {_format_change(value)}")

        if report.yearly_progress:
            progress = report.yearly_progress
            lines.append(
                f"\n{progress.year} goal: {progress.total_miles:.1f} / {progress.goal_miles:.0f} mi "
                f"({progress.progress_percentage:.1f}%)"
            )

        return "\n".join(lines)


def _format_change(value: Optional[float]) -> str:
    if value is None:
        return "new"
    return f"{value:+.1f}%"

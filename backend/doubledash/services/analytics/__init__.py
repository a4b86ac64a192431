"""
Analytics module - Activity aggregation for the DoubleDash dashboard.

This module provides:
- Data adapters for normalizing raw activity payloads
- Unit conversion and calendar grouping primitives
- Rollups, distributions and personal records
- The report calculator and the host-layer activity cache
"""
from doubledash.services.analytics.adapter import (
    Activity,
    RawDataAdapter,
    StravaAdapter,
    StoredActivityAdapter,
    get_adapter,
    normalize_activities,
)
from doubledash.services.analytics.calculator import AnalyticsCalculator
from doubledash.services.analytics.calendar import (
    CalendarPolicy,
    group_by_month,
    group_by_week,
    parse_start_date,
)
from doubledash.services.analytics.distributions import (
    analyze_day_of_week_distribution,
    analyze_distance_distribution,
    analyze_heart_rate_zones,
    analyze_pace_distribution,
)
from doubledash.services.analytics.exceptions import DataError
from doubledash.services.analytics.filters import (
    filter_by_date_range,
    filter_by_time_range,
    filter_by_type,
    search_activities,
    sort_activities,
)
from doubledash.services.analytics.records import find_personal_records
from doubledash.services.analytics.rollups import (
    calculate_month_comparison,
    calculate_monthly_stats,
    calculate_overview,
    calculate_performance_trends,
    calculate_summary,
    calculate_weekly_stats,
    calculate_yearly_progress,
    percent_change,
)
from doubledash.services.analytics.store import ActivityCache

__all__ = [
    # Data structures
    "Activity",
    "CalendarPolicy",
    "DataError",
    # Adapters
    "RawDataAdapter",
    "StravaAdapter",
    "StoredActivityAdapter",
    "get_adapter",
    "normalize_activities",
    # Grouping
    "group_by_month",
    "group_by_week",
    "parse_start_date",
    # Aggregations
    "calculate_summary",
    "calculate_overview",
    "calculate_monthly_stats",
    "calculate_weekly_stats",
    "calculate_performance_trends",
    "calculate_month_comparison",
    "calculate_yearly_progress",
    "percent_change",
    "analyze_pace_distribution",
    "analyze_distance_distribution",
    "analyze_heart_rate_zones",
    "analyze_day_of_week_distribution",
    "find_personal_records",
    # Filters
    "filter_by_type",
    "filter_by_date_range",
    "filter_by_time_range",
    "search_activities",
    "sort_activities",
    # Calculator
    "AnalyticsCalculator",
    # Cache
    "ActivityCache",
]

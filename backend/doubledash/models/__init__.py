from doubledash.models.stats import (
    ActivityOverview,
    ActivitySummary,
    AnalyticsReport,
    DayOfWeekCount,
    DistributionBucket,
    HeartRateZone,
    MonthComparison,
    MonthlyStat,
    PerformanceTrends,
    PersonalRecord,
    WeeklyStat,
    YearlyProgress,
)

__all__ = [
    "ActivityOverview",
    "ActivitySummary",
    "AnalyticsReport",
    "DayOfWeekCount",
    "DistributionBucket",
    "HeartRateZone",
    "MonthComparison",
    "MonthlyStat",
    "PerformanceTrends",
    "PersonalRecord",
    "WeeklyStat",
    "YearlyProgress",
]

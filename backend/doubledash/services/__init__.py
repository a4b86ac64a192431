"""
Services module - Application business logic layer.

Modules:
- analytics: Activity aggregation, calendar grouping and the activity cache
"""
from doubledash.services.analytics import ActivityCache, AnalyticsCalculator

__all__ = [
    "ActivityCache",
    "AnalyticsCalculator",
]

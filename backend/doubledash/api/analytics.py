"""
Analytics API endpoints.
"""
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from doubledash.core.config import settings
from doubledash.core.logging import get_logger
from doubledash.services.analytics import (
    ActivityCache,
    AnalyticsCalculator,
    DataError,
    normalize_activities,
)

logger = get_logger(__name__)
router = APIRouter()

_activity_cache = ActivityCache(ttl_seconds=settings.ACTIVITY_CACHE_TTL_SECONDS)


def get_activity_cache() -> ActivityCache:
    """Shared activity cache dependency."""
    return _activity_cache


def get_calculator() -> AnalyticsCalculator:
    """Calculator built from current settings."""
    return AnalyticsCalculator()


# ========================================
# Request/Response Schemas
# ========================================

class ReportOptions(BaseModel):
    """Filters and windows applied when building a report."""
    activityType: Optional[str] = Field(None, description="Only this activity type")
    timeRange: str = Field("all", description="30d, 90d, 1y or all")
    weeks: Optional[int] = Field(None, ge=1, le=104, description="Weekly window size")
    year: Optional[int] = Field(None, description="Year for goal progress")
    goalMiles: Optional[float] = Field(None, gt=0, description="Yearly distance goal")


class AnalyticsRequest(ReportOptions):
    """Request to build analytics for a list of activities."""
    activities: list[dict[str, Any]] = Field(..., description="Raw activity items")
    source: str = Field("stored", description="Payload source: strava or stored")


class CacheActivitiesRequest(BaseModel):
    """Request to cache a user's activities."""
    activities: list[dict[str, Any]] = Field(..., description="Raw activity items")
    source: str = Field("stored", description="Payload source: strava or stored")


class CacheActivitiesResponse(BaseModel):
    userId: str
    count: int
    ttlSeconds: float


# ========================================
# Helpers
# ========================================

def _normalize(raw_items, source: str):
    try:
        return normalize_activities(raw_items, source)
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=422, detail=f"Invalid activity payload: {e}")


def _build_report(calculator: AnalyticsCalculator, activities, options: ReportOptions) -> dict:
    try:
        report = calculator.build_report(
            activities,
            activity_type=options.activityType,
            time_range=options.timeRange,
            weeks=options.weeks,
            year=options.year,
            goal_miles=options.goalMiles,
        )
    except DataError as e:
        logger.warning("Invalid activity data", activity_id=e.activity_id, error=str(e))
        raise HTTPException(
            status_code=422,
            detail={"error": str(e), "activityId": e.activity_id},
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return report.to_dict()


# ========================================
# API Endpoints
# ========================================

@router.post("")
async def build_analytics(
    request: AnalyticsRequest,
    calculator: AnalyticsCalculator = Depends(get_calculator),
):
    """
    Build analytics for the activities in the request body.
    """
    logger.info(
        "Building analytics",
        source=request.source,
        activity_count=len(request.activities),
    )
    activities = _normalize(request.activities, request.source)
    return _build_report(calculator, activities, request)


@router.put("/users/{user_id}/activities", response_model=CacheActivitiesResponse)
async def cache_user_activities(
    user_id: str,
    request: CacheActivitiesRequest,
    cache: ActivityCache = Depends(get_activity_cache),
):
    """
    Cache a user's activities for later report requests.
    """
    activities = _normalize(request.activities, request.source)
    cache.put(user_id, activities)

    logger.info("Cached user activities", user_id=user_id, count=len(activities))

    return CacheActivitiesResponse(
        userId=user_id,
        count=len(activities),
        ttlSeconds=cache.ttl_seconds,
    )


@router.get("/users/{user_id}")
async def get_user_analytics(
    user_id: str,
    activityType: Optional[str] = Query(None),
    timeRange: str = Query("all"),
    weeks: Optional[int] = Query(None, ge=1, le=104),
    year: Optional[int] = Query(None),
    goalMiles: Optional[float] = Query(None, gt=0),
    cache: ActivityCache = Depends(get_activity_cache),
    calculator: AnalyticsCalculator = Depends(get_calculator),
):
    """
    Build analytics from a user's cached activities.
    """
    activities = cache.get(user_id)
    if activities is None:
        raise HTTPException(status_code=404, detail="No fresh activities cached for user")

    options = ReportOptions(
        activityType=activityType,
        timeRange=timeRange,
        weeks=weeks,
        year=year,
        goalMiles=goalMiles,
    )
    return _build_report(calculator, activities, options)


@router.delete("/users/{user_id}/activities")
async def invalidate_user_activities(
    user_id: str,
    cache: ActivityCache = Depends(get_activity_cache),
):
    """
    Drop a user's cached activities.
    """
    if not cache.invalidate(user_id):
        raise HTTPException(status_code=404, detail="No activities cached for user")

    return {"success": True}

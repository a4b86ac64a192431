"""Pytest configuration and fixtures for analytics tests."""

import itertools
from datetime import datetime, timezone
from typing import AsyncGenerator, Callable

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from doubledash.api.analytics import get_activity_cache, get_calculator
from doubledash.main import app as main_app
from doubledash.services.analytics import Activity, ActivityCache, AnalyticsCalculator, CalendarPolicy

METERS_PER_MILE = 1609.34


# -------------------------------------------------------------------------
# Activity Fixtures
# -------------------------------------------------------------------------


@pytest.fixture
def utc_calendar() -> CalendarPolicy:
    """UTC calendar with Sunday-start weeks."""
    return CalendarPolicy(timezone="UTC", week_start=6)


@pytest.fixture
def fixed_now() -> datetime:
    """A Wednesday used as "now" for window calculations."""
    return datetime(2024, 3, 13, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_activity() -> Callable[..., Activity]:
    """Factory for Activity records with sensible running defaults."""
    counter = itertools.count(1)

    def _make(**overrides) -> Activity:
        fields = {
            "activity_id": str(next(counter)),
            "user_id": "user-1",
            "start_date": "2024-01-05T12:00:00Z",
            "name": "Morning Run",
            "type": "Run",
            "distance": 5000.0,
            "moving_time": 1500.0,
            "elapsed_time": 1600.0,
            "total_elevation_gain": 30.0,
            "average_speed": 3.33,
            "max_speed": 4.5,
        }
        fields.update(overrides)
        return Activity(**fields)

    return _make


@pytest.fixture
def miles() -> Callable[[float], float]:
    """Convert miles to meters for building fixtures."""
    return lambda value: value * METERS_PER_MILE


@pytest.fixture
def raw_stored_activities() -> list[dict]:
    """Stored activity items as the storage layer returns them."""
    return [
        {
            "userId": "user-1",
            "activityId": "1001",
            "name": "Easy Run",
            "type": "Run",
            "start_date": "2024-02-10T14:00:00Z",
            "start_date_local": "2024-02-10T07:00:00Z",
            "timezone": "(GMT-07:00) America/Denver",
            "distance": 8046.7,
            "moving_time": 2700,
            "elapsed_time": 2800,
            "total_elevation_gain": 45.0,
            "average_speed": 2.98,
            "max_speed": 4.1,
            "has_heartrate": True,
            "average_heartrate": 148.0,
            "max_heartrate": 171.0,
        },
        {
            "userId": "user-1",
            "activityId": "1002",
            "name": "Tempo",
            "type": "Run",
            "start_date": "2024-03-12T13:00:00Z",
            "distance": 10000.0,
            "moving_time": 2520,
            "elapsed_time": 2600,
            "total_elevation_gain": 60.0,
            "average_speed": 3.97,
            "max_speed": 5.2,
            "has_heartrate": False,
        },
        {
            "userId": "user-1",
            "activityId": "1003",
            "name": "Commute",
            "type": "Ride",
            "start_date": "2024-03-11T08:00:00Z",
            "distance": 15000.0,
            "moving_time": 2400,
            "elapsed_time": 2500,
            "total_elevation_gain": None,
            "average_speed": 6.25,
            "max_speed": 11.0,
        },
    ]


# -------------------------------------------------------------------------
# API Fixtures
# -------------------------------------------------------------------------


@pytest.fixture
def activity_cache() -> ActivityCache:
    return ActivityCache(ttl_seconds=300)


@pytest.fixture
def app(activity_cache: ActivityCache, utc_calendar: CalendarPolicy) -> FastAPI:
    """FastAPI app with an isolated cache and a UTC calendar."""
    main_app.dependency_overrides[get_activity_cache] = lambda: activity_cache
    main_app.dependency_overrides[get_calculator] = lambda: AnalyticsCalculator(
        calendar=utc_calendar,
        invalid_date_policy="raise",
    )
    yield main_app
    main_app.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

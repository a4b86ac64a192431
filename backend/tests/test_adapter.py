"""Tests for raw payload normalization."""

import pytest

from doubledash.services.analytics.adapter import (
    Activity,
    StoredActivityAdapter,
    StravaAdapter,
    get_adapter,
    normalize_activities,
)


class TestStoredActivityAdapter:
    """Tests for stored activity items."""

    def test_normalizes_items(self, raw_stored_activities):
        activities = normalize_activities(raw_stored_activities, source="stored")

        assert [a.activity_id for a in activities] == ["1001", "1002", "1003"]
        first = activities[0]
        assert first.user_id == "user-1"
        assert first.type == "Run"
        assert first.distance == pytest.approx(8046.7)
        assert first.has_hr_data()
        assert first.average_heartrate == 148.0

    def test_null_measures_default_to_zero(self, raw_stored_activities):
        ride = normalize_activities(raw_stored_activities)[2]

        assert ride.total_elevation_gain == 0.0
        assert ride.has_heartrate is False
        assert ride.average_heartrate is None

    def test_missing_type_is_unknown(self):
        activity = StoredActivityAdapter().normalize({"activityId": 5, "start_date": "2024-01-01T00:00:00Z"})

        assert activity.type == "Unknown"
        assert activity.activity_id == "5"
        assert activity.distance == 0.0

    def test_falls_back_to_id(self):
        activity = StoredActivityAdapter().normalize({"id": 77, "start_date": "2024-01-01T00:00:00Z"})
        assert activity.activity_id == "77"

    def test_keeps_raw_payload(self, raw_stored_activities):
        activity = normalize_activities(raw_stored_activities[:1])[0]
        assert activity.raw_data["activityId"] == "1001"


class TestStravaAdapter:
    """Tests for Strava API payloads."""

    def test_normalizes_strava_payload(self):
        raw = {
            "id": 123456,
            "athlete": {"id": 42},
            "name": "Lunch Run",
            "type": "Run",
            "sport_type": "TrailRun",
            "start_date": "2024-01-05T18:00:00Z",
            "distance": 5000,
            "moving_time": 1500,
            "elapsed_time": 1600,
            "total_elevation_gain": 80,
            "average_speed": 3.3,
            "max_speed": 4.8,
            "has_heartrate": True,
            "average_heartrate": 152,
            "max_heartrate": 175,
        }

        activity = StravaAdapter().normalize(raw)

        assert activity.activity_id == "123456"
        assert activity.user_id == "42"
        assert activity.sport_type == "TrailRun"
        assert isinstance(activity.distance, float)
        assert activity.has_hr_data()

    def test_heart_rate_flag_without_values(self):
        activity = StravaAdapter().normalize({"id": 1, "has_heartrate": True})
        assert not activity.has_hr_data()

    @pytest.mark.parametrize("athlete", [42, "someone", ["x"]])
    def test_non_object_athlete(self, athlete):
        activity = StravaAdapter().normalize({"id": 1, "athlete": athlete})

        assert activity.user_id is None
        assert activity.activity_id == "1"

    def test_athlete_id_fallback(self):
        activity = StravaAdapter().normalize({"id": 1, "athlete": None, "athlete_id": 8})
        assert activity.user_id == "8"


class TestHeartRateFlag:
    """Tests for has_heartrate parsing."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (True, True),
            (False, False),
            (None, False),
            ("true", True),
            ("True", True),
            ("false", False),
            ("False", False),
            ("", False),
            (1, True),
            (0, False),
        ],
    )
    def test_flag_values(self, value, expected):
        activity = StoredActivityAdapter().normalize({
            "activityId": 1,
            "has_heartrate": value,
            "average_heartrate": 150,
            "max_heartrate": 170,
        })

        assert activity.has_heartrate is expected
        assert activity.has_hr_data() is expected


class TestGetAdapter:
    """Tests for the adapter registry."""

    def test_known_sources(self):
        assert isinstance(get_adapter("strava"), StravaAdapter)
        assert isinstance(get_adapter("STORED"), StoredActivityAdapter)

    def test_unknown_source_falls_back(self):
        assert isinstance(get_adapter("garmin"), StoredActivityAdapter)


def test_activity_equality_ignores_raw_data():
    a = Activity(activity_id="1", start_date="2024-01-01T00:00:00Z", raw_data={"x": 1})
    b = Activity(activity_id="1", start_date="2024-01-01T00:00:00Z", raw_data={"y": 2})
    assert a == b

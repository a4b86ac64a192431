"""Tests for activity filters."""

from datetime import date

import pytest

from doubledash.services.analytics.filters import (
    filter_by_date_range,
    filter_by_time_range,
    filter_by_type,
    search_activities,
    sort_activities,
)


@pytest.fixture
def mixed_activities(make_activity, miles):
    return [
        make_activity(activity_id="run-feb", type="Run", name="Easy Run",
                      start_date="2024-02-10T10:00:00Z", distance=miles(5), moving_time=2700),
        make_activity(activity_id="run-mar", type="Run", name="Tempo Tuesday",
                      start_date="2024-03-12T10:00:00Z", distance=miles(6), moving_time=2500),
        make_activity(activity_id="ride-mar", type="Ride", name="Commute",
                      start_date="2024-03-11T08:00:00Z", distance=miles(9), moving_time=2400),
        make_activity(activity_id="run-old", type="Run", name="New Year Run",
                      start_date="2023-01-01T10:00:00Z", distance=miles(3), moving_time=1500),
    ]


def _ids(activities):
    return [a.activity_id for a in activities]


class TestFilterByType:
    """Tests for filter_by_type."""

    def test_keeps_matching_type(self, mixed_activities):
        assert _ids(filter_by_type(mixed_activities, "Ride")) == ["ride-mar"]

    @pytest.mark.parametrize("activity_type", [None, "", "all"])
    def test_all_keeps_everything(self, mixed_activities, activity_type):
        assert len(filter_by_type(mixed_activities, activity_type)) == 4

    def test_exact_match_only(self, mixed_activities):
        assert filter_by_type(mixed_activities, "run") == []


class TestFilterByDate:
    """Tests for date and time-range filters."""

    def test_date_range_inclusive(self, mixed_activities, utc_calendar):
        kept = filter_by_date_range(
            mixed_activities, date(2024, 3, 11), date(2024, 3, 12), utc_calendar,
        )
        assert _ids(kept) == ["run-mar", "ride-mar"]

    def test_30_day_window(self, mixed_activities, utc_calendar, fixed_now):
        kept = filter_by_time_range(mixed_activities, "30d", utc_calendar, fixed_now)
        assert _ids(kept) == ["run-mar", "ride-mar"]

    def test_90_day_window(self, mixed_activities, utc_calendar, fixed_now):
        kept = filter_by_time_range(mixed_activities, "90d", utc_calendar, fixed_now)
        assert _ids(kept) == ["run-feb", "run-mar", "ride-mar"]

    def test_all_range(self, mixed_activities, utc_calendar, fixed_now):
        assert len(filter_by_time_range(mixed_activities, "all", utc_calendar, fixed_now)) == 4

    def test_unknown_range(self, mixed_activities, utc_calendar, fixed_now):
        with pytest.raises(ValueError):
            filter_by_time_range(mixed_activities, "2w", utc_calendar, fixed_now)


class TestSearchAndSort:
    """Tests for search_activities and sort_activities."""

    def test_search_case_insensitive(self, mixed_activities):
        assert _ids(search_activities(mixed_activities, "run")) == ["run-feb", "run-old"]
        assert _ids(search_activities(mixed_activities, "TEMPO")) == ["run-mar"]

    def test_empty_search_keeps_everything(self, mixed_activities):
        assert len(search_activities(mixed_activities, "")) == 4

    def test_sort_by_date_newest_first(self, mixed_activities):
        assert _ids(sort_activities(mixed_activities)) == ["run-mar", "ride-mar", "run-feb", "run-old"]

    def test_sort_by_distance(self, mixed_activities):
        assert _ids(sort_activities(mixed_activities, "distance"))[0] == "ride-mar"

    def test_sort_by_duration(self, mixed_activities):
        assert _ids(sort_activities(mixed_activities, "duration"))[0] == "run-feb"

    def test_sort_does_not_mutate(self, mixed_activities):
        before = _ids(mixed_activities)
        sort_activities(mixed_activities, "distance")
        assert _ids(mixed_activities) == before

    def test_unknown_sort_key(self, mixed_activities):
        with pytest.raises(ValueError):
            sort_activities(mixed_activities, "heartrate")

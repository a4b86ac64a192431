"""Tests for logging setup and aggregation timing."""

import io
import json
import logging

import pytest

from doubledash.core.logging import AggregationTracker, get_logger, setup_logging, track_aggregation


class FakeLogger:
    """Records structlog-style calls."""

    def __init__(self):
        self.calls = []

    def debug(self, event, **kwargs):
        self.calls.append(("debug", event, kwargs))

    def info(self, event, **kwargs):
        self.calls.append(("info", event, kwargs))

    def error(self, event, **kwargs):
        self.calls.append(("error", event, kwargs))


class TestTrackAggregation:
    """Tests for track_aggregation and AggregationTracker."""

    def test_success_logs_completion(self):
        logger = FakeLogger()

        with track_aggregation(logger, "build_report", user_id="u1") as run:
            run.set_activity_count(12)

        level, event, fields = logger.calls[-1]
        assert (level, event) == ("info", "Aggregation completed")
        assert fields["operation"] == "build_report"
        assert fields["activity_count"] == 12
        assert fields["user_id"] == "u1"
        assert fields["duration_ms"] >= 0

    def test_failure_logs_error_and_reraises(self):
        logger = FakeLogger()

        with pytest.raises(ValueError):
            with track_aggregation(logger, "build_report"):
                raise ValueError("boom")

        level, event, fields = logger.calls[-1]
        assert (level, event) == ("error", "Aggregation failed")
        assert fields["error_type"] == "ValueError"
        assert fields["error_message"] == "boom"

    def test_tracker_records_duration(self):
        tracker = AggregationTracker(FakeLogger(), "build_report")

        tracker.start()
        tracker.finish()

        assert tracker.log.success
        assert tracker.log.duration_ms >= 0


class TestSetupLogging:
    """Tests for setup_logging."""

    @pytest.fixture(autouse=True)
    def restore_root_handlers(self):
        root = logging.getLogger()
        handlers = list(root.handlers)
        level = root.level
        yield
        root.handlers = handlers
        root.setLevel(level)

    def test_writes_json_lines_to_stream(self):
        stream = io.StringIO()
        setup_logging(stream=stream)

        get_logger("doubledash.tests").info("Report built", activity_count=3)

        line = stream.getvalue().strip().splitlines()[-1]
        payload = json.loads(line)
        assert payload["event"] == "Report built"
        assert payload["activity_count"] == 3
        assert payload["level"] == "info"

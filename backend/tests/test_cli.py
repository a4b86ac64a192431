"""Tests for the command line entry point."""

import json
import logging

import pytest

from doubledash.cli import create_parser, load_activities, main


@pytest.fixture(autouse=True)
def restore_root_handlers():
    """main() points the root handler at the captured stderr; put it back."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def activities_file(tmp_path, raw_stored_activities):
    path = tmp_path / "activities.json"
    path.write_text(json.dumps(raw_stored_activities), encoding="utf-8")
    return path


class TestParser:
    """Tests for argument parsing."""

    def test_defaults(self):
        args = create_parser().parse_args(["activities.json"])

        assert args.source == "stored"
        assert args.time_range == "all"
        assert args.activity_type is None
        assert not args.skip_invalid
        assert not args.as_json

    def test_rejects_unknown_range(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["activities.json", "--range", "2w"])


class TestLoadActivities:
    """Tests for load_activities."""

    def test_list(self, activities_file):
        assert len(load_activities(activities_file)) == 3

    def test_wrapped_object(self, tmp_path, raw_stored_activities):
        path = tmp_path / "wrapped.json"
        path.write_text(json.dumps({"activities": raw_stored_activities, "count": 3}), encoding="utf-8")

        assert len(load_activities(path)) == 3

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"items": []}), encoding="utf-8")

        with pytest.raises(ValueError):
            load_activities(path)


class TestMain:
    """Tests for main()."""

    def test_json_output(self, activities_file, capsys):
        exit_code = main([str(activities_file), "--json", "--weeks", "4", "--timezone", "UTC"])

        assert exit_code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["summary"]["totalActivities"] == 3
        assert len(data["weeklyStats"]) == 4
        assert data["filters"]["timezone"] == "UTC"

    def test_text_output(self, activities_file, capsys):
        exit_code = main([str(activities_file), "--type", "Run"])

        assert exit_code == 0
        out = capsys.readouterr().out
        assert "=== Activity Summary ===" in out
        assert "Activities: 2" in out

    def test_output_file(self, activities_file, tmp_path, capsys):
        output = tmp_path / "report.json"

        exit_code = main([str(activities_file), "--output", str(output)])

        assert exit_code == 0
        assert json.loads(output.read_text(encoding="utf-8"))["summary"]["totalActivities"] == 3

    def test_missing_file(self, tmp_path, capsys):
        exit_code = main([str(tmp_path / "missing.json")])

        assert exit_code == 1
        assert "File Error" in capsys.readouterr().err

    def test_invalid_json(self, tmp_path, capsys):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        assert main([str(path)]) == 1
        assert "Invalid JSON" in capsys.readouterr().err

    def test_invalid_date_fails(self, tmp_path, raw_stored_activities, capsys):
        raw_stored_activities[0]["start_date"] = "soon"
        path = tmp_path / "activities.json"
        path.write_text(json.dumps(raw_stored_activities), encoding="utf-8")

        assert main([str(path)]) == 1
        assert "--skip-invalid" in capsys.readouterr().err

    def test_skip_invalid(self, tmp_path, raw_stored_activities, capsys):
        raw_stored_activities[0]["start_date"] = "soon"
        path = tmp_path / "activities.json"
        path.write_text(json.dumps(raw_stored_activities), encoding="utf-8")

        assert main([str(path), "--skip-invalid", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["skippedActivities"] == 1
        assert data["summary"]["totalActivities"] == 2

    def test_unknown_timezone(self, activities_file, capsys):
        assert main([str(activities_file), "--timezone", "Nowhere/Special"]) == 1
        assert "Data Validation Error" in capsys.readouterr().err

    def test_unknown_week_start(self, activities_file, capsys):
        assert main([str(activities_file), "--week-start", "someday"]) == 1

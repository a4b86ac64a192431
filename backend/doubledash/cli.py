"""
DoubleDash Analytics - Command line entry point.

Reads a JSON file of activities (a list, or an object with an "activities"
key as returned by the activities endpoint) and prints the analytics report.
"""
import argparse
import json
import sys
from pathlib import Path
from typing import Any, List, Optional

from doubledash.core.config import settings
from doubledash.core.logging import get_logger, setup_logging
from doubledash.services.analytics import AnalyticsCalculator, CalendarPolicy, DataError
from doubledash.services.analytics.calendar import parse_weekday
from doubledash.services.analytics.filters import TIME_RANGES

logger = get_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create and return the argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="doubledash",
        description="Summarize running activities: rollups, distributions and personal records.",
        epilog="Example: doubledash activities.json --type Run --range 90d --timezone America/Denver",
    )

    parser.add_argument("input", type=Path, help="Path to activities JSON file")
    parser.add_argument(
        "--source",
        choices=["strava", "stored"],
        default="stored",
        help="Shape of the input records (default: stored)",
    )
    parser.add_argument("--type", dest="activity_type", default=None, help="Only include this activity type")
    parser.add_argument(
        "--range",
        dest="time_range",
        choices=list(TIME_RANGES),
        default="all",
        help="Trailing time window (default: all)",
    )
    parser.add_argument("--weeks", type=int, default=None, help="Weekly window size")
    parser.add_argument("--year", type=int, default=None, help="Year for goal progress")
    parser.add_argument("--goal", dest="goal_miles", type=float, default=None, help="Yearly goal in miles")
    parser.add_argument("--timezone", default=None, help="IANA timezone for month/week bucketing")
    parser.add_argument("--week-start", default=None, help="First day of the week (default: sunday)")
    parser.add_argument(
        "--skip-invalid",
        action="store_true",
        help="Skip activities with unparsable start dates instead of failing",
    )
    parser.add_argument("--json", dest="as_json", action="store_true", help="Print the report as JSON")
    parser.add_argument("--output", type=Path, default=None, help="Write the JSON report to this file")

    return parser


def load_activities(path: Path) -> List[dict[str, Any]]:
    """
    Load raw activity items from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the JSON is not a list of activity objects
    """
    with path.open(encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("activities")

    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise ValueError("Expected a list of activity objects or an object with an 'activities' list")

    return data


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    args = create_parser().parse_args(argv)
    setup_logging(stream=sys.stderr)

    try:
        calendar = CalendarPolicy(
            timezone=args.timezone or settings.ANALYTICS_TIMEZONE,
            week_start=parse_weekday(args.week_start or settings.WEEK_START_DAY),
        )
        calculator = AnalyticsCalculator(
            calendar=calendar,
            invalid_date_policy="skip" if args.skip_invalid else None,
        )

        raw_items = load_activities(args.input)
        report = calculator.build_report_from_raw(
            raw_items,
            source=args.source,
            activity_type=args.activity_type,
            time_range=args.time_range,
            weeks=args.weeks,
            year=args.year,
            goal_miles=args.goal_miles,
        )
    except FileNotFoundError as e:
        print(f"File Error: {e}", file=sys.stderr)
        return 1
    except json.JSONDecodeError as e:
        print(f"Invalid JSON: {e}", file=sys.stderr)
        return 1
    except DataError as e:
        print(f"Data Error: {e}", file=sys.stderr)
        print("   Fix the record or rerun with --skip-invalid.", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Data Validation Error: {e}", file=sys.stderr)
        return 1

    if args.output:
        args.output.write_text(json.dumps(report.to_dict(), indent=2), encoding="utf-8")
        logger.info("Wrote analytics report", path=str(args.output))

    if args.as_json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print(calculator.format_report(report))

    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Calendar policy and grouping primitives.

Activities are bucketed into months and weeks in one explicit timezone,
chosen by configuration, instead of the activity's own `timezone` field or
the host's locale.
"""
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from doubledash.core.config import settings
from doubledash.services.analytics.adapter import Activity
from doubledash.services.analytics.exceptions import DataError

WEEKDAYS = {
    "monday": 0,
    "tuesday": 1,
    "wednesday": 2,
    "thursday": 3,
    "friday": 4,
    "saturday": 5,
    "sunday": 6,
}


@dataclass(frozen=True)
class CalendarPolicy:
    """
    Where month and week boundaries fall.

    Attributes:
        timezone: IANA zone name used to localize `start_date`
        week_start: Python weekday number the week starts on (6 = Sunday)
    """
    timezone: str = "UTC"
    week_start: int = 6

    def __post_init__(self):
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {self.timezone}") from e
        if not 0 <= self.week_start <= 6:
            raise ValueError(f"week_start must be 0-6, got {self.week_start}")

    @classmethod
    def from_settings(cls) -> "CalendarPolicy":
        """Build the policy from application settings."""
        return cls(
            timezone=settings.ANALYTICS_TIMEZONE,
            week_start=parse_weekday(settings.WEEK_START_DAY),
        )

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def localize(self, moment: datetime) -> datetime:
        """Convert an aware datetime into the policy timezone."""
        return moment.astimezone(self.tzinfo)

    def now(self, moment: Optional[datetime] = None) -> datetime:
        """
        Current time in the policy timezone.

        An explicit `moment` is used instead of the clock; naive values are
        read as wall time in the policy timezone.
        """
        if moment is None:
            return datetime.now(self.tzinfo)
        if moment.tzinfo is None:
            return moment.replace(tzinfo=self.tzinfo)
        return self.localize(moment)

    def local_date(self, activity: Activity) -> date:
        """
        Calendar date of the activity's start in the policy timezone.

        Raises:
            DataError: If the start date is unparsable or falls outside the
                supported date range once localized
        """
        parsed = parse_start_date(activity)
        try:
            return self.localize(parsed).date()
        except OverflowError:
            raise self._out_of_range(activity)

    def start_of_week(self, day: date) -> date:
        offset = (day.weekday() - self.week_start) % 7
        return day - timedelta(days=offset)

    def month_key(self, activity: Activity) -> str:
        return self.local_date(activity).strftime("%Y-%m")

    def week_key(self, activity: Activity) -> str:
        day = self.local_date(activity)
        try:
            return self.start_of_week(day).isoformat()
        except OverflowError:
            raise self._out_of_range(activity)

    def _out_of_range(self, activity: Activity) -> DataError:
        return DataError(
            f"Activity {activity.activity_id} start_date {activity.start_date!r} "
            f"is out of range in {self.timezone}",
            activity_id=activity.activity_id,
            value=activity.start_date,
        )


def parse_weekday(name: str) -> int:
    """Map a weekday name to Python's weekday number."""
    try:
        return WEEKDAYS[name.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown weekday: {name}")


def parse_start_date(activity: Activity) -> datetime:
    """
    Parse an activity's ISO-8601 `start_date` into an aware datetime.

    A trailing "Z" is accepted and naive timestamps are read as UTC.

    Raises:
        DataError: If the value is missing or unparsable
    """
    value = activity.start_date
    if not isinstance(value, str) or not value.strip():
        raise DataError(
            f"Activity {activity.activity_id} has no start_date",
            activity_id=activity.activity_id,
            value=value,
        )

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise DataError(
            f"Activity {activity.activity_id} has invalid start_date {value!r}",
            activity_id=activity.activity_id,
            value=value,
        )

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def group_by_month(
    activities: Iterable[Activity],
    calendar: Optional[CalendarPolicy] = None,
) -> Dict[str, List[Activity]]:
    """Group activities by "YYYY-MM" in the policy timezone."""
    calendar = calendar or CalendarPolicy.from_settings()
    grouped: Dict[str, List[Activity]] = defaultdict(list)
    for activity in activities:
        grouped[calendar.month_key(activity)].append(activity)
    return dict(grouped)


def group_by_week(
    activities: Iterable[Activity],
    calendar: Optional[CalendarPolicy] = None,
) -> Dict[str, List[Activity]]:
    """Group activities by the ISO date of their week start."""
    calendar = calendar or CalendarPolicy.from_settings()
    grouped: Dict[str, List[Activity]] = defaultdict(list)
    for activity in activities:
        grouped[calendar.week_key(activity)].append(activity)
    return dict(grouped)

"""
Data Source Adapters - Normalize raw activity payloads into Activity records.

Supported sources:
- Strava API activity JSON
- Stored activity items (Strava fields plus userId/activityId keys)
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from doubledash.core.logging import get_logger

logger = get_logger(__name__)

TRUE_STRINGS = ("true", "1", "yes")


@dataclass
class Activity:
    """
    One imported exercise session.

    This is the only input shape the aggregation functions accept. Numeric
    measures are already defaulted to 0 by the adapters; heart rate fields
    stay None when the upstream record has none.
    """
    activity_id: Optional[str]
    start_date: Optional[str]  # ISO-8601, authoritative for grouping

    user_id: Optional[str] = None
    start_date_local: Optional[str] = None
    timezone: Optional[str] = None
    name: str = ""
    type: str = "Unknown"
    sport_type: Optional[str] = None

    distance: float = 0.0  # meters
    moving_time: float = 0.0  # seconds
    elapsed_time: float = 0.0  # seconds
    total_elevation_gain: float = 0.0  # meters

    average_speed: float = 0.0  # m/s
    max_speed: float = 0.0  # m/s

    has_heartrate: bool = False
    average_heartrate: Optional[float] = None
    max_heartrate: Optional[float] = None

    # Raw payload kept for debugging
    raw_data: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    def has_hr_data(self) -> bool:
        """Check if heart rate may be used in heart rate aggregates."""
        return (
            self.has_heartrate
            and self.average_heartrate is not None
            and self.max_heartrate is not None
        )


def _number(value: Any) -> float:
    """Missing or null measures count as 0 for summation."""
    if value is None:
        return 0.0
    return float(value)


def _flag(value: Any) -> bool:
    """Read a boolean that may arrive as a string ("true" / "false")."""
    if isinstance(value, str):
        return value.strip().lower() in TRUE_STRINGS
    if value is None:
        return False
    return bool(value)


def _optional_number(value: Any) -> Optional[float]:
    if value is None:
        return None
    return float(value)


class RawDataAdapter(ABC):
    """Abstract base class for data source adapters."""

    source_name: str = "unknown"

    @abstractmethod
    def normalize(self, raw_data: Dict[str, Any]) -> Activity:
        """
        Normalize raw data to an Activity.

        Args:
            raw_data: Raw data from the source

        Returns:
            Activity with unified structure
        """
        pass

    def normalize_many(self, raw_items: Iterable[Dict[str, Any]]) -> List[Activity]:
        """Normalize a list of raw items, preserving order."""
        return [self.normalize(item) for item in raw_items]

    def _build_activity(
        self,
        raw_data: Dict[str, Any],
        activity_id: Optional[str],
        user_id: Optional[str],
    ) -> Activity:
        """Map the Strava summary fields shared by every source."""
        return Activity(
            activity_id=activity_id,
            user_id=user_id,
            start_date=raw_data.get("start_date"),
            start_date_local=raw_data.get("start_date_local"),
            timezone=raw_data.get("timezone"),
            name=raw_data.get("name") or "",
            type=raw_data.get("type") or "Unknown",
            sport_type=raw_data.get("sport_type"),
            distance=_number(raw_data.get("distance")),
            moving_time=_number(raw_data.get("moving_time")),
            elapsed_time=_number(raw_data.get("elapsed_time")),
            total_elevation_gain=_number(raw_data.get("total_elevation_gain")),
            average_speed=_number(raw_data.get("average_speed")),
            max_speed=_number(raw_data.get("max_speed")),
            has_heartrate=_flag(raw_data.get("has_heartrate")),
            average_heartrate=_optional_number(raw_data.get("average_heartrate")),
            max_heartrate=_optional_number(raw_data.get("max_heartrate")),
            raw_data=raw_data,
        )


class StravaAdapter(RawDataAdapter):
    """
    Adapter for Strava API activity data.

    Strava identifies activities by `id` and owners by `athlete.id`.
    """

    source_name = "strava"

    def normalize(self, raw_data: Dict[str, Any]) -> Activity:
        """Normalize Strava activity data."""
        raw_id = raw_data.get("id")
        athlete = raw_data.get("athlete")
        if isinstance(athlete, dict):
            athlete_id = athlete.get("id", raw_data.get("athlete_id"))
        else:
            athlete_id = raw_data.get("athlete_id")

        activity = self._build_activity(
            raw_data,
            activity_id=str(raw_id) if raw_id is not None else None,
            user_id=str(athlete_id) if athlete_id is not None else None,
        )

        logger.debug(
            "Normalized Strava activity",
            activity_id=activity.activity_id,
            activity_type=activity.type,
            has_hr=activity.has_hr_data(),
        )

        return activity


class StoredActivityAdapter(RawDataAdapter):
    """
    Adapter for activities as kept by the storage layer.

    Items carry the Strava summary fields plus `userId` and `activityId`.
    """

    source_name = "stored"

    def normalize(self, raw_data: Dict[str, Any]) -> Activity:
        """Normalize a stored activity item."""
        activity_id = raw_data.get("activityId", raw_data.get("id"))
        user_id = raw_data.get("userId")

        return self._build_activity(
            raw_data,
            activity_id=str(activity_id) if activity_id is not None else None,
            user_id=str(user_id) if user_id is not None else None,
        )


# Adapter registry
_ADAPTERS = {
    "strava": StravaAdapter,
    "stored": StoredActivityAdapter,
}


def get_adapter(source: str) -> RawDataAdapter:
    """
    Get the appropriate adapter for a data source.

    Args:
        source: Data source name (strava, stored)

    Returns:
        Adapter instance
    """
    adapter_class = _ADAPTERS.get(source.lower())

    if not adapter_class:
        logger.warning(f"Unknown data source: {source}, falling back to stored")
        adapter_class = StoredActivityAdapter

    return adapter_class()


def normalize_activities(
    raw_items: Iterable[Dict[str, Any]],
    source: str = "stored",
) -> List[Activity]:
    """Normalize raw payloads from one source."""
    return get_adapter(source).normalize_many(raw_items)

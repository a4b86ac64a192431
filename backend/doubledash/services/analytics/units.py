"""
Unit conversion primitives.

Strava reports meters and seconds; every chart works in miles, feet, hours
and minutes per mile.
"""
import math

METERS_PER_MILE = 1609.34
FEET_PER_METER = 3.28084


def meters_to_miles(meters: float) -> float:
    return meters / METERS_PER_MILE


def meters_to_feet(meters: float) -> float:
    return meters * FEET_PER_METER


def seconds_to_minutes(seconds: float) -> float:
    return seconds / 60


def seconds_to_hours(seconds: float) -> float:
    return seconds / 3600


def pace_per_mile(moving_time_seconds: float, distance_meters: float) -> float:
    """
    Minutes per mile.

    Returns 0 when the distance is not positive. That 0 is a sentinel, not a
    fast pace: statistics over paces must drop it.
    """
    if distance_meters <= 0:
        return 0.0
    return seconds_to_minutes(moving_time_seconds) / meters_to_miles(distance_meters)


def calculate_efficiency(distance_meters: float, time_seconds: float) -> float:
    """Miles covered per minute of moving time (0 when time is 0)."""
    minutes = seconds_to_minutes(time_seconds)
    if minutes <= 0:
        return 0.0
    return meters_to_miles(distance_meters) / minutes


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_pace(pace_minutes: float) -> str:
    """
    Render a pace as M:SS.

    Seconds are rounded half-up on the total, so 5.999 becomes 6:00 rather
    than 5:60.
    """
    if pace_minutes <= 0 or not math.isfinite(pace_minutes):
        return "0:00"
    minutes, seconds = divmod(_round_half_up(pace_minutes * 60), 60)
    return f"{minutes}:{seconds:02d}"


def format_duration(seconds: float) -> str:
    """Render a duration as H:MM:SS."""
    total = max(int(seconds), 0)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours}:{minutes:02d}:{secs:02d}"

"""Rounding and time/pace formatting helpers shared across the engine."""

import math
from typing import Optional


def round_half_up(value: float, ndigits: int = 0) -> float:
    """
    Round half away from zero.

    Python's built-in round() uses banker's rounding (round(2.5) == 2),
    which would make weekly mileage and pace values drift from their
    published tables. All rounding in the engine goes through here.

    Args:
        value: Number to round
        ndigits: Decimal places to keep

    Returns:
        Rounded value as a float
    """
    factor = 10 ** ndigits
    rounded = math.floor(abs(value) * factor + 0.5) / factor
    return math.copysign(rounded, value) if value != 0 else 0.0


def format_time(seconds: float) -> str:
    """Format time in seconds to H:MM:SS or MM:SS string."""
    total = int(round_half_up(seconds))
    hours = total // 3600
    minutes = (total % 3600) // 60
    secs = total % 60

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    else:
        return f"{minutes}:{secs:02d}"


def format_pace(pace_sec_per_mile: Optional[float], unit: str = "/mi") -> str:
    """Format pace in sec/mile to M:SS/mi string."""
    if pace_sec_per_mile is None or pace_sec_per_mile <= 0:
        return "--"
    total = int(round_half_up(pace_sec_per_mile))
    return f"{total // 60}:{total % 60:02d}{unit}"


def parse_time(time_str: str) -> int:
    """
    Parse a race time string to seconds.

    Accepts formats: H:MM:SS, MM:SS, or just seconds

    Args:
        time_str: Time string (e.g., "1:45:00", "25:30", "1200")

    Returns:
        Time in seconds

    Raises:
        ValueError: If time format is invalid
    """
    time_str = time_str.strip()

    try:
        return int(float(time_str))
    except ValueError:
        pass

    parts = time_str.split(":")

    try:
        if len(parts) == 3:
            hours, minutes, seconds = parts
            return int(hours) * 3600 + int(minutes) * 60 + int(float(seconds))
        elif len(parts) == 2:
            minutes, seconds = parts
            return int(minutes) * 60 + int(float(seconds))
        else:
            raise ValueError(f"Invalid time format: {time_str}")
    except (ValueError, TypeError) as e:
        raise ValueError(f"Invalid time format: {time_str}") from e

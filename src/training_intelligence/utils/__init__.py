"""Utility helpers."""

from .formatting import (
    round_half_up,
    format_time,
    format_pace,
    parse_time,
)

__all__ = [
    "round_half_up",
    "format_time",
    "format_pace",
    "parse_time",
]

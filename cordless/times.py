"""Formatting of message times according to the user's settings."""

from __future__ import annotations

from datetime import datetime, time
from typing import Union

from cordless.config import TimeFormat, get_config


def time_to_string(moment: Union[datetime, time]) -> str:
    """Format the time of day as configured; empty if times are hidden."""
    times = get_config().times
    if times == TimeFormat.HOUR_MINUTE_AND_SECONDS:
        return f"{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
    if times == TimeFormat.HOUR_AND_MINUTE:
        return f"{moment.hour:02d}:{moment.minute:02d}"
    return ""


def time_to_local_string(moment: datetime) -> str:
    """Convert to local time, then format as configured."""
    return time_to_string(moment.astimezone())
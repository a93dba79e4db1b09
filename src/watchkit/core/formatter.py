from __future__ import annotations

import datetime
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from watchkit.core.time_of_day import TimeOfDay


class TimeFormat(Enum):
    H12 = 12
    H24 = 24

    @classmethod
    def coerce(cls, value) -> TimeFormat:
        """Accept 12, 24, '12', '24h', '12H' or a TimeFormat."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            cleaned = value.strip().lower().removesuffix("h")
            value = int(cleaned) if cleaned.isdigit() else cleaned
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Time format must be 12 or 24, got {value!r}") from None


@dataclass(frozen=True)
class FormattedTime:
    """Display text plus the fields it was built from.

    ``hour`` is the displayed hour: 1-12 in 12-hour mode, 0-23 otherwise.
    ``period`` is None in 24-hour mode.
    """
    text: str
    hour: int
    minute: int
    second: int
    period: Optional[str] = None

    def __str__(self):
        return self.text


def format_time(value: TimeOfDay | datetime.datetime | datetime.time, mode=TimeFormat.H24) -> FormattedTime:
    """Format a time of day for display.

    The live clock and the alarm list both go through this function.
    """
    mode = TimeFormat.coerce(mode)
    if not isinstance(value, TimeOfDay):
        value = TimeOfDay.from_datetime(value)

    if mode is TimeFormat.H24:
        text = f"{value.hour:02}:{value.minute:02}:{value.second:02}"
        return FormattedTime(text, value.hour, value.minute, value.second)

    period = "PM" if value.hour >= 12 else "AM"
    hour = value.hour % 12 or 12
    text = f"{hour}:{value.minute:02}:{value.second:02} {period}"
    return FormattedTime(text, hour, value.minute, value.second, period)

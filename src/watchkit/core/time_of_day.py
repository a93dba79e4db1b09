from __future__ import annotations

import datetime
import re
from dataclasses import dataclass
from typing import Optional

from watchkit.utils.custom_exception import InvalidTimeOfDayError

SECONDS_PER_DAY = 24 * 3600

_TIME_RE = re.compile(
    r"^\s*(?P<hour>\d{1,2}):(?P<minute>\d{2})(?::(?P<second>\d{2}))?\s*(?P<period>[AaPp][Mm])?\s*$"
)


def _check_field(name, value, upper):
    # bool is an int subclass but never a valid clock field
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidTimeOfDayError(f"{name} must be an integer, got {value!r}")
    if not 0 <= value <= upper:
        raise InvalidTimeOfDayError(f"{name} must be between 0 and {upper}, got {value}")


@dataclass(frozen=True, order=True)
class TimeOfDay:
    """A timezone-naive wall-clock time, always stored as 24-hour fields.

    Ordering and equality compare (hour, minute, second) lexicographically.
    """
    hour: int
    minute: int
    second: int = 0

    def __post_init__(self):
        _check_field("hour", self.hour, 23)
        _check_field("minute", self.minute, 59)
        _check_field("second", self.second, 59)

    def __str__(self):
        return f"{self.hour:02}:{self.minute:02}:{self.second:02}"

    @classmethod
    def from_datetime(cls, value: datetime.datetime | datetime.time) -> TimeOfDay:
        """Drop the date and sub-second part of ``value``."""
        return cls(value.hour, value.minute, value.second)

    @classmethod
    def from_seconds(cls, total: int) -> TimeOfDay:
        if isinstance(total, bool) or not isinstance(total, int):
            raise InvalidTimeOfDayError(f"seconds since midnight must be an integer, got {total!r}")
        if not 0 <= total < SECONDS_PER_DAY:
            raise InvalidTimeOfDayError(f"seconds since midnight out of range: {total}")
        hour, rest = divmod(total, 3600)
        minute, second = divmod(rest, 60)
        return cls(hour, minute, second)

    def to_seconds(self) -> int:
        return self.hour * 3600 + self.minute * 60 + self.second

    @classmethod
    def parse(cls, text: str, period: Optional[str] = None) -> TimeOfDay:
        """
        Parses ``H:MM``, ``HH:MM:SS`` or either form followed by AM/PM.

        Args:
            text (str): The time as typed by the user, e.g. '07:30', '7:30:15 pm'.
            period (str): 'AM' or 'PM' when the period comes from a separate
                input. It must agree with a period written in ``text``.

        Returns:
            TimeOfDay: The 24-hour value. With a period, the hour must be 1-12
            and 12 AM maps to hour 0.

        Raises:
            InvalidTimeOfDayError: If the text is malformed or out of range.
        """
        if not isinstance(text, str):
            raise InvalidTimeOfDayError(f"time must be a string, got {text!r}")
        match = _TIME_RE.match(text)
        if not match:
            raise InvalidTimeOfDayError(f"unrecognised time {text!r}")

        written = match.group("period")
        if written and period and written.upper() != period.strip().upper():
            raise InvalidTimeOfDayError(f"conflicting periods {written!r} and {period!r}")
        period = (written or period or "").strip().upper() or None
        if period not in (None, "AM", "PM"):
            raise InvalidTimeOfDayError(f"period must be AM or PM, got {period!r}")

        hour = int(match.group("hour"))
        minute = int(match.group("minute"))
        second = int(match.group("second") or 0)

        if period is not None:
            if not 1 <= hour <= 12:
                raise InvalidTimeOfDayError(f"12-hour times need an hour between 1 and 12, got {hour}")
            hour = hour % 12 + (12 if period == "PM" else 0)

        return cls(hour, minute, second)

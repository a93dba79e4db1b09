from watchkit.core.time_of_day import TimeOfDay
from watchkit.core.formatter import FormattedTime, TimeFormat, format_time

__all__ = ["TimeOfDay", "FormattedTime", "TimeFormat", "format_time"]

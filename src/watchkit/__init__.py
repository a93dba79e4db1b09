from watchkit.core import FormattedTime, TimeFormat, TimeOfDay, format_time
from watchkit.core.watch import AlarmView, WatchEngine, WatchSnapshot
from watchkit.config import Settings
from watchkit.tools import (
    Alarm,
    AlarmRegistry,
    AlarmTrigger,
    ClockSource,
    Stopwatch,
    StopwatchPhase,
    Subscription,
)
from watchkit.utils.custom_exception import (
    AlarmNotFoundError,
    DuplicateAlarmError,
    InvalidTimeOfDayError,
    InvalidTransitionError,
    WatchError,
)

__version__ = "0.1.0"

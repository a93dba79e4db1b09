from watchkit.tools.time_tools import (
    Alarm,
    AlarmRegistry,
    AlarmTrigger,
    ClockSource,
    Stopwatch,
    StopwatchPhase,
    Subscription,
)

from watchkit.tools.time_tools.alarm import Alarm, AlarmRegistry
from watchkit.tools.time_tools.alarm_trigger import AlarmTrigger
from watchkit.tools.time_tools.clock import ClockSource, Subscription
from watchkit.tools.time_tools.stopwatch import Stopwatch, StopwatchPhase

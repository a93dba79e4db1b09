from __future__ import annotations

import datetime
from dataclasses import asdict, dataclass
from typing import Optional

from watchkit.config import Settings
from watchkit.core.formatter import TimeFormat, format_time
from watchkit.core.time_of_day import TimeOfDay
from watchkit.tools.time_tools.alarm import Alarm, AlarmRegistry
from watchkit.tools.time_tools.alarm_trigger import AlarmTrigger
from watchkit.tools.time_tools.clock import ClockSource
from watchkit.tools.time_tools.stopwatch import Stopwatch
from watchkit.utils import Event, setup_logger

logger = setup_logger(__name__)


@dataclass(frozen=True)
class AlarmView:
    id: int
    display: str
    active: bool
    ringing: bool
    label: str


@dataclass(frozen=True)
class WatchSnapshot:
    """Read-only view for the rendering side, rebuilt on every tick."""
    current_time: str
    time_format: int
    alarms: tuple[AlarmView, ...]
    stopwatch: str
    stopwatch_phase: str
    laps: tuple[str, ...]

    def as_dict(self):
        return asdict(self)


class WatchEngine:
    """
    Wires the clock, alarms and stopwatch together behind one object.

    The UI side calls the alarm and stopwatch operations directly and listens
    to ``on_snapshot`` (once per tick) and ``on_alarm_fired``.
    """
    def __init__(self, clock: Optional[ClockSource] = None, settings: Optional[Settings] = None, loop=None):
        self.settings = settings or Settings.from_env()
        self.clock = clock or ClockSource(loop=loop)
        self.time_format = self.settings.time_format

        self.registry = AlarmRegistry()
        self.trigger = AlarmTrigger(self.registry, ring_seconds=self.settings.ring_seconds, loop=loop)
        self.stopwatch = Stopwatch(monotonic=self.clock.monotonic, loop=loop)

        self.on_alarm_fired = self.trigger.on_alarm_fired
        self.on_snapshot = Event(loop=loop)
        self._subscription = None

    # --- lifecycle ---

    @property
    def is_running(self):
        return self._subscription is not None

    def start(self):
        if self._subscription is not None:
            logger.warning("WatchEngine is already running.")
            return
        self._subscription = self.clock.subscribe(self.tick)
        try:
            self.clock.start()
        except Exception:
            self._subscription.cancel()
            self._subscription = None
            raise
        logger.info("WatchEngine started.")

    def stop(self):
        if self._subscription is None:
            return
        try:
            self.clock.stop()
        finally:
            self._subscription.cancel()
            self._subscription = None
        logger.info("WatchEngine stopped.")

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()

    def tick(self, now: Optional[datetime.datetime] = None):
        """Handle one clock tick: check alarms, then publish a snapshot."""
        now = now or self.clock.now()
        self.trigger.check(now)
        snapshot = self.snapshot(now)
        self.on_snapshot.emit(snapshot)
        return snapshot

    # --- inbound operations ---

    def add_alarm(self, time, period: Optional[str] = None, active: bool = True, label: Optional[str] = None) -> Alarm:
        """
        Adds an alarm from a TimeOfDay or from text such as '07:30:00' or '7:30 PM'.
        """
        if not isinstance(time, TimeOfDay):
            time = TimeOfDay.parse(time, period=period)
        return self.registry.add(time, active=active, label=label)

    def toggle_alarm(self, alarm_id) -> Alarm:
        return self.registry.toggle(alarm_id)

    def remove_alarm(self, alarm_id) -> Alarm:
        return self.registry.remove(alarm_id)

    def dismiss_alarm(self, alarm_id) -> bool:
        self.registry.get(alarm_id)
        return self.trigger.dismiss(alarm_id)

    def set_format(self, mode):
        self.time_format = TimeFormat.coerce(mode)
        logger.info(f"Display format set to {self.time_format.value}h.")
        return self.time_format

    # --- outbound view ---

    def format(self, value) -> str:
        return format_time(value, self.time_format).text

    def snapshot(self, now: Optional[datetime.datetime] = None) -> WatchSnapshot:
        now = now or self.clock.now()
        alarms = tuple(
            AlarmView(
                id=alarm.id,
                display=self.format(alarm.time),
                active=alarm.active,
                ringing=self.trigger.is_ringing(alarm.id, now),
                label=alarm.label,
            )
            for alarm in self.registry.list()
        )
        status = self.stopwatch.get_status()
        return WatchSnapshot(
            current_time=self.format(now),
            time_format=self.time_format.value,
            alarms=alarms,
            stopwatch=status["elapsed_time_formatted"],
            stopwatch_phase=status["phase"],
            laps=tuple(status["laps_formatted"]),
        )

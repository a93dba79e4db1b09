"""
In-memory alarm registry.

The registry is the only owner of the alarm collection. Alarms are frozen; a
toggle or a fire replaces the stored alarm with an updated copy.
"""
from __future__ import annotations

import bisect
import datetime
import itertools
import threading
from dataclasses import dataclass, replace
from typing import Optional

from watchkit.core.time_of_day import TimeOfDay
from watchkit.utils import Event, setup_logger
from watchkit.utils.custom_exception import (
    AlarmNotFoundError,
    DuplicateAlarmError,
    InvalidTimeOfDayError,
)

logger = setup_logger(__name__)


@dataclass(frozen=True)
class Alarm:
    id: int
    time: TimeOfDay
    active: bool = True
    last_fired_date: Optional[datetime.date] = None
    label: str = "Alarm"

    def fired_on(self, day: datetime.date) -> bool:
        return self.last_fired_date == day


class AlarmRegistry:
    def __init__(self):
        self._alarms: list[Alarm] = []
        self._ids = itertools.count(1)
        self._lock = threading.RLock()
        # Called with (action, alarm) after every mutation.
        self.on_changed = Event()

    def __len__(self):
        return len(self._alarms)

    def __iter__(self):
        return iter(self.list())

    def __contains__(self, alarm_id):
        return self._index_of(alarm_id) is not None

    def list(self) -> tuple[Alarm, ...]:
        """Alarms in ascending time-of-day order."""
        with self._lock:
            return tuple(self._alarms)

    def get(self, alarm_id) -> Alarm:
        with self._lock:
            return self._alarms[self._require(alarm_id)]

    def add(self, time: TimeOfDay, active: bool = True, label: Optional[str] = None) -> Alarm:
        """
        Creates an alarm at ``time``.

        Uniqueness is on the time of day, whether the existing alarm is active
        or not.

        Raises:
            InvalidTimeOfDayError: If ``time`` is not a TimeOfDay.
            DuplicateAlarmError: If an alarm already exists at that time.
        """
        if not isinstance(time, TimeOfDay):
            raise InvalidTimeOfDayError(f"alarm time must be a TimeOfDay, got {time!r}")
        with self._lock:
            times = [alarm.time for alarm in self._alarms]
            position = bisect.bisect_left(times, time)
            if position < len(times) and times[position] == time:
                logger.warning(f"Rejected duplicate alarm at {time}.")
                raise DuplicateAlarmError(time)
            alarm = Alarm(id=next(self._ids), time=time, active=bool(active), label=label or "Alarm")
            self._alarms.insert(position, alarm)
        logger.info(f"Alarm {alarm.id} added at {time} ({'active' if alarm.active else 'inactive'}).")
        self.on_changed.emit("added", alarm)
        return alarm

    def toggle(self, alarm_id) -> Alarm:
        with self._lock:
            index = self._require(alarm_id)
            alarm = replace(self._alarms[index], active=not self._alarms[index].active)
            self._alarms[index] = alarm
        logger.info(f"Alarm {alarm_id} toggled to {'active' if alarm.active else 'inactive'}.")
        self.on_changed.emit("toggled", alarm)
        return alarm

    def remove(self, alarm_id) -> Alarm:
        with self._lock:
            alarm = self._alarms.pop(self._require(alarm_id))
        logger.info(f"Alarm {alarm_id} removed.")
        self.on_changed.emit("removed", alarm)
        return alarm

    def mark_fired(self, alarm_id, day: datetime.date) -> Alarm:
        """Record that the alarm fired on ``day``."""
        with self._lock:
            index = self._require(alarm_id)
            alarm = replace(self._alarms[index], last_fired_date=day)
            self._alarms[index] = alarm
        self.on_changed.emit("fired", alarm)
        return alarm

    def _index_of(self, alarm_id):
        with self._lock:
            for index, alarm in enumerate(self._alarms):
                if alarm.id == alarm_id:
                    return index
        return None

    def _require(self, alarm_id):
        index = self._index_of(alarm_id)
        if index is None:
            logger.warning(f"Alarm {alarm_id!r} not found.")
            raise AlarmNotFoundError(alarm_id)
        return index

import datetime
import math

from watchkit.core.time_of_day import TimeOfDay
from watchkit.utils import Event, setup_logger
from watchkit.utils.custom_exception import WatchError

logger = setup_logger(__name__)


class AlarmTrigger:
    """
    Fires registry alarms whose time of day matches the current tick.

    An alarm fires at most once per calendar day: the registry records the
    date of the last fire and matching ticks on the same date are ignored.
    The guard is keyed by date, so it re-arms by itself at midnight.

    After firing, an alarm is "ringing" for ``ring_seconds`` or until it is
    dismissed, toggled off or removed.
    """
    def __init__(self, registry, ring_seconds=10.0, loop=None):
        self._registry = registry
        self.ring_seconds = ring_seconds
        self._ringing = {}  # alarm id -> instant it fired
        self._subscription = None
        self.on_alarm_fired = Event(loop=loop)
        registry.on_changed.add_listener(self._on_registry_changed)

    @property
    def ring_seconds(self):
        return self._ring_window.total_seconds()

    @ring_seconds.setter
    def ring_seconds(self, value):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"ring_seconds must be a number, got {value!r}")
        if not math.isfinite(value) or value < 0:
            raise ValueError(f"ring_seconds must be finite and non-negative, got {value!r}")
        try:
            self._ring_window = datetime.timedelta(seconds=value)
        except OverflowError:
            raise ValueError(f"ring_seconds is too large, got {value!r}") from None

    def attach(self, clock):
        """Check alarms on every tick of ``clock`` until detach()."""
        self.detach()
        self._subscription = clock.subscribe(self.check)
        return self._subscription

    def detach(self):
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None

    def check(self, now: datetime.datetime):
        """
        Evaluate every alarm against the single instant ``now``.

        Returns:
            list: The alarms that fired on this call, after being marked.
        """
        current = TimeOfDay.from_datetime(now)
        today = now.date()
        fired = []
        for alarm in self._registry.list():
            if not alarm.active or alarm.time != current or alarm.fired_on(today):
                continue
            try:
                # Mark before emitting so a re-entrant tick cannot fire it twice.
                alarm = self._registry.mark_fired(alarm.id, today)
            except WatchError:
                logger.exception(f"Could not mark alarm {alarm.id} as fired.")
                continue
            self._ringing[alarm.id] = now
            fired.append(alarm)
            logger.info(f"Alarm {alarm.id} fired at {current} on {today}.")
            self.on_alarm_fired.emit(alarm_id=alarm.id, alarm=alarm)
        return fired

    def is_ringing(self, alarm_id, now: datetime.datetime) -> bool:
        fired_at = self._ringing.get(alarm_id)
        if fired_at is None:
            return False
        if now - fired_at >= self._ring_window or now < fired_at:
            self._ringing.pop(alarm_id, None)
            return False
        return True

    def dismiss(self, alarm_id) -> bool:
        """Stop an alarm ringing. Returns False if it was not ringing."""
        return self._ringing.pop(alarm_id, None) is not None

    def _on_registry_changed(self, action, alarm):
        if action == "removed" or (action == "toggled" and not alarm.active):
            self._ringing.pop(alarm.id, None)

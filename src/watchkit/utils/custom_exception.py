class WatchError(Exception):
    """Base class for every recoverable error raised by watchkit."""
    pass


class InvalidTimeOfDayError(WatchError, ValueError):
    """Exception raised when an hour, minute or second is out of range or malformed."""
    pass


class DuplicateAlarmError(WatchError):
    """Exception raised when an alarm already exists for the same time of day."""

    def __init__(self, time_of_day):
        super().__init__(f"An alarm is already set for {time_of_day}.")
        self.time_of_day = time_of_day


class AlarmNotFoundError(WatchError):
    """Exception raised when an alarm id is not in the registry."""

    def __init__(self, alarm_id):
        super().__init__(f"No alarm with id {alarm_id!r}.")
        self.alarm_id = alarm_id


class InvalidTransitionError(WatchError):
    """Exception raised when a stopwatch operation is not allowed in its current phase."""

    def __init__(self, operation, phase):
        super().__init__(f"Cannot {operation} while the stopwatch is {phase.value}.")
        self.operation = operation
        self.phase = phase

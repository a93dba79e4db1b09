from watchkit.tools.time_tools.base_tool import TimeTool, ToolPhase
from watchkit.utils import Event, setup_logger
from watchkit.utils.time_conversions import format_seconds_to_hms

logger = setup_logger(__name__)

StopwatchPhase = ToolPhase


class Stopwatch(TimeTool):
    """
    Elapsed-time counter with a split ledger.

    Phases go IDLE -> RUNNING <-> PAUSED and back to IDLE only through
    stop()/reset(). Elapsed time is derived from the monotonic source on every
    read and is never stored as a running counter.
    """
    def __init__(self, monotonic=None, loop=None):
        super().__init__(monotonic=monotonic, loop=loop)
        self._laps = []
        self.on_split = Event(loop=loop)

    def elapsed(self) -> float:
        return self._running_time()

    @property
    def laps(self):
        """Elapsed time at each split, oldest first."""
        with self._lock:
            return tuple(self._laps)

    def lap_durations(self):
        """Time between consecutive splits; the first lap is measured from zero."""
        previous = 0.0
        durations = []
        for split in self.laps:
            durations.append(split - previous)
            previous = split
        return tuple(durations)

    def split(self) -> float:
        # Paused time is frozen, so a split there would only duplicate the last one.
        with self._lock:
            self._require("split", ToolPhase.RUNNING)
            current_elapsed = self.elapsed()
            self._laps.append(current_elapsed)
        self.on_split.emit(
            lap_time=current_elapsed,
            lap_time_formatted=format_seconds_to_hms(current_elapsed, precision=2),
            all_laps=self.laps,
        )
        logger.info(f"Split recorded: {format_seconds_to_hms(current_elapsed, precision=2)}.")
        return current_elapsed

    def _clear(self):
        super()._clear()
        self._laps = []

    def stop(self):
        """Stops from any phase; same as reset()."""
        self.reset()

    def get_status(self):
        with self._lock:
            phase = self._phase
            current_elapsed = self.elapsed()
            laps = list(self._laps)
        return {
            "phase": phase.value,
            "is_running": phase is ToolPhase.RUNNING,
            "elapsed_time": current_elapsed,
            "elapsed_time_formatted": format_seconds_to_hms(current_elapsed, precision=2),
            "laps": laps,
            "laps_formatted": [format_seconds_to_hms(lap, precision=2) for lap in laps],
        }

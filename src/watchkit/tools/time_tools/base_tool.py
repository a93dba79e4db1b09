import threading
import time
from abc import ABC, abstractmethod
from enum import Enum

from watchkit.utils import Event, setup_logger
from watchkit.utils.custom_exception import InvalidTransitionError

logger = setup_logger(__name__)


class ToolPhase(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


class TimeTool(ABC):
    """
    An abstract base class for time tools that run, pause and resume.

    It keeps the drift-free accounting shared by such tools: the time spent
    running is ``accumulated + (now - reference)`` while running and
    ``accumulated`` otherwise. Nothing is added up per tick, so any number of
    pause/resume cycles gives the same total as one uninterrupted run.

    The clock ticks on its own thread, so reads and transitions share one
    lock. Events are emitted after the lock is released.
    """
    def __init__(self, monotonic=None, loop=None):
        """Initializes the TimeTool in the IDLE phase with its event hooks."""
        self._monotonic = monotonic or time.monotonic
        self._lock = threading.RLock()
        self._phase = ToolPhase.IDLE
        self._reference = None
        self._accumulated = 0.0

        self.on_start = Event(loop=loop)
        self.on_pause = Event(loop=loop)
        self.on_resume = Event(loop=loop)
        self.on_reset = Event(loop=loop)

    @property
    def phase(self):
        return self._phase

    @property
    def is_running(self):
        """Property that returns True if the tool is currently active and running."""
        return self._phase is ToolPhase.RUNNING

    def _require(self, operation, *allowed):
        if self._phase not in allowed:
            logger.warning(f"{self.__class__.__name__}: cannot {operation} while {self._phase.value}.")
            raise InvalidTransitionError(operation, self._phase)

    def _running_time(self):
        with self._lock:
            if self._phase is ToolPhase.RUNNING:
                return self._accumulated + (self._monotonic() - self._reference)
            return self._accumulated

    def start(self):
        """Starts from IDLE with a fresh reference instant."""
        with self._lock:
            self._require("start", ToolPhase.IDLE)
            self._accumulated = 0.0
            self._reference = self._monotonic()
            self._phase = ToolPhase.RUNNING
        self.on_start.emit()
        logger.info(f"{self.__class__.__name__} started.")

    def pause(self):
        """
        Pauses a running tool.
        Folds the time since the last reference instant into the accumulated total.
        """
        with self._lock:
            self._require("pause", ToolPhase.RUNNING)
            self._accumulated += self._monotonic() - self._reference
            self._reference = None
            self._phase = ToolPhase.PAUSED
            accumulated = self._accumulated
        self.on_pause.emit(elapsed_time=accumulated)
        logger.info(f"{self.__class__.__name__} paused.")

    def resume(self):
        """Resumes a paused tool from a new reference instant."""
        with self._lock:
            self._require("resume", ToolPhase.PAUSED)
            self._reference = self._monotonic()
            self._phase = ToolPhase.RUNNING
            accumulated = self._accumulated
        self.on_resume.emit(elapsed_time=accumulated)
        logger.info(f"{self.__class__.__name__} resumed.")

    def reset(self):
        """Returns to IDLE from any phase."""
        with self._lock:
            self._clear()
        self.on_reset.emit()
        logger.info(f"{self.__class__.__name__} reset.")

    def _clear(self):
        """Drop all timing state. Called with the lock held; subclasses extend it."""
        self._phase = ToolPhase.IDLE
        self._reference = None
        self._accumulated = 0.0

    @abstractmethod
    def get_status(self):
        """
        Retrieve the current status of the tool as a dictionary.
        """
        pass

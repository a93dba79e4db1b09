import datetime
import threading
import time

from watchkit.utils import Event, setup_logger

logger = setup_logger(__name__)


class Subscription:
    """Handle returned by ClockSource.subscribe; cancel() stops delivery."""

    def __init__(self, clock, listener):
        self._clock = clock
        self._listener = listener
        self.active = True

    def cancel(self):
        if self.active:
            self.active = False
            self._clock.on_tick.remove_listener(self._listener)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.cancel()


class ClockSource:
    """
    Samples the local wall clock and delivers a tick once per second.

    Each tick is scheduled ``1 - microseconds`` after the current instant so
    ticks stay on the wall-clock second boundary instead of drifting with a
    fixed period. Backward or forward adjustments of the host clock show up
    as-is in ``now()``.
    """
    def __init__(self, wall=None, monotonic=None, loop=None):
        """
        Args:
            wall (callable): Returns the current local ``datetime``. Defaults
                to ``datetime.datetime.now``.
            monotonic (callable): Returns monotonic seconds. Defaults to
                ``time.monotonic``. The stopwatch borrows this source.
            loop: Optional asyncio loop for async tick listeners.
        """
        self._wall = wall or datetime.datetime.now
        self._monotonic = monotonic or time.monotonic
        self.on_tick = Event(loop=loop)

        self._thread = None
        self._stopped = threading.Event()
        # Held while a tick is delivered; stop() takes it to wait out an in-flight tick.
        self._tick_lock = threading.RLock()

    @property
    def is_running(self):
        return self._thread is not None

    def now(self) -> datetime.datetime:
        return self._wall()

    def monotonic(self) -> float:
        return self._monotonic()

    def subscribe(self, listener) -> Subscription:
        self.on_tick.add_listener(listener)
        return Subscription(self, listener)

    def seconds_until_next_tick(self, now=None) -> float:
        now = now or self.now()
        return 1.0 - now.microsecond / 1_000_000

    def tick(self, now=None):
        """Deliver one tick. Every subscriber sees the same sampled instant."""
        with self._tick_lock:
            if self.is_running and self._stopped.is_set():
                return None
            now = now or self.now()
            self.on_tick.emit(now)
            return now

    def start(self):
        if self._thread is not None:
            logger.warning("ClockSource is already running.")
            return
        self._stopped.clear()
        self._thread = threading.Thread(target=self._run, name="watchkit-clock", daemon=True)
        self._thread.start()
        logger.info("ClockSource started.")

    def stop(self):
        """Stop ticking. No tick is delivered after this returns."""
        thread = self._thread
        if thread is None:
            return
        self._stopped.set()
        with self._tick_lock:
            pass
        if thread is not threading.current_thread():
            thread.join(timeout=2.0)
        self._thread = None
        logger.info("ClockSource stopped.")

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()

    def _run(self):
        while not self._stopped.wait(self.seconds_until_next_tick()):
            self.tick()

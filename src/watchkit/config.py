import math
import os
from dataclasses import dataclass

import dotenv

from watchkit.core.formatter import TimeFormat


@dataclass(frozen=True)
class Settings:
    """Runtime settings for a WatchEngine.

    Logging has its own variables (WATCHKIT_LOG_DIR, WATCHKIT_LOG_LEVEL,
    WATCHKIT_LOG_CONSOLE) that are read by ``setup_logger``.
    """
    time_format: TimeFormat = TimeFormat.H12
    ring_seconds: float = 10.0

    @classmethod
    def from_env(cls, load_dotenv: bool = True) -> "Settings":
        if load_dotenv:
            dotenv.load_dotenv(dotenv.find_dotenv(usecwd=True))

        time_format = TimeFormat.coerce(os.getenv("WATCHKIT_TIME_FORMAT", "12"))

        raw_ring = os.getenv("WATCHKIT_RING_SECONDS", "10")
        try:
            ring_seconds = float(raw_ring)
        except ValueError:
            raise ValueError(f"WATCHKIT_RING_SECONDS must be a number, got {raw_ring!r}")
        if not math.isfinite(ring_seconds) or ring_seconds < 0:
            raise ValueError(f"WATCHKIT_RING_SECONDS must be a finite, non-negative number, got {raw_ring!r}")

        return cls(time_format=time_format, ring_seconds=ring_seconds)

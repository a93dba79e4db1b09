"""Shared fixtures for the watchkit tests.

Logging is pointed at a temporary directory before any watchkit module is
imported, so module-level loggers never write into the source tree.
"""

from __future__ import annotations

import datetime
import os
import tempfile
from dataclasses import dataclass, field

os.environ.setdefault("WATCHKIT_LOG_DIR", tempfile.mkdtemp(prefix="watchkit-logs-"))
os.environ.setdefault("WATCHKIT_LOG_CONSOLE", "0")

import pytest  # noqa: E402


@dataclass
class FakeTime:
    """Controllable wall and monotonic sources that move only on advance()."""

    wall: datetime.datetime = field(default_factory=lambda: datetime.datetime(2024, 3, 1, 7, 29, 58))
    mono: float = 0.0

    def now(self) -> datetime.datetime:
        return self.wall

    def monotonic(self) -> float:
        return self.mono

    def advance(self, seconds: float) -> None:
        if seconds < 0:
            raise ValueError("FakeTime cannot go backwards")
        self.wall += datetime.timedelta(seconds=seconds)
        self.mono += seconds


@pytest.fixture
def fake_time() -> FakeTime:
    return FakeTime()

"""Tests for the stopwatch state machine and its drift-free accounting.

A FakeTime monotonic source stands in for real time so every elapsed value
is exact.
"""

from __future__ import annotations

import threading

import pytest

from watchkit.tools.time_tools.stopwatch import Stopwatch, StopwatchPhase
from watchkit.utils.custom_exception import InvalidTransitionError


@pytest.fixture
def stopwatch(fake_time) -> Stopwatch:
    return Stopwatch(monotonic=fake_time.monotonic)


def test_starts_idle_with_zero_elapsed(stopwatch) -> None:
    assert stopwatch.phase is StopwatchPhase.IDLE
    assert stopwatch.elapsed() == 0.0
    assert stopwatch.laps == ()


def test_pause_resume_scenario(stopwatch, fake_time) -> None:
    """Start at 0, pause at +5s, resume at +9s, pause at +13s: 9s elapsed."""
    stopwatch.start()
    fake_time.advance(5.0)
    stopwatch.pause()
    assert stopwatch.elapsed() == 5.0
    fake_time.advance(4.0)
    stopwatch.resume()
    assert stopwatch.elapsed() == 5.0
    fake_time.advance(4.0)
    stopwatch.pause()
    assert stopwatch.elapsed() == 9.0


def test_elapsed_is_independent_of_pause_cycles(stopwatch, fake_time) -> None:
    stopwatch.start()
    for _ in range(200):
        fake_time.advance(0.5)
        stopwatch.pause()
        fake_time.advance(3.0)
        stopwatch.resume()
    fake_time.advance(0.5)
    # 201 running half-seconds; paused time never counts
    assert stopwatch.elapsed() == 100.5


def test_elapsed_keeps_growing_while_running(stopwatch, fake_time) -> None:
    stopwatch.start()
    fake_time.advance(1.25)
    assert stopwatch.elapsed() == 1.25
    fake_time.advance(2.0)
    assert stopwatch.elapsed() == 3.25


def test_split_records_elapsed_and_lap_durations(stopwatch, fake_time) -> None:
    stopwatch.start()
    fake_time.advance(2.0)
    assert stopwatch.split() == 2.0
    fake_time.advance(3.0)
    stopwatch.pause()
    fake_time.advance(10.0)
    stopwatch.resume()
    fake_time.advance(1.0)
    stopwatch.split()
    assert stopwatch.laps == (2.0, 6.0)
    assert stopwatch.lap_durations() == (2.0, 4.0)


def test_split_while_paused_is_rejected(stopwatch, fake_time) -> None:
    stopwatch.start()
    fake_time.advance(1.0)
    stopwatch.split()
    stopwatch.pause()
    with pytest.raises(InvalidTransitionError):
        stopwatch.split()
    assert stopwatch.laps == (1.0,)
    assert stopwatch.phase is StopwatchPhase.PAUSED


@pytest.mark.parametrize(
    ("setup", "operation"),
    [
        ([], "pause"),
        ([], "resume"),
        ([], "split"),
        (["start"], "start"),
        (["start"], "resume"),
        (["start", "pause"], "pause"),
        (["start", "pause"], "start"),
    ],
)
def test_invalid_transitions_leave_state_unchanged(stopwatch, setup, operation) -> None:
    for step in setup:
        getattr(stopwatch, step)()
    phase = stopwatch.phase
    with pytest.raises(InvalidTransitionError) as excinfo:
        getattr(stopwatch, operation)()
    assert excinfo.value.operation == operation
    assert stopwatch.phase is phase


@pytest.mark.parametrize("setup", [[], ["start"], ["start", "pause"], ["start", "pause", "resume"]])
def test_stop_resets_from_any_phase(stopwatch, fake_time, setup) -> None:
    for step in setup:
        getattr(stopwatch, step)()
        fake_time.advance(1.0)
    if stopwatch.is_running:
        stopwatch.split()
    stopwatch.stop()
    assert stopwatch.phase is StopwatchPhase.IDLE
    assert stopwatch.elapsed() == 0.0
    assert stopwatch.laps == ()
    stopwatch.start()
    assert stopwatch.is_running


def test_events_are_emitted(stopwatch, fake_time) -> None:
    seen = []
    stopwatch.on_start.add_listener(lambda: seen.append("start"))
    stopwatch.on_pause.add_listener(lambda elapsed_time: seen.append(("pause", elapsed_time)))
    stopwatch.on_resume.add_listener(lambda elapsed_time: seen.append(("resume", elapsed_time)))
    stopwatch.on_split.add_listener(lambda lap_time, lap_time_formatted, all_laps: seen.append(("split", lap_time_formatted)))
    stopwatch.on_reset.add_listener(lambda: seen.append("reset"))

    stopwatch.start()
    fake_time.advance(1.5)
    stopwatch.split()
    stopwatch.pause()
    stopwatch.resume()
    stopwatch.stop()
    assert seen == [
        "start",
        ("split", "00:00:01.50"),
        ("pause", 1.5),
        ("resume", 1.5),
        "reset",
    ]


def test_status_dictionary(stopwatch, fake_time) -> None:
    stopwatch.start()
    fake_time.advance(61.0)
    stopwatch.split()
    status = stopwatch.get_status()
    assert status["phase"] == "running"
    assert status["is_running"] is True
    assert status["elapsed_time_formatted"] == "00:01:01.00"
    assert status["laps_formatted"] == ["00:01:01.00"]


def test_concurrent_read_waits_for_an_in_flight_pause(fake_time) -> None:
    """A read from the tick thread never sees a half-applied pause."""
    readings = []
    blocked = []
    armed = False

    def monotonic():
        nonlocal armed
        if armed:
            armed = False
            reader = threading.Thread(target=lambda: readings.append(stopwatch.elapsed()))
            reader.start()
            reader.join(timeout=0.2)
            blocked.append(reader.is_alive())
            readers.append(reader)
        return fake_time.mono

    readers: list[threading.Thread] = []
    stopwatch = Stopwatch(monotonic=monotonic)
    stopwatch.start()
    fake_time.advance(5.0)
    armed = True
    stopwatch.pause()
    readers[0].join(timeout=2.0)

    assert blocked == [True]
    assert readings == [5.0]
    assert stopwatch.elapsed() == 5.0

import time

import pytest

from portwatch.throttle import Throttle


class FakeClock:
    def __init__(self, now: float) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_first_tick_always_passes():
    assert Throttle(0.1).allow() is True


def test_second_tick_suppressed_within_gap():
    clock = FakeClock(1000.0)
    th = Throttle(0.5, clock=clock)
    assert th.allow() is True
    clock.now = 1000.25
    assert th.allow() is False


def test_passes_after_gap_elapsed():
    clock = FakeClock(1000.0)
    th = Throttle(0.5, clock=clock)
    th.allow()
    clock.now = 1000.5
    assert th.allow() is True


def test_zero_gap_always_allows():
    th = Throttle(0)
    assert [th.allow() for _ in range(5)] == [True] * 5


def test_negative_gap_always_allows():
    th = Throttle(-1.0)
    assert [th.allow() for _ in range(3)] == [True] * 3


def test_reset_allows_immediate_tick():
    clock = FakeClock(1000.0)
    th = Throttle(0.5, clock=clock)
    th.allow()
    clock.now = 1000.125
    th.reset()
    assert th.allow() is True


def test_remaining_reports_time_left():
    clock = FakeClock(1000.0)
    th = Throttle(0.5, clock=clock)
    assert th.remaining() == 0.0
    th.allow()
    clock.now = 1000.125
    assert th.remaining() == pytest.approx(0.375)
    clock.now = 1000.75
    assert th.remaining() == 0.0


def test_wait_returns_after_gap():
    th = Throttle(0.02)
    th.allow()
    start = time.monotonic()
    th.wait()
    assert time.monotonic() - start >= 0.015
    # wait marks a tick, so an immediate allow is refused
    assert th.allow() is False
    assert 0.0 < th.remaining() <= 0.02
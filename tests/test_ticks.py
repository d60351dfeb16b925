"""Tests for tick sources and the timer scheduler."""

from queue import Empty, Queue

import pytest

from axiomtui.tui.events import PulseTick, RefreshTick, ScheduleTick, SpinnerTick
from axiomtui.tui.model import QUERYING, REFRESHING, TYPING, Model
from axiomtui.tui.ticks import PULSE, REFRESH, SPINNER, TimerScheduler, next_pulse_step


class TestGating:
    def test_spinner_only_while_querying(self):
        model = Model(state=QUERYING, query_generation=3)
        assert SPINNER.next_tick(model) == [ScheduleTick(SpinnerTick(3), 0.1)]
        model.state = REFRESHING
        assert SPINNER.next_tick(model) == []

    def test_pulse_only_before_ready(self):
        model = Model()
        assert PULSE.next_tick(model) == [ScheduleTick(PulseTick(), 0.15)]
        model.ready = True
        assert PULSE.next_tick(model) == []

    def test_refresh_only_while_refreshing(self):
        model = Model(state=REFRESHING, refresh_generation=2)
        assert REFRESH.next_tick(model) == [ScheduleTick(RefreshTick(2), 1.0)]
        model.state = TYPING
        assert REFRESH.next_tick(model) == []


def test_pulse_cycle():
    steps = [9]
    for _ in range(11):
        steps.append(next_pulse_step(steps[-1], 10))
    assert steps == [9, 8, 7, 6, 5, 4, 3, 2, 1, 0, 9, 8]


class TestTimerScheduler:
    def test_delivers_event(self):
        events = Queue()
        scheduler = TimerScheduler(events)
        scheduler.schedule(0.01, PulseTick())
        assert events.get(timeout=5) == PulseTick()

    def test_cancel_all(self):
        events = Queue()
        scheduler = TimerScheduler(events)
        scheduler.schedule(0.2, PulseTick())
        scheduler.cancel_all()
        scheduler.schedule(0.01, PulseTick())
        with pytest.raises(Empty):
            events.get(timeout=0.4)

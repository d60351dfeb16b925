"""
Periodic tick sources.

Three timers drive the TUI besides the keyboard:

    - spinner: animates the spinner while a query is running
    - pulse:   cycles the splash colour until the first key press
    - refresh: counts down to the next automatic re-run

Design Decisions:
    - A source never repeats on its own. The controller handles a tick
      and schedules the next one only while the source's gating
      predicate holds, so a chain stops by itself when its state ends
    - Spinner and refresh ticks carry a generation number; a tick from an
      earlier query or countdown is ignored instead of doubling the speed
      of the current chain
    - The runtime side (TimerScheduler) is a thin wrapper over
      threading.Timer that posts events into the loop's queue
"""

import threading
from dataclasses import dataclass
from queue import Queue
from typing import Any, Callable, List

from .events import PulseTick, RefreshTick, ScheduleTick, SpinnerTick
from .model import QUERYING, REFRESHING, Model
from .widgets import Spinner

# Splash pulse cadence in seconds
PULSE_INTERVAL = 0.15
# Refresh countdown cadence in seconds
REFRESH_INTERVAL = 1.0


@dataclass(frozen=True)
class TickSource:
    """
    A self-terminating periodic source.

    Attributes:
        name: Identifier used in logs.
        interval: Seconds between ticks.
        is_active: Gating predicate; the chain continues only while it
                   returns True for the current model.
        make_event: Builds the next tick event for the current model.
    """
    name: str
    interval: float
    is_active: Callable[[Model], bool]
    make_event: Callable[[Model], Any]

    def next_tick(self, model: Model) -> List[ScheduleTick]:
        """Schedule the next tick, or nothing if the source is inactive."""
        if not self.is_active(model):
            return []
        return [ScheduleTick(self.make_event(model), self.interval)]


SPINNER = TickSource(
    name="spinner",
    interval=Spinner.INTERVAL,
    is_active=lambda m: m.state == QUERYING,
    make_event=lambda m: SpinnerTick(m.query_generation),
)

PULSE = TickSource(
    name="pulse",
    interval=PULSE_INTERVAL,
    is_active=lambda m: not m.ready,
    make_event=lambda m: PulseTick(),
)

REFRESH = TickSource(
    name="refresh",
    interval=REFRESH_INTERVAL,
    is_active=lambda m: m.state == REFRESHING,
    make_event=lambda m: RefreshTick(m.refresh_generation),
)


def next_pulse_step(step: int, steps: int) -> int:
    """Walk steps-1, ..., 1, 0, steps-1, ... (counting down, wrapping)."""
    if step <= 0:
        return steps - 1
    return step - 1


class TimerScheduler:
    """
    Deliver events into a queue after a delay.

    Attributes:
        out_queue: The loop's event queue.

    Example:
        >>> events = Queue()
        >>> scheduler = TimerScheduler(events)
        >>> scheduler.schedule(0.15, PulseTick())
    """

    def __init__(self, out_queue: Queue):
        self.out_queue = out_queue
        self._timers: List[threading.Timer] = []
        self._lock = threading.Lock()
        self._closed = False

    def schedule(self, delay: float, event: Any) -> None:
        with self._lock:
            if self._closed:
                return
            # Drop timers that already fired
            self._timers = [t for t in self._timers if t.is_alive()]
            timer = threading.Timer(delay, self.out_queue.put, args=(event,))
            # Timers must not keep the process alive after quit
            timer.daemon = True
            self._timers.append(timer)
            timer.start()

    def cancel_all(self) -> None:
        """Cancel every pending timer; later schedule() calls are ignored."""
        with self._lock:
            self._closed = True
            for timer in self._timers:
                timer.cancel()
            self._timers = []

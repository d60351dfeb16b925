"""
The curses message loop.

This module connects the controller to the terminal and to the outside
world: it reads keys, runs queries on worker threads, fires timers, and
paints each new frame.

Architecture:
    - Main thread: reads keys, drains the event queue, feeds every event
      to the controller, executes the returned commands, paints
    - Query workers: one short-lived thread per query, posting a
      ResultArrived when the call returns
    - Timers: threading.Timer instances posting tick events
    - Communication: a single thread-safe Queue into the main thread

Only the main thread touches the Model or the screen.
"""

import curses
import threading
import time
from queue import Empty, Queue
from typing import Iterable, List, Optional

from ..query.client import QueryClient, QueryError
from ..utils.sessionlog import SessionLogger
from .controller import Controller
from .events import KeyPressed, Quit, ResultArrived, ScheduleTick, SubmitQuery
from .layout import Frame, clip_line
from .styles import ColorPairs
from .ticks import TimerScheduler
from .views import view

# How long the loop waits for an event before polling keys again
POLL_INTERVAL = 0.02

# Keys curses reports as integers
_NAMED_KEYS = {
    curses.KEY_UP: "up",
    curses.KEY_DOWN: "down",
    curses.KEY_LEFT: "left",
    curses.KEY_RIGHT: "right",
    curses.KEY_HOME: "home",
    curses.KEY_END: "end",
    curses.KEY_PPAGE: "pgup",
    curses.KEY_NPAGE: "pgdown",
    curses.KEY_BACKSPACE: "backspace",
    curses.KEY_DC: "delete",
    curses.KEY_ENTER: "enter",
}

# Control characters delivered as strings by get_wch()
_CONTROL_KEYS = {
    "\x01": "ctrl+a",
    "\x03": "ctrl+c",
    "\x05": "ctrl+e",
    "\x08": "backspace",
    "\x0b": "ctrl+k",
    "\x15": "ctrl+u",
    "\x7f": "backspace",
    "\n": "enter",
    "\r": "enter",
    "\x1b": "esc",
    "\t": "tab",
}


def translate_key(ch) -> Optional[str]:
    """
    Turn a curses get_wch() value into a key name.

    Args:
        ch: An int (special key) or a one-character str.

    Returns:
        The key name ("enter", "up", "a", ...), or None for keys the TUI
        doesn't use (including terminal resize).
    """
    if isinstance(ch, int):
        if ch in _NAMED_KEYS:
            return _NAMED_KEYS[ch]
        # Some terminals deliver control characters as ints
        if 0 <= ch < 256:
            return translate_key(chr(ch))
        return None

    if ch in _CONTROL_KEYS:
        return _CONTROL_KEYS[ch]
    if len(ch) == 1 and ch.isprintable():
        return ch
    return None


def run_query(client: QueryClient, apl: str, out_queue: Queue, logger: SessionLogger) -> None:
    """
    Run one query and post its outcome as a ResultArrived.

    Runs on a worker thread. Never raises: transport errors are delivered
    as data, and unexpected exceptions are wrapped in a QueryError so the
    TUI can show them.
    """
    started = time.monotonic()
    try:
        result = client.query(apl)
        error = None
    except QueryError as exc:
        result, error = None, exc
    except Exception as exc:  # noqa: BLE001 - the loop must always get an answer
        logger.error("query", f"unexpected {type(exc).__name__}: {exc}")
        result, error = None, QueryError(f"{type(exc).__name__}: {exc}")
    out_queue.put(ResultArrived(
        apl=apl,
        result=result,
        error=error,
        duration=time.monotonic() - started,
    ))


class CommandExecutor:
    """
    Carry out controller commands.

    Attributes:
        client: Used for SubmitQuery.
        events: Queue the results and ticks are posted to.
        scheduler: Fires ScheduleTick events.
        running: Cleared by a Quit command.
    """

    def __init__(self, client: QueryClient, events: Queue, scheduler: TimerScheduler,
                 logger: Optional[SessionLogger] = None):
        self.client = client
        self.events = events
        self.scheduler = scheduler
        self.logger = logger or SessionLogger()
        self.running = True

    def execute(self, commands: Iterable) -> None:
        for command in commands:
            if isinstance(command, Quit):
                self.running = False
            elif isinstance(command, SubmitQuery):
                worker = threading.Thread(
                    target=run_query,
                    args=(self.client, command.apl, self.events, self.logger),
                    daemon=True,
                )
                worker.start()
            elif isinstance(command, ScheduleTick):
                self.scheduler.schedule(command.delay, command.event)


def paint(stdscr, frame: Frame, pairs: ColorPairs) -> None:
    """Draw a frame, clipped to the terminal size."""
    stdscr.erase()
    h, w = stdscr.getmaxyx()
    for y, line in enumerate(frame.lines[:h]):
        x = 0
        for text, style in clip_line(line, w - 1):
            if not text:
                continue
            try:
                stdscr.addstr(y, x, text, pairs.attr(style))
            except curses.error:
                # Writing the bottom-right cell raises; the text still lands
                pass
            x += len(text)
    stdscr.refresh()


def read_keys(stdscr) -> List[str]:
    """Read every pending key without blocking."""
    keys = []
    while True:
        try:
            ch = stdscr.get_wch()
        except curses.error:
            # No input pending
            break
        if ch == curses.KEY_RESIZE:
            keys.append("resize")
            continue
        key = translate_key(ch)
        if key is not None:
            keys.append(key)
    return keys


def run_app(stdscr, controller: Controller, client: QueryClient,
            logger: Optional[SessionLogger] = None) -> None:
    """
    Run the interactive TUI until the user quits.

    Args:
        stdscr: The curses standard screen (provided by curses.wrapper).
        controller: Controller owning the model.
        client: Query client used for submissions and re-runs.
        logger: Session logger.

    Note:
        Call via curses.wrapper() so the terminal is restored on exit.
    """
    logger = logger or controller.logger
    curses.curs_set(0)
    # Raw mode so ctrl+c arrives as a key instead of SIGINT
    curses.raw()
    # Report a lone esc quickly instead of waiting for an escape sequence
    curses.set_escdelay(25)
    stdscr.nodelay(True)
    stdscr.keypad(True)

    pairs = ColorPairs(curses)
    pairs.start()

    events: Queue = Queue()
    scheduler = TimerScheduler(events)
    executor = CommandExecutor(client, events, scheduler, logger)

    executor.execute(controller.init())
    paint(stdscr, view(controller.model), pairs)

    try:
        while executor.running:
            dirty = False

            for key in read_keys(stdscr):
                dirty = True
                if key == "resize":
                    continue
                executor.execute(controller.update(KeyPressed(key)))
                if not executor.running:
                    break
            if not executor.running:
                break

            # Block briefly for the first event, then drain the rest
            try:
                event = events.get(timeout=POLL_INTERVAL)
                while True:
                    executor.execute(controller.update(event))
                    dirty = True
                    event = events.get_nowait()
            except Empty:
                pass

            if dirty and executor.running:
                paint(stdscr, view(controller.model), pairs)
    finally:
        scheduler.cancel_all()
        logger.info("runner", "stopped")

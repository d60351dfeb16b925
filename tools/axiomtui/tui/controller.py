"""
The TUI controller: a state machine over keys, results and ticks.

The controller is the only code that changes the Model. The runner feeds
it events one at a time; for each event it updates the model and returns
the commands (run a query, schedule a tick, quit) the runner should carry
out next.

States:
    typing:     keys edit the query; enter submits it
    querying:   a query is in flight; the spinner runs
    refreshing: results are on screen; a countdown re-runs the query;
                navigation keys move through the tables; esc goes back
                to typing

Before the first key press the splash screen is shown (model.ready is
False) and the pulse animation runs.
"""

from dataclasses import replace
from typing import List, Optional

from ..utils.sessionlog import SessionLogger
from .events import (
    KeyPressed,
    PulseTick,
    Quit,
    RefreshTick,
    ReRun,
    ResultArrived,
    ScheduleTick,
    SpinnerTick,
    SubmitQuery,
)
from .highlight import highlight_selected_total, move_matches_highlight
from .model import QUERYING, REFRESHING, TYPING, Model, Query
from .projection import project, recolor_graphs
from .styles import PULSE_COLORS
from .ticks import PULSE, REFRESH, SPINNER, next_pulse_step
from .widgets import Table

QUIT_KEY = "ctrl+c"
COMMIT_KEY = "enter"
BACK_KEY = "esc"

RUNNING_MESSAGE = "Running query..."

TOTALS_TABLE_HEIGHT = 10
MATCHES_TABLE_HEIGHT = 20


class Controller:
    """
    Owns the Model and applies events to it.

    Attributes:
        model: The TUI state.
        logger: Session logger for state changes and query outcomes.

    Example:
        >>> controller = Controller()
        >>> controller.update(KeyPressed("x"))   # dismiss the splash
        []
        >>> for key in "count()":
        ...     _ = controller.update(KeyPressed(key))
        >>> controller.update(KeyPressed("enter"))[0]
        SubmitQuery(apl='count()')
    """

    def __init__(self, model: Optional[Model] = None, logger: Optional[SessionLogger] = None):
        self.model = model or Model()
        self.logger = logger or SessionLogger()

    def init(self) -> List:
        """Commands to run at startup: start the splash pulse."""
        return PULSE.next_tick(self.model)

    def update(self, event) -> List:
        """
        Apply one event and return follow-up commands.

        Unknown events are ignored. This method never raises for a
        well-formed event; query errors arrive as data.
        """
        if isinstance(event, KeyPressed):
            return self._on_key(event.key)
        if isinstance(event, ResultArrived):
            return self._on_result(event)
        if isinstance(event, SpinnerTick):
            return self._on_spinner_tick(event)
        if isinstance(event, PulseTick):
            return self._on_pulse_tick()
        if isinstance(event, RefreshTick):
            return self._on_refresh_tick(event)
        if isinstance(event, ReRun):
            return self._on_rerun(event)
        return []

    # --- state helpers ---

    def _set_state(self, state: str) -> None:
        if state != self.model.state:
            self.logger.info("controller", f"state {self.model.state} -> {state}")
        self.model.state = state

    def _run_query(self, apl: str) -> List:
        m = self.model
        m.status = RUNNING_MESSAGE
        m.query_generation += 1
        self._set_state(QUERYING)
        self.logger.info("controller", f"submit query: {apl}")
        return [SubmitQuery(apl)] + SPINNER.next_tick(m)

    # --- keys ---

    def _on_key(self, key: str) -> List:
        m = self.model

        # Quit wins everywhere, including the splash screen
        if key == QUIT_KEY:
            self.logger.info("controller", "quit requested")
            return [Quit()]

        if not m.ready:
            # The first key only dismisses the splash
            m.ready = True
            self._set_state(TYPING)
            return []

        if m.state == TYPING:
            if key == COMMIT_KEY:
                apl = m.text.value.strip()
                if apl:
                    return self._run_query(apl)
                return []
            m.text.handle_key(key)
            return []

        if m.state == REFRESHING:
            if key == BACK_KEY:
                m.text.focus()
                self._set_state(TYPING)
                return []
            self._navigate(key)
            return []

        # Querying: nothing but quit until the result arrives
        return []

    def _navigate(self, key: str) -> None:
        """Send a key to the focused table and update highlights."""
        m = self.model

        if m.totals_table is not None:
            if not m.totals_table.focused:
                # The first key only focuses the table
                m.totals_table.focus()
            else:
                m.totals_table.handle_key(key)
            highlight_selected_total(m)
            return

        if m.matches_table is not None:
            if key == "down":
                move_matches_highlight(m, 1)
            elif key == "up":
                move_matches_highlight(m, -1)
            elif m.matches_table.handle_key(key):
                m.matches_highlighted_idx = m.matches_table.cursor

    # --- query results ---

    def _on_result(self, event: ResultArrived) -> List:
        m = self.model
        m.text.blur()
        m.highlighted_group = ""

        if event.error is None:
            result = event.result
            self.logger.info(
                "query",
                f"ok in {event.duration:.2f}s: "
                f"{len(result.buckets.series) if result else 0} intervals, "
                f"{len(result.matches) if result else 0} matches",
            )
            m.query = Query(apl=event.apl, result=result, error=None)
            m.projection = project(result)
            m.totals_table = None
            if m.projection.totals is not None:
                # Blurred: the first navigation key focuses it
                m.totals_table = Table(m.projection.totals, height=TOTALS_TABLE_HEIGHT)
            m.matches_table = None
            if m.projection.matches is not None:
                m.matches_table = Table(
                    m.projection.matches, height=MATCHES_TABLE_HEIGHT, focused=True
                )
            m.matches_highlighted_idx = -1
        else:
            self.logger.error("query", f"failed after {event.duration:.2f}s: {event.error}")
            # Keep the last good artifacts on screen, minus the highlight
            m.query = Query(apl=event.apl, result=m.query.result, error=event.error)
            m.projection = replace(
                m.projection,
                graphs=recolor_graphs(m.projection.graphs, m.projection.meta, ""),
            )
            if m.totals_table is not None:
                m.totals_table.blur()

        m.refresh_generation += 1
        m.refresh_timeout = m.refresh_seconds
        self._set_state(REFRESHING)
        return REFRESH.next_tick(m)

    # --- ticks ---

    def _on_spinner_tick(self, event: SpinnerTick) -> List:
        m = self.model
        if m.state != QUERYING or event.generation != m.query_generation:
            return []
        m.spinner.tick()
        return SPINNER.next_tick(m)

    def _on_pulse_tick(self) -> List:
        m = self.model
        if m.ready:
            return []
        m.pulse_step = next_pulse_step(m.pulse_step, len(PULSE_COLORS))
        return PULSE.next_tick(m)

    def _on_refresh_tick(self, event: RefreshTick) -> List:
        m = self.model
        if m.state != REFRESHING or event.generation != m.refresh_generation:
            return []
        m.refresh_timeout -= 1
        if m.refresh_timeout <= 1:
            # Fire the re-run when this last second has elapsed
            return [ScheduleTick(ReRun(m.refresh_generation), REFRESH.interval)]
        return REFRESH.next_tick(m)

    def _on_rerun(self, event: ReRun) -> List:
        m = self.model
        if m.state != REFRESHING or event.generation != m.refresh_generation:
            return []
        if not m.query.apl:
            return []
        return self._run_query(m.query.apl)

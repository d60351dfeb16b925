"""
Events the controller consumes and commands it emits.

Every input to the TUI (a key, a finished query, a timer firing) arrives
at the controller as one of the event types below. The controller answers
with zero or more commands, which the runner carries out.
"""

from dataclasses import dataclass
from typing import Any, Optional

from ..query.client import QueryError
from ..query.result import QueryResult


# --- Events ---

@dataclass(frozen=True)
class KeyPressed:
    """A key press, already translated to a name ("enter", "up", "a")."""
    key: str


@dataclass(frozen=True)
class ResultArrived:
    """A query finished, with either a result or an error."""
    apl: str
    result: Optional[QueryResult] = None
    error: Optional[QueryError] = None
    duration: float = 0.0


@dataclass(frozen=True)
class SpinnerTick:
    generation: int = 0


@dataclass(frozen=True)
class PulseTick:
    pass


@dataclass(frozen=True)
class RefreshTick:
    generation: int = 0


@dataclass(frozen=True)
class ReRun:
    """The refresh countdown ran out; run the last query again."""
    generation: int = 0


# --- Commands ---

@dataclass(frozen=True)
class SubmitQuery:
    """Run apl on a worker thread and deliver a ResultArrived."""
    apl: str


@dataclass(frozen=True)
class ScheduleTick:
    """Deliver event after delay seconds."""
    event: Any
    delay: float


@dataclass(frozen=True)
class Quit:
    pass

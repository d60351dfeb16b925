"""
Data models for the query TUI.

This module defines the controller's mutable Model and the immutable
artifacts projected from a query result.

Purpose:
    The screen is a pure function of the Model. Everything the views need
    (the last result, the derived tables and graphs, tick counters) lives
    here, and only the controller changes it.

Note:
    Derived artifacts (QueryMeta, GraphData, TableData) are frozen. A new
    result replaces them wholesale; a highlight change replaces only the
    graphs' colours.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from ..query.client import QueryError
from ..query.result import QueryResult
from .styles import Color
from .widgets import Spinner, Table, TextBuffer

# Controller states
TYPING = "typing"
QUERYING = "querying"
REFRESHING = "refreshing"

# Seconds between a result arriving and the query running again
DEFAULT_REFRESH_SECONDS = 5

# The splash pulse counts down from here and wraps
PULSE_START = 9


@dataclass(frozen=True)
class Op:
    """A named aggregation; each one gets its own graph."""
    alias: str


@dataclass(frozen=True)
class QueryMeta:
    """
    Shape information derived once per result.

    Attributes:
        ordered_group_keys: Group dimension names, sorted.
        groups: Sorted unique group keys (comma-joined dimension values).
        ops: Aggregations in first-seen order across the totals.
        ops_count: Largest number of aggregations in any interval group.
        intervals: Number of time buckets.
        group_colors: Group key -> palette colour.
    """
    ordered_group_keys: Tuple[str, ...]
    groups: Tuple[str, ...]
    ops: Tuple[Op, ...]
    ops_count: int
    intervals: int
    group_colors: Dict[str, Color] = field(compare=False)


@dataclass(frozen=True)
class GraphData:
    """
    One line chart: a row of values per group, one column per interval.

    Attributes:
        title: The op alias.
        data: |groups| rows of |intervals| floats; NaN marks a gap.
        colors: One colour per row of data.
    """
    title: str
    data: Tuple[Tuple[float, ...], ...]
    colors: Tuple[Color, ...]


@dataclass(frozen=True)
class Column:
    title: str
    width: int


@dataclass(frozen=True)
class TableData:
    """Column definitions and stringified rows for a table widget."""
    columns: Tuple[Column, ...]
    rows: Tuple[Tuple[str, ...], ...]


@dataclass(frozen=True)
class Projection:
    """Everything derived from one QueryResult."""
    meta: Optional[QueryMeta] = None
    matches: Optional[TableData] = None
    totals: Optional[TableData] = None
    graphs: Optional[Tuple[GraphData, ...]] = None


@dataclass
class Query:
    """
    The last committed query and its outcome.

    Attributes:
        apl: Query text that was run.
        result: The result of the last successful run of any query.
        error: Error from the most recent run, None if it succeeded.
    """
    apl: str = ""
    result: Optional[QueryResult] = None
    error: Optional[QueryError] = None


@dataclass
class Model:
    """
    Mutable state of the TUI, owned by the controller.

    Attributes:
        ready: False until the first key press dismisses the splash.
        state: TYPING, QUERYING or REFRESHING.
        text: The query input buffer.
        spinner: Spinner shown while a query runs.
        query: Last committed query, its last good result and last error.
        projection: Artifacts derived from query.result.
        totals_table: Widget over projection.totals, if any.
        matches_table: Widget over projection.matches, if any.
        highlighted_group: Group key selected in the totals table, "" if none.
        matches_highlighted_idx: Selected match row, -1 if none.
        refresh_seconds: Countdown start value.
        refresh_timeout: Seconds left until the query re-runs.
        pulse_step: Index into the splash pulse colours.
        status: Status message shown next to the spinner.
        query_generation: Bumped per submission; stale spinner ticks are ignored.
        refresh_generation: Bumped per countdown; stale refresh ticks are ignored.
    """
    ready: bool = False
    state: str = TYPING
    text: TextBuffer = field(default_factory=TextBuffer)
    spinner: Spinner = field(default_factory=Spinner)
    query: Query = field(default_factory=Query)
    projection: Projection = field(default_factory=Projection)
    totals_table: Optional[Table] = None
    matches_table: Optional[Table] = None
    highlighted_group: str = ""
    matches_highlighted_idx: int = -1
    refresh_seconds: int = DEFAULT_REFRESH_SECONDS
    refresh_timeout: int = 0
    pulse_step: int = PULSE_START
    status: str = ""
    query_generation: int = 0
    refresh_generation: int = 0

    @property
    def meta(self) -> Optional[QueryMeta]:
        return self.projection.meta

    @property
    def graphs(self) -> Optional[Tuple[GraphData, ...]]:
        return self.projection.graphs

"""
Result projection: turn a QueryResult into renderable artifacts.

This module derives everything the screen shows from a raw result:
QueryMeta (group and op layout), one GraphData per op, the totals table
and the matches table.

Purpose:
    The service returns nested buckets keyed by arbitrary group
    dimensions. The views need flat, aligned data instead: a matrix per
    op with one row per group and one column per interval, and tables of
    strings. All of that flattening happens here, once per result.

Design Decisions:
    - Pure functions; the same result always projects to the same
      artifacts (colours aside, which depend on the highlighted group)
    - A group is identified by its group key: its dimension values joined
      with ", " in ordered_group_keys order. The same ordered_group_keys
      is used for projection and for highlight lookup so the two can
      never disagree
    - ordered_group_keys is the sorted union of dimension names across all
      intervals, so results whose groups have different key sets still
      align
    - Matches columns after _time are sorted, making screens reproducible
"""

import bisect
import math
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..query.result import EntryGroup, QueryResult, format_value
from .model import Column, GraphData, Op, Projection, QueryMeta, TableData
from .styles import DIMMED, PALETTE, Color

# Column widths in cells
TIME_COLUMN_WIDTH = 32
MATCH_COLUMN_WIDTH = 10
TOTALS_COLUMN_WIDTH = 20

TIME_COLUMN = "_time"
GROUP_KEY_SEPARATOR = ", "

_FNV32_OFFSET = 0x811C9DC5
_FNV32_PRIME = 0x01000193


def fnv1a32(text: str) -> int:
    """
    32-bit FNV-1a hash of the UTF-8 bytes of text.

    Example:
        >>> hex(fnv1a32("a"))
        '0xe40c292c'
    """
    h = _FNV32_OFFSET
    for byte in text.encode("utf-8"):
        h ^= byte
        h = (h * _FNV32_PRIME) & 0xFFFFFFFF
    return h


def group_color(group: str, palette: Sequence[Color] = PALETTE) -> Color:
    """Stable palette colour for a group key."""
    return palette[fnv1a32(group) % len(palette)]


def group_key(ordered_group_keys: Sequence[str], group: Mapping[str, Any]) -> str:
    """
    Build the identity string of a group.

    Args:
        ordered_group_keys: Dimension names in canonical order.
        group: Dimension name -> value. Missing dimensions format as "null".

    Returns:
        str: Values joined with ", ", e.g. "api, eu-west-1".
    """
    return GROUP_KEY_SEPARATOR.join(
        format_value(group.get(key)) for key in ordered_group_keys
    )


def build_meta(result: Optional[QueryResult]) -> Optional[QueryMeta]:
    """
    Derive the group/op layout of a result.

    Returns None when there is no result or it has no intervals; in that
    case there is nothing to graph or total.
    """
    if result is None or not result.buckets.series:
        return None

    series = result.buckets.series

    # First pass: dimension names and the widest aggregation list.
    # Keys have to be known before any group key can be formed.
    key_names = set()
    ops_count = 0
    for interval in series:
        for entry in interval.groups:
            key_names.update(entry.group.keys())
            ops_count = max(ops_count, len(entry.aggregations))
    ordered_group_keys = tuple(sorted(key_names))

    # Second pass: unique group keys
    seen = set()
    for interval in series:
        for entry in interval.groups:
            seen.add(group_key(ordered_group_keys, entry.group))
    groups = tuple(sorted(seen))

    # Ops in first-seen order across the totals
    ops: List[Op] = []
    aliases = set()
    for total in result.buckets.totals:
        for aggregation in total.aggregations:
            if aggregation.alias not in aliases:
                aliases.add(aggregation.alias)
                ops.append(Op(aggregation.alias))

    return QueryMeta(
        ordered_group_keys=ordered_group_keys,
        groups=groups,
        ops=tuple(ops),
        ops_count=ops_count,
        intervals=len(series),
        group_colors={group: group_color(group) for group in groups},
    )


def graph_colors(meta: QueryMeta, highlighted_group: str = "") -> Tuple[Color, ...]:
    """
    Colour for each group row.

    With a highlight active, every group except the highlighted one is
    dimmed.
    """
    colors = []
    for group in meta.groups:
        if highlighted_group and group != highlighted_group:
            colors.append(DIMMED)
        else:
            colors.append(meta.group_colors[group])
    return tuple(colors)


def group_index(meta: QueryMeta, key: str) -> int:
    """
    Position of a group key in meta.groups, or -1 if it isn't there.

    meta.groups is sorted, so this is a binary search.
    """
    idx = bisect.bisect_left(meta.groups, key)
    if idx < len(meta.groups) and meta.groups[idx] == key:
        return idx
    return -1


def build_graphs(
    result: Optional[QueryResult],
    meta: Optional[QueryMeta],
    highlighted_group: str = "",
) -> Optional[Tuple[GraphData, ...]]:
    """
    Build one GraphData per op.

    Each graph's data is a |groups| x intervals matrix. Cells start as
    NaN and are filled from the aggregation at the same position in each
    interval group; values that aren't floats stay NaN.
    """
    if result is None or meta is None:
        return None

    n_ops = len(meta.ops)
    # matrices[op][group][interval]
    matrices = [
        [[math.nan] * meta.intervals for _ in meta.groups]
        for _ in range(n_ops)
    ]

    for i, interval in enumerate(result.buckets.series):
        for entry in interval.groups:
            g = group_index(meta, group_key(meta.ordered_group_keys, entry.group))
            if g < 0:
                continue
            for k, aggregation in enumerate(entry.aggregations):
                # Interval groups can carry aggregations the totals don't
                if k >= n_ops:
                    break
                matrices[k][g][i] = aggregation.value.as_float_or_nan()

    colors = graph_colors(meta, highlighted_group)
    return tuple(
        GraphData(
            title=op.alias,
            data=tuple(tuple(row) for row in matrix),
            colors=colors,
        )
        for op, matrix in zip(meta.ops, matrices)
    )


def recolor_graphs(
    graphs: Optional[Tuple[GraphData, ...]],
    meta: Optional[QueryMeta],
    highlighted_group: str,
) -> Optional[Tuple[GraphData, ...]]:
    """Return graphs with colours for a new highlight; data is shared."""
    if graphs is None or meta is None:
        return graphs
    colors = graph_colors(meta, highlighted_group)
    return tuple(
        GraphData(title=graph.title, data=graph.data, colors=colors)
        for graph in graphs
    )


def format_time(value: Any) -> str:
    """Full timestamp text for the _time column."""
    if value is None:
        return ""
    return str(value)


def build_matches_table(result: Optional[QueryResult]) -> Optional[TableData]:
    """
    Tabulate the raw matches.

    Columns are _time followed by the first match's fields, sorted by
    name. Later matches missing a field get an empty cell.
    """
    if result is None or not result.matches:
        return None

    names = sorted(result.matches[0].data.keys())
    columns = (Column(TIME_COLUMN, TIME_COLUMN_WIDTH),) + tuple(
        Column(name, MATCH_COLUMN_WIDTH) for name in names
    )

    rows = []
    for match in result.matches:
        row = [format_time(match.time)]
        for name in names:
            value = match.data.get(name)
            row.append("" if value is None else format_value(value))
        rows.append(tuple(row))

    return TableData(columns=columns, rows=tuple(rows))


def _aggregations_by_alias(entry: EntryGroup) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for aggregation in entry.aggregations:
        # First occurrence wins, mirroring op first-seen ordering
        values.setdefault(aggregation.alias, aggregation.value)
    return values


def build_totals_table(
    result: Optional[QueryResult],
    meta: Optional[QueryMeta],
) -> Optional[TableData]:
    """
    Tabulate the whole-range totals.

    Columns are the group dimensions followed by one column per op. The
    first len(ordered_group_keys) cells of each row are exactly the values
    group_key() joins, which is what lets a selected row be mapped back to
    its graph series.
    """
    if result is None or meta is None or not result.buckets.totals:
        return None

    columns = tuple(
        Column(key, TOTALS_COLUMN_WIDTH) for key in meta.ordered_group_keys
    ) + tuple(Column(op.alias, TOTALS_COLUMN_WIDTH) for op in meta.ops)

    rows = []
    for total in result.buckets.totals:
        row = [format_value(total.group.get(key)) for key in meta.ordered_group_keys]
        values = _aggregations_by_alias(total)
        for op in meta.ops:
            value = values.get(op.alias)
            row.append("" if value is None else format_value(value))
        rows.append(tuple(row))

    return TableData(columns=columns, rows=tuple(rows))


def project(result: Optional[QueryResult], highlighted_group: str = "") -> Projection:
    """
    Derive every artifact for a result.

    Args:
        result: The query result, or None.
        highlighted_group: Group key to keep coloured; "" for none.

    Returns:
        Projection: meta, matches, totals and graphs. Fields are None when
        the result doesn't support them (no intervals, no matches, ...).
    """
    meta = build_meta(result)
    return Projection(
        meta=meta,
        matches=build_matches_table(result),
        totals=build_totals_table(result, meta),
        graphs=build_graphs(result, meta, highlighted_group),
    )

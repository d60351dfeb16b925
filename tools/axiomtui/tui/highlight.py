"""
Highlight coordination between the tables and the graphs.

Selecting a row in the totals table highlights that group's series in
every graph by dimming all the others. When there is no totals table,
navigation moves a selection through the matches instead, which drives
the match detail pane.
"""

from dataclasses import replace
from typing import Optional, Sequence

from .model import Model, QueryMeta
from .projection import group_key, recolor_graphs


def group_for_row(meta: Optional[QueryMeta], row: Optional[Sequence[str]]) -> str:
    """
    Map a totals row back to its group key.

    The first len(ordered_group_keys) cells of a totals row hold the
    group's dimension values in order.

    Returns:
        str: The group key, or "" if there is no meta or no row.
    """
    if meta is None or row is None:
        return ""
    keys = meta.ordered_group_keys
    group = {key: row[i] for i, key in enumerate(keys) if i < len(row)}
    return group_key(keys, group)


def set_highlight(model: Model, group: str) -> None:
    """
    Make group the highlighted series and recolour the graphs.

    Graph data is untouched; only colours are re-derived. Setting the same
    group again leaves the model unchanged.
    """
    if group == model.highlighted_group:
        return
    model.highlighted_group = group
    projection = model.projection
    model.projection = replace(
        projection,
        graphs=recolor_graphs(projection.graphs, projection.meta, group),
    )


def highlight_selected_total(model: Model) -> None:
    """Highlight whichever group the totals table cursor is on."""
    if model.totals_table is None:
        return
    set_highlight(model, group_for_row(model.meta, model.totals_table.selected_row()))


def move_matches_highlight(model: Model, step: int) -> None:
    """
    Move the match selection by step rows, clamped to the table.

    The first move from "nothing selected" (-1) lands on a valid row.
    """
    table = model.matches_table
    if table is None or not table.rows:
        return
    idx = model.matches_highlighted_idx + step
    idx = max(0, min(idx, len(table.rows) - 1))
    model.matches_highlighted_idx = idx
    table.move_to(idx)

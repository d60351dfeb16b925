"""
View assembly: the screen as a function of the Model.

Every function here reads the model and returns a Frame; none of them
change it. The runner paints whatever view() returns.

Layout before the first key press: the splash banner in the current
pulse colour.

Layout afterwards, top to bottom, skipping empty sections:
    1. status line (spinner while querying, countdown while refreshing)
    2. query input
    3. error line, if the last query failed
    4. one bordered chart per op, side by side
    5. totals table
    6. matches table
    7. detail pane for the selected match
"""

import json
from typing import List

from .chart import plot_many
from .layout import Frame, box, join_horizontal, join_vertical, pad
from .model import QUERYING, REFRESHING, Model
from .styles import BORDER, ERROR_TEXT, PLAIN, PULSE_COLORS, Style

GRAPH_WIDTH = 50
GRAPH_HEIGHT = 10
# Room for the Y axis labels next to the plot
GRAPH_BOX_WIDTH = GRAPH_WIDTH + 15

SPLASH = """
 █████  ██   ██ ██  ██████  ███    ███
██   ██  ██ ██  ██ ██    ██ ████  ████
███████   ███   ██ ██    ██ ██ ████ ██
██   ██  ██ ██  ██ ██    ██ ██  ██  ██
██   ██ ██   ██ ██  ██████  ██      ██
""".strip("\n")

SPLASH_HINT = "press any key"


def view_splash(model: Model) -> Frame:
    color = PULSE_COLORS[model.pulse_step % len(PULSE_COLORS)]
    banner = Frame.from_text(SPLASH, Style(fg=color))
    hint = Frame.from_text(SPLASH_HINT.center(banner.width), PLAIN)
    return pad(join_vertical([banner, Frame([[]]), hint]))


def view_spinner(model: Model) -> str:
    if model.state != QUERYING:
        return ""
    return model.spinner.view() + (model.status or "")


def view_refresh_timeout(model: Model) -> str:
    if model.state != REFRESHING:
        return ""
    return f"Refresh in {model.refresh_timeout}"


def view_status(model: Model) -> Frame:
    text = view_spinner(model) + view_refresh_timeout(model)
    # Keep the line even when empty so the input doesn't jump around
    return Frame([[(text or " ", PLAIN)]])


def view_query(model: Model) -> Frame:
    return model.text.view()


def view_error(model: Model) -> Frame:
    if model.query.error is None:
        return Frame()
    return Frame.from_text(f"Error: {model.query.error}", ERROR_TEXT)


def view_graphs(model: Model) -> Frame:
    graphs = model.graphs
    if not graphs:
        return Frame()

    border = Style(fg=BORDER)
    plots = []
    for graph in graphs:
        chart = plot_many(
            graph.data,
            colors=graph.colors,
            width=GRAPH_WIDTH,
            height=GRAPH_HEIGHT,
            caption=graph.title,
        )
        plots.append(box(chart, GRAPH_BOX_WIDTH, chart.height, border))

    return join_horizontal(plots)


def view_totals(model: Model) -> Frame:
    if model.totals_table is None:
        return Frame()
    return model.totals_table.view(show_selection=bool(model.highlighted_group))


def view_matches(model: Model) -> Frame:
    if model.matches_table is None:
        return Frame()
    return model.matches_table.view(show_selection=model.matches_highlighted_idx != -1)


def view_match_details(model: Model) -> Frame:
    idx = model.matches_highlighted_idx
    result = model.query.result
    if model.matches_table is None or idx == -1 or result is None:
        return Frame()
    if idx >= len(result.matches):
        return Frame()
    match = result.matches[idx]
    text = json.dumps(match.raw, indent=2, sort_keys=True, default=str)
    return Frame.from_text(text)


def view(model: Model) -> Frame:
    """Assemble the whole screen for the current model."""
    if not model.ready:
        return view_splash(model)

    parts: List[Frame] = [
        pad(view_status(model)),
        pad(view_query(model)),
        view_error(model),
        pad(view_graphs(model)),
        pad(view_totals(model)),
        pad(view_matches(model)),
        pad(view_match_details(model)),
    ]
    return join_vertical(parts)

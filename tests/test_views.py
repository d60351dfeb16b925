"""Tests for screen assembly."""

import json
import math

from axiomtui.query.result import QueryResult
from axiomtui.tui.controller import Controller
from axiomtui.tui.events import KeyPressed, ResultArrived
from axiomtui.tui.model import Model
from axiomtui.tui.styles import PULSE_COLORS
from axiomtui.tui.views import SPLASH, view, view_graphs, view_match_details


def started(result=None, apl="count()"):
    c = Controller()
    c.update(KeyPressed("x"))
    for key in apl:
        c.update(KeyPressed(key))
    c.update(KeyPressed("enter"))
    if result is not None:
        c.update(ResultArrived(apl=apl, result=result))
    return c


class TestSplash:
    def test_splash_until_first_key(self):
        model = Model()
        frame = view(model)
        assert SPLASH.splitlines()[0].strip() in frame.text()
        assert "Refresh in" not in frame.text()

    def test_splash_uses_pulse_colour(self):
        model = Model(pulse_step=3)
        frame = view(model)
        styles = [style for line in frame.lines for text, style in line if "█" in text]
        assert styles
        assert all(style.fg == PULSE_COLORS[3] for style in styles)


class TestLayout:
    def test_typing_shows_input_and_placeholder(self):
        c = Controller()
        c.update(KeyPressed("x"))
        assert "Enter an APL query..." in view(c.model).text()

    def test_querying_shows_spinner(self):
        c = started()
        text = view(c.model).text()
        assert "Running query..." in text
        assert "count()" in text

    def test_sections_in_order(self, two_group_result):
        c = started(two_group_result)
        text = view(c.model).text()
        refresh = text.index("Refresh in 5")
        query = text.index("> count()")
        graph = text.index("┌")
        totals = text.index(" svc ")
        assert refresh < query < graph < totals

    def test_one_chart_per_op(self, two_group_result):
        c = started(two_group_result)
        frame = view_graphs(c.model)
        # One top border per chart
        assert frame.lines[0][0][0].count("┌") == 1
        assert "avg" in frame.text()

    def test_no_error_line_without_error(self, single_group_result):
        c = started(single_group_result)
        assert "Error:" not in view(c.model).text()


class TestMatchDetails:
    def test_details_follow_selection(self, matches_result):
        c = started(matches_result)
        assert view_match_details(c.model).is_empty()

        c.update(KeyPressed("down"))
        c.update(KeyPressed("down"))
        details = view_match_details(c.model).text()
        assert '"_rowId": "r2"' in details
        assert '"path": "/b"' in details
        assert '"_rowId": "r2"' in view(c.model).text()


def test_infinite_aggregation_renders_as_gap():
    body = """
    {"matches": [],
     "buckets": {
       "series": [
         {"startTime": "2024-01-15T12:00:00Z", "groups": [{"group": {}, "aggregations": [{"op": "max", "value": 1.0}]}]},
         {"startTime": "2024-01-15T12:01:00Z", "groups": [{"group": {}, "aggregations": [{"op": "max", "value": 5.0}]}]},
         {"startTime": "2024-01-15T12:02:00Z", "groups": [{"group": {}, "aggregations": [{"op": "max", "value": Infinity}]}]}
       ],
       "totals": [{"group": {}, "aggregations": [{"op": "max", "value": Infinity}]}]
     }}
    """
    result = QueryResult.from_dict(json.loads(body))
    c = started(result, apl="max(x)")
    graph = c.model.graphs[0]
    assert graph.data[0][:2] == (1.0, 5.0)
    assert math.isnan(graph.data[0][2])
    assert "max" in view(c.model).text()

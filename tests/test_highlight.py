"""Tests for totals/matches selection and graph highlighting."""

import copy

import pytest

from axiomtui.tui.controller import Controller
from axiomtui.tui.events import KeyPressed, ResultArrived
from axiomtui.tui.highlight import group_for_row, move_matches_highlight, set_highlight
from axiomtui.tui.projection import group_color
from axiomtui.tui.styles import DIMMED


def refreshed(result):
    c = Controller()
    c.update(KeyPressed("x"))
    for key in "count()":
        c.update(KeyPressed(key))
    c.update(KeyPressed("enter"))
    c.update(ResultArrived(apl="count()", result=result))
    return c


class TestTotalsHighlight:
    def test_first_key_focuses_and_highlights_first_row(self, two_group_result):
        c = refreshed(two_group_result)
        c.update(KeyPressed("down"))
        assert c.model.totals_table.focused is True
        assert c.model.totals_table.cursor == 0
        assert c.model.highlighted_group == "a"
        assert c.model.graphs[0].colors == (group_color("a"), DIMMED)

    def test_selecting_b_dims_others(self, two_group_result):
        c = refreshed(two_group_result)
        c.update(KeyPressed("down"))
        c.update(KeyPressed("down"))
        assert c.model.highlighted_group == "b"
        assert c.model.graphs[0].colors == (DIMMED, group_color("b"))

    def test_cursor_is_clamped(self, two_group_result):
        c = refreshed(two_group_result)
        for _ in range(5):
            c.update(KeyPressed("down"))
        assert c.model.highlighted_group == "b"
        for _ in range(5):
            c.update(KeyPressed("up"))
        assert c.model.highlighted_group == "a"

    def test_highlight_is_idempotent(self, two_group_result):
        once = refreshed(two_group_result)
        set_highlight(once.model, "b")
        twice = refreshed(two_group_result)
        set_highlight(twice.model, "b")
        set_highlight(twice.model, "b")
        assert once.model.highlighted_group == twice.model.highlighted_group
        assert once.model.graphs[0].colors == twice.model.graphs[0].colors

    def test_second_set_is_a_no_op(self, two_group_result):
        c = refreshed(two_group_result)
        set_highlight(c.model, "b")
        graphs = c.model.graphs
        set_highlight(c.model, "b")
        assert c.model.graphs is graphs

    def test_group_for_row(self, two_group_result):
        c = refreshed(two_group_result)
        assert group_for_row(c.model.meta, ("b", "20")) == "b"
        assert group_for_row(None, ("b", "20")) == ""
        assert group_for_row(c.model.meta, None) == ""


class TestMatchesHighlight:
    def test_navigation_without_totals_moves_matches(self, matches_result):
        c = refreshed(matches_result)
        assert c.model.totals_table is None
        assert c.model.matches_highlighted_idx == -1

        c.update(KeyPressed("down"))
        assert c.model.matches_highlighted_idx == 0
        c.update(KeyPressed("down"))
        assert c.model.matches_highlighted_idx == 1
        assert c.model.matches_table.cursor == 1
        assert c.model.highlighted_group == ""

    def test_clamped_to_rows(self, matches_result):
        c = refreshed(matches_result)
        c.update(KeyPressed("up"))
        assert c.model.matches_highlighted_idx == 0
        for _ in range(10):
            c.update(KeyPressed("down"))
        assert c.model.matches_highlighted_idx == 2

    def test_no_matches_table(self, two_group_result):
        c = refreshed(two_group_result)
        before = copy.deepcopy(c.model)
        move_matches_highlight(c.model, 1)
        assert c.model.matches_highlighted_idx == before.matches_highlighted_idx

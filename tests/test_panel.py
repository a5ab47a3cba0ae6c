"""Tests for drawing the mirrored view into a panel window."""

from unittest.mock import Mock, call

from completion_panel.host import CURSOR_TYPE, POINT, TRUNCATE_LINES
from completion_panel.session import CURSOR_BLOCK
from completion_panel.ui.panel import PanelView, cursor_cell, wrap_line


class Source:
    def __init__(self, text="", cursor=0, candidates=("one", "two"), selected=0):
        self.text = text
        self.cursor = cursor
        self.candidates = list(candidates)
        self.selected = selected

    def prompt_text(self):
        return "P: "

    def input_text(self):
        return self.text

    def input_cursor(self):
        return self.cursor

    def current_count_overlay(self):
        return "1/2 "

    def current_candidate_overlay(self):
        return self.candidates

    def overlay_selection(self):
        return self.selected


def make_window(height=6, width=20):
    window = Mock()
    window.getmaxyx.return_value = (height, width)
    return window


def test_wrap_line():
    assert wrap_line("", 5) == [""]
    assert wrap_line("abcdefg", 3) == ["abc", "def", "g"]


def test_cursor_cell():
    assert cursor_cell(7, 5, truncate=False) == (1, 2)
    assert cursor_cell(7, 5, truncate=True) == (0, 4)


def test_draw_header_and_candidates(styles):
    window = make_window()
    PanelView(styles).draw(window, Source(text="ab", selected=1), {}, 20)
    assert call(0, 0, "1/2 ", 4, styles["count"]) in window.addnstr.call_args_list
    assert call(0, 4, "P: ab", 5, styles["prompt"]) in window.addnstr.call_args_list
    rows = [c for c in window.addnstr.call_args_list if c.args[0] in (1, 2)]
    assert rows == [
        call(1, 0, "one".ljust(19), 19, styles["candidate"]),
        call(2, 0, "two".ljust(19), 19, styles["candidate_selected"]),
    ]


def test_draw_wraps_header_when_not_truncating(styles):
    window = make_window()
    source = Source(text="x" * 30, cursor=30, candidates=())
    params = {TRUNCATE_LINES: False, CURSOR_TYPE: CURSOR_BLOCK, POINT: 30}
    PanelView(styles).draw(window, source, params, 20)
    header_rows = {c.args[0] for c in window.addnstr.call_args_list}
    # "1/2 P: " + 30 chars = 37 cells over 19-column rows
    assert header_rows == {0, 1}
    cursor_attr = styles["input_cursor"]
    drawn = window.addnstr.call_args_list
    cursor_calls = [c for c in drawn if c.args[-1] == cursor_attr]
    assert cursor_calls == [call(1, 18, " ", 1, cursor_attr)]


def test_candidates_are_clipped_to_window_height(styles):
    window = make_window(height=3)
    source = Source(candidates=[f"c{i}" for i in range(10)])
    PanelView(styles).draw(window, source, {}, 20)
    drawn_rows = {c.args[0] for c in window.addnstr.call_args_list}
    assert max(drawn_rows) == 2

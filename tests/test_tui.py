"""Tests for the demo application wiring."""

import curses
from unittest.mock import Mock

import pytest

from completion_panel import tui
from completion_panel.settings import Settings
from completion_panel.ui.theme import default_styles

ENTER = 10


def make_window(height, width, top, left):
    window = Mock(name=f"window({height}x{width}+{top}+{left})")
    window.getmaxyx.return_value = (height, width)
    return window


@pytest.fixture
def app(monkeypatch):
    monkeypatch.setattr(curses, "newwin", make_window)
    monkeypatch.setattr(curses, "doupdate", lambda: None)
    monkeypatch.setattr(tui, "init_styles", default_styles)
    stdscr = Mock(name="stdscr")
    stdscr.getmaxyx.return_value = (24, 80)
    return tui.App(stdscr, Settings(), ["Alpha", "beta", "gamma"])


def test_default_candidates_include_keywords_and_builtins():
    names = tui.default_candidates()
    assert "lambda" in names
    assert "print" in names
    assert names == sorted(names)


def test_read_candidates_skips_blank_lines(tmp_path):
    path = tmp_path / "words.txt"
    path.write_text("one\n\n  two  \n", encoding="utf-8")
    assert tui.read_candidates(path) == ["one", "two"]


def test_read_candidates_missing_file_exits(tmp_path):
    with pytest.raises(SystemExit, match="ERROR"):
        tui.read_candidates(tmp_path / "missing.txt")


def test_match_is_case_insensitive(app):
    assert app.match("al") == ["Alpha"]
    assert app.match("A") == ["Alpha", "beta", "gamma"]


def test_complete_records_history(app):
    app.stdscr.getch.side_effect = [ord("m"), ENTER]
    app.complete()
    assert app.history == ["gamma"]
    assert app.message == "Selected gamma."
    assert app.layout.panel_handles() == []


def test_complete_cancel_and_abort(app):
    app.stdscr.getch.side_effect = [27]
    app.complete()
    assert app.message == "Cancelled."
    app.stdscr.getch.side_effect = [7]
    app.complete()
    assert app.message == "Aborted."
    assert app.history == []


def test_dispatch_toggles_panel_and_quits(app):
    assert app.mode.enabled
    assert app.dispatch_command(ord("p")) is False
    assert not app.mode.enabled
    assert app.message == "Panel mode off."
    assert app.dispatch_command(-1) is False
    assert app.dispatch_command(ord("q")) is True


def test_duplicate_key_bindings_are_rejected(app):
    binding = tui.CommandBinding("x", (ord("x"),), lambda: False)
    with pytest.raises(ValueError, match="Duplicate"):
        app._build_command_map((binding, binding))

"""Pytest configuration and mock host driver for completion-panel tests."""

from __future__ import annotations

import contextlib
import itertools
from unittest.mock import Mock

import pytest

from completion_panel.host import SPACER, VSCROLL
from completion_panel.lifecycle import PanelLifecycle
from completion_panel.ui.theme import default_styles

INPUT = "input"


class FakeLayout:
    """In-memory layout manager driven explicitly by the tests."""

    def __init__(
        self, pixel_height: int = 300, line_height: int = 20, width: int = 80
    ):
        self.pixel_height = pixel_height
        self.line_height = line_height
        self.width = width
        self.depth = 0
        self.params: dict[object, dict[str, object]] = {
            INPUT: {VSCROLL: 0, SPACER: False}
        }
        self.live: set[object] = {INPUT}
        self.allocated: list[tuple[object, object]] = []
        self.released: list[object] = []
        self.redraw_callbacks: list = []
        self.exit_callbacks: list = []
        self.preset: dict[str, object] = {}
        self._ids = itertools.count(1)

    # LayoutManager
    def allocate_surface(self, placement):
        handle = next(self._ids)
        self.params[handle] = dict(self.preset)
        self.live.add(handle)
        self.allocated.append((handle, placement))
        return handle

    def release_surface(self, handle):
        self.live.discard(handle)
        self.released.append(handle)

    def surface_live(self, handle):
        return handle in self.live

    def set_surface_parameter(self, handle, name, value):
        old = self.params[handle].get(name)
        self.params[handle][name] = value
        return old

    def surface_parameter(self, handle, name):
        return self.params[handle].get(name)

    def surface_pixel_height(self, handle):
        return self.pixel_height

    def surface_width(self, handle):
        return self.width

    def surface_content_lines(self, handle):
        return 1 + (1 if self.params[handle].get(SPACER) else 0)

    def default_line_height(self):
        return self.line_height

    def input_surface(self):
        return INPUT

    def register_redraw_callback(self, fn):
        self.redraw_callbacks.append(fn)

    def unregister_redraw_callback(self, fn):
        if fn in self.redraw_callbacks:
            self.redraw_callbacks.remove(fn)

    def register_episode_exit_callback(self, fn):
        self.exit_callbacks.append(fn)

    def unregister_episode_exit_callback(self, fn):
        if fn in self.exit_callbacks:
            self.exit_callbacks.remove(fn)

    def current_nesting_depth(self):
        return self.depth

    # driver
    @contextlib.contextmanager
    def episode(self):
        self.depth += 1
        try:
            yield self.depth
        finally:
            try:
                for fn in list(self.exit_callbacks):
                    fn()
            finally:
                self.depth -= 1

    def redraw(self):
        results = {}
        for handle in list(self.live):
            for fn in list(self.redraw_callbacks):
                results[handle] = fn(handle)
        return results

    def close(self, handle):
        """Close a surface behind the lifecycle's back."""

        self.live.discard(handle)

    def live_panels(self):
        return sorted(h for h in self.live if h != INPUT)


class FakeEngine:
    """Completion engine exposing fixed candidates and input state."""

    def __init__(self):
        self.prompt = "Pick: "
        self.text = ""
        self.cursor = 0
        self.candidates = ["alpha", "beta", "gamma"]
        self.rows: list[int] = []
        self.setup_hooks: list = []
        self.provider = None
        self.native_resize = Mock(name="native_resize")
        self.resize = self.native_resize

    def current_candidate_overlay(self):
        return list(self.candidates)

    def current_count_overlay(self):
        return self.format_count_string()

    def format_count_string(self):
        return f"1/{len(self.candidates)} "

    def resize_notify(self, row_count):
        self.rows.append(row_count)

    def prompt_text(self):
        return self.prompt

    def input_text(self):
        return self.text

    def input_cursor(self):
        return self.cursor

    def add_setup_hook(self, hook):
        self.setup_hooks.append(hook)

    def remove_setup_hook(self, hook):
        self.setup_hooks.remove(hook)

    def set_render_target(self, provider):
        self.provider = provider

    def set_resize_handler(self, handler):
        previous = self.resize
        self.resize = handler or self.native_resize
        return previous

    def run_setup(self):
        for hook in list(self.setup_hooks):
            hook()


@pytest.fixture
def layout():
    return FakeLayout()


@pytest.fixture
def engine():
    return FakeEngine()


@pytest.fixture
def lifecycle(engine, layout):
    return PanelLifecycle(engine, layout)


@pytest.fixture
def styles():
    return default_styles()

"""Completing reader: the curses completion engine driving the input line."""

from __future__ import annotations

import curses
from dataclasses import dataclass, field
import logging
from typing import TYPE_CHECKING

from completion_panel.errors import EpisodeAbort
from completion_panel.host import BUFFER
from completion_panel.settings import DEFAULT_COUNT_FORMAT
from completion_panel.ui.panel import PanelView

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from completion_panel.host import (
        RenderTargetProvider,
        ResizeHandler,
        SetupHook,
    )
    from completion_panel.ui.screen import CursesLayout

    CandidateSource = Callable[[str], Iterable[str]]

logger = logging.getLogger(__name__)

CTRL_A = 1
CTRL_C = 3
CTRL_E = 5
CTRL_G = 7
CTRL_K = 11
CTRL_R = 18
CTRL_U = 21
ESC = 27
KEY_BYTE_MAX = 256
MAX_INPUT_CHARS = 512
DEFAULT_INLINE_ROWS = 10
PAGE_STEP = 10
SELECTED_MARK = "> "
UNSELECTED_MARK = "  "


@dataclass
class InputLine:
    """Editable single-line text with a cursor."""

    value: list[str] = field(default_factory=list)
    cursor: int = 0
    max_chars: int = MAX_INPUT_CHARS

    @classmethod
    def from_text(cls, text: str) -> InputLine:
        value = list(text[:MAX_INPUT_CHARS])
        return cls(value, len(value))

    @property
    def text(self) -> str:
        return "".join(self.value)

    def insert(self, text: str) -> None:
        for ch in text:
            if len(self.value) >= self.max_chars:
                break
            self.value.insert(self.cursor, ch)
            self.cursor += 1

    def edit(self, ch: int) -> bool:
        """Apply an editing key; return True when the text may have changed."""

        value = self.value
        if ch == curses.KEY_LEFT:
            self.cursor = max(0, self.cursor - 1)
            return False
        if ch == curses.KEY_RIGHT:
            self.cursor = min(len(value), self.cursor + 1)
            return False
        if ch in (curses.KEY_HOME, CTRL_A):
            self.cursor = 0
            return False
        if ch in (curses.KEY_END, CTRL_E):
            self.cursor = len(value)
            return False
        if ch == CTRL_U:
            if self.cursor > 0:
                del value[: self.cursor]
                self.cursor = 0
                return True
            return False
        if ch == CTRL_K:
            if self.cursor < len(value):
                del value[self.cursor :]
                return True
            return False
        if ch in (curses.KEY_BACKSPACE, 127, 8):
            if self.cursor > 0:
                self.cursor -= 1
                value.pop(self.cursor)
                return True
            return False
        if ch == curses.KEY_DC:
            if self.cursor < len(value):
                value.pop(self.cursor)
                return True
            return False
        if 32 <= ch < KEY_BYTE_MAX and len(value) < self.max_chars:
            value.insert(self.cursor, chr(ch))
            self.cursor += 1
            return True
        return False


@dataclass
class _ReadState:
    prompt: str
    source: CandidateSource
    line: InputLine = field(default_factory=InputLine)
    candidates: list[str] = field(default_factory=list)
    selected: int = 0
    view_top: int = 0


def scroll_window(selected: int, view_top: int, total: int, rows: int) -> int:
    """Return the first visible index keeping ``selected`` inside ``rows`` rows."""

    rows = max(1, rows)
    max_start = max(0, total - rows)
    view_top = min(view_top, max_start)
    if selected < view_top:
        view_top = selected
    elif selected >= view_top + rows:
        view_top = selected - rows + 1
    return max(0, view_top)


class CompletingReader:
    """Read a line from the input line while offering candidates.

    Each :meth:`read` is one interactive episode of the layout. Reads may
    nest (``Ctrl-R`` starts an inner read whose result is inserted at the
    cursor). The reader renders its candidates under the input line unless a
    render target provider redirects them into a panel.
    """

    def __init__(
        self,
        layout: CursesLayout,
        styles: dict[str, int],
        count_format: str = DEFAULT_COUNT_FORMAT,
        inline_rows: int = DEFAULT_INLINE_ROWS,
    ) -> None:
        """Attach the reader to ``layout`` without starting an episode."""

        self.layout = layout
        self.count_format = count_format
        self.inline_rows = inline_rows
        self.visible_rows = inline_rows
        self.panel_view = PanelView(styles)
        self._stack: list[_ReadState] = []
        self._setup_hooks: list[SetupHook] = []
        self._provider: RenderTargetProvider | None = None
        self._resize: ResizeHandler = self._native_resize

    # ---------- episode ----------
    def read(self, prompt: str, source: CandidateSource) -> str | None:
        """Run one completion episode and return the chosen text or None.

        Raises:
            EpisodeAbort: the user aborted every active read (``Ctrl-G``).
        """

        state = _ReadState(prompt, source)
        layout = self.layout
        input_surface = layout.input_surface()
        with layout.episode() as depth:
            self._stack.append(state)
            saved_buffer = layout.set_surface_parameter(input_surface, BUFFER, self)
            try:
                self._refresh_candidates(state)
                for hook in list(self._setup_hooks):
                    hook()
                logger.debug("Reading %r at depth %d", prompt, depth)
                return self._loop(state)
            finally:
                self._stack.pop()
                layout.set_surface_parameter(input_surface, BUFFER, saved_buffer)
                if self._stack:
                    self._resize()
                else:
                    layout.set_input_rows(1)

    def _loop(self, state: _ReadState) -> str | None:
        while True:
            self.layout.redraw()
            try:
                ch = self.layout.stdscr.getch()
            except KeyboardInterrupt:
                ch = CTRL_C
            done, result = self.handle_key(state, ch)
            if done:
                return result

    def handle_key(self, state: _ReadState, ch: int) -> tuple[bool, str | None]:
        """Apply one key to ``state``; return ``(done, result)``."""

        if ch in (curses.KEY_ENTER, 10, 13):
            if state.candidates:
                return True, state.candidates[state.selected]
            return True, state.line.text or None
        if ch in (ESC, CTRL_C):
            return True, None
        if ch == CTRL_G:
            raise EpisodeAbort()
        if ch == CTRL_R:
            nested_prompt = f"[{len(self._stack) + 1}] {state.prompt}"
            nested = self.read(nested_prompt, state.source)
            if nested:
                state.line.insert(nested)
                self._refresh_candidates(state)
            return False, None
        if ch == curses.KEY_RESIZE:
            self.layout.relayout()
            return False, None
        if ch in (curses.KEY_UP, curses.KEY_DOWN):
            self.move_selection(state, -1 if ch == curses.KEY_UP else 1, wrap=True)
            return False, None
        if ch in (curses.KEY_PPAGE, curses.KEY_NPAGE):
            step = -PAGE_STEP if ch == curses.KEY_PPAGE else PAGE_STEP
            self.move_selection(state, step)
            return False, None
        if state.line.edit(ch):
            self._refresh_candidates(state)
        return False, None

    def move_selection(
        self, state: _ReadState, delta: int, wrap: bool = False
    ) -> None:
        total = len(state.candidates)
        if total == 0:
            state.selected = 0
            return
        if wrap:
            state.selected = (state.selected + delta) % total
        else:
            state.selected = min(max(0, state.selected + delta), total - 1)

    def _refresh_candidates(self, state: _ReadState) -> None:
        state.candidates = list(state.source(state.line.text))
        state.selected = 0
        state.view_top = 0
        self._resize()

    def _native_resize(self) -> None:
        state = self._current()
        rows = min(len(state.candidates), self.inline_rows) if state else 0
        self.visible_rows = self.inline_rows
        if self._overlays_inline():
            self.layout.set_input_rows(1 + rows)

    def _overlays_inline(self) -> bool:
        return self._provider is None or self._provider.render_target() is None

    def _current(self) -> _ReadState | None:
        return self._stack[-1] if self._stack else None

    # ---------- CompletionEngine ----------
    def current_candidate_overlay(self) -> list[str]:
        state = self._current()
        if state is None:
            return []
        state.view_top = scroll_window(
            state.selected, state.view_top, len(state.candidates), self.visible_rows
        )
        return state.candidates[state.view_top : state.view_top + self.visible_rows]

    def overlay_selection(self) -> int:
        state = self._current()
        if state is None:
            return -1
        return state.selected - state.view_top

    def current_count_overlay(self) -> str:
        if self._current() is None:
            return ""
        return self.format_count_string()

    def format_count_string(self) -> str:
        state = self._current()
        total = len(state.candidates) if state else 0
        index = state.selected + 1 if state and total else 0
        return self.count_format.format(index=index, total=total)

    def resize_notify(self, row_count: int) -> None:
        self.visible_rows = max(1, row_count)

    def prompt_text(self) -> str:
        state = self._current()
        return state.prompt if state else ""

    def input_text(self) -> str:
        state = self._current()
        return state.line.text if state else ""

    def input_cursor(self) -> int:
        state = self._current()
        return state.line.cursor if state else 0

    def add_setup_hook(self, hook: SetupHook) -> None:
        if hook not in self._setup_hooks:
            self._setup_hooks.append(hook)

    def remove_setup_hook(self, hook: SetupHook) -> None:
        if hook in self._setup_hooks:
            self._setup_hooks.remove(hook)

    def set_render_target(self, provider: RenderTargetProvider | None) -> None:
        self._provider = provider

    def set_resize_handler(
        self, handler: ResizeHandler | None
    ) -> ResizeHandler | None:
        """Replace the resize behavior; None restores the native one."""

        previous = self._resize
        self._resize = handler or self._native_resize
        return previous

    # ---------- drawing ----------
    def input_line_content(self) -> list[str]:
        state = self._current()
        if state is None:
            return [""]
        lines = [f"{self.current_count_overlay()}{state.prompt}{state.line.text}"]
        if self._overlays_inline():
            selected = self.overlay_selection()
            for idx, candidate in enumerate(self.current_candidate_overlay()):
                mark = SELECTED_MARK if idx == selected else UNSELECTED_MARK
                lines.append(f"{mark}{candidate}")
        return lines

    def input_cursor_column(self) -> int:
        return (
            len(self.current_count_overlay())
            + len(self.prompt_text())
            + self.input_cursor()
        )

    def paint(
        self, window: curses.window, params: Mapping[str, object], width: int
    ) -> None:
        self.panel_view.draw(window, self, params, width)

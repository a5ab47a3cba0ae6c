"""Rendering of the mirrored completion view inside a panel surface."""

from __future__ import annotations

import contextlib
import curses
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from completion_panel.host import CURSOR_TYPE, POINT, TRUNCATE_LINES
from completion_panel.session import CURSOR_BLOCK

if TYPE_CHECKING:
    from collections.abc import Mapping


class PanelSource(Protocol):
    """What the panel needs from the engine whose view it mirrors."""

    def prompt_text(self) -> str: ...

    def input_text(self) -> str: ...

    def input_cursor(self) -> int: ...

    def current_count_overlay(self) -> str: ...

    def current_candidate_overlay(self) -> list[str]: ...

    def overlay_selection(self) -> int: ...


def wrap_line(text: str, width: int) -> list[str]:
    """Split ``text`` into rows of at most ``width`` characters."""

    width = max(1, width)
    if not text:
        return [""]
    return [text[i : i + width] for i in range(0, len(text), width)]


def cursor_cell(column: int, width: int, truncate: bool) -> tuple[int, int]:
    """Return the (row, col) cell of ``column`` in a header of ``width`` cells."""

    width = max(1, width)
    if truncate:
        return 0, min(column, width - 1)
    return divmod(column, width)


@dataclass
class PanelView:
    """Draw prompt, input, count and candidates into a surface window."""

    styles: dict[str, int]

    def draw(
        self,
        window: curses.window,
        source: PanelSource,
        params: Mapping[str, object],
        width: int,
    ) -> None:
        """Render the full mirrored view; rows that do not fit are dropped."""

        height = window.getmaxyx()[0]
        text_width = max(1, width - 1)
        with contextlib.suppress(curses.error):
            window.bkgd(" ", self.styles.get("panel", 0))

        count = source.current_count_overlay()
        prompt = source.prompt_text()
        header = f"{count}{prompt}{source.input_text()}"
        truncate = bool(params.get(TRUNCATE_LINES, True))
        rows = [header[:text_width]] if truncate else wrap_line(header, text_width)
        rows = rows[:height]
        for y, row in enumerate(rows):
            self._draw_header_row(window, y, row, len(count) if y == 0 else 0)

        if params.get(CURSOR_TYPE) == CURSOR_BLOCK:
            point = params.get(POINT)
            if not isinstance(point, int):
                point = source.input_cursor()
            y, x = cursor_cell(len(count) + len(prompt) + point, text_width, truncate)
            if y < len(rows):
                ch = rows[y][x] if x < len(rows[y]) else " "
                window.addnstr(y, x, ch, 1, self.styles.get("input_cursor", 0))

        self._draw_candidates(window, len(rows), height, text_width, source)

    def _draw_header_row(
        self, window: curses.window, y: int, row: str, count_width: int
    ) -> None:
        count_part = row[:count_width]
        if count_part:
            window.addnstr(y, 0, count_part, len(count_part), self.styles["count"])
        rest = row[count_width:]
        if rest:
            window.addnstr(y, len(count_part), rest, len(rest), self.styles["prompt"])

    def _draw_candidates(
        self,
        window: curses.window,
        start_y: int,
        height: int,
        width: int,
        source: PanelSource,
    ) -> None:
        selected = source.overlay_selection()
        for idx, line in enumerate(source.current_candidate_overlay()):
            y = start_y + idx
            if y >= height:
                break
            attr = (
                self.styles["candidate_selected"]
                if idx == selected
                else self.styles["candidate"]
            )
            window.addnstr(y, 0, line.ljust(width)[:width], width, attr)

"""Rendering helpers for the main area of the demo application."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import curses

    from completion_panel.settings import Settings
    from completion_panel.tui import CommandBinding


@dataclass
class MainView:
    """Render the title, shortcuts, completion history and status line."""

    styles: dict[str, int]
    settings: Settings

    def draw(
        self,
        window: curses.window,
        bindings: tuple[CommandBinding, ...],
        history: list[str],
        message: str,
        panel_enabled: bool,
    ) -> None:
        """Render the full main area into ``window``."""

        h, w = window.getmaxyx()
        content_width = max(10, w - 1)
        self._draw_title(window, w, panel_enabled)
        list_start_y = self._draw_help_section(window, 1, w, bindings)
        footer_rows = self._wrap_segments(
            [
                f"placement: {self.settings.placement}",
                f"hide input: {'yes' if self.settings.hide_input else 'no'}",
            ],
            content_width,
        )
        reserved_bottom = len(footer_rows) + 1
        list_height = max(0, h - list_start_y - reserved_bottom)
        self._draw_history(window, list_start_y, list_height, w, history)
        self._draw_footer(window, h - reserved_bottom, footer_rows, w, message)

    def _draw_title(self, window: curses.window, width: int, enabled: bool) -> None:
        state = "panel" if enabled else "inline"
        title = f"Completion Panel · {state}"
        window.addnstr(0, 0, title, width - 1, self.styles["title"])

    def _build_help_rows(self, bindings: tuple[CommandBinding, ...]) -> list[list[str]]:
        help_segments = [cmd.display for cmd in bindings if cmd.show_in_help]
        midpoint = (len(help_segments) + 1) // 2
        return [
            row for row in (help_segments[:midpoint], help_segments[midpoint:]) if row
        ]

    def _draw_help_section(
        self,
        window: curses.window,
        start_y: int,
        width: int,
        bindings: tuple[CommandBinding, ...],
    ) -> int:
        rows = self._build_help_rows(bindings)
        for idx, row in enumerate(rows):
            self._draw_help_row(window, start_y + idx, row, width)
        return start_y + len(rows)

    def _draw_help_row(
        self,
        window: curses.window,
        y: int,
        segments: list[str],
        width: int,
    ) -> None:
        col = 0

        def write(text: str, attr: int) -> None:
            nonlocal col
            if not text or col >= width - 1:
                return
            space = width - 1 - col
            window.addnstr(y, col, text, space, attr)
            col += min(len(text), space)

        for idx, segment in enumerate(segments):
            if idx:
                write(" · ", self.styles["help_sep"])
            key_part, _, desc_part = segment.partition(" ")
            write(key_part, self.styles["help_key"])
            if desc_part:
                write(f" {desc_part}", self.styles["help_dim"])

    def _draw_history(
        self,
        window: curses.window,
        start_y: int,
        list_height: int,
        width: int,
        history: list[str],
    ) -> None:
        if list_height <= 0:
            return
        rows = history[-list_height:]
        first = len(history) - len(rows)
        for idx, value in enumerate(rows):
            line = f"{first + idx + 1:>3}  {value}"
            window.addnstr(start_y + idx, 0, line, width - 1, self.styles["history"])

    def _draw_footer(
        self,
        window: curses.window,
        status_y: int,
        rows: list[str],
        width: int,
        message: str,
    ) -> None:
        window.addnstr(
            status_y,
            0,
            (message or "")[: width - 1],
            width - 1,
            self.styles["status"],
        )
        for idx, text in enumerate(rows):
            window.addnstr(
                status_y + 1 + idx, 0, text, width - 1, self.styles["help_dim"]
            )

    def _wrap_segments(
        self, segments: list[str], width: int, separator: str = " · "
    ) -> list[str]:
        rows: list[str] = []
        current = ""
        for segment in segments:
            candidate = segment if not current else f"{current}{separator}{segment}"
            if len(candidate) > width and current:
                rows.append(current)
                current = segment
            else:
                current = candidate
        if current:
            rows.append(current)
        return rows

"""Curses window manager hosting the input line and completion panels."""

from __future__ import annotations

import contextlib
import curses
from dataclasses import dataclass, field
import itertools
import logging
from typing import TYPE_CHECKING, NamedTuple, Protocol, cast

from completion_panel.errors import ContractViolation
from completion_panel.host import (
    BUFFER,
    CURSOR_TYPE,
    NO_DELETE_OTHER_WINDOWS,
    NO_OTHER_WINDOW,
    SPACER,
    VSCROLL,
)
from completion_panel.placement import Placement, PlacementKind
from completion_panel.session import CURSOR_BLOCK

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from completion_panel.host import ExitCallback, RedrawCallback, SurfaceHandle

logger = logging.getLogger(__name__)

MAIN_SURFACE = 0
INPUT_SURFACE = -1
MIN_INPUT_ROWS = 1


class Rect(NamedTuple):
    """Screen region in curses order: height, width, top, left."""

    height: int
    width: int
    top: int
    left: int


class Painter(Protocol):
    """Anything that can draw itself into a surface window."""

    def paint(
        self, window: curses.window, params: Mapping[str, object], width: int
    ) -> None: ...


class InputLineSource(Protocol):
    """Content provider for the input line at the bottom of the frame."""

    def input_line_content(self) -> list[str]: ...

    def input_cursor_column(self) -> int: ...


def split_area(area: Rect, placement: Placement) -> tuple[Rect, Rect]:
    """Carve a panel out of ``area`` and return ``(panel, remaining)``.

    ``reuse-window`` takes the whole area and leaves it shared with the
    window being reused.
    """

    kind = placement.kind
    if kind is PlacementKind.REUSE_WINDOW:
        return area, area
    if kind.is_vertical_split:
        if area.width < 2:
            return area, area
        cols = placement.extent(area.width - 1)
        rest_width = area.width - cols
        if kind is PlacementKind.SIDE_LEFT:
            return (
                Rect(area.height, cols, area.top, area.left),
                Rect(area.height, rest_width, area.top, area.left + cols),
            )
        return (
            Rect(area.height, cols, area.top, area.left + rest_width),
            Rect(area.height, rest_width, area.top, area.left),
        )
    if area.height < 2:
        return area, area
    available = area.height - 1
    if kind is PlacementKind.BELOW_TARGET:
        available = max(1, area.height // 2)
    rows = placement.extent(available)
    rest_height = area.height - rows
    if kind is PlacementKind.SIDE_TOP:
        return (
            Rect(rows, area.width, area.top, area.left),
            Rect(rest_height, area.width, area.top + rows, area.left),
        )
    return (
        Rect(rows, area.width, area.top + rest_height, area.left),
        Rect(rest_height, area.width, area.top, area.left),
    )


@dataclass
class _Surface:
    placement: Placement | None
    params: dict[str, object] = field(default_factory=dict)
    rect: Rect = Rect(1, 1, 0, 0)
    window: curses.window | None = None
    saved_buffer: object = None


class CursesLayout:
    """Lay out the main area, the input line and allocated panel surfaces."""

    def __init__(
        self, stdscr: curses.window, styles: dict[str, int], line_height: int = 1
    ) -> None:
        """Create the main and input surfaces over ``stdscr``."""

        self.stdscr = stdscr
        self.styles = styles
        self.line_height = line_height
        self.input_rows = MIN_INPUT_ROWS
        self._ids = itertools.count(1)
        self._surfaces: dict[SurfaceHandle, _Surface] = {
            MAIN_SURFACE: _Surface(None),
            INPUT_SURFACE: _Surface(None, {VSCROLL: 0, SPACER: False}),
        }
        self._redraw_callbacks: list[RedrawCallback] = []
        self._exit_callbacks: list[ExitCallback] = []
        self._depth = 0
        self.relayout()

    # ---------- geometry ----------
    def relayout(self) -> None:
        """Recompute every surface rectangle from the current terminal size."""

        h, w = self.stdscr.getmaxyx()
        input_rows = max(MIN_INPUT_ROWS, min(self.input_rows, h - 1))
        area = Rect(max(1, h - input_rows), w, 0, 0)
        for handle, surface in self._surfaces.items():
            if surface.placement is None or handle == MAIN_SURFACE:
                continue
            panel, area = split_area(area, surface.placement)
            self._place(surface, panel)
        self._place(self._surfaces[MAIN_SURFACE], area)
        self._place(
            self._surfaces[INPUT_SURFACE], Rect(input_rows, w, h - input_rows, 0)
        )

    def _place(self, surface: _Surface, rect: Rect) -> None:
        surface.rect = rect
        surface.window = curses.newwin(*rect)
        surface.window.keypad(True)

    def set_input_rows(self, rows: int) -> None:
        """Grow or shrink the input line (the engine's native resize)."""

        rows = max(MIN_INPUT_ROWS, rows)
        if rows != self.input_rows:
            self.input_rows = rows
            self.relayout()

    # ---------- LayoutManager ----------
    def allocate_surface(self, placement: Placement) -> SurfaceHandle:
        """Return a surface for ``placement``, splitting the frame when needed."""

        if placement.kind is PlacementKind.REUSE_WINDOW:
            main = self._surfaces[MAIN_SURFACE]
            main.placement = placement
            main.saved_buffer = main.params.get(BUFFER)
            return MAIN_SURFACE
        handle = next(self._ids)
        self._surfaces[handle] = _Surface(placement)
        self.relayout()
        logger.debug("Allocated surface %d for %s", handle, placement)
        return handle

    def release_surface(self, handle: SurfaceHandle) -> None:
        """Give a surface back; split panels are deleted, reused windows restored."""

        if handle == MAIN_SURFACE:
            main = self._surfaces[MAIN_SURFACE]
            main.params[BUFFER] = main.saved_buffer
            main.saved_buffer = None
            main.placement = None
            return
        if handle == INPUT_SURFACE:
            raise ContractViolation("the input line cannot be released")
        surface = self._surfaces.pop(handle, None)
        if surface is None:
            return
        if surface.window is not None:
            with contextlib.suppress(curses.error):
                surface.window.erase()
                surface.window.noutrefresh()
        self.relayout()
        self.stdscr.touchwin()

    def delete_other_surfaces(self) -> list[SurfaceHandle]:
        """Close every panel not marked ``no-delete-other-windows``."""

        closed = [
            handle
            for handle, surface in self._surfaces.items()
            if surface.placement is not None
            and handle != MAIN_SURFACE
            and not surface.params.get(NO_DELETE_OTHER_WINDOWS)
        ]
        for handle in closed:
            self.release_surface(handle)
        return closed

    def panel_handles(self) -> list[SurfaceHandle]:
        """Return every surface currently allocated as a panel."""

        return [
            handle
            for handle, surface in self._surfaces.items()
            if surface.placement is not None
        ]

    def surface_rect(self, handle: SurfaceHandle) -> Rect:
        return self._require(handle).rect

    def other_surfaces(self) -> list[SurfaceHandle]:
        """Return surfaces reachable by other-window navigation."""

        return [
            handle
            for handle, surface in self._surfaces.items()
            if handle != INPUT_SURFACE and not surface.params.get(NO_OTHER_WINDOW)
        ]

    def surface_live(self, handle: SurfaceHandle) -> bool:
        return handle in self._surfaces

    def set_surface_parameter(
        self, handle: SurfaceHandle, name: str, value: object
    ) -> object:
        params = self._require(handle).params
        old = params.get(name)
        params[name] = value
        return old

    def surface_parameter(self, handle: SurfaceHandle, name: str) -> object:
        return self._require(handle).params.get(name)

    def surface_pixel_height(self, handle: SurfaceHandle) -> int:
        return self._require(handle).rect.height * self.line_height

    def surface_width(self, handle: SurfaceHandle) -> int:
        return self._require(handle).rect.width

    def surface_content_lines(self, handle: SurfaceHandle) -> int:
        if handle == INPUT_SURFACE:
            return len(self._input_lines())
        return self._require(handle).rect.height

    def default_line_height(self) -> int:
        return self.line_height

    def input_surface(self) -> SurfaceHandle:
        return INPUT_SURFACE

    def register_redraw_callback(self, fn: RedrawCallback) -> None:
        if fn not in self._redraw_callbacks:
            self._redraw_callbacks.append(fn)

    def unregister_redraw_callback(self, fn: RedrawCallback) -> None:
        with contextlib.suppress(ValueError):
            self._redraw_callbacks.remove(fn)

    def register_episode_exit_callback(self, fn: ExitCallback) -> None:
        if fn not in self._exit_callbacks:
            self._exit_callbacks.append(fn)

    def unregister_episode_exit_callback(self, fn: ExitCallback) -> None:
        with contextlib.suppress(ValueError):
            self._exit_callbacks.remove(fn)

    def current_nesting_depth(self) -> int:
        return self._depth

    # ---------- episodes ----------
    @contextlib.contextmanager
    def episode(self) -> Iterator[int]:
        """Run one interactive episode one level deeper.

        Exit callbacks run on every way out, including ``EpisodeAbort``
        unwinding several levels, while the depth still names the exiting
        episode.
        """

        self._depth += 1
        try:
            yield self._depth
        finally:
            try:
                for fn in list(self._exit_callbacks):
                    fn()
            finally:
                self._depth -= 1

    # ---------- drawing ----------
    def redraw(self) -> None:
        """Draw every surface once all redraw callbacks have seen it."""

        for handle in list(self._surfaces):
            for fn in list(self._redraw_callbacks):
                fn(handle)
        for handle in list(self._surfaces):
            surface = self._surfaces.get(handle)
            if surface is None or surface.window is None:
                continue
            with contextlib.suppress(curses.error):
                if handle == INPUT_SURFACE:
                    self._paint_input(surface)
                else:
                    self._paint_surface(surface)
                surface.window.noutrefresh()
        curses.doupdate()

    def _input_lines(self) -> list[str]:
        params = self._surfaces[INPUT_SURFACE].params
        source = cast("InputLineSource | None", params.get(BUFFER))
        lines = source.input_line_content() if source is not None else [""]
        if params.get(SPACER):
            lines.append("")
        return lines

    def _paint_input(self, surface: _Surface) -> None:
        window = surface.window
        if window is None:
            return
        window.erase()
        width = surface.rect.width
        vscroll = int(surface.params.get(VSCROLL) or 0)
        visible = self._input_lines()[vscroll : vscroll + surface.rect.height]
        for y, text in enumerate(visible):
            window.addnstr(y, 0, text, width - 1, self.styles.get("input_line", 0))
        source = cast("InputLineSource | None", surface.params.get(BUFFER))
        if vscroll == 0 and source is not None and (
            surface.params.get(CURSOR_TYPE) == CURSOR_BLOCK
        ):
            col = min(source.input_cursor_column(), width - 2)
            line = visible[0] if visible else ""
            ch = line[col] if col < len(line) else " "
            window.addnstr(0, col, ch, 1, self.styles.get("input_cursor", 0))

    def _paint_surface(self, surface: _Surface) -> None:
        window = surface.window
        if window is None:
            return
        window.erase()
        painter = cast("Painter | None", surface.params.get(BUFFER))
        if painter is not None:
            painter.paint(window, surface.params, surface.rect.width)

    def _require(self, handle: SurfaceHandle) -> _Surface:
        try:
            return self._surfaces[handle]
        except KeyError:
            raise ContractViolation(f"unknown surface {handle!r}") from None

"""Capabilities the panel lifecycle consumes from its host.

The lifecycle never talks to curses or to a concrete completion engine
directly. It only relies on the protocols below; ``completion_panel.ui``
provides the curses implementations and the tests provide fakes.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable
from typing import TYPE_CHECKING, Any, Protocol, TypeAlias

if TYPE_CHECKING:
    from completion_panel.placement import Placement

SurfaceHandle: TypeAlias = Hashable
RedrawCallback: TypeAlias = Callable[[SurfaceHandle], Any]
ExitCallback: TypeAlias = Callable[[], Any]
SetupHook: TypeAlias = Callable[[], Any]
ResizeHandler: TypeAlias = Callable[[], Any]

# Surface parameter names understood by every layout manager.
NO_OTHER_WINDOW = "no-other-window"
NO_DELETE_OTHER_WINDOWS = "no-delete-other-windows"
CURSOR_TYPE = "cursor-type"
TRUNCATE_LINES = "truncate-lines"
POINT = "point"
VSCROLL = "vscroll"
SPACER = "spacer"
BUFFER = "buffer"


class RenderTargetProvider(Protocol):
    """Decides which surface a completion engine draws its overlays into."""

    def render_target(self) -> SurfaceHandle | None:
        """Return the overlay surface, or None to draw on the input line."""
        ...


class CompletionEngine(Protocol):
    """The completion engine producing candidates for an interactive episode."""

    def current_candidate_overlay(self) -> list[str]: ...

    def current_count_overlay(self) -> str: ...

    def format_count_string(self) -> str: ...

    def resize_notify(self, row_count: int) -> None: ...

    def prompt_text(self) -> str: ...

    def input_text(self) -> str: ...

    def input_cursor(self) -> int: ...

    def add_setup_hook(self, hook: SetupHook) -> None: ...

    def remove_setup_hook(self, hook: SetupHook) -> None: ...

    def set_render_target(self, provider: RenderTargetProvider | None) -> None: ...

    def set_resize_handler(
        self, handler: ResizeHandler | None
    ) -> ResizeHandler | None: ...


class LayoutManager(Protocol):
    """The host's window/layout manager."""

    def allocate_surface(self, placement: Placement) -> SurfaceHandle: ...

    def release_surface(self, handle: SurfaceHandle) -> None: ...

    def surface_live(self, handle: SurfaceHandle) -> bool: ...

    def set_surface_parameter(
        self, handle: SurfaceHandle, name: str, value: object
    ) -> object: ...

    def surface_parameter(self, handle: SurfaceHandle, name: str) -> object: ...

    def surface_pixel_height(self, handle: SurfaceHandle) -> int: ...

    def surface_width(self, handle: SurfaceHandle) -> int: ...

    def surface_content_lines(self, handle: SurfaceHandle) -> int: ...

    def default_line_height(self) -> int: ...

    def input_surface(self) -> SurfaceHandle: ...

    def register_redraw_callback(self, fn: RedrawCallback) -> None: ...

    def unregister_redraw_callback(self, fn: RedrawCallback) -> None: ...

    def register_episode_exit_callback(self, fn: ExitCallback) -> None: ...

    def unregister_episode_exit_callback(self, fn: ExitCallback) -> None: ...

    def current_nesting_depth(self) -> int: ...

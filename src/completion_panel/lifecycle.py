"""Bind a completion session to a display surface and tear it down once.

``PanelLifecycle`` has three entry points driven by the host:

* :meth:`PanelLifecycle.start_session` runs once when an interactive episode
  starts and allocates the panel surface.
* :meth:`PanelLifecycle.on_redraw` runs for every surface the host redraws
  while the session is bound.
* the disposer returned in ``Session.disposer`` runs on every episode exit and
  restores the saved state when the episode that created the session unwinds.

The host guarantees the ordering: the binder completes before the first
redraw, redraws happen zero or more times, and the disposer acts exactly once
after the last redraw.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from completion_panel.errors import ContractViolation
from completion_panel.host import (
    BUFFER,
    CURSOR_TYPE,
    NO_DELETE_OTHER_WINDOWS,
    NO_OTHER_WINDOW,
    POINT,
    SPACER,
    TRUNCATE_LINES,
    VSCROLL,
)
from completion_panel.session import (
    CURSOR_BLOCK,
    DisplaySurface,
    Session,
    SyncState,
    should_truncate,
    visible_row_count,
)

if TYPE_CHECKING:
    from completion_panel.host import (
        CompletionEngine,
        ExitCallback,
        LayoutManager,
        SurfaceHandle,
    )
    from completion_panel.placement import Placement

logger = logging.getLogger(__name__)

EXCLUSION_MARKERS = (NO_OTHER_WINDOW, NO_DELETE_OTHER_WINDOWS)


class PanelLifecycle:
    """Own the single display surface bound to the active completion episode."""

    def __init__(self, engine: CompletionEngine, layout: LayoutManager) -> None:
        """Store the engine and layout capabilities used by every session."""

        self.engine = engine
        self.layout = layout
        self.session: Session | None = None

    @property
    def active(self) -> bool:
        return self.session is not None

    # ---------- session binder ----------
    def start_session(self, placement: Placement, hide_input: bool) -> Session:
        """Allocate the panel surface and bind the current episode into it.

        Raises:
            ContractViolation: no interactive episode is active, or another
                session is still bound.
        """

        layout = self.layout
        depth = layout.current_nesting_depth()
        if depth <= 0:
            raise ContractViolation("start_session requires an active episode")
        if self.session is not None:
            raise ContractViolation(
                f"a panel session is already bound at depth {self.session.depth}"
            )

        handle = layout.allocate_surface(placement)
        rows = visible_row_count(
            layout.surface_pixel_height(handle), layout.default_line_height()
        )
        session = Session(
            depth=depth,
            input_surface=layout.input_surface(),
            surface=DisplaySurface(handle, placement, rows),
            hide_input=hide_input,
        )
        layout.set_surface_parameter(handle, BUFFER, self.engine)
        for name in EXCLUSION_MARKERS:
            session.saved_surface_params[name] = layout.set_surface_parameter(
                handle, name, True
            )
        if hide_input:
            session.saved_input_params[VSCROLL] = layout.surface_parameter(
                session.input_surface, VSCROLL
            )
            session.saved_input_params[SPACER] = layout.set_surface_parameter(
                session.input_surface, SPACER, True
            )

        self.session = session
        self.engine.resize_notify(rows)
        layout.register_redraw_callback(self.on_redraw)
        session.disposer = self._make_disposer(session)
        layout.register_episode_exit_callback(session.disposer)
        logger.debug(
            "Bound panel session at depth %d (%s, %d rows, hide_input=%s)",
            depth,
            placement,
            rows,
            hide_input,
        )
        return session

    def render_target(self) -> SurfaceHandle | None:
        """Return the panel surface while overlays are redirected into it."""

        session = self.session
        if session is None or not session.hide_input:
            return None
        return session.surface.handle

    # ---------- frame synchronizer ----------
    def on_redraw(self, surface: SurfaceHandle) -> SyncState | None:
        """Reconcile cursor, truncation and scroll state for one redrawn surface."""

        session = self.session
        if session is None:
            raise ContractViolation("redraw callback fired with no bound session")
        panel = session.surface.handle
        if surface != panel and surface != session.input_surface:
            return None
        layout = self.layout
        if not layout.surface_live(surface):
            logger.debug("Skipping redraw of stale surface %r", surface)
            return None

        focused = layout.current_nesting_depth() >= session.depth
        cursor_type = CURSOR_BLOCK if focused else None
        layout.set_surface_parameter(surface, CURSOR_TYPE, cursor_type)
        if surface != panel:
            return SyncState(cursor_type)

        point = self.engine.input_cursor()
        column = (
            len(self.engine.current_count_overlay())
            + len(self.engine.prompt_text())
            + point
        )
        truncate = should_truncate(column, layout.surface_width(panel))
        layout.set_surface_parameter(panel, TRUNCATE_LINES, truncate)
        layout.set_surface_parameter(panel, POINT, point)

        vscroll: int | None = None
        if session.hide_input and layout.surface_live(session.input_surface):
            vscroll = layout.surface_content_lines(session.input_surface)
            layout.set_surface_parameter(session.input_surface, VSCROLL, vscroll)
        return SyncState(cursor_type, point, truncate, vscroll)

    # ---------- teardown guard ----------
    def _make_disposer(self, session: Session) -> ExitCallback:
        depth = session.depth

        def dispose() -> None:
            current = self.layout.current_nesting_depth()
            if current != depth:
                logger.debug(
                    "Episode exit at depth %d ignored by session at depth %d",
                    current,
                    depth,
                )
                return
            self._teardown(session)

        return dispose

    def _teardown(self, session: Session) -> None:
        if session.torn_down:
            return
        session.torn_down = True
        layout = self.layout
        try:
            layout.unregister_redraw_callback(self.on_redraw)
            handle = session.surface.handle
            if layout.surface_live(handle):
                for name, value in session.saved_surface_params.items():
                    layout.set_surface_parameter(handle, name, value)
                layout.release_surface(handle)
            else:
                logger.debug("Panel surface %r already gone at teardown", handle)
            if session.saved_input_params and layout.surface_live(
                session.input_surface
            ):
                for name, value in session.saved_input_params.items():
                    layout.set_surface_parameter(session.input_surface, name, value)
        finally:
            if session.disposer is not None:
                layout.unregister_episode_exit_callback(session.disposer)
            if self.session is session:
                self.session = None
        logger.debug("Tore down panel session at depth %d", session.depth)

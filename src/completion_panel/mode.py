"""Global on/off switch for rendering completions into a panel."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from completion_panel.lifecycle import PanelLifecycle

if TYPE_CHECKING:
    from completion_panel.host import CompletionEngine, LayoutManager, ResizeHandler
    from completion_panel.settings import Settings

logger = logging.getLogger(__name__)


def _keep_size() -> None:
    """Resize handler used while the panel owns the candidate list size."""


class PanelMode:
    """Install the panel lifecycle into a completion engine and remove it again."""

    def __init__(
        self,
        engine: CompletionEngine,
        layout: LayoutManager,
        settings: Settings,
    ) -> None:
        """Create the lifecycle manager; the mode starts disabled."""

        self.engine = engine
        self.settings = settings
        self.lifecycle = PanelLifecycle(engine, layout)
        self._enabled = False
        self._saved_resize: ResizeHandler | None = None

    @property
    def enabled(self) -> bool:
        return self._enabled

    def enable(self) -> None:
        """Hook the session binder into the engine's setup routine."""

        if self._enabled:
            return
        self.engine.add_setup_hook(self._on_episode_setup)
        self.engine.set_render_target(self.lifecycle)
        self._saved_resize = self.engine.set_resize_handler(_keep_size)
        self._enabled = True
        logger.debug("Completion panel mode enabled (%s)", self.settings.placement)

    def disable(self) -> None:
        """Restore the engine's own rendering and resize behavior."""

        if not self._enabled:
            return
        self.engine.remove_setup_hook(self._on_episode_setup)
        self.engine.set_render_target(None)
        self.engine.set_resize_handler(self._saved_resize)
        self._saved_resize = None
        self._enabled = False
        logger.debug("Completion panel mode disabled")

    def toggle(self) -> bool:
        """Flip the mode and return the new state."""

        if self._enabled:
            self.disable()
        else:
            self.enable()
        return self._enabled

    def _on_episode_setup(self) -> None:
        if self.lifecycle.active:
            # Nested episodes keep rendering into the outer session's panel.
            logger.debug("Episode setup while a panel session is bound; reusing it")
            return
        self.lifecycle.start_session(self.settings.placement, self.settings.hide_input)

"""State carried by one bound completion-panel session."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from completion_panel.host import ExitCallback, SurfaceHandle
    from completion_panel.placement import Placement

CHROME_ROWS = 2
TRUNCATE_RATIO = 0.8
CURSOR_BLOCK = "block"


def visible_row_count(pixel_height: int, line_height: int) -> int:
    """Return how many candidate rows fit in a surface of ``pixel_height``."""

    if line_height <= 0:
        raise ValueError(f"line height must be positive, got {line_height}")
    return pixel_height // line_height - CHROME_ROWS


def should_truncate(cursor_column: int, surface_width: int) -> bool:
    """Truncate long lines while the cursor sits in the first 80% of the width."""

    return cursor_column < TRUNCATE_RATIO * surface_width


@dataclass
class DisplaySurface:
    """The auxiliary surface showing the mirrored input view."""

    handle: SurfaceHandle
    placement: Placement
    row_count: int


@dataclass
class Session:
    """One interactive episode bound to a display surface."""

    depth: int
    input_surface: SurfaceHandle
    surface: DisplaySurface
    hide_input: bool
    saved_surface_params: dict[str, object] = field(default_factory=dict)
    saved_input_params: dict[str, object] = field(default_factory=dict)
    disposer: ExitCallback | None = None
    torn_down: bool = False


@dataclass(frozen=True)
class SyncState:
    """Per-frame view state derived from surface geometry and input position."""

    cursor_type: str | None
    point: int | None = None
    truncate_lines: bool | None = None
    input_vscroll: int | None = None

    @property
    def cursor_visible(self) -> bool:
        return self.cursor_type is not None

"""Placement policies describing where the completion panel is allocated."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

DEFAULT_PANEL_ROWS = 12


class PlacementKind(str, Enum):
    """Where a display surface is carved out of the frame."""

    REUSE_WINDOW = "reuse-window"
    BELOW_TARGET = "below-target"
    BOTTOM_OF_FRAME = "bottom-of-frame"
    SIDE_LEFT = "side-left"
    SIDE_RIGHT = "side-right"
    SIDE_TOP = "side-top"
    SIDE_BOTTOM = "side-bottom"

    @property
    def is_vertical_split(self) -> bool:
        """Return True when the surface takes columns rather than rows."""

        return self in (PlacementKind.SIDE_LEFT, PlacementKind.SIDE_RIGHT)


@dataclass(frozen=True)
class Placement:
    """A placement kind plus the desired size.

    ``size`` is either an absolute number of visible rows (or columns for
    left/right side panels) or a fraction of the frame in ``(0, 1)``.
    """

    kind: PlacementKind = PlacementKind.BOTTOM_OF_FRAME
    size: int | float = DEFAULT_PANEL_ROWS

    def __post_init__(self) -> None:
        if isinstance(self.size, bool):
            raise ValueError(f"Invalid placement size: {self.size!r}")
        if isinstance(self.size, int):
            if self.size < 1:
                raise ValueError(f"Placement size must be >= 1, got {self.size}")
        elif not 0 < self.size < 1:
            raise ValueError(
                f"Fractional placement size must be in (0, 1), got {self.size}"
            )

    def extent(self, available: int) -> int:
        """Resolve the size against the available rows or columns."""

        if isinstance(self.size, float):
            wanted = int(available * self.size)
        else:
            wanted = self.size
        return max(1, min(wanted, available))

    @classmethod
    def parse(cls, text: str) -> Placement:
        """Parse ``kind`` or ``kind:size`` (e.g. ``side-left:0.3``)."""

        kind_part, sep, size_part = text.strip().partition(":")
        try:
            kind = PlacementKind(kind_part.strip().lower())
        except ValueError as e:
            choices = ", ".join(k.value for k in PlacementKind)
            raise ValueError(
                f"Unknown placement '{kind_part}' (expected one of: {choices})"
            ) from e
        if not sep:
            return cls(kind)
        raw = size_part.strip()
        try:
            size: int | float = float(raw) if "." in raw else int(raw)
        except ValueError as e:
            raise ValueError(f"Invalid placement size '{raw}'") from e
        return cls(kind, size)

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.size}"

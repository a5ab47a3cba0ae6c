"""Curses demo application for completion-panel."""

from __future__ import annotations

import argparse
import builtins
import contextlib
import curses
from dataclasses import dataclass, replace
import keyword
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from .errors import EpisodeAbort
from .host import BUFFER
from .mode import PanelMode
from .placement import Placement, PlacementKind
from .settings import DEFAULT_SETTINGS_PATH, Settings, load_settings
from .ui.layout import MainView
from .ui.reader import CompletingReader
from .ui.screen import MAIN_SURFACE, CursesLayout
from .ui.theme import init_styles

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

logger = logging.getLogger(__name__)

with contextlib.suppress(AttributeError, curses.error):
    curses.set_escdelay(25)


@dataclass(frozen=True)
class CommandBinding:
    """Registry entry describing a keyboard shortcut and its behavior."""

    display: str
    keys: tuple[int, ...]
    handler: Callable[[], bool]
    show_in_help: bool = True


def default_candidates() -> list[str]:
    """Python keywords and builtins, used when no candidates file is given."""

    names = set(keyword.kwlist) | {n for n in dir(builtins) if not n.startswith("_")}
    return sorted(names)


def read_candidates(path: Path) -> list[str]:
    """Read one candidate per non-empty line of ``path``."""

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SystemExit(f"ERROR: cannot read candidates from {path}: {e}") from e
    return [line.strip() for line in text.splitlines() if line.strip()]


class App:
    """Main TUI application: pick values with the completing reader."""

    def __init__(
        self,
        stdscr: curses.window,
        settings: Settings,
        candidates: Sequence[str],
    ) -> None:
        """Wire the layout, the reader and the panel mode together.

        Args:
            stdscr: Curses standard screen object.
            settings (Settings): Runtime configuration from TOML and CLI flags.
            candidates: Values offered by the completing reader.
        """
        self.stdscr = stdscr
        self.settings = settings
        self.candidates = list(candidates)
        self.history: list[str] = []
        self.message = "Loaded."
        self.styles = init_styles()
        self.layout = CursesLayout(stdscr, self.styles, settings.line_height)
        self.reader = CompletingReader(
            self.layout, self.styles, count_format=settings.count_format
        )
        self.mode = PanelMode(self.reader, self.layout, settings)
        self.mode.enable()
        self.main_view = MainView(self.styles, settings)
        self.command_bindings: tuple[CommandBinding, ...] = (
            self._build_command_bindings()
        )
        self.command_map = self._build_command_map(self.command_bindings)
        self.layout.set_surface_parameter(MAIN_SURFACE, BUFFER, self)
        with contextlib.suppress(curses.error):
            self.stdscr.bkgd(" ", self.styles.get("background", 0))

    # ---------- UI helpers ----------
    def paint(
        self, window: curses.window, params: Mapping[str, object], width: int
    ) -> None:
        """Render the main area through the shared MainView renderer."""

        self.main_view.draw(
            window,
            self.command_bindings,
            self.history,
            self.message,
            self.mode.enabled,
        )

    def _build_command_bindings(self) -> tuple[CommandBinding, ...]:
        """Create the registry describing shortcuts, help text, and handlers."""

        def run(action: Callable[[], None]) -> Callable[[], bool]:
            def runner() -> bool:
                action()
                return False

            return runner

        return (
            CommandBinding(
                "o complete", (ord("o"), ord("O"), 10, 13), run(self.complete)
            ),
            CommandBinding("p toggle panel", (ord("p"), ord("P")), run(self.toggle)),
            CommandBinding(
                "c clear", (ord("c"), ord("C")), run(self.clear_history)
            ),
            CommandBinding("q quit", (ord("q"), ord("Q"), 3), lambda: True),
            CommandBinding(
                "resize", (curses.KEY_RESIZE,), run(self.layout.relayout), False
            ),
        )

    def _build_command_map(
        self, bindings: Sequence[CommandBinding]
    ) -> dict[int, Callable[[], bool]]:
        """Create a direct lookup table for key codes to handlers."""

        table: dict[int, Callable[[], bool]] = {}
        for binding in bindings:
            for key in binding.keys:
                if key in table:
                    raise ValueError(
                        f"Duplicate command key detected: {key} for '{binding.display}'"
                    )
                table[key] = binding.handler
        return table

    def dispatch_command(self, key: int) -> bool:
        """Dispatch a keypress via the registry. Returns True if the app should exit."""

        if key == -1:
            return False
        handler = self.command_map.get(key)
        return handler() if handler else False

    def match(self, text: str) -> list[str]:
        """Offer candidates containing ``text`` (case-insensitive)."""

        needle = text.lower()
        return [c for c in self.candidates if needle in c.lower()]

    # ---------- actions ----------
    def complete(self) -> None:
        """Run one completing read and record the chosen value."""

        try:
            value = self.reader.read("Pick: ", self.match)
        except EpisodeAbort:
            self.message = "Aborted."
            return
        if value is None:
            self.message = "Cancelled."
            return
        self.history.append(value)
        self.message = f"Selected {value}."

    def toggle(self) -> None:
        """Switch between panel and inline candidate rendering."""

        enabled = self.mode.toggle()
        self.message = "Panel mode on." if enabled else "Panel mode off."

    def clear_history(self) -> None:
        self.history.clear()
        self.message = "Cleared."

    # ---------- main loop ----------
    def run(self) -> None:
        """Run main event loop handling keyboard input and updating the UI."""
        with contextlib.suppress(curses.error):
            curses.curs_set(0)
        self.stdscr.nodelay(False)
        while True:
            self.layout.redraw()
            try:
                ch = self.stdscr.getch()
            except KeyboardInterrupt:
                ch = 3  # emulate Ctrl-C keypress
            if self.dispatch_command(ch):
                break


def main() -> None:
    """Parse command-line arguments and launch the TUI application."""
    ap = argparse.ArgumentParser(
        description="Completing reader that renders candidates into a panel"
    )
    ap.add_argument(
        "--settings",
        type=Path,
        default=DEFAULT_SETTINGS_PATH,
        metavar="PATH",
        help=f"Path to settings.toml (default: {DEFAULT_SETTINGS_PATH})",
    )
    ap.add_argument(
        "--placement",
        default=None,
        metavar="KIND[:SIZE]",
        help="Panel placement: "
        + ", ".join(kind.value for kind in PlacementKind)
        + " (e.g. side-left:0.3)",
    )
    ap.add_argument(
        "--show-input",
        action="store_true",
        help="Keep the input line visible while the panel is shown",
    )
    ap.add_argument(
        "--candidates",
        type=Path,
        default=None,
        metavar="PATH",
        help="File with one candidate per line (default: Python names)",
    )
    ap.add_argument(
        "--log-file",
        type=Path,
        default=None,
        metavar="PATH",
        help="Write debug logs to PATH",
    )
    args = ap.parse_args()

    if args.log_file is not None:
        logging.basicConfig(
            filename=args.log_file,
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    settings = load_settings(args.settings)
    if args.placement is not None:
        try:
            settings = replace(settings, placement=Placement.parse(args.placement))
        except ValueError as e:
            ap.error(str(e))
    if args.show_input:
        settings = replace(settings, hide_input=False)
    candidates = (
        read_candidates(args.candidates)
        if args.candidates is not None
        else default_candidates()
    )
    logger.debug("Starting with %s and %d candidates", settings, len(candidates))

    curses.wrapper(lambda stdscr: App(stdscr, settings, candidates).run())


if __name__ == "__main__":
    main()

"""Color and style helpers for the completion panel."""

from __future__ import annotations

import contextlib
import curses

CATPPUCCIN_MOCHA = {
    "rosewater": "#f5e0dc",
    "lavender": "#b4befe",
    "peach": "#fab387",
    "green": "#a6e3a1",
    "text": "#cdd6f4",
    "surface1": "#45475a",
    "panel_bg": "#313244",
    "input_bg": "#585b70",
    "cursor_bg": "#f38ba8",
    "cursor_fg": "#11111b",
    "base": "#1e1e2e",
}

PALETTE_BASE_INDEX = 16

# pair id -> (foreground, background) as (palette name, fallback color) tuples
COLOR_PAIRS = {
    1: (("rosewater", curses.COLOR_MAGENTA), ("base", curses.COLOR_BLACK)),
    2: (("lavender", curses.COLOR_CYAN), ("base", curses.COLOR_BLACK)),
    3: (("peach", curses.COLOR_YELLOW), ("base", curses.COLOR_BLACK)),
    4: (("text", curses.COLOR_WHITE), ("base", curses.COLOR_BLACK)),
    5: (("text", curses.COLOR_WHITE), ("surface1", curses.COLOR_BLUE)),
    6: (("text", curses.COLOR_WHITE), ("panel_bg", curses.COLOR_BLUE)),
    7: (("cursor_fg", curses.COLOR_BLACK), ("cursor_bg", curses.COLOR_MAGENTA)),
    8: (None, ("base", curses.COLOR_BLACK)),
    9: (("text", curses.COLOR_WHITE), ("input_bg", curses.COLOR_BLUE)),
    10: (("green", curses.COLOR_GREEN), ("panel_bg", curses.COLOR_BLUE)),
}

# style name -> (pair id, extra attributes)
PAIR_STYLES = {
    "title": (1, curses.A_BOLD),
    "help_dim": (2, curses.A_DIM),
    "help_key": (3, curses.A_BOLD),
    "help_sep": (2, curses.A_DIM),
    "status": (3, curses.A_BOLD),
    "history": (4, 0),
    "background": (8, 0),
    "input_line": (9, 0),
    "input_cursor": (7, curses.A_BOLD),
    "panel": (6, 0),
    "prompt": (6, curses.A_BOLD),
    "count": (10, 0),
    "candidate": (6, 0),
    "candidate_selected": (5, curses.A_BOLD),
}


def _hex_to_curses_rgb(code: str) -> tuple[int, int, int]:
    code = code.lstrip("#")
    channels = (int(code[i : i + 2], 16) for i in (0, 2, 4))
    r, g, b = (round(c / 255 * 1000) for c in channels)
    return r, g, b


def default_styles() -> dict[str, int]:
    """Return monochrome attributes usable before (or without) color support."""

    return {
        "title": curses.A_BOLD,
        "help_dim": curses.A_DIM,
        "help_key": curses.A_DIM | curses.A_BOLD,
        "help_sep": curses.A_DIM,
        "status": curses.A_DIM | curses.A_BOLD,
        "history": 0,
        "input_line": 0,
        "input_cursor": curses.A_REVERSE | curses.A_BOLD,
        "prompt": curses.A_BOLD,
        "count": curses.A_DIM,
        "candidate": 0,
        "candidate_selected": curses.A_REVERSE | curses.A_BOLD,
        "background": 0,
        "panel": 0,
    }


def _register_palette() -> dict[str, int]:
    """Define the Catppuccin colors; return name -> color id, or {} if unsupported."""

    if not curses.can_change_color():
        return {}
    if PALETTE_BASE_INDEX + len(CATPPUCCIN_MOCHA) > curses.COLORS:
        return {}
    assigned: dict[str, int] = {}
    for color_id, (name, code) in enumerate(
        CATPPUCCIN_MOCHA.items(), start=PALETTE_BASE_INDEX
    ):
        try:
            curses.init_color(color_id, *_hex_to_curses_rgb(code))
        except curses.error:
            return {}
        assigned[name] = color_id
    return assigned


def init_styles() -> dict[str, int]:
    """Return a dict of curses attribute styles (Catppuccin Mocha inspired)."""

    styles = default_styles()
    if not curses.has_colors():
        return styles
    try:
        curses.start_color()
        curses.use_default_colors()
    except curses.error:
        return styles

    palette = _register_palette()

    def resolve(entry: tuple[str, int] | None) -> int:
        if entry is None:
            return -1
        name, fallback = entry
        return palette.get(name, fallback)

    pairs: dict[int, int] = {}
    for pair_id, (fg, bg) in COLOR_PAIRS.items():
        with contextlib.suppress(curses.error):
            curses.init_pair(pair_id, resolve(fg), resolve(bg))
        pairs[pair_id] = curses.color_pair(pair_id)

    for name, (pair_id, extra) in PAIR_STYLES.items():
        styles[name] = pairs[pair_id] | extra
    return styles

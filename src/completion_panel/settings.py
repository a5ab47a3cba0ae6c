"""Runtime settings management for completion-panel."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
import tomllib

from completion_panel.placement import Placement

DEFAULT_SETTINGS_FILENAME = "settings.toml"
PACKAGE_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = PACKAGE_DIR.parent.parent
DEFAULT_SETTINGS_PATH = PROJECT_ROOT / DEFAULT_SETTINGS_FILENAME

DEFAULT_LINE_HEIGHT = 1
DEFAULT_COUNT_FORMAT = "{index}/{total} "


@dataclass(frozen=True)
class Settings:
    """Runtime settings loaded from settings.toml."""

    placement: Placement = Placement()
    hide_input: bool = True
    line_height: int = DEFAULT_LINE_HEIGHT
    count_format: str = DEFAULT_COUNT_FORMAT


def _require(path: Path, key: str, raw: object, kind: type) -> object:
    if isinstance(raw, bool) and kind is not bool:
        raise SystemExit(
            f"ERROR: value for '{key}' in {path} must be {kind.__name__}, got bool."
        )
    if not isinstance(raw, kind):
        raise SystemExit(
            f"ERROR: value for '{key}' in {path} must be {kind.__name__}, "
            f"got {type(raw)!r}."
        )
    return raw


def load_settings(path: Path) -> Settings:
    """Load runtime settings from TOML, falling back to defaults when missing."""

    base = Settings()
    if not path.exists():
        return base
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise SystemExit(f"ERROR: cannot parse settings at {path}: {e}") from e
    overrides: dict[str, object] = {}

    raw = data.get("placement")
    if raw is not None:
        text = str(_require(path, "placement", raw, str))
        try:
            overrides["placement"] = Placement.parse(text)
        except ValueError as e:
            raise SystemExit(f"ERROR: invalid placement in {path}: {e}") from e

    raw = data.get("hide_input")
    if raw is not None:
        overrides["hide_input"] = _require(path, "hide_input", raw, bool)

    raw = data.get("line_height")
    if raw is not None:
        line_height = _require(path, "line_height", raw, int)
        if not isinstance(line_height, int) or line_height < 1:
            raise SystemExit(f"ERROR: 'line_height' in {path} must be >= 1.")
        overrides["line_height"] = line_height

    raw = data.get("count_format")
    if raw is not None:
        count_format = str(_require(path, "count_format", raw, str))
        try:
            count_format.format(index=1, total=1)
        except (KeyError, IndexError, ValueError) as e:
            raise SystemExit(
                f"ERROR: invalid count_format in {path}: {e!r}"
            ) from e
        overrides["count_format"] = count_format

    return replace(base, **overrides)  # type: ignore[arg-type]

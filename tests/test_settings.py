"""Tests for loading settings.toml."""

import pytest

from completion_panel.placement import Placement, PlacementKind
from completion_panel.settings import DEFAULT_COUNT_FORMAT, Settings, load_settings


def test_missing_file_uses_defaults(tmp_path):
    assert load_settings(tmp_path / "settings.toml") == Settings()


def test_loads_all_fields(tmp_path):
    path = tmp_path / "settings.toml"
    path.write_text(
        'placement = "side-right:0.4"\n'
        "hide_input = false\n"
        "line_height = 16\n"
        'count_format = "[{index} of {total}] "\n',
        encoding="utf-8",
    )
    settings = load_settings(path)
    assert settings.placement == Placement(PlacementKind.SIDE_RIGHT, 0.4)
    assert settings.hide_input is False
    assert settings.line_height == 16
    assert settings.count_format == "[{index} of {total}] "


def test_partial_file_keeps_other_defaults(tmp_path):
    path = tmp_path / "settings.toml"
    path.write_text('placement = "reuse-window"\n', encoding="utf-8")
    settings = load_settings(path)
    assert settings.placement.kind is PlacementKind.REUSE_WINDOW
    assert settings.hide_input is True
    assert settings.count_format == DEFAULT_COUNT_FORMAT


@pytest.mark.parametrize(
    "body",
    [
        "placement = = broken",
        'placement = "nowhere"',
        "placement = 3",
        'hide_input = "yes"',
        "line_height = 0",
        "line_height = true",
        'count_format = "{missing}"',
    ],
)
def test_invalid_settings_exit(tmp_path, body):
    path = tmp_path / "settings.toml"
    path.write_text(body + "\n", encoding="utf-8")
    with pytest.raises(SystemExit, match="ERROR"):
        load_settings(path)

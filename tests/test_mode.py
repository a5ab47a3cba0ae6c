"""Tests for switching panel rendering on and off."""

import pytest

from completion_panel.errors import ContractViolation
from completion_panel.mode import PanelMode
from completion_panel.placement import Placement, PlacementKind
from completion_panel.settings import Settings


@pytest.fixture
def settings():
    return Settings(placement=Placement(PlacementKind.SIDE_LEFT, 0.3), hide_input=True)


@pytest.fixture
def mode(engine, layout, settings):
    return PanelMode(engine, layout, settings)


def test_starts_disabled(mode, engine):
    assert not mode.enabled
    assert engine.setup_hooks == []
    assert engine.provider is None


def test_enable_installs_hook_provider_and_fixed_size(mode, engine):
    mode.enable()
    assert mode.enabled
    assert len(engine.setup_hooks) == 1
    assert engine.provider is mode.lifecycle
    engine.resize()
    engine.native_resize.assert_not_called()


def test_enable_twice_installs_once(mode, engine):
    mode.enable()
    mode.enable()
    assert len(engine.setup_hooks) == 1


def test_disable_restores_engine(mode, engine):
    mode.enable()
    mode.disable()
    assert not mode.enabled
    assert engine.setup_hooks == []
    assert engine.provider is None
    assert engine.resize is engine.native_resize


def test_toggle(mode):
    assert mode.toggle() is True
    assert mode.toggle() is False
    assert mode.toggle() is True


def test_setup_hook_starts_session_from_settings(mode, engine, layout, settings):
    mode.enable()
    with layout.episode():
        engine.run_setup()
        session = mode.lifecycle.session
        assert session is not None
        assert session.surface.placement == settings.placement
        assert session.hide_input is True
        assert engine.provider.render_target() == session.surface.handle
    assert mode.lifecycle.session is None
    assert layout.live_panels() == []


def test_nested_setup_reuses_outer_session(mode, engine, layout):
    mode.enable()
    with layout.episode():
        engine.run_setup()
        outer = mode.lifecycle.session
        with layout.episode():
            engine.run_setup()
            assert mode.lifecycle.session is outer
        assert mode.lifecycle.session is outer
    assert len(layout.allocated) == 1
    assert layout.live_panels() == []


def test_setup_outside_episode_fails_fast(mode, engine):
    mode.enable()
    with pytest.raises(ContractViolation):
        engine.run_setup()


def test_disabled_mode_does_not_bind(mode, engine, layout):
    mode.enable()
    mode.disable()
    with layout.episode():
        engine.run_setup()
    assert layout.allocated == []

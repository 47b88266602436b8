"""Smoke tests for PodscopeApp running under Textual's test pilot.

These tests drive the real app with mocked cluster and remote clients:
key presses reach the dispatcher, task workers feed their messages back,
and quitting exits the app.
"""

from __future__ import annotations

from collections.abc import Callable

import pytest
from textual import events
from textual.pilot import Pilot

from podscope.constants.enums import ViewState
from podscope.core.dispatcher import Dispatcher
from podscope.ui.app import PodscopeApp, normalize_key

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def app(dispatcher_factory: Callable[..., Dispatcher]) -> PodscopeApp:
    return PodscopeApp(dispatcher_factory())


async def wait_for_view(pilot: Pilot, app: PodscopeApp, view: ViewState) -> None:
    """Pause until task workers have moved the app to ``view``."""
    for _ in range(50):
        if app.state.view is view:
            return
        await pilot.pause(0.02)
    assert app.state.view is view


# =============================================================================
# KEY NORMALIZATION TESTS
# =============================================================================


class TestNormalizeKey:
    """Test normalize_key."""

    def test_printable_character(self) -> None:
        assert normalize_key(events.Key("L", "L")) == "L"

    def test_space_uses_name(self) -> None:
        assert normalize_key(events.Key("space", " ")) == "space"

    def test_non_printable_uses_name(self) -> None:
        assert normalize_key(events.Key("enter", "\r")) == "enter"
        assert normalize_key(events.Key("down", None)) == "down"


# =============================================================================
# RUNTIME TESTS
# =============================================================================


class TestAppRuntime:
    """Test PodscopeApp key routing and task execution."""

    @pytest.mark.asyncio
    async def test_starts_on_config_select(self, app: PodscopeApp) -> None:
        """Test that several kubeconfigs open the selection view."""
        async with app.run_test() as pilot:
            await pilot.pause()
            assert app.state.view is ViewState.CONFIG_SELECT

    @pytest.mark.asyncio
    async def test_connect_and_open_pods(self, app: PodscopeApp) -> None:
        """Test that enter connects and a namespace opens the pods view."""
        async with app.run_test(size=(120, 40)) as pilot:
            await pilot.press("enter")
            await wait_for_view(pilot, app, ViewState.NAMESPACES)
            assert app.state.connected

            await pilot.press("enter")
            await wait_for_view(pilot, app, ViewState.PODS)
            for _ in range(50):
                if len(app.state.pods):
                    break
                await pilot.pause(0.02)
            assert [pod.name for pod in app.state.pods.items] == ["api-1", "web-7", "worker-3"]

    @pytest.mark.asyncio
    async def test_help_overlay_toggles(self, app: PodscopeApp) -> None:
        """Test that '?' shows and hides the help overlay."""
        async with app.run_test() as pilot:
            await pilot.press("?")
            await pilot.pause()
            assert app.state.modals.help.visible
            await pilot.press("?")
            await pilot.pause()
            assert not app.state.modals.help.visible

    @pytest.mark.asyncio
    async def test_q_quits(self, app: PodscopeApp) -> None:
        """Test that 'q' marks the state quitting and exits the app."""
        async with app.run_test() as pilot:
            await pilot.press("q")
            assert app.state.quitting

"""Tests for the periodic refresh scheduler."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from podscope.constants.enums import ConfirmAction, ViewState
from podscope.core.messages import RefreshTick
from podscope.core.refresh import RefreshScheduler
from podscope.models.core.resources import Pod
from podscope.models.state.app_state import AppState

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def scheduler() -> RefreshScheduler:
    return RefreshScheduler(interval=0.01)


@pytest.fixture
def state() -> AppState:
    state = AppState()
    state.cluster = MagicMock()
    state.view = ViewState.PODS
    return state


# =============================================================================
# Arming
# =============================================================================


class TestArm:
    """Tests for starting refresh chains."""

    @pytest.mark.asyncio
    async def test_arm_bumps_generation(self, scheduler: RefreshScheduler, state: AppState) -> None:
        first = await scheduler.arm(state, ViewState.PODS).run()
        second = await scheduler.arm(state, ViewState.PODS).run()
        assert isinstance(first, RefreshTick)
        assert isinstance(second, RefreshTick)
        assert (first.generation, second.generation) == (1, 2)
        assert state.refresh_generations[ViewState.PODS] == 2

    def test_views_have_independent_generations(self, scheduler: RefreshScheduler, state: AppState) -> None:
        scheduler.arm(state, ViewState.PODS)
        scheduler.arm(state, ViewState.PODS)
        scheduler.arm(state, ViewState.EVENTS)
        assert state.refresh_generations == {ViewState.PODS: 2, ViewState.EVENTS: 1}


# =============================================================================
# Ticks
# =============================================================================


class TestOnTick:
    """Tests for tick decisions."""

    def test_current_tick_in_view_fetches_and_rearms(
        self, scheduler: RefreshScheduler, state: AppState
    ) -> None:
        scheduler.arm(state, ViewState.PODS)
        decision = scheduler.on_tick(state, RefreshTick(ViewState.PODS, 1))
        assert decision.fetch
        assert decision.next_tick is not None

    @pytest.mark.asyncio
    async def test_mismatched_view_ticks_rearm_without_fetching(
        self, scheduler: RefreshScheduler, state: AppState
    ) -> None:
        tick = await scheduler.arm(state, ViewState.PODS).run()
        state.view = ViewState.DEPLOYMENTS

        fetches = 0
        rearms = 0
        for _ in range(4):
            decision = scheduler.on_tick(state, tick)
            fetches += decision.fetch
            assert decision.next_tick is not None
            rearms += 1
            tick = await decision.next_tick.run()

        assert fetches == 0
        assert rearms == 4

    def test_stale_generation_ends_the_chain(self, scheduler: RefreshScheduler, state: AppState) -> None:
        scheduler.arm(state, ViewState.PODS)
        scheduler.arm(state, ViewState.PODS)
        decision = scheduler.on_tick(state, RefreshTick(ViewState.PODS, 1))
        assert not decision.fetch
        assert decision.next_tick is None

    def test_disconnected_cluster_ends_the_chain(self, scheduler: RefreshScheduler, state: AppState) -> None:
        scheduler.arm(state, ViewState.PODS)
        state.cluster = None
        decision = scheduler.on_tick(state, RefreshTick(ViewState.PODS, 1))
        assert decision.next_tick is None

    def test_filter_being_edited_blocks_fetch(self, scheduler: RefreshScheduler, state: AppState) -> None:
        state.pods.set_items([Pod(name="web-7", namespace="default")])
        state.pods.handle_key("/")
        assert state.pods.editing_filter

        scheduler.arm(state, ViewState.PODS)
        decision = scheduler.on_tick(state, RefreshTick(ViewState.PODS, 1))

        assert not decision.fetch
        assert decision.next_tick is not None

    def test_visible_modal_blocks_fetch(self, scheduler: RefreshScheduler, state: AppState) -> None:
        state.modals.show(state.modals.confirm, ConfirmAction.DELETE_POD, "web-7")
        scheduler.arm(state, ViewState.PODS)
        decision = scheduler.on_tick(state, RefreshTick(ViewState.PODS, 1))
        assert not decision.fetch
        assert decision.next_tick is not None

    def test_events_follow_off_blocks_fetch(self, scheduler: RefreshScheduler, state: AppState) -> None:
        state.view = ViewState.EVENTS
        scheduler.arm(state, ViewState.EVENTS)
        assert not state.events.following
        assert not scheduler.on_tick(state, RefreshTick(ViewState.EVENTS, 1)).fetch

        state.events.toggle_following()
        assert scheduler.on_tick(state, RefreshTick(ViewState.EVENTS, 1)).fetch

"""Self-rescheduling refresh chains for the pods and events views.

Every entry into a refreshing view starts a new chain with a fresh
generation number. A tick from an older generation is dropped without
re-arming, so leaving and re-entering a view never leaves two chains alive.
A current tick always re-arms; it only asks for a fetch when its view is
showing and nothing blocks the refresh.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from podscope.constants.enums import ViewState
from podscope.constants.timeouts import REFRESH_INTERVAL
from podscope.core.messages import RefreshTick
from podscope.core.tasks import Task
from podscope.models.state.app_state import AppState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TickDecision:
    fetch: bool = False
    next_tick: Task | None = None


class RefreshScheduler:
    def __init__(self, interval: float = REFRESH_INTERVAL) -> None:
        self.interval = interval

    def arm(self, state: AppState, view: ViewState) -> Task:
        """Start a new chain for ``view``, superseding any running one."""
        generation = state.refresh_generations.get(view, 0) + 1
        state.refresh_generations[view] = generation
        return self._tick_task(view, generation)

    def _tick_task(self, view: ViewState, generation: int) -> Task:
        return Task.after(
            self.interval,
            RefreshTick(view=view, generation=generation),
            name=f"refresh:{view.value}",
        )

    @staticmethod
    def is_blocked(state: AppState, view: ViewState) -> bool:
        """True while a filter, a modal or (for events) follow-off holds the refresh."""
        if state.modals.any_visible:
            return True
        if view is ViewState.PODS:
            return state.pods.filter_active
        if view is ViewState.EVENTS:
            return state.events.list.filter_active or not state.events.following
        return False

    def on_tick(self, state: AppState, tick: RefreshTick) -> TickDecision:
        if state.refresh_generations.get(tick.view) != tick.generation:
            logger.debug("Dropping stale %s refresh tick", tick.view.value)
            return TickDecision()
        if state.cluster is None:
            return TickDecision()
        fetch = state.view is tick.view and not self.is_blocked(state, tick.view)
        return TickDecision(fetch=fetch, next_tick=self._tick_task(tick.view, tick.generation))

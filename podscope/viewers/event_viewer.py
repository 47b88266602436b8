"""Cluster events list with follow, warnings-only and kind filters."""

from __future__ import annotations

from podscope.constants.enums import EventKindFilter
from podscope.models.core.resources import Event
from podscope.viewers.list_model import ListModel


def _event_label(event: Event) -> str:
    return f"{event.object} {event.reason} {event.message}"


class EventViewer:
    """Holds every fetched event and exposes the filtered list."""

    def __init__(self) -> None:
        self.events: list[Event] = []
        self.following = False
        self.warnings_only = False
        self.kind = EventKindFilter.ALL
        self.list: ListModel[Event] = ListModel("Events", _event_label)

    def set_events(self, events: list[Event]) -> None:
        self.events = sorted(
            events,
            key=lambda event: event.last_seen_time.timestamp() if event.last_seen_time else 0.0,
            reverse=True,
        )
        self._apply()

    def toggle_following(self) -> bool:
        self.following = not self.following
        return self.following

    def toggle_warnings_only(self) -> bool:
        self.warnings_only = not self.warnings_only
        self._apply()
        return self.warnings_only

    def cycle_kind(self) -> EventKindFilter:
        self.kind = self.kind.next()
        self._apply()
        return self.kind

    @property
    def warning_count(self) -> int:
        return sum(1 for event in self.events if event.is_warning)

    def _apply(self) -> None:
        visible = self.events
        if self.warnings_only:
            visible = [event for event in visible if event.is_warning]
        if self.kind is not EventKindFilter.ALL:
            visible = [event for event in visible if event.object_kind == self.kind.value]
        self.list.set_items(visible)

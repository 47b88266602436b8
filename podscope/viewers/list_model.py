"""Cursor-driven list with an inline filter, one item type per list."""

from __future__ import annotations

from collections.abc import Callable
from typing import Generic, TypeVar

from podscope.keyboard.keys import (
    KEY_FILTER,
    KEYS_BOTTOM,
    KEYS_DOWN,
    KEYS_PAGE_DOWN,
    KEYS_PAGE_UP,
    KEYS_TOP,
    KEYS_UP,
)
from podscope.modals.base import TextField

T = TypeVar("T")


class ListModel(Generic[T]):
    """Selectable list of ``T`` with a ``/`` filter.

    While the filter is being edited every key goes to the filter field.
    Enter keeps the filter applied, escape clears it. ``filter_active`` is
    true in both the editing and the applied state.
    """

    def __init__(
        self,
        title: str,
        label: Callable[[T], str],
        *,
        page_size: int = 10,
    ) -> None:
        self.title = title
        self._label = label
        self.page_size = page_size
        self.items: list[T] = []
        self.cursor = 0
        self.filter = TextField(max_length=64)
        self.editing_filter = False

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def set_items(self, items: list[T]) -> None:
        """Replace items, keeping the cursor on the same label when present."""
        previous = self.selected
        self.items = list(items)
        if previous is not None:
            previous_label = self._label(previous)
            for index, item in enumerate(self.visible_items):
                if self._label(item) == previous_label:
                    self.cursor = index
                    return
        self._clamp()

    def clear(self) -> None:
        self.items = []
        self.cursor = 0
        self.clear_filter()

    @property
    def visible_items(self) -> list[T]:
        query = self.filter.value.lower()
        if not query:
            return self.items
        return [item for item in self.items if query in self._label(item).lower()]

    @property
    def selected(self) -> T | None:
        visible = self.visible_items
        if not visible:
            return None
        return visible[min(self.cursor, len(visible) - 1)]

    def label(self, item: T) -> str:
        return self._label(item)

    def __len__(self) -> int:
        return len(self.items)

    # ------------------------------------------------------------------
    # Filter
    # ------------------------------------------------------------------

    @property
    def filter_value(self) -> str:
        return self.filter.value

    @property
    def filter_applied(self) -> bool:
        return not self.editing_filter and bool(self.filter.value)

    @property
    def filter_active(self) -> bool:
        return self.editing_filter or bool(self.filter.value)

    def clear_filter(self) -> None:
        self.filter.reset()
        self.editing_filter = False
        self._clamp()

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    def handle_key(self, key: str) -> bool:
        """Apply a navigation or filter key; returns True when consumed."""
        if self.editing_filter:
            if key == "escape":
                self.clear_filter()
            elif key == "enter":
                self.editing_filter = False
            elif self.filter.handle_key(key):
                self.cursor = 0
            return True
        if key == KEY_FILTER:
            self.editing_filter = True
            return True
        if key == "escape" and self.filter.value:
            self.clear_filter()
            return True
        if key in KEYS_UP:
            self.cursor -= 1
        elif key in KEYS_DOWN:
            self.cursor += 1
        elif key in KEYS_TOP:
            self.cursor = 0
        elif key in KEYS_BOTTOM:
            self.cursor = len(self.visible_items) - 1
        elif key in KEYS_PAGE_UP:
            self.cursor -= self.page_size
        elif key in KEYS_PAGE_DOWN:
            self.cursor += self.page_size
        else:
            return False
        self._clamp()
        return True

    def _clamp(self) -> None:
        count = len(self.visible_items)
        self.cursor = 0 if count == 0 else max(0, min(self.cursor, count - 1))

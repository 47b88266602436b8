"""Live search prompt for log views."""

from __future__ import annotations

from rich.console import Group, RenderableType
from rich.text import Text

from podscope.constants.enums import ModalResult
from podscope.core.tasks import Task
from podscope.modals.base import PENDING, Modal, ModalOutcome, TextField


class SearchInput(Modal):
    """Search box whose query is applied on every keystroke.

    Edits return PENDING with the current query as value so the caller can
    re-highlight matches live. Enter keeps the query; escape discards it.
    """

    name = "search"
    title = "Search Logs"

    def __init__(self) -> None:
        super().__init__()
        self.field = TextField(max_length=128)
        self.match_count = 0

    @property
    def query(self) -> str:
        return self.field.value

    def show(self, query: str = "") -> Task:
        self.field.reset(query)
        self.match_count = 0
        return self._open()

    def handle_key(self, key: str) -> ModalOutcome:
        if key == "escape":
            return ModalOutcome(ModalResult.CANCELLED)
        if key == "enter":
            return ModalOutcome(ModalResult.CONFIRMED, self.query)
        if self.field.handle_key(key):
            return ModalOutcome(ModalResult.PENDING, self.query)
        return PENDING

    def hint(self) -> str:
        return "enter: keep • esc: clear • n/N: next/prev"

    def body(self) -> RenderableType:
        counter = f"{self.match_count} match{'es' if self.match_count != 1 else ''}"
        return Group(self.field.render(placeholder="search..."), Text(counter, style="dim"))

"""Pick which container of a multi-container pod to show logs for."""

from __future__ import annotations

from rich.console import RenderableType
from rich.text import Text

from podscope.constants.enums import ModalResult
from podscope.core.tasks import Task
from podscope.modals.base import PENDING, Modal, ModalOutcome


class ContainerSelector(Modal):
    name = "container-selector"
    title = "Select Container"
    width = 50

    def __init__(self) -> None:
        super().__init__()
        self.containers: list[str] = []
        self.cursor = 0

    def show(self, containers: list[str], current: str = "") -> Task:
        self.containers = list(containers)
        self.cursor = self.containers.index(current) if current in self.containers else 0
        return self._open()

    @property
    def highlighted(self) -> str:
        return self.containers[self.cursor] if self.containers else ""

    def handle_key(self, key: str) -> ModalOutcome:
        if key in ("escape", "c"):
            return ModalOutcome(ModalResult.CANCELLED)
        if key in ("up", "k"):
            self.cursor = max(0, self.cursor - 1)
        elif key in ("down", "j"):
            self.cursor = min(max(len(self.containers) - 1, 0), self.cursor + 1)
        elif key == "enter" and self.containers:
            return ModalOutcome(ModalResult.CONFIRMED, self.highlighted)
        return PENDING

    def hint(self) -> str:
        return "enter: select • esc/c: cancel"

    def body(self) -> RenderableType:
        text = Text()
        for index, name in enumerate(self.containers):
            if index:
                text.append("\n")
            if index == self.cursor:
                text.append(f"▸ {name}", style="bold cyan")
            else:
                text.append(f"  {name}")
        return text

"""Multi-select of pods for the aggregated log view."""

from __future__ import annotations

from rich.console import Group, RenderableType
from rich.text import Text

from podscope.constants.enums import ModalResult
from podscope.constants.values import ALL_PODS_LABEL, ALL_PODS_VALUE
from podscope.core.tasks import Task
from podscope.modals.base import PENDING, Modal, ModalOutcome, TextField


class PodMultiSelector(Modal):
    """Checklist of pods with an "All Pods" shortcut and type-to-filter.

    Space toggles the highlighted option. Enter confirms the checked pods,
    or the highlighted one when nothing is checked.
    """

    name = "multi-pod-selector"
    title = "Select Pods for Multi-Log"
    width = 60

    def __init__(self) -> None:
        super().__init__()
        self.pods: list[str] = []
        self.selected: set[str] = set()
        self.filter = TextField(max_length=64)
        self.cursor = 0

    def show(self, pods: list[str]) -> Task:
        self.pods = list(pods)
        self.selected = set()
        self.filter.reset()
        self.cursor = 0
        return self._open()

    @property
    def options(self) -> list[tuple[str, str]]:
        """Visible (value, label) pairs; "All Pods" is always first."""
        query = self.filter.value.lower()
        options = [(ALL_PODS_VALUE, ALL_PODS_LABEL)]
        options.extend((pod, pod) for pod in self.pods if query in pod.lower())
        return options

    def selected_pods(self, values: set[str] | None = None) -> list[str]:
        chosen = self.selected if values is None else values
        if ALL_PODS_VALUE in chosen:
            return list(self.pods)
        return [pod for pod in self.pods if pod in chosen]

    def handle_key(self, key: str) -> ModalOutcome:
        if key == "escape":
            return ModalOutcome(ModalResult.CANCELLED)
        options = self.options
        if key == "up":
            self.cursor = max(0, self.cursor - 1)
        elif key == "down":
            self.cursor = min(len(options) - 1, self.cursor + 1)
        elif key == "space":
            value = options[self.cursor][0]
            self.selected ^= {value}
        elif key == "enter":
            values = self.selected or {options[self.cursor][0]}
            pods = self.selected_pods(values)
            if not pods:
                return PENDING
            return ModalOutcome(ModalResult.CONFIRMED, pods)
        elif self.filter.handle_key(key):
            self.cursor = 0
        return PENDING

    def hint(self) -> str:
        return "space: toggle • enter: open • type: filter • esc: cancel"

    def body(self) -> RenderableType:
        lines = Text()
        for index, (value, label) in enumerate(self.options):
            if index:
                lines.append("\n")
            mark = "[x]" if value in self.selected else "[ ]"
            style = "bold cyan" if index == self.cursor else ""
            lines.append(f"{'▸' if index == self.cursor else ' '} {mark} {label}", style=style)
        parts: list[RenderableType] = []
        if self.filter.value:
            parts.append(Text(f"filter: {self.filter.value}", style="yellow"))
        parts.append(lines)
        return Group(*parts)

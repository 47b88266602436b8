"""Yes/no confirmation for destructive pod and deployment actions."""

from __future__ import annotations

from dataclasses import dataclass

from rich.console import Group, RenderableType
from rich.text import Text

from podscope.constants.enums import ConfirmAction, ModalResult
from podscope.core.tasks import Task
from podscope.modals.base import PENDING, Modal, ModalOutcome

_COPY: dict[ConfirmAction, tuple[str, str]] = {
    ConfirmAction.DELETE_POD: (
        "Delete Pod",
        "Are you sure you want to delete pod '{target}'?",
    ),
    ConfirmAction.RESTART_POD: (
        "Restart Pod",
        "Are you sure you want to restart pod '{target}'?\n"
        "(This will delete the pod; the controller will recreate it)",
    ),
    ConfirmAction.DELETE_DEPLOYMENT: (
        "Delete Deployment",
        "Are you sure you want to delete deployment '{target}'?\n"
        "(All associated pods will be terminated)",
    ),
    ConfirmAction.RESTART_DEPLOYMENT: (
        "Restart Deployment",
        "Are you sure you want to restart deployment '{target}'?\n"
        "(This triggers a rolling restart of all pods)",
    ),
}


@dataclass(frozen=True)
class ConfirmRequest:
    action: ConfirmAction
    target: str


class ConfirmDialog(Modal):
    """Confirmation dialog.

    ``y``/``Y`` confirm and ``n``/``N``/escape cancel immediately, whatever
    button is highlighted. Left/right/tab move the highlight and enter
    submits it; the highlight starts on "No".
    """

    name = "confirm"
    width = 60

    def __init__(self) -> None:
        super().__init__()
        self.action: ConfirmAction | None = None
        self.target = ""
        self.yes_selected = False

    @property
    def title(self) -> str:  # type: ignore[override]
        if self.action is None:
            return "Confirm"
        return _COPY[self.action][0]

    @property
    def message(self) -> str:
        if self.action is None:
            return "Are you sure?"
        return _COPY[self.action][1].format(target=self.target)

    def show(self, action: ConfirmAction, target: str) -> Task:
        self.action = action
        self.target = target
        self.yes_selected = False
        return self._open()

    def hide(self) -> None:
        super().hide()
        self.action = None
        self.target = ""

    def _request(self) -> ConfirmRequest:
        assert self.action is not None
        return ConfirmRequest(self.action, self.target)

    def handle_key(self, key: str) -> ModalOutcome:
        if key in ("y", "Y"):
            return ModalOutcome(ModalResult.CONFIRMED, self._request())
        if key in ("n", "N", "escape"):
            return ModalOutcome(ModalResult.CANCELLED)
        if key in ("left", "right", "tab", "shift+tab", "h", "l"):
            self.yes_selected = not self.yes_selected
            return PENDING
        if key == "enter":
            if self.yes_selected:
                return ModalOutcome(ModalResult.CONFIRMED, self._request())
            return ModalOutcome(ModalResult.CANCELLED)
        return PENDING

    def hint(self) -> str:
        return "y: confirm • n/esc: cancel"

    def body(self) -> RenderableType:
        yes_style = "bold black on red" if self.yes_selected else "dim"
        no_style = "dim" if self.yes_selected else "bold black on cyan"
        buttons = Text.assemble(("  Yes  ", yes_style), "   ", ("  No  ", no_style), justify="center")
        return Group(Text(self.message, justify="center"), Text(""), buttons)

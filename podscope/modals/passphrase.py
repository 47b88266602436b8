"""Masked passphrase prompt for encrypted SSH keys."""

from __future__ import annotations

from rich.console import Group, RenderableType
from rich.text import Text

from podscope.constants.enums import ModalResult
from podscope.core.tasks import Task
from podscope.modals.base import PENDING, Modal, ModalOutcome, TextField


class PassphraseInput(Modal):
    name = "passphrase"
    title = "SSH Passphrase Required"

    def __init__(self) -> None:
        super().__init__()
        self.host_name = ""
        self.field = TextField(masked=True)

    def show(self, host_name: str) -> Task:
        self.host_name = host_name
        self.field.reset()
        return self._open()

    def hide(self) -> None:
        super().hide()
        self.field.reset()

    def handle_key(self, key: str) -> ModalOutcome:
        if key == "escape":
            return ModalOutcome(ModalResult.CANCELLED)
        if key == "enter":
            return ModalOutcome(ModalResult.CONFIRMED, self.field.value)
        self.field.handle_key(key)
        return PENDING

    def body(self) -> RenderableType:
        return Group(
            Text(f"Host: {self.host_name}", style="dim"),
            Text(""),
            self.field.render(placeholder="Enter passphrase..."),
        )

"""Key reference overlay."""

from __future__ import annotations

from rich.console import RenderableType
from rich.table import Table

from podscope.constants.enums import ModalResult
from podscope.core.tasks import Task
from podscope.keyboard.keys import HELP_SECTIONS
from podscope.modals.base import PENDING, Modal, ModalOutcome


class HelpModal(Modal):
    name = "help"
    title = "Keys"
    width = 64

    def show(self) -> Task:
        return self._open()

    def handle_key(self, key: str) -> ModalOutcome:
        if key in ("?", "escape", "q", "enter"):
            return ModalOutcome(ModalResult.CANCELLED)
        return PENDING

    def hint(self) -> str:
        return "?/esc: close"

    def body(self) -> RenderableType:
        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold cyan", no_wrap=True)
        table.add_column()
        for index, (section, entries) in enumerate(HELP_SECTIONS):
            if index:
                table.add_row("", "")
            table.add_row(f"[bold]{section}[/bold]", "")
            for key, description in entries:
                table.add_row(key, description)
        return table

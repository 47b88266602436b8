"""Modal overlay contract shared by every dialog."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from rich.console import RenderableType
from rich.panel import Panel
from rich.text import Text

from podscope.constants.enums import ModalResult
from podscope.core.messages import KeyPressed, Message, ModalOpened
from podscope.core.tasks import Task


@dataclass
class ModalOutcome:
    """Result of routing one message to a visible modal."""

    result: ModalResult = ModalResult.PENDING
    value: Any = None
    task: Task | None = None

    @property
    def finished(self) -> bool:
        return self.result is not ModalResult.PENDING


PENDING = ModalOutcome()


class Modal:
    """Transient form that captures every input message while visible.

    Subclasses implement ``show`` (resetting their form state and calling
    ``_open``) and ``handle_key``. The dispatcher hides a modal as soon as
    ``update`` reports CONFIRMED or CANCELLED.
    """

    name: ClassVar[str] = "modal"
    title: ClassVar[str] = ""
    width: ClassVar[int] = 56

    def __init__(self) -> None:
        self._visible = False

    @property
    def visible(self) -> bool:
        return self._visible

    def _open(self) -> Task:
        self._visible = True
        return Task.of(ModalOpened(self.name), name=f"modal:{self.name}")

    def hide(self) -> None:
        self._visible = False

    def update(self, message: Message) -> ModalOutcome:
        if not self._visible or not isinstance(message, KeyPressed):
            return PENDING
        return self.handle_key(message.key)

    def handle_key(self, key: str) -> ModalOutcome:
        raise NotImplementedError

    def body(self) -> RenderableType:
        return Text("")

    def hint(self) -> str:
        return "enter: confirm • esc: cancel"

    def render(self) -> RenderableType:
        return Panel(
            self.body(),
            title=f"[bold]{self.title}[/bold]" if self.title else None,
            subtitle=f"[dim]{self.hint()}[/dim]",
            border_style="cyan",
            width=self.width,
            padding=(1, 2),
        )


class TextField:
    """Single-line editable value driven by normalized key names."""

    def __init__(self, value: str = "", *, masked: bool = False, max_length: int = 256) -> None:
        self.value = value
        self.masked = masked
        self.max_length = max_length

    def reset(self, value: str = "") -> None:
        self.value = value

    def handle_key(self, key: str) -> bool:
        """Apply an editing key; returns False when the key is not an edit."""
        if key == "backspace":
            self.value = self.value[:-1]
            return True
        if key == "ctrl+u":
            self.value = ""
            return True
        char = " " if key == "space" else key
        if len(char) == 1 and char.isprintable():
            if len(self.value) < self.max_length:
                self.value += char
            return True
        return False

    @property
    def display(self) -> str:
        return "•" * len(self.value) if self.masked else self.value

    def render(self, placeholder: str = "") -> Text:
        text = Text("> ", style="bold cyan")
        if self.value:
            text.append(self.display)
        else:
            text.append(placeholder, style="dim")
        text.append("█", style="cyan")
        return text

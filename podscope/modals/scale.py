"""Replica count input for scaling a deployment."""

from __future__ import annotations

from dataclasses import dataclass

from rich.console import Group, RenderableType
from rich.text import Text

from podscope.constants.enums import ModalResult
from podscope.constants.values import SCALE_MAX_REPLICAS, SCALE_MIN_REPLICAS
from podscope.core.tasks import Task
from podscope.modals.base import PENDING, Modal, ModalOutcome, TextField


@dataclass(frozen=True)
class ScaleRequest:
    deployment: str
    replicas: int


def validate_replicas(raw: str) -> int:
    """Parse a replica count, raising ValueError with a user-facing message."""
    try:
        value = int(raw.strip())
    except ValueError:
        raise ValueError("invalid number") from None
    if value < SCALE_MIN_REPLICAS:
        raise ValueError(f"must be >= {SCALE_MIN_REPLICAS}")
    if value > SCALE_MAX_REPLICAS:
        raise ValueError(f"max is {SCALE_MAX_REPLICAS}")
    return value


class ScaleDialog(Modal):
    name = "scale"
    title = "Scale Deployment"

    def __init__(self) -> None:
        super().__init__()
        self.deployment = ""
        self.current = 0
        self.field = TextField(max_length=6)
        self.error = ""

    def show(self, deployment: str, current: int) -> Task:
        self.deployment = deployment
        self.current = current
        self.field.reset(str(current))
        self.error = ""
        return self._open()

    def handle_key(self, key: str) -> ModalOutcome:
        if key == "escape":
            return ModalOutcome(ModalResult.CANCELLED)
        if key == "enter":
            try:
                replicas = validate_replicas(self.field.value)
            except ValueError as exc:
                self.error = str(exc)
                return PENDING
            return ModalOutcome(ModalResult.CONFIRMED, ScaleRequest(self.deployment, replicas))
        if self.field.handle_key(key):
            self.error = ""
        return PENDING

    def body(self) -> RenderableType:
        parts: list[RenderableType] = [
            Text(f"{self.deployment} (current: {self.current})", style="dim"),
            Text(""),
            self.field.render(placeholder="0"),
        ]
        if self.error:
            parts.append(Text(self.error, style="red"))
        return Group(*parts)

"""Deferred operations that resolve to exactly one message."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

from podscope.core.messages import Message


class Task:
    """A named coroutine factory producing one Message when run.

    Tasks never touch application state. The runtime executes them
    concurrently and feeds the resulting message back to the dispatcher.
    """

    __slots__ = ("_factory", "name")

    def __init__(self, factory: Callable[[], Awaitable[Message]], name: str = "task") -> None:
        self._factory = factory
        self.name = name

    async def run(self) -> Message:
        return await self._factory()

    @classmethod
    def of(cls, message: Message, name: str | None = None) -> Task:
        """Task that resolves immediately to ``message``."""

        async def _immediate() -> Message:
            return message

        return cls(_immediate, name or type(message).__name__)

    @classmethod
    def after(cls, delay: float, message: Message, name: str | None = None) -> Task:
        """Timer task that resolves to ``message`` once ``delay`` seconds pass."""

        async def _timer() -> Message:
            await asyncio.sleep(delay)
            return message

        return cls(_timer, name or f"timer:{type(message).__name__}")

    def __repr__(self) -> str:
        return f"Task({self.name!r})"

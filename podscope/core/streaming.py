"""Log streaming engine.

A stream session pairs one producer coroutine (reading from kubectl or a
remote container runtime) with a bounded ``LineQueue``. The dispatcher never
reads the queue directly: it receives one ``LogLine`` per "next line" task and
asks the session for the following task, so the consumer never polls and the
producer is held back by the queue bound instead of dropping lines.

``LogStreamer`` owns at most one session (pod logs, remote container logs).
``MultiSourceStream`` owns one session per source, all children of one
``CancelScope`` so a single ``stop()`` cancels every producer.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import Awaitable, Callable, Iterator
from enum import Enum

from podscope.constants.enums import StreamChannel
from podscope.constants.values import (
    LOG_QUEUE_CAPACITY,
    MULTI_LOG_TAIL_LINES,
    RESTART_TAIL_LINES,
)
from podscope.core.messages import LogLine, LogStreamEnded, Message
from podscope.core.tasks import Task

logger = logging.getLogger(__name__)


class StreamCancelled(Exception):
    """Terminal error recorded on a queue whose session was stopped on purpose."""

    def __init__(self, message: str = "stream cancelled") -> None:
        super().__init__(message)


class QueueClosedError(Exception):
    """Raised to a producer that tries to put into a closed queue."""


# ============================================================================
# Cancellation
# ============================================================================


class CancelScope:
    """Cooperative cancellation flag shared by a producer and its owner.

    Cancelling a scope runs its callbacks, wakes ``wait()`` and cancels every
    child scope. Cancelling twice is a no-op.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._event = asyncio.Event()
        self._children: list[CancelScope] = []
        self._callbacks: list[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def child(self) -> CancelScope:
        scope = CancelScope()
        if self._cancelled:
            scope.cancel()
        else:
            self._children.append(scope)
        return scope

    def add_callback(self, callback: Callable[[], None]) -> None:
        if self._cancelled:
            callback()
        else:
            self._callbacks.append(callback)

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        self._event.set()
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()
        children, self._children = self._children, []
        for child in children:
            child.cancel()

    async def wait(self) -> None:
        await self._event.wait()


# ============================================================================
# Bounded queue
# ============================================================================


class LineQueue:
    """Bounded single-producer single-consumer queue with a terminal error.

    ``close`` is first-wins: the error recorded by the first close is the one
    the consumer sees once the remaining lines are drained.
    """

    def __init__(self, capacity: int = LOG_QUEUE_CAPACITY) -> None:
        self._queue: asyncio.Queue[str] = asyncio.Queue(maxsize=capacity)
        self._closed = asyncio.Event()
        self.error: BaseException | None = None

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    @property
    def capacity(self) -> int:
        return self._queue.maxsize

    def qsize(self) -> int:
        return self._queue.qsize()

    def close(self, error: BaseException | None = None) -> None:
        if self._closed.is_set():
            return
        self.error = error
        self._closed.set()

    async def put(self, line: str) -> None:
        """Enqueue ``line``, suspending while the queue is full."""
        if self.closed:
            raise QueueClosedError
        if not self._queue.full():
            self._queue.put_nowait(line)
            return
        put_task = asyncio.ensure_future(self._queue.put(line))
        closed_task = asyncio.ensure_future(self._closed.wait())
        try:
            await asyncio.wait({put_task, closed_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for pending in (put_task, closed_task):
                if not pending.done():
                    pending.cancel()
        if not (put_task.done() and not put_task.cancelled()):
            raise QueueClosedError

    async def get(self) -> str | None:
        """Return the next line, or None once closed and drained."""
        if not self._queue.empty():
            return self._queue.get_nowait()
        if self.closed:
            return None
        get_task = asyncio.ensure_future(self._queue.get())
        closed_task = asyncio.ensure_future(self._closed.wait())
        try:
            await asyncio.wait({get_task, closed_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for pending in (get_task, closed_task):
                if not pending.done():
                    pending.cancel()
        if get_task.done() and not get_task.cancelled():
            return get_task.result()
        if not self._queue.empty():
            return self._queue.get_nowait()
        return None


# Producer contract: read lines into the queue until the source ends,
# returning early once the scope is cancelled.
Producer = Callable[[LineQueue, CancelScope], Awaitable[None]]
ProducerFactory = Callable[[int], Producer]


# ============================================================================
# Session
# ============================================================================


class StreamSession:
    """One producer feeding one bounded queue under one cancel scope."""

    def __init__(
        self,
        source_key: str,
        producer: Producer,
        *,
        channel: StreamChannel,
        session_id: int,
        scope: CancelScope | None = None,
        capacity: int = LOG_QUEUE_CAPACITY,
    ) -> None:
        self.source_key = source_key
        self.channel = channel
        self.session_id = session_id
        self.scope = scope or CancelScope()
        self.queue = LineQueue(capacity)
        self.active = True
        self._producer = producer
        self._task: asyncio.Task[None] | None = None
        self.scope.add_callback(self._on_cancelled)

    @property
    def started(self) -> bool:
        return self._task is not None

    def ensure_started(self) -> None:
        """Launch the producer on the running loop the first time it is needed."""
        if self._task is not None or self.queue.closed:
            return
        self._task = asyncio.get_running_loop().create_task(
            self._run_producer(), name=f"stream:{self.source_key}"
        )

    async def _run_producer(self) -> None:
        try:
            await self._producer(self.queue, self.scope)
        except asyncio.CancelledError:
            self.queue.close(StreamCancelled())
            raise
        except QueueClosedError:
            logger.debug("Stream %s: queue closed under producer", self.source_key)
        except Exception as exc:
            logger.warning("Stream %s failed: %s", self.source_key, exc)
            self.queue.close(exc)
        else:
            self.queue.close(StreamCancelled() if self.scope.cancelled else None)

    def cancel(self) -> None:
        """Stop the producer and close the queue. Safe to call repeatedly."""
        self.scope.cancel()

    def _on_cancelled(self) -> None:
        self.active = False
        self.queue.close(StreamCancelled())
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def next_message(self) -> Message:
        self.ensure_started()
        line = await self.queue.get()
        if line is None:
            return LogStreamEnded(
                channel=self.channel,
                session_id=self.session_id,
                source_key=self.source_key,
                error=self.queue.error,
            )
        return LogLine(
            channel=self.channel,
            session_id=self.session_id,
            source_key=self.source_key,
            line=line,
        )

    def next_line_task(self) -> Task:
        return Task(self.next_message, name=f"next-line:{self.source_key}")


class StreamEnd(Enum):
    """How a stream-ended message was resolved."""

    STALE = "stale"
    CANCELLED = "cancelled"
    RESTARTED = "restarted"
    FINISHED = "finished"


_session_ids: Iterator[int] = itertools.count(1)


def _next_session_id() -> int:
    return next(_session_ids)


# ============================================================================
# Single source
# ============================================================================


class LogStreamer:
    """Owns the single stream session behind a pod or remote log view."""

    def __init__(self, channel: StreamChannel, capacity: int = LOG_QUEUE_CAPACITY) -> None:
        self.channel = channel
        self.capacity = capacity
        self.session: StreamSession | None = None
        self._factory: ProducerFactory | None = None

    @property
    def active(self) -> bool:
        return self.session is not None and self.session.active

    def is_current(self, session_id: int) -> bool:
        return self.session is not None and self.session.session_id == session_id

    def start(self, source_key: str, factory: ProducerFactory, tail_lines: int) -> Task:
        """Replace any running session and return its first next-line task."""
        self.stop()
        self._factory = factory
        self.session = StreamSession(
            source_key,
            factory(tail_lines),
            channel=self.channel,
            session_id=_next_session_id(),
            capacity=self.capacity,
        )
        logger.debug("Started %s stream %s (tail=%d)", self.channel.value, source_key, tail_lines)
        return self.session.next_line_task()

    def stop(self) -> None:
        if self.session is None:
            return
        logger.debug("Stopping %s stream %s", self.channel.value, self.session.source_key)
        self.session.cancel()
        self.session = None

    def next_line(self, message: LogLine) -> Task | None:
        if not self.is_current(message.session_id):
            return None
        assert self.session is not None
        return self.session.next_line_task()

    def on_ended(self, message: LogStreamEnded, *, follow: bool) -> tuple[StreamEnd, Task | None]:
        """Resolve a stream end: ignore stale ones, restart while following."""
        if not self.is_current(message.session_id):
            return StreamEnd.STALE, None
        assert self.session is not None
        source_key = self.session.source_key
        self.session.active = False
        self.session = None
        if isinstance(message.error, StreamCancelled):
            return StreamEnd.CANCELLED, None
        if follow and self._factory is not None:
            logger.debug("Stream %s ended, restarting", source_key)
            return StreamEnd.RESTARTED, self.start(source_key, self._factory, RESTART_TAIL_LINES)
        return StreamEnd.FINISHED, None


# ============================================================================
# Multi source
# ============================================================================


class MultiSourceStream:
    """Concurrent sessions, one per source, under a shared parent scope."""

    def __init__(self, capacity: int = LOG_QUEUE_CAPACITY) -> None:
        self.capacity = capacity
        self.scope: CancelScope | None = None
        self.sessions: dict[str, StreamSession] = {}
        self.active = False
        self.active_count = 0
        self._factories: dict[str, ProducerFactory] = {}

    def start(
        self,
        factories: dict[str, ProducerFactory],
        tail_lines: int = MULTI_LOG_TAIL_LINES,
    ) -> list[Task]:
        self.stop()
        self.scope = CancelScope()
        self._factories = dict(factories)
        self.active = bool(factories)
        self.active_count = len(factories)
        logger.info("Starting multi-source stream for %d source(s)", len(factories))
        return [self._start_source(source_key, tail_lines) for source_key in factories]

    def _start_source(self, source_key: str, tail_lines: int) -> Task:
        assert self.scope is not None
        session = StreamSession(
            source_key,
            self._factories[source_key](tail_lines),
            channel=StreamChannel.MULTI,
            session_id=_next_session_id(),
            scope=self.scope.child(),
            capacity=self.capacity,
        )
        self.sessions[source_key] = session
        return session.next_line_task()

    def stop(self) -> None:
        if self.scope is None:
            return
        self.scope.cancel()
        self.scope = None
        self.sessions = {}
        self._factories = {}
        self.active = False
        self.active_count = 0

    def _current(self, source_key: str, session_id: int) -> StreamSession | None:
        session = self.sessions.get(source_key)
        if session is None or session.session_id != session_id:
            return None
        return session

    def next_line(self, message: LogLine) -> Task | None:
        session = self._current(message.source_key, message.session_id)
        if session is None:
            return None
        return session.next_line_task()

    def on_ended(self, message: LogStreamEnded, *, in_view: bool) -> tuple[StreamEnd, Task | None]:
        """Restart a source that ended on its own while the view is showing."""
        session = self._current(message.source_key, message.session_id)
        if session is None:
            return StreamEnd.STALE, None
        del self.sessions[message.source_key]
        session.active = False
        if isinstance(message.error, StreamCancelled):
            self._drained()
            return StreamEnd.CANCELLED, None
        if self.active and in_view:
            logger.debug("Multi-source stream %s ended, restarting", message.source_key)
            return StreamEnd.RESTARTED, self._start_source(message.source_key, RESTART_TAIL_LINES)
        self._drained()
        return StreamEnd.FINISHED, None

    def _drained(self) -> None:
        self.active_count -= 1
        if self.active_count <= 0:
            self.active_count = 0
            self.active = False

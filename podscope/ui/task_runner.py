"""TaskRunnerMixin - runs dispatcher tasks as Textual workers.

Each task becomes one async worker in the ``tasks`` group. A worker that
finishes successfully hands its single result message back through
``dispatch_message``; cancelled and failed workers are only logged, since
tasks report their own failures inside the message they return.
"""

from __future__ import annotations

import logging
import time

from textual.worker import Worker, WorkerState

from podscope.core.messages import Message
from podscope.core.tasks import Task

logger = logging.getLogger(__name__)

TASK_GROUP = "tasks"


class TaskRunnerMixin:
    """Mixin for a Textual App that executes dispatcher tasks.

    The host class must provide ``dispatch_message(message)``.
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._task_started: dict[Worker, float] = {}

    def run_tasks(self, tasks: list[Task]) -> None:
        for task in tasks:
            self.start_task(task)

    def start_task(self, task: Task) -> Worker[Message]:
        """Start ``task`` on the event loop; errors never crash the app."""
        worker = self.run_worker(  # type: ignore[attr-defined]
            task.run(),
            name=task.name,
            group=TASK_GROUP,
            exclusive=False,
            exit_on_error=False,
        )
        self._task_started[worker] = time.monotonic()
        return worker

    def cancel_tasks(self) -> None:
        self.workers.cancel_group(self, TASK_GROUP)  # type: ignore[attr-defined]

    def dispatch_message(self, message: Message) -> None:
        raise NotImplementedError

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        """Feed completed task results back to the dispatcher."""
        worker = event.worker
        if worker.group != TASK_GROUP:
            return
        duration_ms = 0.0
        if event.state in (WorkerState.SUCCESS, WorkerState.CANCELLED, WorkerState.ERROR):
            started = self._task_started.pop(worker, None)
            if started is not None:
                duration_ms = (time.monotonic() - started) * 1000

        if event.state == WorkerState.CANCELLED:
            logger.debug(f"Task '{worker.name}' was cancelled ({duration_ms:.2f}ms)")
        elif event.state == WorkerState.ERROR:
            logger.error(f"Task '{worker.name}' error: {worker.error} ({duration_ms:.2f}ms)")
        elif event.state == WorkerState.SUCCESS:
            result = worker.result
            if isinstance(result, Message):
                self.dispatch_message(result)
            else:
                logger.warning(f"Task '{worker.name}' returned {type(result).__name__}, not a message")


__all__ = [
    "TASK_GROUP",
    "TaskRunnerMixin",
]

"""Main application class for the podscope TUI."""

from __future__ import annotations

import logging

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Static

from podscope.constants.values import APP_TITLE
from podscope.core.dispatcher import Dispatcher
from podscope.core.messages import KeyPressed, Message
from podscope.keyboard.app import APP_BINDINGS
from podscope.models.state.app_state import AppState
from podscope.ui.render import render_content, render_footer, render_sidebar, render_toast
from podscope.ui.task_runner import TaskRunnerMixin

logger = logging.getLogger(__name__)


def normalize_key(event: events.Key) -> str:
    """Printable characters map to themselves, everything else to the key name."""
    if event.is_printable and event.character and event.character != " ":
        return event.character
    return event.key


class PodscopeApp(TaskRunnerMixin, App[None]):
    """Terminal UI driving a single ``Dispatcher``.

    Every key press becomes a ``KeyPressed`` message. Tasks returned by the
    dispatcher run as workers and their result messages come back through
    ``dispatch_message``; the screen is re-rendered after each one.
    """

    TITLE = APP_TITLE
    BINDINGS: list[Binding] = APP_BINDINGS

    DEFAULT_CSS = """
    #body {
        height: 1fr;
    }

    #sidebar {
        width: 28;
        padding: 1 1;
        border-right: solid $primary;
    }

    #main {
        width: 1fr;
    }

    #content {
        height: 1fr;
        padding: 0 1;
    }

    #toast {
        height: auto;
        padding: 0 1;
    }

    #footer {
        height: 1;
        padding: 0 1;
        background: $surface;
    }
    """

    def __init__(self, dispatcher: Dispatcher, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.dispatcher = dispatcher

    @property
    def state(self) -> AppState:
        return self.dispatcher.state

    def compose(self) -> ComposeResult:
        with Horizontal(id="body"):
            yield Static(id="sidebar")
            with Vertical(id="main"):
                yield Static(id="content")
                yield Static(id="toast")
        yield Static(id="footer")

    def on_mount(self) -> None:
        """Start the dispatcher and draw the first frame."""
        logger.info("Starting %s", APP_TITLE)
        self.run_tasks(self.dispatcher.start())
        self.refresh_view()

    def on_resize(self, _: events.Resize) -> None:
        self.refresh_view()

    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        self.action_dispatch_key(normalize_key(event))

    def action_dispatch_key(self, key: str) -> None:
        self.dispatch_message(KeyPressed(key))

    def dispatch_message(self, message: Message) -> None:
        tasks = self.dispatcher.handle(message)
        if self.state.quitting:
            self.cancel_tasks()
            self.exit()
            return
        self.run_tasks(tasks)
        self.refresh_view()

    def refresh_view(self) -> None:
        state = self.state
        content = self.query_one("#content", Static)
        height = content.size.height or self.size.height - 3
        self.query_one("#sidebar", Static).update(render_sidebar(state))
        content.update(render_content(state, height))
        self.query_one("#toast", Static).update(render_toast(state))
        self.query_one("#footer", Static).update(render_footer(state))


__all__ = [
    "PodscopeApp",
    "normalize_key",
]

"""App-level keyboard bindings.

This module contains Textual Binding objects for the few bindings the
Textual app handles itself. Every other key is forwarded to the dispatcher.
"""

from textual.binding import Binding

# ============================================================================
# Textual Binding objects for app-level bindings
# ============================================================================

APP_BINDINGS: list[Binding] = [
    Binding("ctrl+c", "dispatch_key('ctrl+c')", "Quit", show=False, priority=True),
    Binding("ctrl+q", "dispatch_key('ctrl+c')", "Quit", show=False, priority=True),
]

__all__ = [
    "APP_BINDINGS",
]

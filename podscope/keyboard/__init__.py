"""Keyboard bindings and key names.

- app.py: Textual bindings handled by the app itself
- keys.py: key names routed by the dispatcher, footer hints, help sections
"""

from podscope.keyboard.app import APP_BINDINGS
from podscope.keyboard.keys import FOOTER_HINTS, HELP_SECTIONS

__all__ = [
    "APP_BINDINGS",
    "FOOTER_HINTS",
    "HELP_SECTIONS",
]

"""Constants module for podscope.

Centralized constants organized by domain:
- enums.py: All Enum class definitions
- values.py: Scalar constants (strings, numbers with Final)
- timeouts.py: Timeout and interval values (seconds)
- defaults.py: Default values for settings

Note: Keyboard bindings are defined in podscope.keyboard module.
"""

from podscope.constants.defaults import (
    LOG_LEVEL_DEFAULT,
    REFRESH_INTERVAL_DEFAULT,
    TAIL_LINES_DEFAULT,
)
from podscope.constants.enums import (
    ConfirmAction,
    ConnectionStatus,
    ModalResult,
    NotificationLevel,
    StreamChannel,
    ViewState,
)
from podscope.constants.timeouts import NOTIFICATION_TTL, REFRESH_INTERVAL
from podscope.constants.values import (
    APP_TITLE,
    LOG_QUEUE_CAPACITY,
    MULTI_LOG_TAIL_LINES,
    RESTART_TAIL_LINES,
)

__all__ = [
    "APP_TITLE",
    "LOG_LEVEL_DEFAULT",
    "LOG_QUEUE_CAPACITY",
    "MULTI_LOG_TAIL_LINES",
    "NOTIFICATION_TTL",
    "REFRESH_INTERVAL",
    "REFRESH_INTERVAL_DEFAULT",
    "RESTART_TAIL_LINES",
    "TAIL_LINES_DEFAULT",
    "ConfirmAction",
    "ConnectionStatus",
    "ModalResult",
    "NotificationLevel",
    "StreamChannel",
    "ViewState",
]

"""Scalar constants for the TUI.

All application-level constants with proper type hints using Final.
"""

from typing import Final

# ============================================================================
# Application
# ============================================================================

APP_TITLE: Final = "podscope"
APP_DIR_NAME: Final = ".podscope"
LOGGER_NAME: Final = "podscope"

# ============================================================================
# Streaming
# ============================================================================

LOG_QUEUE_CAPACITY: Final = 100
MULTI_LOG_TAIL_LINES: Final = 100
RESTART_TAIL_LINES: Final = 0
MAX_LOG_LINES: Final = 5000
ALL_PODS_VALUE: Final = "__all_pods__"
ALL_PODS_LABEL: Final = "* All Pods"

# ============================================================================
# Scaling
# ============================================================================

SCALE_MIN_REPLICAS: Final = 0
SCALE_MAX_REPLICAS: Final = 1000

# ============================================================================
# Status markup (rich text)
# ============================================================================

STATUS_CONNECTED: Final = "[green]● connected[/green]"
STATUS_CONNECTING: Final = "[yellow]● connecting[/yellow]"
STATUS_DISCONNECTED: Final = "[dim]○ disconnected[/dim]"
STATUS_ERROR: Final = "[red]● error[/red]"

MULTI_LOG_HEADER_FORMAT: Final = "==> {source} <=="

# Bytes of a streaming command's stderr kept for its error message.
STDERR_TAIL_BYTES: Final = 8192

__all__ = [
    "ALL_PODS_LABEL",
    "ALL_PODS_VALUE",
    "APP_DIR_NAME",
    "APP_TITLE",
    "LOGGER_NAME",
    "LOG_QUEUE_CAPACITY",
    "MAX_LOG_LINES",
    "MULTI_LOG_HEADER_FORMAT",
    "MULTI_LOG_TAIL_LINES",
    "RESTART_TAIL_LINES",
    "SCALE_MAX_REPLICAS",
    "SCALE_MIN_REPLICAS",
    "STATUS_CONNECTED",
    "STATUS_CONNECTING",
    "STATUS_DISCONNECTED",
    "STATUS_ERROR",
    "STDERR_TAIL_BYTES",
]

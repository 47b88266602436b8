"""Timeout constants for the TUI.

All timeout and interval values for cluster requests, remote commands, and refresh cycles.
"""

from typing import Final

# ============================================================================
# API/Cluster timeouts (string format for kubectl)
# ============================================================================

CLUSTER_REQUEST_TIMEOUT: Final = "30s"

# Process-level command timeouts (must be greater than request timeout)
KUBECTL_COMMAND_TIMEOUT: Final = 45
KUBECTL_CHECK_TIMEOUT: Final = 12

# ============================================================================
# Remote shell timeouts (seconds)
# ============================================================================

SSH_CONNECT_TIMEOUT: Final = 10
SSH_COMMAND_TIMEOUT: Final = 30

# ============================================================================
# Refresh / notification intervals (float, in seconds)
# ============================================================================

REFRESH_INTERVAL: Final = 5.0
NOTIFICATION_TTL: Final = 3.0

__all__ = [
    "CLUSTER_REQUEST_TIMEOUT",
    "KUBECTL_CHECK_TIMEOUT",
    "KUBECTL_COMMAND_TIMEOUT",
    "NOTIFICATION_TTL",
    "REFRESH_INTERVAL",
    "SSH_COMMAND_TIMEOUT",
    "SSH_CONNECT_TIMEOUT",
]

"""Default values for settings.

All default values used in the AppConfig model and validation fallback values.
"""

from typing import Final

# ============================================================================
# Config defaults
# ============================================================================

CONFIG_FILE_NAME: Final = "config.yaml"
KUBECONFIG_DEFAULT_PATH: Final = "~/.kube/config"
KUBECONFIG_DEFAULT_NAME: Final = "default"
LOG_LEVEL_DEFAULT: Final = "INFO"
REFRESH_INTERVAL_DEFAULT: Final = 5.0

# ============================================================================
# Log view defaults
# ============================================================================

TAIL_LINES_DEFAULT: Final = 500
NAMESPACE_DEFAULT: Final = "default"

# ============================================================================
# Remote host defaults
# ============================================================================

SSH_PORT_DEFAULT: Final = 22
SSH_USER_DEFAULT: Final = "root"

__all__ = [
    "CONFIG_FILE_NAME",
    "KUBECONFIG_DEFAULT_NAME",
    "KUBECONFIG_DEFAULT_PATH",
    "LOG_LEVEL_DEFAULT",
    "NAMESPACE_DEFAULT",
    "REFRESH_INTERVAL_DEFAULT",
    "SSH_PORT_DEFAULT",
    "SSH_USER_DEFAULT",
    "TAIL_LINES_DEFAULT",
]

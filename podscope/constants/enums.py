"""All enum definitions for the TUI.

This module consolidates all enumerations used throughout the application.
"""

from enum import Enum

# =============================================================================
# View State
# =============================================================================


class ViewState(Enum):
    """Screens the application can be showing. Exactly one is current."""

    CONFIG_SELECT = "config-select"
    CONNECTING = "connecting"
    NAMESPACES = "namespaces"
    PODS = "pods"
    POD_DETAILS = "pod-details"
    LOGS = "logs"
    MULTI_POD_LOGS = "multi-pod-logs"
    DEPLOYMENTS = "deployments"
    DEPLOYMENT_DETAILS = "deployment-details"
    SERVICES = "services"
    SERVICE_DETAILS = "service-details"
    EVENTS = "events"
    SSH_HOSTS = "ssh-hosts"
    SSH_CONNECTING = "ssh-connecting"
    REMOTE_CONTAINERS = "remote-containers"
    REMOTE_LOGS = "remote-logs"
    NODE_INFO = "node-info"
    MAIN = "main"


# =============================================================================
# Connection / Status Enums
# =============================================================================


class ConnectionStatus(Enum):
    """Cluster connection status shown in the sidebar."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERROR = "error"


class PodPhase(Enum):
    """Kubernetes pod phase values."""

    PENDING = "Pending"
    RUNNING = "Running"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    UNKNOWN = "Unknown"


class EventType(Enum):
    """Kubernetes event type values."""

    NORMAL = "Normal"
    WARNING = "Warning"


# =============================================================================
# Modal Enums
# =============================================================================


class ModalResult(Enum):
    """Outcome of routing one message to a visible modal."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class ConfirmAction(Enum):
    """Destructive actions that require confirmation."""

    DELETE_POD = "delete-pod"
    RESTART_POD = "restart-pod"
    DELETE_DEPLOYMENT = "delete-deployment"
    RESTART_DEPLOYMENT = "restart-deployment"


# =============================================================================
# Streaming / Notification Enums
# =============================================================================


class StreamChannel(Enum):
    """Which log view a streamed line belongs to."""

    POD = "pod"
    REMOTE = "remote"
    MULTI = "multi"


class NotificationLevel(Enum):
    """Severity of a toast notification."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class MutationKind(Enum):
    """Acknowledged cluster mutations."""

    POD_DELETED = "pod-deleted"
    POD_RESTARTED = "pod-restarted"
    DEPLOYMENT_SCALED = "deployment-scaled"
    DEPLOYMENT_RESTARTED = "deployment-restarted"
    DEPLOYMENT_DELETED = "deployment-deleted"


class EventKindFilter(Enum):
    """Involved-object kind filter cycled in the events view."""

    ALL = "All"
    POD = "Pod"
    DEPLOYMENT = "Deployment"
    REPLICA_SET = "ReplicaSet"
    SERVICE = "Service"
    NODE = "Node"

    def next(self) -> "EventKindFilter":
        members = list(type(self))
        return members[(members.index(self) + 1) % len(members)]


__all__ = [
    "ConfirmAction",
    "ConnectionStatus",
    "EventKindFilter",
    "EventType",
    "ModalResult",
    "MutationKind",
    "NotificationLevel",
    "PodPhase",
    "StreamChannel",
    "ViewState",
]

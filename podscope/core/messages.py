"""Messages consumed by the dispatcher.

Every input the application reacts to, whether a keystroke, a timer tick, a
completed fetch or a streamed log line, arrives as exactly one of the
dataclasses below. Result messages carry ``error`` instead of raising so that
a failing task still produces a message.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from podscope.constants.enums import MutationKind, StreamChannel, ViewState
from podscope.models.core.resources import (
    ClusterInfo,
    Deployment,
    Event,
    Namespace,
    NodeInfo,
    Pod,
    PodEvent,
    PodMetrics,
    RemoteContainer,
    Service,
)

if TYPE_CHECKING:
    from podscope.clients.base import ClusterClient, RemoteHostClient


@dataclass(frozen=True)
class Message:
    """Base class for everything the dispatcher handles."""


# ============================================================================
# Input
# ============================================================================


@dataclass(frozen=True)
class KeyPressed(Message):
    key: str


@dataclass(frozen=True)
class ModalOpened(Message):
    """Initialization message returned by ``Modal.show``."""

    modal: str


# ============================================================================
# Cluster results
# ============================================================================


@dataclass(frozen=True)
class ClusterConnected(Message):
    config_name: str
    client: ClusterClient | None = None
    info: ClusterInfo | None = None
    metrics_available: bool = False
    error: Exception | None = None


@dataclass(frozen=True)
class NamespacesLoaded(Message):
    namespaces: list[Namespace] = field(default_factory=list)
    error: Exception | None = None


@dataclass(frozen=True)
class PodsLoaded(Message):
    namespace: str
    pods: list[Pod] = field(default_factory=list)
    error: Exception | None = None


@dataclass(frozen=True)
class PodDetailsLoaded(Message):
    name: str
    pod: Pod | None = None
    events: list[PodEvent] = field(default_factory=list)
    error: Exception | None = None


@dataclass(frozen=True)
class MetricsLoaded(Message):
    metrics: dict[str, PodMetrics] = field(default_factory=dict)
    error: Exception | None = None


@dataclass(frozen=True)
class LogsLoaded(Message):
    """Historical log tail for the pod or remote log view."""

    channel: StreamChannel
    source_key: str
    lines: list[str] = field(default_factory=list)
    error: Exception | None = None


@dataclass(frozen=True)
class DeploymentsLoaded(Message):
    namespace: str
    deployments: list[Deployment] = field(default_factory=list)
    error: Exception | None = None


@dataclass(frozen=True)
class DeploymentDetailsLoaded(Message):
    name: str
    deployment: Deployment | None = None
    pods: list[Pod] = field(default_factory=list)
    error: Exception | None = None


@dataclass(frozen=True)
class ServicesLoaded(Message):
    namespace: str
    services: list[Service] = field(default_factory=list)
    error: Exception | None = None


@dataclass(frozen=True)
class ServiceDetailsLoaded(Message):
    name: str
    service: Service | None = None
    pods: list[Pod] = field(default_factory=list)
    error: Exception | None = None


@dataclass(frozen=True)
class EventsLoaded(Message):
    namespace: str
    events: list[Event] = field(default_factory=list)
    error: Exception | None = None


@dataclass(frozen=True)
class MutationDone(Message):
    """Acknowledgement of a delete, restart or scale request."""

    kind: MutationKind
    target: str
    detail: str = ""
    error: Exception | None = None


# ============================================================================
# Remote host results
# ============================================================================


@dataclass(frozen=True)
class RemoteConnected(Message):
    host_name: str
    client: RemoteHostClient | None = None
    error: Exception | None = None


@dataclass(frozen=True)
class RemoteContainersLoaded(Message):
    containers: list[RemoteContainer] = field(default_factory=list)
    error: Exception | None = None


@dataclass(frozen=True)
class NodeInfoLoaded(Message):
    info: NodeInfo | None = None
    error: Exception | None = None


# ============================================================================
# Streaming
# ============================================================================


@dataclass(frozen=True)
class LogLine(Message):
    channel: StreamChannel
    session_id: int
    source_key: str
    line: str


@dataclass(frozen=True)
class LogStreamEnded(Message):
    """A stream's queue closed; ``error`` is StreamCancelled for explicit stops."""

    channel: StreamChannel
    session_id: int
    source_key: str
    error: BaseException | None = None


# ============================================================================
# Timers
# ============================================================================


@dataclass(frozen=True)
class RefreshTick(Message):
    view: ViewState
    generation: int


@dataclass(frozen=True)
class NotificationExpired(Message):
    notification_id: int


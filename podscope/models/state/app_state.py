"""Application state owned by the dispatcher.

Only ``Dispatcher.handle`` mutates an ``AppState``. Tasks receive the values
they need as arguments and report back through messages.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from podscope.constants.enums import ConnectionStatus, StreamChannel, ViewState
from podscope.core.streaming import LogStreamer, MultiSourceStream
from podscope.modals.stack import ModalStack
from podscope.models.core.resources import (
    ClusterInfo,
    Deployment,
    Namespace,
    NodeInfo,
    Pod,
    PodMetrics,
    RemoteContainer,
    Service,
)
from podscope.models.state.app_settings import KubeConfigEntry, SSHHost
from podscope.viewers.details import DeploymentDetails, PodDetails, ServiceDetails
from podscope.viewers.event_viewer import EventViewer
from podscope.viewers.list_model import ListModel
from podscope.viewers.log_viewer import LogViewer
from podscope.viewers.multi_log_viewer import MultiLogViewer
from podscope.viewers.notification import NotificationCenter

if TYPE_CHECKING:
    from podscope.clients.base import ClusterClient, RemoteHostClient


def _pod_label(pod: Pod) -> str:
    return pod.name


def _container_label(container: RemoteContainer) -> str:
    return f"{container.name} {container.pod_name}"


@dataclass
class AppState:
    view: ViewState = ViewState.CONFIG_SELECT
    connection: ConnectionStatus = ConnectionStatus.DISCONNECTED
    error: str = ""
    loading: bool = False
    quitting: bool = False

    # Cluster
    cluster: ClusterClient | None = None
    cluster_info: ClusterInfo | None = None
    config_name: str = ""
    namespace: str = ""
    metrics_available: bool = False
    show_metrics: bool = False
    metrics: dict[str, PodMetrics] = field(default_factory=dict)

    # Remote host
    remote: RemoteHostClient | None = None
    remote_host: SSHHost | None = None
    node_info: NodeInfo | None = None

    # Lists
    kubeconfigs: ListModel[KubeConfigEntry] = field(
        default_factory=lambda: ListModel("Kubeconfigs", lambda entry: entry.name)
    )
    namespaces: ListModel[Namespace] = field(
        default_factory=lambda: ListModel("Namespaces", lambda namespace: namespace.name)
    )
    pods: ListModel[Pod] = field(default_factory=lambda: ListModel("Pods", _pod_label))
    deployments: ListModel[Deployment] = field(
        default_factory=lambda: ListModel("Deployments", lambda deployment: deployment.name)
    )
    services: ListModel[Service] = field(
        default_factory=lambda: ListModel("Services", lambda service: service.name)
    )
    ssh_hosts: ListModel[SSHHost] = field(
        default_factory=lambda: ListModel("SSH Hosts", lambda host: host.name)
    )
    remote_containers: ListModel[RemoteContainer] = field(
        default_factory=lambda: ListModel("Containers", _container_label)
    )

    # Details and logs
    pod_details: PodDetails = field(default_factory=PodDetails)
    deployment_details: DeploymentDetails = field(default_factory=DeploymentDetails)
    service_details: ServiceDetails = field(default_factory=ServiceDetails)
    logs: LogViewer = field(default_factory=LogViewer)
    remote_logs: LogViewer = field(default_factory=LogViewer)
    multi_logs: MultiLogViewer = field(default_factory=MultiLogViewer)
    events: EventViewer = field(default_factory=EventViewer)
    log_source_view: ViewState = ViewState.PODS

    # Selection
    selected_pod: str = ""
    selected_deployment: str = ""
    selected_service: str = ""
    selected_container: RemoteContainer | None = None

    # Streams, overlays, timers
    pod_stream: LogStreamer = field(default_factory=lambda: LogStreamer(StreamChannel.POD))
    remote_stream: LogStreamer = field(default_factory=lambda: LogStreamer(StreamChannel.REMOTE))
    multi_stream: MultiSourceStream = field(default_factory=MultiSourceStream)
    modals: ModalStack = field(default_factory=ModalStack)
    notifications: NotificationCenter = field(default_factory=NotificationCenter)
    refresh_generations: dict[ViewState, int] = field(default_factory=dict)

    @property
    def connected(self) -> bool:
        return self.connection is ConnectionStatus.CONNECTED and self.cluster is not None

    def active_list(self) -> ListModel | None:
        """List model owned by the current view, if it has one."""
        return {
            ViewState.CONFIG_SELECT: self.kubeconfigs,
            ViewState.NAMESPACES: self.namespaces,
            ViewState.PODS: self.pods,
            ViewState.DEPLOYMENTS: self.deployments,
            ViewState.SERVICES: self.services,
            ViewState.EVENTS: self.events.list,
            ViewState.SSH_HOSTS: self.ssh_hosts,
            ViewState.REMOTE_CONTAINERS: self.remote_containers,
        }.get(self.view)

    def log_viewer(self, channel: StreamChannel) -> LogViewer:
        return self.remote_logs if channel is StreamChannel.REMOTE else self.logs

    def log_streamer(self, channel: StreamChannel) -> LogStreamer:
        return self.remote_stream if channel is StreamChannel.REMOTE else self.pod_stream

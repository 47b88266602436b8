"""The application event loop.

``Dispatcher.handle`` takes one message, mutates ``AppState`` and returns the
tasks the runtime should execute next. It performs no I/O: every cluster or
remote-host call is wrapped in a task from ``podscope.core.operations``.

Input routing order for a key press:

1. ctrl+c always quits.
2. A visible modal (checked in ModalStack order) receives the key exclusively.
3. A list whose filter is being edited receives the key.
4. Global keys: quit, help, digit jumps, ssh hosts, back, select, refresh.
5. Keys owned by the current view, then list or log scrolling.

Result, stream and timer messages are handled by their own handlers whether
or not a modal is visible.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from podscope.clients.base import LogOptions, PassphraseRequiredError
from podscope.constants.enums import (
    ConfirmAction,
    ConnectionStatus,
    ModalResult,
    MutationKind,
    NotificationLevel,
    StreamChannel,
    ViewState,
)
from podscope.constants.values import MULTI_LOG_TAIL_LINES, RESTART_TAIL_LINES
from podscope.core import operations
from podscope.core.messages import (
    ClusterConnected,
    DeploymentDetailsLoaded,
    DeploymentsLoaded,
    EventsLoaded,
    KeyPressed,
    LogLine,
    LogsLoaded,
    LogStreamEnded,
    Message,
    MetricsLoaded,
    ModalOpened,
    MutationDone,
    NamespacesLoaded,
    NodeInfoLoaded,
    NotificationExpired,
    PodDetailsLoaded,
    PodsLoaded,
    RefreshTick,
    RemoteConnected,
    RemoteContainersLoaded,
    ServiceDetailsLoaded,
    ServicesLoaded,
)
from podscope.core.navigation import (
    BACK_TRANSITIONS,
    DIGIT_VIEWS,
    QUIT_VIEWS,
    REFRESHING_VIEWS,
    REMOTE_VIEWS,
)
from podscope.core.operations import ClusterFactory, RemoteFactory
from podscope.core.refresh import RefreshScheduler
from podscope.core.streaming import StreamEnd
from podscope.core.tasks import Task
from podscope.keyboard.keys import (
    KEY_BACK,
    KEY_CLEAR,
    KEY_CONTAINER,
    KEY_DELETE,
    KEY_FOLLOW,
    KEY_FORCE_QUIT,
    KEY_HELP,
    KEY_KIND,
    KEY_LOGS,
    KEY_METRICS,
    KEY_MULTI_LOGS,
    KEY_NODE_INFO,
    KEY_QUIT,
    KEY_REFRESH,
    KEY_RESTART,
    KEY_SCALE,
    KEY_SEARCH,
    KEY_SEARCH_NEXT,
    KEY_SEARCH_PREV,
    KEY_SELECT,
    KEY_SSH_HOSTS,
    KEY_TIMESTAMPS,
    KEY_WARNINGS,
)
from podscope.modals.base import Modal
from podscope.modals.confirm import ConfirmRequest
from podscope.modals.scale import ScaleRequest
from podscope.models.core.resources import Pod
from podscope.models.state.app_settings import AppConfig, KubeConfigEntry, SSHHost
from podscope.models.state.app_state import AppState
from podscope.viewers.log_viewer import LogViewer

logger = logging.getLogger(__name__)

_LOG_VIEWS: dict[StreamChannel, ViewState] = {
    StreamChannel.POD: ViewState.LOGS,
    StreamChannel.REMOTE: ViewState.REMOTE_LOGS,
    StreamChannel.MULTI: ViewState.MULTI_POD_LOGS,
}

_MUTATION_VERBS: dict[MutationKind, tuple[str, str]] = {
    MutationKind.POD_DELETED: ("Pod '{target}' deleted", "Failed to delete pod '{target}'"),
    MutationKind.POD_RESTARTED: ("Pod '{target}' restarting...", "Failed to restart pod '{target}'"),
    MutationKind.DEPLOYMENT_SCALED: (
        "Deployment '{target}' scaled to {detail}",
        "Failed to scale deployment '{target}'",
    ),
    MutationKind.DEPLOYMENT_RESTARTED: (
        "Deployment '{target}' restarting...",
        "Failed to restart deployment '{target}'",
    ),
    MutationKind.DEPLOYMENT_DELETED: (
        "Deployment '{target}' deleted",
        "Failed to delete deployment '{target}'",
    ),
}


class Dispatcher:
    """Single owner of AppState; turns each message into follow-up tasks."""

    def __init__(
        self,
        config: AppConfig,
        cluster_factory: ClusterFactory,
        remote_factory: RemoteFactory,
        log: logging.Logger | None = None,
        state: AppState | None = None,
    ) -> None:
        self.config = config
        self.cluster_factory = cluster_factory
        self.remote_factory = remote_factory
        self.log = log or logger
        self.state = state or AppState()
        self.refresh = RefreshScheduler(config.refresh_interval)
        self._handlers: dict[type[Message], Callable[[Any], list[Task]]] = {
            KeyPressed: self._on_key,
            ModalOpened: self._on_modal_opened,
            ClusterConnected: self._on_cluster_connected,
            NamespacesLoaded: self._on_namespaces,
            PodsLoaded: self._on_pods,
            PodDetailsLoaded: self._on_pod_details,
            MetricsLoaded: self._on_metrics,
            LogsLoaded: self._on_logs,
            DeploymentsLoaded: self._on_deployments,
            DeploymentDetailsLoaded: self._on_deployment_details,
            ServicesLoaded: self._on_services,
            ServiceDetailsLoaded: self._on_service_details,
            EventsLoaded: self._on_events,
            MutationDone: self._on_mutation,
            RemoteConnected: self._on_remote_connected,
            RemoteContainersLoaded: self._on_remote_containers,
            NodeInfoLoaded: self._on_node_info,
            LogLine: self._on_log_line,
            LogStreamEnded: self._on_stream_ended,
            RefreshTick: self._on_refresh_tick,
            NotificationExpired: self._on_notification_expired,
        }
        self._view_keys: dict[ViewState, Callable[[str], list[Task] | None]] = {
            ViewState.PODS: self._pods_key,
            ViewState.POD_DETAILS: self._pod_details_key,
            ViewState.LOGS: self._logs_key,
            ViewState.MULTI_POD_LOGS: self._multi_logs_key,
            ViewState.DEPLOYMENTS: self._deployments_key,
            ViewState.DEPLOYMENT_DETAILS: self._deployments_key,
            ViewState.EVENTS: self._events_key,
            ViewState.REMOTE_CONTAINERS: self._remote_containers_key,
            ViewState.REMOTE_LOGS: self._logs_key,
        }

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def start(self) -> list[Task]:
        """Populate the config lists and auto-connect a lone kubeconfig."""
        state = self.state
        entries = self.config.kubeconfigs
        state.kubeconfigs.set_items(entries)
        state.ssh_hosts.set_items(self.config.ssh_hosts)
        default = self.config.default_kubeconfig()
        if default is not None:
            state.kubeconfigs.cursor = entries.index(default)
        if len(entries) == 1:
            return self._connect(entries[0])
        state.view = ViewState.CONFIG_SELECT
        if not entries:
            state.error = "No kubeconfig found; add one to the podscope config file"
        return []

    def handle(self, message: Message) -> list[Task]:
        handler = self._handlers.get(type(message))
        if handler is None:
            self.log.debug("Unhandled message %s", type(message).__name__)
            return []
        return handler(message)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _notify(self, text: str, level: NotificationLevel = NotificationLevel.INFO) -> Task:
        return self.state.notifications.push(text, level)

    def _active_log_viewer(self) -> LogViewer | None:
        if self.state.view is ViewState.LOGS:
            return self.state.logs
        if self.state.view is ViewState.REMOTE_LOGS:
            return self.state.remote_logs
        return None

    def _fetch_view(self, view: ViewState) -> list[Task]:
        """Fetch tasks that (re)load the data behind ``view``."""
        state = self.state
        if view is ViewState.REMOTE_CONTAINERS and state.remote is not None:
            return [operations.fetch_remote_containers(state.remote)]
        if view is ViewState.NODE_INFO and state.remote is not None:
            return [operations.fetch_node_info(state.remote)]
        client = state.cluster
        if client is None:
            return []
        namespace = state.namespace
        if view is ViewState.NAMESPACES:
            return [operations.fetch_namespaces(client)]
        if view is ViewState.PODS:
            tasks = [operations.fetch_pods(client, namespace)]
            if state.show_metrics:
                tasks.append(operations.fetch_metrics(client, namespace))
            return tasks
        if view is ViewState.POD_DETAILS and state.selected_pod:
            return [operations.fetch_pod_details(client, namespace, state.selected_pod)]
        if view is ViewState.DEPLOYMENTS:
            return [operations.fetch_deployments(client, namespace)]
        if view is ViewState.DEPLOYMENT_DETAILS and state.selected_deployment:
            return [operations.fetch_deployment_details(client, namespace, state.selected_deployment)]
        if view is ViewState.SERVICES:
            return [operations.fetch_services(client, namespace)]
        if view is ViewState.SERVICE_DETAILS and state.selected_service:
            return [operations.fetch_service_details(client, namespace, state.selected_service)]
        if view is ViewState.EVENTS:
            return [operations.fetch_events(client, namespace)]
        return []

    def _go(self, view: ViewState) -> list[Task]:
        """Enter ``view``: load its data and arm its refresh chain."""
        state = self.state
        state.view = view
        state.error = ""
        tasks = self._fetch_view(view)
        state.loading = bool(tasks)
        if view in REFRESHING_VIEWS and state.cluster is not None:
            tasks.append(self.refresh.arm(state, view))
        return tasks

    def _leave(self) -> None:
        """Release what the current view owns before jumping elsewhere."""
        state = self.state
        view = state.view
        if view is ViewState.LOGS:
            state.pod_stream.stop()
            state.logs.clear()
        elif view is ViewState.MULTI_POD_LOGS:
            state.multi_stream.stop()
            state.multi_logs.clear()
        elif view in REMOTE_VIEWS:
            self._close_remote()

    def _switch(self, view: ViewState) -> list[Task]:
        if self.state.view is not view:
            self._leave()
        return self._go(view)

    def _stop_streams(self) -> None:
        self.state.pod_stream.stop()
        self.state.remote_stream.stop()
        self.state.multi_stream.stop()

    def _close_remote(self) -> None:
        state = self.state
        state.remote_stream.stop()
        state.remote_logs.clear()
        state.selected_container = None
        state.node_info = None
        state.remote_containers.clear()
        if state.remote is not None:
            self.log.info("Closing ssh session to %s", state.remote_host.name if state.remote_host else "?")
            state.remote.close()
            state.remote = None

    def _disconnect(self) -> None:
        state = self.state
        self._stop_streams()
        state.cluster = None
        state.cluster_info = None
        state.connection = ConnectionStatus.DISCONNECTED
        state.metrics_available = False
        state.show_metrics = False
        state.metrics = {}
        state.namespaces.clear()
        state.pods.clear()
        state.view = ViewState.CONFIG_SELECT

    def _quit(self) -> list[Task]:
        self.log.info("Quit requested")
        self._stop_streams()
        self._close_remote()
        self.state.modals.hide_all()
        self.state.quitting = True
        return []

    # ------------------------------------------------------------------
    # Connection
    # ------------------------------------------------------------------

    def _connect(self, entry: KubeConfigEntry) -> list[Task]:
        state = self.state
        state.view = ViewState.CONNECTING
        state.connection = ConnectionStatus.CONNECTING
        state.config_name = entry.name
        state.error = ""
        state.loading = True
        self.log.info("Connecting with kubeconfig %s", entry.name)
        return [operations.connect_cluster(entry, self.cluster_factory)]

    def _on_cluster_connected(self, message: ClusterConnected) -> list[Task]:
        state = self.state
        if state.view is not ViewState.CONNECTING or message.config_name != state.config_name:
            self.log.debug("Ignoring stale connection result for %s", message.config_name)
            return []
        state.loading = False
        if message.error is not None or message.client is None:
            state.connection = ConnectionStatus.ERROR
            state.error = str(message.error or "connection failed")
            state.view = ViewState.MAIN
            return []
        state.cluster = message.client
        state.cluster_info = message.info
        state.connection = ConnectionStatus.CONNECTED
        state.metrics_available = message.metrics_available
        state.namespace = message.client.namespace
        return self._go(ViewState.NAMESPACES)

    def _select_ssh_host(self, host: SSHHost) -> list[Task]:
        state = self.state
        self._close_remote()
        client = self.remote_factory(host)
        state.remote = client
        state.remote_host = host
        state.view = ViewState.SSH_CONNECTING
        state.error = ""
        state.loading = True
        self.log.info("Connecting to ssh host %s (%s)", host.name, host.target)
        return [operations.connect_remote(host, client)]

    def _on_remote_connected(self, message: RemoteConnected) -> list[Task]:
        state = self.state
        if message.client is None or message.client is not state.remote:
            if message.client is not None:
                message.client.close()
            return []
        state.loading = False
        if isinstance(message.error, PassphraseRequiredError):
            state.view = ViewState.SSH_CONNECTING
            return [state.modals.show(state.modals.passphrase, message.host_name)]
        if message.error is not None:
            self._close_remote()
            state.error = str(message.error)
            state.view = ViewState.SSH_HOSTS
            return []
        state.view = ViewState.REMOTE_CONTAINERS
        state.error = ""
        state.loading = True
        return [
            operations.fetch_remote_containers(message.client),
            operations.fetch_node_info(message.client),
        ]

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    def _on_key(self, message: KeyPressed) -> list[Task]:
        state = self.state
        key = message.key
        if key == KEY_FORCE_QUIT:
            return self._quit()

        modal = state.modals.visible_modal()
        if modal is not None:
            return self._on_modal_key(modal, message)

        active_list = state.active_list()
        if active_list is not None and active_list.editing_filter:
            active_list.handle_key(key)
            return []

        view = state.view
        if key == KEY_QUIT and view in QUIT_VIEWS:
            return self._quit()
        if key == KEY_HELP and view not in (ViewState.CONNECTING, ViewState.SSH_CONNECTING):
            return [state.modals.show(state.modals.help)]
        if key in DIGIT_VIEWS:
            return self._jump(DIGIT_VIEWS[key])
        if key == KEY_SSH_HOSTS:
            return self._open_ssh_hosts()
        if key == KEY_BACK:
            if active_list is not None and active_list.filter_applied:
                active_list.clear_filter()
                return []
            return self._back()
        if key == KEY_SELECT:
            return self._select()
        if key == KEY_REFRESH:
            return self._refresh_view()

        view_handler = self._view_keys.get(view)
        if view_handler is not None:
            tasks = view_handler(key)
            if tasks is not None:
                return tasks
        if active_list is not None:
            active_list.handle_key(key)
        elif view is ViewState.MULTI_POD_LOGS:
            state.multi_logs.handle_key(key)
        else:
            viewer = self._active_log_viewer()
            if viewer is not None:
                viewer.handle_key(key)
        return []

    def _jump(self, view: ViewState) -> list[Task]:
        if not self.state.connected or self.state.view is view:
            return []
        return self._switch(view)

    def _open_ssh_hosts(self) -> list[Task]:
        state = self.state
        if state.view in REMOTE_VIEWS or state.view in (
            ViewState.CONNECTING,
            ViewState.SSH_CONNECTING,
            ViewState.SSH_HOSTS,
        ):
            return []
        if not self.config.ssh_hosts:
            return [self._notify("No SSH hosts configured", NotificationLevel.WARNING)]
        self._leave()
        state.view = ViewState.SSH_HOSTS
        state.error = ""
        return []

    def _back(self) -> list[Task]:
        state = self.state
        view = state.view
        if view is ViewState.LOGS:
            state.pod_stream.stop()
            state.logs.clear()
            target = state.log_source_view
            if target is ViewState.PODS:
                state.selected_pod = ""
            return self._go(target)
        if view is ViewState.MAIN:
            if state.connected:
                return self._go(ViewState.PODS)
            if len(self.config.kubeconfigs) > 1:
                self._disconnect()
            return []
        if view is ViewState.NAMESPACES:
            if len(self.config.kubeconfigs) > 1:
                self._disconnect()
            return []
        if view is ViewState.SSH_HOSTS:
            if state.connected:
                return self._go(ViewState.PODS)
            state.view = ViewState.CONFIG_SELECT if state.cluster is None else ViewState.NAMESPACES
            state.error = ""
            return []

        target = BACK_TRANSITIONS.get(view)
        if target is None:
            return []
        if view is ViewState.MULTI_POD_LOGS:
            state.multi_stream.stop()
            state.multi_logs.clear()
        elif view is ViewState.REMOTE_LOGS:
            state.remote_stream.stop()
            state.remote_logs.clear()
            state.selected_container = None
        elif view is ViewState.REMOTE_CONTAINERS:
            self._close_remote()
            state.view = target
            state.error = ""
            return []
        elif view is ViewState.POD_DETAILS:
            state.selected_pod = ""
            state.pod_details.clear()
        elif view is ViewState.DEPLOYMENT_DETAILS:
            state.selected_deployment = ""
            state.deployment_details.clear()
        elif view is ViewState.SERVICE_DETAILS:
            state.selected_service = ""
            state.service_details.clear()
        return self._go(target)

    def _select(self) -> list[Task]:
        state = self.state
        view = state.view
        if view is ViewState.CONFIG_SELECT:
            entry = state.kubeconfigs.selected
            return self._connect(entry) if entry is not None else []
        if view is ViewState.NAMESPACES:
            namespace = state.namespaces.selected
            if namespace is None or state.cluster is None:
                return []
            state.namespace = namespace.name
            state.cluster.set_namespace(namespace.name)
            state.pods.clear()
            state.metrics = {}
            return self._go(ViewState.PODS)
        if view is ViewState.PODS:
            pod = state.pods.selected
            if pod is None:
                return []
            state.selected_pod = pod.name
            state.pod_details.clear()
            return self._go(ViewState.POD_DETAILS)
        if view is ViewState.DEPLOYMENTS:
            deployment = state.deployments.selected
            if deployment is None:
                return []
            state.selected_deployment = deployment.name
            state.deployment_details.clear()
            return self._go(ViewState.DEPLOYMENT_DETAILS)
        if view is ViewState.SERVICES:
            service = state.services.selected
            if service is None:
                return []
            state.selected_service = service.name
            state.service_details.clear()
            return self._go(ViewState.SERVICE_DETAILS)
        if view is ViewState.SSH_HOSTS:
            host = state.ssh_hosts.selected
            return self._select_ssh_host(host) if host is not None else []
        if view is ViewState.REMOTE_CONTAINERS:
            return self._open_remote_logs()
        return []

    def _refresh_view(self) -> list[Task]:
        state = self.state
        view = state.view
        if view is ViewState.MAIN:
            entry = next(
                (entry for entry in self.config.kubeconfigs if entry.name == state.config_name),
                None,
            )
            return self._connect(entry) if entry is not None else []
        if view is ViewState.LOGS:
            state.pod_stream.stop()
            return self._reload_logs(StreamChannel.POD)
        if view is ViewState.REMOTE_LOGS:
            state.remote_stream.stop()
            return self._reload_logs(StreamChannel.REMOTE)
        tasks = self._fetch_view(view)
        if tasks:
            state.loading = True
        return tasks

    # ------------------------------------------------------------------
    # View keys
    # ------------------------------------------------------------------

    def _confirm(self, action: ConfirmAction, target: str) -> list[Task]:
        modals = self.state.modals
        return [modals.show(modals.confirm, action, target)]

    def _pods_key(self, key: str) -> list[Task] | None:
        state = self.state
        pod = state.pods.selected
        if key == KEY_LOGS:
            return self._open_logs(pod, ViewState.PODS) if pod is not None else []
        if key == KEY_MULTI_LOGS:
            if not state.pods.items:
                return [self._notify("No pods to stream", NotificationLevel.WARNING)]
            names = [item.name for item in state.pods.items]
            return [state.modals.show(state.modals.multi_pod_selector, names)]
        if key == KEY_DELETE:
            return self._confirm(ConfirmAction.DELETE_POD, pod.name) if pod is not None else []
        if key == KEY_RESTART:
            return self._confirm(ConfirmAction.RESTART_POD, pod.name) if pod is not None else []
        if key == KEY_METRICS:
            if not state.metrics_available:
                return [self._notify("Metrics server not available", NotificationLevel.WARNING)]
            state.show_metrics = not state.show_metrics
            if state.show_metrics and state.cluster is not None:
                return [operations.fetch_metrics(state.cluster, state.namespace)]
            return []
        return None

    def _pod_details_key(self, key: str) -> list[Task] | None:
        state = self.state
        if key == KEY_LOGS:
            pod = state.pod_details.pod
            return self._open_logs(pod, ViewState.POD_DETAILS) if pod is not None else []
        if key == KEY_DELETE and state.selected_pod:
            return self._confirm(ConfirmAction.DELETE_POD, state.selected_pod)
        if key == KEY_RESTART and state.selected_pod:
            return self._confirm(ConfirmAction.RESTART_POD, state.selected_pod)
        return None

    def _logs_key(self, key: str) -> list[Task] | None:
        state = self.state
        channel = StreamChannel.POD if state.view is ViewState.LOGS else StreamChannel.REMOTE
        viewer = state.log_viewer(channel)
        streamer = state.log_streamer(channel)
        if key == KEY_FOLLOW:
            if viewer.toggle_following():
                task = self._start_stream(channel)
                return [task] if task is not None else []
            streamer.stop()
            return []
        if key == KEY_TIMESTAMPS:
            viewer.toggle_timestamps()
            streamer.stop()
            return self._reload_logs(channel)
        if key == KEY_CONTAINER and channel is StreamChannel.POD:
            if not viewer.has_multiple_containers:
                return [self._notify("Pod has a single container")]
            return [state.modals.show(state.modals.container_selector, viewer.containers, viewer.container)]
        if key == KEY_SEARCH:
            return [state.modals.show(state.modals.search, viewer.search_query)]
        if key == KEY_SEARCH_NEXT:
            viewer.next_match()
            return []
        if key == KEY_SEARCH_PREV:
            viewer.prev_match()
            return []
        return None

    def _multi_logs_key(self, key: str) -> list[Task] | None:
        if key == KEY_FOLLOW:
            self.state.multi_logs.toggle_following()
            return []
        if key == KEY_CLEAR:
            self.state.multi_logs.clear()
            return []
        return None

    def _deployments_key(self, key: str) -> list[Task] | None:
        state = self.state
        if state.view is ViewState.DEPLOYMENT_DETAILS:
            deployment = state.deployment_details.deployment
        else:
            deployment = state.deployments.selected
        if deployment is None or key not in (KEY_SCALE, KEY_RESTART, KEY_DELETE):
            return None
        if key == KEY_SCALE:
            return [state.modals.show(state.modals.scale, deployment.name, deployment.replicas)]
        if key == KEY_RESTART:
            return self._confirm(ConfirmAction.RESTART_DEPLOYMENT, deployment.name)
        return self._confirm(ConfirmAction.DELETE_DEPLOYMENT, deployment.name)

    def _events_key(self, key: str) -> list[Task] | None:
        events = self.state.events
        if key == KEY_FOLLOW:
            if events.toggle_following() and self.state.cluster is not None:
                return [operations.fetch_events(self.state.cluster, self.state.namespace)]
            return []
        if key == KEY_WARNINGS:
            events.toggle_warnings_only()
            return []
        if key == KEY_KIND:
            events.cycle_kind()
            return []
        return None

    def _remote_containers_key(self, key: str) -> list[Task] | None:
        if key == KEY_NODE_INFO and self.state.remote is not None:
            return self._go(ViewState.NODE_INFO)
        return None

    # ------------------------------------------------------------------
    # Modals
    # ------------------------------------------------------------------

    def _on_modal_opened(self, message: ModalOpened) -> list[Task]:
        self.log.debug("Modal %s opened", message.modal)
        return []

    def _on_modal_key(self, modal: Modal, message: KeyPressed) -> list[Task]:
        modals = self.state.modals
        outcome = modal.update(message)
        if not outcome.finished:
            if modal is modals.search and outcome.value is not None:
                self._apply_search(outcome.value)
            return [outcome.task] if outcome.task is not None else []
        modal.hide()
        if outcome.result is ModalResult.CANCELLED:
            return self._modal_cancelled(modal)
        tasks = self._modal_confirmed(modal, outcome.value)
        if outcome.task is not None:
            tasks.insert(0, outcome.task)
        return tasks

    def _apply_search(self, query: str) -> None:
        viewer = self._active_log_viewer()
        if viewer is None:
            return
        if query:
            self.state.modals.search.match_count = viewer.set_search(query)
        else:
            viewer.clear_search()
            self.state.modals.search.match_count = 0

    def _modal_cancelled(self, modal: Modal) -> list[Task]:
        state = self.state
        if modal is state.modals.passphrase:
            self._close_remote()
            state.view = ViewState.SSH_HOSTS
        elif modal is state.modals.search:
            viewer = self._active_log_viewer()
            if viewer is not None:
                viewer.clear_search()
        return []

    def _modal_confirmed(self, modal: Modal, value: object) -> list[Task]:
        state = self.state
        modals = state.modals
        if modal is modals.confirm and isinstance(value, ConfirmRequest):
            return self._run_confirmed(value)
        if modal is modals.scale and isinstance(value, ScaleRequest):
            if state.cluster is None:
                return []
            return [
                operations.scale_deployment(state.cluster, state.namespace, value.deployment, value.replicas)
            ]
        if modal is modals.container_selector and isinstance(value, str):
            state.pod_stream.stop()
            state.logs.container = value
            state.logs.clear()
            return self._reload_logs(StreamChannel.POD)
        if modal is modals.multi_pod_selector and isinstance(value, list):
            return self._start_multi(value) if value else []
        if modal is modals.passphrase and isinstance(value, str):
            if state.remote is None or state.remote_host is None:
                return []
            state.remote.set_passphrase(value)
            state.view = ViewState.SSH_CONNECTING
            state.loading = True
            return [operations.connect_remote(state.remote_host, state.remote)]
        if modal is modals.search and isinstance(value, str):
            self._apply_search(value)
        return []

    def _run_confirmed(self, request: ConfirmRequest) -> list[Task]:
        client = self.state.cluster
        if client is None:
            return []
        namespace = self.state.namespace
        target = request.target
        if request.action is ConfirmAction.DELETE_POD:
            return [operations.delete_pod(client, namespace, target)]
        if request.action is ConfirmAction.RESTART_POD:
            return [operations.restart_pod(client, namespace, target)]
        if request.action is ConfirmAction.DELETE_DEPLOYMENT:
            return [operations.delete_deployment(client, namespace, target)]
        return [operations.restart_deployment(client, namespace, target)]

    # ------------------------------------------------------------------
    # Logs
    # ------------------------------------------------------------------

    def _open_logs(self, pod: Pod, source_view: ViewState) -> list[Task]:
        state = self.state
        if state.cluster is None:
            return []
        state.pod_stream.stop()
        state.selected_pod = pod.name
        state.log_source_view = source_view
        state.logs.set_target(pod=pod.name, namespace=state.namespace, containers=pod.container_names)
        state.view = ViewState.LOGS
        return self._reload_logs(StreamChannel.POD)

    def _open_remote_logs(self) -> list[Task]:
        state = self.state
        container = state.remote_containers.selected
        if container is None or state.remote is None:
            return []
        state.remote_stream.stop()
        state.selected_container = container
        state.remote_logs.set_target(
            pod=container.pod_name or container.name,
            namespace=container.pod_namespace,
            container=container.name,
        )
        state.view = ViewState.REMOTE_LOGS
        return self._reload_logs(StreamChannel.REMOTE)

    def _log_key(self, channel: StreamChannel) -> str:
        if channel is StreamChannel.REMOTE:
            container = self.state.selected_container
            return container.id if container is not None else ""
        return self.state.logs.source_key

    def _log_options(self, viewer: LogViewer) -> LogOptions:
        return LogOptions(
            container=viewer.container,
            tail_lines=viewer.tail_lines,
            timestamps=viewer.timestamps,
        )

    def _reload_logs(self, channel: StreamChannel) -> list[Task]:
        """Fetch the history tail; the stream resumes once it arrives."""
        state = self.state
        viewer = state.log_viewer(channel)
        state.error = ""
        if channel is StreamChannel.REMOTE:
            if state.remote is None or state.selected_container is None:
                return []
            state.loading = True
            return [
                operations.fetch_remote_logs(
                    state.remote, state.selected_container.id, self._log_options(viewer)
                )
            ]
        if state.cluster is None:
            return []
        state.loading = True
        return [
            operations.fetch_pod_logs(
                state.cluster,
                viewer.namespace,
                viewer.pod,
                self._log_options(viewer),
                viewer.source_key,
            )
        ]

    def _start_stream(self, channel: StreamChannel) -> Task | None:
        """Follow new lines only; the history tail is already on screen."""
        state = self.state
        viewer = state.log_viewer(channel)
        options = self._log_options(viewer)
        if channel is StreamChannel.REMOTE:
            container = state.selected_container
            if state.remote is None or container is None:
                return None
            factory = operations.remote_log_producer(state.remote, container.id, options)
            return state.remote_stream.start(container.id, factory, RESTART_TAIL_LINES)
        if state.cluster is None:
            return None
        factory = operations.pod_log_producer(state.cluster, viewer.namespace, viewer.pod, options)
        return state.pod_stream.start(viewer.source_key, factory, RESTART_TAIL_LINES)

    def _start_multi(self, pod_names: list[str]) -> list[Task]:
        state = self.state
        client = state.cluster
        if client is None:
            return []
        pods = {pod.name: pod for pod in state.pods.items}
        factories = {}
        for name in pod_names:
            pod = pods.get(name)
            container = pod.container_names[0] if pod is not None and pod.container_names else ""
            source_key = f"{name}/{container}" if container else name
            factories[source_key] = operations.pod_log_producer(
                client, state.namespace, name, LogOptions(container=container)
            )
        state.multi_logs.set_pods(pod_names)
        state.view = ViewState.MULTI_POD_LOGS
        state.error = ""
        return state.multi_stream.start(factories, MULTI_LOG_TAIL_LINES)

    def _on_logs(self, message: LogsLoaded) -> list[Task]:
        state = self.state
        if state.view is not _LOG_VIEWS[message.channel] or message.source_key != self._log_key(message.channel):
            self.log.debug("Ignoring stale log tail for %s", message.source_key)
            return []
        state.loading = False
        if message.error is not None:
            state.error = str(message.error)
            return []
        viewer = state.log_viewer(message.channel)
        viewer.set_lines(message.lines)
        state.error = ""
        if viewer.following:
            task = self._start_stream(message.channel)
            return [task] if task is not None else []
        return []

    def _on_log_line(self, message: LogLine) -> list[Task]:
        state = self.state
        in_view = state.view is _LOG_VIEWS[message.channel]
        if message.channel is StreamChannel.MULTI:
            task = state.multi_stream.next_line(message)
            if task is None:
                return []
            if in_view:
                state.multi_logs.append(message.source_key, message.line)
            return [task]
        task = state.log_streamer(message.channel).next_line(message)
        if task is None:
            return []
        if in_view:
            state.log_viewer(message.channel).append(message.line)
        return [task]

    def _on_stream_ended(self, message: LogStreamEnded) -> list[Task]:
        state = self.state
        in_view = state.view is _LOG_VIEWS[message.channel]
        if message.channel is StreamChannel.MULTI:
            end, task = state.multi_stream.on_ended(message, in_view=in_view)
        else:
            following = state.log_viewer(message.channel).following and in_view
            end, task = state.log_streamer(message.channel).on_ended(message, follow=following)
        if end is StreamEnd.RESTARTED and task is not None:
            return [task]
        if end is not StreamEnd.FINISHED or not in_view:
            return []
        if message.error is not None:
            self.log.info("Stream %s ended: %s", message.source_key, message.error)
            return [self._notify(f"Log stream ended: {message.error}")]
        if message.channel is StreamChannel.MULTI:
            return []
        return [self._notify("Log stream ended")]

    # ------------------------------------------------------------------
    # Fetch results
    # ------------------------------------------------------------------

    def _on_namespaces(self, message: NamespacesLoaded) -> list[Task]:
        state = self.state
        state.loading = False
        if message.error is not None:
            state.error = str(message.error)
            return []
        state.namespaces.set_items(message.namespaces)
        state.error = ""
        return []

    def _on_pods(self, message: PodsLoaded) -> list[Task]:
        state = self.state
        if message.namespace != state.namespace:
            return []
        state.loading = False
        if message.error is not None:
            state.error = str(message.error)
            return []
        # Replacing items under an active filter would move the selection.
        if not state.pods.filter_active:
            state.pods.set_items(message.pods)
        state.error = ""
        return []

    def _on_pod_details(self, message: PodDetailsLoaded) -> list[Task]:
        state = self.state
        if state.view is not ViewState.POD_DETAILS or message.name != state.selected_pod:
            return []
        state.loading = False
        if message.error is not None:
            state.error = str(message.error)
            return []
        state.pod_details.pod = message.pod
        state.pod_details.events = message.events
        state.pod_details.metrics = state.metrics.get(state.selected_pod)
        state.error = ""
        return []

    def _on_metrics(self, message: MetricsLoaded) -> list[Task]:
        if message.error is not None:
            self.log.debug("Metrics unavailable: %s", message.error)
            self.state.metrics = {}
            return []
        self.state.metrics = message.metrics
        return []

    def _on_deployments(self, message: DeploymentsLoaded) -> list[Task]:
        state = self.state
        if message.namespace != state.namespace:
            return []
        state.loading = False
        if message.error is not None:
            state.error = str(message.error)
            return []
        state.deployments.set_items(message.deployments)
        state.error = ""
        return []

    def _on_deployment_details(self, message: DeploymentDetailsLoaded) -> list[Task]:
        state = self.state
        if state.view is not ViewState.DEPLOYMENT_DETAILS or message.name != state.selected_deployment:
            return []
        state.loading = False
        if message.error is not None:
            state.error = str(message.error)
            return []
        state.deployment_details.deployment = message.deployment
        state.deployment_details.pods = message.pods
        state.error = ""
        return []

    def _on_services(self, message: ServicesLoaded) -> list[Task]:
        state = self.state
        if message.namespace != state.namespace:
            return []
        state.loading = False
        if message.error is not None:
            state.error = str(message.error)
            return []
        state.services.set_items(message.services)
        state.error = ""
        return []

    def _on_service_details(self, message: ServiceDetailsLoaded) -> list[Task]:
        state = self.state
        if state.view is not ViewState.SERVICE_DETAILS or message.name != state.selected_service:
            return []
        state.loading = False
        if message.error is not None:
            state.error = str(message.error)
            return []
        state.service_details.service = message.service
        state.service_details.pods = message.pods
        state.error = ""
        return []

    def _on_events(self, message: EventsLoaded) -> list[Task]:
        state = self.state
        if message.namespace != state.namespace:
            return []
        state.loading = False
        if message.error is not None:
            state.error = str(message.error)
            return []
        state.events.set_events(message.events)
        state.error = ""
        return []

    def _on_remote_containers(self, message: RemoteContainersLoaded) -> list[Task]:
        state = self.state
        if state.remote is None:
            return []
        state.loading = False
        if message.error is not None:
            state.error = str(message.error)
            return []
        state.remote_containers.set_items(message.containers)
        state.error = ""
        return []

    def _on_node_info(self, message: NodeInfoLoaded) -> list[Task]:
        state = self.state
        if state.remote is None:
            return []
        if message.error is not None:
            self.log.debug("Node info unavailable: %s", message.error)
            if state.view is ViewState.NODE_INFO:
                state.loading = False
                state.error = str(message.error)
            return []
        state.node_info = message.info
        if state.view is ViewState.NODE_INFO:
            state.loading = False
            state.error = ""
        return []

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _on_mutation(self, message: MutationDone) -> list[Task]:
        success, failure = _MUTATION_VERBS[message.kind]
        if message.error is not None:
            text = failure.format(target=message.target, detail=message.detail)
            return [self._notify(f"{text}: {message.error}", NotificationLevel.ERROR)]
        tasks = [
            self._notify(
                success.format(target=message.target, detail=message.detail),
                NotificationLevel.SUCCESS,
            )
        ]
        state = self.state
        if message.kind in (MutationKind.POD_DELETED, MutationKind.POD_RESTARTED):
            state.selected_pod = ""
            state.pod_details.clear()
            tasks.extend(self._switch(ViewState.PODS))
        elif message.kind is MutationKind.DEPLOYMENT_SCALED:
            if state.view in (ViewState.DEPLOYMENTS, ViewState.DEPLOYMENT_DETAILS):
                tasks.extend(self._fetch_view(state.view))
        else:
            state.selected_deployment = ""
            state.deployment_details.clear()
            tasks.extend(self._switch(ViewState.DEPLOYMENTS))
        return tasks

    # ------------------------------------------------------------------
    # Timers
    # ------------------------------------------------------------------

    def _on_refresh_tick(self, message: RefreshTick) -> list[Task]:
        decision = self.refresh.on_tick(self.state, message)
        tasks = self._fetch_view(message.view) if decision.fetch else []
        if decision.next_tick is not None:
            tasks.append(decision.next_tick)
        return tasks

    def _on_notification_expired(self, message: NotificationExpired) -> list[Task]:
        self.state.notifications.expire(message.notification_id)
        return []

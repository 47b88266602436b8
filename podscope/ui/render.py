"""Rich renderables for every view.

Pure functions of ``AppState``: the app calls them after each dispatched
message and pushes the result into its Static widgets.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from rich.align import Align
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from podscope.constants.enums import ConnectionStatus, NotificationLevel, PodPhase, ViewState
from podscope.constants.values import (
    APP_TITLE,
    STATUS_CONNECTED,
    STATUS_CONNECTING,
    STATUS_DISCONNECTED,
    STATUS_ERROR,
)
from podscope.keyboard.keys import FOOTER_HINTS
from podscope.models.core.resources import Pod
from podscope.models.state.app_state import AppState
from podscope.utils.resource_parser import format_cpu, format_memory
from podscope.viewers.list_model import ListModel
from podscope.viewers.log_viewer import LogViewer

T = TypeVar("T")

_STATUS_MARKUP: dict[ConnectionStatus, str] = {
    ConnectionStatus.CONNECTED: STATUS_CONNECTED,
    ConnectionStatus.CONNECTING: STATUS_CONNECTING,
    ConnectionStatus.DISCONNECTED: STATUS_DISCONNECTED,
    ConnectionStatus.ERROR: STATUS_ERROR,
}

_NAV_ITEMS: tuple[tuple[str, str, ViewState], ...] = (
    ("1", "Namespaces", ViewState.NAMESPACES),
    ("2", "Pods", ViewState.PODS),
    ("3", "Deployments", ViewState.DEPLOYMENTS),
    ("4", "Services", ViewState.SERVICES),
    ("5", "Events", ViewState.EVENTS),
    ("9", "SSH Hosts", ViewState.SSH_HOSTS),
)

_TOAST_STYLES: dict[NotificationLevel, str] = {
    NotificationLevel.INFO: "cyan",
    NotificationLevel.SUCCESS: "green",
    NotificationLevel.WARNING: "yellow",
    NotificationLevel.ERROR: "red",
}


def _status_style(status: str) -> str:
    if status in (PodPhase.RUNNING.value, "Active", "running", PodPhase.SUCCEEDED.value, "Completed"):
        return "green"
    if status in (PodPhase.PENDING.value, "ContainerCreating", "Terminating", "created"):
        return "yellow"
    return "red"


# ============================================================================
# Chrome
# ============================================================================


def render_sidebar(state: AppState) -> RenderableType:
    lines = Text()
    lines.append(f"{APP_TITLE}\n\n", style="bold cyan")
    lines.append_text(Text.from_markup(_STATUS_MARKUP[state.connection]))
    lines.append("\n")
    if state.config_name:
        lines.append(f"config: {state.config_name}\n", style="dim")
    if state.cluster_info is not None:
        lines.append(f"context: {state.cluster_info.context}\n", style="dim")
        if state.cluster_info.version:
            lines.append(f"version: {state.cluster_info.version}\n", style="dim")
    if state.namespace:
        lines.append(f"namespace: {state.namespace}\n", style="dim")
    if state.remote_host is not None and state.remote is not None:
        lines.append(f"ssh: {state.remote_host.target}\n", style="dim")
    lines.append("\n")
    for key, label, view in _NAV_ITEMS:
        style = "bold reverse" if state.view is view else ""
        lines.append(f" {key} {label} \n", style=style)
    return lines


def render_footer(state: AppState) -> RenderableType:
    return Text(FOOTER_HINTS.get(state.view, ""), style="dim")


def render_toast(state: AppState) -> RenderableType:
    notification = state.notifications.current
    if notification is None:
        return Text("")
    return Text(notification.message, style=f"bold {_TOAST_STYLES[notification.level]}")


# ============================================================================
# Shared pieces
# ============================================================================


def _title(text: str, extra: str = "") -> Text:
    title = Text(text, style="bold")
    if extra:
        title.append(f"  {extra}", style="dim")
    return title


def _error_line(state: AppState) -> RenderableType | None:
    if not state.error:
        return None
    return Text(f"Error: {state.error}", style="bold red")


def _list_table(
    model: ListModel[T],
    columns: tuple[str, ...],
    row: Callable[[T], tuple[RenderableType, ...]],
    height: int,
) -> Table:
    """Table of the list's visible items, scrolled to keep the cursor shown."""
    table = Table(expand=True, box=None, header_style="bold cyan", pad_edge=False)
    for column in columns:
        table.add_column(column, no_wrap=True)
    items = model.visible_items
    rows = max(height, 1)
    start = max(0, min(model.cursor - rows // 2, len(items) - rows))
    for index, item in enumerate(items[start : start + rows], start=start):
        table.add_row(*row(item), style="reverse" if index == model.cursor else None)
    return table


def _filter_line(model: ListModel) -> RenderableType | None:
    if model.editing_filter:
        return model.filter.render(placeholder="filter...")
    if model.filter_value:
        return Text(f"filter: {model.filter_value}  (esc to clear)", style="yellow")
    return None


def _list_view(
    state: AppState,
    model: ListModel[T],
    columns: tuple[str, ...],
    row: Callable[[T], tuple[RenderableType, ...]],
    height: int,
    extra: str = "",
) -> RenderableType:
    parts: list[RenderableType] = [_title(f"{model.title} ({len(model)})", extra)]
    filter_line = _filter_line(model)
    if filter_line is not None:
        parts.append(filter_line)
    error = _error_line(state)
    if error is not None:
        parts.append(error)
    if state.loading and not model.items:
        parts.append(Text("Loading...", style="dim"))
    parts.append(_list_table(model, columns, row, height - len(parts) - 1))
    return Group(*parts)


def _key_values(rows: list[tuple[str, str]]) -> Table:
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold cyan", no_wrap=True)
    table.add_column()
    for key, value in rows:
        table.add_row(key, value)
    return table


# ============================================================================
# Views
# ============================================================================


def _render_config_select(state: AppState, height: int) -> RenderableType:
    return _list_view(
        state,
        state.kubeconfigs,
        ("NAME", "PATH", "CONTEXT"),
        lambda entry: (entry.name, entry.path, entry.context or "-"),
        height,
        extra="select a kubeconfig",
    )


def _render_connecting(state: AppState, _height: int) -> RenderableType:
    target = state.config_name if state.view is ViewState.CONNECTING else (
        state.remote_host.target if state.remote_host else ""
    )
    return Align.center(Text(f"Connecting to {target}...", style="bold yellow"), vertical="middle")


def _render_main(state: AppState, _height: int) -> RenderableType:
    message = Text(state.error or "Not connected", style="bold red")
    return Panel(
        Group(message, Text(""), Text("r: retry • esc: back • q: quit", style="dim")),
        title="Connection failed",
        border_style="red",
    )


def _pod_row(state: AppState) -> Callable[[Pod], tuple[RenderableType, ...]]:
    def _row(pod: Pod) -> tuple[RenderableType, ...]:
        cells: tuple[RenderableType, ...] = (
            pod.name,
            pod.ready,
            Text(pod.status, style=_status_style(pod.status)),
            str(pod.restarts),
            pod.age,
            pod.node,
        )
        if state.show_metrics:
            metrics = state.metrics.get(pod.name)
            cells += (
                format_cpu(metrics.cpu_mcores) if metrics else "-",
                format_memory(metrics.memory_bytes) if metrics else "-",
            )
        return cells

    return _row


def _render_pods(state: AppState, height: int) -> RenderableType:
    columns = ("NAME", "READY", "STATUS", "RESTARTS", "AGE", "NODE")
    if state.show_metrics:
        columns += ("CPU", "MEMORY")
    return _list_view(state, state.pods, columns, _pod_row(state), height, extra=state.namespace)


def _render_pod_details(state: AppState, _height: int) -> RenderableType:
    details = state.pod_details
    pod = details.pod
    parts: list[RenderableType] = [_title(f"Pod {state.selected_pod}")]
    error = _error_line(state)
    if error is not None:
        parts.append(error)
    if pod is None:
        parts.append(Text("Loading...", style="dim"))
        return Group(*parts)
    rows = [
        ("Namespace", pod.namespace),
        ("Status", pod.status),
        ("Ready", pod.ready),
        ("Restarts", str(pod.restarts)),
        ("Node", pod.node or "-"),
        ("IP", pod.ip or "-"),
        ("Age", pod.age),
    ]
    if details.metrics is not None:
        rows.append(
            ("Usage", f"{format_cpu(details.metrics.cpu_mcores)} / {format_memory(details.metrics.memory_bytes)}")
        )
    parts.append(_key_values(rows))
    containers = Table(title="Containers", expand=True, box=None, header_style="bold cyan")
    for column in ("NAME", "IMAGE", "STATE", "READY", "RESTARTS", "PORTS"):
        containers.add_column(column)
    for container in pod.containers:
        containers.add_row(
            container.name,
            container.image,
            Text(container.state, style=_status_style(container.state)),
            "yes" if container.ready else "no",
            str(container.restart_count),
            ", ".join(container.ports) or "-",
        )
    parts.append(containers)
    events = Table(title="Events", expand=True, box=None, header_style="bold cyan")
    for column in ("TYPE", "REASON", "AGE", "MESSAGE"):
        events.add_column(column)
    for event in details.events:
        style = "yellow" if event.type == "Warning" else None
        events.add_row(event.type, event.reason, event.age, event.message, style=style)
    parts.append(events)
    return Group(*parts)


def _render_log_viewer(state: AppState, viewer: LogViewer, title: str, height: int) -> RenderableType:
    flags = [
        "following" if viewer.following else "paused",
        "timestamps" if viewer.timestamps else "",
    ]
    if viewer.search_query:
        position = viewer.match_index + 1 if viewer.matches else 0
        flags.append(f"search '{viewer.search_query}' {position}/{len(viewer.matches)}")
    parts: list[RenderableType] = [_title(title, " • ".join(flag for flag in flags if flag))]
    error = _error_line(state)
    if error is not None:
        parts.append(error)
    if state.loading and not viewer.lines:
        parts.append(Text("Loading logs...", style="dim"))
    start, lines = viewer.window(max(height - len(parts) - 1, 1))
    current = viewer.current_match_line
    matches = set(viewer.matches)
    body = Text()
    for index, line in enumerate(lines, start=start):
        if index == current:
            style = "black on yellow"
        elif index in matches:
            style = "yellow"
        else:
            style = ""
        body.append(line + "\n", style=style)
    parts.append(body)
    return Group(*parts)


def _render_logs(state: AppState, height: int) -> RenderableType:
    viewer = state.logs
    title = f"Logs {viewer.pod}"
    if viewer.container:
        title += f" [{viewer.container}]"
    return _render_log_viewer(state, viewer, title, height)


def _render_remote_logs(state: AppState, height: int) -> RenderableType:
    container = state.selected_container
    title = f"Container logs {container.name} ({container.short_id})" if container else "Container logs"
    return _render_log_viewer(state, state.remote_logs, title, height)


def _render_multi_logs(state: AppState, height: int) -> RenderableType:
    viewer = state.multi_logs
    flags = [
        f"{state.multi_stream.active_count} active",
        "following" if viewer.following else "paused",
    ]
    parts: list[RenderableType] = [_title(f"Multi-pod logs ({len(viewer.pods)} pods)", " • ".join(flags))]
    body = Text()
    for entry in viewer.window(max(height - 2, 1)):
        body.append(entry.text + "\n", style="bold magenta" if entry.header else "")
    parts.append(body)
    return Group(*parts)


def _render_deployments(state: AppState, height: int) -> RenderableType:
    return _list_view(
        state,
        state.deployments,
        ("NAME", "READY", "UP-TO-DATE", "AVAILABLE", "AGE"),
        lambda deployment: (
            deployment.name,
            deployment.ready,
            str(deployment.updated_replicas),
            str(deployment.available_replicas),
            deployment.age,
        ),
        height,
        extra=state.namespace,
    )


def _pods_table(pods: list[Pod]) -> Table:
    table = Table(title="Pods", expand=True, box=None, header_style="bold cyan")
    for column in ("NAME", "READY", "STATUS", "RESTARTS", "AGE"):
        table.add_column(column)
    for pod in pods:
        table.add_row(
            pod.name, pod.ready, Text(pod.status, style=_status_style(pod.status)), str(pod.restarts), pod.age
        )
    return table


def _render_deployment_details(state: AppState, _height: int) -> RenderableType:
    deployment = state.deployment_details.deployment
    parts: list[RenderableType] = [_title(f"Deployment {state.selected_deployment}")]
    error = _error_line(state)
    if error is not None:
        parts.append(error)
    if deployment is None:
        parts.append(Text("Loading...", style="dim"))
        return Group(*parts)
    parts.append(
        _key_values(
            [
                ("Namespace", deployment.namespace),
                ("Replicas", f"{deployment.ready} ready, {deployment.updated_replicas} updated"),
                ("Strategy", deployment.strategy or "-"),
                ("Selector", ",".join(f"{k}={v}" for k, v in deployment.selector.items()) or "-"),
                ("Images", ", ".join(deployment.images) or "-"),
                ("Conditions", "\n".join(deployment.conditions) or "-"),
                ("Age", deployment.age),
            ]
        )
    )
    parts.append(_pods_table(state.deployment_details.pods))
    return Group(*parts)


def _render_services(state: AppState, height: int) -> RenderableType:
    return _list_view(
        state,
        state.services,
        ("NAME", "TYPE", "CLUSTER-IP", "EXTERNAL-IP", "PORTS", "AGE"),
        lambda service: (
            service.name,
            service.type,
            service.cluster_ip or "-",
            service.external_ip or "-",
            service.ports_display,
            service.age,
        ),
        height,
        extra=state.namespace,
    )


def _render_service_details(state: AppState, _height: int) -> RenderableType:
    service = state.service_details.service
    parts: list[RenderableType] = [_title(f"Service {state.selected_service}")]
    error = _error_line(state)
    if error is not None:
        parts.append(error)
    if service is None:
        parts.append(Text("Loading...", style="dim"))
        return Group(*parts)
    parts.append(
        _key_values(
            [
                ("Namespace", service.namespace),
                ("Type", service.type),
                ("Cluster IP", service.cluster_ip or "-"),
                ("External IP", service.external_ip or "-"),
                ("Ports", service.ports_display or "-"),
                ("Selector", ",".join(f"{k}={v}" for k, v in service.selector.items()) or "-"),
                ("Age", service.age),
            ]
        )
    )
    parts.append(_pods_table(state.service_details.pods))
    return Group(*parts)


def _render_events(state: AppState, height: int) -> RenderableType:
    events = state.events
    extra = " • ".join(
        [
            "following" if events.following else "paused",
            f"kind: {events.kind.value}",
            f"warnings only ({events.warning_count})" if events.warnings_only else f"{events.warning_count} warnings",
        ]
    )
    return _list_view(
        state,
        events.list,
        ("LAST SEEN", "TYPE", "REASON", "OBJECT", "COUNT", "MESSAGE"),
        lambda event: (
            event.last_seen or event.age,
            Text(event.type, style="yellow" if event.is_warning else "green"),
            event.reason,
            event.object,
            str(event.count),
            event.message,
        ),
        height,
        extra=extra,
    )


def _render_ssh_hosts(state: AppState, height: int) -> RenderableType:
    return _list_view(
        state,
        state.ssh_hosts,
        ("NAME", "TARGET", "PORT", "KEY"),
        lambda host: (host.name, host.target, str(host.port), host.key_path or "-"),
        height,
    )


def _render_remote_containers(state: AppState, height: int) -> RenderableType:
    info = state.node_info
    extra = ""
    if info is not None:
        extra = " | ".join(part for part in (info.hostname, info.os, info.memory_total) if part)
    return _list_view(
        state,
        state.remote_containers,
        ("ID", "NAME", "STATE", "POD", "NAMESPACE", "CREATED"),
        lambda container: (
            container.short_id,
            container.name,
            Text(container.state, style=_status_style(container.state)),
            container.pod_name or "-",
            container.pod_namespace or "-",
            container.created,
        ),
        height,
        extra=extra,
    )


def _render_node_info(state: AppState, _height: int) -> RenderableType:
    info = state.node_info
    host = state.remote_host.name if state.remote_host else ""
    parts: list[RenderableType] = [_title(f"Node {host}")]
    error = _error_line(state)
    if error is not None:
        parts.append(error)
    if info is None:
        parts.append(Text("Loading...", style="dim"))
        return Group(*parts)
    parts.append(
        _key_values(
            [
                ("Hostname", info.hostname or "-"),
                ("OS", info.os or "-"),
                ("Kernel", info.kernel or "-"),
                ("Architecture", info.architecture or "-"),
                ("CPUs", str(info.cpu_count) if info.cpu_count else "-"),
                ("Memory", info.memory_total or "-"),
                ("Uptime", info.uptime or "-"),
                ("Runtime", info.runtime_version or "-"),
            ]
        )
    )
    return Group(*parts)


def _render_namespaces(state: AppState, height: int) -> RenderableType:
    return _list_view(
        state,
        state.namespaces,
        ("NAME", "STATUS", "AGE"),
        lambda namespace: (
            namespace.name,
            Text(namespace.status, style=_status_style(namespace.status)),
            namespace.age,
        ),
        height,
    )


_VIEW_RENDERERS: dict[ViewState, Callable[[AppState, int], RenderableType]] = {
    ViewState.CONFIG_SELECT: _render_config_select,
    ViewState.CONNECTING: _render_connecting,
    ViewState.NAMESPACES: _render_namespaces,
    ViewState.PODS: _render_pods,
    ViewState.POD_DETAILS: _render_pod_details,
    ViewState.LOGS: _render_logs,
    ViewState.MULTI_POD_LOGS: _render_multi_logs,
    ViewState.DEPLOYMENTS: _render_deployments,
    ViewState.DEPLOYMENT_DETAILS: _render_deployment_details,
    ViewState.SERVICES: _render_services,
    ViewState.SERVICE_DETAILS: _render_service_details,
    ViewState.EVENTS: _render_events,
    ViewState.SSH_HOSTS: _render_ssh_hosts,
    ViewState.SSH_CONNECTING: _render_connecting,
    ViewState.REMOTE_CONTAINERS: _render_remote_containers,
    ViewState.REMOTE_LOGS: _render_remote_logs,
    ViewState.NODE_INFO: _render_node_info,
    ViewState.MAIN: _render_main,
}


def render_content(state: AppState, height: int = 30) -> RenderableType:
    """Current view, or the visible modal centered over it."""
    modal = state.modals.visible_modal()
    if modal is not None:
        return Align.center(modal.render(), vertical="middle")
    return _VIEW_RENDERERS[state.view](state, height)


__all__ = [
    "render_content",
    "render_footer",
    "render_sidebar",
    "render_toast",
]

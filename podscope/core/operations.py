"""Task factories wrapping collaborator calls.

Each factory returns a Task whose coroutine calls the client and resolves to
exactly one result message. Failures are logged and carried in the message's
``error`` field, never raised into the runtime.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from podscope.clients.base import (
    ClusterClient,
    CommandError,
    LogOptions,
    RemoteHostClient,
)
from podscope.constants.enums import MutationKind, StreamChannel
from podscope.core.messages import (
    ClusterConnected,
    DeploymentDetailsLoaded,
    DeploymentsLoaded,
    EventsLoaded,
    LogsLoaded,
    Message,
    MetricsLoaded,
    MutationDone,
    NamespacesLoaded,
    NodeInfoLoaded,
    PodDetailsLoaded,
    PodsLoaded,
    RemoteConnected,
    RemoteContainersLoaded,
    ServiceDetailsLoaded,
    ServicesLoaded,
)
from podscope.core.streaming import CancelScope, LineQueue, Producer, ProducerFactory
from podscope.core.tasks import Task
from podscope.models.state.app_settings import KubeConfigEntry, SSHHost

logger = logging.getLogger(__name__)

ClusterFactory = Callable[[KubeConfigEntry], ClusterClient]
RemoteFactory = Callable[[SSHHost], RemoteHostClient]


def _guarded(
    name: str,
    body: Callable[[], Awaitable[Message]],
    failed: Callable[[Exception], Message],
) -> Task:
    async def _run() -> Message:
        try:
            return await body()
        except Exception as exc:
            logger.warning("%s failed: %s", name, exc)
            return failed(exc)

    return Task(_run, name=name)


# ============================================================================
# Connection
# ============================================================================


def connect_cluster(entry: KubeConfigEntry, factory: ClusterFactory) -> Task:
    """Build a client for ``entry``, check the API and probe metrics support."""

    async def _connect() -> Message:
        client = factory(entry)
        if not await client.check_connection():
            raise CommandError(f"cannot reach the cluster in {entry.path}")
        info = await client.cluster_info()
        metrics = await client.metrics_available()
        logger.info("Connected to %s (context %s)", entry.name, info.context)
        return ClusterConnected(
            config_name=entry.name,
            client=client,
            info=info,
            metrics_available=metrics,
        )

    return _guarded(
        f"connect:{entry.name}",
        _connect,
        lambda exc: ClusterConnected(config_name=entry.name, error=exc),
    )


def connect_remote(host: SSHHost, client: RemoteHostClient) -> Task:
    async def _connect() -> Message:
        await client.connect()
        return RemoteConnected(host_name=host.name, client=client)

    return _guarded(
        f"ssh-connect:{host.name}",
        _connect,
        lambda exc: RemoteConnected(host_name=host.name, client=client, error=exc),
    )


# ============================================================================
# Cluster fetches
# ============================================================================


def fetch_namespaces(client: ClusterClient) -> Task:
    async def _fetch() -> Message:
        return NamespacesLoaded(namespaces=await client.list_namespaces())

    return _guarded("fetch-namespaces", _fetch, lambda exc: NamespacesLoaded(error=exc))


def fetch_pods(client: ClusterClient, namespace: str) -> Task:
    async def _fetch() -> Message:
        return PodsLoaded(namespace=namespace, pods=await client.list_pods(namespace))

    return _guarded("fetch-pods", _fetch, lambda exc: PodsLoaded(namespace=namespace, error=exc))


def fetch_pod_details(client: ClusterClient, namespace: str, name: str) -> Task:
    async def _fetch() -> Message:
        pod = await client.get_pod(namespace, name)
        events = await client.pod_events(namespace, name)
        return PodDetailsLoaded(name=name, pod=pod, events=events)

    return _guarded("fetch-pod-details", _fetch, lambda exc: PodDetailsLoaded(name=name, error=exc))


def fetch_metrics(client: ClusterClient, namespace: str) -> Task:
    async def _fetch() -> Message:
        return MetricsLoaded(metrics=await client.pod_metrics(namespace))

    return _guarded("fetch-metrics", _fetch, lambda exc: MetricsLoaded(error=exc))


def fetch_pod_logs(client: ClusterClient, namespace: str, pod: str, options: LogOptions, source_key: str) -> Task:
    async def _fetch() -> Message:
        lines = await client.pod_logs(namespace, pod, options)
        return LogsLoaded(channel=StreamChannel.POD, source_key=source_key, lines=lines)

    return _guarded(
        "fetch-logs",
        _fetch,
        lambda exc: LogsLoaded(channel=StreamChannel.POD, source_key=source_key, error=exc),
    )


def fetch_deployments(client: ClusterClient, namespace: str) -> Task:
    async def _fetch() -> Message:
        return DeploymentsLoaded(namespace=namespace, deployments=await client.list_deployments(namespace))

    return _guarded(
        "fetch-deployments", _fetch, lambda exc: DeploymentsLoaded(namespace=namespace, error=exc)
    )


def fetch_deployment_details(client: ClusterClient, namespace: str, name: str) -> Task:
    async def _fetch() -> Message:
        deployment = await client.get_deployment(namespace, name)
        pods = await client.list_pods(namespace, deployment.selector) if deployment.selector else []
        return DeploymentDetailsLoaded(name=name, deployment=deployment, pods=pods)

    return _guarded(
        "fetch-deployment-details", _fetch, lambda exc: DeploymentDetailsLoaded(name=name, error=exc)
    )


def fetch_services(client: ClusterClient, namespace: str) -> Task:
    async def _fetch() -> Message:
        return ServicesLoaded(namespace=namespace, services=await client.list_services(namespace))

    return _guarded("fetch-services", _fetch, lambda exc: ServicesLoaded(namespace=namespace, error=exc))


def fetch_service_details(client: ClusterClient, namespace: str, name: str) -> Task:
    async def _fetch() -> Message:
        service = await client.get_service(namespace, name)
        # A service without a selector has no matching pods.
        pods = await client.list_pods(namespace, service.selector) if service.selector else []
        return ServiceDetailsLoaded(name=name, service=service, pods=pods)

    return _guarded(
        "fetch-service-details", _fetch, lambda exc: ServiceDetailsLoaded(name=name, error=exc)
    )


def fetch_events(client: ClusterClient, namespace: str) -> Task:
    async def _fetch() -> Message:
        return EventsLoaded(namespace=namespace, events=await client.list_events(namespace))

    return _guarded("fetch-events", _fetch, lambda exc: EventsLoaded(namespace=namespace, error=exc))


# ============================================================================
# Mutations
# ============================================================================


def _mutation(
    kind: MutationKind,
    target: str,
    call: Callable[[], Awaitable[None]],
    detail: str = "",
) -> Task:
    async def _apply() -> Message:
        await call()
        logger.info("%s: %s %s", kind.value, target, detail)
        return MutationDone(kind=kind, target=target, detail=detail)

    return _guarded(
        f"{kind.value}:{target}",
        _apply,
        lambda exc: MutationDone(kind=kind, target=target, detail=detail, error=exc),
    )


def delete_pod(client: ClusterClient, namespace: str, name: str) -> Task:
    return _mutation(MutationKind.POD_DELETED, name, lambda: client.delete_pod(namespace, name))


def restart_pod(client: ClusterClient, namespace: str, name: str) -> Task:
    """Restart by deletion; the owning controller recreates the pod."""
    return _mutation(MutationKind.POD_RESTARTED, name, lambda: client.delete_pod(namespace, name))


def scale_deployment(client: ClusterClient, namespace: str, name: str, replicas: int) -> Task:
    return _mutation(
        MutationKind.DEPLOYMENT_SCALED,
        name,
        lambda: client.scale_deployment(namespace, name, replicas),
        detail=f"{replicas} replica(s)",
    )


def restart_deployment(client: ClusterClient, namespace: str, name: str) -> Task:
    return _mutation(
        MutationKind.DEPLOYMENT_RESTARTED, name, lambda: client.restart_deployment(namespace, name)
    )


def delete_deployment(client: ClusterClient, namespace: str, name: str) -> Task:
    return _mutation(
        MutationKind.DEPLOYMENT_DELETED, name, lambda: client.delete_deployment(namespace, name)
    )


# ============================================================================
# Remote host fetches
# ============================================================================


def fetch_remote_containers(client: RemoteHostClient) -> Task:
    async def _fetch() -> Message:
        return RemoteContainersLoaded(containers=await client.list_containers())

    return _guarded("fetch-remote-containers", _fetch, lambda exc: RemoteContainersLoaded(error=exc))


def fetch_node_info(client: RemoteHostClient) -> Task:
    async def _fetch() -> Message:
        return NodeInfoLoaded(info=await client.node_info())

    return _guarded("fetch-node-info", _fetch, lambda exc: NodeInfoLoaded(error=exc))


def fetch_remote_logs(client: RemoteHostClient, container_id: str, options: LogOptions) -> Task:
    async def _fetch() -> Message:
        lines = await client.container_logs(container_id, options)
        return LogsLoaded(channel=StreamChannel.REMOTE, source_key=container_id, lines=lines)

    return _guarded(
        "fetch-remote-logs",
        _fetch,
        lambda exc: LogsLoaded(channel=StreamChannel.REMOTE, source_key=container_id, error=exc),
    )


# ============================================================================
# Stream producers
# ============================================================================


def pod_log_producer(client: ClusterClient, namespace: str, pod: str, options: LogOptions) -> ProducerFactory:
    """Producer factory following one pod container; the argument is the tail size."""

    def _factory(tail_lines: int) -> Producer:
        async def _produce(out: LineQueue, scope: CancelScope) -> None:
            await client.stream_pod_logs(namespace, pod, options.with_tail(tail_lines), out, scope)

        return _produce

    return _factory


def remote_log_producer(client: RemoteHostClient, container_id: str, options: LogOptions) -> ProducerFactory:
    def _factory(tail_lines: int) -> Producer:
        async def _produce(out: LineQueue, scope: CancelScope) -> None:
            await client.stream_container_logs(container_id, options.with_tail(tail_lines), out, scope)

        return _produce

    return _factory

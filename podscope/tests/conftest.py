"""Shared fixtures for podscope tests."""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from podscope.clients.base import ClusterClient, RemoteHostClient
from podscope.core.dispatcher import Dispatcher
from podscope.models.core.resources import (
    ClusterInfo,
    ContainerInfo,
    Deployment,
    Event,
    Namespace,
    NodeInfo,
    Pod,
    RemoteContainer,
    Service,
)
from podscope.models.state.app_settings import AppConfig, KubeConfigEntry, SSHHost

# =============================================================================
# Sample resources
# =============================================================================


def sample_pods() -> list[Pod]:
    return [
        Pod(
            name="api-1",
            namespace="default",
            status="Running",
            ready="1/1",
            containers=[ContainerInfo(name="api", ready=True, state="running")],
        ),
        Pod(
            name="web-7",
            namespace="default",
            status="Running",
            ready="2/2",
            containers=[
                ContainerInfo(name="web", ready=True, state="running"),
                ContainerInfo(name="sidecar", ready=True, state="running"),
            ],
        ),
        Pod(
            name="worker-3",
            namespace="default",
            status="Pending",
            ready="0/1",
            containers=[ContainerInfo(name="worker")],
        ),
    ]


@pytest.fixture
def pods() -> list[Pod]:
    return sample_pods()


# =============================================================================
# Fake clients
# =============================================================================


def make_cluster_client(namespace: str = "default") -> MagicMock:
    """ClusterClient double whose async calls return canned resources."""
    client = MagicMock(spec=ClusterClient)
    client.namespace = namespace
    client.set_namespace = MagicMock(side_effect=lambda value: setattr(client, "namespace", value))
    client.check_connection = AsyncMock(return_value=True)
    client.cluster_info = AsyncMock(return_value=ClusterInfo(context="dev-ctx", version="v1.30.0"))
    client.metrics_available = AsyncMock(return_value=True)
    client.list_namespaces = AsyncMock(
        return_value=[Namespace(name="default"), Namespace(name="kube-system")]
    )
    client.list_pods = AsyncMock(return_value=sample_pods())
    client.get_pod = AsyncMock(return_value=sample_pods()[1])
    client.pod_events = AsyncMock(return_value=[])
    client.pod_logs = AsyncMock(return_value=["line 1", "line 2"])
    client.stream_pod_logs = AsyncMock(return_value=None)
    client.delete_pod = AsyncMock(return_value=None)
    client.list_deployments = AsyncMock(
        return_value=[Deployment(name="web", namespace="default", replicas=2, ready_replicas=2)]
    )
    client.get_deployment = AsyncMock(
        return_value=Deployment(name="web", namespace="default", replicas=2, selector={"app": "web"})
    )
    client.scale_deployment = AsyncMock(return_value=None)
    client.restart_deployment = AsyncMock(return_value=None)
    client.delete_deployment = AsyncMock(return_value=None)
    client.list_services = AsyncMock(return_value=[Service(name="web", namespace="default")])
    client.get_service = AsyncMock(return_value=Service(name="web", namespace="default"))
    client.list_events = AsyncMock(
        return_value=[Event(name="e1", namespace="default", type="Warning", reason="BackOff")]
    )
    client.pod_metrics = AsyncMock(return_value={})
    return client


def make_remote_client() -> MagicMock:
    client = MagicMock(spec=RemoteHostClient)
    client.connect = AsyncMock(return_value=None)
    client.list_containers = AsyncMock(
        return_value=[
            RemoteContainer(id="abcdef0123456789", name="web", state="running", pod_name="web-7"),
        ]
    )
    client.node_info = AsyncMock(return_value=NodeInfo(hostname="node-1", cpu_count=4))
    client.container_logs = AsyncMock(return_value=["remote 1"])
    client.stream_container_logs = AsyncMock(return_value=None)
    return client


@pytest.fixture
def cluster_client() -> MagicMock:
    return make_cluster_client()


@pytest.fixture
def remote_client() -> MagicMock:
    return make_remote_client()


# =============================================================================
# Configuration and dispatcher
# =============================================================================


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(
        kubeconfigs=[
            KubeConfigEntry(name="dev", path="/tmp/dev-kubeconfig"),
            KubeConfigEntry(name="prod", path="/tmp/prod-kubeconfig"),
        ],
        sshHosts=[SSHHost(name="node-1", host="10.0.0.5")],
    )


@pytest.fixture
def dispatcher_factory(
    app_config: AppConfig,
    cluster_client: MagicMock,
    remote_client: MagicMock,
) -> Callable[..., Dispatcher]:
    def _build(config: AppConfig | None = None) -> Dispatcher:
        return Dispatcher(
            config or app_config,
            cluster_factory=lambda entry: cluster_client,
            remote_factory=lambda host: remote_client,
        )

    return _build


@pytest.fixture
def dispatcher(dispatcher_factory: Callable[..., Dispatcher]) -> Dispatcher:
    return dispatcher_factory()

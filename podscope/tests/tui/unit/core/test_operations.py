"""Tests for the task factories in podscope.core.operations."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from podscope.clients.base import CommandError, LogOptions
from podscope.constants.enums import MutationKind, StreamChannel
from podscope.core import operations
from podscope.core.messages import (
    ClusterConnected,
    DeploymentDetailsLoaded,
    LogsLoaded,
    MutationDone,
    PodDetailsLoaded,
    PodsLoaded,
    RemoteConnected,
    ServiceDetailsLoaded,
)
from podscope.core.streaming import CancelScope, LineQueue
from podscope.models.core.resources import Service
from podscope.models.state.app_settings import KubeConfigEntry, SSHHost

# =============================================================================
# Connection
# =============================================================================


class TestConnectCluster:
    """Tests for connect_cluster."""

    @pytest.mark.asyncio
    async def test_success_carries_client_and_info(self, cluster_client: MagicMock) -> None:
        entry = KubeConfigEntry(name="dev", path="/tmp/dev")
        task = operations.connect_cluster(entry, lambda _: cluster_client)
        assert task.name == "connect:dev"

        message = await task.run()

        assert isinstance(message, ClusterConnected)
        assert message.error is None
        assert message.client is cluster_client
        assert message.info is not None
        assert message.info.context == "dev-ctx"
        assert message.metrics_available

    @pytest.mark.asyncio
    async def test_failed_check_becomes_command_error(self, cluster_client: MagicMock) -> None:
        cluster_client.check_connection = AsyncMock(return_value=False)
        entry = KubeConfigEntry(name="dev", path="/tmp/dev")

        message = await operations.connect_cluster(entry, lambda _: cluster_client).run()

        assert isinstance(message, ClusterConnected)
        assert message.client is None
        assert isinstance(message.error, CommandError)
        assert "/tmp/dev" in str(message.error)

    @pytest.mark.asyncio
    async def test_factory_error_is_reported(self) -> None:
        def _factory(entry: KubeConfigEntry) -> MagicMock:
            raise FileNotFoundError(entry.path)

        entry = KubeConfigEntry(name="dev", path="/missing")
        message = await operations.connect_cluster(entry, _factory).run()
        assert isinstance(message.error, FileNotFoundError)

    @pytest.mark.asyncio
    async def test_remote_connect_error_keeps_client(self, remote_client: MagicMock) -> None:
        remote_client.connect = AsyncMock(side_effect=CommandError("refused"))
        host = SSHHost(name="node-1", host="10.0.0.5")

        message = await operations.connect_remote(host, remote_client).run()

        assert isinstance(message, RemoteConnected)
        assert message.host_name == "node-1"
        assert message.client is remote_client
        assert str(message.error) == "refused"


# =============================================================================
# Fetches
# =============================================================================


class TestFetches:
    """Tests for cluster fetch tasks."""

    @pytest.mark.asyncio
    async def test_fetch_error_is_carried_in_message(self, cluster_client: MagicMock) -> None:
        cluster_client.list_pods = AsyncMock(side_effect=CommandError("timeout"))
        message = await operations.fetch_pods(cluster_client, "default").run()
        assert isinstance(message, PodsLoaded)
        assert message.namespace == "default"
        assert message.pods == []
        assert str(message.error) == "timeout"

    @pytest.mark.asyncio
    async def test_deployment_details_list_pods_by_selector(self, cluster_client: MagicMock) -> None:
        message = await operations.fetch_deployment_details(cluster_client, "default", "web").run()
        assert isinstance(message, DeploymentDetailsLoaded)
        assert message.name == "web"
        cluster_client.list_pods.assert_awaited_once_with("default", {"app": "web"})
        assert len(message.pods) == 3

    @pytest.mark.asyncio
    async def test_details_error_carries_requested_name(self, cluster_client: MagicMock) -> None:
        cluster_client.get_pod = AsyncMock(side_effect=CommandError("NotFound"))
        message = await operations.fetch_pod_details(cluster_client, "default", "gone-1").run()
        assert isinstance(message, PodDetailsLoaded)
        assert message.name == "gone-1"
        assert message.pod is None
        assert str(message.error) == "NotFound"

    @pytest.mark.asyncio
    async def test_service_without_selector_has_no_pods(self, cluster_client: MagicMock) -> None:
        cluster_client.get_service = AsyncMock(return_value=Service(name="ext", namespace="default"))
        message = await operations.fetch_service_details(cluster_client, "default", "ext").run()
        assert isinstance(message, ServiceDetailsLoaded)
        assert message.pods == []
        cluster_client.list_pods.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_pod_logs_carry_source_key(self, cluster_client: MagicMock) -> None:
        options = LogOptions(container="web", tail_lines=50)
        message = await operations.fetch_pod_logs(
            cluster_client, "default", "web-7", options, "default/web-7/web"
        ).run()
        assert isinstance(message, LogsLoaded)
        assert message.channel is StreamChannel.POD
        assert message.source_key == "default/web-7/web"
        assert message.lines == ["line 1", "line 2"]
        cluster_client.pod_logs.assert_awaited_once_with("default", "web-7", options)

    @pytest.mark.asyncio
    async def test_remote_logs_use_container_id_as_key(self, remote_client: MagicMock) -> None:
        message = await operations.fetch_remote_logs(remote_client, "abc123", LogOptions()).run()
        assert message.channel is StreamChannel.REMOTE
        assert message.source_key == "abc123"


# =============================================================================
# Mutations
# =============================================================================


class TestMutations:
    """Tests for delete, restart and scale tasks."""

    @pytest.mark.asyncio
    async def test_scale_reports_replica_detail(self, cluster_client: MagicMock) -> None:
        task = operations.scale_deployment(cluster_client, "default", "web", 3)
        assert task.name == "deployment-scaled:web"

        message = await task.run()

        assert isinstance(message, MutationDone)
        assert message.kind is MutationKind.DEPLOYMENT_SCALED
        assert message.detail == "3 replica(s)"
        assert message.error is None
        cluster_client.scale_deployment.assert_awaited_once_with("default", "web", 3)

    @pytest.mark.asyncio
    async def test_restart_pod_deletes_it(self, cluster_client: MagicMock) -> None:
        message = await operations.restart_pod(cluster_client, "default", "web-7").run()
        assert message.kind is MutationKind.POD_RESTARTED
        cluster_client.delete_pod.assert_awaited_once_with("default", "web-7")

    @pytest.mark.asyncio
    async def test_failed_mutation_is_not_raised(self, cluster_client: MagicMock) -> None:
        cluster_client.delete_deployment = AsyncMock(side_effect=CommandError("forbidden", 1))
        message = await operations.delete_deployment(cluster_client, "default", "web").run()
        assert message.kind is MutationKind.DEPLOYMENT_DELETED
        assert isinstance(message.error, CommandError)
        assert message.error.returncode == 1


# =============================================================================
# Producers
# =============================================================================


class TestProducers:
    """Tests for stream producer factories."""

    @pytest.mark.asyncio
    async def test_pod_producer_applies_tail(self, cluster_client: MagicMock) -> None:
        options = LogOptions(container="web", tail_lines=500)
        factory = operations.pod_log_producer(cluster_client, "default", "web-7", options)
        queue, scope = LineQueue(), CancelScope()

        await factory(0)(queue, scope)

        args = cluster_client.stream_pod_logs.await_args.args
        assert args[:2] == ("default", "web-7")
        assert args[2] == LogOptions(container="web", tail_lines=0)
        assert args[3] is queue
        assert args[4] is scope

    @pytest.mark.asyncio
    async def test_remote_producer_applies_tail(self, remote_client: MagicMock) -> None:
        factory = operations.remote_log_producer(remote_client, "abc123", LogOptions())
        await factory(100)(LineQueue(), CancelScope())
        args = remote_client.stream_container_logs.await_args.args
        assert args[0] == "abc123"
        assert args[1].tail_lines == 100

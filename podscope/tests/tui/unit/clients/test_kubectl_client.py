"""Tests for KubectlClient command building and result handling."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import pytest

from podscope.clients.base import CommandError, LogOptions
from podscope.clients.kubectl import KubectlClient
from podscope.core.streaming import CancelScope, LineQueue
from podscope.models.state.app_settings import KubeConfigEntry


@pytest.fixture
def client() -> KubectlClient:
    return KubectlClient(kubeconfig="/tmp/kube", context="dev")


def _json(payload: dict) -> str:
    return json.dumps(payload)


# =============================================================================
# Command plumbing
# =============================================================================


class TestCommandBuilding:
    """Tests for kubectl argument construction."""

    def test_kubeconfig_and_context(self, client: KubectlClient) -> None:
        assert client._command(("get", "pods")) == [
            "kubectl",
            "--kubeconfig",
            "/tmp/kube",
            "--context",
            "dev",
            "get",
            "pods",
        ]

    def test_no_context(self) -> None:
        client = KubectlClient(kubeconfig="/tmp/kube")
        assert "--context" not in client._command(("get", "pods"))

    def test_from_entry(self) -> None:
        client = KubectlClient.from_entry(KubeConfigEntry(name="dev", path="/tmp/kube", context="ctx"))
        assert client.kubeconfig == "/tmp/kube"
        assert client.context == "ctx"
        assert client.namespace == "default"

    def test_log_args(self) -> None:
        options = LogOptions(container="web", tail_lines=50, timestamps=True, follow=True)
        assert KubectlClient._log_args("web-7", "default", options) == (
            "logs",
            "web-7",
            "-n",
            "default",
            "--tail=50",
            "-c",
            "web",
            "--timestamps",
            "-f",
        )

    def test_selector_is_sorted(self) -> None:
        assert KubectlClient._selector({"tier": "web", "app": "shop"}) == "app=shop,tier=web"

    def test_set_namespace(self, client: KubectlClient) -> None:
        client.set_namespace("kube-system")
        assert client.namespace == "kube-system"


# =============================================================================
# Requests
# =============================================================================


class TestRequests:
    """Tests for requests with a patched kubectl runner."""

    @pytest.mark.asyncio
    async def test_list_pods_with_selector(self, client: KubectlClient) -> None:
        run = AsyncMock(return_value=_json({"items": []}))
        with patch.object(client, "_run_kubectl", run):
            assert await client.list_pods("default", {"app": "web"}) == []
        args = run.await_args.args[0]
        assert args[:6] == ("get", "pods", "-n", "default", "-l", "app=web")
        assert "-o" in args

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self, client: KubectlClient) -> None:
        with patch.object(client, "_run_kubectl", AsyncMock(return_value="not json")):
            with pytest.raises(CommandError, match="unexpected kubectl output"):
                await client.list_namespaces()

    @pytest.mark.asyncio
    async def test_check_connection_false_on_error(self, client: KubectlClient) -> None:
        with patch.object(client, "_run_kubectl", AsyncMock(side_effect=CommandError("refused"))):
            assert not await client.check_connection()

    @pytest.mark.asyncio
    async def test_cluster_info_prefers_configured_context(self, client: KubectlClient) -> None:
        outputs = ["other-ctx\n", "https://k8s:6443\n", _json({"serverVersion": {"gitVersion": "v1.30.1"}})]
        with patch.object(client, "_run_kubectl", AsyncMock(side_effect=outputs)):
            info = await client.cluster_info()
        assert info.context == "dev"
        assert info.server == "https://k8s:6443"
        assert info.version == "v1.30.1"

    @pytest.mark.asyncio
    async def test_pod_logs_split_lines(self, client: KubectlClient) -> None:
        run = AsyncMock(return_value="a\nb\n")
        with patch.object(client, "_run_kubectl", run):
            assert await client.pod_logs("default", "web-7", LogOptions(tail_lines=10)) == ["a", "b"]
        assert "-f" not in run.await_args.args[0]

    @pytest.mark.asyncio
    async def test_scale_deployment(self, client: KubectlClient) -> None:
        run = AsyncMock(return_value="")
        with patch.object(client, "_run_kubectl", run):
            await client.scale_deployment("default", "web", 4)
        run.assert_awaited_once_with(("scale", "deployment/web", "--replicas=4", "-n", "default"))

    @pytest.mark.asyncio
    async def test_restart_deployment_uses_rollout(self, client: KubectlClient) -> None:
        run = AsyncMock(return_value="")
        with patch.object(client, "_run_kubectl", run):
            await client.restart_deployment("default", "web")
        run.assert_awaited_once_with(("rollout", "restart", "deployment/web", "-n", "default"))

    @pytest.mark.asyncio
    async def test_metrics_available_reads_condition(self, client: KubectlClient) -> None:
        payload = _json({"status": {"conditions": [{"type": "Available", "status": "True"}]}})
        with patch.object(client, "_run_kubectl", AsyncMock(return_value=payload)):
            assert await client.metrics_available()
        with patch.object(client, "_run_kubectl", AsyncMock(side_effect=CommandError("NotFound"))):
            assert not await client.metrics_available()

    @pytest.mark.asyncio
    async def test_stream_forces_follow(self, client: KubectlClient) -> None:
        stream = AsyncMock(return_value=None)
        queue, scope = LineQueue(), CancelScope()
        with patch("podscope.clients.kubectl.stream_command", stream):
            await client.stream_pod_logs("default", "web-7", LogOptions(tail_lines=0), queue, scope)
        cmd = stream.await_args.args[0]
        assert cmd[-1] == "-f"
        assert "--tail=0" in cmd
        assert stream.await_args.args[1] is queue

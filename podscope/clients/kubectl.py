"""kubectl-backed cluster client.

Every request shells out to kubectl with ``-o json`` and runs in a worker
thread, so the Textual event loop is never blocked. Log following uses an
asyncio subprocess so it can be terminated through a CancelScope.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from podscope.clients.base import ClusterClient, CommandError, LogOptions
from podscope.clients.parsers import ResourceParser
from podscope.clients.process import run_command_sync, stream_command
from podscope.constants.defaults import NAMESPACE_DEFAULT
from podscope.constants.timeouts import (
    CLUSTER_REQUEST_TIMEOUT,
    KUBECTL_CHECK_TIMEOUT,
    KUBECTL_COMMAND_TIMEOUT,
)
from podscope.core.streaming import CancelScope, LineQueue
from podscope.models.core.resources import (
    ClusterInfo,
    Deployment,
    Event,
    Namespace,
    Pod,
    PodEvent,
    PodMetrics,
    Service,
)
from podscope.models.state.app_settings import KubeConfigEntry

logger = logging.getLogger(__name__)


class KubectlClient(ClusterClient):
    """Cluster client for one kubeconfig (and optional context)."""

    _METRICS_API_SERVICE = "v1beta1.metrics.k8s.io"

    def __init__(
        self,
        kubeconfig: str,
        context: str = "",
        namespace: str = NAMESPACE_DEFAULT,
        parser: ResourceParser | None = None,
    ) -> None:
        self.kubeconfig = kubeconfig
        self.context = context
        self.namespace = namespace
        self._parser = parser or ResourceParser()

    @classmethod
    def from_entry(cls, entry: KubeConfigEntry) -> KubectlClient:
        return cls(kubeconfig=entry.path, context=entry.context)

    # ------------------------------------------------------------------
    # Command plumbing
    # ------------------------------------------------------------------

    def _command(self, args: tuple[str, ...]) -> list[str]:
        cmd = ["kubectl", "--kubeconfig", self.kubeconfig]
        if self.context:
            cmd.extend(["--context", self.context])
        cmd.extend(args)
        return cmd

    def _run_kubectl_sync(
        self,
        args: tuple[str, ...],
        timeout: int = KUBECTL_COMMAND_TIMEOUT,
    ) -> str:
        """Run a kubectl command synchronously (thread-safe wrapper target)."""
        return run_command_sync(self._command(args), timeout)

    async def _run_kubectl(self, args: tuple[str, ...], timeout: int = KUBECTL_COMMAND_TIMEOUT) -> str:
        logger.debug("kubectl %s", " ".join(args))
        return await asyncio.to_thread(self._run_kubectl_sync, args, timeout)

    async def _run_json(self, args: tuple[str, ...]) -> dict[str, Any]:
        output = await self._run_kubectl((*args, "-o", "json", f"--request-timeout={CLUSTER_REQUEST_TIMEOUT}"))
        try:
            payload = json.loads(output or "{}")
        except json.JSONDecodeError as exc:
            raise CommandError(f"unexpected kubectl output: {exc}") from exc
        return payload if isinstance(payload, dict) else {}

    @staticmethod
    def _selector(selector: dict[str, str]) -> str:
        return ",".join(f"{key}={value}" for key, value in sorted(selector.items()))

    @staticmethod
    def _log_args(name: str, namespace: str, options: LogOptions) -> tuple[str, ...]:
        args: list[str] = ["logs", name, "-n", namespace, f"--tail={options.tail_lines}"]
        if options.container:
            args.extend(["-c", options.container])
        if options.timestamps:
            args.append("--timestamps")
        if options.follow:
            args.append("-f")
        return tuple(args)

    # ------------------------------------------------------------------
    # Connection
    # ------------------------------------------------------------------

    async def check_connection(self) -> bool:
        try:
            await self._run_kubectl(
                ("get", "--raw", "/readyz", f"--request-timeout={CLUSTER_REQUEST_TIMEOUT}"),
                timeout=KUBECTL_CHECK_TIMEOUT,
            )
        except CommandError as exc:
            logger.warning("Cluster check failed: %s", exc)
            return False
        return True

    async def cluster_info(self) -> ClusterInfo:
        context = (await self._run_kubectl(("config", "current-context"))).strip()
        server = (
            await self._run_kubectl(
                ("config", "view", "--minify", "-o", "jsonpath={.clusters[0].cluster.server}")
            )
        ).strip()
        version = ""
        try:
            payload = json.loads(await self._run_kubectl(("version", "-o", "json")))
            version = payload.get("serverVersion", {}).get("gitVersion", "")
        except (CommandError, json.JSONDecodeError) as exc:
            logger.debug("Server version unavailable: %s", exc)
        return ClusterInfo(context=self.context or context, server=server, version=version)

    # ------------------------------------------------------------------
    # Namespaces / pods
    # ------------------------------------------------------------------

    async def list_namespaces(self) -> list[Namespace]:
        return self._parser.parse_namespaces(await self._run_json(("get", "namespaces")))

    async def list_pods(self, namespace: str, selector: dict[str, str] | None = None) -> list[Pod]:
        args: tuple[str, ...] = ("get", "pods", "-n", namespace)
        if selector:
            args = (*args, "-l", self._selector(selector))
        return self._parser.parse_pods(await self._run_json(args))

    async def get_pod(self, namespace: str, name: str) -> Pod:
        return self._parser.parse_pod(await self._run_json(("get", "pod", name, "-n", namespace)))

    async def pod_events(self, namespace: str, name: str) -> list[PodEvent]:
        payload = await self._run_json(
            (
                "get",
                "events",
                "-n",
                namespace,
                "--field-selector",
                f"involvedObject.kind=Pod,involvedObject.name={name}",
            )
        )
        return self._parser.parse_pod_events(payload)

    async def pod_logs(self, namespace: str, name: str, options: LogOptions) -> list[str]:
        output = await self._run_kubectl(self._log_args(name, namespace, options))
        return output.splitlines()

    async def stream_pod_logs(
        self,
        namespace: str,
        name: str,
        options: LogOptions,
        out: LineQueue,
        scope: CancelScope,
    ) -> None:
        follow = LogOptions(
            container=options.container,
            tail_lines=options.tail_lines,
            timestamps=options.timestamps,
            follow=True,
        )
        await stream_command(self._command(self._log_args(name, namespace, follow)), out, scope)

    async def delete_pod(self, namespace: str, name: str) -> None:
        await self._run_kubectl(("delete", "pod", name, "-n", namespace, "--wait=false"))

    # ------------------------------------------------------------------
    # Deployments
    # ------------------------------------------------------------------

    async def list_deployments(self, namespace: str) -> list[Deployment]:
        return self._parser.parse_deployments(await self._run_json(("get", "deployments", "-n", namespace)))

    async def get_deployment(self, namespace: str, name: str) -> Deployment:
        return self._parser.parse_deployment(
            await self._run_json(("get", "deployment", name, "-n", namespace))
        )

    async def scale_deployment(self, namespace: str, name: str, replicas: int) -> None:
        await self._run_kubectl(("scale", f"deployment/{name}", f"--replicas={replicas}", "-n", namespace))

    async def restart_deployment(self, namespace: str, name: str) -> None:
        await self._run_kubectl(("rollout", "restart", f"deployment/{name}", "-n", namespace))

    async def delete_deployment(self, namespace: str, name: str) -> None:
        await self._run_kubectl(("delete", "deployment", name, "-n", namespace, "--wait=false"))

    # ------------------------------------------------------------------
    # Services / events
    # ------------------------------------------------------------------

    async def list_services(self, namespace: str) -> list[Service]:
        return self._parser.parse_services(await self._run_json(("get", "services", "-n", namespace)))

    async def get_service(self, namespace: str, name: str) -> Service:
        return self._parser.parse_service(await self._run_json(("get", "service", name, "-n", namespace)))

    async def list_events(self, namespace: str) -> list[Event]:
        return self._parser.parse_events(await self._run_json(("get", "events", "-n", namespace)))

    # ------------------------------------------------------------------
    # Metrics
    # ------------------------------------------------------------------

    async def metrics_available(self) -> bool:
        try:
            payload = await self._run_json(("get", "apiservice", self._METRICS_API_SERVICE))
        except CommandError:
            return False
        conditions = payload.get("status", {}).get("conditions", []) or []
        return any(
            condition.get("type") == "Available" and condition.get("status") == "True"
            for condition in conditions
        )

    async def pod_metrics(self, namespace: str) -> dict[str, PodMetrics]:
        output = await self._run_kubectl(("top", "pods", "-n", namespace, "--no-headers"))
        return self._parser.parse_top_pods(output, namespace)

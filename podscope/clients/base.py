"""Collaborator contracts for cluster and remote-host access.

The dispatcher only ever reaches these clients from inside tasks. Every
method is a coroutine; blocking work is pushed to a thread by the
implementations.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace

from podscope.constants.defaults import TAIL_LINES_DEFAULT
from podscope.core.streaming import CancelScope, LineQueue
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

logger = logging.getLogger(__name__)


# ============================================================================
# Errors
# ============================================================================


class ClientError(Exception):
    """Base exception for collaborator failures."""


class CommandError(ClientError):
    """An external command exited unsuccessfully."""

    def __init__(self, message: str, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode


class NotConnectedError(ClientError):
    """Raised when an operation needs a connection that is not established."""


class PassphraseRequiredError(ClientError):
    """The SSH key is encrypted and no passphrase has been supplied."""


# ============================================================================
# Options
# ============================================================================


@dataclass(frozen=True)
class LogOptions:
    container: str = ""
    tail_lines: int = TAIL_LINES_DEFAULT
    timestamps: bool = False
    follow: bool = False

    def with_tail(self, tail_lines: int) -> LogOptions:
        return replace(self, tail_lines=tail_lines)


# ============================================================================
# Cluster client
# ============================================================================


class ClusterClient(ABC):
    """Access to one cluster through one kubeconfig."""

    namespace: str

    @abstractmethod
    async def check_connection(self) -> bool:
        """Check if the cluster API is reachable.

        Returns:
            True if connection is available, False otherwise
        """
        ...

    @abstractmethod
    async def cluster_info(self) -> ClusterInfo: ...

    def set_namespace(self, namespace: str) -> None:
        self.namespace = namespace

    @abstractmethod
    async def list_namespaces(self) -> list[Namespace]: ...

    @abstractmethod
    async def list_pods(self, namespace: str, selector: dict[str, str] | None = None) -> list[Pod]: ...

    @abstractmethod
    async def get_pod(self, namespace: str, name: str) -> Pod: ...

    @abstractmethod
    async def pod_events(self, namespace: str, name: str) -> list[PodEvent]: ...

    @abstractmethod
    async def pod_logs(self, namespace: str, name: str, options: LogOptions) -> list[str]: ...

    @abstractmethod
    async def stream_pod_logs(
        self,
        namespace: str,
        name: str,
        options: LogOptions,
        out: LineQueue,
        scope: CancelScope,
    ) -> None:
        """Follow a pod's logs into ``out`` until the source ends or ``scope`` is cancelled."""
        ...

    @abstractmethod
    async def delete_pod(self, namespace: str, name: str) -> None: ...

    @abstractmethod
    async def list_deployments(self, namespace: str) -> list[Deployment]: ...

    @abstractmethod
    async def get_deployment(self, namespace: str, name: str) -> Deployment: ...

    @abstractmethod
    async def scale_deployment(self, namespace: str, name: str, replicas: int) -> None: ...

    @abstractmethod
    async def restart_deployment(self, namespace: str, name: str) -> None: ...

    @abstractmethod
    async def delete_deployment(self, namespace: str, name: str) -> None: ...

    @abstractmethod
    async def list_services(self, namespace: str) -> list[Service]: ...

    @abstractmethod
    async def get_service(self, namespace: str, name: str) -> Service: ...

    @abstractmethod
    async def list_events(self, namespace: str) -> list[Event]: ...

    @abstractmethod
    async def metrics_available(self) -> bool: ...

    @abstractmethod
    async def pod_metrics(self, namespace: str) -> dict[str, PodMetrics]: ...


# ============================================================================
# Remote host client
# ============================================================================


class RemoteHostClient(ABC):
    """Shell access to one node for container-runtime inspection."""

    @abstractmethod
    async def connect(self) -> None:
        """Open the connection.

        Raises:
            PassphraseRequiredError: the key is encrypted and no passphrase is set
            ClientError: any other connection failure
        """
        ...

    @abstractmethod
    def set_passphrase(self, passphrase: str) -> None: ...

    @abstractmethod
    async def list_containers(self) -> list[RemoteContainer]: ...

    @abstractmethod
    async def node_info(self) -> NodeInfo: ...

    @abstractmethod
    async def container_logs(self, container_id: str, options: LogOptions) -> list[str]: ...

    @abstractmethod
    async def stream_container_logs(
        self,
        container_id: str,
        options: LogOptions,
        out: LineQueue,
        scope: CancelScope,
    ) -> None: ...

    @abstractmethod
    def close(self) -> None: ...

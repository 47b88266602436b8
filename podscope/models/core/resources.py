"""Cluster and node resource models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from podscope.constants.enums import EventType


class Namespace(BaseModel):
    """Kubernetes namespace row."""

    name: str
    status: str = "Active"
    age: str = ""


class ContainerInfo(BaseModel):
    """One container inside a pod spec with its runtime status."""

    name: str
    image: str = ""
    ready: bool = False
    restart_count: int = 0
    state: str = "unknown"
    ports: list[str] = Field(default_factory=list)


class Pod(BaseModel):
    """Kubernetes pod row."""

    name: str
    namespace: str
    status: str = "Unknown"
    ready: str = "0/0"
    restarts: int = 0
    age: str = ""
    node: str = ""
    ip: str = ""
    containers: list[ContainerInfo] = Field(default_factory=list)
    labels: dict[str, str] = Field(default_factory=dict)

    @property
    def container_names(self) -> list[str]:
        return [container.name for container in self.containers]


class PodEvent(BaseModel):
    """Event attached to a single pod, shown in pod details."""

    type: str = EventType.NORMAL.value
    reason: str = ""
    message: str = ""
    age: str = ""
    count: int = 1


class PodMetrics(BaseModel):
    """Point-in-time usage reported by the metrics API for one pod."""

    name: str
    namespace: str
    cpu_mcores: float = 0.0
    memory_bytes: float = 0.0


class Deployment(BaseModel):
    """Kubernetes deployment row."""

    name: str
    namespace: str
    replicas: int = 0
    ready_replicas: int = 0
    updated_replicas: int = 0
    available_replicas: int = 0
    age: str = ""
    strategy: str = ""
    selector: dict[str, str] = Field(default_factory=dict)
    images: list[str] = Field(default_factory=list)
    conditions: list[str] = Field(default_factory=list)

    @property
    def ready(self) -> str:
        return f"{self.ready_replicas}/{self.replicas}"


class ServicePort(BaseModel):
    """One exposed service port."""

    name: str = ""
    port: int
    target_port: str = ""
    protocol: str = "TCP"
    node_port: int | None = None

    def __str__(self) -> str:
        if self.node_port:
            return f"{self.port}:{self.node_port}/{self.protocol}"
        return f"{self.port}/{self.protocol}"


class Service(BaseModel):
    """Kubernetes service row."""

    name: str
    namespace: str
    type: str = "ClusterIP"
    cluster_ip: str = ""
    external_ip: str = ""
    ports: list[ServicePort] = Field(default_factory=list)
    selector: dict[str, str] = Field(default_factory=dict)
    age: str = ""

    @property
    def ports_display(self) -> str:
        return ",".join(str(port) for port in self.ports) or "<none>"


class Event(BaseModel):
    """Kubernetes event row for the events view."""

    name: str
    namespace: str
    type: str = EventType.NORMAL.value
    reason: str = ""
    message: str = ""
    object: str = ""
    object_kind: str = ""
    object_name: str = ""
    count: int = 1
    first_seen: str = ""
    last_seen: str = ""
    age: str = ""
    source_component: str = ""
    last_seen_time: datetime | None = None

    @property
    def is_warning(self) -> bool:
        return self.type == EventType.WARNING.value


class ClusterInfo(BaseModel):
    """Summary of the connected cluster."""

    context: str = ""
    server: str = ""
    version: str = ""


class RemoteContainer(BaseModel):
    """Container reported by crictl on a remote node."""

    id: str
    name: str
    image: str = ""
    state: str = ""
    pod_name: str = ""
    pod_namespace: str = ""
    created: str = ""

    @property
    def short_id(self) -> str:
        return self.id[:13]


class NodeInfo(BaseModel):
    """Operating system and runtime facts gathered from a remote node."""

    hostname: str = ""
    os: str = ""
    kernel: str = ""
    architecture: str = ""
    uptime: str = ""
    runtime_version: str = ""
    cpu_count: int = 0
    memory_total: str = ""

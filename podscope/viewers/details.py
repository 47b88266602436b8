"""Detail panes for a single pod, deployment or service."""

from __future__ import annotations

from dataclasses import dataclass, field

from podscope.models.core.resources import Deployment, Pod, PodEvent, PodMetrics, Service


@dataclass
class PodDetails:
    pod: Pod | None = None
    events: list[PodEvent] = field(default_factory=list)
    metrics: PodMetrics | None = None

    def clear(self) -> None:
        self.pod = None
        self.events = []
        self.metrics = None


@dataclass
class DeploymentDetails:
    deployment: Deployment | None = None
    pods: list[Pod] = field(default_factory=list)

    def clear(self) -> None:
        self.deployment = None
        self.pods = []


@dataclass
class ServiceDetails:
    service: Service | None = None
    pods: list[Pod] = field(default_factory=list)

    def clear(self) -> None:
        self.service = None
        self.pods = []

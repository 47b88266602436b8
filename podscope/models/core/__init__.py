"""Core resource models."""

from podscope.models.core.resources import (
    ClusterInfo,
    ContainerInfo,
    Deployment,
    Event,
    Namespace,
    NodeInfo,
    Pod,
    PodEvent,
    PodMetrics,
    RemoteContainer,
    Service,
    ServicePort,
)

__all__ = [
    "ClusterInfo",
    "ContainerInfo",
    "Deployment",
    "Event",
    "Namespace",
    "NodeInfo",
    "Pod",
    "PodEvent",
    "PodMetrics",
    "RemoteContainer",
    "Service",
    "ServicePort",
]

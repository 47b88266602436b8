"""Parsers turning kubectl and crictl JSON into resource models."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any

from podscope.constants.enums import EventType, PodPhase
from podscope.models.core.resources import (
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
from podscope.utils.resource_parser import (
    format_age,
    memory_str_to_bytes,
    parse_cpu_millicores,
    parse_timestamp,
)

logger = logging.getLogger(__name__)


def _items(payload: dict[str, Any]) -> list[dict[str, Any]]:
    items = payload.get("items", [])
    return items if isinstance(items, list) else []


def _age(metadata: dict[str, Any], now: datetime | None) -> str:
    return format_age(parse_timestamp(metadata.get("creationTimestamp")), now)


class ResourceParser:
    """Parses kubectl ``-o json`` payloads."""

    def __init__(self, now: datetime | None = None) -> None:
        self._now = now

    # ------------------------------------------------------------------
    # Namespaces / pods
    # ------------------------------------------------------------------

    def parse_namespaces(self, payload: dict[str, Any]) -> list[Namespace]:
        namespaces = [
            Namespace(
                name=item.get("metadata", {}).get("name", ""),
                status=item.get("status", {}).get("phase", "Active"),
                age=_age(item.get("metadata", {}), self._now),
            )
            for item in _items(payload)
        ]
        return sorted(namespaces, key=lambda namespace: namespace.name)

    @staticmethod
    def _container_state(status: dict[str, Any]) -> str:
        state = status.get("state", {})
        if "running" in state:
            return "running"
        if "waiting" in state:
            return state["waiting"].get("reason") or "waiting"
        if "terminated" in state:
            return state["terminated"].get("reason") or "terminated"
        return "unknown"

    def _pod_status(self, item: dict[str, Any]) -> str:
        """Status column as kubectl prints it: waiting/terminated reasons win over phase."""
        metadata = item.get("metadata", {})
        status = item.get("status", {})
        if metadata.get("deletionTimestamp"):
            return "Terminating"
        for container in status.get("containerStatuses", []) or []:
            state = container.get("state", {})
            waiting = state.get("waiting")
            if waiting and waiting.get("reason"):
                return waiting["reason"]
            terminated = state.get("terminated")
            if terminated and terminated.get("reason") and status.get("phase") != PodPhase.SUCCEEDED.value:
                return terminated["reason"]
        return status.get("reason") or status.get("phase") or PodPhase.UNKNOWN.value

    def parse_pod(self, item: dict[str, Any]) -> Pod:
        metadata = item.get("metadata", {})
        spec = item.get("spec", {})
        status = item.get("status", {})
        statuses = {
            entry.get("name"): entry for entry in status.get("containerStatuses", []) or []
        }
        containers: list[ContainerInfo] = []
        for container in spec.get("containers", []) or []:
            container_status = statuses.get(container.get("name"), {})
            containers.append(
                ContainerInfo(
                    name=container.get("name", ""),
                    image=container.get("image", ""),
                    ready=bool(container_status.get("ready", False)),
                    restart_count=int(container_status.get("restartCount", 0) or 0),
                    state=self._container_state(container_status),
                    ports=[
                        f"{port.get('containerPort')}/{port.get('protocol', 'TCP')}"
                        for port in container.get("ports", []) or []
                    ],
                )
            )
        ready_count = sum(1 for container in containers if container.ready)
        return Pod(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace", ""),
            status=self._pod_status(item),
            ready=f"{ready_count}/{len(containers)}",
            restarts=sum(container.restart_count for container in containers),
            age=_age(metadata, self._now),
            node=spec.get("nodeName", ""),
            ip=status.get("podIP", ""),
            containers=containers,
            labels=metadata.get("labels", {}) or {},
        )

    def parse_pods(self, payload: dict[str, Any]) -> list[Pod]:
        return sorted((self.parse_pod(item) for item in _items(payload)), key=lambda pod: pod.name)

    # ------------------------------------------------------------------
    # Workloads
    # ------------------------------------------------------------------

    def parse_deployment(self, item: dict[str, Any]) -> Deployment:
        metadata = item.get("metadata", {})
        spec = item.get("spec", {})
        status = item.get("status", {})
        template_spec = spec.get("template", {}).get("spec", {})
        return Deployment(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace", ""),
            replicas=int(spec.get("replicas", 0) or 0),
            ready_replicas=int(status.get("readyReplicas", 0) or 0),
            updated_replicas=int(status.get("updatedReplicas", 0) or 0),
            available_replicas=int(status.get("availableReplicas", 0) or 0),
            age=_age(metadata, self._now),
            strategy=spec.get("strategy", {}).get("type", ""),
            selector=spec.get("selector", {}).get("matchLabels", {}) or {},
            images=[container.get("image", "") for container in template_spec.get("containers", []) or []],
            conditions=[
                f"{condition.get('type')}={condition.get('status')}"
                + (f" ({condition['reason']})" if condition.get("reason") else "")
                for condition in status.get("conditions", []) or []
            ],
        )

    def parse_deployments(self, payload: dict[str, Any]) -> list[Deployment]:
        return sorted(
            (self.parse_deployment(item) for item in _items(payload)),
            key=lambda deployment: deployment.name,
        )

    def parse_service(self, item: dict[str, Any]) -> Service:
        metadata = item.get("metadata", {})
        spec = item.get("spec", {})
        ingress = item.get("status", {}).get("loadBalancer", {}).get("ingress", []) or []
        external = [entry.get("ip") or entry.get("hostname", "") for entry in ingress]
        external.extend(spec.get("externalIPs", []) or [])
        return Service(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace", ""),
            type=spec.get("type", "ClusterIP"),
            cluster_ip=spec.get("clusterIP", ""),
            external_ip=",".join(value for value in external if value),
            ports=[
                ServicePort(
                    name=port.get("name", ""),
                    port=int(port.get("port", 0)),
                    target_port=str(port.get("targetPort", "")),
                    protocol=port.get("protocol", "TCP"),
                    node_port=port.get("nodePort"),
                )
                for port in spec.get("ports", []) or []
            ],
            selector=spec.get("selector", {}) or {},
            age=_age(metadata, self._now),
        )

    def parse_services(self, payload: dict[str, Any]) -> list[Service]:
        return sorted((self.parse_service(item) for item in _items(payload)), key=lambda svc: svc.name)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def parse_event(self, item: dict[str, Any]) -> Event:
        metadata = item.get("metadata", {})
        involved = item.get("involvedObject", {}) or item.get("regarding", {}) or {}
        first_seen = parse_timestamp(item.get("firstTimestamp") or item.get("eventTime"))
        last_seen = parse_timestamp(
            item.get("lastTimestamp")
            or item.get("series", {}).get("lastObservedTime")
            or item.get("eventTime")
            or metadata.get("creationTimestamp")
        )
        kind = involved.get("kind", "")
        name = involved.get("name", "")
        source = item.get("source", {}).get("component") or item.get("reportingComponent", "")
        return Event(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace", ""),
            type=item.get("type") or EventType.NORMAL.value,
            reason=item.get("reason", ""),
            message=(item.get("message") or item.get("note") or "").strip(),
            object=f"{kind}/{name}" if kind else name,
            object_kind=kind,
            object_name=name,
            count=int(item.get("count") or item.get("series", {}).get("count") or 1),
            first_seen=format_age(first_seen, self._now) if first_seen else "",
            last_seen=format_age(last_seen, self._now) if last_seen else "",
            age=format_age(last_seen, self._now),
            source_component=source,
            last_seen_time=last_seen,
        )

    def parse_events(self, payload: dict[str, Any]) -> list[Event]:
        return [self.parse_event(item) for item in _items(payload)]

    def parse_pod_events(self, payload: dict[str, Any]) -> list[PodEvent]:
        events = sorted(
            self.parse_events(payload),
            key=lambda event: event.last_seen_time or datetime.min.replace(tzinfo=timezone.utc),
        )
        return [
            PodEvent(
                type=event.type,
                reason=event.reason,
                message=event.message,
                age=event.age,
                count=event.count,
            )
            for event in events
        ]

    # ------------------------------------------------------------------
    # Metrics
    # ------------------------------------------------------------------

    @staticmethod
    def parse_top_pods(output: str, namespace: str) -> dict[str, PodMetrics]:
        """Parse ``kubectl top pods --no-headers`` output keyed by pod name."""
        metrics: dict[str, PodMetrics] = {}
        for line in output.splitlines():
            fields = line.split()
            if len(fields) < 3:
                continue
            name, cpu, memory = fields[0], fields[1], fields[2]
            metrics[name] = PodMetrics(
                name=name,
                namespace=namespace,
                cpu_mcores=parse_cpu_millicores(cpu),
                memory_bytes=memory_str_to_bytes(memory),
            )
        return metrics


class CrictlParser:
    """Parses crictl and node shell output gathered over SSH."""

    _STATE_PREFIX = "CONTAINER_"
    _POD_NAME_LABEL = "io.kubernetes.pod.name"
    _POD_NAMESPACE_LABEL = "io.kubernetes.pod.namespace"
    _KEY_VALUE = re.compile(r"^(?P<key>[a-z_]+)=(?P<value>.*)$")

    def parse_containers(self, payload: dict[str, Any], now: datetime | None = None) -> list[RemoteContainer]:
        containers: list[RemoteContainer] = []
        for item in payload.get("containers", []) or []:
            labels = item.get("labels", {}) or {}
            created = self._created_at(item.get("createdAt"))
            state = str(item.get("state", ""))
            containers.append(
                RemoteContainer(
                    id=item.get("id", ""),
                    name=item.get("metadata", {}).get("name", ""),
                    image=item.get("image", {}).get("image", "") or item.get("imageRef", ""),
                    state=state.removeprefix(self._STATE_PREFIX).lower(),
                    pod_name=labels.get(self._POD_NAME_LABEL, ""),
                    pod_namespace=labels.get(self._POD_NAMESPACE_LABEL, ""),
                    created=format_age(created, now) if created else "",
                )
            )
        return sorted(containers, key=lambda container: (container.state != "running", container.name))

    @staticmethod
    def _created_at(value: Any) -> datetime | None:
        """crictl reports createdAt as nanoseconds since the epoch, as a string."""
        try:
            nanos = int(value)
        except (TypeError, ValueError):
            return None
        return datetime.fromtimestamp(nanos / 1_000_000_000, tz=timezone.utc)

    def parse_node_info(self, output: str) -> NodeInfo:
        values: dict[str, str] = {}
        for line in output.splitlines():
            match = self._KEY_VALUE.match(line.strip())
            if match:
                values[match.group("key")] = match.group("value").strip().strip('"')
        try:
            cpu_count = int(values.get("cpus", "0") or 0)
        except ValueError:
            cpu_count = 0
        memory_kib = memory_str_to_bytes(values.get("mem_kib", "") + "Ki") if values.get("mem_kib") else 0.0
        return NodeInfo(
            hostname=values.get("hostname", ""),
            os=values.get("os", ""),
            kernel=values.get("kernel", ""),
            architecture=values.get("arch", ""),
            uptime=values.get("uptime", ""),
            runtime_version=values.get("runtime", ""),
            cpu_count=cpu_count,
            memory_total=f"{memory_kib / 1024**3:.1f}Gi" if memory_kib else "",
        )

"""Shared fixtures for kubeherald pipeline tests.

Provides raw-event factories, recording sinks and fake cluster lookups so
the whole pipeline can run without a cluster or a telemetry backend.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Iterable, Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from kubeherald.models.alerts import AlertPayload, TrailEntry
from kubeherald.models.config import FilterConfig
from kubeherald.pipeline.guard import PipelineState
from kubeherald.pipeline.processor import EventPipeline
from kubeherald.sinks import AlertSink, TrailBuffer

# ---------------------------------------------------------------------------
# Timestamp helpers
# ---------------------------------------------------------------------------

T0 = datetime(2026, 2, 18, 12, 0, 0, tzinfo=UTC)


def ts(offset_seconds: float = 0) -> str:
    """RFC 3339 timestamp *offset_seconds* after T0."""
    return (T0 + timedelta(seconds=offset_seconds)).isoformat().replace("+00:00", "Z")


# ---------------------------------------------------------------------------
# Raw event factories
# ---------------------------------------------------------------------------


def make_raw_event(
    type_: str = "Warning",
    reason: str = "Failed",
    message: str = "Error: ImagePullBackOff",
    kind: str = "Pod",
    name: str = "coredns-bbbc4b766-fv96b",
    namespace: str | None = "kube-system",
    component: str = "kubelet",
    host: str | None = None,
    created: str | None = None,
) -> dict[str, Any]:
    """Create a raw v1.Event mapping as delivered by the watch API."""
    source: dict[str, Any] = {"component": component}
    if host is not None:
        source["host"] = host
    involved: dict[str, Any] = {"apiVersion": "v1", "kind": kind, "name": name}
    metadata: dict[str, Any] = {
        "name": f"{name}.17541619a910bfcd",
        "resourceVersion": "355929325",
        "managedFields": [{"manager": "kubelet", "operation": "Update"}],
    }
    if namespace is not None:
        involved["namespace"] = namespace
        metadata["namespace"] = namespace
    if created is not None:
        metadata["creationTimestamp"] = created
    return {
        "type": type_,
        "reason": reason,
        "message": message,
        "source": source,
        "involvedObject": involved,
        "metadata": metadata,
    }


def make_error_event(**kwargs: Any) -> dict[str, Any]:
    defaults: dict[str, Any] = {"type_": "Error", "reason": "BackOff", "message": "Back-off restarting failed container"}
    defaults.update(kwargs)
    return make_raw_event(**defaults)


def make_normal_event(**kwargs: Any) -> dict[str, Any]:
    defaults: dict[str, Any] = {"type_": "Normal", "reason": "Pulled", "message": "Successfully pulled image"}
    defaults.update(kwargs)
    return make_raw_event(**defaults)


async def stream(events: Iterable[Mapping[str, Any]], delay: float = 0.0) -> AsyncIterator[Mapping[str, Any]]:
    """Async event source yielding *events* in order."""
    for event in events:
        if delay:
            await asyncio.sleep(delay)
        yield event


# ---------------------------------------------------------------------------
# Sinks and lookups
# ---------------------------------------------------------------------------


class RecordingAlertSink(AlertSink):
    """Collects every payload it is sent."""

    def __init__(self) -> None:
        self.payloads: list[AlertPayload] = []

    def send_alert(self, payload: AlertPayload) -> None:
        self.payloads.append(payload)


class FakeCluster:
    """In-memory pod -> node and node -> labels lookups with optional latency."""

    def __init__(
        self,
        pods: dict[str, str] | None = None,
        nodes: dict[str, dict[str, str]] | None = None,
        latency: dict[str, float] | None = None,
    ) -> None:
        self.pods = pods or {}
        self.nodes = nodes or {}
        self.latency = latency or {}
        self.calls: list[tuple[str, str]] = []

    async def resolve_pod_host(self, pod_name: str) -> str | None:
        self.calls.append(("pod", pod_name))
        await asyncio.sleep(self.latency.get(pod_name, 0))
        return self.pods.get(pod_name)

    async def resolve_node_labels(self, host: str) -> dict[str, str]:
        self.calls.append(("node", host))
        return self.nodes.get(host, {})


@pytest.fixture()
def alert_sink() -> RecordingAlertSink:
    return RecordingAlertSink()


@pytest.fixture()
def trail() -> TrailBuffer:
    return TrailBuffer()


@pytest.fixture()
def cluster() -> FakeCluster:
    return FakeCluster(
        pods={"coredns-bbbc4b766-fv96b": "node-1"},
        nodes={"node-1": {"kubernetes.io/hostname": "node-1", "topology.kubernetes.io/zone": "eu-west-1a"}},
    )


def make_pipeline(
    alert_sink: AlertSink,
    trail: TrailBuffer,
    cluster: FakeCluster,
    filters: FilterConfig | None = None,
    state: PipelineState | None = None,
    **kwargs: Any,
) -> EventPipeline:
    return EventPipeline(
        filters=filters or FilterConfig(),
        alert_sink=alert_sink,
        trail_sink=trail,
        resolve_pod_host=cluster.resolve_pod_host,
        resolve_node_labels=cluster.resolve_node_labels,
        state=state,
        **kwargs,
    )


def trail_names(trail: TrailBuffer) -> list[str]:
    entries: list[TrailEntry] = trail.snapshot()
    return [e.data["name"] for e in entries]

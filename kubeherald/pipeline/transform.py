"""Sink transform: CanonicalEvent -> AlertPayload / TrailEntry."""

from __future__ import annotations

from kubeherald.models.alerts import AlertPayload, TrailEntry
from kubeherald.models.events import CanonicalEvent


def _culprit(event: CanonicalEvent) -> str:
    if event.reason:
        return f"{event.object_ref} {event.reason}"
    return event.object_ref


def to_alert(event: CanonicalEvent, cluster_name: str = "") -> AlertPayload:
    """Build the alert payload for *event*.

    Tags and fingerprint entries are only added for non-empty fields. The
    fingerprint order (reason, namespace, name, kind) is what the receiving
    side groups on, so it must stay stable.
    """
    tags: dict[str, str] = {}
    fingerprint: list[str] = []

    if cluster_name:
        tags["cluster"] = cluster_name
    if event.component:
        tags["component"] = event.component
    if event.reason:
        tags["reason"] = event.reason
        fingerprint.append(event.reason)
    if event.namespace:
        tags["namespace"] = event.namespace
        fingerprint.append(event.namespace)
    if event.object_name:
        tags["name"] = event.object_name
        fingerprint.append(event.object_name)
    if event.object_kind:
        tags["kind"] = event.object_kind
        fingerprint.append(event.object_kind)

    contexts: dict[str, object] = {}
    if event.node_labels:
        contexts["node"] = {"name": event.source_host, "labels": dict(event.node_labels)}

    return AlertPayload(
        level=event.severity,
        message=event.message,
        culprit=_culprit(event),
        server_name=event.source_host,
        timestamp=event.creation_timestamp,
        tags=tags,
        fingerprint=fingerprint,
        extra=dict(event.raw_metadata),
        contexts=contexts,
    )


def to_trail_entry(event: CanonicalEvent) -> TrailEntry:
    return TrailEntry(
        data={"name": event.object_name, "namespace": event.namespace},
        level=event.severity,
        message=event.message,
        timestamp=event.creation_timestamp,
    )

"""Enrichment resolver: attaches the originating node and its labels.

Both lookups are collaborator-provided coroutines. Every failure mode
(``None``/empty result, raised exception) degrades to "no extra context";
``enrich`` itself never raises.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Awaitable, Callable, Mapping

from kubeherald.models.events import CanonicalEvent
from kubeherald.observability.logging import get_logger
from kubeherald.observability.metrics import enrichment_failures_total

PodHostResolver = Callable[[str], Awaitable[str | None]]
NodeLabelResolver = Callable[[str], Awaitable[Mapping[str, str]]]

_log = get_logger("pipeline.enrichment")


async def _lookup_pod_host(event: CanonicalEvent, resolve_pod_host: PodHostResolver) -> str | None:
    if event.object_kind != "Pod" or not event.object_name:
        return None
    try:
        host = await resolve_pod_host(event.object_name)
    except Exception as exc:  # noqa: BLE001
        _log.debug("pod_host_lookup_failed", pod=event.object_name, namespace=event.namespace, error=str(exc))
        enrichment_failures_total.labels(lookup="pod_host").inc()
        return None
    if not host:
        _log.debug("pod_host_not_found", pod=event.object_name, namespace=event.namespace)
        enrichment_failures_total.labels(lookup="pod_host").inc()
        return None
    return host


async def _lookup_node_labels(host: str, resolve_node_labels: NodeLabelResolver) -> dict[str, str]:
    try:
        labels = await resolve_node_labels(host)
    except Exception as exc:  # noqa: BLE001
        _log.debug("node_labels_lookup_failed", node=host, error=str(exc))
        enrichment_failures_total.labels(lookup="node_labels").inc()
        return {}
    if not labels:
        enrichment_failures_total.labels(lookup="node_labels").inc()
        return {}
    return {str(k): str(v) for k, v in labels.items()}


async def enrich(
    event: CanonicalEvent,
    resolve_pod_host: PodHostResolver,
    resolve_node_labels: NodeLabelResolver,
) -> CanonicalEvent:
    """Return *event* with ``source_host`` and ``node_labels`` filled in where possible.

    An unknown host is resolved through the involved Pod; a known or
    resolved host is then used to look up node labels.
    """
    host = event.source_host if event.host_known else await _lookup_pod_host(event, resolve_pod_host)
    if host is None:
        return event

    labels = await _lookup_node_labels(host, resolve_node_labels)
    if host == event.source_host and not labels:
        return event
    return dataclasses.replace(event, source_host=host, node_labels=labels)

"""Tests for the enrichment resolver."""

from __future__ import annotations

import dataclasses
from unittest.mock import AsyncMock

from kubeherald.models.events import UNKNOWN_HOST, CanonicalEvent, Severity
from kubeherald.pipeline.enrichment import enrich
from kubeherald.pipeline.transform import to_alert

_LABELS = {"kubernetes.io/hostname": "node-1", "topology.kubernetes.io/zone": "eu-west-1a"}


def _make_event(
    source_host: str | None = UNKNOWN_HOST,
    object_kind: str | None = "Pod",
    object_name: str = "coredns-bbbc4b766-fv96b",
) -> CanonicalEvent:
    return CanonicalEvent(
        event_kind="warning",
        severity=Severity.WARNING,
        component="kubelet",
        source_host=source_host,
        reason="Failed",
        namespace="kube-system",
        object_kind=object_kind,
        object_name=object_name,
        message="Error: ImagePullBackOff",
        raw_metadata={"name": "coredns-bbbc4b766-fv96b.17541619a910bfcd"},
    )


class TestPodHostLookup:
    async def test_resolves_host_and_labels_for_pod(self) -> None:
        pod_host = AsyncMock(return_value="node-1")
        node_labels = AsyncMock(return_value=_LABELS)

        enriched = await enrich(_make_event(), pod_host, node_labels)

        pod_host.assert_awaited_once_with("coredns-bbbc4b766-fv96b")
        node_labels.assert_awaited_once_with("node-1")
        assert enriched.source_host == "node-1"
        assert enriched.node_labels == _LABELS

    async def test_none_host_is_treated_as_unknown(self) -> None:
        pod_host = AsyncMock(return_value="node-1")
        enriched = await enrich(_make_event(source_host=None), pod_host, AsyncMock(return_value={}))
        assert enriched.source_host == "node-1"

    async def test_non_pod_skips_pod_lookup(self) -> None:
        pod_host = AsyncMock(return_value="node-1")
        node_labels = AsyncMock(return_value=_LABELS)
        event = _make_event(object_kind="Deployment", object_name="coredns")

        enriched = await enrich(event, pod_host, node_labels)

        pod_host.assert_not_awaited()
        node_labels.assert_not_awaited()
        assert enriched is event

    async def test_pod_not_found_leaves_event_unchanged(self) -> None:
        node_labels = AsyncMock(return_value=_LABELS)
        event = _make_event()

        enriched = await enrich(event, AsyncMock(return_value=None), node_labels)

        node_labels.assert_not_awaited()
        assert enriched.source_host == UNKNOWN_HOST
        assert enriched.node_labels == {}

    async def test_pod_lookup_error_is_swallowed(self) -> None:
        pod_host = AsyncMock(side_effect=ConnectionError("apiserver unreachable"))
        event = _make_event()

        enriched = await enrich(event, pod_host, AsyncMock(return_value=_LABELS))

        assert enriched == event


class TestNodeLabelLookup:
    async def test_known_host_skips_pod_lookup(self) -> None:
        pod_host = AsyncMock(return_value="other-node")
        node_labels = AsyncMock(return_value=_LABELS)

        enriched = await enrich(_make_event(source_host="node-1"), pod_host, node_labels)

        pod_host.assert_not_awaited()
        node_labels.assert_awaited_once_with("node-1")
        assert enriched.source_host == "node-1"
        assert enriched.node_labels == _LABELS

    async def test_label_lookup_error_keeps_resolved_host(self) -> None:
        node_labels = AsyncMock(side_effect=TimeoutError())

        enriched = await enrich(_make_event(), AsyncMock(return_value="node-1"), node_labels)

        assert enriched.source_host == "node-1"
        assert enriched.node_labels == {}

    async def test_empty_labels_keep_resolved_host(self) -> None:
        enriched = await enrich(_make_event(), AsyncMock(return_value="node-1"), AsyncMock(return_value={}))
        assert enriched.source_host == "node-1"
        assert enriched.node_labels == {}

    async def test_input_event_is_not_mutated(self) -> None:
        event = _make_event()
        await enrich(event, AsyncMock(return_value="node-1"), AsyncMock(return_value=_LABELS))
        assert event.source_host == UNKNOWN_HOST
        assert event.node_labels == {}


class TestEnrichmentFallback:
    async def test_failed_enrichment_does_not_change_alert(self) -> None:
        event = _make_event()
        enriched = await enrich(
            event,
            AsyncMock(side_effect=RuntimeError("boom")),
            AsyncMock(side_effect=RuntimeError("boom")),
        )
        assert dataclasses.asdict(to_alert(enriched, "prod")) == dataclasses.asdict(to_alert(event, "prod"))

    async def test_successful_enrichment_only_changes_host_fields(self) -> None:
        event = _make_event()
        enriched = await enrich(event, AsyncMock(return_value="node-1"), AsyncMock(return_value=_LABELS))

        plain = dataclasses.asdict(to_alert(event))
        rich = dataclasses.asdict(to_alert(enriched))
        for key in ("server_name", "contexts"):
            plain.pop(key)
            rich.pop(key)
        assert plain == rich

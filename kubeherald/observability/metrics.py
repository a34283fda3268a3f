"""Prometheus counters for the event pipeline.

Counters live in the default registry so an exporter mounted by the
surrounding process picks them up without extra wiring.
"""

from __future__ import annotations

from prometheus_client import Counter

events_total = Counter(
    "kubeherald_events_total",
    "Events processed, by pipeline outcome.",
    ["outcome"],
)

events_filtered_total = Counter(
    "kubeherald_events_filtered_total",
    "Events suppressed by the filter chain, by the rule that fired.",
    ["rule"],
)

enrichment_failures_total = Counter(
    "kubeherald_enrichment_failures_total",
    "Enrichment lookups that returned nothing or raised.",
    ["lookup"],
)

sink_errors_total = Counter(
    "kubeherald_sink_errors_total",
    "Sink calls that raised.",
    ["sink"],
)

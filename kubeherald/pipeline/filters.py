"""Filter chain: operator exclusion rules and the severity gate.

Exclusion rules run in a fixed order and the first hit wins. They take
precedence over severity, so a noisy error-level reason can still be
silenced. Candidates that survive are alerted when their severity label is
accepted; ``error`` is always alerted.
"""

from __future__ import annotations

from kubeherald.models.config import FilterConfig
from kubeherald.models.events import CanonicalEvent, Severity

RULE_COMPONENT = "component"
RULE_REASON = "reason"
RULE_NAMESPACE_EXCLUDED = "namespace_excluded"
RULE_NAMESPACE_NOT_INCLUDED = "namespace_not_included"


def suppression_reason(event: CanonicalEvent, config: FilterConfig) -> str | None:
    """Return the name of the first exclusion rule matching *event*, else None."""
    if event.component in config.exclude_components:
        return RULE_COMPONENT
    if event.reason in config.exclude_reasons:
        return RULE_REASON
    if event.namespace in config.exclude_namespaces:
        return RULE_NAMESPACE_EXCLUDED
    if config.include_namespaces and event.namespace not in config.include_namespaces:
        return RULE_NAMESPACE_NOT_INCLUDED
    return None


def should_suppress(event: CanonicalEvent, config: FilterConfig) -> bool:
    return suppression_reason(event, config) is not None


def should_alert(event: CanonicalEvent, config: FilterConfig) -> bool:
    """True when a candidate event should be sent as an alert."""
    return event.severity.value in config.accepted_severity_labels or event.severity == Severity.ERROR

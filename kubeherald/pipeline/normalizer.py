"""Event normalizer: raw ``v1.Event`` mapping -> CanonicalEvent.

The raw event is the JSON shape the Kubernetes watch API delivers::

    {
        "type": "Warning",
        "reason": "Failed",
        "message": "Error: ImagePullBackOff",
        "source": {"component": "kubelet", "host": "node-1"},
        "involvedObject": {"kind": "Pod", "name": "coredns-...", "namespace": "kube-system"},
        "metadata": {"name": "...", "namespace": "kube-system", "creationTimestamp": "..."},
    }

Normalization is a pure function of its input.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from kubeherald.models.events import EXCLUDED_METADATA_KEYS, UNKNOWN_HOST, CanonicalEvent, Severity

_DEFAULT_NAMESPACE = "default"


class MalformedEventError(ValueError):
    """Raised when a raw event cannot be normalized."""


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def parse_severity(event_kind: str) -> Severity:
    """Derive a severity from a lowercased event kind.

    ``normal`` is the only kind that is not itself a severity name.
    """
    if event_kind == "normal":
        return Severity.INFO
    try:
        return Severity.parse(event_kind)
    except ValueError as exc:
        raise MalformedEventError(f"Unrecognized event type: {event_kind!r}") from exc


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an RFC 3339 string or datetime into an aware UTC datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, str):
        try:
            ts = datetime.fromisoformat(value)
        except ValueError as exc:
            raise MalformedEventError(f"Invalid creationTimestamp: {value!r}") from exc
    else:
        raise MalformedEventError(f"Invalid creationTimestamp type: {type(value).__name__}")
    if ts.tzinfo is None:
        return ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC)


def _metadata_extra(metadata: Mapping[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in metadata.items() if k not in EXCLUDED_METADATA_KEYS}


def normalize(raw_event: Mapping[str, Any]) -> CanonicalEvent:
    """Convert one raw cluster event into a CanonicalEvent.

    Raises:
        MalformedEventError: if the event is not a mapping, its ``type``
            cannot be mapped to a severity, or its creation timestamp is
            unparseable.
    """
    if not isinstance(raw_event, Mapping):
        raise MalformedEventError(f"Expected a mapping, got {type(raw_event).__name__}")

    metadata = _mapping(raw_event.get("metadata"))
    involved = _mapping(raw_event.get("involvedObject"))
    source = _mapping(raw_event.get("source"))

    event_kind = _str(raw_event.get("type")).lower()
    severity = parse_severity(event_kind)

    namespace = _str(involved.get("namespace")) or _str(metadata.get("namespace")) or _DEFAULT_NAMESPACE

    host = source.get("host")
    kind = involved.get("kind")
    message = raw_event.get("message")

    return CanonicalEvent(
        event_kind=event_kind,
        severity=severity,
        component=_str(source.get("component")),
        source_host=host if isinstance(host, str) else UNKNOWN_HOST,
        reason=_str(raw_event.get("reason")),
        namespace=namespace,
        object_kind=kind if isinstance(kind, str) else None,
        object_name=_str(involved.get("name")),
        message=message if isinstance(message, str) else None,
        creation_timestamp=parse_timestamp(metadata.get("creationTimestamp")),
        raw_metadata=_metadata_extra(metadata),
    )

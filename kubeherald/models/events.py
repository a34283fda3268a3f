"""Core event data structures and enumerations."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

UNKNOWN_HOST = "n/a"

# Server-side-apply bookkeeping; large and irrelevant for diagnostics.
EXCLUDED_METADATA_KEYS = frozenset({"managedFields"})


class Severity(StrEnum):
    """Event severity level, ordered from least to most severe."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"

    @classmethod
    def parse(cls, label: str) -> Severity:
        """Parse a case-insensitive severity name.

        ``"log"`` is accepted as an alias for ``info``.

        Raises:
            ValueError: if *label* names no severity.
        """
        normalized = label.strip().lower()
        if normalized == "log":
            return cls.INFO
        return cls(normalized)


@dataclass(frozen=True)
class CanonicalEvent:
    """Canonical event representation.

    Produced by the normalizer, replaced (never mutated) by the enrichment
    resolver, read by every other pipeline stage.
    """

    event_kind: str
    severity: Severity
    component: str
    source_host: str | None
    reason: str
    namespace: str
    object_kind: str | None
    object_name: str
    message: str | None = None
    creation_timestamp: datetime | None = None
    raw_metadata: dict[str, Any] = field(default_factory=dict)
    node_labels: dict[str, str] = field(default_factory=dict)

    @property
    def host_known(self) -> bool:
        """True when ``source_host`` names a real node."""
        return bool(self.source_host) and self.source_host != UNKNOWN_HOST

    @property
    def object_ref(self) -> str:
        """``namespace/name``, or just the namespace when the name is empty."""
        if self.namespace and self.object_name:
            return f"{self.namespace}/{self.object_name}"
        return self.namespace

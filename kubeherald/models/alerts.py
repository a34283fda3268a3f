"""Outbound alert and trail entry data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from kubeherald.models.events import Severity

TRAIL_CATEGORY = "kubernetes.event"


@dataclass(frozen=True)
class AlertPayload:
    """Wire model handed to the alert sink for a significant event."""

    level: Severity
    message: str | None
    culprit: str
    server_name: str | None
    timestamp: datetime | None = None
    tags: dict[str, str] = field(default_factory=dict)
    fingerprint: list[str] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)
    contexts: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TrailEntry:
    """Lightweight context record kept alongside whatever alert fires next."""

    data: dict[str, str]
    level: Severity
    message: str | None = None
    timestamp: datetime | None = None
    category: str = TRAIL_CATEGORY

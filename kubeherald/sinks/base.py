"""Sink interfaces.

AlertSink -- receives payloads for significant events.
TrailSink -- receives trail entries for every non-suppressed event.

Both are fire-and-forget from the pipeline's point of view: nothing is
returned and the pipeline does not retry.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

from kubeherald.models.alerts import AlertPayload, TrailEntry


class AlertSink(ABC):
    """Abstract base class for alert destinations."""

    @property
    def sink_name(self) -> str:
        """Identifier used in logs."""
        return type(self).__name__

    @abstractmethod
    def send_alert(self, payload: AlertPayload) -> None:
        """Hand *payload* to the destination."""


class TrailSink(ABC):
    """Abstract base class for trail entry destinations."""

    @abstractmethod
    def append_trail_entry(self, entry: TrailEntry) -> None:
        """Record *entry* as context for later alerts."""


class CallbackAlertSink(AlertSink):
    """Adapts a plain ``payload -> None`` function to AlertSink."""

    def __init__(self, send: Callable[[AlertPayload], None], name: str = "callback") -> None:
        self._send = send
        self._name = name

    @property
    def sink_name(self) -> str:
        return self._name

    def send_alert(self, payload: AlertPayload) -> None:
        self._send(payload)

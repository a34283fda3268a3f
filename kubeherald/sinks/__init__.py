"""Outbound sinks for kubeherald.

Exports:
    AlertSink         -- Abstract base for alert destinations.
    TrailSink         -- Abstract base for trail entry destinations.
    CallbackAlertSink -- Wraps a plain function as an AlertSink.
    TrailBuffer       -- Bounded in-memory TrailSink.
"""

from kubeherald.sinks.base import AlertSink, CallbackAlertSink, TrailSink
from kubeherald.sinks.trail import TrailBuffer

__all__ = [
    "AlertSink",
    "CallbackAlertSink",
    "TrailBuffer",
    "TrailSink",
]

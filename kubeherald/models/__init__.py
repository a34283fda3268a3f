"""Core data structures for kubeherald."""

from kubeherald.models.alerts import AlertPayload, TrailEntry
from kubeherald.models.config import FilterConfig, KubeHeraldConfig, LogConfig, PipelineConfig
from kubeherald.models.events import UNKNOWN_HOST, CanonicalEvent, Severity

__all__ = [
    "AlertPayload",
    "CanonicalEvent",
    "FilterConfig",
    "KubeHeraldConfig",
    "LogConfig",
    "PipelineConfig",
    "Severity",
    "TrailEntry",
    "UNKNOWN_HOST",
]

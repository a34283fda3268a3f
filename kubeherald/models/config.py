"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class FilterConfig:
    """Event filter configuration. An empty list disables that filter."""

    include_namespaces: tuple[str, ...] = ()
    exclude_namespaces: tuple[str, ...] = ()
    exclude_components: tuple[str, ...] = ()
    exclude_reasons: tuple[str, ...] = ()
    accepted_severity_labels: tuple[str, ...] = ("warning", "error")


@dataclass
class PipelineConfig:
    """Event pipeline tuning."""

    max_concurrency: int = 16
    trail_max_entries: int = 100


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "info"


@dataclass
class KubeHeraldConfig:
    """Top-level kubeherald configuration."""

    cluster_name: str = ""
    filters: FilterConfig = field(default_factory=FilterConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    log: LogConfig = field(default_factory=LogConfig)

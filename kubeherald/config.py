"""Configuration loading from environment variables."""

from __future__ import annotations

import os

from kubeherald.models.config import FilterConfig, KubeHeraldConfig, LogConfig, PipelineConfig
from kubeherald.models.events import Severity


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"KUBEHERALD_{key}", default)


def _env_int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    val = int(_env(key, str(default)))
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _env_list(key: str, default: str = "") -> tuple[str, ...]:
    """Split a comma-separated variable, trimming items and dropping empty ones."""
    return parse_list(_env(key, default))


def parse_list(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


def _validate_severity_labels(labels: tuple[str, ...]) -> tuple[str, ...]:
    valid = {s.value for s in Severity}
    lowered = tuple(label.lower() for label in labels)
    unknown = [label for label in lowered if label not in valid]
    if unknown:
        raise ValueError(f"Invalid event levels: {unknown}. Must be drawn from {sorted(valid)}")
    return lowered


def _validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log level: {value}. Must be one of {valid}")
    return value.lower()


def load_config() -> KubeHeraldConfig:
    """Load configuration from KUBEHERALD_* environment variables."""
    return KubeHeraldConfig(
        cluster_name=_env("CLUSTER_NAME", "").strip(),
        filters=FilterConfig(
            include_namespaces=_env_list("EVENT_NAMESPACES"),
            exclude_namespaces=_env_list("EVENT_NAMESPACES_EXCLUDED"),
            exclude_components=_env_list("COMPONENT_FILTER"),
            exclude_reasons=_env_list("REASON_FILTER"),
            accepted_severity_labels=_validate_severity_labels(_env_list("EVENT_LEVELS", "warning,error")),
        ),
        pipeline=PipelineConfig(
            max_concurrency=_env_int("MAX_CONCURRENCY", 16, min_val=1, max_val=256),
            trail_max_entries=_env_int("TRAIL_MAX_ENTRIES", 100, min_val=1, max_val=1000),
        ),
        log=LogConfig(
            level=_validate_log_level(_env("LOG_LEVEL", "info")),
        ),
    )

"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class ReportMode(StrEnum):
    """How transformed records are handed to the stream appliance."""

    SINGLE = "single"
    BATCH = "batch"


@dataclass
class ReporterConfig:
    """Stream appliance delivery configuration."""

    endpoint: str = ""
    mode: ReportMode = ReportMode.SINGLE
    timeout_seconds: float = 10.0
    max_retries: int = 3
    backoff_ms: int = 50
    retry_status_codes: tuple[int, ...] = (500, 502, 503)
    max_connections: int = 100
    recycle_ttl_seconds: int = 600
    recycle_jitter_seconds: int = 60


@dataclass
class MetricsConfig:
    """Prometheus exporter configuration."""

    port: int = 0  # 0 disables the HTTP exporter


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "info"
    format: str = "json"


@dataclass
class TransformerConfig:
    """Top-level service configuration."""

    reporter: ReporterConfig = field(default_factory=ReporterConfig)
    metrics: MetricsConfig = field(default_factory=MetricsConfig)
    log: LogConfig = field(default_factory=LogConfig)

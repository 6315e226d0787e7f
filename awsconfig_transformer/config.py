"""Configuration loading from environment variables."""

from __future__ import annotations

import os

from awsconfig_transformer.models.config import (
    LogConfig,
    MetricsConfig,
    ReporterConfig,
    ReportMode,
    TransformerConfig,
)
from awsconfig_transformer.observability.logging import LOG_FORMATS


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"AWSCONFIG_{key}", default)


def _env_int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    val = int(_env(key, str(default)))
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _env_float(key: str, default: float, min_val: float | None = None, max_val: float | None = None) -> float:
    val = float(_env(key, str(default)))
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log level: {value}. Must be one of {valid}")
    return value.lower()


def _validate_log_format(value: str) -> str:
    if value.lower() not in LOG_FORMATS:
        raise ValueError(f"Invalid log format: {value}. Must be one of {list(LOG_FORMATS)}")
    return value.lower()


def _validate_report_mode(value: str) -> ReportMode:
    try:
        return ReportMode(value.lower())
    except ValueError:
        raise ValueError(f"Invalid report mode: {value}. Must be one of {[m.value for m in ReportMode]}") from None


def _parse_status_codes(value: str) -> tuple[int, ...]:
    codes = tuple(int(part) for part in value.split(",") if part.strip())
    for code in codes:
        if not 100 <= code <= 599:
            raise ValueError(f"Invalid HTTP status code: {code}")
    return codes


def load_config() -> TransformerConfig:
    """Load configuration from AWSCONFIG_* environment variables."""
    return TransformerConfig(
        reporter=ReporterConfig(
            endpoint=_env("STREAM_APPLIANCE_ENDPOINT", ""),
            mode=_validate_report_mode(_env("REPORT_MODE", "single")),
            timeout_seconds=_env_float("REPORT_TIMEOUT", 10.0, min_val=1.0, max_val=60.0),
            max_retries=_env_int("REPORT_MAX_RETRIES", 3, min_val=0, max_val=10),
            backoff_ms=_env_int("REPORT_BACKOFF_MS", 50, min_val=0),
            retry_status_codes=_parse_status_codes(_env("REPORT_RETRY_STATUS_CODES", "500,502,503")),
            max_connections=_env_int("REPORT_MAX_CONNECTIONS", 100, min_val=1),
            recycle_ttl_seconds=_env_int("REPORT_RECYCLE_TTL", 600, min_val=1),
            recycle_jitter_seconds=_env_int("REPORT_RECYCLE_JITTER", 60, min_val=0),
        ),
        metrics=MetricsConfig(
            port=_env_int("METRICS_PORT", 0, min_val=0, max_val=65535),
        ),
        log=LogConfig(
            level=_validate_log_level(_env("LOG_LEVEL", "info")),
            format=_validate_log_format(_env("LOG_FORMAT", "json")),
        ),
    )

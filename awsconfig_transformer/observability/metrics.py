"""Prometheus collectors and the stats recorder handed to the transformer.

The transformer never touches collectors directly; it calls ``timing`` and
``count`` on whatever StatsRecorder its ``stat_fn`` returns, so tests can
substitute a mock.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from prometheus_client import Counter, Histogram, start_http_server

EVENT_DELAY = "event_delay_seconds"
EVENTS_TRANSFORMED = "events_transformed_total"
TRANSFORM_ERRORS = "transform_errors_total"
REPORTS = "reports_total"

event_delay_seconds = Histogram(
    "awsconfig_transformer_event_delay_seconds",
    "Delay between the upstream processed timestamp and transformation",
    buckets=(0.1, 0.5, 1.0, 5.0, 15.0, 60.0, 300.0, 900.0, 3600.0),
)

events_transformed_total = Counter(
    "awsconfig_transformer_events_transformed_total",
    "Change notifications transformed, by resource type",
    ["resource_type"],
)

transform_errors_total = Counter(
    "awsconfig_transformer_transform_errors_total",
    "Change notifications that failed to transform, by reason",
    ["reason"],
)

reports_total = Counter(
    "awsconfig_transformer_reports_total",
    "Delivery attempts to the stream appliance, by outcome",
    ["outcome"],
)


class StatsRecorder(ABC):
    """Narrow metrics sink used by the transformation pipeline."""

    @abstractmethod
    def timing(self, metric: str, seconds: float) -> None:
        """Record a duration for *metric*."""

    @abstractmethod
    def count(self, metric: str, **labels: str) -> None:
        """Increment *metric* by one with the given labels."""


class PrometheusStats(StatsRecorder):
    """StatsRecorder backed by the module-level prometheus collectors."""

    _histograms = {EVENT_DELAY: event_delay_seconds}
    _counters = {
        EVENTS_TRANSFORMED: events_transformed_total,
        TRANSFORM_ERRORS: transform_errors_total,
        REPORTS: reports_total,
    }

    def timing(self, metric: str, seconds: float) -> None:
        self._histograms[metric].observe(max(seconds, 0.0))

    def count(self, metric: str, **labels: str) -> None:
        counter = self._counters[metric]
        if labels:
            counter.labels(**labels).inc()
        else:
            counter.inc()


_default_stats = PrometheusStats()


def get_stats() -> StatsRecorder:
    """Default ``stat_fn`` for the transformer."""
    return _default_stats


def start_metrics_server(port: int) -> None:
    """Expose /metrics on *port*.  A port of 0 leaves the exporter off."""
    if port > 0:
        start_http_server(port)

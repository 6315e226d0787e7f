"""Shared fixtures for transformer integration tests.

Provides an in-memory Reporter that records what it was asked to deliver,
and a TransformerApp wired to it, so tests can drive the whole pipeline
(NDJSON line -> envelope -> transformer -> reporter) without a network.
"""

from __future__ import annotations

import json

import pytest
import structlog

from awsconfig_transformer.app import TransformerApp
from awsconfig_transformer.errors import ReportError
from awsconfig_transformer.handler import ChangeEventHandler, Transformer
from awsconfig_transformer.models.config import LogConfig, ReporterConfig, ReportMode, TransformerConfig
from awsconfig_transformer.models.output import Output
from awsconfig_transformer.reporter import Reporter

# ---------------------------------------------------------------------------
# Reporter double
# ---------------------------------------------------------------------------


class RecordingReporter(Reporter):
    """Reporter that keeps every delivered payload in memory.

    ``fail_with`` makes every delivery raise the given ReportError.
    """

    def __init__(self, fail_with: ReportError | None = None) -> None:
        self.single: list[dict] = []
        self.batches: list[list[dict]] = []
        self.fail_with = fail_with
        self.closed = False

    async def report(self, output: Output) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.single.append(output.to_dict())

    async def report_batch(self, outputs: list[Output]) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.batches.append([o.to_dict() for o in outputs])

    async def aclose(self) -> None:
        self.closed = True


# ---------------------------------------------------------------------------
# Input helpers
# ---------------------------------------------------------------------------


def _envelope_line(message: str, processed: str = "") -> str:
    """One NDJSON input line carrying *message* the way SNS wraps it."""
    payload = {"Type": "Notification", "Message": message, "Timestamp": "2019-02-22T20:43:11.100Z"}
    if processed:
        payload["ProcessedTimestamp"] = processed
    return json.dumps(payload) + "\n"


# ---------------------------------------------------------------------------
# Pipeline fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def failing_reporter() -> RecordingReporter:
    return RecordingReporter(fail_with=ReportError("unexpected response from streaming appliance: 400", 400))


@pytest.fixture
def handler(reporter: RecordingReporter) -> ChangeEventHandler:
    return ChangeEventHandler(transformer=Transformer(), reporter=reporter, timeout=5.0)


@pytest.fixture
def app_factory():
    """Build started TransformerApps around a reporter; logging is reset afterwards."""

    def _make(reporter: Reporter, mode: ReportMode = ReportMode.SINGLE) -> TransformerApp:
        config = TransformerConfig(
            reporter=ReporterConfig(endpoint="http://appliance.test/ingest", mode=mode),
            log=LogConfig(level="info"),
        )
        app = TransformerApp(config=config, reporter=reporter)
        app.start()
        return app

    yield _make
    structlog.reset_defaults()


@pytest.fixture
def envelope_line():
    return _envelope_line

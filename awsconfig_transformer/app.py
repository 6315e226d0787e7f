"""Application bootstrap for the AWS Config transformer.

Wires components in dependency order: config -> logging -> metrics exporter
-> reporter -> transformer -> handler.  Input envelopes are read as
newline-delimited JSON from a text stream (stdin by default) and handled
one at a time; a failing line is logged and the loop moves on.
"""

from __future__ import annotations

import asyncio
import json
import sys
from typing import TYPE_CHECKING, TextIO

from awsconfig_transformer.config import load_config
from awsconfig_transformer.errors import ReportError, TransformError
from awsconfig_transformer.handler import ChangeEventHandler, Transformer
from awsconfig_transformer.models.config import TransformerConfig
from awsconfig_transformer.models.events import Input
from awsconfig_transformer.observability.logging import get_logger, setup_logging
from awsconfig_transformer.observability.metrics import start_metrics_server
from awsconfig_transformer.reporter import Reporter, build_reporter

if TYPE_CHECKING:
    import structlog


class TransformerApp:
    """Owns the reporter and handler for the lifetime of the process.

    ``stop()`` is safe to call on an app that was never started.
    """

    def __init__(self, config: TransformerConfig | None = None, reporter: Reporter | None = None) -> None:
        self.config = config
        self._reporter = reporter
        self._handler: ChangeEventHandler | None = None
        self._log: structlog.stdlib.BoundLogger | None = None

    def start(self) -> None:
        if self.config is None:
            self.config = load_config()

        setup_logging(self.config.log.level, self.config.log.format)
        self._log = get_logger("app")
        self._log.info("awsconfig transformer starting", version=_version())

        start_metrics_server(self.config.metrics.port)

        if self._reporter is None:
            self._reporter = build_reporter(self.config.reporter)
        self._handler = ChangeEventHandler(
            transformer=Transformer(),
            reporter=self._reporter,
            mode=self.config.reporter.mode,
            timeout=self.config.reporter.timeout_seconds,
        )
        self._log.info(
            "awsconfig transformer started",
            endpoint=self.config.reporter.endpoint,
            mode=self.config.reporter.mode.value,
        )

    async def handle_line(self, line: str) -> bool:
        """Handle one newline-delimited envelope.  Returns False when it failed."""
        assert self._handler is not None
        assert self._log is not None
        try:
            payload = json.loads(line)
        except json.JSONDecodeError as exc:
            self._log.error("invalid_input_envelope", error=str(exc))
            return False
        if not isinstance(payload, dict):
            self._log.error("invalid_input_envelope", error="envelope is not an object")
            return False

        try:
            outputs = await self._handler.handle(Input.from_dict(payload))
        except (TransformError, ReportError):
            # already logged by the handler
            return False
        self._log.debug("input_handled", outputs=len(outputs))
        return True

    async def run(self, stream: TextIO) -> int:
        """Handle every line of *stream*; return the number of failed lines."""
        failures = 0
        while True:
            line = await asyncio.to_thread(stream.readline)
            if not line:
                break
            if not line.strip():
                continue
            if not await self.handle_line(line):
                failures += 1
        return failures

    async def stop(self) -> None:
        if self._reporter is None:
            return
        log = self._log or get_logger("app")
        try:
            await self._reporter.aclose()
        except Exception as exc:
            log.error("reporter close raised an error", error=str(exc))
        log.info("awsconfig transformer stopped")


def _version() -> str:
    from awsconfig_transformer import __version__

    return __version__


async def main(stream: TextIO | None = None) -> int:
    """Run the app over *stream* (stdin by default).  Returns the exit code."""
    app = TransformerApp()
    try:
        app.start()
    except ValueError as exc:
        get_logger("app").critical("fatal startup error", error=str(exc))
        return 1
    try:
        failures = await app.run(stream or sys.stdin)
    finally:
        await app.stop()
    return 1 if failures else 0

"""Dispatch of AWS Config change notifications to resource transformers.

Transformer.transform is the pure, synchronous core: decode the envelope,
pick the transformer for the resource type, run the operation for the
change type, then attach tag changes to every produced record.

ChangeEventHandler wraps it with delivery: the records of one notification
are handed to a Reporter inside a timeout, so delivery can be cancelled.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from awsconfig_transformer.errors import ReportError, TransformError, UnsupportedChangeTypeError
from awsconfig_transformer.models.config import ReportMode
from awsconfig_transformer.models.events import ChangeEnvelope, ChangeType, Input, ResourceType
from awsconfig_transformer.models.output import Change, ChangeKind, Output
from awsconfig_transformer.observability.logging import event_context, get_logger
from awsconfig_transformer.observability.metrics import (
    EVENT_DELAY,
    EVENTS_TRANSFORMED,
    REPORTS,
    TRANSFORM_ERRORS,
    StatsRecorder,
    get_stats,
)
from awsconfig_transformer.reporter import Reporter
from awsconfig_transformer.transform.decoder import decode_envelope
from awsconfig_transformer.transform.diff import DiffIndex
from awsconfig_transformer.transform.tags import extract_tag_changes
from awsconfig_transformer.transform.timestamps import parse_rfc3339
from awsconfig_transformer.transformers import TRANSFORMERS, ResourceTransformer, TransformResult

LogFn = Callable[[], Any]
StatFn = Callable[[], StatsRecorder]


def _default_log_fn() -> Any:
    return get_logger("handler")


class Transformer:
    """Turns one change notification into zero or more Output records.

    Args:
        log_fn:       Returns the logger to use for one invocation.
        stat_fn:      Returns the StatsRecorder to use for one invocation.
        transformers: Resource type to transformer map; defaults to every
                      built-in transformer.
    """

    def __init__(
        self,
        log_fn: LogFn | None = None,
        stat_fn: StatFn | None = None,
        transformers: dict[ResourceType, ResourceTransformer] | None = None,
    ) -> None:
        self._log_fn = log_fn or _default_log_fn
        self._stat_fn = stat_fn or get_stats
        self._transformers = TRANSFORMERS if transformers is None else transformers

    def transform(self, event_input: Input) -> list[Output]:
        """Transform *event_input*.

        Unsupported resource types, NONE change types and rejected events
        yield an empty list.  Every other failure is logged and re-raised as
        a TransformError.
        """
        log = self._log_fn()
        stats = self._stat_fn()

        processed_at = parse_rfc3339(event_input.processed_timestamp)
        if processed_at is not None:
            stats.timing(EVENT_DELAY, (datetime.now(tz=UTC) - processed_at).total_seconds())

        try:
            outputs = self._transform(event_input.message, log, stats)
        except TransformError as exc:
            log.error("transform_error", reason=str(exc))
            stats.count(TRANSFORM_ERRORS, reason=exc.reason)
            raise
        return outputs

    def _transform(self, message: str, log: Any, stats: StatsRecorder) -> list[Output]:
        event = decode_envelope(message)
        with event_context(event.resource_type, event.configuration_item.arn):
            return self._transform_event(event, log, stats)

    def _transform_event(self, event: ChangeEnvelope, log: Any, stats: StatsRecorder) -> list[Output]:
        transformer = self._resolve(event.resource_type)
        if transformer is None:
            log.info("unsupported_resource", resource=event.resource_type)
            return []

        result = self._dispatch(event, transformer)
        if result is None:
            return []
        if result.reject:
            log.info("event_rejected", resource=event.resource_type)
            return []

        tag_changes = extract_tag_changes(DiffIndex(event.configuration_item_diff.changed_properties))
        if tag_changes:
            kind = ChangeKind.DELETED if event.change_type == ChangeType.DELETE else ChangeKind.ADDED
            for output in result.outputs:
                output.changes.append(Change(change_type=kind, tag_changes=list(tag_changes)))

        stats.count(EVENTS_TRANSFORMED, resource_type=event.resource_type)
        return result.outputs

    def _resolve(self, resource_type: str) -> ResourceTransformer | None:
        try:
            return self._transformers.get(ResourceType(resource_type))
        except ValueError:
            return None

    @staticmethod
    def _dispatch(event: ChangeEnvelope, transformer: ResourceTransformer) -> TransformResult | None:
        match event.change_type:
            case ChangeType.CREATE:
                return transformer.create(event)
            case ChangeType.UPDATE:
                return transformer.update(event)
            case ChangeType.DELETE:
                return transformer.delete(event)
            case ChangeType.NONE:
                return None
            case other:
                raise UnsupportedChangeTypeError(other)


class ChangeEventHandler:
    """Transforms a notification and reports the resulting records.

    Args:
        transformer: The dispatching Transformer.
        reporter:    Delivery collaborator.
        mode:        One report call per record, or one batched call.
        timeout:     Seconds allowed for delivering all records of one event.
    """

    def __init__(
        self,
        transformer: Transformer,
        reporter: Reporter,
        mode: ReportMode = ReportMode.SINGLE,
        timeout: float = 10.0,
        log_fn: LogFn | None = None,
        stat_fn: StatFn | None = None,
    ) -> None:
        self._transformer = transformer
        self._reporter = reporter
        self._mode = mode
        self._timeout = timeout
        self._log_fn = log_fn or _default_log_fn
        self._stat_fn = stat_fn or get_stats

    async def handle(self, event_input: Input) -> list[Output]:
        outputs = self._transformer.transform(event_input)
        if not outputs:
            return outputs

        log = self._log_fn()
        stats = self._stat_fn()
        try:
            async with asyncio.timeout(self._timeout):
                if self._mode == ReportMode.BATCH:
                    await self._reporter.report_batch(outputs)
                else:
                    for output in outputs:
                        await self._reporter.report(output)
        except TimeoutError as exc:
            log.error("report_failed", reason="delivery timed out", timeout=self._timeout)
            stats.count(REPORTS, outcome="timeout")
            raise ReportError(f"delivery timed out after {self._timeout}s") from exc
        except ReportError as exc:
            log.error("report_failed", reason=str(exc), status_code=exc.status_code)
            stats.count(REPORTS, outcome="failure")
            raise
        stats.count(REPORTS, outcome="success")
        return outputs

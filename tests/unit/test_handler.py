"""Tests for the dispatching Transformer and the ChangeEventHandler."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from awsconfig_transformer.errors import (
    DecodeError,
    MissingFieldError,
    ReportError,
    UnsupportedChangeTypeError,
)
from awsconfig_transformer.handler import ChangeEventHandler, Transformer
from awsconfig_transformer.models.config import ReportMode
from awsconfig_transformer.models.events import Input
from awsconfig_transformer.models.output import ChangeKind, Tag, TagChange
from awsconfig_transformer.observability.metrics import (
    EVENT_DELAY,
    EVENTS_TRANSFORMED,
    REPORTS,
    TRANSFORM_ERRORS,
)


@pytest.fixture
def transformer(log: MagicMock, stats: MagicMock) -> Transformer:
    return Transformer(log_fn=lambda: log, stat_fn=lambda: stats)


def _event_names(mock_method: MagicMock) -> list[str]:
    return [c.args[0] for c in mock_method.call_args_list]


class TestTransform:
    def test_supported_event(self, transformer, event_input, interface, stats) -> None:
        outputs = transformer.transform(event_input(configuration={"networkInterfaces": [interface()]}))
        assert len(outputs) == 1
        stats.count.assert_called_once_with(EVENTS_TRANSFORMED, resource_type="AWS::EC2::Instance")

    def test_unsupported_resource_type(self, transformer, event_input, log) -> None:
        outputs = transformer.transform(event_input(resource_type="AWS::S3::Bucket", configuration={}))
        assert outputs == []
        assert "unsupported_resource" in _event_names(log.info)
        log.error.assert_not_called()

    def test_none_change_type(self, transformer, event_input, interface) -> None:
        event = event_input(change_type="NONE", configuration={"networkInterfaces": [interface()]})
        assert transformer.transform(event) == []

    def test_unknown_change_type(self, transformer, event_input, log, stats) -> None:
        with pytest.raises(UnsupportedChangeTypeError, match="not create, update, or delete"):
            transformer.transform(event_input(change_type="MODIFY", configuration={}))
        assert _event_names(log.error) == ["transform_error"]
        stats.count.assert_called_once_with(TRANSFORM_ERRORS, reason="unsupported_change_type")

    def test_missing_account_id(self, transformer, event_input, interface, log) -> None:
        event = event_input(configuration={"networkInterfaces": [interface()]}, account_id="")
        with pytest.raises(MissingFieldError, match="AWSAccountID"):
            transformer.transform(event)
        log.error.assert_called_once()

    def test_invalid_message(self, transformer, stats) -> None:
        with pytest.raises(DecodeError):
            transformer.transform(Input(message="{not json"))
        stats.count.assert_called_once_with(TRANSFORM_ERRORS, reason="decode_error")

    def test_out_of_range_elb_created_time_is_decode_error(self, transformer, event_input, log, stats) -> None:
        event = event_input(
            resource_type="AWS::ElasticLoadBalancing::LoadBalancer",
            configuration={"dnsname": "internal-elb.us-west-2.elb.amazonaws.com", "createdTime": 10**20},
        )
        with pytest.raises(DecodeError, match="createdTime"):
            transformer.transform(event)
        assert _event_names(log.error) == ["transform_error"]
        stats.count.assert_called_once_with(TRANSFORM_ERRORS, reason="decode_error")

    def test_rejected_event_yields_nothing(self, transformer, event_input, log) -> None:
        config = {"description": "RDSNetworkInterface", "requesterManaged": True, "requesterId": "amazon-rds"}
        outputs = transformer.transform(event_input(resource_type="AWS::EC2::NetworkInterface", configuration=config))
        assert outputs == []
        assert "event_rejected" in _event_names(log.info)

    def test_tag_changes_attached_to_every_output(self, transformer, event_input, interface, entry) -> None:
        config = {
            "networkInterfaces": [
                interface(),
                interface(private_ip="172.31.40.12", attach_time="2019-02-22T21:01:55.000Z"),
            ]
        }
        changed = {"Configuration.Tags.0": entry(None, {"key": "env", "value": "prod"}, "CREATE")}

        outputs = transformer.transform(event_input(configuration=config, changed_properties=changed))

        assert len(outputs) == 2
        for output in outputs:
            tag_change = output.changes[-1]
            assert tag_change.change_type == ChangeKind.ADDED
            assert tag_change.tag_changes == [TagChange(updated=Tag("env", "prod"))]

    def test_tag_changes_on_delete_are_deleted(self, transformer, event_input, entry) -> None:
        changed = {
            "Configuration": entry({"cidrBlock": "10.0.0.0/24", "vpcId": "vpc-1"}, None, "DELETE"),
            "Configuration.Tags.0": entry({"key": "env", "value": "prod"}, None, "DELETE"),
        }
        (output,) = transformer.transform(
            event_input(resource_type="AWS::EC2::Subnet", change_type="DELETE", changed_properties=changed)
        )
        assert [c.change_type for c in output.changes] == [ChangeKind.DELETED, ChangeKind.DELETED]
        assert output.changes[-1].tag_changes == [TagChange(previous=Tag("env", "prod"))]

    def test_update_with_only_tag_changes(self, transformer, event_input, entry) -> None:
        changed = {"Configuration.Tags.0": entry({"key": "env", "value": "dev"}, {"key": "env", "value": "prod"})}
        (output,) = transformer.transform(
            event_input(change_type="UPDATE", configuration={"networkInterfaces": []}, changed_properties=changed)
        )
        (change,) = output.changes
        assert change.tag_changes == [TagChange(previous=Tag("env", "dev"), updated=Tag("env", "prod"))]

    def test_delay_recorded(self, transformer, notification, stats) -> None:
        event = Input(
            message=notification(configuration={"networkInterfaces": []}),
            processed_timestamp="2019-02-22T20:43:11.100000000Z",
        )
        transformer.transform(event)
        metric, seconds = stats.timing.call_args.args
        assert metric == EVENT_DELAY
        assert seconds > 0

    def test_delay_skipped_without_timestamp(self, transformer, event_input, stats) -> None:
        transformer.transform(event_input(configuration={"networkInterfaces": []}))
        stats.timing.assert_not_called()


class TestChangeEventHandler:
    @pytest.fixture
    def reporter(self) -> AsyncMock:
        return AsyncMock()

    def _handler(self, reporter, log, stats, mode=ReportMode.SINGLE, timeout=1.0) -> ChangeEventHandler:
        return ChangeEventHandler(
            transformer=Transformer(log_fn=lambda: log, stat_fn=lambda: stats),
            reporter=reporter,
            mode=mode,
            timeout=timeout,
            log_fn=lambda: log,
            stat_fn=lambda: stats,
        )

    @staticmethod
    def _two_interfaces(event_input, interface) -> Input:
        return event_input(
            configuration={
                "networkInterfaces": [interface(), interface(private_ip="10.0.0.9", attach_time="2019-02-22T21:00:00Z")]
            }
        )

    async def test_single_mode_reports_each_record(self, reporter, log, stats, event_input, interface) -> None:
        handler = self._handler(reporter, log, stats)
        outputs = await handler.handle(self._two_interfaces(event_input, interface))
        assert reporter.report.await_count == 2
        assert [c.args[0] for c in reporter.report.await_args_list] == outputs
        reporter.report_batch.assert_not_awaited()
        stats.count.assert_any_call(REPORTS, outcome="success")

    async def test_batch_mode_reports_once(self, reporter, log, stats, event_input, interface) -> None:
        handler = self._handler(reporter, log, stats, mode=ReportMode.BATCH)
        outputs = await handler.handle(self._two_interfaces(event_input, interface))
        reporter.report_batch.assert_awaited_once_with(outputs)
        reporter.report.assert_not_awaited()

    async def test_nothing_to_report(self, reporter, log, stats, event_input) -> None:
        handler = self._handler(reporter, log, stats)
        assert await handler.handle(event_input(resource_type="AWS::S3::Bucket")) == []
        reporter.report.assert_not_awaited()

    async def test_report_failure_propagates(self, reporter, log, stats, event_input, interface) -> None:
        reporter.report.side_effect = ReportError("unexpected response from streaming appliance: 400", 400)
        handler = self._handler(reporter, log, stats)
        with pytest.raises(ReportError):
            await handler.handle(event_input(configuration={"networkInterfaces": [interface()]}))
        assert "report_failed" in _event_names(log.error)
        stats.count.assert_any_call(REPORTS, outcome="failure")

    async def test_delivery_timeout(self, log, stats, event_input, interface) -> None:
        reporter = AsyncMock()

        async def _hang(_output) -> None:
            await asyncio.sleep(5)

        reporter.report.side_effect = _hang
        handler = self._handler(reporter, log, stats, timeout=0.01)
        with pytest.raises(ReportError, match="timed out"):
            await handler.handle(event_input(configuration={"networkInterfaces": [interface()]}))
        stats.count.assert_any_call(REPORTS, outcome="timeout")

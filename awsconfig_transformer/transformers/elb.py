"""Classic and application load balancer transformer.

Both generations expose a single DNS name, which never changes for the
lifetime of the load balancer.  They disagree on how ``createdTime`` is
encoded: classic load balancers report epoch milliseconds, v2 load
balancers an ISO-8601 string with milliseconds.  ``decode_elb_configuration``
normalizes both to the latter.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from awsconfig_transformer.errors import DecodeError, MissingDiffKeyError
from awsconfig_transformer.models.events import ChangeEnvelope, ResourceType
from awsconfig_transformer.models.output import Change, ChangeKind
from awsconfig_transformer.transform.decoder import base_output
from awsconfig_transformer.transform.diff import DiffIndex
from awsconfig_transformer.transform.payload import as_object, decode_tag_list, get_field, get_str
from awsconfig_transformer.transformers.base import ResourceTransformer, TransformResult

SUPPLEMENTARY_TAGS_KEY = "SupplementaryConfiguration.Tags"


@dataclass(frozen=True)
class ELBConfiguration:
    dns_name: str
    created_time: str


def millis_to_timestamp(millis: int) -> str:
    """Format epoch milliseconds as ``YYYY-MM-DDTHH:MM:SS.mmmZ``.

    Raises:
        DecodeError: if *millis* is outside the range a datetime can hold.
    """
    seconds, ms = divmod(millis, 1000)
    try:
        dt = datetime.fromtimestamp(seconds, tz=UTC)
    except (OverflowError, OSError, ValueError) as exc:
        raise DecodeError(f"field createdTime: {millis} is not a valid epoch timestamp") from exc
    return f"{dt:%Y-%m-%dT%H:%M:%S}.{ms:03d}Z"


def _created_time(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        raise DecodeError("field createdTime: expected a timestamp, got bool")
    if isinstance(value, float) and not math.isfinite(value):
        raise DecodeError(f"field createdTime: expected a finite timestamp, got {value}")
    if isinstance(value, (int, float)):
        return millis_to_timestamp(int(value))
    if isinstance(value, str):
        return value
    raise DecodeError(f"field createdTime: expected a timestamp, got {type(value).__name__}")


def decode_elb_configuration(raw: Any, where: str = "configuration") -> ELBConfiguration:
    config = as_object(raw, where)
    return ELBConfiguration(
        dns_name=get_str(config, "dnsName"),
        created_time=_created_time(get_field(config, "createdTime")),
    )


def extract_elb_network_info(config: ELBConfiguration) -> Change:
    hostnames = [config.dns_name] if config.dns_name else []
    return Change(change_type=ChangeKind.ADDED, hostnames=hostnames)


class ELBTransformer(ResourceTransformer):
    resource_types = (ResourceType.ELB, ResourceType.ELBV2)

    def create(self, event: ChangeEnvelope) -> TransformResult:
        output = base_output(event.configuration_item)
        config = decode_elb_configuration(event.configuration_item.configuration)
        output.changes.append(extract_elb_network_info(config))
        output.change_time = config.created_time or output.change_time
        return TransformResult(outputs=[output])

    def update(self, event: ChangeEnvelope) -> TransformResult:
        # DNS names cannot change, so there are no network facts to report.
        return TransformResult(outputs=[base_output(event.configuration_item)])

    def delete(self, event: ChangeEnvelope) -> TransformResult:
        output = base_output(event.configuration_item)
        diff = DiffIndex(event.configuration_item_diff.changed_properties)
        entry = diff.require("Configuration")
        if entry.previous_value is None:
            raise MissingDiffKeyError("Configuration.previousValue")
        config = decode_elb_configuration(entry.previous_value, "Configuration.previousValue")

        change = extract_elb_network_info(config)
        change.change_type = ChangeKind.DELETED
        output.changes.append(change)

        tags_entry = diff.get(SUPPLEMENTARY_TAGS_KEY)
        if tags_entry is not None:
            output.tags.update(decode_tag_list(tags_entry.previous_value, f"{SUPPLEMENTARY_TAGS_KEY}.previousValue"))
        return TransformResult(outputs=[output])

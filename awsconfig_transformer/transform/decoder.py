"""Envelope decoding: raw notification text to ChangeEnvelope and base Output."""

from __future__ import annotations

import json
from typing import Any

from awsconfig_transformer.errors import DecodeError
from awsconfig_transformer.models.events import (
    ChangeEnvelope,
    ConfigurationItem,
    ConfigurationItemDiff,
)
from awsconfig_transformer.models.output import Output
from awsconfig_transformer.transform.payload import as_object, get_field, get_object, get_str


def decode_envelope(message: str) -> ChangeEnvelope:
    """Parse the stringified AWS Config notification.

    Raises:
        DecodeError: if *message* is not JSON or its sections have the wrong shape.
    """
    try:
        raw = json.loads(message)
    except (json.JSONDecodeError, TypeError) as exc:
        raise DecodeError(f"notification is not valid JSON: {exc}") from exc

    root = as_object(raw, "notification")
    return ChangeEnvelope(
        configuration_item=_decode_item(get_object(root, "configurationItem")),
        configuration_item_diff=_decode_diff(get_object(root, "configurationItemDiff")),
    )


def _decode_item(item: dict[str, Any]) -> ConfigurationItem:
    raw_tags = get_field(item, "tags")
    tags = None
    if raw_tags is not None:
        tags = {str(k): "" if v is None else str(v) for k, v in as_object(raw_tags, "configurationItem.tags").items()}
    return ConfigurationItem(
        aws_account_id=get_str(item, "awsAccountId"),
        aws_region=get_str(item, "awsRegion"),
        capture_time=get_str(item, "configurationItemCaptureTime"),
        resource_type=get_str(item, "resourceType"),
        arn=get_str(item, "ARN"),
        tags=tags,
        configuration=get_field(item, "configuration"),
    )


def _decode_diff(diff: dict[str, Any]) -> ConfigurationItemDiff:
    return ConfigurationItemDiff(
        change_type=get_str(diff, "changeType"),
        changed_properties=get_object(diff, "changedProperties"),
    )


def base_output(item: ConfigurationItem) -> Output:
    """Build the identity record every transformer starts from.

    Raises:
        MissingFieldError: for the first of account id, region, capture time
            and resource type that is empty.
    """
    return Output(
        account_id=item.aws_account_id,
        region=item.aws_region,
        change_time=item.capture_time,
        resource_type=item.resource_type,
        arn=item.arn,
        tags=dict(item.tags or {}),
    )

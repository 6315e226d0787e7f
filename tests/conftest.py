"""Shared notification builders for transformer tests.

The builders produce AWS Config ConfigurationItemChangeNotification
payloads shaped like the ones AWS Config publishes to SNS, with only the
fields the transformers read filled in.
"""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import MagicMock

import pytest

from awsconfig_transformer.models.events import ChangeEnvelope, Input
from awsconfig_transformer.transform.decoder import decode_envelope

ACCOUNT_ID = "123456789012"
REGION = "us-west-2"
CAPTURE_TIME = "2019-02-22T20:43:10.208Z"
EC2_ARN = "arn:aws:ec2:us-west-2:123456789012:instance/i-0a763ac3ee37d8d2b"
BASE_TAGS = {"business_unit": "CISO-Security", "service_name": "foo-bar"}

_UNSET: Any = object()


def build_item(
    resource_type: str = "AWS::EC2::Instance",
    configuration: Any = None,
    tags: Any = _UNSET,
    account_id: str = ACCOUNT_ID,
    region: str = REGION,
    capture_time: str = CAPTURE_TIME,
    arn: str = EC2_ARN,
) -> dict[str, Any]:
    item: dict[str, Any] = {
        "relatedEvents": [],
        "relationships": [],
        "configuration": configuration,
        "supplementaryConfiguration": {},
        "tags": dict(BASE_TAGS) if tags is _UNSET else tags,
        "configurationItemVersion": "1.3",
        "configurationItemCaptureTime": capture_time,
        "configurationStateId": 1550868190208,
        "awsAccountId": account_id,
        "configurationItemStatus": "OK",
        "resourceType": resource_type,
        "resourceId": "i-0a763ac3ee37d8d2b",
        "resourceName": None,
        "ARN": arn,
        "awsRegion": region,
        "availabilityZone": "us-west-2a",
    }
    return item


def build_notification(
    resource_type: str = "AWS::EC2::Instance",
    change_type: str = "CREATE",
    configuration: Any = None,
    changed_properties: dict[str, Any] | None = None,
    **item_kwargs: Any,
) -> str:
    """Return the stringified notification, as carried in the SNS ``Message`` field."""
    return json.dumps(
        {
            "configurationItemDiff": {
                "changedProperties": changed_properties or {},
                "changeType": change_type,
            },
            "configurationItem": build_item(resource_type, configuration, **item_kwargs),
            "notificationCreationTime": "2019-02-22T20:43:11.021Z",
            "messageType": "ConfigurationItemChangeNotification",
            "recordVersion": "1.3",
        }
    )


def build_envelope(*args: Any, **kwargs: Any) -> ChangeEnvelope:
    return decode_envelope(build_notification(*args, **kwargs))


def build_input(*args: Any, **kwargs: Any) -> Input:
    return Input(message=build_notification(*args, **kwargs))


def build_interface(
    private_ip: str = "172.31.30.79",
    public_ip: str | None = "34.222.120.66",
    public_dns: str | None = "ec2-34-222-120-66.us-west-2.compute.amazonaws.com",
    attach_time: str | None = "2019-02-22T20:42:20.000Z",
    eni_id: str = "eni-0a1b2c3d4e5f67890",
) -> dict[str, Any]:
    """An EC2 instance networkInterfaces[] entry with one private IP block."""
    association = None
    if public_ip or public_dns:
        association = {"publicIp": public_ip, "publicDnsName": public_dns, "ipOwnerId": "amazon"}
    return {
        "networkInterfaceId": eni_id,
        "subnetId": "subnet-7b600d22",
        "vpcId": "vpc-8af6d7ef",
        "description": "",
        "ownerId": ACCOUNT_ID,
        "privateDnsName": f"ip-{private_ip.replace('.', '-')}.us-west-2.compute.internal",
        "association": association,
        "attachment": None if attach_time is None else {"attachTime": attach_time, "deviceIndex": 0, "status": "attached"},
        "privateIpAddresses": [
            {
                "privateIpAddress": private_ip,
                "privateDnsName": f"ip-{private_ip.replace('.', '-')}.us-west-2.compute.internal",
                "primary": True,
                "association": association,
            }
        ],
    }


def diff_entry(previous: Any = None, updated: Any = None, change_type: str = "UPDATE") -> dict[str, Any]:
    return {"previousValue": previous, "updatedValue": updated, "changeType": change_type}


@pytest.fixture
def notification():
    return build_notification


@pytest.fixture
def envelope():
    return build_envelope


@pytest.fixture
def event_input():
    return build_input


@pytest.fixture
def interface():
    return build_interface


@pytest.fixture
def entry():
    return diff_entry


@pytest.fixture
def log() -> MagicMock:
    return MagicMock()


@pytest.fixture
def stats() -> MagicMock:
    return MagicMock()

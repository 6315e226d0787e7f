"""Inbound change-notification data structures and enumerations."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class ChangeType(StrEnum):
    """AWS Config change type of a configuration item diff or diff entry."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    NONE = "NONE"


class ResourceType(StrEnum):
    """AWS resource types with a registered transformer."""

    EC2_INSTANCE = "AWS::EC2::Instance"
    ELB = "AWS::ElasticLoadBalancing::LoadBalancer"
    ELBV2 = "AWS::ElasticLoadBalancingV2::LoadBalancer"
    NETWORK_INTERFACE = "AWS::EC2::NetworkInterface"
    SUBNET = "AWS::EC2::Subnet"


@dataclass(frozen=True)
class Input:
    """SNS-style envelope handed to the handler by the invocation adapter.

    ``message`` is the stringified AWS Config change notification.
    ``processed_timestamp`` is optional and only feeds the delay metric.
    """

    message: str
    processed_timestamp: str = ""

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> Input:
        return cls(
            message=str(payload.get("Message") or ""),
            processed_timestamp=str(payload.get("ProcessedTimestamp") or ""),
        )


@dataclass(frozen=True)
class ConfigurationItem:
    """Identity section of the notification plus the opaque resource configuration.

    ``configuration`` is kept as the raw decoded JSON value; each transformer
    reads the fields it needs from it.
    """

    aws_account_id: str = ""
    aws_region: str = ""
    capture_time: str = ""
    resource_type: str = ""
    arn: str = ""
    tags: dict[str, str] | None = None
    configuration: Any = None


@dataclass(frozen=True)
class ConfigurationItemDiff:
    """Change type plus the path-keyed map of raw before/after entries."""

    change_type: str = ""
    changed_properties: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ChangeEnvelope:
    """Decoded AWS Config ConfigurationItemChangeNotification."""

    configuration_item: ConfigurationItem
    configuration_item_diff: ConfigurationItemDiff

    @property
    def resource_type(self) -> str:
        return self.configuration_item.resource_type

    @property
    def change_type(self) -> str:
        return self.configuration_item_diff.change_type

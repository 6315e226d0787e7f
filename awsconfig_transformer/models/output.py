"""Normalized network-change records handed to the reporter.

``to_dict`` on each structure produces the wire JSON consumed by the
stream appliance.  Optional lists are omitted when empty; ``changeType`` is
always present.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from awsconfig_transformer.errors import MissingFieldError


class ChangeKind(StrEnum):
    """Direction of a network change."""

    ADDED = "ADDED"
    DELETED = "DELETED"


@dataclass(frozen=True)
class Tag:
    """A single resource tag."""

    key: str
    value: str

    def to_dict(self) -> dict[str, str]:
        return {"key": self.key, "value": self.value}


@dataclass(frozen=True)
class TagChange:
    """Addition, removal or modification of one tag.  At least one side is set."""

    previous: Tag | None = None
    updated: Tag | None = None

    def __post_init__(self) -> None:
        if self.previous is None and self.updated is None:
            raise ValueError("TagChange requires a previous or an updated tag")

    def to_dict(self) -> dict[str, object]:
        out: dict[str, object] = {}
        if self.updated is not None:
            out["updatedValue"] = self.updated.to_dict()
        if self.previous is not None:
            out["previousValue"] = self.previous.to_dict()
        return out


@dataclass
class Change:
    """Network facts that were added to or removed from a resource."""

    change_type: ChangeKind
    public_ips: list[str] = field(default_factory=list)
    private_ips: list[str] = field(default_factory=list)
    hostnames: list[str] = field(default_factory=list)
    cidr_block: str = ""
    related_resources: list[str] = field(default_factory=list)
    tag_changes: list[TagChange] = field(default_factory=list)

    def has_addresses(self) -> bool:
        """Return True if any of the three address lists is non-empty."""
        return bool(self.public_ips or self.private_ips or self.hostnames)

    def to_dict(self) -> dict[str, object]:
        out: dict[str, object] = {}
        if self.public_ips:
            out["publicIpAddresses"] = list(self.public_ips)
        if self.private_ips:
            out["privateIpAddresses"] = list(self.private_ips)
        if self.hostnames:
            out["hostnames"] = list(self.hostnames)
        if self.cidr_block:
            out["cidrBlock"] = self.cidr_block
        if self.related_resources:
            out["relatedResources"] = list(self.related_resources)
        if self.tag_changes:
            out["tagChanges"] = [tc.to_dict() for tc in self.tag_changes]
        out["changeType"] = self.change_type.value
        return out


@dataclass
class Output:
    """One transformed record for the stream appliance.

    Construction fails with MissingFieldError when a required field is empty,
    checked in the order account, region, change time, resource type.
    """

    account_id: str
    region: str
    change_time: str
    resource_type: str
    arn: str = ""
    tags: dict[str, str] = field(default_factory=dict)
    changes: list[Change] = field(default_factory=list)

    def __post_init__(self) -> None:
        for name, value in (
            ("AWSAccountID", self.account_id),
            ("AWSRegion", self.region),
            ("ConfigurationItemCaptureTime", self.change_time),
            ("ResourceType", self.resource_type),
        ):
            if not value:
                raise MissingFieldError(name)

    def to_dict(self) -> dict[str, object]:
        return {
            "changeTime": self.change_time,
            "resourceType": self.resource_type,
            "accountId": self.account_id,
            "region": self.region,
            "arn": self.arn,
            "tags": dict(self.tags),
            "changes": [c.to_dict() for c in self.changes],
        }

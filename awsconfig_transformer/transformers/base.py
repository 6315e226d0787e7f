"""Transformer contract shared by every supported resource type."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar

from awsconfig_transformer.models.events import ChangeEnvelope, ResourceType
from awsconfig_transformer.models.output import Output
from awsconfig_transformer.transform.payload import as_object, get_object, get_str


@dataclass(frozen=True)
class TransformResult:
    """Records produced by one transformer operation.

    ``reject`` marks valid input that intentionally yields no network facts;
    it is not an error.
    """

    outputs: list[Output] = field(default_factory=list)
    reject: bool = False


class ResourceTransformer(ABC):
    """Create/Update/Delete operations over a decoded change notification."""

    resource_types: ClassVar[tuple[ResourceType, ...]] = ()

    @abstractmethod
    def create(self, event: ChangeEnvelope) -> TransformResult: ...

    @abstractmethod
    def update(self, event: ChangeEnvelope) -> TransformResult: ...

    @abstractmethod
    def delete(self, event: ChangeEnvelope) -> TransformResult: ...


def extract_ip_blocks(blocks: list[dict[str, Any]]) -> tuple[list[str], list[str], list[str]]:
    """Return (private IPs, public IPs, public DNS names) of private-IP blocks.

    Public values come from each block's ``association`` and are skipped
    when empty.
    """
    private: list[str] = []
    public: list[str] = []
    hostnames: list[str] = []
    for block in blocks:
        private_ip = get_str(block, "privateIpAddress")
        if private_ip:
            private.append(private_ip)
        association = get_object(block, "association")
        public_ip = get_str(association, "publicIp")
        if public_ip:
            public.append(public_ip)
        public_dns = get_str(association, "publicDnsName")
        if public_dns:
            hostnames.append(public_dns)
    return private, public, hostnames


def configuration_of(event: ChangeEnvelope) -> dict[str, Any]:
    """The current resource configuration as a JSON object."""
    return as_object(event.configuration_item.configuration, "configurationItem.configuration")

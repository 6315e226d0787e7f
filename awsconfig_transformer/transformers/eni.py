"""Network interface transformer.

Only interfaces that the load-balancing service manages on the account's
behalf are of interest: they carry the private addresses of a load
balancer.  Every other interface is rejected without error.
"""

from __future__ import annotations

from typing import Any

from awsconfig_transformer.errors import MissingDiffKeyError
from awsconfig_transformer.models.events import ChangeEnvelope, ChangeType, ResourceType
from awsconfig_transformer.models.output import Change, ChangeKind
from awsconfig_transformer.observability.logging import get_logger
from awsconfig_transformer.transform.decoder import base_output
from awsconfig_transformer.transform.diff import DiffIndex
from awsconfig_transformer.transform.payload import as_object, get_bool, get_objects, get_str
from awsconfig_transformer.transform.reduce import remove_duplicates
from awsconfig_transformer.transformers.base import (
    ResourceTransformer,
    TransformResult,
    configuration_of,
    extract_ip_blocks,
)

_logger = get_logger("transformers.eni")

ELB_REQUESTER_ID = "amazon-elb"
PRIVATE_IPS_PREFIX = "Configuration.PrivateIpAddresses."


def is_elb_managed(config: dict[str, Any]) -> bool:
    return get_bool(config, "requesterManaged") and get_str(config, "requesterId") == ELB_REQUESTER_ID


def related_resource_from_description(description: str) -> str | None:
    """Best-effort owner of a managed interface: the last word of its description.

    Observed formats are ``ELB <classic-name>`` and ``ELB app/<name>/<id>``;
    there is no structured link back to the load balancer.
    """
    pieces = description.split()
    if not pieces:
        return None
    return pieces[-1]


def _related(config: dict[str, Any]) -> list[str]:
    related = related_resource_from_description(get_str(config, "description"))
    return [related] if related else []


def extract_eni_info(config: dict[str, Any], change_type: ChangeKind) -> Change:
    private, public, hostnames = extract_ip_blocks(get_objects(config, "privateIpAddresses"))
    return Change(
        change_type=change_type,
        private_ips=private,
        public_ips=public,
        hostnames=hostnames,
        related_resources=_related(config),
    )


class ENITransformer(ResourceTransformer):
    resource_types = (ResourceType.NETWORK_INTERFACE,)

    def create(self, event: ChangeEnvelope) -> TransformResult:
        output = base_output(event.configuration_item)
        config = configuration_of(event)
        if not is_elb_managed(config):
            _logger.debug("eni_not_elb_managed", arn=output.arn)
            return TransformResult(outputs=[output], reject=True)
        output.changes.append(extract_eni_info(config, ChangeKind.ADDED))
        return TransformResult(outputs=[output])

    def update(self, event: ChangeEnvelope) -> TransformResult:
        output = base_output(event.configuration_item)
        config = configuration_of(event)
        if not is_elb_managed(config):
            _logger.debug("eni_not_elb_managed", arn=output.arn)
            return TransformResult(outputs=[output], reject=True)

        added = Change(change_type=ChangeKind.ADDED)
        removed = Change(change_type=ChangeKind.DELETED)
        diff = DiffIndex(event.configuration_item_diff.changed_properties)
        for entry in diff.prefixed(PRIVATE_IPS_PREFIX):
            if entry.change_type == ChangeType.DELETE:
                block = as_object(entry.previous_value, f"{entry.key}.previousValue")
                bucket = removed
            else:
                block = as_object(entry.updated_value, f"{entry.key}.updatedValue")
                bucket = added
            private, public, hostnames = extract_ip_blocks([block])
            bucket.private_ips.extend(private)
            bucket.public_ips.extend(public)
            bucket.hostnames.extend(hostnames)

        remove_duplicates(added, removed)

        related = _related(config)
        for change in (added, removed):
            if change.has_addresses():
                change.related_resources = list(related)
                output.changes.append(change)
        return TransformResult(outputs=[output])

    def delete(self, event: ChangeEnvelope) -> TransformResult:
        output = base_output(event.configuration_item)
        diff = DiffIndex(event.configuration_item_diff.changed_properties)
        entry = diff.require("Configuration")
        if entry.previous_value is None:
            raise MissingDiffKeyError("Configuration.previousValue")
        previous = as_object(entry.previous_value, "Configuration.previousValue")
        if not is_elb_managed(previous):
            _logger.debug("eni_not_elb_managed", arn=output.arn)
            return TransformResult(outputs=[output], reject=True)
        output.changes.append(extract_eni_info(previous, ChangeKind.DELETED))
        return TransformResult(outputs=[output])

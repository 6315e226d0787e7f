"""EC2 instance transformer.

Network facts of an instance live on its network interfaces: every private
IP block contributes its private address and, when associated, its public
address and public DNS name.
"""

from __future__ import annotations

from typing import Any

from awsconfig_transformer.errors import MissingDiffKeyError
from awsconfig_transformer.models.events import ChangeEnvelope, ChangeType, ResourceType
from awsconfig_transformer.models.output import Change, ChangeKind
from awsconfig_transformer.transform.decoder import base_output
from awsconfig_transformer.transform.diff import DiffIndex
from awsconfig_transformer.transform.partition import AttachTimes, partition_by_attach_time
from awsconfig_transformer.transform.payload import (
    as_object,
    decode_tag_list,
    get_field,
    get_object,
    get_objects,
    get_str,
)
from awsconfig_transformer.transform.reduce import remove_duplicates
from awsconfig_transformer.transformers.base import (
    ResourceTransformer,
    TransformResult,
    configuration_of,
    extract_ip_blocks,
)

NETWORK_INTERFACES_PREFIX = "Configuration.NetworkInterfaces."


def _interface_facts(ni: dict[str, Any]) -> tuple[list[str], list[str], list[str]]:
    return extract_ip_blocks(get_objects(ni, "privateIpAddresses"))


def _attach_time(ni: dict[str, Any]) -> str:
    return get_str(get_object(ni, "attachment"), "attachTime")


def extract_ec2_network_info(config: dict[str, Any]) -> Change:
    """Collect the facts of every interface in an instance configuration."""
    change = Change(change_type=ChangeKind.ADDED)
    for ni in get_objects(config, "networkInterfaces"):
        private, public, hostnames = _interface_facts(ni)
        change.private_ips.extend(private)
        change.public_ips.extend(public)
        change.hostnames.extend(hostnames)
    return change


class EC2Transformer(ResourceTransformer):
    resource_types = (ResourceType.EC2_INSTANCE,)

    def create(self, event: ChangeEnvelope) -> TransformResult:
        """One ADDED record per network interface, timed at its attachment."""
        item = event.configuration_item
        base_output(item)  # identity must be valid even when there are no interfaces
        outputs = []
        for ni in get_objects(configuration_of(event), "networkInterfaces"):
            private, public, hostnames = _interface_facts(ni)
            output = base_output(item)
            output.change_time = _attach_time(ni) or output.change_time
            output.changes.append(
                Change(
                    change_type=ChangeKind.ADDED,
                    private_ips=private,
                    public_ips=public,
                    hostnames=hostnames,
                )
            )
            outputs.append(output)
        return TransformResult(outputs=outputs)

    def update(self, event: ChangeEnvelope) -> TransformResult:
        """Diff interface entries into added/removed buckets.

        Addresses present in both buckets cancel out.  Removed addresses form
        one DELETED record at the capture time; added addresses form one
        ADDED record per interface attach time.
        """
        item = event.configuration_item
        base = base_output(item)
        added = Change(change_type=ChangeKind.ADDED)
        removed = Change(change_type=ChangeKind.DELETED)
        attach_times = AttachTimes()

        diff = DiffIndex(event.configuration_item_diff.changed_properties)
        for entry in diff.prefixed(NETWORK_INTERFACES_PREFIX):
            if entry.change_type == ChangeType.DELETE:
                ni = as_object(entry.previous_value, f"{entry.key}.previousValue")
                bucket = removed
            else:
                ni = as_object(entry.updated_value, f"{entry.key}.updatedValue")
                bucket = added
            private, public, hostnames = _interface_facts(ni)
            bucket.private_ips.extend(private)
            bucket.public_ips.extend(public)
            bucket.hostnames.extend(hostnames)
            if bucket is added:
                attach_times.record(_attach_time(ni), private, public, hostnames)

        remove_duplicates(added, removed)

        outputs = []
        if removed.has_addresses():
            base.changes.append(removed)
            outputs.append(base)
        for attach_time, change in partition_by_attach_time(added, attach_times):
            output = base_output(item)
            output.change_time = attach_time or output.change_time
            output.changes.append(change)
            outputs.append(output)
        if not outputs:
            outputs.append(base)
        return TransformResult(outputs=outputs)

    def delete(self, event: ChangeEnvelope) -> TransformResult:
        """One DELETED record from the previous configuration, with its tags recovered."""
        output = base_output(event.configuration_item)
        diff = DiffIndex(event.configuration_item_diff.changed_properties)
        entry = diff.require("Configuration")
        if entry.previous_value is None:
            raise MissingDiffKeyError("Configuration.previousValue")
        previous = as_object(entry.previous_value, "Configuration.previousValue")

        # tags are gone from the item itself once the instance is terminated
        output.tags.update(decode_tag_list(get_field(previous, "tags"), "Configuration.previousValue.tags"))

        change = extract_ec2_network_info(previous)
        change.change_type = ChangeKind.DELETED
        output.changes.append(change)
        return TransformResult(outputs=[output])

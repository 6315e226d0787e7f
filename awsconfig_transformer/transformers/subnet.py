"""Subnet transformer: the CIDR block and the VPC it belongs to."""

from __future__ import annotations

from typing import Any

from awsconfig_transformer.errors import MissingDiffKeyError
from awsconfig_transformer.models.events import ChangeEnvelope, ResourceType
from awsconfig_transformer.models.output import Change, ChangeKind
from awsconfig_transformer.transform.decoder import base_output
from awsconfig_transformer.transform.diff import DiffIndex
from awsconfig_transformer.transform.payload import as_object, get_str
from awsconfig_transformer.transformers.base import ResourceTransformer, TransformResult, configuration_of


def extract_subnet_info(config: dict[str, Any], change_type: ChangeKind) -> Change:
    vpc_id = get_str(config, "vpcId")
    return Change(
        change_type=change_type,
        cidr_block=get_str(config, "cidrBlock"),
        related_resources=[vpc_id] if vpc_id else [],
    )


class SubnetTransformer(ResourceTransformer):
    resource_types = (ResourceType.SUBNET,)

    def create(self, event: ChangeEnvelope) -> TransformResult:
        output = base_output(event.configuration_item)
        output.changes.append(extract_subnet_info(configuration_of(event), ChangeKind.ADDED))
        return TransformResult(outputs=[output])

    def update(self, event: ChangeEnvelope) -> TransformResult:
        return TransformResult(outputs=[base_output(event.configuration_item)])

    def delete(self, event: ChangeEnvelope) -> TransformResult:
        output = base_output(event.configuration_item)
        entry = DiffIndex(event.configuration_item_diff.changed_properties).require("Configuration")
        if entry.previous_value is None:
            raise MissingDiffKeyError("Configuration.previousValue")
        previous = as_object(entry.previous_value, "Configuration.previousValue")
        output.changes.append(extract_subnet_info(previous, ChangeKind.DELETED))
        return TransformResult(outputs=[output])

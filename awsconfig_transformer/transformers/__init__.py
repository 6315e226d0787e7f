"""Per-resource-type transformers.

``TRANSFORMERS`` maps every supported ResourceType to the transformer that
handles it; resource types absent from the map are unsupported.
"""

from awsconfig_transformer.models.events import ResourceType
from awsconfig_transformer.transformers.base import ResourceTransformer, TransformResult
from awsconfig_transformer.transformers.ec2 import EC2Transformer
from awsconfig_transformer.transformers.elb import ELBTransformer
from awsconfig_transformer.transformers.eni import ENITransformer
from awsconfig_transformer.transformers.subnet import SubnetTransformer


def _build_registry() -> dict[ResourceType, ResourceTransformer]:
    registry: dict[ResourceType, ResourceTransformer] = {}
    for transformer in (EC2Transformer(), ELBTransformer(), ENITransformer(), SubnetTransformer()):
        for resource_type in transformer.resource_types:
            registry[resource_type] = transformer
    return registry


TRANSFORMERS = _build_registry()

__all__ = [
    "EC2Transformer",
    "ELBTransformer",
    "ENITransformer",
    "ResourceTransformer",
    "SubnetTransformer",
    "TRANSFORMERS",
    "TransformResult",
]

"""Core data structures for the AWS Config transformer."""

from awsconfig_transformer.models.config import TransformerConfig
from awsconfig_transformer.models.events import (
    ChangeEnvelope,
    ChangeType,
    ConfigurationItem,
    ConfigurationItemDiff,
    Input,
    ResourceType,
)
from awsconfig_transformer.models.output import (
    Change,
    ChangeKind,
    Output,
    Tag,
    TagChange,
)

__all__ = [
    "Change",
    "ChangeEnvelope",
    "ChangeKind",
    "ChangeType",
    "ConfigurationItem",
    "ConfigurationItemDiff",
    "Input",
    "Output",
    "ResourceType",
    "Tag",
    "TagChange",
    "TransformerConfig",
]

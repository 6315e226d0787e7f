"""Decoding and diffing primitives shared by the resource transformers.

Submodules:
    decoder   -- Notification text to ChangeEnvelope, identity validation.
    diff      -- Prefix-filtered, positionally ordered diff entries.
    payload   -- Case-tolerant field access on raw configuration payloads.
    reduce    -- Symmetric-difference reducer for added/removed buckets.
    partition -- Attachment-time partitioner for added network facts.
    tags      -- Tag-change extractor.
"""

from awsconfig_transformer.transform.decoder import base_output, decode_envelope
from awsconfig_transformer.transform.diff import DiffEntry, DiffIndex
from awsconfig_transformer.transform.partition import AttachTimes, partition_by_attach_time
from awsconfig_transformer.transform.reduce import remove_duplicates
from awsconfig_transformer.transform.tags import extract_tag_changes

__all__ = [
    "AttachTimes",
    "DiffEntry",
    "DiffIndex",
    "base_output",
    "decode_envelope",
    "extract_tag_changes",
    "partition_by_attach_time",
    "remove_duplicates",
]

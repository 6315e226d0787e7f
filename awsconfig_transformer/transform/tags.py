"""Tag-change extraction, independent of resource type."""

from __future__ import annotations

from typing import Any

from awsconfig_transformer.errors import MalformedTagChangeError
from awsconfig_transformer.models.output import Tag, TagChange
from awsconfig_transformer.transform.diff import DiffIndex
from awsconfig_transformer.transform.payload import as_object, get_str

TAG_PREFIXES = (
    "Configuration.Tags.",
    "Configuration.TagSet.",
    "SupplementaryConfiguration.Tags.",
    "SupplementaryConfiguration.TagSet.",
    "TagSet.",
)


def _decode_tag(value: Any, where: str) -> Tag | None:
    if value is None:
        return None
    payload = as_object(value, where)
    return Tag(key=get_str(payload, "key"), value=get_str(payload, "value"))


def extract_tag_changes(diff: DiffIndex) -> list[TagChange]:
    """Return one TagChange per tag-path diff entry.

    Raises:
        MalformedTagChangeError: if an entry carries neither a previous nor an
            updated tag.
        DecodeError: if a tag payload is not an object.
    """
    changes: list[TagChange] = []
    for entry in diff.prefixed(*TAG_PREFIXES):
        previous = _decode_tag(entry.previous_value, f"{entry.key}.previousValue")
        updated = _decode_tag(entry.updated_value, f"{entry.key}.updatedValue")
        if previous is None and updated is None:
            raise MalformedTagChangeError(entry.key)
        changes.append(TagChange(previous=previous, updated=updated))
    return changes

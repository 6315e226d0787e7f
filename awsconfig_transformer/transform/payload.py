"""Field access for loosely-typed AWS Config payloads.

AWS Config spells the same field differently across resource generations
(``dnsname`` vs ``dNSName``, ``privateIpAddress`` vs ``PrivateIpAddress``),
so lookups fall back to a case-insensitive match when the exact key is
absent.  A payload of the wrong JSON shape raises DecodeError.
"""

from __future__ import annotations

from typing import Any

from awsconfig_transformer.errors import DecodeError


def as_object(value: Any, where: str) -> dict[str, Any]:
    """Return *value* as a JSON object, treating null as empty."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise DecodeError(f"{where}: expected an object, got {type(value).__name__}")
    return value


def get_field(payload: dict[str, Any], name: str) -> Any:
    if name in payload:
        return payload[name]
    lowered = name.lower()
    for key, value in payload.items():
        if key.lower() == lowered:
            return value
    return None


def get_str(payload: dict[str, Any], name: str) -> str:
    value = get_field(payload, name)
    if value is None:
        return ""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise DecodeError(f"field {name}: expected a string, got {type(value).__name__}")
    return str(value)


def get_bool(payload: dict[str, Any], name: str) -> bool:
    value = get_field(payload, name)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise DecodeError(f"field {name}: expected a boolean, got {type(value).__name__}")
    return value


def get_object(payload: dict[str, Any], name: str) -> dict[str, Any]:
    return as_object(get_field(payload, name), f"field {name}")


def get_objects(payload: dict[str, Any], name: str) -> list[dict[str, Any]]:
    """Return the list of objects under *name*; null or absent is an empty list."""
    value = get_field(payload, name)
    if value is None:
        return []
    if not isinstance(value, list):
        raise DecodeError(f"field {name}: expected a list, got {type(value).__name__}")
    return [as_object(item, f"field {name}[{i}]") for i, item in enumerate(value)]


def decode_tag_list(value: Any, where: str) -> dict[str, str]:
    """Decode a ``[{"key": ..., "value": ...}]`` list into a tag map."""
    if value is None:
        return {}
    if not isinstance(value, list):
        raise DecodeError(f"{where}: expected a list of tags, got {type(value).__name__}")
    tags: dict[str, str] = {}
    for i, item in enumerate(value):
        tag = as_object(item, f"{where}[{i}]")
        tags[get_str(tag, "key")] = get_str(tag, "value")
    return tags

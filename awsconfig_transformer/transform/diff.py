"""Prefix-filtered access to the path-keyed ``changedProperties`` map.

AWS Config keys diff entries by dotted path, with list positions as path
segments (``Configuration.NetworkInterfaces.0``).  The source map carries no
ordering, so ``prefixed`` restores positional order from the index segment
that follows the prefix; keys without one sort after the indexed keys.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from awsconfig_transformer.errors import MissingDiffKeyError
from awsconfig_transformer.transform.payload import as_object, get_field, get_str


@dataclass(frozen=True)
class DiffEntry:
    """One before/after triple.  Both values stay raw until a caller decodes them."""

    key: str
    previous_value: Any
    updated_value: Any
    change_type: str

    @classmethod
    def from_raw(cls, key: str, raw: Any) -> DiffEntry:
        payload = as_object(raw, f"changedProperties[{key!r}]")
        return cls(
            key=key,
            previous_value=get_field(payload, "previousValue"),
            updated_value=get_field(payload, "updatedValue"),
            change_type=get_str(payload, "changeType"),
        )


def _position(key: str, prefix: str) -> tuple[int, int, str]:
    segment = key[len(prefix) :].split(".", 1)[0]
    if segment.isdigit():
        return (0, int(segment), key)
    return (1, 0, key)


class DiffIndex:
    """Decoded view over a configuration item diff's changed properties."""

    def __init__(self, changed_properties: dict[str, Any] | None) -> None:
        self._raw = changed_properties or {}

    def __contains__(self, key: str) -> bool:
        return key in self._raw

    def __len__(self) -> int:
        return len(self._raw)

    def get(self, key: str) -> DiffEntry | None:
        if key not in self._raw:
            return None
        return DiffEntry.from_raw(key, self._raw[key])

    def require(self, key: str) -> DiffEntry:
        """Return the entry at *key*, raising MissingDiffKeyError when absent."""
        entry = self.get(key)
        if entry is None:
            raise MissingDiffKeyError(key)
        return entry

    def prefixed(self, *prefixes: str) -> list[DiffEntry]:
        """Return every entry whose key starts with one of *prefixes*, in positional order."""
        if not prefixes:
            raise ValueError("at least one prefix is required")
        matched: list[tuple[tuple[int, int, str], int, DiffEntry]] = []
        for key, raw in self._raw.items():
            for rank, prefix in enumerate(prefixes):
                if key.startswith(prefix):
                    matched.append((_position(key, prefix), rank, DiffEntry.from_raw(key, raw)))
                    break
        matched.sort(key=lambda item: (item[1], item[0]))
        return [entry for _, _, entry in matched]

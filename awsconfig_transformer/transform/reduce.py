"""Cancel addresses that were both added and removed within one update."""

from __future__ import annotations

from awsconfig_transformer.models.output import Change


def slice_diff(a: list[str], b: list[str]) -> list[str]:
    """Return the elements of *a* not present in *b*, preserving order."""
    exclude = set(b)
    return [v for v in a if v not in exclude]


def remove_duplicates(added: Change, removed: Change) -> None:
    """Strip entries common to both changes from their address lists, in place.

    Each side is compared against the other's original list, so an address
    that appears in both ends up in neither.
    """
    added_private = added.private_ips
    added.private_ips = slice_diff(added_private, removed.private_ips)
    removed.private_ips = slice_diff(removed.private_ips, added_private)

    added_public = added.public_ips
    added.public_ips = slice_diff(added_public, removed.public_ips)
    removed.public_ips = slice_diff(removed.public_ips, added_public)

    added_hostnames = added.hostnames
    added.hostnames = slice_diff(added_hostnames, removed.hostnames)
    removed.hostnames = slice_diff(removed.hostnames, added_hostnames)

"""Split added network facts by the time their interface was attached.

An update that attaches two interfaces at different times is reported as
one ADDED change per attach time rather than a single merged change.
Attach times are compared as instants, so ``20:42:20Z`` and
``20:42:20.000Z`` fall into the same group.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import UTC, datetime

from awsconfig_transformer.models.output import Change, ChangeKind
from awsconfig_transformer.transform.timestamps import parse_rfc3339

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


@dataclass
class AttachTimes:
    """Attach timestamps recorded per address while filling the added bucket.

    An address carried by several interfaces keeps one entry per occurrence,
    in recording order; ``None`` marks an interface without an attach time.
    """

    private_ips: dict[str, list[str | None]] = field(default_factory=dict)
    public_ips: dict[str, list[str | None]] = field(default_factory=dict)
    hostnames: dict[str, list[str | None]] = field(default_factory=dict)

    def record(self, attach_time: str, private: list[str], public: list[str], hostnames: list[str]) -> None:
        stamp = attach_time or None
        for ip in private:
            self.private_ips.setdefault(ip, []).append(stamp)
        for ip in public:
            self.public_ips.setdefault(ip, []).append(stamp)
        for name in hostnames:
            self.hostnames.setdefault(name, []).append(stamp)


class _Occurrences:
    """Hands out the recorded attach times of each address in order."""

    def __init__(self, recorded: dict[str, list[str | None]]) -> None:
        self._pending = {address: deque(stamps) for address, stamps in recorded.items()}

    def next(self, address: str) -> str | None:
        pending = self._pending.get(address)
        return pending.popleft() if pending else None


@dataclass
class _Group:
    timestamp: str | None
    instant: datetime | None
    change: Change = field(default_factory=lambda: Change(change_type=ChangeKind.ADDED))


def _sort_key(group: _Group) -> tuple[bool, bool, datetime, str]:
    return (group.timestamp is None, group.instant is None, group.instant or _EPOCH, group.timestamp or "")


def partition_by_attach_time(added: Change, attach_times: AttachTimes) -> list[tuple[str | None, Change]]:
    """Group the surviving addresses of *added* by attach time.

    Returns ``(timestamp, change)`` pairs ordered by instant; each group is
    labelled with the first spelling of its timestamp that was seen.
    Timestamps that do not parse group by exact string after the parsed
    ones.  Addresses with no recorded attach time form a ``None`` group,
    placed last.
    """
    groups: dict[datetime | str | None, _Group] = {}

    def _group(ts: str | None) -> Change:
        instant = parse_rfc3339(ts) if ts else None
        key = instant if instant is not None else ts
        if key not in groups:
            groups[key] = _Group(timestamp=ts, instant=instant)
        return groups[key].change

    private_times = _Occurrences(attach_times.private_ips)
    for ip in added.private_ips:
        _group(private_times.next(ip)).private_ips.append(ip)
    public_times = _Occurrences(attach_times.public_ips)
    for ip in added.public_ips:
        _group(public_times.next(ip)).public_ips.append(ip)
    hostname_times = _Occurrences(attach_times.hostnames)
    for name in added.hostnames:
        _group(hostname_times.next(name)).hostnames.append(name)

    return [(group.timestamp, group.change) for group in sorted(groups.values(), key=_sort_key)]

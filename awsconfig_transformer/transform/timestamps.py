"""RFC 3339 timestamp parsing for AWS Config and SNS fields."""

from __future__ import annotations

import re
from datetime import datetime

_RE_FRACTION = re.compile(r"(\.\d{6})\d+")


def parse_rfc3339(value: str) -> datetime | None:
    """Parse an RFC 3339 timestamp, tolerating nanosecond precision.

    Returns None when *value* is empty, not a timestamp, or has no offset.
    """
    if not value:
        return None
    text = _RE_FRACTION.sub(r"\1", value.strip())
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return None
    return parsed

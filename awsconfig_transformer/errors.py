"""Error taxonomy for the transformation pipeline.

Every failure that aborts a transformation derives from TransformError so
the dispatcher can log and re-raise them uniformly.  Delivery failures are
kept separate (ReportError) because they happen after a successful
transformation.
"""

from __future__ import annotations


class TransformError(Exception):
    """Base class for failures that abort the transformation of one event."""

    reason: str = "transform_error"


class DecodeError(TransformError):
    """Raised when the notification or a nested diff payload cannot be decoded."""

    reason = "decode_error"


class MissingFieldError(TransformError):
    """Raised when a required identity field is absent from the configuration item."""

    reason = "missing_field"

    def __init__(self, field: str) -> None:
        super().__init__(f"no field {field} was provided")
        self.field = field


class MissingDiffKeyError(TransformError):
    """Raised when an operation expects a diff entry that the event does not carry."""

    reason = "missing_diff_key"

    def __init__(self, key: str) -> None:
        super().__init__(f"invalid configuration diff: no entry for {key}")
        self.key = key


class MalformedTagChangeError(TransformError):
    """Raised when a tag diff entry has neither a previous nor an updated tag."""

    reason = "malformed_tag_change"

    def __init__(self, key: str) -> None:
        super().__init__(f"malformed tag change event at {key}")
        self.key = key


class UnsupportedChangeTypeError(TransformError):
    """Raised when the diff change type is not CREATE, UPDATE, DELETE or NONE."""

    reason = "unsupported_change_type"

    def __init__(self, change_type: str) -> None:
        super().__init__(f"event was not create, update, or delete (got {change_type!r})")
        self.change_type = change_type


class ReportError(Exception):
    """Raised when a record cannot be delivered to the stream appliance."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

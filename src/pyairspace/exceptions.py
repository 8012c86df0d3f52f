"""Custom exception hierarchy for pyairspace."""

from __future__ import annotations


class AirspaceError(Exception):
    """Base exception for all pyairspace errors."""


class AirspaceConfigError(AirspaceError):
    """Invalid or missing configuration."""


class FetchFailure(AirspaceError):
    """HTTP-level failure (network, timeout, non-200)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class DecodeFailure(AirspaceError):
    """Snapshot body is not JSON or does not have the expected shape."""

    def __init__(self, message: str, *, url: str = "") -> None:
        self.url = url
        super().__init__(message)


class PartialEntityFailure(AirspaceError):
    """One entry of an otherwise valid snapshot is malformed.

    Raised by attribute parsers and caught by the reconciler, which skips
    the offending id and keeps applying the rest of the snapshot.
    """

    def __init__(self, message: str, *, entity_id: str = "") -> None:
        self.entity_id = entity_id
        super().__init__(message)

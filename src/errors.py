from __future__ import annotations

from typing import Optional


class MetricsError(Exception):
    """Base class for failures of a single aggregation cycle."""


class NetworkFailure(MetricsError):
    """A data source request was rejected, timed out or returned an HTTP error."""

    def __init__(self, source: str, cause: Optional[BaseException] = None) -> None:
        self.source = source
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"{source} request failed{detail}")


class MalformedResponse(MetricsError, ValueError):
    """A required field is missing or not numeric after parsing."""

    def __init__(self, source: str, field: str, value: object = None) -> None:
        self.source = source
        self.field = field
        self.value = value
        super().__init__(f"{source} payload has invalid '{field}': {value!r}")


__all__ = ["MalformedResponse", "MetricsError", "NetworkFailure"]

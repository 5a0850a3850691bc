"""Exception types raised or reported by the dashboard core."""
from __future__ import annotations


class JobHubError(Exception):
    """Base class for dashboard errors."""


class FetchError(JobHubError):
    """The remote job source could not be reached or answered with an error."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ParseError(FetchError):
    """The remote job source answered with a payload we cannot read."""


class StorageError(JobHubError):
    """A local store collection could not be read or written."""

    def __init__(self, key: str, message: str) -> None:
        super().__init__(f"{key}: {message}")
        self.key = key

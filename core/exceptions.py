"""Flyway Viewer exception hierarchy.

Every failure talking to the simulation service is raised as one of the
``RemoteServiceError`` subclasses below, so callers can catch the whole
family at the call site and keep showing the last known-good state.
"""

from typing import Optional


class FlywayError(Exception):
    """Root of all Flyway Viewer exceptions."""


class RemoteServiceError(FlywayError):
    """Any failure of a request to the remote simulation service."""

    def __init__(self, message: str, *, method: str = "", path: str = "") -> None:
        super().__init__(message)
        self.method = method
        self.path = path


class TransportError(RemoteServiceError):
    """Network-level failure (connection refused, timeout, reset)."""


class RemoteError(RemoteServiceError):
    """The service answered with a non-success status code."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        method: str = "",
        path: str = "",
    ) -> None:
        super().__init__(message, method=method, path=path)
        self.status_code = status_code


class ShapeError(RemoteServiceError):
    """A response body could not be decoded or lacks expected fields."""


class ConfigurationError(FlywayError):
    """Invalid or missing client configuration."""

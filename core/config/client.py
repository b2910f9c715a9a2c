"""Connection settings for the remote simulation service."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from core.exceptions import ConfigurationError

# Server Configuration
DEFAULT_BACKEND_URL = "http://localhost:8080"
BACKEND_URL_ENV = "FLYWAY_BACKEND_URL"
POLL_INTERVAL_ENV = "FLYWAY_POLL_INTERVAL_MS"
REQUEST_TIMEOUT_ENV = "FLYWAY_REQUEST_TIMEOUT"

# Snapshot polling cadence while the simulation is running
DEFAULT_POLL_INTERVAL_MS = 100

# Per-request timeout in seconds
DEFAULT_REQUEST_TIMEOUT = 5.0


@dataclass
class ClientSettings:
    """Resolved settings for talking to the simulation service.

    Attributes:
        backend_url: Base address of the service, without trailing slash.
        poll_interval_ms: Snapshot polling cadence while running.
        request_timeout: Timeout for a single request, in seconds.
    """

    backend_url: str = DEFAULT_BACKEND_URL
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    def __post_init__(self) -> None:
        self.backend_url = self.backend_url.rstrip("/")
        if not self.backend_url:
            raise ConfigurationError("backend_url must not be empty")
        if self.poll_interval_ms <= 0:
            raise ConfigurationError(
                f"poll_interval_ms must be positive, got {self.poll_interval_ms}"
            )
        if self.request_timeout <= 0:
            raise ConfigurationError(
                f"request_timeout must be positive, got {self.request_timeout}"
            )

    @property
    def poll_interval(self) -> float:
        """Polling cadence in seconds."""
        return self.poll_interval_ms / 1000.0

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClientSettings":
        """Build settings from environment variables, falling back to defaults."""
        env = os.environ if environ is None else environ

        backend_url = env.get(BACKEND_URL_ENV) or DEFAULT_BACKEND_URL

        raw_interval = env.get(POLL_INTERVAL_ENV)
        try:
            poll_interval_ms = int(raw_interval) if raw_interval else DEFAULT_POLL_INTERVAL_MS
        except ValueError as e:
            raise ConfigurationError(
                f"{POLL_INTERVAL_ENV} must be an integer, got {raw_interval!r}"
            ) from e

        raw_timeout = env.get(REQUEST_TIMEOUT_ENV)
        try:
            request_timeout = float(raw_timeout) if raw_timeout else DEFAULT_REQUEST_TIMEOUT
        except ValueError as e:
            raise ConfigurationError(
                f"{REQUEST_TIMEOUT_ENV} must be a number, got {raw_timeout!r}"
            ) from e

        return cls(
            backend_url=backend_url,
            poll_interval_ms=poll_interval_ms,
            request_timeout=request_timeout,
        )

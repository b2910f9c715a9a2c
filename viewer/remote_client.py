"""HTTP client for the remote simulation service.

This module provides the RemoteServiceClient class which handles all HTTP
communication between the viewer and the simulation service. Every failure
is raised as a ``RemoteServiceError`` subclass; callers decide how to log it.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx
import orjson

from core.config.client import DEFAULT_BACKEND_URL, DEFAULT_REQUEST_TIMEOUT
from core.exceptions import RemoteError, ShapeError, TransportError
from core.models import (
    EnvironmentFactors,
    RunConfig,
    TimeStep,
    Zone,
    parse_model,
    parse_model_list,
)

logger = logging.getLogger(__name__)


class RemoteServiceClient:
    """Async client for the simulation service REST API.

    Snapshot and saved-run bodies are returned as raw dicts because the
    caller merges them over its previous snapshot; every other read is
    validated into its model here.

    Features:
    - Async HTTP client with connection pooling
    - Timeout handling
    - Typed errors (transport / status / shape)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BACKEND_URL,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            base_url: Service base address, e.g. ``http://localhost:8080``
            timeout: Default timeout for requests in seconds
            transport: Optional httpx transport (tests mount an ASGI app here)
        """
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._closed = False

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def start(self) -> None:
        """Initialize the HTTP client."""
        self._closed = False
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self._timeout),
                limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
                follow_redirects=True,
                transport=self._transport,
            )
            logger.debug("RemoteServiceClient started for %s", self.base_url)

    async def close(self) -> None:
        """Close the HTTP client and cleanup resources.

        Requests made after closing fail instead of reopening the client.
        """
        self._closed = True
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.debug("RemoteServiceClient closed")

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Make one HTTP request.

        Args:
            method: HTTP method (GET, POST)
            path: API path relative to the base URL
            **kwargs: Additional arguments to pass to httpx

        Returns:
            The successful response

        Raises:
            TransportError: Connection failure, timeout or closed client
            RemoteError: Non-2xx status code
        """
        if self._client is None:
            if self._closed:
                raise TransportError(
                    f"Client closed, refusing {method} {path}", method=method, path=path
                )
            await self.start()

        try:
            response = await self._client.request(method, path, **kwargs)
            response.raise_for_status()
            return response

        except httpx.HTTPStatusError as e:
            raise RemoteError(
                f"HTTP {e.response.status_code} for {method} {path}",
                status_code=e.response.status_code,
                method=method,
                path=path,
            ) from e

        except httpx.TransportError as e:
            raise TransportError(
                f"{type(e).__name__} for {method} {path}: {e}",
                method=method,
                path=path,
            ) from e

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        """Decode a JSON body, raising ShapeError when it is not JSON."""
        try:
            return orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            raise ShapeError(
                f"Response from {response.request.method} {response.request.url.path} "
                f"is not valid JSON: {e}",
                method=response.request.method,
                path=response.request.url.path,
            ) from e

    async def _get_json(self, path: str) -> Any:
        response = await self._request("GET", path)
        return self._decode(response)

    async def _post(self, path: str, payload: Any = None) -> None:
        if payload is None:
            await self._request("POST", path)
        else:
            await self._request(
                "POST",
                path,
                content=orjson.dumps(payload),
                headers={"Content-Type": "application/json"},
            )

    # Simulation

    async def fetch_snapshot(self) -> Dict[str, Any]:
        """Get the current simulation snapshot as a raw dict."""
        data = await self._get_json("/simulation")
        if not isinstance(data, dict):
            raise ShapeError(
                f"Unexpected snapshot response format: {type(data).__name__}",
                method="GET",
                path="/simulation",
            )
        return data

    async def start_simulation(self) -> None:
        """Ask the service to start the run."""
        await self._post("/simulation/start")

    async def stop_simulation(self) -> None:
        """Ask the service to stop the run."""
        await self._post("/simulation/stop")

    async def save_run(self) -> None:
        """Ask the service to persist the current run."""
        await self._post("/simulation/save")

    async def load_run(self) -> Any:
        """Restore the most recently saved run; returns the raw body."""
        return await self._get_json("/simulation/load")

    # Run configuration

    async def fetch_config(self) -> RunConfig:
        """Get the run configuration."""
        return parse_model(RunConfig, await self._get_json("/simulation/config"))

    async def update_config(self, config: RunConfig) -> None:
        """Replace the run configuration."""
        await self._post("/simulation/config", config.to_wire())

    async def fetch_time_step(self) -> int:
        """Get the simulation time step."""
        return parse_model(TimeStep, await self._get_json("/simulation/time-step")).time_step

    async def update_time_step(self, time_step: int) -> None:
        """Set the simulation time step."""
        await self._post("/simulation/time-step", TimeStep(time_step=time_step).to_wire())

    # Environment

    async def fetch_environment(self) -> EnvironmentFactors:
        """Get the global environmental factors."""
        return parse_model(EnvironmentFactors, await self._get_json("/environment"))

    async def update_environment(self, factors: EnvironmentFactors) -> None:
        """Replace the global environmental factors."""
        await self._post("/environment", factors.to_wire())

    async def fetch_zones(self) -> List[Zone]:
        """Get the per-zone environment overrides."""
        return parse_model_list(Zone, await self._get_json("/zones"))

    async def update_zones(self, zones: List[Zone]) -> None:
        """Replace the per-zone environment overrides."""
        await self._post("/zones", [zone.to_wire() for zone in zones])

"""In-memory stand-in for RemoteServiceClient.

Used by scheduling tests that need to control response latency and observe
how many fetches are in flight, which an ASGI round trip makes awkward.
"""

import asyncio
from typing import Any, Dict, List, Optional

from core.exceptions import RemoteServiceError, TransportError


class MemorySimulationClient:
    """Answers snapshot fetches from a dict, optionally after a delay.

    The snapshot body is captured when the request is issued, like a
    server answering at request time with slow delivery.
    """

    def __init__(self, running: bool = False, delay: float = 0.0) -> None:
        self.running = running
        self.delay = delay
        self.extra: Dict[str, Any] = {}
        self.fetches = 0
        self.in_flight = 0
        self.max_in_flight = 0
        self.commands: List[str] = []
        self.fetch_error: Optional[RemoteServiceError] = None
        self.command_error: Optional[RemoteServiceError] = None
        self.ignore_commands = False

    async def start(self) -> None:
        pass

    async def close(self) -> None:
        pass

    async def fetch_snapshot(self) -> Dict[str, Any]:
        self.fetches += 1
        body = {"isRunning": self.running, "time": self.fetches, **self.extra}
        error = self.fetch_error
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if error is not None:
                raise error
            return body
        finally:
            self.in_flight -= 1

    async def _command(self, name: str, running: bool) -> None:
        self.commands.append(name)
        if self.command_error is not None:
            raise self.command_error
        if not self.ignore_commands:
            self.running = running

    async def start_simulation(self) -> None:
        await self._command("start", True)

    async def stop_simulation(self) -> None:
        await self._command("stop", False)

    async def save_run(self) -> None:
        self.commands.append("save")

    async def load_run(self) -> Any:
        raise TransportError("load not supported by memory client", method="GET", path="/simulation/load")

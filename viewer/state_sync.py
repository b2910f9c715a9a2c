"""Canonical simulation snapshot and the poll loop that keeps it fresh.

The controller owns two pieces of state: the latest snapshot and the
running flag. The snapshot is replaced by every successful fetch, whatever
triggered it (initial load, poll tick, start/stop resync, load of a saved
run). The running flag only changes from a fetched snapshot's own
``isRunning`` field, never from a command's success alone.

Responses are applied in arrival order, so the last one applied wins even
if the transport reorders them. Each merge reads the controller's current
snapshot at apply time, never a copy captured before the request.
"""

import asyncio
import logging
from typing import Callable, List, Optional, Set

from core.config.client import DEFAULT_POLL_INTERVAL_MS
from core.exceptions import RemoteServiceError
from core.models import SavedRun, SimulationSnapshot, merge_snapshot, unwrap_saved_run
from viewer.remote_client import RemoteServiceClient

logger = logging.getLogger(__name__)

SnapshotSubscriber = Callable[[SimulationSnapshot], None]


class StateSyncController:
    """Keeps a local snapshot in sync with the simulation service.

    While running, a background task fetches one snapshot per poll tick.
    Ticks never queue up behind a slow response: at most one fetch is in
    flight, and ticks that elapsed during it are skipped. Stopping sets the
    loop's halt event so no further fetch is issued; a fetch already in
    flight still lands.
    """

    def __init__(
        self,
        client: RemoteServiceClient,
        poll_interval: float = DEFAULT_POLL_INTERVAL_MS / 1000.0,
        snapshot: Optional[SimulationSnapshot] = None,
    ):
        """Initialize the controller.

        Args:
            client: Remote service client
            poll_interval: Seconds between poll ticks while running
            snapshot: Snapshot shown before the first fetch succeeds
        """
        self._client = client
        self.poll_interval = poll_interval
        self._snapshot = snapshot if snapshot is not None else SimulationSnapshot()
        self._running = False
        self._poll_task: Optional[asyncio.Task] = None
        # Halted loops may still be finishing an in-flight fetch
        self._poll_tasks: Set[asyncio.Task] = set()
        self._halt: Optional[asyncio.Event] = None
        self._subscribers: List[SnapshotSubscriber] = []
        self.fetch_count = 0

    @property
    def snapshot(self) -> SimulationSnapshot:
        return self._snapshot

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_polling(self) -> bool:
        """True while a poll loop task is alive and not halted."""
        return (
            self._poll_task is not None
            and not self._poll_task.done()
            and self._halt is not None
            and not self._halt.is_set()
        )

    def subscribe(self, callback: SnapshotSubscriber) -> None:
        """Register a callback invoked with every applied snapshot."""
        self._subscribers.append(callback)

    # Snapshot application

    def _apply(self, snapshot: SimulationSnapshot) -> None:
        self._snapshot = snapshot
        for callback in list(self._subscribers):
            callback(snapshot)

    async def _fetch_and_apply(self, reason: str) -> Optional[SimulationSnapshot]:
        """Fetch one snapshot and merge it over the current one.

        Returns:
            The applied snapshot, or None if the fetch or merge failed
        """
        self.fetch_count += 1
        try:
            payload = await self._client.fetch_snapshot()
            snapshot = merge_snapshot(self._snapshot, payload)
        except RemoteServiceError as e:
            logger.error("Failed to fetch simulation state (%s): %s", reason, e)
            return None

        self._apply(snapshot)
        return snapshot

    # Running flag and poll scheduling

    def _set_running(self, running: bool) -> None:
        if running == self._running:
            return

        self._running = running
        if running:
            self._start_polling()
            logger.info("Simulation running, polling every %.0f ms", self.poll_interval * 1000)
        else:
            self._stop_polling()
            logger.info("Simulation stopped, polling halted")

    def _start_polling(self) -> None:
        halt = asyncio.Event()
        self._halt = halt
        self._poll_task = asyncio.create_task(self._poll_loop(halt), name="snapshot_poll")
        self._poll_tasks.add(self._poll_task)
        self._poll_task.add_done_callback(self._poll_tasks.discard)

    def _stop_polling(self) -> None:
        if self._halt is not None:
            self._halt.set()

    async def _poll_loop(self, halt: asyncio.Event) -> None:
        """Fetch one snapshot per tick until ``halt`` is set."""
        loop = asyncio.get_running_loop()
        next_tick = loop.time() + self.poll_interval
        ticks = 0

        try:
            while not halt.is_set():
                delay = next_tick - loop.time()
                if delay > 0:
                    try:
                        await asyncio.wait_for(halt.wait(), timeout=delay)
                    except asyncio.TimeoutError:
                        pass

                if halt.is_set() or not self._running:
                    break

                ticks += 1
                await self.poll()

                next_tick += self.poll_interval
                behind = loop.time() - next_tick
                if behind > 0:
                    skipped = int(behind // self.poll_interval) + 1
                    next_tick += skipped * self.poll_interval
                    logger.debug("Slow poll response, skipped %d tick(s)", skipped)

        except asyncio.CancelledError:
            logger.debug("Poll loop cancelled")
            raise
        finally:
            logger.debug("Poll loop ended after %d ticks", ticks)

    # Operations

    async def initialize(self) -> None:
        """Fetch the first snapshot and adopt its running flag."""
        snapshot = await self._fetch_and_apply("initial")
        if snapshot is not None:
            self._set_running(snapshot.is_running)

    async def poll(self) -> Optional[SimulationSnapshot]:
        """Fetch one snapshot and merge it into canonical state."""
        return await self._fetch_and_apply("poll")

    async def start(self) -> bool:
        """Start the run, then resynchronize from a fresh snapshot.

        Returns:
            The running flag after the resync
        """
        try:
            await self._client.start_simulation()
        except RemoteServiceError as e:
            logger.error("Failed to start simulation: %s", e)
            return self._running

        snapshot = await self._fetch_and_apply("start")
        if snapshot is not None:
            self._set_running(snapshot.is_running)
            if not snapshot.is_running:
                logger.warning("Start acknowledged but simulation reports not running")
        return self._running

    async def stop(self) -> bool:
        """Stop the run, then resynchronize from a fresh snapshot.

        Returns:
            The running flag after the resync
        """
        try:
            await self._client.stop_simulation()
        except RemoteServiceError as e:
            logger.error("Failed to stop simulation: %s", e)
            return self._running

        snapshot = await self._fetch_and_apply("stop")
        if snapshot is not None:
            self._set_running(snapshot.is_running)
            if snapshot.is_running:
                logger.warning("Stop acknowledged but simulation still reports running")
        return self._running

    async def save_run(self) -> bool:
        """Ask the service to persist the current run."""
        try:
            await self._client.save_run()
        except RemoteServiceError as e:
            logger.error("Failed to save simulation: %s", e)
            return False

        logger.info("Simulation state saved at t=%s", self._snapshot.time)
        return True

    async def load_run(self) -> Optional[SavedRun]:
        """Restore the last saved run and adopt its state.

        Returns:
            The saved run (so config and time step can be adopted too), or
            None if loading failed
        """
        try:
            saved = unwrap_saved_run(await self._client.load_run())
            snapshot = merge_snapshot(self._snapshot, saved.state)
        except RemoteServiceError as e:
            logger.error("Failed to load simulation: %s", e)
            return None

        self._apply(snapshot)
        self._set_running(snapshot.is_running)
        logger.info("Loaded saved run at t=%s (%d birds)", snapshot.time, len(snapshot.birds))
        return saved

    async def close(self) -> None:
        """Tear down every poll loop, halted ones included, cancelling in-flight fetches."""
        self._running = False
        self._stop_polling()
        self._poll_task = None
        tasks = [task for task in self._poll_tasks if not task.done()]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._poll_tasks.clear()

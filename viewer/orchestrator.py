"""Composition root wiring the remote client, reconcilers and renderer.

The orchestrator owns one instance of each component and is the only
object the window loop (or the headless runner) talks to. Operator actions
arrive as named actions; each one awaits at most the remote calls it needs.
"""

import asyncio
import logging
from typing import Any, Dict, Optional, Tuple

import pygame

from core.config.client import DEFAULT_POLL_INTERVAL_MS, ClientSettings
from core.config.display import SURFACE_HEIGHT, SURFACE_WIDTH
from core.models import EnvironmentFactors, SimulationSnapshot
from rendering.render_pipeline import RenderPipeline
from viewer import controls
from viewer.config_reconciler import ConfigReconciler
from viewer.controls import Action
from viewer.environment_reconciler import EnvironmentReconciler
from viewer.remote_client import RemoteServiceClient
from viewer.state_sync import StateSyncController

logger = logging.getLogger(__name__)


class Orchestrator:
    """Wires the viewer components together and exposes operator actions.

    Attributes:
        client: Remote service client shared by all components
        sync: Snapshot/running-flag controller
        config: Run configuration reconciler
        environment: Environment reconciler
        pipeline: Snapshot renderer
        dirty: True when the view needs a redraw
        submitted_factors: Factors from the last successful environment submit
    """

    def __init__(
        self,
        client: RemoteServiceClient,
        poll_interval: float = DEFAULT_POLL_INTERVAL_MS / 1000.0,
        surface_size: Tuple[int, int] = (SURFACE_WIDTH, SURFACE_HEIGHT),
    ) -> None:
        self.client = client
        self.sync = StateSyncController(client, poll_interval=poll_interval)
        self.config = ConfigReconciler(client)
        self.environment = EnvironmentReconciler(client)
        self.pipeline = RenderPipeline(surface_size)
        self.dirty = True
        self.submitted_factors: Optional[EnvironmentFactors] = None
        self.quit_requested = False

        self.sync.subscribe(self._on_snapshot)

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings,
        surface_size: Tuple[int, int] = (SURFACE_WIDTH, SURFACE_HEIGHT),
    ) -> "Orchestrator":
        client = RemoteServiceClient(settings.backend_url, timeout=settings.request_timeout)
        return cls(client, poll_interval=settings.poll_interval, surface_size=surface_size)

    def _on_snapshot(self, snapshot: SimulationSnapshot) -> None:
        self.dirty = True

    def _on_environment_submitted(self, factors: EnvironmentFactors) -> None:
        self.submitted_factors = factors
        logger.info(
            "Environment updated: temperature=%.1f food=%.2f predators=%.2f",
            factors.temperature,
            factors.food_availability,
            factors.predator_presence,
        )

    # Derived display values

    @property
    def snapshot(self) -> SimulationSnapshot:
        return self.sync.snapshot

    @property
    def collision_count(self) -> int:
        return self.sync.snapshot.collision_count

    @property
    def is_running(self) -> bool:
        return self.sync.is_running

    def status(self) -> Dict[str, Any]:
        """Values shown in the status panel and the headless log."""
        snapshot = self.sync.snapshot
        return {
            "running": self.sync.is_running,
            "time": snapshot.time,
            "collision_count": snapshot.collision_count,
            "birds": len(snapshot.birds),
            "predators": len(snapshot.predators),
            "obstacles": len(snapshot.obstacles),
            "resources": len(snapshot.resources),
            "config": self.config.current,
            "config_error": self.config.config.last_error or self.config.time_step.last_error,
            "time_step": self.config.time_step.local,
            "factors": self.environment.factors.local,
            "selected_zone": self.environment.selected_zone,
            "zone_count": len(self.environment.zones.local),
            "environment_dirty": (
                self.environment.factors.diverged or self.environment.zones.diverged
            ),
        }

    # Lifecycle

    async def mount(self) -> None:
        """Initial load: first snapshot, config, time step and environment."""
        await self.client.start()
        await asyncio.gather(
            self.sync.initialize(),
            self.config.load(),
            self.config.load_time_step(),
            self.environment.load(),
        )
        self.dirty = True
        logger.info(
            "Mounted against %s (running=%s, world size %g)",
            self.client.base_url,
            self.sync.is_running,
            self.sync.snapshot.world_size,
        )

    async def shutdown(self) -> None:
        await self.sync.close()
        await self.client.close()

    async def reload(self) -> None:
        """Explicit refetch of config, time step and environment.

        Discards unsubmitted local edits.
        """
        await asyncio.gather(
            self.config.load(),
            self.config.load_time_step(),
            self.environment.load(),
        )
        self.dirty = True

    # Operator actions

    async def toggle_running(self) -> bool:
        if self.sync.is_running:
            return await self.sync.stop()
        return await self.sync.start()

    async def adjust_config(self, field: str, delta: float) -> bool:
        current = self.config.current.model_dump(by_alias=True)
        if field not in current or current[field] is None:
            logger.warning("Cannot adjust config field %r", field)
            return False
        accepted = await self.config.set_field(field, current[field] + delta)
        self.dirty = True
        return accepted

    async def adjust_time_step(self, delta: float) -> bool:
        accepted = await self.config.set_time_step(self.config.time_step.local + delta)
        self.dirty = True
        return accepted

    def adjust_factor(self, name: str, delta: float) -> bool:
        current = self.environment.factors.local.model_dump(by_alias=True)
        if name not in current:
            logger.warning("Cannot adjust environmental factor %r", name)
            return False
        accepted = self.environment.edit_factor(name, round(current[name] + delta, 4))
        self.dirty = True
        return accepted

    def adjust_zone(self, name: str, delta: float) -> bool:
        zone = self.environment.selected_zone
        if zone is None:
            return False
        current = zone.model_dump(by_alias=True)
        if name not in current:
            logger.warning("Cannot adjust zone field %r", name)
            return False
        accepted = self.environment.edit_zone(zone.id, name, round(current[name] + delta, 4))
        self.dirty = True
        return accepted

    def select_next_zone(self, step: int = 1) -> Optional[int]:
        zone_id = self.environment.select_next_zone(step)
        self.dirty = True
        return zone_id

    async def submit_environment(self) -> bool:
        accepted = await self.environment.submit(self._on_environment_submitted)
        self.dirty = True
        return accepted

    async def save_run(self) -> bool:
        return await self.sync.save_run()

    async def load_run(self) -> bool:
        saved = await self.sync.load_run()
        if saved is None:
            return False
        self.config.adopt(saved.config, saved.time_step)
        self.dirty = True
        return True

    async def dispatch(self, action: Action) -> Any:
        """Run a named operator action (see ``viewer.controls``)."""
        name = action.name
        if name == controls.TOGGLE_RUNNING:
            return await self.toggle_running()
        if name == controls.ADJUST_CONFIG:
            return await self.adjust_config(action.field, action.delta)
        if name == controls.ADJUST_TIME_STEP:
            return await self.adjust_time_step(action.delta)
        if name == controls.ADJUST_FACTOR:
            return self.adjust_factor(action.field, action.delta)
        if name == controls.ADJUST_ZONE:
            return self.adjust_zone(action.field, action.delta)
        if name == controls.SELECT_ZONE:
            return self.select_next_zone(int(action.delta))
        if name == controls.SUBMIT_ENVIRONMENT:
            return await self.submit_environment()
        if name == controls.SAVE_RUN:
            return await self.save_run()
        if name == controls.LOAD_RUN:
            return await self.load_run()
        if name == controls.RELOAD:
            return await self.reload()
        if name == controls.QUIT:
            self.quit_requested = True
            return None
        logger.warning("Unknown action %r", name)
        return None

    # Rendering

    def render(self, surface: pygame.Surface) -> None:
        """Redraw the latest snapshot onto ``surface`` and clear the dirty flag."""
        self.pipeline.draw(surface, self.sync.snapshot)
        self.dirty = False

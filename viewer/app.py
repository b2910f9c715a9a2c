"""Windowed pygame front end for the viewer.

The window loop runs on the asyncio event loop: every frame it pumps pygame
events, schedules any operator action as a task (so remote calls never block
the window), redraws if the view is dirty and then yields for one frame.
"""

import asyncio
import logging
from typing import Optional, Set

import pygame

from core.config.display import FRAME_RATE, PANEL_WIDTH
from rendering.hud import HudRenderer
from viewer.controls import KEY_HELP, resolve_action
from viewer.orchestrator import Orchestrator

logger = logging.getLogger(__name__)


class ViewerApp:
    """Simulation canvas on the left, status panel on the right.

    Attributes:
        orchestrator: Composition root driving state and rendering
        screen: Pygame display surface
        canvas: Subsurface the simulation is drawn on
        hud: Status panel renderer
    """

    def __init__(self, orchestrator: Orchestrator, frame_rate: int = FRAME_RATE) -> None:
        self.orchestrator = orchestrator
        self.frame_rate = frame_rate
        self.screen: Optional[pygame.Surface] = None
        self.canvas: Optional[pygame.Surface] = None
        self.hud: Optional[HudRenderer] = None
        self._action_tasks: Set[asyncio.Task] = set()

    def setup_window(self) -> None:
        """Create the window and its canvas/panel subsurfaces."""
        width, height = self.orchestrator.pipeline.surface_size
        self.screen = pygame.display.set_mode((width + PANEL_WIDTH, height))
        pygame.display.set_caption("Flyway Viewer - Bird Migration Simulation")

        self.canvas = self.screen.subsurface(pygame.Rect(0, 0, width, height))
        panel = self.screen.subsurface(pygame.Rect(width, 0, PANEL_WIDTH, height))
        self.hud = HudRenderer(panel)

    def handle_events(self) -> bool:
        """Handle user input; returns False once the operator quits."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.KEYDOWN:
                action = resolve_action(event.key, event.mod)
                if action is None:
                    continue
                task = asyncio.create_task(
                    self.orchestrator.dispatch(action), name=f"action_{action.name}"
                )
                self._action_tasks.add(task)
                task.add_done_callback(self._action_tasks.discard)
        return not self.orchestrator.quit_requested

    def render(self) -> None:
        """Redraw canvas and panel when something changed."""
        if self.screen is None or not self.orchestrator.dirty:
            return

        self.orchestrator.render(self.canvas)
        self.hud.draw_panel(self.orchestrator.status(), KEY_HELP)
        pygame.display.flip()

    async def run(self) -> None:
        """Mount, then run the window loop until the operator quits."""
        self.setup_window()
        await self.orchestrator.mount()

        try:
            while self.handle_events():
                self.render()
                await asyncio.sleep(1 / self.frame_rate)
        finally:
            for task in list(self._action_tasks):
                task.cancel()
            await asyncio.gather(*self._action_tasks, return_exceptions=True)
            await self.orchestrator.shutdown()
            logger.info("Viewer closed (collisions seen: %d)", self.orchestrator.collision_count)


def main(orchestrator: Orchestrator) -> None:
    """Entry point for the windowed viewer."""
    pygame.init()
    app = ViewerApp(orchestrator)
    try:
        asyncio.run(app.run())
    finally:
        pygame.quit()

"""Full-redraw rendering of a simulation snapshot.

Rendering is split in two steps so the layout can be checked without a
display: ``build_draw_list`` turns a snapshot into an ordered list of draw
commands (pure data), and ``draw`` clears the surface and executes them with
pygame. The same snapshot always yields the same commands and pixels.

Layers are drawn back to front in a fixed order: obstacles, resources,
birds, predators, then temperature-zone annotations. Predators always sit
above birds and zone labels are never covered.
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Tuple

import pygame

from core.config.display import BACKGROUND_COLOR, SURFACE_HEIGHT, SURFACE_WIDTH, ZONE_LABEL_FONT_SIZE
from core.models import SimulationSnapshot
from rendering.font_loader import FontLoader
from rendering.styles import (
    OBSTACLE_STYLE,
    PREDATOR_STYLE,
    ZONE_STYLE,
    Color,
    MarkerStyle,
    bird_style,
    format_temperature,
    resource_style,
)
from rendering.transform import WorldTransform

logger = logging.getLogger(__name__)


class Layer(IntEnum):
    """Draw layers, back to front."""

    OBSTACLES = 0
    RESOURCES = 1
    BIRDS = 2
    PREDATORS = 3
    ZONES = 4


@dataclass(frozen=True)
class DrawCommand:
    """One marker to draw, already in surface coordinates."""

    layer: Layer
    center: Tuple[float, float]
    radius: float
    style: MarkerStyle
    label: Optional[str] = None

    @property
    def pixel_center(self) -> Tuple[int, int]:
        return (int(round(self.center[0])), int(round(self.center[1])))

    @property
    def pixel_radius(self) -> int:
        return max(1, int(round(self.radius)))


class RenderPipeline:
    """Draws snapshots onto a fixed-size surface.

    Attributes:
        surface_size: (width, height) of the target surface in pixels
        background: Colour the surface is cleared to before each redraw
    """

    def __init__(
        self,
        surface_size: Tuple[int, int] = (SURFACE_WIDTH, SURFACE_HEIGHT),
        background: Color = BACKGROUND_COLOR,
    ) -> None:
        self.surface_size = surface_size
        self.background = background

    def transform_for(self, snapshot: SimulationSnapshot) -> WorldTransform:
        width, height = self.surface_size
        return WorldTransform(snapshot.world_size, width, height)

    def build_draw_list(self, snapshot: SimulationSnapshot) -> List[DrawCommand]:
        """Lay out every entity of ``snapshot`` as ordered draw commands."""
        transform = self.transform_for(snapshot)
        commands: List[DrawCommand] = []

        for obstacle in snapshot.obstacles:
            commands.append(
                DrawCommand(
                    Layer.OBSTACLES,
                    transform.to_surface(obstacle.position),
                    transform.scale_radius(obstacle.radius),
                    OBSTACLE_STYLE,
                )
            )

        for resource in snapshot.resources:
            style = resource_style(resource.type)
            commands.append(
                DrawCommand(Layer.RESOURCES, transform.to_surface(resource.position), style.radius, style)
            )

        for bird in snapshot.birds:
            style = bird_style(bird.state)
            commands.append(
                DrawCommand(Layer.BIRDS, transform.to_surface(bird.position), style.radius, style)
            )

        for predator in snapshot.predators:
            commands.append(
                DrawCommand(
                    Layer.PREDATORS,
                    transform.to_surface(predator.position),
                    PREDATOR_STYLE.radius,
                    PREDATOR_STYLE,
                )
            )

        for zone in snapshot.temperature_zones:
            if zone.position is None:
                continue
            commands.append(
                DrawCommand(
                    Layer.ZONES,
                    transform.to_surface(zone.position),
                    ZONE_STYLE.radius,
                    ZONE_STYLE,
                    label=format_temperature(zone.temperature),
                )
            )

        return commands

    def draw(self, surface: pygame.Surface, snapshot: SimulationSnapshot) -> List[DrawCommand]:
        """Clear ``surface`` and redraw ``snapshot`` completely.

        Returns:
            The executed draw commands
        """
        commands = self.build_draw_list(snapshot)
        surface.fill(self.background)
        for command in commands:
            self._execute(surface, command)
        return commands

    def _execute(self, surface: pygame.Surface, command: DrawCommand) -> None:
        style = command.style
        center = command.pixel_center
        radius = command.pixel_radius

        pygame.draw.circle(surface, style.color, center, radius, style.width)

        if style.outline_color is not None and style.outline_width > 0:
            pygame.draw.circle(surface, style.outline_color, center, radius, style.outline_width)

        if command.label and style.label_color is not None:
            font = FontLoader.load_font(ZONE_LABEL_FONT_SIZE)
            text_surface = font.render(command.label, True, style.label_color)
            text_rect = text_surface.get_rect(center=center)
            surface.blit(text_surface, text_rect)

"""Status panel rendering for the viewer window.

This module draws the side panel: run status, snapshot counters, the
current run configuration, environmental factors, the selected zone and
the key bindings.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import pygame

from core.config.display import (
    PANEL_BACKGROUND_COLOR,
    PANEL_FONT_SIZE,
    PANEL_LINE_HEIGHT,
    PANEL_MUTED_COLOR,
    PANEL_RUNNING_COLOR,
    PANEL_STOPPED_COLOR,
    PANEL_TEXT_COLOR,
)
from rendering.font_loader import FontLoader

Line = Union[str, Tuple[str, Tuple[int, int, int]]]


class HudRenderer:
    """Renders the status panel.

    Attributes:
        surface: Pygame surface (the panel area) to render to
        font: Font for the panel text
    """

    def __init__(self, surface: pygame.Surface, font: Optional[pygame.font.Font] = None) -> None:
        """Initialize the HUD renderer.

        Args:
            surface: Pygame surface to render to
            font: Font for rendering text; defaults to the cached panel font
        """
        self.surface = surface
        self.font = font if font is not None else FontLoader.load_font(PANEL_FONT_SIZE)

    def build_lines(self, status: Dict[str, Any], key_help: Sequence[str] = ()) -> List[Line]:
        """Turn an orchestrator status dict into panel lines."""
        lines: List[Line] = []

        if status["running"]:
            lines.append(("RUNNING", PANEL_RUNNING_COLOR))
        else:
            lines.append(("STOPPED", PANEL_STOPPED_COLOR))

        lines.extend(
            [
                f"Time: {status['time']:g}",
                f"Collisions: {status['collision_count']}",
                f"Birds: {status['birds']}  Predators: {status['predators']}",
                f"Obstacles: {status['obstacles']}  Resources: {status['resources']}",
                "",
                "Settings:",
            ]
        )

        config = status["config"]
        lines.append(f"  Speed (ms): {config.simulation_speed}")
        lines.append(f"  World size: {config.world_size}")
        lines.append(f"  Initial birds: {config.initial_birds}")
        lines.append(f"  Time step: {status['time_step']}")
        if status.get("config_error"):
            lines.append(("  (last push failed)", PANEL_STOPPED_COLOR))

        factors = status["factors"]
        lines.append("")
        lines.append("Environment:")
        lines.append(f"  Temperature: {factors.temperature:.1f}")
        lines.append(f"  Food: {factors.food_availability:.2f}")
        lines.append(f"  Predators: {factors.predator_presence:.2f}")

        zone = status.get("selected_zone")
        if zone is not None:
            lines.append(f"Zone {zone.id} of {status['zone_count']}:")
            lines.append(f"  Temperature: {zone.temperature:.1f}")
            lines.append(f"  Food: {zone.food_availability:.2f}")
            lines.append(f"  Predators: {zone.predator_presence:.2f}")
        else:
            lines.append(("No zones", PANEL_MUTED_COLOR))

        if status.get("environment_dirty"):
            lines.append(("  (unsubmitted edits)", PANEL_STOPPED_COLOR))

        if key_help:
            lines.append("")
            for text in key_help:
                lines.append((text, PANEL_MUTED_COLOR))

        return lines

    def draw_panel(self, status: Dict[str, Any], key_help: Sequence[str] = ()) -> None:
        """Draw the status panel.

        Args:
            status: Status dict from the orchestrator
            key_help: Key binding descriptions shown at the bottom
        """
        self.surface.fill(PANEL_BACKGROUND_COLOR)

        y_offset = 10
        for line in self.build_lines(status, key_help):
            # Check if line is a tuple (text, color)
            if isinstance(line, tuple):
                text, color = line
                text_surface = self.font.render(text, True, color)
            else:
                text_surface = self.font.render(line, True, PANEL_TEXT_COLOR)
            self.surface.blit(text_surface, (10, y_offset))
            y_offset += PANEL_LINE_HEIGHT

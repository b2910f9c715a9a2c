"""World-to-surface coordinate transform."""

from dataclasses import dataclass
from typing import Tuple

from core.config.display import OBSTACLE_MAGNIFICATION
from core.exceptions import ConfigurationError


@dataclass(frozen=True)
class WorldTransform:
    """Maps square world coordinates onto a (possibly non-square) surface.

    Attributes:
        world_size: Side length of the world in world units
        surface_width: Surface width in pixels
        surface_height: Surface height in pixels
    """

    world_size: float
    surface_width: int
    surface_height: int

    def __post_init__(self) -> None:
        if self.world_size <= 0:
            raise ConfigurationError(f"world_size must be positive, got {self.world_size}")

    @property
    def scale_x(self) -> float:
        return self.surface_width / self.world_size

    @property
    def scale_y(self) -> float:
        return self.surface_height / self.world_size

    def to_surface(self, position: Tuple[float, float]) -> Tuple[float, float]:
        """Map a world position to surface coordinates."""
        x, y = position
        return (x * self.scale_x, y * self.scale_y)

    def scale_radius(self, radius: float, magnification: float = OBSTACLE_MAGNIFICATION) -> float:
        """Scale an obstacle radius (horizontal scale, magnified to stay visible)."""
        return radius * self.scale_x * magnification

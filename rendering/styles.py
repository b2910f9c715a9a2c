"""Visual style for each entity kind and state.

Birds and resources are dispatched on their state/type string; anything
unrecognised (or missing) falls back to the migrating and rest styles.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from core.config.display import (
    BIRD_MIGRATING_COLOR,
    BIRD_RADIUS,
    BIRD_RESTING_COLOR,
    BIRD_SEARCHING_FOOD_COLOR,
    FOOD_COLOR,
    OBSTACLE_COLOR,
    PREDATOR_COLOR,
    PREDATOR_OUTLINE_COLOR,
    PREDATOR_OUTLINE_WIDTH,
    PREDATOR_RADIUS,
    RESOURCE_RADIUS,
    REST_COLOR,
    ZONE_LABEL_COLOR,
    ZONE_RING_COLOR,
    ZONE_RING_RADIUS,
    ZONE_RING_WIDTH,
)
from core.models import BirdState, ResourceType

Color = Tuple[int, int, int]


@dataclass(frozen=True)
class MarkerStyle:
    """How one marker is drawn.

    Attributes:
        color: Fill colour, or ring colour when ``width`` is non-zero
        radius: Marker radius in pixels (obstacles scale theirs instead)
        width: 0 for a filled disc, otherwise ring line width
        outline_color: Optional contrasting outline drawn over the disc
        outline_width: Outline line width
        label_color: Colour for an attached text label
    """

    color: Color
    radius: float = 0
    width: int = 0
    outline_color: Optional[Color] = None
    outline_width: int = 0
    label_color: Optional[Color] = None


OBSTACLE_STYLE = MarkerStyle(color=OBSTACLE_COLOR)

RESOURCE_STYLES: Dict[str, MarkerStyle] = {
    ResourceType.FOOD.value: MarkerStyle(color=FOOD_COLOR, radius=RESOURCE_RADIUS),
    ResourceType.REST.value: MarkerStyle(color=REST_COLOR, radius=RESOURCE_RADIUS),
}

BIRD_STYLES: Dict[str, MarkerStyle] = {
    BirdState.RESTING.value: MarkerStyle(color=BIRD_RESTING_COLOR, radius=BIRD_RADIUS),
    BirdState.SEARCHING_FOOD.value: MarkerStyle(color=BIRD_SEARCHING_FOOD_COLOR, radius=BIRD_RADIUS),
    BirdState.MIGRATING.value: MarkerStyle(color=BIRD_MIGRATING_COLOR, radius=BIRD_RADIUS),
}

PREDATOR_STYLE = MarkerStyle(
    color=PREDATOR_COLOR,
    radius=PREDATOR_RADIUS,
    outline_color=PREDATOR_OUTLINE_COLOR,
    outline_width=PREDATOR_OUTLINE_WIDTH,
)

ZONE_STYLE = MarkerStyle(
    color=ZONE_RING_COLOR,
    radius=ZONE_RING_RADIUS,
    width=ZONE_RING_WIDTH,
    label_color=ZONE_LABEL_COLOR,
)


def bird_style(state: Optional[str]) -> MarkerStyle:
    """Style for a bird in ``state``; unknown states render as migrating."""
    return BIRD_STYLES.get(state or "", BIRD_STYLES[BirdState.MIGRATING.value])


def resource_style(resource_type: Optional[str]) -> MarkerStyle:
    """Style for a resource; anything that is not food renders as rest."""
    if resource_type == ResourceType.FOOD.value:
        return RESOURCE_STYLES[ResourceType.FOOD.value]
    return RESOURCE_STYLES[ResourceType.REST.value]


def format_temperature(temperature: float) -> str:
    return f"{temperature:.1f}°"

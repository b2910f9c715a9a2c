"""Wire models for the simulation service.

All JSON bodies use lower-camel-case keys; the models expose snake_case
attributes and accept either spelling on input. Unknown keys are ignored so
newer service revisions can add fields without breaking the viewer.
"""

import math
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Type, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.exceptions import ShapeError

Position = Tuple[float, float]

DEFAULT_WORLD_SIZE = 1000


class BirdState(str, Enum):
    """Behavioural states reported for a bird."""

    MIGRATING = "migrating"
    RESTING = "resting"
    SEARCHING_FOOD = "searchingFood"


class ResourceType(str, Enum):
    """Kinds of resource the simulation places in the world."""

    FOOD = "food"
    REST = "rest"


class WireModel(BaseModel):
    """Base model for camelCase JSON documents."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_wire(self) -> Dict[str, Any]:
        """Serialize to a JSON-ready dict with wire (camelCase) keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Bird(WireModel):
    """A bird. ``state`` is a plain string so unknown states still parse."""

    position: Position
    state: Optional[str] = None
    id: Optional[int] = None


class Predator(WireModel):
    """A predator."""

    position: Position
    id: Optional[int] = None


class Obstacle(WireModel):
    """A circular obstacle."""

    position: Position
    radius: float = Field(gt=0)
    id: Optional[int] = None


class Resource(WireModel):
    """A food or rest resource."""

    position: Position
    type: Optional[str] = None
    id: Optional[int] = None
    capacity: Optional[int] = None
    current: Optional[int] = None


class TemperatureZone(WireModel):
    """A temperature annotation.

    Older service revisions identify zones by ``region`` rather than a
    position; such zones parse but have nowhere to be drawn.
    """

    temperature: float
    position: Optional[Position] = None
    region: Optional[int] = None


class SimulationSnapshot(WireModel):
    """Complete simulation state as returned by ``GET /simulation``."""

    birds: List[Bird] = Field(default_factory=list)
    predators: List[Predator] = Field(default_factory=list)
    obstacles: List[Obstacle] = Field(default_factory=list)
    resources: List[Resource] = Field(default_factory=list)
    temperature_zones: List[TemperatureZone] = Field(
        default_factory=list, alias="temperatureZones"
    )
    time: float = 0
    is_running: bool = Field(False, alias="isRunning")
    world_size: float = Field(DEFAULT_WORLD_SIZE, gt=0, alias="worldSize")
    collision_count: int = Field(0, alias="collisionCount")

    @field_validator(
        "birds", "predators", "obstacles", "resources", "temperature_zones", mode="before"
    )
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        # The service encodes empty slices as null
        return [] if value is None else value


class RunConfig(WireModel):
    """Editable run configuration (``/simulation/config``)."""

    simulation_speed: int = Field(100, gt=0, alias="simulationSpeed")  # ms per tick
    world_size: int = Field(DEFAULT_WORLD_SIZE, gt=0, alias="worldSize")
    initial_birds: int = Field(50, ge=0, alias="initialBirds")
    obstacle_count: Optional[int] = Field(None, ge=0, alias="obstacleCount")
    resource_count: Optional[int] = Field(None, ge=0, alias="resourceCount")


class TimeStep(WireModel):
    """Body of ``/simulation/time-step``."""

    time_step: int = Field(1, gt=0, alias="timeStep")


class EnvironmentFactors(WireModel):
    """Global environmental factors (``/environment``)."""

    temperature: float = 20.0
    food_availability: float = Field(1.0, ge=0, alias="foodAvailability")
    predator_presence: float = Field(0.0, ge=0, le=1, alias="predatorPresence")


class Zone(WireModel):
    """Per-zone environmental override (``/zones``). Ids are server-assigned."""

    id: int
    temperature: float = 20.0
    food_availability: float = Field(1.0, ge=0, alias="foodAvailability")
    predator_presence: float = Field(0.0, ge=0, le=1, alias="predatorPresence")
    position: Optional[Position] = None


class SavedRun(WireModel):
    """Envelope returned by ``GET /simulation/load``."""

    state: Dict[str, Any]
    config: Optional[RunConfig] = None
    time_step: Optional[int] = Field(None, gt=0, alias="timeStep")


def parse_model(model: Type[WireModel], payload: Any) -> Any:
    """Validate ``payload`` into ``model``, raising ShapeError on mismatch."""
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise ShapeError(f"Invalid {model.__name__} payload: {e}") from e


def parse_model_list(model: Type[WireModel], payload: Any) -> List[Any]:
    """Validate a JSON array of ``model`` documents."""
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise ShapeError(f"Expected a list of {model.__name__}, got {type(payload).__name__}")
    return [parse_model(model, item) for item in payload]


def merge_snapshot(prior: SimulationSnapshot, payload: Any) -> SimulationSnapshot:
    """Shallow-merge a raw snapshot response over ``prior``.

    Top-level keys present in ``payload`` overwrite, absent keys keep the
    prior value, entity arrays are replaced wholesale. The result is fully
    validated; on failure ``prior`` is left untouched and ShapeError raised.
    """
    if not isinstance(payload, dict):
        raise ShapeError(f"Snapshot must be a JSON object, got {type(payload).__name__}")

    merged: Dict[str, Any] = {
        field.alias or name: getattr(prior, name)
        for name, field in SimulationSnapshot.model_fields.items()
    }
    for key, value in payload.items():
        field = SimulationSnapshot.model_fields.get(key)
        if field is not None and field.alias:
            key = field.alias
        merged[key] = value
    return parse_model(SimulationSnapshot, merged)


def unwrap_saved_run(payload: Any) -> SavedRun:
    """Normalise a load-run response into a SavedRun.

    The service wraps the state as ``{state, config, timeStep}``; a bare
    snapshot body is accepted as well.
    """
    if not isinstance(payload, dict):
        raise ShapeError(f"Saved run must be a JSON object, got {type(payload).__name__}")
    if isinstance(payload.get("state"), dict):
        return parse_model(SavedRun, payload)
    return SavedRun(state=payload)


def coerce_number(value: Any, kind: Type[Union[int, float]] = float) -> Optional[Union[int, float]]:
    """Convert operator input to ``kind``; None when it is not a finite number.

    Integers are truncated toward zero, the way form inputs parse them.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    if kind is int:
        return int(number)
    return number


def resolve_field_name(model: Type[WireModel], name: str) -> Optional[str]:
    """Resolve a wire or attribute field name to the attribute name."""
    if name in model.model_fields:
        return name
    for attr, field in model.model_fields.items():
        if field.alias == name:
            return attr
    return None

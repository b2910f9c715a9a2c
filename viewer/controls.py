"""Keyboard bindings for operator actions."""

from dataclasses import dataclass, replace
from typing import Dict, List, Optional

import pygame


@dataclass(frozen=True)
class Action:
    """An operator action.

    Attributes:
        name: Orchestrator action name
        field: Config field / factor name the action edits, if any
        delta: Step applied to ``field``
    """

    name: str
    field: Optional[str] = None
    delta: float = 0


TOGGLE_RUNNING = "toggle_running"
ADJUST_CONFIG = "adjust_config"
ADJUST_TIME_STEP = "adjust_time_step"
ADJUST_FACTOR = "adjust_factor"
ADJUST_ZONE = "adjust_zone"
SELECT_ZONE = "select_zone"
SUBMIT_ENVIRONMENT = "submit_environment"
SAVE_RUN = "save_run"
LOAD_RUN = "load_run"
RELOAD = "reload"
QUIT = "quit"

KEY_BINDINGS: Dict[int, Action] = {
    pygame.K_SPACE: Action(TOGGLE_RUNNING),
    pygame.K_UP: Action(ADJUST_CONFIG, "simulationSpeed", 10),
    pygame.K_DOWN: Action(ADJUST_CONFIG, "simulationSpeed", -10),
    pygame.K_PAGEUP: Action(ADJUST_CONFIG, "worldSize", 100),
    pygame.K_PAGEDOWN: Action(ADJUST_CONFIG, "worldSize", -100),
    pygame.K_EQUALS: Action(ADJUST_CONFIG, "initialBirds", 5),
    pygame.K_MINUS: Action(ADJUST_CONFIG, "initialBirds", -5),
    pygame.K_RIGHT: Action(ADJUST_TIME_STEP, delta=1),
    pygame.K_LEFT: Action(ADJUST_TIME_STEP, delta=-1),
    pygame.K_1: Action(ADJUST_FACTOR, "temperature", -1.0),
    pygame.K_2: Action(ADJUST_FACTOR, "temperature", 1.0),
    pygame.K_3: Action(ADJUST_FACTOR, "foodAvailability", -0.1),
    pygame.K_4: Action(ADJUST_FACTOR, "foodAvailability", 0.1),
    pygame.K_5: Action(ADJUST_FACTOR, "predatorPresence", -0.05),
    pygame.K_6: Action(ADJUST_FACTOR, "predatorPresence", 0.05),
    pygame.K_TAB: Action(SELECT_ZONE, delta=1),
    pygame.K_RETURN: Action(SUBMIT_ENVIRONMENT),
    pygame.K_F5: Action(SAVE_RUN),
    pygame.K_F9: Action(LOAD_RUN),
    pygame.K_r: Action(RELOAD),
    pygame.K_ESCAPE: Action(QUIT),
}

KEY_HELP: List[str] = [
    "SPACE start/stop",
    "UP/DOWN speed  PGUP/PGDN world",
    "+/- birds  LEFT/RIGHT time step",
    "1-6 env factors (SHIFT: zone)",
    "TAB next zone  ENTER submit env",
    "F5 save  F9 load  R reload",
]


def resolve_action(key: int, mod: int = 0) -> Optional[Action]:
    """Map a key press to an action.

    Holding SHIFT redirects factor edits to the selected zone and reverses
    zone cycling.
    """
    action = KEY_BINDINGS.get(key)
    if action is None:
        return None

    if mod & pygame.KMOD_SHIFT:
        if action.name == ADJUST_FACTOR:
            return replace(action, name=ADJUST_ZONE)
        if action.name == SELECT_ZONE:
            return replace(action, delta=-action.delta)
    return action

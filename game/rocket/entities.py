"""
Game entity dataclasses
"""

from dataclasses import dataclass, field
from typing import List, Optional

ASTEROID = "asteroid"
LASER = "laser"
ENEMY = "enemy"

OBSTACLE_KINDS = (ASTEROID, LASER, ENEMY)


@dataclass
class Craft:
    """Player rocket. Horizontally pinned to the surface centre."""
    y: float
    velocity: float = 0.0


@dataclass
class Star:
    """Background star scrolling downwards"""
    x: float
    y: float
    speed: float  # px/tick


@dataclass
class Obstacle:
    """Obstacle crossing the screen horizontally"""
    kind: str
    x: float
    y: float
    width: float
    height: float
    speed: float  # signed px/tick, > 0 moves right


@dataclass
class RunState:
    """Everything one play session owns"""
    craft: Craft
    stars: List[Star]
    obstacles: List[Obstacle] = field(default_factory=list)
    score: float = 0.0  # seconds survived
    spawn_timer: float = 0.0
    is_over: bool = False
    thrusting: bool = False
    last_timestamp: Optional[float] = None

"""
Obstacle spawning and movement
"""

from typing import List

import numpy as np

from .entities import Obstacle, ASTEROID, LASER, ENEMY
from .utils import REFERENCE_WIDTH

SPAWN_INTERVAL = 1.5  # seconds
EDGE_MARGIN = 20


def pick_kind(r: float) -> str:
    """Map a uniform draw to a kind: 50% asteroid, 25% laser, 25% enemy"""
    if r < 0.5:
        return ASTEROID
    if r < 0.75:
        return LASER
    return ENEMY


def obstacle_size(kind: str, width: float, height: float, rng: np.random.Generator):
    if kind == ASTEROID:
        side = 10 + int(rng.integers(0, 10))
        return float(side), float(side)
    if kind == LASER:
        return width / 10, 2.0
    if kind == ENEMY:
        return width / 20, height / 20
    raise ValueError(f"Unknown obstacle kind: {kind}")


def spawn_obstacle(width: float, height: float, rng: np.random.Generator) -> Obstacle:
    """Create an obstacle entering from a random side of the surface"""
    from_left = rng.random() > 0.5
    kind = pick_kind(rng.random())
    w, h = obstacle_size(kind, width, height, rng)

    # Keep obstacles off the very top/bottom rows
    y = rng.random() * (height - 2 * EDGE_MARGIN) + EDGE_MARGIN

    speed = ((rng.random() * 0.5 + 0.5) * width) / REFERENCE_WIDTH
    if not from_left:
        speed = -speed

    return Obstacle(
        kind=kind,
        x=0.0 if from_left else float(width),
        y=y,
        width=w,
        height=h,
        speed=speed,
    )


def is_on_screen(obstacle: Obstacle, width: float) -> bool:
    return obstacle.x + obstacle.width > 0 and obstacle.x < width


def advance_obstacles(obstacles: List[Obstacle], width: float) -> List[Obstacle]:
    """Move every obstacle one tick and drop the ones that left the surface"""
    for o in obstacles:
        o.x += o.speed
    return [o for o in obstacles if is_on_screen(o, width)]

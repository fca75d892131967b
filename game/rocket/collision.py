"""
Collision checks between the rocket, obstacles and the screen edges
"""

from typing import Iterable, Optional, Tuple

from .entities import Craft, Obstacle
from .utils import aabb_overlap, sprite_scale

CRAFT_HALF_WIDTH = 5
CRAFT_HEIGHT = 20
GROUND_OFFSET = 4  # ground line sits this many px above the bottom edge


def craft_box(craft: Craft, width: float) -> Tuple[float, float, float, float]:
    """Rocket hitbox as (left, top, right, bottom)"""
    s = sprite_scale(width)
    cx = width / 2
    return (
        cx - CRAFT_HALF_WIDTH * s,
        craft.y,
        cx + CRAFT_HALF_WIDTH * s,
        craft.y + CRAFT_HEIGHT * s,
    )


def obstacle_box(obstacle: Obstacle) -> Tuple[float, float, float, float]:
    return (
        obstacle.x,
        obstacle.y,
        obstacle.x + obstacle.width,
        obstacle.y + obstacle.height,
    )


def collides(craft: Craft, obstacle: Obstacle, width: float) -> bool:
    """AABB test between the rocket and one obstacle"""
    return aabb_overlap(*craft_box(craft, width), *obstacle_box(obstacle))


def first_collision(craft: Craft, obstacles: Iterable[Obstacle], width: float) -> Optional[Obstacle]:
    """First obstacle (in insertion order) the rocket touches, if any"""
    for o in obstacles:
        if collides(craft, o, width):
            return o
    return None


def hits_ground(craft: Craft, width: float, height: float) -> bool:
    bottom = craft.y + CRAFT_HEIGHT * sprite_scale(width)
    return bottom >= height - GROUND_OFFSET


def hits_ceiling(craft: Craft) -> bool:
    return craft.y < 0


def hits_boundary(craft: Craft, width: float, height: float) -> bool:
    return hits_ground(craft, width, height) or hits_ceiling(craft)

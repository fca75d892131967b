"""
Craft physics.

Gravity and thrust are added once per tick, not scaled by dt, so the feel of
the game depends on the refresh rate. Keep it that way: difficulty is tuned
around it.
"""

from .entities import Craft
from .utils import REFERENCE_HEIGHT

GRAVITY = 0.05
THRUST = -0.15


def gravity_for(surface_height: float) -> float:
    return GRAVITY * (surface_height / REFERENCE_HEIGHT)


def thrust_for(surface_height: float) -> float:
    return THRUST * (surface_height / REFERENCE_HEIGHT)


def step_craft(craft: Craft, surface_height: float, thrusting: bool) -> Craft:
    """Advance the craft by one tick (in place) and return it"""
    craft.velocity += gravity_for(surface_height)
    if thrusting:
        craft.velocity += thrust_for(surface_height)
    craft.y += craft.velocity
    return craft

"""
Frame renderer.

Draws the whole scene into a FrameBuffer with integer-pixel fills only. Sprite
dimensions follow the rocket scale (surface width / 600), so the picture keeps
its proportions when the surface is resized. Flicker effects (flame, asteroid
craters) draw from the generator passed in, which makes frames reproducible
under a seeded generator.
"""

import math

import numpy as np

from .canvas import FrameBuffer, hex_color
from .collision import GROUND_OFFSET
from .entities import Craft, Obstacle, RunState, ASTEROID, LASER, ENEMY
from .utils import sprite_scale

BACKGROUND = hex_color("#000000")
STAR_C = hex_color("#FFFFFF")
BODY_C = hex_color("#8B8B8B")
NOSE_C = hex_color("#FF6347")
WINDOW_C = hex_color("#87CEEB")
FIN_C = hex_color("#4169E1")
FLAME_C = hex_color("#FFA500")
ASTEROID_C = hex_color("#8B4513")
LASER_C = hex_color("#FF0000")
ENEMY_C = hex_color("#008000")
ENEMY_WINDOW_C = hex_color("#FFFF00")
GROUND_C = hex_color("#00FF00")

FLAME_FILL = 0.5  # a flame pixel is drawn when draw > FLAME_FILL
ASTEROID_FILL = 0.3
GROUND_STEP = 2


def _span(limit: float) -> int:
    """Number of integer steps i >= 0 with i < limit"""
    return max(math.ceil(limit), 0)


def _sparse_mask(rng: np.random.Generator, rows: int, cols: int, threshold: float) -> np.ndarray:
    return rng.random((rows, cols)) > threshold


def draw_craft(canvas: FrameBuffer, craft: Craft, thrusting: bool, rng: np.random.Generator):
    s = sprite_scale(canvas.width)
    x = canvas.width / 2
    y = craft.y

    # Body
    canvas.fill_rect(x - 5 * s, y, _span(10 * s), _span(20 * s), BODY_C)

    # Nose: pixel (i, j) is inside when i + 2j >= 4s and i - 2j <= 5s
    j, i = np.mgrid[0:_span(5 * s), 0:_span(10 * s)]
    nose = (i + 2 * j >= 4 * s) & (i - 2 * j <= 5 * s)
    canvas.fill_mask(x - 5 * s, y, nose, NOSE_C)

    # Window: disc of radius 2s around (x, y + 8s), offsets stepping from -2s
    steps = math.floor(4 * s) + 1
    offsets = -2 * s + np.arange(steps)
    jj, ii = np.meshgrid(offsets, offsets, indexing="ij")
    window = ii * ii + jj * jj <= 4 * s * s
    canvas.fill_mask(x - 2 * s, y + 8 * s - 2 * s, window, WINDOW_C)

    # Fins
    for k in range(_span(4 * s)):
        canvas.fill_rect(x - 6 * s + k, y + 17 * s + k, 1, 1, FIN_C)
        canvas.fill_rect(x + 5 * s - k, y + 17 * s + k, 1, 1, FIN_C)

    if thrusting:
        flame = _sparse_mask(rng, _span(5 * s), _span(8 * s), FLAME_FILL)
        canvas.fill_mask(x - 4 * s, y + 20 * s, flame, FLAME_C)


def draw_obstacle(canvas: FrameBuffer, obstacle: Obstacle, rng: np.random.Generator):
    w = _span(obstacle.width)
    h = _span(obstacle.height)

    if obstacle.kind == ASTEROID:
        craters = _sparse_mask(rng, h, w, ASTEROID_FILL)
        canvas.fill_mask(obstacle.x, obstacle.y, craters, ASTEROID_C)
    elif obstacle.kind == LASER:
        canvas.fill_rect(obstacle.x, obstacle.y, w, 1, LASER_C)
        canvas.fill_rect(obstacle.x, obstacle.y + 1, w, 1, LASER_C)
    elif obstacle.kind == ENEMY:
        canvas.fill_rect(obstacle.x, obstacle.y, w, h, ENEMY_C)
        # 3x3 window around (w/2, h/4)
        canvas.fill_rect(
            obstacle.x + obstacle.width / 2 - 1,
            obstacle.y + obstacle.height / 4 - 1,
            3, 3, ENEMY_WINDOW_C,
        )
    else:
        raise ValueError(f"Unknown obstacle kind: {obstacle.kind}")


def draw_ground(canvas: FrameBuffer):
    for i in range(0, canvas.width, GROUND_STEP):
        canvas.fill_rect(i, canvas.height - GROUND_OFFSET, GROUND_STEP, GROUND_STEP, GROUND_C)


def render_frame(canvas: FrameBuffer, state: RunState, rng: np.random.Generator) -> FrameBuffer:
    """Paint the full scene for the current run state"""
    canvas.clear(BACKGROUND)

    for star in state.stars:
        canvas.fill_rect(star.x, star.y, 1, 1, STAR_C)

    for o in state.obstacles:
        draw_obstacle(canvas, o, rng)

    draw_craft(canvas, state.craft, state.thrusting, rng)
    draw_ground(canvas)
    return canvas

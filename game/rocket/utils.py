"""
Utility functions for game mechanics
"""

from __future__ import annotations
import random
from typing import Optional, Tuple
import numpy as np

REFERENCE_WIDTH = 600
REFERENCE_HEIGHT = 800


def sprite_scale(width: float) -> float:
    """Sprite scale factor relative to the 600px reference width"""
    return width / REFERENCE_WIDTH


def aabb_overlap(l1, t1, r1, b1, l2, t2, r2, b2) -> bool:
    """Check if two axis-aligned boxes (left, top, right, bottom) overlap"""
    return l1 < r2 and r1 > l2 and t1 < b2 and b1 > t2


def responsive_surface_size(
    viewport_w: float,
    viewport_h: float,
    width_fraction: float = 0.9,
    height_fraction: float = 0.7,
) -> Tuple[int, int]:
    """Surface size for a viewport (90% wide, 70% tall by default), capped at 600x800"""
    width = min(viewport_w * width_fraction, REFERENCE_WIDTH)
    height = min(viewport_h * height_fraction, REFERENCE_HEIGHT)
    return int(width), int(height)


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Create the generator every random draw in the game goes through"""
    return np.random.default_rng(seed)


def seed_everything(py_seed: Optional[int]):
    """Seed all random number generators"""
    if py_seed is None:
        return
    random.seed(py_seed)
    np.random.seed(py_seed)

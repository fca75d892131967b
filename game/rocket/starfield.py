"""
Parallax star field behind the rocket
"""

from typing import List

import numpy as np

from .entities import Star

STAR_COUNT = 50
MIN_SPEED = 0.1
SPEED_RANGE = 0.5


def create_stars(width: float, height: float, rng: np.random.Generator, count: int = STAR_COUNT) -> List[Star]:
    """Scatter `count` stars uniformly over the surface"""
    return [
        Star(
            x=rng.random() * width,
            y=rng.random() * height,
            speed=rng.random() * SPEED_RANGE + MIN_SPEED,
        )
        for _ in range(count)
    ]


def advance_stars(
    stars: List[Star],
    width: float,
    height: float,
    thrust_active: bool,
    rng: np.random.Generator,
) -> List[Star]:
    """Scroll stars down; stars falling off the bottom come back at the top"""
    boost = 2 if thrust_active else 1
    for star in stars:
        star.y += star.speed * boost
        if star.y > height:
            star.y = 0.0
            star.x = rng.random() * width
    return stars

"""
Pixel surface the renderer draws into.

A FrameBuffer is a (height, width, 3) uint8 numpy array with the two
primitives the renderer needs: clear and an integer axis-aligned fill.
Nothing is anti-aliased; coordinates are floored and clipped to the buffer.
"""

from __future__ import annotations

import math
from typing import Tuple, Union

import numpy as np

Color = Tuple[int, int, int]


def hex_color(value: str) -> Color:
    """'#RRGGBB' -> (r, g, b)"""
    value = value.lstrip("#")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


class FrameBuffer:
    """RGB pixel surface of a fixed size"""

    def __init__(self, width: int, height: int):
        self.width = int(width)
        self.height = int(height)
        self.pixels = np.zeros((max(self.height, 0), max(self.width, 0), 3), dtype=np.uint8)

    @property
    def drawable(self) -> bool:
        return self.width > 0 and self.height > 0

    def clear(self, color: Color = (0, 0, 0)):
        self.pixels[:, :] = color

    def _clip(self, x: float, y: float, w: float, h: float):
        x0 = math.floor(x)
        y0 = math.floor(y)
        x1 = min(x0 + math.ceil(w), self.width)
        y1 = min(y0 + math.ceil(h), self.height)
        return max(x0, 0), max(y0, 0), x1, y1, x0, y0

    def fill_rect(self, x: float, y: float, w: float, h: float, color: Color):
        """Fill the w*h block whose top-left pixel is (floor(x), floor(y))"""
        cx0, cy0, x1, y1, _, _ = self._clip(x, y, w, h)
        if cx0 < x1 and cy0 < y1:
            self.pixels[cy0:y1, cx0:x1] = color

    def fill_mask(self, x: float, y: float, mask: np.ndarray, color: Color):
        """Fill the pixels of a boolean (rows, cols) mask placed at (x, y)"""
        rows, cols = mask.shape
        cx0, cy0, x1, y1, x0, y0 = self._clip(x, y, cols, rows)
        if cx0 >= x1 or cy0 >= y1:
            return
        sub = mask[cy0 - y0:y1 - y0, cx0 - x0:x1 - x0]
        self.pixels[cy0:y1, cx0:x1][sub] = color

    def pixel(self, x: int, y: int) -> Color:
        r, g, b = self.pixels[y, x]
        return int(r), int(g), int(b)

    def count(self, color: Union[Color, str]) -> int:
        """Number of pixels currently holding `color`"""
        if isinstance(color, str):
            color = hex_color(color)
        return int(np.all(self.pixels == np.array(color, dtype=np.uint8), axis=-1).sum())

    def to_array(self) -> np.ndarray:
        return self.pixels.copy()

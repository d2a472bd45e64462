from __future__ import annotations

from typing import Tuple

import numpy as np
from PIL import Image

from fractview.color import WHITE


class RenderTarget:
    """RGB pixel buffer the renderer paints into in place.

    The backing array has shape ``(height, width, 3)`` and is never
    reallocated; renderers only fill rectangles of it.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Target must have a positive area, got {width}x{height}.")
        self.width = int(width)
        self.height = int(height)
        self.pixels = np.zeros((self.height, self.width, 3), dtype=np.uint8)

    @classmethod
    def from_image(cls, img: Image.Image) -> "RenderTarget":
        target = cls(img.width, img.height)
        target.pixels[...] = np.asarray(img.convert("RGB"), dtype=np.uint8)
        return target

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def clear(self, color: Tuple[int, int, int] = WHITE) -> None:
        self.pixels[...] = color

    def fill_rect(self, x: int, y: int, w: int, h: int, color: Tuple[int, int, int]) -> None:
        # Numpy slicing clips blocks that overhang the right/bottom edges.
        if x >= self.width or y >= self.height:
            return
        self.pixels[y:y + h, x:x + w] = color

    def pixel(self, x: int, y: int) -> Tuple[int, int, int]:
        r, g, b = self.pixels[y, x]
        return int(r), int(g), int(b)

    def copy_pixels(self) -> np.ndarray:
        return self.pixels.copy()

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.pixels.copy())

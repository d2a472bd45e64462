"""Mapping from a pan/zoom view transform onto the complex plane.

The reference window is the square ``[-2, 2] x [-2, 2]``. It is fitted into the
smaller raster dimension so pixels stay square; the larger dimension simply
sees more of the plane, centred on the reference window.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Tuple

RE_MIN = -2.0
RE_MAX = -RE_MIN
RE_SIZE = RE_MAX - RE_MIN
IM_MIN = RE_MIN
IM_MAX = -IM_MIN
IM_SIZE = IM_MAX - IM_MIN


@dataclass(frozen=True)
class ViewTransform:
    """Translation (in pixels) and uniform zoom of the logical canvas."""

    offset_x: float = 0.0
    offset_y: float = 0.0
    scale: float = 1.0

    def translated(self, dx: float, dy: float) -> "ViewTransform":
        return replace(self, offset_x=self.offset_x + dx, offset_y=self.offset_y + dy)

    def zoomed(self, factor: float) -> "ViewTransform":
        # Post-scaling scales the translation too, like a 2D affine matrix would.
        return ViewTransform(
            offset_x=self.offset_x * factor,
            offset_y=self.offset_y * factor,
            scale=self.scale * factor,
        )


@dataclass(frozen=True)
class SampleWindow:
    """Complex coordinate of pixel (0, 0) and the per-pixel increments."""

    origin_re: float
    origin_im: float
    step_re: float
    step_im: float

    def point(self, x: int, y: int) -> Tuple[float, float]:
        return self.origin_re + x * self.step_re, self.origin_im + y * self.step_im


def sample_window(transform: ViewTransform, width: int, height: int) -> SampleWindow:
    if width <= 0 or height <= 0:
        raise ValueError(f"Target must have a positive area, got {width}x{height}.")
    if transform.scale <= 0:
        raise ValueError(f"scale must be > 0, got {transform.scale}.")

    zoom = float(transform.scale)
    size_min = min(width, height)
    size_re = float(size_min) if height >= width else size_min * RE_SIZE / IM_SIZE
    size_im = size_min * IM_SIZE / RE_SIZE if height >= width else float(size_min)

    # Pixels per unit of the complex plane.
    size_set_re = size_re * zoom / RE_SIZE
    size_set_im = size_im * zoom / IM_SIZE

    offset_re = transform.offset_x + min(0.0, (size_re - width) / 2.0)
    offset_im = transform.offset_y + min(0.0, (size_im - height) / 2.0)

    return SampleWindow(
        origin_re=offset_re / size_set_re + RE_MIN / zoom,
        origin_im=offset_im / size_set_im + IM_MIN / zoom,
        step_re=1.0 / size_set_re,
        step_im=1.0 / size_set_im,
    )

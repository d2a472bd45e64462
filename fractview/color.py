from __future__ import annotations

import colorsys
from dataclasses import dataclass
from typing import Tuple

DEFAULT_HUES = 360.0
DEFAULT_DENSITY = 1e+1

BLACK: Tuple[int, int, int] = (0, 0, 0)
WHITE: Tuple[int, int, int] = (255, 255, 255)


@dataclass(frozen=True)
class ColorStyle:
    """How a smooth escape value becomes a colour.

    ``hues`` is the hue range in degrees the banding wraps around, ``density``
    how many degrees one unit of escape value advances the hue.
    """

    hues: float = DEFAULT_HUES
    saturation: float = 1.0
    brightness: float = 1.0
    density: float = DEFAULT_DENSITY

    def __post_init__(self) -> None:
        if not 0.0 <= self.saturation <= 1.0:
            raise ValueError(f"saturation must be within [0, 1], got {self.saturation}.")
        if not 0.0 <= self.brightness <= 1.0:
            raise ValueError(f"brightness must be within [0, 1], got {self.brightness}.")
        if self.hues <= 0:
            raise ValueError(f"hues must be > 0, got {self.hues}.")


def hue_for(value: float, density: float = DEFAULT_DENSITY, hues: float = DEFAULT_HUES) -> float:
    return (value * density) % hues


def hsv_to_rgb(hue: float, saturation: float, brightness: float) -> Tuple[int, int, int]:
    r, g, b = colorsys.hsv_to_rgb((hue / 360.0) % 1.0, saturation, brightness)
    return int(round(r * 255)), int(round(g * 255)), int(round(b * 255))


def map_color(value: float, style: ColorStyle) -> Tuple[int, int, int]:
    if value == 0.0:
        return BLACK
    return hsv_to_rgb(hue_for(value, style.density, style.hues), style.saturation, style.brightness)

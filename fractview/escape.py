"""Escape-time evaluation of ``z := z * z + c`` with smooth iteration counts.

http://en.wikipedia.org/wiki/Mandelbrot_set
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

LOG2 = math.log(2.0)
LOG2_LOG2 = math.log(LOG2) / LOG2
LOG2_LOG2_2 = 2.0 + LOG2_LOG2

# Iteration ceiling shared by the Mandelbrot and Julia paths.
OVERFLOW = 300
# |z|^2 bailout. Larger than the usual 4 for smoother colour bands.
ESCAPE_RADIUS_SQR = 9.0


@dataclass(frozen=True)
class JuliaParameter:
    c_re: float
    c_im: float


def escape_value(z_re: float, z_im: float, c_re: float, c_im: float, max_iterations: int = OVERFLOW) -> float:
    """Iterate from ``z0`` with constant ``c`` and return the smooth escape value.

    Returns 0.0 when the orbit does not escape within ``max_iterations``; that
    value is the interior sentinel.
    """
    z_re_sqr = z_re * z_re
    z_im_sqr = z_im * z_im
    i = 0
    while True:
        r = z_re_sqr - z_im_sqr + c_re
        z_im = 2.0 * z_re * z_im + c_im
        z_re = r
        z_re_sqr = z_re * z_re
        z_im_sqr = z_im * z_im
        d = z_re_sqr + z_im_sqr
        i += 1
        underflow = i < max_iterations
        # NaN (inf - inf on huge starting points) counts as escaped.
        if not underflow or not d < ESCAPE_RADIUS_SQR:
            break

    if not underflow:
        return 0.0
    if not math.isfinite(d):
        # |z|^2 overflowed a double; the smooth correction is undefined there.
        return float(i)
    return i + LOG2_LOG2_2 - math.log(math.log(d)) / LOG2


def mandelbrot_value(re: float, im: float, max_iterations: int = OVERFLOW) -> float:
    return escape_value(0.0, 0.0, re, im, max_iterations)


def julia_value(re: float, im: float, c: JuliaParameter, max_iterations: int = OVERFLOW) -> float:
    return escape_value(re, im, c.c_re, c.c_im, max_iterations)


def point_value(re: float, im: float, julia: Optional[JuliaParameter] = None, max_iterations: int = OVERFLOW) -> float:
    if julia is None:
        return mandelbrot_value(re, im, max_iterations)
    return julia_value(re, im, julia, max_iterations)

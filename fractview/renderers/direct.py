from __future__ import annotations

import logging
from concurrent.futures import ProcessPoolExecutor
from typing import List, Optional, Tuple

import numpy as np

from fractview.color import ColorStyle, map_color
from fractview.escape import OVERFLOW, JuliaParameter, point_value
from fractview.target import RenderTarget
from fractview.util.logging_setup import get_logger, logging_initialiser
from fractview.viewport import SampleWindow

_G = {}

def _init_worker(window, julia, style, width, max_iterations, log_queue, log_level):
    _G["window"] = window
    _G["julia"] = julia
    _G["style"] = style
    _G["width"] = width
    _G["max_iterations"] = max_iterations
    logging_initialiser(log_queue, log_level)

def _evaluate_band(
    y0: int,
    y1: int,
    *,
    window: SampleWindow,
    julia: Optional[JuliaParameter],
    style: ColorStyle,
    width: int,
    max_iterations: int,
) -> np.ndarray:
    band = np.zeros((y1 - y0, width, 3), dtype=np.uint8)
    for yi, y in enumerate(range(y0, y1)):
        for x in range(width):
            re, im = window.point(x, y)
            band[yi, x] = map_color(point_value(re, im, julia, max_iterations), style)
    return band

def _render_band(y0_y1: Tuple[int, int]) -> Tuple[int, np.ndarray]:
    y0, y1 = y0_y1
    logger = get_logger("direct")
    band = _evaluate_band(
        y0, y1,
        window=_G["window"], julia=_G["julia"], style=_G["style"],
        width=_G["width"], max_iterations=_G["max_iterations"],
    )
    logger.debug("Rendered rows %s..%s", y0, y1)
    return y0, band

def render_direct(
    target: RenderTarget,
    window: SampleWindow,
    *,
    julia: Optional[JuliaParameter] = None,
    style: Optional[ColorStyle] = None,
    max_iterations: int = OVERFLOW,
    workers: int = 0,
    band_height: int = 32,
    log_queue=None,
    log_level: int = logging.INFO,
) -> RenderTarget:
    """Evaluate every pixel of ``target`` at full resolution.

    ``workers > 0`` spreads row bands over a process pool; otherwise the bands
    are evaluated on the calling thread.
    """
    logger = get_logger("direct")
    style = style or ColorStyle()
    width, height = target.width, target.height

    bands: List[Tuple[int, int]] = []
    y = 0
    while y < height:
        y1 = min(height, y + band_height)
        bands.append((y, y1))
        y = y1

    logger.info("Direct render start size=%sx%s bands=%s workers=%s", width, height, len(bands), workers)

    if workers <= 0:
        for y0, y1 in bands:
            target.pixels[y0:y1] = _evaluate_band(
                y0, y1, window=window, julia=julia, style=style, width=width, max_iterations=max_iterations
            )
    else:
        with ProcessPoolExecutor(
            max_workers=workers,
            initializer=_init_worker,
            initargs=(window, julia, style, width, max_iterations, log_queue, log_level),
        ) as pool:
            for y0, band in pool.map(_render_band, bands):
                target.pixels[y0:y0 + band.shape[0]] = band

    logger.info("Direct render done")
    return target

from __future__ import annotations

import logging
import os
import time
from typing import Any, Callable, Dict, Optional, Tuple

from PIL import Image

from fractview.config import color_style, julia_parameter, view_transform
from fractview.events import Completed, Failed, FramePainted, RenderEvent
from fractview.renderers.direct import render_direct
from fractview.renderers.progressive import block_sizes, run_session
from fractview.session import CancellationToken, RenderSession, RenderState
from fractview.target import RenderTarget
from fractview.util.logging_setup import get_logger
from fractview.viewport import sample_window

IMAGE_EXT = ".png"

def _ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)

def _save_frame(img: Image.Image, frames_dir: str, frame_index: int) -> str:
    path = os.path.join(frames_dir, f"frame_{frame_index:06d}{IMAGE_EXT}")
    img.save(path, format="PNG", optimize=True)
    return path

def generate_file_name() -> str:
    return "fractal-" + time.strftime("%Y%m%d-%H%M%S", time.localtime()) + IMAGE_EXT

def save_png(target: RenderTarget, folder: str, *, name: Optional[str] = None) -> str:
    logger = get_logger()
    _ensure_dir(folder)
    path = os.path.join(folder, name or generate_file_name())
    target.to_image().save(path, format="PNG")
    logger.info("Save success: %s", path)
    return path

def pass_count(width: int, height: int) -> int:
    # Seed plus one pass per block size.
    return len(block_sizes(width, height)) + 1

def render_progressive(
    *,
    cfg: Dict[str, Any],
    listener: Optional[Callable[[RenderEvent], None]] = None,
    token: Optional[CancellationToken] = None,
) -> Tuple[RenderTarget, Dict[str, Any]]:
    logger = get_logger()

    width = int(cfg["width"])
    height = int(cfg["height"])
    frames_dir = cfg.get("frames_dir")
    if frames_dir:
        _ensure_dir(frames_dir)

    target = RenderTarget(width, height)
    session = RenderSession.create(
        target,
        view_transform(cfg),
        style=color_style(cfg),
        julia=julia_parameter(cfg),
        start_delay=float(cfg.get("start_delay", 0.0)),
        token=token,
    )

    counts = {"frames": 0, "saved": 0}
    elapsed = {"seconds": 0.0}
    error: Dict[str, Optional[BaseException]] = {"error": None}

    def _on_event(event: RenderEvent) -> None:
        if isinstance(event, FramePainted):
            counts["frames"] += 1
            if frames_dir and not event.final:
                _save_frame(target.to_image(), frames_dir, counts["saved"])
                counts["saved"] += 1
        elif isinstance(event, Completed):
            elapsed["seconds"] = event.elapsed
        elif isinstance(event, Failed):
            error["error"] = event.error
        if listener is not None:
            listener(event)

    state = run_session(session, _on_event)
    if state is RenderState.FAILED:
        logger.error("Progressive render failed: %s", error["error"])
    elif state is RenderState.CANCELLED:
        logger.warning("Progressive render cancelled after %s frames", counts["frames"])
    else:
        logger.info("Progressive render complete frames=%s saved=%s", counts["frames"], counts["saved"])

    return target, {
        "mode": "progressive",
        "session": session.session_id,
        "state": state.value,
        "width": width,
        "height": height,
        "frames": counts["frames"],
        "saved_frames": counts["saved"],
        "frames_dir": frames_dir,
        "elapsed": elapsed["seconds"],
    }

def render_full(
    *,
    cfg: Dict[str, Any],
    log_queue=None,
    log_level: int = logging.INFO,
) -> Tuple[RenderTarget, Dict[str, Any]]:
    width = int(cfg["width"])
    height = int(cfg["height"])
    target = RenderTarget(width, height)
    started = time.perf_counter()
    render_direct(
        target,
        sample_window(view_transform(cfg), width, height),
        julia=julia_parameter(cfg),
        style=color_style(cfg),
        workers=int(cfg.get("workers", 0)),
        log_queue=log_queue,
        log_level=log_level,
    )
    return target, {
        "mode": "direct",
        "state": RenderState.COMPLETED.value,
        "width": width,
        "height": height,
        "workers": int(cfg.get("workers", 0)),
        "elapsed": time.perf_counter() - started,
    }

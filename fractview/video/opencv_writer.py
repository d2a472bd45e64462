from __future__ import annotations

import glob
import os
from typing import List

from fractview.util.logging_setup import get_logger

def collect_frames(input_dir: str) -> List[str]:
    # Snapshots are written as frame_NNNNNN.png, so lexical order is refinement order.
    return sorted(p for p in glob.glob(os.path.join(input_dir, "frame_*")) if p.lower().endswith((".png", ".jpg", ".jpeg")))

def encode_with_opencv(*, input_dir: str, output_file: str, fps: int) -> int:
    """Stitch refinement snapshots into an MP4 and return the frame count."""
    logger = get_logger("video")
    frames = collect_frames(input_dir)
    if not frames:
        raise ValueError(f"No frames found in {input_dir}")
    if fps <= 0:
        raise ValueError("fps must be positive.")

    try:
        import cv2  # type: ignore
    except ImportError as e:
        raise RuntimeError(f"OpenCV not installed: {e}") from e

    first = cv2.imread(frames[0])
    if first is None:
        raise RuntimeError(f"Failed to read first frame: {frames[0]}")
    h, w, _ = first.shape

    folder = os.path.dirname(output_file)
    if folder:
        os.makedirs(folder, exist_ok=True)
    fourcc = cv2.VideoWriter_fourcc(*"mp4v")
    out = cv2.VideoWriter(output_file, fourcc, fps, (w, h))
    if not out.isOpened():
        raise RuntimeError(f"Failed to open VideoWriter for {output_file}")

    logger.info("Encoding video %s from %s frames (%sx%s @ %sfps)", output_file, len(frames), w, h, fps)
    try:
        for i, path in enumerate(frames):
            img = cv2.imread(path)
            if img is None:
                raise RuntimeError(f"Failed to read frame: {path}")
            if img.shape[0] != h or img.shape[1] != w:
                img = cv2.resize(img, (w, h), interpolation=cv2.INTER_NEAREST)
            out.write(img)
            if i % 200 == 0:
                logger.debug("Encoded %s/%s frames", i, len(frames))
    finally:
        out.release()
    logger.info("Video written: %s", output_file)
    return len(frames)

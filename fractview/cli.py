from __future__ import annotations

import argparse
import logging
import os
from typing import Any, Dict, Optional

from tqdm import tqdm

from fractview.config import load_config, normalise_config
from fractview.events import FramePainted, RenderEvent
from fractview.pipeline import pass_count, render_full, render_progressive, save_png
from fractview.session import RenderState
from fractview.util.logging_setup import configure_root_logging, create_log_queue, get_logger, start_queue_listener
from fractview.util.manifest import build_manifest, write_manifest
from fractview.video.opencv_writer import encode_with_opencv

def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="fractview", description="Progressive Mandelbrot/Julia renderer.")
    p.add_argument("--config", type=str, default=None, help="Path to config JSON. If omitted, built-in defaults are used.")
    p.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Log level.")
    p.add_argument("--log-file", type=str, default="render.log", help="Log file path (rotating). Set empty to disable file logging.")
    sub = p.add_subparsers(dest="cmd", required=True)

    r = sub.add_parser("render", help="Render a picture coarse-to-fine and save it as PNG.")
    r.add_argument("--width", type=int, default=None, help="Picture width in pixels.")
    r.add_argument("--height", type=int, default=None, help="Picture height in pixels.")
    r.add_argument("--scale", type=float, default=None, help="Zoom factor; 1.0 shows [-2, 2] on the shorter side.")
    r.add_argument("--offset", type=float, nargs=2, metavar=("X", "Y"), default=None, help="Pan offset in pixels.")
    r.add_argument("--julia", type=float, nargs=2, metavar=("RE", "IM"), default=None, help="Render the Julia set for c = RE + IM*i.")
    r.add_argument("--saturation", type=float, default=None, help="HSV saturation in [0, 1].")
    r.add_argument("--brightness", type=float, default=None, help="HSV brightness in [0, 1].")
    r.add_argument("--start-delay", type=float, default=None, help="Seconds to wait before rendering.")
    r.add_argument("--frames-dir", type=str, default=None, help="Save every partial frame into this directory.")
    r.add_argument("--output-dir", type=str, default=None, help="Directory for the finished picture.")
    r.add_argument("--direct", action="store_true", help="Evaluate every pixel at full resolution, without refinement passes.")
    r.add_argument("--workers", type=int, default=None, help="Process pool size for --direct renders.")
    r.add_argument("--manifest", type=str, default=os.path.join("artifacts", "run.json"), help="Run manifest path. Set empty to skip.")

    e = sub.add_parser("encode", help="Encode saved partial frames into an MP4 video using OpenCV.")
    e.add_argument("--input-dir", type=str, default=None, help="Frames directory (defaults to config.frames_dir).")
    e.add_argument("--output", type=str, default=None, help="Output MP4 file (defaults to config.output_video).")
    e.add_argument("--fps", type=int, default=None, help="Frames per second (defaults to config.fps).")

    return p

def _apply_overrides(cfg: Dict[str, Any], args: argparse.Namespace) -> Dict[str, Any]:
    overrides = {
        "width": args.width,
        "height": args.height,
        "scale": args.scale,
        "offset": args.offset,
        "julia": args.julia,
        "saturation": args.saturation,
        "brightness": args.brightness,
        "start_delay": args.start_delay,
        "frames_dir": args.frames_dir,
        "output_dir": args.output_dir,
        "workers": args.workers,
    }
    out = dict(cfg)
    out.update({k: v for k, v in overrides.items() if v is not None})
    if args.direct:
        out["direct"] = True
    return out

def _render(cfg: Dict[str, Any], args: argparse.Namespace, log_queue, log_level: int) -> int:
    logger = get_logger()

    if cfg["direct"]:
        target, summary = render_full(cfg=cfg, log_queue=log_queue, log_level=log_level)
    else:
        with tqdm(total=pass_count(cfg["width"], cfg["height"]), unit="pass", desc="refine") as bar:
            def _progress(event: RenderEvent) -> None:
                if isinstance(event, FramePainted) and not event.final and (event.seed or event.row == event.rows - 1):
                    bar.set_postfix(block=event.block_size)
                    bar.update(1)

            target, summary = render_progressive(cfg=cfg, listener=_progress)

    if summary["state"] != RenderState.COMPLETED.value:
        logger.error("Render did not complete (state=%s)", summary["state"])
        return 1

    summary["output"] = save_png(target, cfg["output_dir"])
    if args.manifest:
        write_manifest(args.manifest, build_manifest(config=cfg, render_summary=summary))
        logger.info("Run manifest written: %s", args.manifest)
    return 0

def main(argv: Optional[list] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    log_level = getattr(logging, args.log_level.upper(), logging.INFO)
    log_file = args.log_file if args.log_file and args.log_file.strip() else None
    listener_logger = configure_root_logging(level=log_level, console=True, log_file=log_file)

    queue = create_log_queue()
    listener = start_queue_listener(queue, listener_logger)

    logger = get_logger()

    try:
        cfg = load_config(args.config)

        if args.cmd == "render":
            cfg = normalise_config(_apply_overrides(cfg, args))
            return _render(cfg, args, queue, log_level)

        if args.cmd == "encode":
            cfg = normalise_config(cfg)
            input_dir = args.input_dir or cfg["frames_dir"] or "frames"
            output = args.output or cfg["output_video"]
            fps = args.fps or cfg["fps"]

            encode_with_opencv(input_dir=input_dir, output_file=output, fps=fps)
            return 0

        raise RuntimeError("Unknown command.")
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return 130
    except (OSError, RuntimeError, ValueError) as e:
        logger.error("%s", e)
        return 1
    finally:
        listener.stop()

if __name__ == "__main__":
    raise SystemExit(main())

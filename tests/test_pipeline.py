import os

import numpy as np
from PIL import Image

from fractview.config import DEFAULTS, normalise_config
from fractview.events import Cancelled, FramePainted
from fractview.pipeline import generate_file_name, pass_count, render_full, render_progressive, save_png
from fractview.session import CancellationToken


def _cfg(**kwargs):
    cfg = dict(DEFAULTS)
    cfg.update({"width": 8, "height": 8})
    cfg.update(kwargs)
    return normalise_config(cfg)


def test_progressive_saves_every_partial_frame(tmp_path):
    frames_dir = tmp_path / "frames"
    target, summary = render_progressive(cfg=_cfg(frames_dir=str(frames_dir)))
    assert summary["state"] == "completed"
    # seed + 8-pass + 1 row at 4 + 2 rows at 2 + 4 rows at 1, then the final frame
    assert summary["frames"] == 10
    assert summary["saved_frames"] == 9
    names = sorted(os.listdir(frames_dir))
    assert names[0] == "frame_000000.png" and len(names) == 9
    last = np.asarray(Image.open(frames_dir / names[-1]).convert("RGB"))
    assert np.array_equal(last, target.pixels)


def test_progressive_and_direct_agree():
    cfg = _cfg(width=11, height=6, julia=[0.285, 0.01], scale=1.2)
    progressive, _ = render_progressive(cfg=cfg)
    direct, summary = render_full(cfg=cfg)
    assert summary["mode"] == "direct"
    assert np.array_equal(progressive.pixels, direct.pixels)


def test_cancelled_render_is_reported():
    token = CancellationToken()
    events = []

    def listener(event):
        events.append(event)
        if isinstance(event, FramePainted):
            token.cancel()

    _, summary = render_progressive(cfg=_cfg(width=32, height=32), listener=listener, token=token)
    assert summary["state"] == "cancelled"
    assert isinstance(events[-1], Cancelled)


def test_save_png(tmp_path):
    target, _ = render_progressive(cfg=_cfg())
    path = save_png(target, str(tmp_path / "pictures"), name="out.png")
    assert os.path.basename(path) == "out.png"
    with Image.open(path) as img:
        assert img.size == (8, 8)


def test_generated_file_name_is_timestamped():
    name = generate_file_name()
    assert name.startswith("fractal-") and name.endswith(".png")
    assert len(name) == len("fractal-20240101-120000.png")


def test_pass_count():
    assert pass_count(4, 4) == 4

import json
from typing import Any, Dict, Optional

from fractview.color import ColorStyle
from fractview.escape import JuliaParameter
from fractview.viewport import ViewTransform

DEFAULTS: Dict[str, Any] = {
    "width": 512,
    "height": 512,
    "scale": 1.0,
    "offset": [0.0, 0.0],
    "julia": None,
    "hues": 360.0,
    "saturation": 1.0,
    "brightness": 1.0,
    "density": 10.0,
    "start_delay": 0.0,
    "output_dir": "pictures",
    "frames_dir": None,
    "direct": False,
    "workers": 0,
    "fps": 15,
    "output_video": "refinement.mp4",
}

def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    cfg = dict(DEFAULTS)
    if config_path:
        with open(config_path, "r", encoding="utf-8") as f:
            loaded = json.load(f)
        if not isinstance(loaded, dict):
            raise ValueError("Config JSON must be an object.")
        unknown = sorted(set(loaded) - set(DEFAULTS))
        if unknown:
            raise ValueError(f"Unknown config field(s): {', '.join(unknown)}")
        cfg.update(loaded)
    return cfg

def _pair(cfg: Dict[str, Any], key: str) -> Optional[list]:
    value = cfg.get(key)
    if value is None:
        return None
    if not (isinstance(value, (list, tuple)) and len(value) == 2):
        raise ValueError(f"{key} must be [x, y].")
    return [float(value[0]), float(value[1])]

def normalise_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(DEFAULTS)
    out.update(cfg)

    width = int(out["width"])
    height = int(out["height"])
    if width <= 0 or height <= 0:
        raise ValueError("width/height must be positive.")
    scale = float(out["scale"])
    if scale <= 0:
        raise ValueError("scale must be > 0.")
    start_delay = float(out["start_delay"])
    if start_delay < 0:
        raise ValueError("start_delay must be >= 0.")

    offset = _pair(out, "offset")
    if offset is None:
        raise ValueError("offset must be [x, y].")

    out["width"] = width
    out["height"] = height
    out["scale"] = scale
    out["offset"] = offset
    out["julia"] = _pair(out, "julia")
    out["hues"] = float(out["hues"])
    out["saturation"] = float(out["saturation"])
    out["brightness"] = float(out["brightness"])
    out["density"] = float(out["density"])
    out["start_delay"] = start_delay
    out["output_dir"] = str(out["output_dir"])
    out["frames_dir"] = str(out["frames_dir"]) if out["frames_dir"] else None
    out["direct"] = bool(out["direct"])
    out["workers"] = max(0, int(out["workers"]))
    out["fps"] = int(out["fps"])
    out["output_video"] = str(out["output_video"])

    # Fails fast on out-of-range colour values.
    color_style(out)
    return out

def view_transform(cfg: Dict[str, Any]) -> ViewTransform:
    return ViewTransform(offset_x=cfg["offset"][0], offset_y=cfg["offset"][1], scale=cfg["scale"])

def color_style(cfg: Dict[str, Any]) -> ColorStyle:
    return ColorStyle(
        hues=cfg["hues"],
        saturation=cfg["saturation"],
        brightness=cfg["brightness"],
        density=cfg["density"],
    )

def julia_parameter(cfg: Dict[str, Any]) -> Optional[JuliaParameter]:
    julia = cfg.get("julia")
    if julia is None:
        return None
    return JuliaParameter(c_re=float(julia[0]), c_im=float(julia[1]))

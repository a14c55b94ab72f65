"""
Load and expose app config (YAML). Used by the pipeline for render defaults,
export size and output naming.
"""
import logging
import math
from datetime import datetime
from pathlib import Path
from typing import Any

import yaml

from .math_utils import clamp
from .procedural.schema import EffectParams

logger = logging.getLogger(__name__)

MIN_EXPORT_SIZE = 512
MAX_EXPORT_SIZE = 4096
MAX_DEVICE_SCALE = 3.0


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load config from YAML. Path is optional; defaults to config/default.yaml."""
    if config_path is None:
        config_path = _project_root() / "config" / "default.yaml"
    path = Path(config_path)
    if not path.exists():
        logger.debug("No config at %s, using defaults", path)
        return _defaults()
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return _merge(_defaults(), data)


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Section-wise merge: nested dicts are merged, everything else replaced."""
    out = dict(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], value)
        else:
            out[key] = value
    return out


def _defaults() -> dict[str, Any]:
    return {
        "prompt": {"flavors": "ube, mango, coconut"},
        "render": {
            "gradient_type": "smear",
            "angle": 30,
            "smear_strength": 0.45,
            "pattern": "fractal",
            "fractal_intensity": 0.25,
            "seed": 7,
            "fbm": {"octaves": 4, "scale": 140, "reference_size": 512},
        },
        "output": {
            "dir": "output",
            "filename_prefix": "flavor-gradient",
            "preview_size": 512,
            "export_size": 1536,
            "device_scale": 1.0,
        },
    }


def effect_params_from_config(config: dict[str, Any]) -> EffectParams:
    """Render section → clamped EffectParams."""
    return EffectParams.from_dict(config.get("render", {}))


def resolve_export_size(size: Any, device_scale: Any = 1.0) -> int:
    """
    Export edge length in pixels: size clamped to [512, 4096], times the device
    scale (capped at 3, non-positive or missing → 1).
    """
    try:
        size = float(size)
    except (TypeError, ValueError):
        logger.warning("Bad export size %r, using %s", size, 1536)
        size = 1536.0
    try:
        dpr = float(device_scale or 1.0)
    except (TypeError, ValueError):
        dpr = 1.0
    if dpr <= 0 or math.isnan(dpr):
        dpr = 1.0
    dpr = min(MAX_DEVICE_SCALE, dpr)
    return int(math.floor(clamp(size, MIN_EXPORT_SIZE, MAX_EXPORT_SIZE) * dpr))


def get_output_dir(config: dict[str, Any]) -> Path:
    """Resolve output directory (relative to project root if needed)."""
    out = config.get("output", {})
    p = Path(out.get("dir", "output"))
    if not p.is_absolute():
        p = _project_root() / p
    return p


def next_filename(config: dict[str, Any]) -> str:
    """Prefix + timestamp to avoid overwrites."""
    prefix = config.get("output", {}).get("filename_prefix", "flavor-gradient")
    return f"{prefix}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.png"

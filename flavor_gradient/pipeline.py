"""
Pipeline: flavor prompt + effect params → one image. Gradient first, then the
optional smear, then the optional fractal overlay (always last).
Preview and export run the same steps; only the buffer size differs.
"""
import io
import logging
from pathlib import Path
from typing import Any, Sequence

import numpy as np
from PIL import Image

from .config import (
    effect_params_from_config,
    get_output_dir,
    load_config,
    next_filename,
    resolve_export_size,
)
from .procedural.colors import Color, color_to_hex
from .procedural.parser import colors_from_prompt, ensure_color_pair
from .procedural.renderer import apply_fractal_overlay, apply_smear, new_buffer, paint_gradient
from .procedural.schema import EffectParams, GradientDescriptor, normalize_angle

logger = logging.getLogger(__name__)


def render(
    params: EffectParams,
    colors: Sequence[str | Color],
    width: int,
    height: int,
) -> "np.ndarray":
    """
    Render a fresh (height, width, 4) uint8 buffer.
    Params are clamped first. A color list shorter than two is topped up
    (default pair, or the lone color plus its rotated complement).
    """
    params = params.normalized()
    buffer = new_buffer(width, height)
    logger.debug("render %sx%s colors=%s params=%s", width, height, list(colors), params.to_dict())
    if len(colors) < 2:
        colors = ensure_color_pair(list(colors))
    paint_gradient(buffer, params.angle, colors)
    if params.smear_enabled:
        apply_smear(buffer, params.angle, params.smear_strength)
    if params.overlay_enabled:
        apply_fractal_overlay(buffer, params.fbm, params.seed, params.fractal_intensity)
    return buffer


def describe(colors: Sequence[str | Color], angle: float) -> GradientDescriptor:
    """Stop list + angle of the base gradient; `.css` gives the linear-gradient() text."""
    hexes = [color_to_hex(c) for c in colors]
    last = max(len(hexes) - 1, 1)
    stops = tuple((c, (i / last) * 100) for i, c in enumerate(hexes))
    return GradientDescriptor(angle=normalize_angle(angle), stops=stops)


def css_gradient(colors: Sequence[str | Color], angle: float) -> str:
    return describe(colors, angle).css


def next_seed(seed: float) -> float:
    """The "new seed" action: step to the next seed."""
    return seed + 1


def render_preview(
    prompt: str | None = None,
    *,
    config: dict[str, Any] | None = None,
    size: int | None = None,
) -> "np.ndarray":
    """Render the prompt (or the configured one) at preview size."""
    if config is None:
        config = load_config()
    if prompt is None:
        prompt = config.get("prompt", {}).get("flavors", "")
    if size is None:
        size = int(config.get("output", {}).get("preview_size", 512))
    params = effect_params_from_config(config)
    return render(params, colors_from_prompt(prompt), size, size)


def to_image(buffer: "np.ndarray") -> Image.Image:
    """Wrap a pixel buffer as a Pillow RGBA image (for display)."""
    return Image.fromarray(np.ascontiguousarray(buffer), "RGBA")


def encode_png(buffer: "np.ndarray") -> bytes:
    """Lossless PNG bytes for a pixel buffer."""
    out = io.BytesIO()
    to_image(buffer).save(out, format="PNG")
    return out.getvalue()


def export_png(
    prompt: str | None = None,
    output_path: Path | None = None,
    *,
    config: dict[str, Any] | None = None,
    export_size: int | None = None,
    device_scale: float | None = None,
) -> Path:
    """
    Re-render at export resolution and write a PNG. Returns the written path.
    Without an output_path, writes <output dir>/<prefix>_<timestamp>.png.
    """
    try:
        import imageio.v3 as iio
    except ImportError:
        raise ImportError(
            "PNG export needs 'imageio'. Install with: pip install imageio"
        ) from None

    if config is None:
        config = load_config()
    out_cfg = config.get("output", {})
    if prompt is None:
        prompt = config.get("prompt", {}).get("flavors", "")
    size = resolve_export_size(
        export_size if export_size is not None else out_cfg.get("export_size", 1536),
        device_scale if device_scale is not None else out_cfg.get("device_scale", 1.0),
    )
    if output_path is None:
        output_path = get_output_dir(config) / next_filename(config)
    output_path = Path(output_path)
    if output_path.suffix == "":
        output_path = output_path.with_suffix(".png")
    output_path.parent.mkdir(parents=True, exist_ok=True)

    params = effect_params_from_config(config)
    colors = colors_from_prompt(prompt)
    buffer = render(params, colors, size, size)
    iio.imwrite(output_path, buffer, extension=".png")
    logger.info("Exported %sx%s PNG to %s", size, size, output_path)
    return output_path

"""
Procedural image renderer: colors + effect params → RGBA pixels. Our algorithms only.
Each stage takes an explicitly owned (H, W, 4) uint8 buffer, mutates it in place
and returns it. Geometry is always derived from the buffer size, so the same
parameters give the same picture at any resolution.
"""
from __future__ import annotations

import logging
import math
from typing import Iterator, Sequence

import numpy as np

from ..math_utils import round_half_up
from .colors import Color, hex_to_rgb
from .noise import NoiseField, fbm
from .schema import FbmParams

logger = logging.getLogger(__name__)

SMEAR_OPACITY = 0.06
SMEAR_MAX_PASSES = 24
SMEAR_SHIFT_FACTOR = 0.0015
OVERLAY_GAMMA = 1.2
# Rows per band when computing per-pixel fields; bounds memory on large exports
BAND_ROWS = 256


def new_buffer(width: int, height: int) -> "np.ndarray":
    """Opaque black RGBA buffer of shape (height, width, 4)."""
    if width < 1 or height < 1:
        raise ValueError(f"Buffer size must be positive, got {width}x{height}")
    buf = np.zeros((int(height), int(width), 4), dtype=np.uint8)
    buf[..., 3] = 255
    return buf


def _check_buffer(buffer: "np.ndarray") -> tuple[int, int]:
    if buffer.ndim != 3 or buffer.shape[2] != 4 or buffer.dtype != np.uint8:
        raise ValueError(f"Expected (H, W, 4) uint8 buffer, got {buffer.shape} {buffer.dtype}")
    h, w = buffer.shape[:2]
    return w, h


def _row_bands(height: int, band: int | None = None) -> Iterator[tuple[int, int]]:
    band = band or BAND_ROWS
    for start in range(0, height, band):
        yield start, min(height, start + band)


def _as_rgb(color: str | Color) -> Color:
    if isinstance(color, str):
        return hex_to_rgb(color)
    r, g, b = color
    return (int(r), int(g), int(b))


def gradient_axis(width: int, height: int, angle_degrees: float) -> tuple[float, float, float, float]:
    """
    (x1, y1, x2, y2) of the gradient line: through the center, offset by
    ±(cos θ * width, sin θ * height) so it spans the whole buffer at any aspect.
    """
    rad = math.radians(angle_degrees % 360.0)
    c, s = math.cos(rad), math.sin(rad)
    cx, cy = width / 2.0, height / 2.0
    return (cx - c * width, cy - s * height, cx + c * width, cy + s * height)


def paint_gradient(
    buffer: "np.ndarray",
    angle_degrees: float,
    colors: Sequence[str | Color],
) -> "np.ndarray":
    """
    Fill the buffer with a linear multi-stop gradient. Stop i sits at i / (n - 1)
    along the axis; pixel centers are projected onto the axis and interpolated in RGB.
    """
    w, h = _check_buffer(buffer)
    if not colors:
        raise ValueError("paint_gradient needs at least one color")
    stops = np.array([_as_rgb(c) for c in colors], dtype=np.float64)
    if len(stops) == 1:
        stops = np.vstack([stops, stops])
    n = len(stops)

    x1, y1, x2, y2 = gradient_axis(w, h, angle_degrees)
    dx, dy = x2 - x1, y2 - y1
    denom = dx * dx + dy * dy
    xs = (np.arange(w, dtype=np.float64) + 0.5 - x1) * dx / denom

    for r0, r1 in _row_bands(h):
        ys = (np.arange(r0, r1, dtype=np.float64) + 0.5 - y1) * dy / denom
        t = np.clip(ys[:, None] + xs[None, :], 0.0, 1.0)
        pos = t * (n - 1)
        i0 = np.clip(np.floor(pos).astype(np.intp), 0, n - 2)
        frac = (pos - i0)[..., None]
        rgb = stops[i0] * (1.0 - frac) + stops[i0 + 1] * frac
        buffer[r0:r1, :, :3] = np.clip(np.floor(rgb + 0.5), 0, 255).astype(np.uint8)
    buffer[..., 3] = 255
    return buffer


def smear_steps(width: int, height: int, strength: float) -> tuple[int, int]:
    """(passes, shift) for a smear of the given strength; both have floors (4 and 1)."""
    passes = max(4, round_half_up(SMEAR_MAX_PASSES * strength))
    shift = max(1, round_half_up((width + height) * SMEAR_SHIFT_FACTOR * strength))
    return passes, shift


def smear_reach(width: int, height: int, strength: float) -> int:
    """
    Farthest a color can travel along the axis. Pass i reads the already smeared
    buffer at offset shift * (i + 1), so offsets add up: shift * passes * (passes + 1) / 2.
    """
    passes, shift = smear_steps(width, height, strength)
    return shift * passes * (passes + 1) // 2


def _translate_rows(
    snapshot: "np.ndarray",
    row_start: int,
    row_end: int,
    dx: float,
    dy: float,
) -> tuple["np.ndarray", "np.ndarray"]:
    """
    Rows [row_start, row_end) of the snapshot moved by (dx, dy), bilinearly resampled
    in float32. Only the source rows the band needs are read. Returns (image, mask)
    where mask marks destination pixels the moved snapshot covers.
    """
    h, w = snapshot.shape[:2]
    sx = np.arange(w, dtype=np.float64) - dx
    sy = np.arange(row_start, row_end, dtype=np.float64) - dy
    valid_x = (sx >= 0) & (sx <= w - 1)
    valid_y = (sy >= 0) & (sy <= h - 1)

    y0 = np.floor(sy).astype(np.intp)
    ya = np.clip(y0, 0, h - 1)
    yb = np.clip(y0 + 1, 0, h - 1)
    lo = int(ya.min())
    hi = int(yb.max()) + 1
    src = snapshot[lo:hi].astype(np.float32)

    x0 = np.floor(sx).astype(np.intp)
    fx = (sx - x0).astype(np.float32)[None, :, None]
    xa = np.clip(x0, 0, w - 1)
    xb = np.clip(x0 + 1, 0, w - 1)
    rows = src[:, xa] * (np.float32(1.0) - fx) + src[:, xb] * fx

    fy = (sy - y0).astype(np.float32)[:, None, None]
    moved = rows[ya - lo] * (np.float32(1.0) - fy) + rows[yb - lo] * fy
    return moved, valid_y[:, None] & valid_x[None, :]


def apply_smear(buffer: "np.ndarray", angle_degrees: float, strength: float) -> "np.ndarray":
    """
    Motion smear along the gradient angle. Each pass snapshots the buffer, shifts the
    snapshot a little further along the axis and composites it at SMEAR_OPACITY, so
    passes compound. Work is done in row bands; every band of a pass reads the same
    snapshot, and the buffer is quantized to uint8 as each band is written.
    """
    w, h = _check_buffer(buffer)
    passes, shift = smear_steps(w, h, strength)
    rad = math.radians(angle_degrees % 360.0)
    c, s = math.cos(rad), math.sin(rad)
    keep = np.float32(1.0 - SMEAR_OPACITY)
    mix = np.float32(SMEAR_OPACITY)
    logger.debug("smear: %sx%s passes=%s shift=%s angle=%s", w, h, passes, shift, angle_degrees)

    for i in range(passes):
        # Sub-micro-pixel offsets (cos 90° etc.) count as zero
        dx = round(c * shift * (i + 1), 6)
        dy = round(s * shift * (i + 1), 6)
        snapshot = buffer.copy()
        for r0, r1 in _row_bands(h):
            moved, mask = _translate_rows(snapshot, r0, r1, dx, dy)
            dest = snapshot[r0:r1].astype(np.float32)
            out = np.where(mask[..., None], dest * keep + moved * mix, dest)
            buffer[r0:r1] = np.clip(np.floor(out + np.float32(0.5)), 0, 255).astype(np.uint8)
    return buffer


def fractal_field(
    width: int,
    row_start: int,
    row_end: int,
    noise: NoiseField,
    fbm_params: FbmParams,
) -> "np.ndarray":
    """Gamma-shaped fbm values in [0, 1] for rows [row_start, row_end)."""
    scale = fbm_params.effective_scale(width)
    xs = np.arange(width, dtype=np.float64) / scale
    ys = np.arange(row_start, row_end, dtype=np.float64) / scale
    xx, yy = np.meshgrid(xs, ys)
    n = fbm(noise, xx, yy, fbm_params.octaves, fbm_params.lacunarity, fbm_params.gain)
    return np.clip(np.power(n, OVERLAY_GAMMA), 0.0, 1.0)


def apply_fractal_overlay(
    buffer: "np.ndarray",
    fbm_params: FbmParams,
    seed: float,
    intensity: float,
) -> "np.ndarray":
    """
    Marble overlay: add floor(255 * fbm * intensity) to R, G and B (alpha untouched),
    clamped at 255. Only ever brightens.
    """
    w, h = _check_buffer(buffer)
    if intensity <= 0:
        return buffer
    params = fbm_params.normalized()
    noise = NoiseField(seed)
    logger.debug(
        "overlay: %sx%s seed=%s octaves=%s scale=%.2f intensity=%s",
        w, h, seed, params.octaves, params.effective_scale(w), intensity,
    )
    for r0, r1 in _row_bands(h):
        n = fractal_field(w, r0, r1, noise, params)
        v = np.floor(255.0 * n * intensity).astype(np.int32)
        rgb = buffer[r0:r1, :, :3].astype(np.int32) + v[..., None]
        buffer[r0:r1, :, :3] = np.minimum(255, rgb).astype(np.uint8)
    return buffer

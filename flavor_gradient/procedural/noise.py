"""
Seeded value noise and fbm. Our algorithms only, vectorized with numpy.
The noise tiles with period GRID_SIZE on both axes.
"""
from __future__ import annotations

import numpy as np

GRID_SIZE = 256


def _smoothstep(t: "np.ndarray") -> "np.ndarray":
    return t * t * (3.0 - 2.0 * t)


def _hash_grid(seed: float, size: int = GRID_SIZE) -> "np.ndarray":
    """(size, size) float32 grid; cell (x, y) = fract(sin(n*127.1 + seed*13.7) * 43758.5453)."""
    y, x = np.mgrid[0:size, 0:size].astype(np.float64)
    n = x * 12.9898 + y * 78.233
    v = np.sin(n * 127.1 + float(seed) * 13.7) * 43758.5453
    grid = (v - np.floor(v)).astype(np.float32)
    # float32 rounding must not push a cell up to 1.0
    return np.minimum(grid, np.nextafter(np.float32(1.0), np.float32(0.0)))


class NoiseField:
    """
    Tileable 2D value noise for one seed. The lattice is built once in __init__;
    sampling is bilinear with a smoothstep interpolant so cell borders don't crease.
    """

    def __init__(self, seed: float = 0):
        self.seed = seed
        self._grid = _hash_grid(seed)

    @property
    def grid(self) -> "np.ndarray":
        return self._grid

    def sample(self, x, y):
        """Noise at (x, y); scalars or arrays of matching shape. Values in [0, 1)."""
        size = GRID_SIZE
        xs = np.mod(np.asarray(x, dtype=np.float64), size)
        ys = np.mod(np.asarray(y, dtype=np.float64), size)
        x0 = np.floor(xs).astype(np.intp)
        y0 = np.floor(ys).astype(np.intp)
        # np.mod can round up to exactly `size` for tiny negatives
        x0 %= size
        y0 %= size
        x1 = (x0 + 1) % size
        y1 = (y0 + 1) % size
        fx = _smoothstep(xs - np.floor(xs))
        fy = _smoothstep(ys - np.floor(ys))

        g = self._grid
        v00 = g[y0, x0]
        v10 = g[y0, x1]
        v01 = g[y1, x0]
        v11 = g[y1, x1]
        top = v00 + (v10 - v00) * fx
        bottom = v01 + (v11 - v01) * fx
        out = top + (bottom - top) * fy
        if np.ndim(out) == 0:
            return float(out)
        return out

    __call__ = sample


def fbm(
    noise: NoiseField,
    x,
    y,
    octaves: int,
    lacunarity: float = 2.0,
    gain: float = 0.5,
):
    """
    Fractional Brownian motion: sum of `octaves` noise layers, starting at
    amplitude 0.5 and frequency 1. With gain 0.5 the result stays below 1.
    Callers clamp octaves beforehand.
    """
    total = 0.0
    amp = 0.5
    freq = 1.0
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    for _ in range(int(octaves)):
        total = total + amp * noise.sample(x * freq, y * freq)
        freq *= lacunarity
        amp *= gain
    return total

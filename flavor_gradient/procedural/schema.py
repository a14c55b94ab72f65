"""
Schema for render parameters and the gradient descriptor.
Every numeric field is clamped into its valid domain by `normalized()`; out-of-range
input degrades to the nearest valid value instead of raising.
"""
from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, field, replace
from typing import Any

from ..math_utils import clamp, format_css_number

logger = logging.getLogger(__name__)

GRADIENT_TYPES = ("linear", "smear")
PATTERNS = ("none", "fractal")

MIN_OCTAVES = 2
MAX_OCTAVES = 7
MIN_SCALE = 40.0


def _to_float(value: Any, default: float) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        logger.warning("Non-numeric value %r, using %s", value, default)
        return float(default)
    if math.isnan(v) or math.isinf(v):
        return float(default)
    return v


def clamp_octaves(value: Any, default: int = 4) -> int:
    """Octave count as an int in [MIN_OCTAVES, MAX_OCTAVES]."""
    return int(clamp(int(_to_float(value, default)), MIN_OCTAVES, MAX_OCTAVES))


def clamp_unit(value: Any, default: float = 0.0) -> float:
    return clamp(_to_float(value, default), 0.0, 1.0)


def normalize_angle(value: Any, default: float = 0.0) -> float:
    """Angle in degrees, wrapped into [0, 360)."""
    angle = _to_float(value, default) % 360.0
    # tiny negatives wrap to exactly 360.0 in float math
    return 0.0 if angle >= 360.0 else angle


@dataclass
class FbmParams:
    """Fractal noise settings. Lacunarity and gain are fixed."""

    octaves: int = 4
    scale: float = 140.0                # pixels at reference_size
    reference_size: int | None = 512    # None = scale is absolute pixels
    lacunarity: float = field(default=2.0, init=False)
    gain: float = field(default=0.5, init=False)

    def normalized(self) -> FbmParams:
        ref = self.reference_size
        if ref is not None:
            ref = max(1, int(_to_float(ref, 512)))
        return FbmParams(
            octaves=clamp_octaves(self.octaves),
            scale=max(MIN_SCALE, _to_float(self.scale, 140.0)),
            reference_size=ref,
        )

    def effective_scale(self, width: int) -> float:
        """Noise period in pixels for a buffer of the given width."""
        scale = max(MIN_SCALE, float(self.scale))
        if self.reference_size:
            scale *= width / self.reference_size
        return scale


@dataclass
class EffectParams:
    """Everything the renderer needs besides the colors and the output size."""

    gradient_type: str = "linear"   # linear | smear
    angle: float = 30.0             # degrees
    smear_strength: float = 0.45    # 0–1
    pattern: str = "none"           # none | fractal
    fractal_intensity: float = 0.25  # 0–1
    fbm: FbmParams = field(default_factory=FbmParams)
    seed: float = 7

    def normalized(self) -> EffectParams:
        """Return a copy with every field clamped to its domain."""
        gradient_type = str(self.gradient_type or "linear").strip().lower()
        if gradient_type not in GRADIENT_TYPES:
            logger.warning("Unknown gradient type %r, using 'linear'", self.gradient_type)
            gradient_type = "linear"
        pattern = str(self.pattern or "none").strip().lower()
        if pattern not in PATTERNS:
            logger.warning("Unknown pattern %r, using 'none'", self.pattern)
            pattern = "none"
        seed = _to_float(self.seed, 7)
        return replace(
            self,
            gradient_type=gradient_type,
            angle=normalize_angle(self.angle),
            smear_strength=clamp_unit(self.smear_strength),
            pattern=pattern,
            fractal_intensity=clamp_unit(self.fractal_intensity),
            fbm=self.fbm.normalized(),
            seed=int(seed) if seed.is_integer() else seed,
        )

    @property
    def smear_enabled(self) -> bool:
        return self.gradient_type == "smear"

    @property
    def overlay_enabled(self) -> bool:
        return self.pattern == "fractal" and self.fractal_intensity > 0

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logging and config round-trips."""
        d = asdict(self)
        d["fbm"] = {
            "octaves": self.fbm.octaves,
            "scale": self.fbm.scale,
            "reference_size": self.fbm.reference_size,
        }
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> EffectParams:
        """Build from a plain dict (e.g. the `render` section of the YAML config)."""
        d = dict(d or {})
        fbm_raw = d.pop("fbm", None) or {}
        fbm_names = {"octaves", "scale", "reference_size"}
        fbm = FbmParams(**{k: v for k, v in fbm_raw.items() if k in fbm_names})
        field_names = {f for f in cls.__dataclass_fields__ if f != "fbm"}
        kwargs = {k: v for k, v in d.items() if k in field_names}
        return cls(fbm=fbm, **kwargs).normalized()


@dataclass(frozen=True)
class GradientDescriptor:
    """Textual summary of the base gradient: angle + ordered (hex, percent) stops."""

    angle: float
    stops: tuple[tuple[str, float], ...]

    @property
    def css(self) -> str:
        parts = ", ".join(f"{c} {format_css_number(p)}%" for c, p in self.stops)
        return f"linear-gradient({format_css_number(self.angle)}deg, {parts})"

    def __str__(self) -> str:
        return self.css

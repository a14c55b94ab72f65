# Procedural image engine: flavor colors, value noise and the render stages

from .colors import flavor_to_hex, resolve_flavor
from .noise import NoiseField, fbm
from .parser import build_color_list, colors_from_prompt, parse_flavors
from .renderer import apply_fractal_overlay, apply_smear, new_buffer, paint_gradient
from .schema import EffectParams, FbmParams, GradientDescriptor

__all__ = [
    "flavor_to_hex",
    "resolve_flavor",
    "NoiseField",
    "fbm",
    "build_color_list",
    "colors_from_prompt",
    "parse_flavors",
    "apply_fractal_overlay",
    "apply_smear",
    "new_buffer",
    "paint_gradient",
    "EffectParams",
    "FbmParams",
    "GradientDescriptor",
]

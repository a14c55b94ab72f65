"""
Flavor gradient: flavor prompts → colors → gradient image with smear and marble overlay.
"""
from .pipeline import css_gradient, describe, encode_png, export_png, next_seed, render, render_preview, to_image
from .procedural import EffectParams, FbmParams, GradientDescriptor, colors_from_prompt, resolve_flavor

__all__ = [
    "css_gradient",
    "describe",
    "encode_png",
    "export_png",
    "next_seed",
    "render",
    "render_preview",
    "to_image",
    "EffectParams",
    "FbmParams",
    "GradientDescriptor",
    "colors_from_prompt",
    "resolve_flavor",
]

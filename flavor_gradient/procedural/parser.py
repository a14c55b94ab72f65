"""
Prompt text → flavor list → color list, using only our rules and data.
"""
from __future__ import annotations

import logging
import re

from .colors import Color, color_to_hex, fallback_hue, flavor_to_hex, hex_to_rgb, hsl_to_hex, rgb_to_hue
from .data import COMPLEMENT_ROTATION, DEFAULT_COLORS, FALLBACK_LIGHTNESS, FALLBACK_SATURATION

logger = logging.getLogger(__name__)

MAX_FLAVORS = 8

_SPLIT_RE = re.compile(r",|\r?\n")


def parse_flavors(text: str | None) -> list[str]:
    """
    Split free-form prompt text on commas and newlines.
    Entries are trimmed, empty ones dropped, and at most MAX_FLAVORS kept.
    """
    parts = [p.strip() for p in _SPLIT_RE.split(text or "")]
    flavors = [p for p in parts if p]
    if len(flavors) > MAX_FLAVORS:
        logger.warning("Got %s flavors, keeping the first %s", len(flavors), MAX_FLAVORS)
        flavors = flavors[:MAX_FLAVORS]
    return flavors


def complement_hex(name: str) -> str:
    """
    Pastel partner for a lone flavor: its hashed hue rotated by COMPLEMENT_ROTATION.
    The hash runs over the normalized token, so "Strawberry!" and "strawberry" share a
    partner (the web app hashed the raw trimmed text instead).
    """
    hue = (fallback_hue(name) + COMPLEMENT_ROTATION) % 360
    return hsl_to_hex(hue, FALLBACK_SATURATION, FALLBACK_LIGHTNESS)


def build_color_list(flavors: list[str]) -> list[str]:
    """
    Resolve flavors to hex colors, always returning at least two:
    none → the default pair; one → that color plus its complement.
    """
    colors = [flavor_to_hex(f) for f in flavors[:MAX_FLAVORS]]
    if len(colors) == 1:
        colors.append(complement_hex(flavors[0]))
    if not colors:
        return list(DEFAULT_COLORS)
    return colors


def colors_from_prompt(text: str | None) -> list[str]:
    """Shortcut: raw prompt text → normalized color list."""
    return build_color_list(parse_flavors(text))


def ensure_color_pair(colors: list[str | Color]) -> list[str]:
    """
    Bring an already resolved color list up to two entries as hex strings:
    none → the default pair; one → that color plus a pastel at its hue rotated
    by COMPLEMENT_ROTATION. Longer lists are only canonicalized.
    """
    hexes = [color_to_hex(c) for c in colors]
    if not hexes:
        logger.warning("Empty color list, using the default pair")
        return list(DEFAULT_COLORS)
    if len(hexes) == 1:
        hue = (rgb_to_hue(hex_to_rgb(hexes[0])) + COMPLEMENT_ROTATION) % 360
        hexes.append(hsl_to_hex(hue, FALLBACK_SATURATION, FALLBACK_LIGHTNESS))
    return hexes

"""
Color resolver: flavor text → RGB. Curated table first, hashed pastel otherwise.
Pure functions only; the same token always yields the same color.
"""
import re

from ..math_utils import round_half_up
from .data import (
    EMPTY_TOKEN_FALLBACK,
    FALLBACK_LIGHTNESS,
    FALLBACK_SATURATION,
    FLAVOR_COLORS,
)

Color = tuple[int, int, int]

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6}|[0-9a-fA-F]{3})$")


def normalize_token(name: str | None) -> str:
    """Lowercase and strip everything outside [a-z0-9]."""
    return _NON_ALNUM.sub("", (name or "").lower())


def hash_hue(token: str) -> int:
    """32-bit h = h*31 + char code over the token; returns h mod 360."""
    h = 0
    for ch in token:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    return h % 360


def hsl_to_rgb(h: float, s: float, l: float) -> Color:
    """HSL (degrees, percent, percent) → RGB 0-255."""
    s /= 100.0
    l /= 100.0
    a = s * min(l, 1.0 - l)

    def channel(n: int) -> int:
        k = (n + h / 30.0) % 12
        v = l - a * max(-1.0, min(k - 3.0, min(9.0 - k, 1.0)))
        return round_half_up(255 * v)

    return (channel(0), channel(8), channel(4))


def rgb_to_hex(rgb: Color) -> str:
    r, g, b = (max(0, min(255, int(c))) for c in rgb)
    return f"#{r:02x}{g:02x}{b:02x}"


def hex_to_rgb(code: str) -> Color:
    """Parse #rgb or #rrggbb. Raises ValueError on anything else."""
    m = _HEX_RE.match((code or "").strip())
    if not m:
        raise ValueError(f"Not a hex color: {code!r}")
    s = m.group(1)
    if len(s) == 3:
        s = "".join(c * 2 for c in s)
    return (int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16))


def hsl_to_hex(h: float, s: float, l: float) -> str:
    return rgb_to_hex(hsl_to_rgb(h, s, l))


def fallback_hue(name: str | None) -> int:
    """Hue used for an unknown flavor (and for the single-flavor complement)."""
    return hash_hue(normalize_token(name) or EMPTY_TOKEN_FALLBACK)


def flavor_to_hex(name: str | None) -> str:
    """
    Resolve a flavor name to a lowercase #rrggbb string.
    Known flavors come from the curated table; anything else maps to a pastel
    whose hue is derived from the normalized token.
    """
    key = normalize_token(name)
    if key in FLAVOR_COLORS:
        return FLAVOR_COLORS[key]
    return hsl_to_hex(fallback_hue(key), FALLBACK_SATURATION, FALLBACK_LIGHTNESS)


def resolve_flavor(name: str | None) -> Color:
    """Resolve a flavor name to an RGB tuple."""
    return hex_to_rgb(flavor_to_hex(name))


def rgb_to_hue(rgb: Color) -> float:
    """Hue in degrees [0, 360) of an RGB color; 0 for grays."""
    r, g, b = (c / 255.0 for c in rgb)
    hi, lo = max(r, g, b), min(r, g, b)
    d = hi - lo
    if d == 0:
        return 0.0
    if hi == r:
        h = ((g - b) / d) % 6
    elif hi == g:
        h = (b - r) / d + 2
    else:
        h = (r - g) / d + 4
    return (h * 60.0) % 360.0


def color_to_hex(color: str | Color) -> str:
    """Canonical lowercase #rrggbb for a hex string (#rgb, rrggbb, ...) or an RGB tuple."""
    if isinstance(color, str):
        return rgb_to_hex(hex_to_rgb(color))
    return rgb_to_hex(color)

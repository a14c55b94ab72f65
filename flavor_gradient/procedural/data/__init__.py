from .flavors import (
    COMPLEMENT_ROTATION,
    DEFAULT_COLORS,
    EMPTY_TOKEN_FALLBACK,
    FALLBACK_LIGHTNESS,
    FALLBACK_SATURATION,
    FLAVOR_COLORS,
)

__all__ = [
    "COMPLEMENT_ROTATION",
    "DEFAULT_COLORS",
    "EMPTY_TOKEN_FALLBACK",
    "FALLBACK_LIGHTNESS",
    "FALLBACK_SATURATION",
    "FLAVOR_COLORS",
]

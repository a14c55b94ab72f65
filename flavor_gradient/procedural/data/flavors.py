"""
Our data: flavor name → hex color. Used by the color resolver.
Keys are normalized tokens (lowercase, alphanumeric only). Extend as you like.
"""
from types import MappingProxyType

_FLAVOR_HEX: dict[str, str] = {
    "strawberry": "#ff4f79",
    "raspberry": "#d72657",
    "cherry": "#d81b60",
    "watermelon": "#ff6b81",
    "apple": "#5ec16e",
    "lime": "#7bd389",
    "mint": "#27c3a8",
    "matcha": "#7bb661",
    "avocado": "#66a564",
    "banana": "#ffe066",
    "mango": "#ffb703",
    "peach": "#ff9e7d",
    "orange": "#ff7a00",
    "carrot": "#ff8c42",
    "lemon": "#ffd166",
    "pineapple": "#ffe66d",
    "blueberry": "#4f7cff",
    "grape": "#7b5cff",
    "ube": "#6d4aff",
    "taro": "#a08bff",
    "lavender": "#b497ff",
    "vanilla": "#f4e1c1",
    "caramel": "#c68642",
    "butterscotch": "#e0a55f",
    "chocolate": "#5c3a21",
    "mocha": "#7a5230",
    "coffee": "#5a3c2e",
    "espresso": "#3b2a23",
    "milk": "#fff7f0",
    "coconut": "#fef9ef",
    "bubblegum": "#ff84d8",
    "cottoncandy": "#ffa6ff",
    "cookiesandcream": "#e8e8ea",
    "peppermint": "#82f3d3",
    "wintermint": "#9ef7e8",
    "milktea": "#c7a17a",
    "calamansi": "#c1ff72",
    "bukopandan": "#9be077",
    "lychee": "#ffd4da",
    "dragonfruit": "#ff2d95",
    "passionfruit": "#ffb000",
    "kiwi": "#89d42d",
}

# Read-only view; built once at import
FLAVOR_COLORS = MappingProxyType(_FLAVOR_HEX)

# Used when the prompt list has no usable entries
DEFAULT_COLORS: tuple[str, str] = ("#ff7a00", "#ffe066")

# Saturation / lightness (percent) for hashed fallback colors
FALLBACK_SATURATION = 68.0
FALLBACK_LIGHTNESS = 68.0

# Hue rotation (degrees) for the synthesized partner of a single flavor
COMPLEMENT_ROTATION = 200

# Hashed when a token normalizes to nothing
EMPTY_TOKEN_FALLBACK = "flavor"

"""
Small numeric helpers shared by the config layer and the renderer.
Rounding matches the browser (half-up), not Python's banker's rounding.
"""
import math


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp value into [lo, hi]."""
    return max(lo, min(hi, value))


def round_half_up(value: float) -> int:
    """Round to nearest int, ties toward +inf (2.5 → 3, -2.5 → -2)."""
    return int(math.floor(value + 0.5))


def format_css_number(value: float) -> str:
    """
    Format a number the way CSS/JS prints it: integers without a decimal point,
    everything else with the shortest round-trip representation.
    """
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)

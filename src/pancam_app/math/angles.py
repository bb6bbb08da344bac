"""Angle conversion and clamping helpers."""
from __future__ import annotations

import math


def deg_to_rad(deg: float) -> float:
    return deg * (math.pi / 180.0)


def rad_to_deg(rad: float) -> float:
    return rad * (180.0 / math.pi)


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp ``value`` into ``[lower, upper]``."""
    if lower > upper:
        raise ValueError(f"Invalid range: {lower} > {upper}")
    return max(lower, min(upper, value))

"""Static rig configuration."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple

from loguru import logger

from .math.angles import clamp


@dataclass(slots=True, frozen=True)
class AxisLimits:
    """Inclusive numeric bounds for a UI-driven value."""

    min_value: float
    max_value: float

    def clamp(self, value: float, *, name: str = "value") -> float:
        clamped = clamp(float(value), self.min_value, self.max_value)
        if clamped != value:
            logger.warning(
                "{} {} outside [{}, {}]; clamped to {}",
                name,
                value,
                self.min_value,
                self.max_value,
                clamped,
            )
        return clamped

    def contains(self, value: float) -> bool:
        return self.min_value <= value <= self.max_value


DEFAULT_PRESETS: Dict[str, Tuple[float, float]] = {
    "pct_rwac": (-43.5, 65.75),
    "pct_lwac": (-70.0, 65.75),
    "park": (0.0, 60.0),
    "home": (0.0, 0.0),
}


@dataclass(slots=True, frozen=True)
class RigConfig:
    """Geometry and interaction limits for the PanCam mast.

    Attributes
    ----------
    base_offset:
        World position of the pan stage (the rig origin on the rover), metres.
    pan_limits, tilt_limits:
        Mechanical range of each axis in degrees.
    start_stop_limits:
        Range of the panorama start/stop angles in degrees.
    sample_count_range:
        Minimum and maximum number of capture positions per panorama.
    far_distance_range:
        Range of the per-instrument distance of interest, metres.
    presets:
        Named (pan, tilt) poses.
    """

    base_offset: Tuple[float, float, float] = (0.0, 1.9, -0.5)
    pan_limits: AxisLimits = AxisLimits(-180.0, 180.0)
    tilt_limits: AxisLimits = AxisLimits(-90.0, 90.0)
    start_stop_limits: AxisLimits = AxisLimits(-180.0, 180.0)
    sample_count_range: Tuple[int, int] = (2, 30)
    far_distance_range: AxisLimits = AxisLimits(2.0, 10.0)
    presets: Dict[str, Tuple[float, float]] = field(default_factory=lambda: dict(DEFAULT_PRESETS))

    def clamp_sample_count(self, count: float) -> int:
        lower, upper = self.sample_count_range
        clamped = int(clamp(int(round(count)), lower, upper))
        if clamped != count:
            logger.warning("Sample count {} outside [{}, {}]; clamped to {}", count, lower, upper, clamped)
        return clamped


DEFAULT_CONFIG = RigConfig()

"""Panorama planning over the pan-tilt kinematic model."""

from .planner import PanoramaPlanner, PlanResult, capture_angles
from .session import PlanSession

__all__ = [
    "PanoramaPlanner",
    "PlanResult",
    "PlanSession",
    "capture_angles",
]

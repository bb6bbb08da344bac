"""Coverage footprints and panorama tiles."""
from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Tuple

import numpy as np
from loguru import logger

from ..errors import InvalidFov
from ..math import geometry
from .instruments import DisplayStyle, InstrumentSpec
from .ptu import Pose


def footprint_size(spec: InstrumentSpec, depth: float) -> Tuple[float, float]:
    """Return ``(width, height)`` in metres of the area seen at ``depth``.

    ``height = 2 * depth * tan(vfov / 2)`` and ``width = height * aspect``, so the
    size scales linearly with depth.

    Raises:
        InvalidFov: If the field of view is not in (0, 180) degrees or ``depth``
            is not positive.
    """
    if not 0.0 < spec.vertical_fov_deg < 180.0:
        raise InvalidFov(
            f"Instrument {spec.instrument_id!r}: vertical FOV {spec.vertical_fov_deg} has no finite footprint"
        )
    if not depth > 0.0:
        raise InvalidFov(f"Footprint depth must be positive, got {depth}")
    height = 2.0 * depth * math.tan(math.radians(spec.vertical_fov_deg) / 2.0)
    return height * spec.aspect_ratio, height


@dataclass(slots=True, frozen=True, eq=False)
class CoverageTile:
    """Rectangle covered by one instrument at one capture position.

    ``world_position`` is the tile centre, placed ``depth`` metres along
    ``world_direction`` from the camera. ``orientation`` turns the tile's local
    +Z toward the rig base so the rectangle faces the mast.
    """

    instrument_id: str
    world_position: np.ndarray
    world_direction: np.ndarray
    footprint_width: float
    footprint_height: float
    capture_pan_deg: float
    capture_tilt_deg: float
    depth: float
    orientation: np.ndarray
    style: DisplayStyle

    @property
    def footprint(self) -> Tuple[float, float]:
        return self.footprint_width, self.footprint_height

    def corners(self) -> np.ndarray:
        """World-space rectangle corners, shape ``(4, 3)``."""
        return geometry.rectangle_corners(
            self.world_position, self.orientation, self.footprint_width, self.footprint_height
        )

    def to_dict(self) -> dict:
        return {
            "instrument_id": self.instrument_id,
            "position": [float(v) for v in self.world_position],
            "direction": [float(v) for v in self.world_direction],
            "width": self.footprint_width,
            "height": self.footprint_height,
            "pan_deg": self.capture_pan_deg,
            "tilt_deg": self.capture_tilt_deg,
            "depth": self.depth,
        }


def make_tile(
    spec: InstrumentSpec,
    pose: Pose,
    depth: float,
    facing: np.ndarray,
    pan_deg: float,
    tilt_deg: float,
) -> CoverageTile:
    """Build the tile ``spec`` covers from ``pose`` at ``depth``, facing ``facing``."""
    width, height = footprint_size(spec, depth)
    direction = pose.direction
    center = pose.position + direction * depth
    orientation = geometry.look_at_rotation(center, facing)
    logger.debug(
        "Tile {} at pan {:.2f} deg: centre {}, size {:.3f} x {:.3f} m",
        spec.instrument_id,
        pan_deg,
        np.round(center, 3).tolist(),
        width,
        height,
    )
    return CoverageTile(
        instrument_id=spec.instrument_id,
        world_position=center,
        world_direction=direction,
        footprint_width=width,
        footprint_height=height,
        capture_pan_deg=pan_deg,
        capture_tilt_deg=tilt_deg,
        depth=depth,
        orientation=orientation,
        style=spec.style,
    )


def frustum_corners(spec: InstrumentSpec, pose: Pose, far: float | None = None) -> Tuple[np.ndarray, np.ndarray]:
    """Near and far plane corners of the view frustum, each of shape ``(4, 3)``."""
    far = spec.far_distance if far is None else far
    planes = []
    for distance in (spec.near_distance, far):
        half_w, half_h = geometry.plane_half_extents(spec.vertical_fov_deg, spec.aspect_ratio, distance)
        center = pose.position + pose.direction * distance
        planes.append(geometry.rectangle_corners(center, pose.orientation, 2.0 * half_w, 2.0 * half_h))
    return planes[0], planes[1]

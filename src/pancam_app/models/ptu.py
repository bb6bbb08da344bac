"""Pan-tilt unit state and forward kinematics.

Rotation order is pan outer, tilt inner: the pan stage turns about world +Y at
the rig base offset, the tilt stage turns about the panned frame's +X axis and
carries every instrument. Each instrument's mount offset and toe-in are applied
inside the tilted frame, so toe-in is unaffected by pan and tilt.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
from loguru import logger

from ..config import DEFAULT_CONFIG, RigConfig
from ..errors import UnknownPreset
from ..math import geometry
from ..math.angles import deg_to_rad
from .instruments import InstrumentRegistry, InstrumentSpec


@dataclass(slots=True, frozen=True)
class PTUState:
    """Commanded pan/tilt angles in degrees. Positive tilt looks down."""

    pan_deg: float = 0.0
    tilt_deg: float = 0.0


@dataclass(slots=True, frozen=True, eq=False)
class Pose:
    """World-space position and orientation of a frame."""

    position: np.ndarray
    orientation: np.ndarray

    @property
    def direction(self) -> np.ndarray:
        """Unit viewing direction (local -Z in world space)."""
        return self.orientation @ geometry.FORWARD

    @property
    def up(self) -> np.ndarray:
        return self.orientation @ geometry.UP

    def matrix(self) -> np.ndarray:
        return geometry.homogeneous(self.orientation, self.position)

    def compose(self, offset: Tuple[float, float, float], rotation: np.ndarray) -> "Pose":
        """Return the pose of a child frame at ``offset`` with local ``rotation``."""
        position = self.position + self.orientation @ geometry.as_vector(offset)
        return Pose(position, self.orientation @ rotation)


def pan_pose(state: PTUState, config: RigConfig = DEFAULT_CONFIG) -> Pose:
    """Pose of the pan stage: yaw about +Y at the rig base offset."""
    rotation = geometry.rotation_y(deg_to_rad(state.pan_deg))
    return Pose(geometry.as_vector(config.base_offset), rotation)


def rig_pose(state: PTUState, config: RigConfig = DEFAULT_CONFIG) -> Pose:
    """Pose of the tilt stage, the frame every instrument is mounted in."""
    # Tilt is inverted so that positive input pitches the mast head down.
    tilt = geometry.rotation_x(-deg_to_rad(state.tilt_deg))
    return pan_pose(state, config).compose((0.0, 0.0, 0.0), tilt)


def world_pose_of(spec: InstrumentSpec, state: PTUState, config: RigConfig = DEFAULT_CONFIG) -> Pose:
    """World pose of ``spec`` for the given PTU state."""
    mount = geometry.rotation_y(spec.mount_yaw_rad)
    return rig_pose(state, config).compose(spec.mount_position, mount)


class PanTiltUnit:
    """Mutable PTU holding the current state for one session.

    ``set_pan``/``set_tilt`` clamp to the configured axis limits and never raise.
    """

    def __init__(self, registry: InstrumentRegistry, config: RigConfig = DEFAULT_CONFIG) -> None:
        self.registry = registry
        self.config = config
        self._state = PTUState()

    @property
    def state(self) -> PTUState:
        return self._state

    @property
    def pan_deg(self) -> float:
        return self._state.pan_deg

    @property
    def tilt_deg(self) -> float:
        return self._state.tilt_deg

    def set_pan(self, angle_deg: float) -> PTUState:
        pan = self.config.pan_limits.clamp(float(angle_deg), name="Pan")
        if pan != self._state.pan_deg:
            self._state = PTUState(pan, self._state.tilt_deg)
        return self._state

    def set_tilt(self, angle_deg: float) -> PTUState:
        tilt = self.config.tilt_limits.clamp(float(angle_deg), name="Tilt")
        if tilt != self._state.tilt_deg:
            self._state = PTUState(self._state.pan_deg, tilt)
        return self._state

    def home(self) -> PTUState:
        self.set_pan(0.0)
        return self.set_tilt(0.0)

    def apply_preset(self, name: str) -> PTUState:
        try:
            pan, tilt = self.config.presets[name]
        except KeyError:
            raise UnknownPreset(f"Unknown PTU preset {name!r}") from None
        self.set_pan(pan)
        self.set_tilt(tilt)
        logger.info("Applied PTU preset {} (pan={}, tilt={})", name, pan, tilt)
        return self._state

    @property
    def preset_names(self) -> list[str]:
        return list(self.config.presets)

    def rig_pose(self) -> Pose:
        return rig_pose(self._state, self.config)

    def world_pose_of(self, instrument_id: str, state: Optional[PTUState] = None) -> Pose:
        """World pose of a registered instrument at ``state`` (default: the current state).

        Raises:
            UnknownInstrument: If ``instrument_id`` is not registered.
        """
        spec = self.registry.get(instrument_id)
        return world_pose_of(spec, self._state if state is None else state, self.config)

"""Rigid-body helpers for the pan-tilt mast.

World frame is right-handed with +Y up and the floor in the XZ plane. Cameras
look along their local -Z axis with local +Y as up.
"""
from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

FORWARD = np.array([0.0, 0.0, -1.0], dtype=np.float64)
UP = np.array([0.0, 1.0, 0.0], dtype=np.float64)


def as_vector(values: Sequence[float]) -> np.ndarray:
    """Return ``values`` as a float64 array of shape ``(3,)``."""
    return np.asarray(values, dtype=np.float64).reshape(3)


def rotation_x(angle_rad: float) -> np.ndarray:
    """Rotation about +X; positive angles pitch a -Z looking camera upward."""
    c = np.cos(angle_rad)
    s = np.sin(angle_rad)
    return np.array(
        [
            [1.0, 0.0, 0.0],
            [0.0, c, -s],
            [0.0, s, c],
        ],
        dtype=np.float64,
    )


def rotation_y(angle_rad: float) -> np.ndarray:
    """Rotation about +Y (yaw); positive angles turn -Z toward -X."""
    c = np.cos(angle_rad)
    s = np.sin(angle_rad)
    return np.array(
        [
            [c, 0.0, s],
            [0.0, 1.0, 0.0],
            [-s, 0.0, c],
        ],
        dtype=np.float64,
    )


def homogeneous(rotation: np.ndarray, translation: Sequence[float]) -> np.ndarray:
    """Pack a rotation and translation into a 4x4 transform."""
    matrix = np.eye(4, dtype=np.float64)
    matrix[:3, :3] = rotation
    matrix[:3, 3] = as_vector(translation)
    return matrix


def normalise(vector: Sequence[float], *, epsilon: float = 1e-12) -> np.ndarray:
    v = as_vector(vector)
    norm = float(np.linalg.norm(v))
    if norm <= epsilon:
        raise ValueError("Cannot normalise a zero-length vector.")
    return v / norm


def look_at_rotation(
    origin: Sequence[float],
    target: Sequence[float],
    up: Sequence[float] = UP,
    *,
    epsilon: float = 1e-9,
) -> np.ndarray:
    """Return a rotation whose local +Z axis points from ``origin`` to ``target``.

    This mirrors how scene-graph meshes are turned to face a point: local +Y is
    kept as close to ``up`` as possible. When the viewing axis is parallel to
    ``up`` the world +Z axis is used as the up hint instead.

    Raises:
        ValueError: If ``origin`` and ``target`` coincide.
    """
    z_axis = normalise(as_vector(target) - as_vector(origin))
    up_hint = as_vector(up)
    x_axis = np.cross(up_hint, z_axis)
    if float(np.linalg.norm(x_axis)) <= epsilon:
        x_axis = np.cross(np.array([0.0, 0.0, 1.0]), z_axis)
    x_axis = normalise(x_axis)
    y_axis = np.cross(z_axis, x_axis)
    return np.column_stack([x_axis, y_axis, z_axis])


def rectangle_corners(
    center: Sequence[float],
    rotation: np.ndarray,
    width: float,
    height: float,
) -> np.ndarray:
    """World-space corners of a ``width`` x ``height`` rectangle in the local XY plane.

    Corners are ordered top-left, top-right, bottom-right, bottom-left as seen
    from the local +Z side. Returns an array of shape ``(4, 3)``.
    """
    half_w = 0.5 * width
    half_h = 0.5 * height
    local = np.array(
        [
            [-half_w, half_h, 0.0],
            [half_w, half_h, 0.0],
            [half_w, -half_h, 0.0],
            [-half_w, -half_h, 0.0],
        ],
        dtype=np.float64,
    )
    return as_vector(center) + local @ np.asarray(rotation, dtype=np.float64).T


def plane_half_extents(vertical_fov_deg: float, aspect: float, distance: float) -> Tuple[float, float]:
    """Half width and half height of a pinhole view plane at ``distance``."""
    half_h = distance * float(np.tan(np.radians(vertical_fov_deg) / 2.0))
    return half_h * aspect, half_h

"""Forward kinematics for the tower crane rig.

Derives the world pose of every moving part from a KinematicState by
composing the fixed attachment chain explicitly (Y up, right-handed):

    base -> platform (yaw by rotation)
         -> boom (rotation about local Z by boom_angle)
         -> boom tip (fixed offset along boom X)
         -> trolley (trolley_offset along boom tip X)
         -> cable anchor (trolley world position, no rotation)
         -> hook (cable_length straight below the anchor, no rotation)

Cable and hook never inherit rotation from their ancestors: they always
hang straight down. The hook also carries its offset in the cable anchor
frame, so its drop below the trolley is exactly -cable_length.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

import numpy as np

from tower_crane.config.config import DEFAULT_GEOMETRY, CraneGeometry
from tower_crane.core.kinematics import KinematicState

PART_NAMES = ("platform", "boom", "trolley", "cable", "hook")

IDENTITY_QUAT = np.array([1.0, 0.0, 0.0, 0.0])


@dataclass(frozen=True)
class Pose:
    """World-space pose of one part.

    position: (x, y, z), Y up
    quaternion: (w, x, y, z), unit length
    parent: part the pose hangs from, or None for chain-composed parts
    local_position: offset from the parent's world position
    """
    position: np.ndarray
    quaternion: np.ndarray
    parent: Optional[str] = None
    local_position: np.ndarray = field(default_factory=lambda: np.zeros(3))

    @property
    def is_identity_rotation(self) -> bool:
        return bool(np.array_equal(self.quaternion, IDENTITY_QUAT))


PoseSet = Dict[str, Pose]


def translation(x: float, y: float, z: float) -> np.ndarray:
    """4x4 homogeneous translation."""
    t = np.eye(4)
    t[:3, 3] = (x, y, z)
    return t


def rotation_y(angle: float) -> np.ndarray:
    """4x4 homogeneous rotation about the Y (vertical) axis."""
    c, s = np.cos(angle), np.sin(angle)
    r = np.eye(4)
    r[0, 0], r[0, 2] = c, s
    r[2, 0], r[2, 2] = -s, c
    return r


def rotation_z(angle: float) -> np.ndarray:
    """4x4 homogeneous rotation about the Z axis."""
    c, s = np.cos(angle), np.sin(angle)
    r = np.eye(4)
    r[0, 0], r[0, 1] = c, -s
    r[1, 0], r[1, 1] = s, c
    return r


def axis_angle_quat(axis, angle: float) -> np.ndarray:
    """Quaternion (w, x, y, z) for a rotation of angle about a unit axis."""
    half = 0.5 * angle
    x, y, z = axis
    s = np.sin(half)
    return np.array([np.cos(half), x * s, y * s, z * s])


def quat_multiply(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Hamilton product a * b (apply b, then a)."""
    aw, ax, ay, az = a
    bw, bx, by, bz = b
    return np.array([
        aw * bw - ax * bx - ay * by - az * bz,
        aw * bx + ax * bw + ay * bz - az * by,
        aw * by - ax * bz + ay * bw + az * bx,
        aw * bz + ax * by - ay * bx + az * bw,
    ])


def compute_poses(state: KinematicState,
                  geometry: CraneGeometry = DEFAULT_GEOMETRY) -> PoseSet:
    """Compute the world pose of every moving part.

    Args:
        state: Current crane parameters
        geometry: Fixed attachment offsets

    Returns:
        Dictionary mapping platform/boom/trolley/cable/hook to Pose
    """
    base = translation(0.0, geometry.base_height, 0.0)
    platform = base @ translation(0.0, geometry.platform_height, 0.0) @ rotation_y(state.rotation)
    boom = platform @ translation(0.0, geometry.boom_height, 0.0) @ rotation_z(state.boom_angle)
    boom_tip = boom @ translation(geometry.boom_tip_offset, 0.0, 0.0)
    trolley = boom_tip @ translation(state.trolley_offset, 0.0, 0.0)

    platform_quat = axis_angle_quat((0.0, 1.0, 0.0), state.rotation)
    boom_quat = quat_multiply(platform_quat, axis_angle_quat((0.0, 0.0, 1.0), state.boom_angle))

    anchor = trolley[:3, 3].copy()
    drop = np.array([0.0, -state.cable_length, 0.0])

    return {
        "platform": Pose(platform[:3, 3].copy(), platform_quat),
        "boom": Pose(boom[:3, 3].copy(), boom_quat),
        "trolley": Pose(trolley[:3, 3].copy(), boom_quat),
        "cable": Pose(anchor, IDENTITY_QUAT.copy(), "trolley", np.zeros(3)),
        "hook": Pose(anchor + drop, IDENTITY_QUAT.copy(), "cable", drop),
    }

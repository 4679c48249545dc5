import math

import numpy as np
import pytest

from tower_crane.config.config import CraneGeometry
from tower_crane.core.forward_kinematics import (
    PART_NAMES, axis_angle_quat, compute_poses, quat_multiply, rotation_y, rotation_z,
)
from tower_crane.core.kinematics import KinematicState

STATES = [
    KinematicState(),
    KinematicState(boom_angle=0.3, cable_length=1.0, rotation=1.2, trolley_offset=8.0),
    KinematicState(boom_angle=-0.5, cable_length=15.0, rotation=-7.9, trolley_offset=-8.0),
    KinematicState(boom_angle=-0.13, cable_length=3.7, rotation=3 * math.pi / 2, trolley_offset=2.2),
]


def test_all_parts_present():
    assert set(compute_poses(KinematicState())) == set(PART_NAMES)


def test_rest_pose_chain():
    poses = compute_poses(KinematicState())
    np.testing.assert_allclose(poses["platform"].position, [0, 3.5, 0])
    np.testing.assert_allclose(poses["boom"].position, [0, 18.5, 0])
    np.testing.assert_allclose(poses["trolley"].position, [10, 18.5, 0])
    np.testing.assert_allclose(poses["hook"].position, [10, 13.5, 0])


SWEEP = [
    KinematicState(boom_angle=b, cable_length=c, rotation=r, trolley_offset=t)
    for b in (-0.5, 0.0, 0.17, 0.3)
    for c in (1.0, 3.7, 5.1, 7.3, 13.9, 15.0)
    for r in (0.0, 0.9, -4.4)
    for t in (-8.0, 0.0, 2.3)
]


@pytest.mark.parametrize("state", STATES)
def test_hook_hangs_cable_length_below_trolley(state):
    poses = compute_poses(state)
    trolley = poses["trolley"].position
    hook = poses["hook"].position
    assert hook[1] - trolley[1] == pytest.approx(-state.cable_length, abs=1e-12)
    assert hook[0] == trolley[0] and hook[2] == trolley[2]


def test_hook_offset_is_exact_for_every_state():
    for state in SWEEP + STATES:
        poses = compute_poses(state)
        hook = poses["hook"]
        assert hook.parent == "cable"
        assert hook.local_position[1] == -state.cable_length
        assert hook.local_position[0] == 0.0 and hook.local_position[2] == 0.0
        assert poses["cable"].parent == "trolley"
        assert np.array_equal(poses["cable"].local_position, np.zeros(3))
        assert np.array_equal(hook.position, poses["cable"].position + hook.local_position)


def test_hook_offset_at_reachable_cable_length():
    # 7.3 is reached by holding "s" from the initial 5.0
    poses = compute_poses(KinematicState(cable_length=7.3))
    assert poses["hook"].local_position[1] == -7.3


@pytest.mark.parametrize("state", STATES)
def test_cable_and_hook_never_rotate(state):
    poses = compute_poses(state)
    assert poses["cable"].is_identity_rotation
    assert poses["hook"].is_identity_rotation
    np.testing.assert_array_equal(poses["cable"].position, poses["trolley"].position)


def test_platform_rotation_is_pure_yaw():
    poses = compute_poses(KinematicState(rotation=math.pi / 2))
    np.testing.assert_allclose(poses["platform"].quaternion, axis_angle_quat((0, 1, 0), math.pi / 2))
    # Boom tip at +X swings to -Z after a quarter turn about Y
    np.testing.assert_allclose(poses["trolley"].position, [0, 18.5, -10], atol=1e-12)


def test_boom_pitch_raises_trolley():
    angle = 0.3
    poses = compute_poses(KinematicState(boom_angle=angle, trolley_offset=4.0))
    reach = 14.0
    np.testing.assert_allclose(poses["trolley"].position,
                               [reach * math.cos(angle), 18.5 + reach * math.sin(angle), 0])


def test_trolley_composes_yaw_and_pitch():
    state = KinematicState(boom_angle=-0.2, rotation=0.7, trolley_offset=-3.0)
    poses = compute_poses(state)
    reach = 7.0
    horizontal = reach * math.cos(-0.2)
    expected = [horizontal * math.cos(0.7), 18.5 + reach * math.sin(-0.2), -horizontal * math.sin(0.7)]
    np.testing.assert_allclose(poses["trolley"].position, expected)


def test_quaternions_match_matrices():
    state = KinematicState(boom_angle=0.25, rotation=-1.1)
    q = compute_poses(state)["boom"].quaternion
    w, x, y, z = q
    matrix = np.array([
        [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
        [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
        [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
    ])
    expected = (rotation_y(-1.1) @ rotation_z(0.25))[:3, :3]
    np.testing.assert_allclose(matrix, expected, atol=1e-12)
    assert np.linalg.norm(q) == pytest.approx(1.0)


def test_quat_multiply_identity():
    q = axis_angle_quat((0, 0, 1), 0.4)
    np.testing.assert_allclose(quat_multiply(np.array([1.0, 0, 0, 0]), q), q)


def test_custom_geometry():
    geometry = CraneGeometry(base_height=0.0, platform_height=1.0, boom_height=5.0, boom_tip_offset=2.0)
    poses = compute_poses(KinematicState(cable_length=2.0), geometry)
    np.testing.assert_allclose(poses["trolley"].position, [2, 6, 0])
    np.testing.assert_allclose(poses["hook"].position, [2, 4, 0])

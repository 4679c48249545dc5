"""MuJoCo scene binding for the tower crane.

The MJCF model declares the moving parts as mocap bodies named after the
crane nodes. Poses arrive in the Y-up frame of the kinematics and are
converted to MuJoCo's Z-up frame here; no physics step is ever taken.
"""

import mujoco
import numpy as np

from tower_crane.core.forward_kinematics import PART_NAMES
from tower_crane.core.scene_binding import SceneBinding

CABLE_GEOM = "cable_geom"


def to_mujoco_position(p) -> np.ndarray:
    """Y-up (x, y, z) -> Z-up (x, -z, y)."""
    return np.array([p[0], -p[2], p[1]])


def to_mujoco_quat(q) -> np.ndarray:
    """Rotate the quaternion axis the same way as positions."""
    return np.array([q[0], q[1], -q[3], q[2]])


class MujocoSceneBinding(SceneBinding):
    """Scene binding backed by a MuJoCo model and passive viewer."""

    def __init__(self, xml_path: str):
        """Load the scene model.

        Args:
            xml_path: Path to the MJCF model with one mocap body per node

        Raises:
            ValueError: if a node has no matching mocap body
        """
        super().__init__(PART_NAMES)
        self.model = mujoco.MjModel.from_xml_path(xml_path)
        self.data = mujoco.MjData(self.model)
        self.viewer = None

        self._mocap_ids = {}
        for name in self.nodes:
            body_id = mujoco.mj_name2id(self.model, mujoco.mjtObj.mjOBJ_BODY, name)
            if body_id == -1:
                raise ValueError(f"Body '{name}' not found")
            mocap_id = self.model.body_mocapid[body_id]
            if mocap_id == -1:
                raise ValueError(f"Body '{name}' is not a mocap body")
            self._mocap_ids[name] = int(mocap_id)

        self._cable_geom = mujoco.mj_name2id(self.model, mujoco.mjtObj.mjOBJ_GEOM, CABLE_GEOM)
        if self._cable_geom == -1:
            raise ValueError(f"Geom '{CABLE_GEOM}' not found")
        self._cable_radius = float(self.model.geom_size[self._cable_geom][0])

        mujoco.mj_forward(self.model, self.data)

    def mount(self, viewer):
        """Attach a MuJoCo viewer handle (e.g. from launch_passive)."""
        self.viewer = viewer

    def unmount(self):
        self.viewer = None

    def is_mounted(self) -> bool:
        return self.viewer is not None and self.viewer.is_running()

    def world_position(self, name: str) -> np.ndarray:
        """Y-up world position of a node, resolved through its parent."""
        node = self.nodes[name]
        if node.parent is None:
            return node.position
        return self.world_position(node.parent) + node.local_position

    def sync_model(self):
        """Copy node poses into mocap data and propagate kinematics."""
        with self._lock:
            for name, mocap_id in self._mocap_ids.items():
                node = self.nodes[name]
                self.data.mocap_pos[mocap_id] = to_mujoco_position(self.world_position(name))
                self.data.mocap_quat[mocap_id] = to_mujoco_quat(node.quaternion)

            # Stretch the cable from its anchor down to the hook
            length = -float(self.nodes["hook"].local_position[1])
            half = max(length, 0.0) / 2
            self.model.geom_size[self._cable_geom][1] = half
            self.model.geom_rbound[self._cable_geom] = half + self._cable_radius
            self.data.mocap_pos[self._mocap_ids["cable"]][2] -= half

        mujoco.mj_forward(self.model, self.data)

    def cable_half_length(self) -> float:
        return float(self.model.geom_size[self._cable_geom][1])

    def body_position(self, name: str) -> np.ndarray:
        """World position (Z up) of a body after the last sync."""
        body_id = mujoco.mj_name2id(self.model, mujoco.mjtObj.mjOBJ_BODY, name)
        return self.data.xpos[body_id].copy()

    def render(self):
        """Push poses to the model and refresh the viewer."""
        if self.viewer is None:
            self.sync_model()
            return
        with self.viewer.lock():
            self.sync_model()
        self.viewer.sync()

"""Scene binding interface between the control loop and a renderer.

The hosting view owns the scene graph. The control loop only writes the
pose fields of the named nodes and asks the binding to render once per tick.
"""

import threading
from typing import Dict, Iterable, Tuple

import numpy as np

from tower_crane.core.forward_kinematics import IDENTITY_QUAT, PART_NAMES, Pose, PoseSet


class SceneNode:
    """A pose-mutable handle to one renderable node."""

    def __init__(self, name: str):
        self.name = name
        self.position = np.zeros(3)
        self.quaternion = IDENTITY_QUAT.copy()
        self.parent = None
        self.local_position = np.zeros(3)
        self.updates = 0

    def set_pose(self, pose: Pose):
        self.position[:] = pose.position
        self.quaternion[:] = pose.quaternion
        self.parent = pose.parent
        self.local_position[:] = pose.local_position
        self.updates += 1


class SceneBinding:
    """Base scene binding exposing the crane's moving nodes.

    Subclasses implement ``render`` and may override ``resize`` and
    ``is_mounted``.
    """

    def __init__(self, node_names: Iterable[str] = PART_NAMES):
        self.nodes: Dict[str, SceneNode] = {name: SceneNode(name) for name in node_names}
        self.viewport: Tuple[int, int] = (0, 0)
        self._lock = threading.Lock()

    def is_mounted(self) -> bool:
        return True

    def apply_poses(self, poses: PoseSet):
        """Write every pose into its node (thread-safe against resize)."""
        with self._lock:
            for name, pose in poses.items():
                self.nodes[name].set_pose(pose)

    def render(self):
        raise NotImplementedError

    def resize(self, width: int, height: int):
        """Record a new viewport size; owned by the hosting view."""
        with self._lock:
            self.viewport = (int(width), int(height))


def validate_binding(scene, required: Iterable[str] = PART_NAMES):
    """Check that a scene binding can be driven by the control loop.

    Raises:
        ValueError: if the binding is missing, unmounted or lacks a node
    """
    if scene is None:
        raise ValueError("SceneBinding is required to start the control loop")
    if not scene.is_mounted():
        raise ValueError("SceneBinding is not mounted")
    missing = [name for name in required if name not in scene.nodes]
    if missing:
        raise ValueError(f"SceneBinding is missing nodes: {', '.join(missing)}")

"""Control loop for the tower crane.

This module implements the per-frame driver with clear separation of
responsibilities: input capture, state update, kinematics, scene update
and status publishing.
"""

import threading
from typing import Iterable

from tower_crane.config.config import DEFAULT_GEOMETRY, DEFAULT_PARAMETERS
from tower_crane.core.forward_kinematics import compute_poses
from tower_crane.core.kinematics import KinematicState, advance, reset_state
from tower_crane.core.scene_binding import validate_binding
from tower_crane.core.state import DisplaySnapshot


class ControlLoop:
    """Idle/Running state machine owning the crane parameters.

    ``start`` attaches a scene binding, registers the key listener with every
    input source and schedules ``tick`` once per frame. ``stop`` undoes all
    of it; once it returns, no tick touches the scene again.
    """

    IDLE = "idle"
    RUNNING = "running"

    def __init__(self, input_state, scheduler, publisher=None, sources: Iterable = (),
                 params=DEFAULT_PARAMETERS, geometry=DEFAULT_GEOMETRY):
        """Initialize the control loop.

        Args:
            input_state: InputState written by the key listener
            scheduler: FrameScheduler that calls tick once per frame
            publisher: SnapshotPublisher receiving one snapshot per tick (optional)
            sources: Input sources offering add_listener/remove_listener
            params: Parameter table for the update rule
            geometry: Attachment offsets for forward kinematics
        """
        self.input_state = input_state
        self.scheduler = scheduler
        self.publisher = publisher
        self.sources = list(sources)
        self.params = params
        self.geometry = geometry

        self.scene = None
        self.status = self.IDLE
        self.tick_count = 0
        self.poses = None
        self._state = reset_state(params)
        self._snapshot = DisplaySnapshot.from_state(self._state, self.params)
        self._lock = threading.RLock()

    @property
    def is_running(self) -> bool:
        return self.status == self.RUNNING

    @property
    def state(self) -> KinematicState:
        with self._lock:
            return self._state

    @property
    def snapshot(self) -> DisplaySnapshot:
        with self._lock:
            return self._snapshot

    def start(self, scene):
        """Attach a scene and begin ticking.

        Args:
            scene: SceneBinding exposing platform/boom/trolley/cable/hook

        Raises:
            ValueError: if the scene binding is missing or unusable
            RuntimeError: if the loop is already running
        """
        with self._lock:
            if self.is_running:
                raise RuntimeError("Control loop is already running")
            validate_binding(scene)

            self.scene = scene
            for source in self.sources:
                source.add_listener(self._on_key)
            self.scheduler.request(self.tick)
            self.status = self.RUNNING
        print("控制循环已启动")

    def stop(self):
        """Detach listeners and halt ticking. Safe to call in any state."""
        with self._lock:
            if not self.is_running:
                return
            for source in self.sources:
                source.remove_listener(self._on_key)
            self.scheduler.cancel()
            self.scene = None
            self.status = self.IDLE
        print("控制循环已停止")

    def reset(self):
        """Put the crane back to its session-start parameters."""
        with self._lock:
            self._state = reset_state(self.params)
            self._snapshot = DisplaySnapshot.from_state(self._state, self.params)

    def _on_key(self, key: str, held: bool):
        if self.is_running:
            self.input_state.set_key(key, held)

    def tick(self):
        """Run one control cycle; does nothing while Idle."""
        with self._lock:
            if not self.is_running:
                return
            keys = self.input_state.snapshot()
            self._state = advance(self._state, keys, 1.0, self.params)
            self.poses = compute_poses(self._state, self.geometry)
            self._scene_step()
            self._publish_step()
            self.tick_count += 1

    def _scene_step(self):
        """Write poses into the scene and render it."""
        self.scene.apply_poses(self.poses)
        self.scene.render()

    def _publish_step(self):
        self._snapshot = DisplaySnapshot.from_state(self._state, self.params)
        if self.publisher is not None:
            self.publisher.publish(self._snapshot)

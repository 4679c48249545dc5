import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from tower_crane.core.input_state import InputState
from tower_crane.core.scene_binding import SceneBinding
from tower_crane.core.state import SnapshotPublisher
from tower_crane.runtime.control_loop import ControlLoop
from tower_crane.runtime.scheduler import FrameScheduler


class RecordingScene(SceneBinding):
    """Scene binding that counts renders instead of drawing."""

    def __init__(self, mounted=True):
        super().__init__()
        self.mounted = mounted
        self.renders = 0

    def is_mounted(self):
        return self.mounted

    def render(self):
        self.renders += 1


class ScriptedSource:
    """Input source whose key events are pushed by the test."""

    def __init__(self):
        self.listeners = []

    def add_listener(self, callback):
        self.listeners.append(callback)

    def remove_listener(self, callback):
        self.listeners.remove(callback)

    def press(self, key):
        for callback in list(self.listeners):
            callback(key, True)

    def release(self, key):
        for callback in list(self.listeners):
            callback(key, False)


@pytest.fixture
def scene():
    return RecordingScene()


@pytest.fixture
def source():
    return ScriptedSource()


@pytest.fixture
def publisher():
    return SnapshotPublisher()


@pytest.fixture
def scheduler():
    return FrameScheduler(frame_rate=60.0, realtime=False)


@pytest.fixture
def loop(scheduler, publisher, source):
    return ControlLoop(InputState(), scheduler, publisher, sources=[source])

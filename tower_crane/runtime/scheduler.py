"""Frame scheduler driving the control loop once per displayed frame."""

import time
from typing import Callable, Optional


class FrameScheduler:
    """Calls a registered per-frame callback at a fixed frame rate.

    Only one callback is registered at a time. ``cancel`` takes effect
    immediately: a cancelled callback is never invoked again, even later
    in the same frame.
    """

    def __init__(self, frame_rate: float = 60.0, realtime: bool = True):
        """Initialize the scheduler.

        Args:
            frame_rate: Frames per second
            realtime: Whether to sleep to hold the frame rate
        """
        self.frame_interval = 1.0 / frame_rate
        self.realtime = realtime
        self._callback: Optional[Callable[[], None]] = None
        self.frame_count = 0

    def request(self, callback: Callable[[], None]):
        """Register the per-frame callback, replacing any previous one."""
        self._callback = callback

    def cancel(self):
        self._callback = None

    @property
    def is_scheduled(self) -> bool:
        return self._callback is not None

    def _frame(self, before_frame=None, after_frame=None):
        if before_frame:
            before_frame()
        callback = self._callback
        if callback is not None:
            callback()
        if after_frame:
            after_frame()
        self.frame_count += 1

    def step(self, n: int = 1):
        """Run n frames immediately, without pacing."""
        for _ in range(n):
            self._frame()

    def run(self, should_continue: Callable[[], bool],
            before_frame: Optional[Callable[[], None]] = None,
            after_frame: Optional[Callable[[], None]] = None):
        """Run frames until should_continue() returns False.

        Args:
            should_continue: Checked before every frame
            before_frame: Called first in each frame (event polling)
            after_frame: Called last in each frame (presentation)
        """
        next_time = time.perf_counter()
        while should_continue():
            self._frame(before_frame, after_frame)
            next_time += self.frame_interval
            self._timing_step(next_time)

    def _timing_step(self, next_time):
        """Maintain real-time synchronization.

        Args:
            next_time: Target time for next frame
        """
        if not self.realtime:
            return
        sleep = next_time - time.perf_counter()
        if sleep > 0:
            time.sleep(sleep)

"""Crane status snapshots and publishing.

This module derives the display snapshot from the crane parameters and
provides the latest-snapshot store with optional ZMQ publishing for
external monitoring tools.

Rounding follows ``Number.prototype.toFixed``: half away from zero,
applied to the exact binary value of the float.
"""

import math
import threading
import time
from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, List, Optional

import zmq

from tower_crane.config.config import DEFAULT_PARAMETERS
from tower_crane.core.kinematics import KinematicState


def round_half_up(value: float, digits: int = 0) -> float:
    """Round half away from zero on the exact binary value of a float."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class DisplaySnapshot:
    """Read-only status readout of the crane."""
    boom_percent: int  # 0 at lowest boom, 100 at highest
    cable_length: float  # 1 decimal
    rotation_degrees: int  # (-360, 360]
    trolley_position: float  # 1 decimal

    @classmethod
    def from_state(cls, state: KinematicState,
                   params=DEFAULT_PARAMETERS) -> "DisplaySnapshot":
        """Derive the readout; boom_percent spans the active boom bounds."""
        boom = params["boom_angle"]
        degrees = int(round_half_up(math.fmod(math.degrees(state.rotation), 360.0)))
        if degrees == -360:
            degrees = 0
        return cls(
            boom_percent=int(round_half_up((state.boom_angle - boom.min) / (boom.max - boom.min) * 100)),
            cable_length=round_half_up(state.cable_length, 1),
            rotation_degrees=degrees,
            trolley_position=round_half_up(state.trolley_offset, 1),
        )

    def to_dict(self) -> dict:
        return asdict(self)


class SnapshotPublisher:
    """Latest-snapshot store with an optional ZMQ publishing thread.

    The control loop calls ``publish`` once per tick; readers (status panel,
    CLI) call ``get_latest``. Subscribers registered with ``subscribe`` are
    called synchronously on every publish.
    """

    def __init__(self, endpoint: Optional[str] = None, context: Optional[zmq.Context] = None):
        """Initialize the snapshot store.

        Args:
            endpoint: ZMQ PUB endpoint, or None to keep snapshots local
            context: ZMQ context to use (defaults to the global instance)
        """
        self.endpoint = endpoint
        self._context = context
        self._latest: Optional[DisplaySnapshot] = None
        self._timestamp = 0.0
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._subscribers: List[Callable[[DisplaySnapshot], None]] = []
        self.socket = None

    def publish(self, snapshot: DisplaySnapshot):
        """Store a new snapshot and notify subscribers (thread-safe)."""
        with self._lock:
            self._latest = snapshot
            self._timestamp = time.time()
            subscribers = list(self._subscribers)
        for callback in subscribers:
            callback(snapshot)

    def get_latest(self) -> Optional[DisplaySnapshot]:
        """Get the most recent snapshot.

        Returns:
            Latest snapshot, or None if nothing was published yet
        """
        with self._lock:
            return self._latest

    def subscribe(self, callback: Callable[[DisplaySnapshot], None]):
        with self._lock:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[DisplaySnapshot], None]):
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    def message(self) -> Optional[dict]:
        """Build the JSON message for the latest snapshot."""
        with self._lock:
            if self._latest is None:
                return None
            msg = self._latest.to_dict()
            msg["timestamp"] = self._timestamp
            return msg

    def start_publish(self, interval=0.1):
        """Start the background publishing thread.

        Args:
            interval: Publishing interval in seconds
        """
        if self.endpoint is None or self._thread is not None:
            return

        context = self._context or zmq.Context.instance()
        self.socket = context.socket(zmq.PUB)
        self.socket.bind(self.endpoint)
        self._stop_event.clear()

        def loop():
            while not self._stop_event.is_set():
                msg = self.message()
                if msg is not None:
                    self.socket.send_json(msg)
                self._stop_event.wait(interval)

        self._thread = threading.Thread(target=loop, daemon=True)
        self._thread.start()

    def stop_publish(self):
        """Stop the publishing thread and close the socket."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=1.0)
            self._thread = None
        if self.socket is not None:
            self.socket.close(linger=0)
            self.socket = None

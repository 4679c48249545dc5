"""Held-key state shared between input sources and the control loop."""

import threading
from types import MappingProxyType
from typing import Dict, Mapping


class InputState:
    """Tracks which control keys are currently held.

    Keys are stored lowercase. A key that was never set reads as not held.
    Each write touches exactly one entry, so readers always see a complete
    state; ``snapshot()`` gives the control loop one consistent copy per tick.
    """

    def __init__(self):
        self._keys: Dict[str, bool] = {}
        self._lock = threading.Lock()

    def set_key(self, key: str, held: bool):
        """Record a key as held or released (thread-safe).

        Args:
            key: Key identifier, any case
            held: True on key-down, False on key-up
        """
        with self._lock:
            self._keys[key.lower()] = bool(held)

    def is_held(self, key: str) -> bool:
        with self._lock:
            return self._keys.get(key.lower(), False)

    def snapshot(self) -> Mapping[str, bool]:
        """Get a read-only copy of all recorded keys."""
        with self._lock:
            return MappingProxyType(dict(self._keys))

    def held_keys(self) -> list:
        """List the keys currently held, sorted."""
        with self._lock:
            return sorted(k for k, v in self._keys.items() if v)

    def clear(self):
        """Release every key."""
        with self._lock:
            self._keys.clear()

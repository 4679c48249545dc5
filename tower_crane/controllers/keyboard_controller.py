"""Keyboard input source for crane control.

Turns pygame key events into (key, held) notifications for registered
listeners. pygame key names are mapped to the names the crane bindings
use:
- Q/E: boom up/down
- W/S: cable up/down
- A/D: rotate left/right
- Left/Right arrows: trolley in/out
"""

import threading
from typing import Callable, List

import pygame

# pygame.key.name() -> binding name
KEY_ALIASES = {
    "left": "arrowleft",
    "right": "arrowright",
    "up": "arrowup",
    "down": "arrowdown",
}


def normalize_key(name: str) -> str:
    """Lowercase a key name and map pygame arrow names."""
    name = name.lower()
    return KEY_ALIASES.get(name, name)


class KeyboardController:
    """Keyboard source dispatching key-down/key-up to listeners."""

    def __init__(self, manager=None):
        """Initialize keyboard controller.

        Args:
            manager: ControllerManager instance (None = always active)
        """
        self.manager = manager
        self._listeners: List[Callable[[str, bool], None]] = []
        self._lock = threading.Lock()

    def add_listener(self, callback: Callable[[str, bool], None]):
        with self._lock:
            if callback not in self._listeners:
                self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[str, bool], None]):
        with self._lock:
            if callback in self._listeners:
                self._listeners.remove(callback)

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    def is_active(self) -> bool:
        return self.manager is None or self.manager.is_active("keyboard")

    def emit(self, key: str, held: bool):
        """Send a key change to every listener.

        Args:
            key: Key name (any case, pygame or binding naming)
            held: True on key-down, False on key-up
        """
        if not self.is_active():
            return
        key = normalize_key(key)
        with self._lock:
            listeners = list(self._listeners)
        for callback in listeners:
            callback(key, held)

    def handle_event(self, event) -> bool:
        """Dispatch a pygame event.

        Returns:
            True if the event was a key event
        """
        if event.type == pygame.KEYDOWN:
            self.emit(pygame.key.name(event.key), True)
            return True
        if event.type == pygame.KEYUP:
            self.emit(pygame.key.name(event.key), False)
            return True
        return False

"""Xbox-style gamepad input source for crane control.

Stick deflections past the deadzone hold the matching crane key:
- Left stick X: rotate (left = A, right = D)
- Left stick Y: cable (up = W, down = S)
- Right stick Y: boom (up = Q, down = E)
- Right stick X: trolley (left/right arrows)
- A button: release all keys
- B button: reset crane
"""

import threading
from typing import Callable, Dict, List

import pygame

# (axis index, key for negative deflection, key for positive deflection)
STICK_BINDINGS = (
    (0, "a", "d"),
    (1, "w", "s"),
    (3, "q", "e"),
    (2, "arrowleft", "arrowright"),
)

BUTTON_RELEASE = 0
BUTTON_RESET = 1


def apply_deadzone(value: float, deadzone: float) -> float:
    """Apply deadzone to stick input.

    Args:
        value: Raw stick value (-1 to 1)
        deadzone: Magnitude below which the stick reads as centred

    Returns:
        Filtered value with deadzone applied
    """
    if abs(value) < deadzone:
        return 0.0
    # Scale to full range after deadzone
    sign = 1 if value > 0 else -1
    return sign * (abs(value) - deadzone) / (1.0 - deadzone)


def stick_keys(axes: List[float], deadzone: float) -> Dict[str, bool]:
    """Map raw axis values to held/released crane keys."""
    keys = {}
    for index, negative, positive in STICK_BINDINGS:
        value = apply_deadzone(axes[index], deadzone) if index < len(axes) else 0.0
        keys[negative] = value < 0
        keys[positive] = value > 0
    return keys


class GamepadController:
    """Gamepad source polled from the main thread once per frame.

    pygame joystick state must be read on the thread that owns the
    event queue, so ``update`` is called by the frame loop rather than
    from a worker thread.
    """

    def __init__(self, manager, deadzone: float = 0.15):
        """Initialize gamepad controller.

        Args:
            manager: ControllerManager instance
            deadzone: Stick deadzone
        """
        self.manager = manager
        self.deadzone = deadzone
        self._listeners: List[Callable[[str, bool], None]] = []
        self._lock = threading.Lock()
        self._held: Dict[str, bool] = {}
        self._last_buttons: Dict[int, bool] = {}

        # Initialize pygame
        pygame.init()
        pygame.joystick.init()
        self.joystick = None
        if pygame.joystick.get_count() > 0:
            self.joystick = pygame.joystick.Joystick(0)
            self.joystick.init()
            print(f"  - 手柄已连接: {self.joystick.get_name()}")
        else:
            print("  - 未检测到手柄")

    def is_available(self) -> bool:
        return self.joystick is not None

    def add_listener(self, callback: Callable[[str, bool], None]):
        with self._lock:
            if callback not in self._listeners:
                self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[str, bool], None]):
        with self._lock:
            if callback in self._listeners:
                self._listeners.remove(callback)

    def _emit(self, key: str, held: bool):
        with self._lock:
            listeners = list(self._listeners)
        for callback in listeners:
            callback(key, held)

    def apply_axes(self, axes: List[float]):
        """Emit key changes for the given stick readings."""
        for key, held in stick_keys(axes, self.deadzone).items():
            if self._held.get(key, False) != held:
                self._held[key] = held
                self._emit(key, held)

    def _button_pressed(self, index: int) -> bool:
        """Edge-detect a button press."""
        down = bool(self.joystick.get_button(index))
        pressed = down and not self._last_buttons.get(index, False)
        self._last_buttons[index] = down
        return pressed

    def update(self):
        """Poll the joystick and emit key changes (main thread)."""
        if not self.is_available() or not self.manager.is_active("gamepad"):
            self._held.clear()
            return

        axes = [self.joystick.get_axis(i) for i in range(self.joystick.get_numaxes())]
        self.apply_axes(axes)

        if self._button_pressed(BUTTON_RELEASE):
            print("手柄: 释放所有按键")
            self._held.clear()
            self.manager.release_all()
        if self._button_pressed(BUTTON_RESET):
            print("手柄: 重置起重机")
            self.manager.reset()

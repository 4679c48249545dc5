"""Controller manager for handling multiple input modes.

This module manages switching between the input sources that may
hold crane keys: keyboard, gamepad and CLI.
"""

import threading
from typing import Dict, Optional


class ControllerManager:
    """Manages multiple input modes and switching between them.

    Only the active source may write held keys at any time, preventing
    conflicts between different input sources. Switching releases every
    key so nothing stays held from the previous source.
    """

    def __init__(self, input_state, loop=None, mode: str = "keyboard"):
        """Initialize the controller manager.

        Args:
            input_state: InputState shared with the control loop
            loop: ControlLoop instance (used for reset)
            mode: Initial mode name
        """
        self.input_state = input_state
        self.loop = loop
        self.current_mode = mode
        self._mode_lock = threading.Lock()

        # Controllers will be registered here
        self.controllers: Dict[str, Optional[object]] = {
            "keyboard": None,  # pygame keyboard, needs the status window
            "gamepad": None,  # Will be initialized if a joystick is present
            "cli": None,  # Typed key commands
        }

    def register_controller(self, name: str, controller):
        """Register a controller.

        Args:
            name: Controller name (keyboard, gamepad, cli)
            controller: Controller instance
        """
        with self._mode_lock:
            self.controllers[name] = controller

    def set_mode(self, mode: str) -> bool:
        """Switch input mode.

        Args:
            mode: Target mode name

        Returns:
            True if switch successful, False otherwise
        """
        with self._mode_lock:
            if mode not in self.controllers:
                return False

            if self.controllers[mode] is None:
                return False

            old_mode = self.current_mode
            self.current_mode = mode
            self.input_state.clear()
        print(f"输入模式已切换: {old_mode} → {mode}")
        return True

    def activate(self, fallback: str = "keyboard") -> str:
        """Keep the initial mode if it has a controller, else use fallback.

        Call after every controller has been registered.

        Returns:
            The mode that is active afterwards
        """
        with self._mode_lock:
            mode = self.current_mode
            if self.controllers.get(mode) is not None:
                return mode
            self.current_mode = fallback
            self.input_state.clear()
        print(f"输入模式 {mode} 不可用，已回退到 {fallback}")
        return fallback

    def get_mode(self) -> str:
        with self._mode_lock:
            return self.current_mode

    def is_active(self, mode: str) -> bool:
        """Check if a specific mode is active.

        Args:
            mode: Mode name to check

        Returns:
            True if the mode is currently active
        """
        with self._mode_lock:
            return self.current_mode == mode

    def list_available_modes(self) -> list:
        """List all available input modes.

        Returns:
            List of available mode names
        """
        with self._mode_lock:
            return [name for name, ctrl in self.controllers.items() if ctrl is not None]

    def release_all(self):
        """Release every held key (emergency stop)."""
        self.input_state.clear()

    def reset(self):
        """Release all keys and reset the crane parameters."""
        self.input_state.clear()
        if self.loop is not None:
            self.loop.reset()

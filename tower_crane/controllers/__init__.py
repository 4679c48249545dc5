"""Controllers package for crane input.

This package provides the input sources that hold crane keys:
- Keyboard: pygame key events from the status panel window
- Gamepad: Xbox-style joystick sticks
- CLI: typed key commands (see tower_crane.cli)
"""

from tower_crane.controllers.controller_manager import ControllerManager

__all__ = ['ControllerManager']

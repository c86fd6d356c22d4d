"""Firmata pin control and arduino-cli tooling for a single connected board.

Expects `arduino-cli` on PATH (or configured in arduino-bridge.toml) and
StandardFirmata running on the board for pin control.
"""

from arduino_bridge.board import ArduinoBoard
from arduino_bridge.pins import PinCapability, PinMode, PinState

__version__ = "0.3.0"

__all__ = ["ArduinoBoard", "PinCapability", "PinMode", "PinState", "__version__"]

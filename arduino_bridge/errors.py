"""Error types for arduino-bridge."""

from __future__ import annotations


class ArduinoBridgeError(Exception):
    """Base error with a message and the exit code the CLI reports for it."""

    exit_code = 1

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        self.message = message
        if exit_code is not None:
            self.exit_code = exit_code

    def to_dict(self) -> dict:
        return {
            "error": self.message,
            "type": type(self).__name__,
            "exit_code": self.exit_code,
        }


# -- Board handle -------------------------------------------------------------

class InvalidPinIndexError(ArduinoBridgeError):
    """Pin position is not present in the current snapshot."""
    exit_code = 2


class ValueOutOfBoundsError(ArduinoBridgeError):
    """Write value is outside the range allowed by the pin's bit resolution."""
    exit_code = 2


class InvalidModeError(ArduinoBridgeError):
    """Requested mode is not one of the pin's supported modes."""
    exit_code = 2


class UnimplementedModeError(ArduinoBridgeError):
    """The pin's active mode has no write primitive."""
    exit_code = 2


class TransportError(ArduinoBridgeError):
    """The connection to the board could not be established."""
    exit_code = 4


# -- arduino-cli ----------------------------------------------------------------

class CommandFailureError(ArduinoBridgeError):
    """arduino-cli is missing, failed, timed out, or cannot serve the device."""


class UnknownFormatError(ArduinoBridgeError):
    """JSON output of arduino-cli did not have the expected shape."""


class UnexpectedSyntaxError(ArduinoBridgeError):
    """A row of the tabular board list had the wrong number of fields."""


class NoDeviceError(ArduinoBridgeError):
    """No board was found where exactly one was required."""
    exit_code = 3


class MultipleDevicesError(ArduinoBridgeError):
    """More than one board was found where exactly one was required."""
    exit_code = 3


class InvalidSketchPathError(ArduinoBridgeError):
    """Sketch path is not a directory containing <name>.ino."""
    exit_code = 2


# -- Not user errors --------------------------------------------------------------

class InvalidPinError(ValueError):
    """Raised when a pin number is outside the board's digital pin range."""


class PinConsistencyError(RuntimeError):
    """The transport reported pin capabilities that contradict each other.

    Signals a bug in the transport or the snapshot code. It is not an
    ArduinoBridgeError, so the CLI lets it propagate.
    """

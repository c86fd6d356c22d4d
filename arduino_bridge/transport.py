"""Firmata connection to a board, as used by ArduinoBoard."""

from __future__ import annotations

import logging
import time
from typing import Protocol

import pyfirmata2
import serial

from arduino_bridge.errors import TransportError
from arduino_bridge.pins import PinDescriptor

logger = logging.getLogger(__name__)

# Firmata command bytes.
ANALOG_MESSAGE = 0xE0
SET_PIN_MODE = 0xF4
SET_DIGITAL_PIN_VALUE = 0xF5
EXTENDED_ANALOG = 0x6F
CAPABILITY_QUERY = 0x6B
CAPABILITY_RESPONSE = 0x6C
PIN_STATE_QUERY = 0x6D
PIN_STATE_RESPONSE = 0x6E
ANALOG_MAPPING_QUERY = 0x69
ANALOG_MAPPING_RESPONSE = 0x6A

# Ends a pin's entry in a capability response, and marks a pin without an
# analog channel in an analog mapping response.
_SEPARATOR = 0x7F
# Mode reported for pins the firmware does not manage.
PIN_MODE_IGNORE = 0x7F

DEFAULT_BAUD_RATE = 57600
_RESPONSE_WAIT = 0.1


class Transport(Protocol):
    """What ArduinoBoard needs from a live board connection."""

    def digital_write(self, pin: int, value: int) -> None: ...

    def analog_write(self, pin: int, value: int) -> None: ...

    def set_pin_mode(self, pin: int, mode: int) -> None: ...

    def pins(self) -> list[PinDescriptor]:
        """Return every pin of the board, in pin-number order."""
        ...

    def close(self) -> None: ...


class FirmataTransport:
    """Transport over a pyfirmata2 board running StandardFirmata 2.5+.

    pyfirmata2 handles the serial link and frame parsing. This class adds the
    capability, analog mapping and pin state queries that pyfirmata2 uses only
    internally, so the current state of every pin can be read back.
    """

    def __init__(self, board):
        self._board = board
        self._capabilities: list[list[tuple[int, int]]] = []
        self._analog_channels: list[int] = []
        self._active_modes: dict[int, int] = {}
        board.add_cmd_handler(CAPABILITY_RESPONSE, self._handle_capability_response)
        board.add_cmd_handler(ANALOG_MAPPING_RESPONSE, self._handle_analog_mapping_response)
        board.add_cmd_handler(PIN_STATE_RESPONSE, self._handle_pin_state_response)

    @classmethod
    def open(cls, port: str, baud_rate: int = DEFAULT_BAUD_RATE) -> FirmataTransport:
        """Connect to the board on ``port``. Blocks while the board resets."""
        logger.debug("Opening Firmata connection on %s at %d baud", port, baud_rate)
        try:
            board = pyfirmata2.Arduino(port, baudrate=baud_rate)
        except PermissionError as e:
            raise TransportError(f"Permission denied opening {port}: {e}") from e
        except (serial.SerialException, OSError) as e:
            raise TransportError(f"Could not open {port}: {e}") from e
        return cls(board)

    # -- Transport interface ---------------------------------------------------

    def digital_write(self, pin: int, value: int) -> None:
        self._send(SET_DIGITAL_PIN_VALUE, pin, value)

    def analog_write(self, pin: int, value: int) -> None:
        if pin < 16 and value < 1 << 14:
            self._send(ANALOG_MESSAGE | pin, value & 0x7F, (value >> 7) & 0x7F)
        else:
            # At least three 7-bit value bytes, more for values wider than 21 bits.
            width = max(value.bit_length(), 21)
            self._board.send_sysex(
                EXTENDED_ANALOG,
                [pin] + [(value >> shift) & 0x7F for shift in range(0, width, 7)],
            )

    def set_pin_mode(self, pin: int, mode: int) -> None:
        self._send(SET_PIN_MODE, pin, mode)

    def pins(self) -> list[PinDescriptor]:
        self._capabilities = []
        self._analog_channels = []
        self._board.send_sysex(CAPABILITY_QUERY, [])
        self._board.send_sysex(ANALOG_MAPPING_QUERY, [])
        self._drain()
        if not self._capabilities:
            raise TransportError("Board did not answer the capability query")

        self._active_modes = {}
        for pin in range(len(self._capabilities)):
            self._board.send_sysex(PIN_STATE_QUERY, [pin])
        self._drain()

        descriptors = []
        for pin, modes in enumerate(self._capabilities):
            active = self._active_modes.get(pin)
            if active is None:
                if modes:
                    raise TransportError(f"Board did not report the state of pin {pin}")
                active = PIN_MODE_IGNORE
            descriptors.append(PinDescriptor(
                analog=self._is_analog(pin),
                active_mode=active,
                supported=tuple(modes),
            ))
        return descriptors

    def close(self) -> None:
        self._board.exit()

    # -- Response handlers -------------------------------------------------------

    def _handle_capability_response(self, *data):
        pins: list[list[tuple[int, int]]] = []
        modes: list[tuple[int, int]] = []
        values = iter(data)
        for byte in values:
            if byte == _SEPARATOR:
                pins.append(modes)
                modes = []
            else:
                modes.append((byte, next(values, 0)))
        self._capabilities = pins

    def _handle_analog_mapping_response(self, *data):
        self._analog_channels = list(data)

    def _handle_pin_state_response(self, pin, mode, *state):
        self._active_modes[pin] = mode

    # -- Private helpers ---------------------------------------------------------

    def _is_analog(self, pin: int) -> bool:
        return pin < len(self._analog_channels) and self._analog_channels[pin] != _SEPARATOR

    def _send(self, *data: int) -> None:
        self._board.sp.write(bytearray(data))

    def _drain(self) -> None:
        time.sleep(_RESPONSE_WAIT)
        while self._board.bytes_available():
            self._board.iterate()

"""Validated pin control for a single Firmata board."""

from __future__ import annotations

import logging
from typing import Callable

from arduino_bridge.arduino_cli.devices import DeviceRecord
from arduino_bridge.errors import (
    InvalidModeError,
    InvalidPinIndexError,
    UnimplementedModeError,
    ValueOutOfBoundsError,
)
from arduino_bridge.pins import PinCapability, PinMode
from arduino_bridge.transport import DEFAULT_BAUD_RATE, FirmataTransport, Transport

logger = logging.getLogger(__name__)


class ArduinoBoard:
    """A handle on a board, validating every request against its live capabilities.

    Pins are addressed by their position among the board's non-analog pins, in
    the order the transport reports them. After every successful write or mode
    change the whole snapshot is rebuilt from the board, since a change on one
    pin may alter what other pins support.

    A handle owns its transport and is not safe for concurrent use.
    """

    def __init__(self, transport: Transport):
        self._transport = transport
        self._digital_pins: tuple[PinCapability, ...] = ()
        self.refresh()

    @classmethod
    def connect(
        cls,
        device: DeviceRecord,
        baud_rate: int = DEFAULT_BAUD_RATE,
        transport_factory: Callable[..., Transport] = FirmataTransport.open,
    ) -> ArduinoBoard:
        """Open a connection to the port of a discovered device."""
        return cls(transport_factory(device.port, baud_rate=baud_rate))

    @property
    def digital_pins(self) -> tuple[PinCapability, ...]:
        """Capability snapshot of each digital pin as of the last refresh."""
        return self._digital_pins

    def pin(self, pin_index: int) -> PinCapability:
        """Return the snapshot of one pin, or raise InvalidPinIndexError."""
        if not 0 <= pin_index < len(self._digital_pins):
            raise InvalidPinIndexError(
                f"No digital pin at index {pin_index} (board has {len(self._digital_pins)})"
            )
        return self._digital_pins[pin_index]

    def refresh(self) -> tuple[PinCapability, ...]:
        """Rebuild the snapshot of every digital pin from the board."""
        self._digital_pins = tuple(
            PinCapability.from_descriptor(descriptor)
            for descriptor in self._transport.pins()
            if not descriptor.analog
        )
        logger.debug("Refreshed %d digital pins", len(self._digital_pins))
        return self._digital_pins

    def write(self, pin_index: int, value: int) -> None:
        """Write ``value`` to a pin in digital-output or PWM mode."""
        pin = self.pin(pin_index)
        if value not in pin.valid_values:
            raise ValueOutOfBoundsError(
                f"Value {value} out of range for pin {pin_index} "
                f"(0..{pin.valid_values.stop - 1})"
            )

        if pin.mode == PinMode.DIGITAL_OUTPUT:
            self._transport.digital_write(pin_index, value)
        elif pin.mode == PinMode.PWM:
            self._transport.analog_write(pin_index, value)
        else:
            mode = pin.mode.label if pin.mode is not None else "unknown"
            raise UnimplementedModeError(f"Writing is not supported for pins in {mode} mode")

        logger.debug("Wrote %d to pin %d", value, pin_index)
        self.refresh()

    def set_pin_mode(self, pin_index: int, mode: PinMode) -> None:
        """Switch a pin to one of its supported modes."""
        pin = self.pin(pin_index)
        if not pin.supports(mode):
            supported = ", ".join(m.label for m in pin.supported_modes) or "none"
            raise InvalidModeError(
                f"Pin {pin_index} does not support {getattr(mode, 'label', mode)} mode "
                f"(supported: {supported})"
            )

        self._transport.set_pin_mode(pin_index, int(mode))
        logger.debug("Set pin %d to mode %s", pin_index, int(mode))
        self.refresh()

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> ArduinoBoard:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

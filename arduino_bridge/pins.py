"""Pin identifiers, modes and capability snapshots."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum

from arduino_bridge.errors import InvalidPinError, PinConsistencyError

logger = logging.getLogger(__name__)

# Digital pins usable for general I/O on an Uno-class board (0/1 are RX/TX).
DIGITAL_PINS = range(2, 13)


class PinMode(IntEnum):
    """Firmata pin modes, valued by their protocol code."""

    DIGITAL_INPUT = 0x0
    DIGITAL_OUTPUT = 0x1
    ANALOG_INPUT = 0x2
    PWM = 0x3
    SERVO = 0x4
    SHIFT = 0x5
    I2C = 0x6
    ONEWIRE = 0x7
    STEPPER = 0x8
    ENCODER = 0x9
    SERIAL = 0xA
    INPUT_PULLUP = 0xB

    @classmethod
    def from_code(cls, code: int) -> PinMode | None:
        """Return the mode for a raw protocol code, or None if it is unknown."""
        try:
            return cls(code)
        except ValueError:
            return None

    @classmethod
    def from_name(cls, name: str) -> PinMode:
        """Parse a CLI-style name such as 'digital-output' or 'pwm'."""
        return cls[name.strip().upper().replace("-", "_")]

    @property
    def label(self) -> str:
        return self.name.lower().replace("_", "-")


class PinState(IntEnum):
    LOW = 0
    HIGH = 1


@dataclass(frozen=True)
class Pin:
    """A digital pin number, validated against the board's pin range."""
    number: int
    valid_range: range = DIGITAL_PINS

    def __post_init__(self):
        if self.number not in self.valid_range:
            raise InvalidPinError(
                f"Pin {self.number} is not a digital pin "
                f"(expected {self.valid_range.start}..{self.valid_range.stop - 1})"
            )

    def __int__(self) -> int:
        return self.number


@dataclass(frozen=True)
class PinDescriptor:
    """A pin as reported by the transport.

    ``supported`` holds ``(mode_code, resolution)`` pairs in the order the
    firmware advertised them.
    """
    analog: bool
    active_mode: int
    supported: tuple[tuple[int, int], ...] = ()


@dataclass(frozen=True)
class PinCapability:
    """Snapshot of a digital pin's mode and capabilities at refresh time."""
    mode: PinMode | None
    bit_resolution: int
    supported_modes: tuple[PinMode, ...] = ()

    @property
    def valid_values(self) -> range:
        """Values a write may use in the current mode."""
        return range(0, 2 ** self.bit_resolution)

    def supports(self, mode: PinMode) -> bool:
        return mode in self.supported_modes

    @classmethod
    def from_descriptor(cls, descriptor: PinDescriptor) -> PinCapability:
        """Build a snapshot from a transport pin descriptor.

        Raises PinConsistencyError if the active mode is advertised more than
        once, or is missing from a non-empty capability list.
        """
        resolution: int | None = None
        supported: list[PinMode] = []

        for code, mode_resolution in descriptor.supported:
            if code == descriptor.active_mode:
                if resolution is not None:
                    raise PinConsistencyError(
                        f"Active mode {code:#x} is advertised more than once"
                    )
                resolution = mode_resolution

            mode = PinMode.from_code(code)
            if mode is None:
                logger.warning("Ignoring unknown pin mode code %#x", code)
                continue
            supported.append(mode)

        if not descriptor.supported:
            resolution = 0
        if resolution is None:
            raise PinConsistencyError(
                f"Active mode {descriptor.active_mode:#x} is not among the advertised modes"
            )

        return cls(
            mode=PinMode.from_code(descriptor.active_mode),
            bit_resolution=resolution,
            supported_modes=tuple(supported),
        )

    def to_dict(self) -> dict:
        return {
            "mode": self.mode.label if self.mode is not None else None,
            "bit_resolution": self.bit_resolution,
            "supported_modes": [m.label for m in self.supported_modes],
        }

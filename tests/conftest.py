"""Shared fixtures for arduino-bridge tests."""

from dataclasses import replace

import pytest

from arduino_bridge.pins import PinDescriptor, PinMode

DIGITAL_OUT = (PinMode.DIGITAL_OUTPUT, 1)
DIGITAL_IN = (PinMode.DIGITAL_INPUT, 1)
PWM_8 = (PinMode.PWM, 8)
SERVO_14 = (PinMode.SERVO, 14)
ANALOG_10 = (PinMode.ANALOG_INPUT, 10)


class FakeTransport:
    """In-memory transport that records every call made to it."""

    def __init__(self, descriptors, on_set_mode=None):
        self.descriptors = list(descriptors)
        self.on_set_mode = on_set_mode
        self.calls = []
        self.pins_calls = 0
        self.closed = False

    def digital_write(self, pin, value):
        self.calls.append(("digital_write", pin, value))

    def analog_write(self, pin, value):
        self.calls.append(("analog_write", pin, value))

    def set_pin_mode(self, pin, mode):
        self.calls.append(("set_pin_mode", pin, mode))
        self.descriptors[pin] = replace(self.descriptors[pin], active_mode=mode)
        if self.on_set_mode:
            self.on_set_mode(self, pin, mode)

    def pins(self):
        self.pins_calls += 1
        return list(self.descriptors)

    def close(self):
        self.closed = True


def descriptor(active, *modes, analog=False):
    return PinDescriptor(
        analog=analog,
        active_mode=int(active),
        supported=tuple((int(m), r) for m, r in modes),
    )


@pytest.fixture
def uno_like_pins():
    """Pins 0-1 unmanaged, 2 digital out, 3 PWM, 4 digital in, then one analog pin."""
    return [
        descriptor(0x7F),
        descriptor(0x7F),
        descriptor(PinMode.DIGITAL_OUTPUT, DIGITAL_IN, DIGITAL_OUT),
        descriptor(PinMode.PWM, DIGITAL_IN, DIGITAL_OUT, PWM_8, SERVO_14),
        descriptor(PinMode.DIGITAL_INPUT, DIGITAL_IN, DIGITAL_OUT),
        descriptor(PinMode.ANALOG_INPUT, DIGITAL_IN, DIGITAL_OUT, ANALOG_10, analog=True),
    ]


@pytest.fixture
def transport(uno_like_pins):
    return FakeTransport(uno_like_pins)

"""Tests for the validated board handle."""

from unittest.mock import MagicMock

import pytest

from arduino_bridge.arduino_cli.devices import DeviceRecord
from arduino_bridge.board import ArduinoBoard
from arduino_bridge.errors import (
    InvalidModeError,
    InvalidPinIndexError,
    UnimplementedModeError,
    ValueOutOfBoundsError,
)
from arduino_bridge.pins import PinMode

from conftest import DIGITAL_IN, DIGITAL_OUT, PWM_8, FakeTransport, descriptor


@pytest.fixture
def board(transport):
    return ArduinoBoard(transport)


class TestSnapshot:
    def test_initial_snapshot_taken_eagerly(self, transport):
        ArduinoBoard(transport)
        assert transport.pins_calls == 1

    def test_analog_pins_excluded(self, board):
        assert len(board.digital_pins) == 5

    def test_pins_in_transport_order(self, board):
        modes = [p.mode for p in board.digital_pins]
        assert modes == [None, None, PinMode.DIGITAL_OUTPUT, PinMode.PWM, PinMode.DIGITAL_INPUT]

    def test_refresh_is_idempotent(self, board, transport):
        first = board.refresh()
        second = board.refresh()
        assert first == second
        assert transport.calls == []

    def test_refresh_picks_up_device_changes(self, board, transport):
        transport.descriptors[4] = descriptor(PinMode.DIGITAL_OUTPUT, DIGITAL_IN, DIGITAL_OUT)
        assert board.digital_pins[4].mode is PinMode.DIGITAL_INPUT
        board.refresh()
        assert board.digital_pins[4].mode is PinMode.DIGITAL_OUTPUT

    def test_pin_lookup(self, board):
        assert board.pin(3).bit_resolution == 8


class TestWrite:
    def test_digital_write(self, board, transport):
        board.write(2, 1)
        assert transport.calls == [("digital_write", 2, 1)]

    def test_pwm_write(self, board, transport):
        board.write(3, 200)
        assert transport.calls == [("analog_write", 3, 200)]

    def test_write_refreshes(self, board, transport):
        before = transport.pins_calls
        board.write(2, 0)
        assert transport.pins_calls == before + 1

    @pytest.mark.parametrize("index", [-1, 5, 100])
    def test_invalid_index(self, board, transport, index):
        with pytest.raises(InvalidPinIndexError):
            board.write(index, 0)
        assert transport.calls == []

    def test_boundary_value_rejected(self, board, transport):
        with pytest.raises(ValueOutOfBoundsError):
            board.write(3, 256)
        with pytest.raises(ValueOutOfBoundsError):
            board.write(2, 2)
        assert transport.calls == []

    def test_negative_value_rejected(self, board):
        with pytest.raises(ValueOutOfBoundsError):
            board.write(3, -1)

    def test_max_value_accepted(self, board, transport):
        board.write(3, 255)
        assert transport.calls == [("analog_write", 3, 255)]

    def test_wide_pwm_value_reaches_transport(self):
        transport = FakeTransport([descriptor(PinMode.PWM, (PinMode.PWM, 16))])
        board = ArduinoBoard(transport)
        board.write(0, 40000)
        assert transport.calls == [("analog_write", 0, 40000)]
        with pytest.raises(ValueOutOfBoundsError):
            board.write(0, 1 << 16)

    def test_input_mode_unimplemented(self, board, transport):
        with pytest.raises(UnimplementedModeError):
            board.write(4, 1)
        assert transport.calls == []

    def test_unmanaged_pin_unimplemented(self, board):
        with pytest.raises(UnimplementedModeError):
            board.write(0, 0)

    def test_failed_write_does_not_refresh(self, board, transport):
        before = transport.pins_calls
        with pytest.raises(ValueOutOfBoundsError):
            board.write(3, 1000)
        assert transport.pins_calls == before


class TestSetPinMode:
    def test_set_supported_mode(self, board, transport):
        board.set_pin_mode(3, PinMode.DIGITAL_OUTPUT)
        assert transport.calls == [("set_pin_mode", 3, 0x1)]
        assert board.digital_pins[3].mode is PinMode.DIGITAL_OUTPUT

    def test_resolution_follows_new_mode(self, board):
        assert board.digital_pins[3].bit_resolution == 8
        board.set_pin_mode(3, PinMode.SERVO)
        assert board.digital_pins[3].bit_resolution == 14

    def test_unsupported_mode_rejected(self, board, transport):
        with pytest.raises(InvalidModeError):
            board.set_pin_mode(2, PinMode.PWM)
        assert transport.calls == []

    def test_rejected_mode_is_repeatable(self, board, transport):
        before = board.digital_pins
        for _ in range(2):
            with pytest.raises(InvalidModeError):
                board.set_pin_mode(4, PinMode.SERVO)
        assert board.digital_pins == before
        assert transport.calls == []

    def test_invalid_index(self, board):
        with pytest.raises(InvalidPinIndexError):
            board.set_pin_mode(9, PinMode.DIGITAL_OUTPUT)

    def test_change_on_one_pin_visible_on_another(self):
        # Switching pin 1 to PWM takes the timer that pin 0 uses for PWM.
        def share_timer(transport, pin, mode):
            if pin == 1 and mode == PinMode.PWM:
                transport.descriptors[0] = descriptor(PinMode.DIGITAL_OUTPUT, DIGITAL_IN, DIGITAL_OUT)

        transport = FakeTransport(
            [
                descriptor(PinMode.DIGITAL_OUTPUT, DIGITAL_IN, DIGITAL_OUT, PWM_8),
                descriptor(PinMode.DIGITAL_OUTPUT, DIGITAL_IN, DIGITAL_OUT, PWM_8),
            ],
            on_set_mode=share_timer,
        )
        board = ArduinoBoard(transport)
        assert board.digital_pins[0].supports(PinMode.PWM)

        board.set_pin_mode(1, PinMode.PWM)

        assert not board.digital_pins[0].supports(PinMode.PWM)
        with pytest.raises(InvalidModeError):
            board.set_pin_mode(0, PinMode.PWM)


class TestLifecycle:
    def test_context_manager_closes_transport(self, transport):
        with ArduinoBoard(transport) as board:
            board.write(2, 1)
        assert transport.closed

    def test_connect_uses_device_port(self, transport):
        factory = MagicMock(return_value=transport)
        device = DeviceRecord(name="Arduino Uno", fqbn="arduino:avr:uno", port="/dev/ttyACM0", usb_id="0x2341")
        board = ArduinoBoard.connect(device, transport_factory=factory)
        factory.assert_called_once_with("/dev/ttyACM0", baud_rate=57600)
        assert len(board.digital_pins) == 5

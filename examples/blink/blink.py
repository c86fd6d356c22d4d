import sys
import time

from arduino_bridge import ArduinoBoard, PinMode, PinState
from arduino_bridge.arduino_cli import board_list_serial, require_single_device

LED = 13  # Position among the non-analog pins; equals the pin number on an Uno

device = require_single_device(board_list_serial())
print(f"Connecting to {device.name} on {device.port}")

with ArduinoBoard.connect(device) as board:
    if board.pin(LED).mode != PinMode.DIGITAL_OUTPUT:
        board.set_pin_mode(LED, PinMode.DIGITAL_OUTPUT)

    for _ in range(10):
        board.write(LED, PinState.HIGH)
        time.sleep(0.5)
        board.write(LED, PinState.LOW)
        time.sleep(0.5)

    if board.pin(LED).mode != PinMode.DIGITAL_OUTPUT:
        print("LED pin left digital-output mode.")
        sys.exit(1)

print("Done.")

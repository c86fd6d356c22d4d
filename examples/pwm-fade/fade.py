import sys
import time

from arduino_bridge import ArduinoBoard, PinMode
from arduino_bridge.arduino_cli import board_list_serial, require_single_device
from arduino_bridge.transport import FirmataTransport

PORT = None  # Set to e.g. "/dev/ttyACM0" to skip discovery
LED = 9  # Position among the non-analog pins; equals the pin number on an Uno

if PORT is None:
    PORT = require_single_device(board_list_serial()).port

with ArduinoBoard(FirmataTransport.open(PORT)) as board:
    pin = board.pin(LED)
    if not pin.supports(PinMode.PWM):
        print(f"Pin {LED} has no PWM. Supported: {[m.label for m in pin.supported_modes]}")
        sys.exit(1)

    board.set_pin_mode(LED, PinMode.PWM)
    top = board.pin(LED).valid_values.stop - 1
    print(f"Fading pin {LED} over 0..{top}")

    for step in list(range(0, top + 1, max(top // 32, 1))) + [0]:
        board.write(LED, step)
        time.sleep(0.03)

print("Done.")

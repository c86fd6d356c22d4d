"""Board discovery via `arduino-cli board list --format json`."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass

from arduino_bridge.arduino_cli.runner import ArduinoCli
from arduino_bridge.errors import MultipleDevicesError, NoDeviceError, UnknownFormatError

logger = logging.getLogger(__name__)

# arduino-cli lists boards whose core is not installed with these placeholders.
UNKNOWN_CORE_NAME = "unknown"
UNKNOWN_CORE_FQBN = ""

# JSON key -> DeviceRecord field.
_JSON_FIELDS = {"name": "name", "fqbn": "fqbn", "port": "port", "usbID": "usb_id"}


@dataclass
class DeviceRecord:
    """A board listed by arduino-cli.

    A board whose core is not installed carries placeholder name and FQBN;
    check for it with has_unknown_core().
    """
    name: str
    fqbn: str
    port: str
    usb_id: str

    def has_unknown_core(self) -> bool:
        """True if the board's core was not installed when it was listed."""
        return self.name == UNKNOWN_CORE_NAME and self.fqbn == UNKNOWN_CORE_FQBN

    @classmethod
    def from_json(cls, data) -> DeviceRecord:
        if not isinstance(data, dict):
            raise UnknownFormatError(f"Expected a board object, got {type(data).__name__}")
        values = {}
        for key, attr in _JSON_FIELDS.items():
            value = data.get(key)
            if not isinstance(value, str):
                raise UnknownFormatError(f"Board entry has no string field {key!r}")
            values[attr] = value
        return cls(**values)

    def to_json(self) -> dict:
        values = asdict(self)
        return {key: values[attr] for key, attr in _JSON_FIELDS.items()}


def parse_board_list(text: str) -> list[DeviceRecord]:
    """Return the serial boards of a JSON board list. Network boards are dropped."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise UnknownFormatError(f"Board list is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise UnknownFormatError("Board list is not a JSON object")

    serial_boards = data.get("serialBoards")
    network_boards = data.get("networkBoards")
    if not isinstance(serial_boards, list) or not isinstance(network_boards, list):
        raise UnknownFormatError("Board list needs 'serialBoards' and 'networkBoards' lists")

    # Network boards are validated too, but cannot be reached over Firmata.
    for entry in network_boards:
        DeviceRecord.from_json(entry)
    if network_boards:
        logger.debug("Ignoring %d network board(s)", len(network_boards))

    return [DeviceRecord.from_json(entry) for entry in serial_boards]


def format_board_list(records: list[DeviceRecord]) -> str:
    """Render records in the JSON board list format, all as serial boards."""
    return json.dumps({
        "serialBoards": [r.to_json() for r in records],
        "networkBoards": [],
    })


def board_list_serial(cli: ArduinoCli | None = None) -> list[DeviceRecord]:
    """List the serial boards currently connected, via arduino-cli."""
    cli = cli or ArduinoCli()
    return parse_board_list(cli.output("board", "list", "--format", "json"))


def require_single_device(records: list[DeviceRecord]) -> DeviceRecord:
    """Return the only record, or raise NoDeviceError / MultipleDevicesError."""
    if not records:
        raise NoDeviceError("No board connected")
    if len(records) > 1:
        ports = ", ".join(r.port for r in records)
        raise MultipleDevicesError(f"{len(records)} boards connected ({ports}); expected one")
    return records[0]

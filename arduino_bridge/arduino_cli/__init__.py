"""Interface to the Arduino CLI.

Everything here shells out to `arduino-cli` (or the executable configured in
arduino-bridge.toml). Failures to run it raise CommandFailureError.
"""

from arduino_bridge.arduino_cli.cores import Core, core_list_all, install_core, update_core_index
from arduino_bridge.arduino_cli.devices import (
    DeviceRecord,
    board_list_serial,
    parse_board_list,
    require_single_device,
)
from arduino_bridge.arduino_cli.query import Query, parse_board_table, query
from arduino_bridge.arduino_cli.runner import ArduinoCli
from arduino_bridge.arduino_cli.sketch import compile_sketch, upload_sketch, validate_sketch_path

__all__ = [
    "ArduinoCli",
    "Core",
    "DeviceRecord",
    "Query",
    "board_list_serial",
    "compile_sketch",
    "core_list_all",
    "install_core",
    "parse_board_list",
    "parse_board_table",
    "query",
    "require_single_device",
    "update_core_index",
    "upload_sketch",
    "validate_sketch_path",
]

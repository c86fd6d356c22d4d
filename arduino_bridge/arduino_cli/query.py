"""Single-field queries against the tabular `arduino-cli board list` output."""

from __future__ import annotations

import re
from enum import IntEnum

from arduino_bridge.arduino_cli.devices import UNKNOWN_CORE_NAME, DeviceRecord
from arduino_bridge.arduino_cli.runner import ArduinoCli
from arduino_bridge.errors import MultipleDevicesError, NoDeviceError, UnexpectedSyntaxError

_BLANK_LINE = re.compile(r"^\s*$")

# <fqbn> <port> <id> <board name>
FIELD_COUNT = 4


class Query(IntEnum):
    """Fields of a board list row, valued by column."""

    FQBN = 0
    PORT = 1
    ID = 2
    BOARD_NAME = 3

    @property
    def label(self) -> str:
        return self.name.lower().replace("_", "-")


# Query -> DeviceRecord field.
_QUERY_FIELDS = {
    Query.FQBN: "fqbn",
    Query.PORT: "port",
    Query.ID: "usb_id",
    Query.BOARD_NAME: "name",
}


def board_entry(board_list: str) -> str:
    """Return the single board row of a tabular board list.

    The first line is a header; blank lines are skipped.
    """
    entry = None
    for line in board_list.splitlines()[1:]:
        if _BLANK_LINE.match(line):
            continue
        if entry is not None:
            raise MultipleDevicesError("More than one board connected")
        entry = line

    if entry is None:
        raise NoDeviceError("No board connected")
    return entry


def entry_fields(entry: str) -> list[str]:
    """Split a board row into its four fields.

    Rows are tab-separated; a row without tabs is split on whitespace, with
    the board name taking the remainder of the line.
    """
    if "\t" in entry:
        fields = entry.split("\t")
    else:
        fields = entry.split(None, FIELD_COUNT - 1)

    if len(fields) != FIELD_COUNT:
        raise UnexpectedSyntaxError(
            f"Expected {FIELD_COUNT} fields in board entry, got {len(fields)}: {entry!r}"
        )
    return fields


def parse_board_table(board_list: str) -> DeviceRecord:
    """Parse the single board of a tabular board list into a DeviceRecord.

    A board with a blank FQBN has no installed core and is returned with the
    placeholder name, so DeviceRecord.has_unknown_core() reports it.
    """
    fqbn, port, usb_id, name = entry_fields(board_entry(board_list))
    if not fqbn.strip():
        return DeviceRecord(name=UNKNOWN_CORE_NAME, fqbn="", port=port.strip(), usb_id=usb_id.strip())
    return DeviceRecord(name=name.strip(), fqbn=fqbn.strip(), port=port.strip(), usb_id=usb_id.strip())


def query_from_board_list(query: Query, board_list: str) -> str:
    """Extract one field of the single board in a tabular board list.

    Answers come from parse_board_table, so a board with no installed core
    reports an empty FQBN and the placeholder board name.
    """
    record = parse_board_table(board_list)
    return getattr(record, _QUERY_FIELDS[query])


def query(query: Query, cli: ArduinoCli | None = None) -> str:
    """Ask arduino-cli for one field of the single connected board."""
    cli = cli or ArduinoCli()
    return query_from_board_list(query, cli.output("board", "list"))

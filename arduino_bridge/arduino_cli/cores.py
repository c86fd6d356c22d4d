"""Board core management via arduino-cli."""

from __future__ import annotations

import json
from dataclasses import dataclass

from arduino_bridge.arduino_cli.runner import ArduinoCli
from arduino_bridge.errors import UnknownFormatError


@dataclass
class Core:
    """A platform core, as listed by `arduino-cli core search`."""
    id: str
    version: str
    name: str


def parse_core_list(text: str) -> list[Core]:
    """Parse the JSON output of `arduino-cli core search '' --format json`."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise UnknownFormatError(f"Core list is not valid JSON: {e}") from e

    platforms = data.get("Platforms") if isinstance(data, dict) else None
    if not isinstance(platforms, list):
        raise UnknownFormatError("Core list has no 'Platforms' list")

    cores = []
    for entry in platforms:
        if not isinstance(entry, dict):
            raise UnknownFormatError("Core entry is not an object")
        values = [entry.get(key) for key in ("ID", "Version", "Name")]
        if not all(isinstance(v, str) for v in values):
            raise UnknownFormatError(f"Core entry is missing ID, Version or Name: {entry}")
        cores.append(Core(*values))
    return cores


def core_list_all(cli: ArduinoCli | None = None) -> list[Core]:
    """List every core known to the local index."""
    cli = cli or ArduinoCli()
    return parse_core_list(cli.output("core", "search", "", "--format", "json"))


def install_core(core_id: str, cli: ArduinoCli | None = None) -> None:
    """Install a core, e.g. 'arduino:avr'."""
    cli = cli or ArduinoCli()
    cli.run_quiet("core", "install", core_id)


def update_core_index(cli: ArduinoCli | None = None) -> None:
    """Refresh the local core index. Only a failure to run arduino-cli raises."""
    cli = cli or ArduinoCli()
    cli.run_quiet("core", "update-index", check=False)

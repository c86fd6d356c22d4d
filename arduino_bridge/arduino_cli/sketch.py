"""Compiling and uploading sketches with arduino-cli."""

from __future__ import annotations

from pathlib import Path

from arduino_bridge.arduino_cli.devices import DeviceRecord, board_list_serial, require_single_device
from arduino_bridge.arduino_cli.runner import ArduinoCli
from arduino_bridge.errors import CommandFailureError, InvalidSketchPathError


def validate_sketch_path(sketch: Path | str) -> Path:
    """Return the resolved sketch directory.

    A sketch is a directory containing a .ino file named after it, e.g.
    ``blink/blink.ino``.
    """
    try:
        path = Path(sketch).resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise InvalidSketchPathError(f"Sketch path does not exist: {sketch}") from e

    if not path.is_dir():
        raise InvalidSketchPathError(f"Sketch path is not a directory: {path}")
    if not (path / f"{path.name}.ino").is_file():
        raise InvalidSketchPathError(f"Sketch directory has no {path.name}.ino: {path}")
    return path


def compile_sketch(
    sketch: Path | str,
    device: DeviceRecord | None = None,
    cli: ArduinoCli | None = None,
) -> None:
    """Compile a sketch directory for the given (or the single connected) board."""
    path = validate_sketch_path(sketch)
    cli = cli or ArduinoCli()
    device = _resolve_device(device, cli)
    cli.run_quiet("compile", "--fqbn", device.fqbn, str(path))


def upload_sketch(
    sketch: Path | str,
    device: DeviceRecord | None = None,
    cli: ArduinoCli | None = None,
) -> None:
    """Upload a compiled sketch to the given (or the single connected) board."""
    path = validate_sketch_path(sketch)
    cli = cli or ArduinoCli()
    device = _resolve_device(device, cli)
    cli.run_quiet("upload", "--port", device.port, "--fqbn", device.fqbn, str(path))


def _resolve_device(device: DeviceRecord | None, cli: ArduinoCli) -> DeviceRecord:
    if device is None:
        device = require_single_device(board_list_serial(cli))
    if device.has_unknown_core():
        raise CommandFailureError(
            f"The core for the board on {device.port} is not installed; "
            f"install it with 'arduino-cli core install'"
        )
    return device

"""CLI entry point for arduino-bridge."""

import json as jsonmod
import logging
from pathlib import Path

import click
from serial.tools.list_ports import comports

from arduino_bridge.arduino_cli import (
    ArduinoCli,
    Query,
    board_list_serial,
    compile_sketch,
    core_list_all,
    install_core,
    query,
    require_single_device,
    update_core_index,
    upload_sketch,
)
from arduino_bridge.board import ArduinoBoard
from arduino_bridge.config import get_config_value, list_config, load_config
from arduino_bridge.errors import ArduinoBridgeError
from arduino_bridge.pins import PinMode
from arduino_bridge.transport import FirmataTransport

_MODE_CHOICES = [m.label for m in PinMode]
_QUERY_CHOICES = [q.label for q in Query]


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log arduino-cli calls and board traffic.")
def main(verbose):
    """Control an Arduino over Firmata and drive arduino-cli."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )


def _fail(error: ArduinoBridgeError, use_json: bool = False):
    """Report an error and exit with its exit code."""
    if use_json:
        click.echo(jsonmod.dumps(error.to_dict()), err=True)
    else:
        click.echo(f"Error: {error.message}", err=True)
    raise SystemExit(error.exit_code)


def _cli() -> ArduinoCli:
    return ArduinoCli.from_config(load_config(Path.cwd()))


def _open_board(port: str | None, baud: int | None) -> ArduinoBoard:
    """Connect to the board on --port, the configured port, or the single detected board.

    Resolution order: CLI flag > arduino-bridge.toml > arduino-cli discovery.
    """
    config = load_config(Path.cwd())
    port = port or config.serial.port
    baud = baud or config.serial.baud_rate
    if port is None:
        port = require_single_device(board_list_serial(_cli())).port
    transport = FirmataTransport.open(port, baud_rate=baud)
    try:
        return ArduinoBoard(transport)
    except BaseException:
        transport.close()
        raise


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------

@main.command()
@click.option("--json", "use_json", is_flag=True, help="Output JSON.")
def boards(use_json):
    """List boards connected over serial."""
    try:
        records = board_list_serial(_cli())
    except ArduinoBridgeError as e:
        _fail(e, use_json)

    if use_json:
        click.echo(jsonmod.dumps([r.to_json() for r in records], indent=2))
        return
    if not records:
        click.echo("No boards found.")
        return
    for r in records:
        if r.has_unknown_core():
            click.echo(f"  {r.port:<25} (core not installed)  {r.usb_id}")
        else:
            click.echo(f"  {r.port:<25} {r.fqbn:<30} {r.name}")


@main.command("query")
@click.argument("field", type=click.Choice(_QUERY_CHOICES))
def query_cmd(field):
    """Print one field of the single connected board."""
    q = Query[field.upper().replace("-", "_")]
    try:
        click.echo(query(q, _cli()))
    except ArduinoBridgeError as e:
        _fail(e)


# ---------------------------------------------------------------------------
# Build and deploy
# ---------------------------------------------------------------------------

@main.command("compile")
@click.argument("sketch", type=click.Path())
def compile_cmd(sketch):
    """Compile a sketch directory for the connected board."""
    try:
        compile_sketch(sketch, cli=_cli())
    except ArduinoBridgeError as e:
        _fail(e)
    click.echo(f"Compiled {sketch}")


@main.command("upload")
@click.argument("sketch", type=click.Path())
def upload_cmd(sketch):
    """Upload a compiled sketch to the connected board."""
    try:
        upload_sketch(sketch, cli=_cli())
    except ArduinoBridgeError as e:
        _fail(e)
    click.echo(f"Uploaded {sketch}")


@main.group()
def core():
    """Manage board cores."""
    pass


@core.command("list")
@click.option("--json", "use_json", is_flag=True, help="Output JSON.")
def core_list_cmd(use_json):
    """List all cores in the local index."""
    try:
        cores = core_list_all(_cli())
    except ArduinoBridgeError as e:
        _fail(e, use_json)

    if use_json:
        data = [{"id": c.id, "version": c.version, "name": c.name} for c in cores]
        click.echo(jsonmod.dumps(data, indent=2))
        return
    for c in cores:
        click.echo(f"  {c.id:<35} {c.version:<10} {c.name}")


@core.command("install")
@click.argument("core_id")
def core_install_cmd(core_id):
    """Install a core, e.g. arduino:avr."""
    try:
        install_core(core_id, _cli())
    except ArduinoBridgeError as e:
        _fail(e)
    click.echo(f"Installed {core_id}")


@core.command("update-index")
def core_update_index_cmd():
    """Refresh the local core index."""
    try:
        update_core_index(_cli())
    except ArduinoBridgeError as e:
        _fail(e)
    click.echo("Core index updated.")


# ---------------------------------------------------------------------------
# Pin control
# ---------------------------------------------------------------------------

@main.command()
@click.option("--port", type=str, help="Serial port of the board.")
@click.option("--baud", type=int, help="Firmata baud rate.")
@click.option("--json", "use_json", is_flag=True, help="Output JSON.")
def pins(port, baud, use_json):
    """Show the mode and capabilities of every digital pin."""
    try:
        with _open_board(port, baud) as board:
            snapshot = board.digital_pins
    except ArduinoBridgeError as e:
        _fail(e, use_json)

    if use_json:
        click.echo(jsonmod.dumps([p.to_dict() for p in snapshot], indent=2))
        return
    for index, p in enumerate(snapshot):
        mode = p.mode.label if p.mode is not None else "?"
        supported = ", ".join(m.label for m in p.supported_modes) or "-"
        click.echo(f"  {index:>3}  {mode:<15} {p.bit_resolution:>2}-bit  [{supported}]")


@main.command()
@click.argument("index", type=int)
@click.argument("value", type=int)
@click.option("--port", type=str, help="Serial port of the board.")
@click.option("--baud", type=int, help="Firmata baud rate.")
def write(index, value, port, baud):
    """Write VALUE to the digital pin at INDEX."""
    try:
        with _open_board(port, baud) as board:
            board.write(index, value)
    except ArduinoBridgeError as e:
        _fail(e)
    click.echo(f"Pin {index} = {value}")


@main.command()
@click.argument("index", type=int)
@click.argument("mode", type=click.Choice(_MODE_CHOICES))
@click.option("--port", type=str, help="Serial port of the board.")
@click.option("--baud", type=int, help="Firmata baud rate.")
def mode(index, mode, port, baud):
    """Set the digital pin at INDEX to MODE."""
    try:
        with _open_board(port, baud) as board:
            board.set_pin_mode(index, PinMode.from_name(mode))
    except ArduinoBridgeError as e:
        _fail(e)
    click.echo(f"Pin {index} set to {mode}")


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------

@main.command()
def doctor():
    """Check that arduino-cli and a serial port are available."""
    ok = True

    cli = _cli()
    path = cli.which()
    if path:
        click.echo(f"[OK] {cli.executable} found at {path}")
    else:
        click.echo(f"[!!] {cli.executable} not found. Install from https://arduino.github.io/arduino-cli/")
        ok = False

    ports = [p.device for p in comports()]
    if ports:
        click.echo("[OK] Serial ports found:")
        for p in ports:
            click.echo(f"     {p}")
    else:
        click.echo("[!!] No serial ports detected. Is a board connected via USB?")
        ok = False

    if ok:
        click.echo("\nAll checks passed.")
    else:
        click.echo("\nSome checks failed. Fix the issues above.")
        raise SystemExit(1)


@main.command("config")
@click.argument("key", required=False)
@click.option("--list", "show_list", is_flag=True, help="Show all config values.")
def config_cmd(key, show_list):
    """Show arduino-bridge.toml configuration values."""
    project_dir = Path.cwd()

    if show_list:
        values = list_config(project_dir)
        if not values:
            click.echo("No configuration found.")
            return
        for k, v in sorted(values.items()):
            click.echo(f"  {k} = {v}")
        return

    if key:
        val = get_config_value(project_dir, key)
        if val is None:
            click.echo(f"{key} is not set.")
        else:
            click.echo(f"{key} = {val}")
        return

    click.echo("Usage: arduino-bridge config <KEY> or arduino-bridge config --list")

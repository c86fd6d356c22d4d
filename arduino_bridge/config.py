"""Project configuration for arduino-bridge."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[no-redef]

from arduino_bridge.arduino_cli.runner import DEFAULT_EXECUTABLE, DEFAULT_TIMEOUT
from arduino_bridge.transport import DEFAULT_BAUD_RATE

CONFIG_FILENAME = "arduino-bridge.toml"


@dataclass
class ArduinoCliConfig:
    executable: str = DEFAULT_EXECUTABLE
    timeout: float | None = DEFAULT_TIMEOUT


@dataclass
class SerialConfig:
    port: str | None = None
    baud_rate: int = DEFAULT_BAUD_RATE


@dataclass
class BridgeConfig:
    arduino_cli: ArduinoCliConfig = field(default_factory=ArduinoCliConfig)
    serial: SerialConfig = field(default_factory=SerialConfig)


def _read_toml(project_dir: Path | str) -> dict:
    toml_path = Path(project_dir) / CONFIG_FILENAME
    if not toml_path.exists():
        return {}
    with open(toml_path, "rb") as f:
        return tomllib.load(f)


def load_config(project_dir: Path | str) -> BridgeConfig:
    """Parse arduino-bridge.toml, falling back to defaults when it is absent.

    A timeout of 0 disables the arduino-cli timeout.
    """
    data = _read_toml(project_dir)
    cli_data = data.get("arduino_cli", {})
    serial_data = data.get("serial", {})

    timeout = cli_data.get("timeout", DEFAULT_TIMEOUT)
    return BridgeConfig(
        arduino_cli=ArduinoCliConfig(
            executable=cli_data.get("executable", DEFAULT_EXECUTABLE),
            timeout=float(timeout) if timeout else None,
        ),
        serial=SerialConfig(
            port=serial_data.get("port"),
            baud_rate=serial_data.get("baud_rate", DEFAULT_BAUD_RATE),
        ),
    )


def get_config_value(project_dir: Path | str, key: str):
    """Dotted key lookup, e.g. 'serial.port', 'arduino_cli.timeout'."""
    data = _read_toml(project_dir)
    parts = key.split(".", 1)
    if len(parts) == 2:
        section, k = parts
        return data.get(section, {}).get(k)
    return data.get(key)


def list_config(project_dir: Path | str) -> dict:
    """Return a flat dotted-key dict of all config values."""
    result = {}
    for section, values in _read_toml(project_dir).items():
        if isinstance(values, dict):
            for k, v in values.items():
                result[f"{section}.{k}"] = v
        else:
            result[section] = values
    return result

"""Invocation of the arduino-cli executable."""

from __future__ import annotations

import logging
import shutil
import subprocess

from arduino_bridge.errors import CommandFailureError

logger = logging.getLogger(__name__)

DEFAULT_EXECUTABLE = "arduino-cli"
DEFAULT_TIMEOUT = 120.0


class ArduinoCli:
    """Runs arduino-cli subcommands, turning every failure into CommandFailureError."""

    def __init__(self, executable: str = DEFAULT_EXECUTABLE, timeout: float | None = DEFAULT_TIMEOUT):
        self.executable = executable
        self.timeout = timeout

    @classmethod
    def from_config(cls, config) -> ArduinoCli:
        return cls(executable=config.arduino_cli.executable, timeout=config.arduino_cli.timeout)

    def output(self, *args: str) -> str:
        """Run a subcommand and return its stdout decoded as UTF-8.

        The exit status is not checked; arduino-cli still prints a usable
        listing when some discovery backends fail.
        """
        result = self._run(args, capture_output=True)
        try:
            return result.stdout.decode("utf-8")
        except UnicodeDecodeError as e:
            raise CommandFailureError(f"{self.executable} produced non-UTF-8 output") from e

    def run_quiet(self, *args: str, check: bool = True) -> None:
        """Run a subcommand with its output streams discarded."""
        result = self._run(args, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
        if check and result.returncode != 0:
            raise CommandFailureError(
                f"{self.executable} {args[0]} exited with status {result.returncode}"
            )

    def which(self) -> str | None:
        """Return the resolved path of the executable, or None if it is not on PATH."""
        return shutil.which(self.executable)

    def _run(self, args: tuple[str, ...], **kwargs) -> subprocess.CompletedProcess:
        command = [self.executable, *args]
        logger.debug("Running %s", " ".join(command))
        try:
            return subprocess.run(command, timeout=self.timeout, **kwargs)
        except FileNotFoundError as e:
            raise CommandFailureError(f"{self.executable} not found on PATH") from e
        except subprocess.TimeoutExpired as e:
            raise CommandFailureError(
                f"{self.executable} {args[0]} timed out after {self.timeout}s"
            ) from e
        except OSError as e:
            raise CommandFailureError(f"Could not run {self.executable}: {e}") from e

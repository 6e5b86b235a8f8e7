"""External process invocation.

Commands are run to completion with stdout and stderr merged. Output goes to
the ``opencursor.runner`` logger for diagnostics and is never printed to the
console directly.
"""

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

from opencursor.core.errors import (
    CommandTimeoutError,
    PrerequisiteMissingError,
    ProcessFailureError,
)

logger = logging.getLogger("opencursor.runner")


@dataclass
class CommandResult:
    """Result of a finished command."""

    command: str
    returncode: int
    output: str


def command_exists(name: str) -> bool:
    """Check whether an executable is available on PATH."""
    return shutil.which(name) is not None


class CommandRunner:
    """Runs external commands for installer steps."""

    def run(
        self,
        command: str,
        args: list[str] | None = None,
        cwd: Path | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        """Run a command and wait for it to exit.

        Args:
            command: Executable name or path
            args: Arguments passed to the executable
            cwd: Working directory
            timeout: Seconds to wait before terminating the process

        Returns:
            CommandResult with the combined output

        Raises:
            PrerequisiteMissingError: If the executable cannot be found
            CommandTimeoutError: If the timeout expired
            ProcessFailureError: If the command exited with a non-zero status
        """
        cmd = [command, *(args or [])]
        display = " ".join(cmd)
        logger.debug("Running command: %s (cwd=%s)", display, cwd)

        try:
            proc = subprocess.run(
                cmd,
                cwd=cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                encoding="utf-8",
                errors="replace",
                timeout=timeout,
                check=False,
            )
        except FileNotFoundError as e:
            logger.error("Executable not found: %s", command)
            raise PrerequisiteMissingError(command) from e
        except subprocess.TimeoutExpired as e:
            output = _decode(e.output)
            _log_output(display, output)
            logger.error("Command timed out after %ss: %s", timeout, display)
            raise CommandTimeoutError(display, timeout or 0, output) from e

        _log_output(display, proc.stdout or "")

        if proc.returncode != 0:
            logger.error("Command failed with exit code %d: %s", proc.returncode, display)
            raise ProcessFailureError(display, proc.returncode, proc.stdout or "")

        return CommandResult(command=display, returncode=proc.returncode, output=proc.stdout or "")


def _decode(output: str | bytes | None) -> str:
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode(errors="replace")
    return output


def _log_output(display: str, output: str) -> None:
    logger.debug("=== %s ===", display)
    for line in output.splitlines():
        logger.debug("  %s", line)

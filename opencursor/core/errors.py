"""Exception hierarchy for installer steps.

Every step signals failure by raising an InstallError subclass. The pipeline
only looks at whether a step raised, never at which subclass; the kind is
carried for messages and logs.
"""

from pathlib import Path


class InstallError(Exception):
    """Base error for installation and removal steps."""

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        super().__init__(message)


class PrerequisiteMissingError(InstallError):
    """A required external tool is not available on PATH."""

    def __init__(self, tool: str, hint: str | None = None):
        self.tool = tool
        self.hint = hint
        message = f"{tool} not found"
        if hint:
            message += f" - install with: {hint}"
        super().__init__(message)


class ProcessFailureError(InstallError):
    """An external command exited with a non-zero status."""

    def __init__(
        self,
        command: str,
        returncode: int | None,
        output: str = "",
        message: str | None = None,
    ):
        self.command = command
        self.returncode = returncode
        self.output = output
        super().__init__(message or f"{command} failed (exit code {returncode})")


class CommandTimeoutError(ProcessFailureError):
    """An external command exceeded its timeout and was terminated."""

    def __init__(self, command: str, timeout: float, output: str = ""):
        self.timeout = timeout
        super().__init__(
            command, None, output, message=f"{command} timed out after {timeout:g} seconds"
        )


class FileOperationError(InstallError):
    """Reading, writing or removing a file failed."""


class LinkError(InstallError):
    """Creating, verifying or removing a symbolic link failed."""


class ConfigValidationError(InstallError):
    """A written configuration file is missing an expected entry."""


class RollbackError(InstallError):
    """One or more backed-up paths could not be restored."""

    def __init__(self, failures: list[tuple[Path, str]]):
        self.failures = failures
        details = "; ".join(f"{path}: {reason}" for path, reason in failures)
        super().__init__(f"could not restore {len(failures)} file(s): {details}")

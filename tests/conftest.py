"""Shared fixtures for opencursor tests."""

import shutil
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from opencursor.config.schemas import InstallPaths, ProviderSpec, build_provider_spec
from opencursor.core.context import RunContext
from opencursor.core.runner import CommandResult, CommandRunner


class FakeRunner(CommandRunner):
    """CommandRunner that records calls instead of starting processes.

    Commands are matched by prefix against their display string
    (e.g. "bun run build").
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, Path | None, float | None]] = []
        self.outputs: dict[str, str] = {}
        self.failures: dict[str, Exception] = {}
        self.hooks: dict[str, Callable[[], None]] = {}

    def run(
        self,
        command: str,
        args: list[str] | None = None,
        cwd: Path | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        display = " ".join([command, *(args or [])])
        self.calls.append((display, cwd, timeout))

        for prefix, hook in self.hooks.items():
            if display.startswith(prefix):
                hook()
        for prefix, error in self.failures.items():
            if display.startswith(prefix):
                raise error

        output = next(
            (out for prefix, out in self.outputs.items() if display.startswith(prefix)), ""
        )
        return CommandResult(command=display, returncode=0, output=output)

    @property
    def commands(self) -> list[str]:
        return [display for display, _, _ in self.calls]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory."""
    path = Path(tempfile.mkdtemp(prefix="opencursor_test_"))
    yield path
    if path.exists():
        shutil.rmtree(path)


@pytest.fixture
def install_paths(temp_dir: Path) -> InstallPaths:
    """Install locations inside the temporary directory."""
    host_dir = temp_dir / "config" / "opencode"
    project_dir = temp_dir / "project"
    project_dir.mkdir()
    return InstallPaths(
        host_dir=host_dir,
        config_path=host_dir / "opencode.json",
        plugin_dir=host_dir / "plugin",
        project_dir=project_dir,
        cache_dir=temp_dir / "cache" / "opencode" / "node_modules",
    )


@pytest.fixture
def built_project(install_paths: InstallPaths) -> Path:
    """Project directory with a non-empty build artifact."""
    artifact = install_paths.artifact_path
    artifact.parent.mkdir(parents=True, exist_ok=True)
    artifact.write_text("module.exports = {};\n")
    return install_paths.project_dir


@pytest.fixture
def provider_spec() -> ProviderSpec:
    """Provider entry with a short model list."""
    return build_provider_spec(models={"auto": "Cursor Agent Auto"})


@pytest.fixture
def fake_runner() -> FakeRunner:
    """Runner that never starts real processes."""
    return FakeRunner()


@pytest.fixture
def install_context(
    install_paths: InstallPaths, provider_spec: ProviderSpec, fake_runner: FakeRunner
) -> RunContext:
    """Install run context wired to the fake runner."""
    return RunContext(
        mode="install",
        paths=install_paths,
        provider=provider_spec,
        runner=fake_runner,
        log_reference="/tmp/opencursor-test.log",
    )


@pytest.fixture
def uninstall_context(
    install_paths: InstallPaths, provider_spec: ProviderSpec, fake_runner: FakeRunner
) -> RunContext:
    """Uninstall run context wired to the fake runner."""
    return RunContext(
        mode="uninstall",
        paths=install_paths,
        provider=provider_spec,
        runner=fake_runner,
    )

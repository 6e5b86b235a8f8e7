"""Run state shared between the pipeline and its steps."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Literal

from opencursor.config.schemas import InstallPaths, ProviderSpec
from opencursor.core.backup import BackupStore
from opencursor.core.runner import CommandRunner

if TYPE_CHECKING:
    from opencursor.tasks.base import InstallStep

RunMode = Literal["install", "uninstall"]


class TaskStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETE = "complete"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStatus.COMPLETE, TaskStatus.FAILED)


@dataclass
class ErrorInfo:
    """Failure details attached to a task for display."""

    message: str
    log_reference: str | None = None


@dataclass
class Task:
    """A step scheduled in a run, with its current status."""

    step: InstallStep
    status: TaskStatus = TaskStatus.PENDING
    error: ErrorInfo | None = None

    @property
    def name(self) -> str:
        return self.step.name

    @property
    def description(self) -> str:
        return self.step.description

    @property
    def optional(self) -> bool:
        return self.step.optional


@dataclass
class TaskResult:
    """Outcome of executing one task."""

    task_index: int
    success: bool
    error_message: str | None = None


@dataclass
class RunContext:
    """Everything one install or uninstall run works with.

    The pipeline owns the context for the duration of a run and passes the
    same instance to every step, so changes made by a step (such as recorded
    backups) are visible to the pipeline.
    """

    mode: RunMode
    paths: InstallPaths
    provider: ProviderSpec
    runner: CommandRunner = field(default_factory=CommandRunner)
    backups: BackupStore = field(default_factory=BackupStore)
    tasks: list[Task] = field(default_factory=list)
    current_index: int = 0
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    log_reference: str | None = None
    finished: bool = False

    @property
    def is_uninstall(self) -> bool:
        return self.mode == "uninstall"

    @property
    def succeeded(self) -> bool:
        """True once the run finished without a required step failing."""
        return self.finished and not self.errors

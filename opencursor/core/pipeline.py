"""Task pipeline orchestrator.

The pipeline runs the steps of one install or uninstall run strictly in
order. It tracks each task's status, and when a required install step fails
it restores every file backed up so far and stops. Optional steps may fail
without stopping the run.
"""

import logging
from collections.abc import Callable

from opencursor.core.context import (
    ErrorInfo,
    RunContext,
    RunMode,
    Task,
    TaskResult,
    TaskStatus,
)
from opencursor.core.errors import RollbackError
from opencursor.tasks import build_steps

logger = logging.getLogger("opencursor.pipeline")

TaskListener = Callable[[Task], None]


def build_tasks(mode: RunMode) -> list[Task]:
    """Build the ordered task list for a run mode, all tasks pending."""
    return [Task(step=step) for step in build_steps(mode)]


class Pipeline:
    """Drives the tasks of a single run.

    A pipeline runs once; the context it was created with is discarded
    afterwards.
    """

    def __init__(self, context: RunContext, listener: TaskListener | None = None):
        """Initialize the pipeline.

        Args:
            context: Run context; its task list is built from its mode if empty
            listener: Called with a task every time the task's status changes
        """
        self.context = context
        self.listener = listener
        if not context.tasks:
            context.tasks = build_tasks(context.mode)

    def run(self) -> RunContext:
        """Execute all tasks in order.

        Returns:
            The finished run context; check ``errors`` and each task's status
            for the outcome

        Raises:
            RuntimeError: If the pipeline has already run
        """
        ctx = self.context
        if ctx.finished:
            raise RuntimeError("Pipeline has already run")

        logger.info("Starting %s run with %d task(s)", ctx.mode, len(ctx.tasks))

        for index in range(len(ctx.tasks)):
            ctx.current_index = index
            result = self._execute_task(index)
            if not self._handle_result(result):
                break
        else:
            # All tasks reached a terminal status: commit
            ctx.backups.cleanup()

        ctx.finished = True
        logger.info(
            "%s run finished: %d error(s), %d warning(s)",
            ctx.mode.capitalize(),
            len(ctx.errors),
            len(ctx.warnings),
        )
        return ctx

    def _execute_task(self, index: int) -> TaskResult:
        task = self.context.tasks[index]
        self._set_status(task, TaskStatus.RUNNING)
        logger.info("Running task %d/%d: %s", index + 1, len(self.context.tasks), task.name)

        try:
            task.step.execute(self.context)
        except Exception as e:
            logger.debug("Task %s raised %s", task.name, type(e).__name__, exc_info=True)
            return TaskResult(task_index=index, success=False, error_message=str(e))

        return TaskResult(task_index=index, success=True)

    def _handle_result(self, result: TaskResult) -> bool:
        """Apply a task result to the run.

        Returns:
            True if the run should continue with the next task
        """
        ctx = self.context
        task = ctx.tasks[result.task_index]

        if result.success:
            self._set_status(task, TaskStatus.COMPLETE)
            return True

        message = result.error_message or "unknown error"
        task.error = ErrorInfo(message=message, log_reference=ctx.log_reference)
        self._set_status(task, TaskStatus.FAILED)

        if task.optional:
            logger.warning("Optional task %s failed: %s", task.name, message)
            ctx.warnings.append(f"{task.name}: {message}")
            return True

        logger.error("Task %s failed: %s", task.name, message)

        if not ctx.is_uninstall and len(ctx.backups) > 0:
            message += self._rollback()

        ctx.errors.append(message)
        ctx.backups.cleanup()
        return False

    def _rollback(self) -> str:
        """Restore backups and describe the outcome as a message suffix."""
        backups = self.context.backups
        logger.info("Rolling back %d backed-up path(s)", len(backups))
        try:
            backups.restore_all()
        except RollbackError as e:
            logger.error("Rollback incomplete: %s", e)
            return f" (rollback failed: {e})"
        return " (rolled back)"

    def _set_status(self, task: Task, status: TaskStatus) -> None:
        task.status = status
        if self.listener is None:
            return
        try:
            self.listener(task)
        except Exception:
            # Progress display must not change the outcome of a run
            logger.exception("Task listener failed for %s", task.name)

"""Base class for installer steps."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from opencursor.core.context import RunContext


class InstallStep(ABC):
    """One named, fallible step of an install or uninstall run.

    Steps signal failure by raising; returning normally means success. A step
    must back up every file through ``context.backups`` before overwriting or
    deleting it.
    """

    kind: ClassVar[str]
    name: ClassVar[str]
    description: ClassVar[str]
    optional: ClassVar[bool] = False

    @abstractmethod
    def execute(self, context: RunContext) -> None:
        """Run the step against the shared run context."""
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind!r})"

"""Installer steps.

Each run mode has a fixed, ordered list of steps. Later steps depend on the
state left behind by earlier ones, so the order here is the execution order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from opencursor.tasks.base import InstallStep
from opencursor.tasks.install import (
    BuildPlugin,
    CheckPrerequisites,
    CreateSymlink,
    InstallDependencySdk,
    UpdateConfig,
    ValidateConfig,
    VerifyPluginLoads,
)
from opencursor.tasks.uninstall import (
    RemoveDependencySdk,
    RemoveLegacyPlugin,
    RemoveProviderConfig,
    RemoveSymlink,
)

if TYPE_CHECKING:
    from opencursor.core.context import RunMode


def build_steps(mode: RunMode) -> list[InstallStep]:
    """Create fresh step instances for a run.

    Args:
        mode: "install" or "uninstall"

    Returns:
        Steps in execution order

    Raises:
        ValueError: If the mode is unknown
    """
    if mode == "install":
        return [
            CheckPrerequisites(),
            BuildPlugin(),
            InstallDependencySdk(),
            CreateSymlink(),
            UpdateConfig(),
            ValidateConfig(expect_provider=True),
            VerifyPluginLoads(),
        ]
    if mode == "uninstall":
        return [
            RemoveSymlink(),
            RemoveDependencySdk(),
            RemoveProviderConfig(),
            RemoveLegacyPlugin(),
            ValidateConfig(expect_provider=False),
        ]
    raise ValueError(f"Unknown run mode: {mode}")


__all__ = ["InstallStep", "build_steps"]

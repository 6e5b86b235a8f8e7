"""Default locations and settings resolution.

Precedence, lowest first: computed defaults, the optional YAML settings file,
explicit overrides (CLI options).
"""

import logging
from pathlib import Path
from typing import Any

from opencursor.config.schemas import (
    DEFAULT_BASE_URL,
    InstallerSettings,
    InstallPaths,
    ProviderSpec,
    build_provider_spec,
)
from opencursor.utils.platform import get_cache_home, get_config_home

logger = logging.getLogger("opencursor.settings")

HOST_NAME = "opencode"
CONFIG_FILENAME = "opencode.json"
PLUGIN_DIRNAME = "plugin"

SDK_PACKAGE = "@agentclientprotocol/sdk"
SDK_VERSION_RANGE = "^0.13.1"
LEGACY_PLUGIN_PREFIX = "opencode-cursor-auth"


def default_paths(project_dir: Path | None = None) -> InstallPaths:
    """Compute default locations from the environment.

    Args:
        project_dir: Plugin checkout containing the build (defaults to cwd)

    Returns:
        InstallPaths with every location filled in
    """
    host_dir = get_config_home() / HOST_NAME
    return InstallPaths(
        host_dir=host_dir,
        config_path=host_dir / CONFIG_FILENAME,
        plugin_dir=host_dir / PLUGIN_DIRNAME,
        project_dir=(project_dir or Path.cwd()).resolve(),
        cache_dir=get_cache_home() / HOST_NAME / "node_modules",
    )


def resolve_paths(
    settings: InstallerSettings | None = None,
    **overrides: Path | None,
) -> InstallPaths:
    """Merge defaults, settings file values and explicit overrides.

    A custom ``host_dir`` moves the config file and plugin directory along
    with it unless those are set explicitly as well.

    Args:
        settings: Parsed settings file, if any
        **overrides: InstallPaths field values; None means "not given"

    Returns:
        Resolved InstallPaths
    """
    values: dict[str, Any] = {}
    if settings is not None:
        values.update(
            settings.model_dump(
                include=set(InstallPaths.model_fields), exclude_none=True
            )
        )
    values.update({k: v for k, v in overrides.items() if v is not None})

    paths = default_paths(values.get("project_dir"))
    host_dir = values.get("host_dir", paths.host_dir)
    merged = {
        "host_dir": host_dir,
        "config_path": host_dir / CONFIG_FILENAME,
        "plugin_dir": host_dir / PLUGIN_DIRNAME,
        "project_dir": paths.project_dir,
        "cache_dir": paths.cache_dir,
    }
    merged.update({k: v for k, v in values.items() if k != "project_dir"})

    resolved = InstallPaths.model_validate(merged)
    logger.debug("Resolved paths: %s", resolved.model_dump())
    return resolved


def resolve_provider(
    settings: InstallerSettings | None = None, base_url: str | None = None
) -> ProviderSpec:
    """Build the provider entry from settings and an optional base URL override."""
    url = base_url or (settings.base_url if settings else None) or DEFAULT_BASE_URL
    models = settings.models if settings else None
    return build_provider_spec(base_url=url, models=models)

"""Platform and environment helpers."""

import os
from pathlib import Path


def get_home_directory() -> Path:
    """Get the user's home directory."""
    return Path(os.path.expanduser("~"))


def get_env(name: str, default: str | None = None) -> str | None:
    """Get an environment variable, treating an empty value as unset.

    Args:
        name: Environment variable name
        default: Default value if not set

    Returns:
        Environment variable value or default
    """
    value = os.environ.get(name)
    return value if value else default


def get_config_home() -> Path:
    """Get the XDG config directory (``$XDG_CONFIG_HOME`` or ``~/.config``)."""
    xdg = get_env("XDG_CONFIG_HOME")
    return Path(xdg) if xdg else get_home_directory() / ".config"


def get_cache_home() -> Path:
    """Get the XDG cache directory (``$XDG_CACHE_HOME`` or ``~/.cache``)."""
    xdg = get_env("XDG_CACHE_HOME")
    return Path(xdg) if xdg else get_home_directory() / ".cache"

"""Configuration file parsing utilities."""

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from opencursor.config.schemas import InstallerSettings
from opencursor.core.errors import InstallError
from opencursor.utils.filesystem import write_text_atomic


class ConfigError(InstallError):
    """Error loading or saving configuration."""


class ParseError(ConfigError):
    """Configuration file is not valid JSON or YAML."""


def load_document(path: Path) -> dict[str, Any]:
    """Load a JSON configuration document.

    A missing file is treated as an empty document so that a first install
    can create it.

    Args:
        path: Path to the JSON file

    Returns:
        Parsed document

    Raises:
        ParseError: If the file is not a valid JSON object
        ConfigError: If the file exists but cannot be read
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError as e:
        raise ConfigError(f"failed to read config {path}: {e}", path) from e

    return _parse_json(text, path)


def save_document(document: dict[str, Any], path: Path, indent: int = 2) -> None:
    """Save a JSON configuration document.

    Parent directories are created as needed and the file is replaced
    atomically.

    Args:
        document: Document to serialize
        path: Path to write to
        indent: JSON indentation level

    Raises:
        ConfigError: If the document cannot be serialized or written
    """
    try:
        content = json.dumps(document, indent=indent, ensure_ascii=False) + "\n"
    except (TypeError, ValueError) as e:
        raise ConfigError(f"failed to serialize config: {e}", path) from e

    try:
        write_text_atomic(path, content)
    except OSError as e:
        raise ConfigError(f"failed to write config {path}: {e}", path) from e


def validate_document(path: Path) -> dict[str, Any]:
    """Re-read a JSON file from disk and confirm it parses.

    Unlike load_document, a missing file is an error here: this is a check
    that a file which was just written is really there and readable.

    Args:
        path: Path to the JSON file

    Returns:
        The parsed document

    Raises:
        ConfigError: If the file is missing or unreadable
        ParseError: If the file is not a valid JSON object
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"cannot read {path}: {e}", path) from e

    return _parse_json(text, path)


def _parse_json(text: str, path: Path) -> dict[str, Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"invalid JSON in {path}: {e}", path) from e

    if not isinstance(data, dict):
        raise ParseError(
            f"config must contain a JSON object, got {type(data).__name__}: {path}", path
        )
    return data


def load_yaml(path: Path) -> dict[str, Any]:
    """Load and parse a YAML file.

    Args:
        path: Path to the YAML file

    Returns:
        Parsed YAML as a dictionary

    Raises:
        ConfigError: If the file cannot be read or parsed
    """
    if not path.exists():
        raise ConfigError(f"File not found: {path}", path)

    try:
        with open(path, encoding="utf-8") as f:
            result = yaml.safe_load(f)
            if result is None:
                return {}
            if not isinstance(result, dict):
                raise ParseError(f"YAML file must contain a mapping: {path}", path)
            return result
    except yaml.YAMLError as e:
        raise ParseError(f"Invalid YAML in {path}: {e}", path) from e
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}", path) from e


def load_settings(path: Path) -> InstallerSettings:
    """Load installer settings from a YAML file.

    Args:
        path: Path to the settings file

    Returns:
        Parsed InstallerSettings

    Raises:
        ConfigError: If the file is missing or invalid
    """
    data = load_yaml(path)

    try:
        return InstallerSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings file: {e}", path) from e

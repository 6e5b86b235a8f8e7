"""Editing helpers for the host configuration document.

The document is kept as the plain ``dict`` produced by ``json.loads`` so that
keys this installer does not know about round-trip untouched. The helpers
below give typed access to the few keys the installer edits.
"""

from typing import Any

from opencursor.config.schemas import ProviderSpec


def get_providers(document: dict[str, Any]) -> dict[str, Any] | None:
    """Get the ``provider`` mapping, or None if absent or not an object."""
    providers = document.get("provider")
    return providers if isinstance(providers, dict) else None


def upsert_provider(
    document: dict[str, Any], key: str, spec: ProviderSpec | dict[str, Any]
) -> dict[str, Any]:
    """Set ``provider[key]``, replacing any previous entry.

    A missing or non-object ``provider`` value is replaced with a new object.

    Args:
        document: Document to edit in place
        key: Provider name
        spec: Provider entry

    Returns:
        The edited document
    """
    providers = get_providers(document)
    if providers is None:
        providers = {}
        document["provider"] = providers

    providers[key] = spec.to_document() if isinstance(spec, ProviderSpec) else spec
    return document


def remove_provider(document: dict[str, Any], key: str) -> bool:
    """Delete ``provider[key]`` if present.

    Returns:
        True if an entry was removed
    """
    providers = get_providers(document)
    if providers is None or key not in providers:
        return False
    del providers[key]
    return True


def get_plugins(document: dict[str, Any]) -> list[Any] | None:
    """Get the ``plugin`` array, or None if absent or not an array."""
    plugins = document.get("plugin")
    return plugins if isinstance(plugins, list) else None


def remove_plugins_with_prefix(document: dict[str, Any], prefix: str) -> list[str]:
    """Drop plugin references starting with ``prefix``.

    Non-string entries are dropped as well, since they are not valid plugin
    references.

    Args:
        document: Document to edit in place
        prefix: Plugin reference prefix to match (e.g. a package name)

    Returns:
        The removed plugin references
    """
    plugins = get_plugins(document)
    if plugins is None:
        return []

    kept: list[str] = []
    removed: list[str] = []
    for entry in plugins:
        if not isinstance(entry, str):
            continue
        if entry.startswith(prefix):
            removed.append(entry)
        else:
            kept.append(entry)

    document["plugin"] = kept
    return removed


def get_dependencies(document: dict[str, Any]) -> dict[str, Any] | None:
    """Get the ``dependencies`` mapping of a package.json document."""
    dependencies = document.get("dependencies")
    return dependencies if isinstance(dependencies, dict) else None


def remove_dependency(document: dict[str, Any], name: str) -> bool:
    """Delete a dependency from a package.json document.

    Returns:
        True if the dependency was listed and removed
    """
    dependencies = get_dependencies(document)
    if dependencies is None or name not in dependencies:
        return False
    del dependencies[name]
    return True

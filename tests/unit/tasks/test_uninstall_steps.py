"""Tests for opencursor.tasks.uninstall module."""

import json
from pathlib import Path

import pytest

from opencursor.core.context import RunContext
from opencursor.tasks.uninstall import (
    RemoveDependencySdk,
    RemoveLegacyPlugin,
    RemoveProviderConfig,
    RemoveSymlink,
)


def write_json(path: Path, data: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data))


class TestRemoveSymlink:
    """Tests for RemoveSymlink step."""

    def test_removes_link(self, uninstall_context: RunContext, built_project: Path):
        paths = uninstall_context.paths
        paths.plugin_dir.mkdir(parents=True)
        paths.link_path.symlink_to(paths.artifact_path)

        RemoveSymlink().execute(uninstall_context)

        assert not paths.link_path.is_symlink()
        assert paths.artifact_path.exists()

    def test_absent_link_succeeds(self, uninstall_context: RunContext):
        """Uninstalling when nothing was linked is not an error."""
        RemoveSymlink().execute(uninstall_context)


class TestRemoveDependencySdk:
    """Tests for RemoveDependencySdk step."""

    @pytest.fixture
    def installed_sdk(self, uninstall_context: RunContext) -> Path:
        paths = uninstall_context.paths
        sdk_dir = paths.node_modules_dir / "@agentclientprotocol" / "sdk"
        sdk_dir.mkdir(parents=True)
        (sdk_dir / "package.json").write_text("{}")
        write_json(
            paths.package_json_path,
            {"dependencies": {"@agentclientprotocol/sdk": "^0.13.1", "zod": "^3.0.0"}},
        )
        return sdk_dir

    def test_removes_sdk(self, uninstall_context: RunContext, installed_sdk: Path):
        """Drops the dependency and the whole scope directory."""
        paths = uninstall_context.paths

        RemoveDependencySdk().execute(uninstall_context)

        assert not installed_sdk.parent.exists()
        assert json.loads(paths.package_json_path.read_text()) == {
            "dependencies": {"zod": "^3.0.0"}
        }
        assert paths.package_json_path in uninstall_context.backups

    def test_not_installed_is_noop(self, uninstall_context: RunContext):
        package_json = uninstall_context.paths.package_json_path
        write_json(package_json, {"dependencies": {"@agentclientprotocol/sdk": "^0.13.1"}})

        RemoveDependencySdk().execute(uninstall_context)

        assert "@agentclientprotocol/sdk" in package_json.read_text()

    def test_without_package_json(self, uninstall_context: RunContext, installed_sdk: Path):
        uninstall_context.paths.package_json_path.unlink()

        RemoveDependencySdk().execute(uninstall_context)

        assert not installed_sdk.exists()


class TestRemoveProviderConfig:
    """Tests for RemoveProviderConfig step."""

    def test_removes_provider(self, uninstall_context: RunContext):
        config_path = uninstall_context.paths.config_path
        write_json(
            config_path,
            {"theme": "dark", "provider": {"cursor-acp": {"npm": "x"}, "other": {}}},
        )

        RemoveProviderConfig().execute(uninstall_context)

        assert json.loads(config_path.read_text()) == {
            "theme": "dark",
            "provider": {"other": {}},
        }

    def test_missing_config_is_noop(self, uninstall_context: RunContext):
        RemoveProviderConfig().execute(uninstall_context)

        assert not uninstall_context.paths.config_path.exists()

    def test_unchanged_config_is_not_rewritten(self, uninstall_context: RunContext):
        """A config without the provider keeps its exact formatting."""
        config_path = uninstall_context.paths.config_path
        config_path.parent.mkdir(parents=True)
        config_path.write_text('{"provider":{"other":{}}}')

        RemoveProviderConfig().execute(uninstall_context)

        assert config_path.read_text() == '{"provider":{"other":{}}}'


class TestRemoveLegacyPlugin:
    """Tests for RemoveLegacyPlugin step."""

    def test_removes_legacy_references(self, uninstall_context: RunContext):
        """Only non-legacy plugin entries are kept."""
        config_path = uninstall_context.paths.config_path
        write_json(
            config_path,
            {"plugin": ["opencode-cursor-auth@1.0.0", "my-plugin", "opencode-cursor-auth"]},
        )

        RemoveLegacyPlugin().execute(uninstall_context)

        assert json.loads(config_path.read_text()) == {"plugin": ["my-plugin"]}

    def test_removes_cached_package(self, uninstall_context: RunContext):
        cached = uninstall_context.paths.cache_dir / "opencode-cursor-auth"
        cached.mkdir(parents=True)
        (cached / "index.js").write_text("old")
        sibling = uninstall_context.paths.cache_dir / "other-plugin"
        sibling.mkdir()

        RemoveLegacyPlugin().execute(uninstall_context)

        assert not cached.exists()
        assert sibling.exists()

    def test_nothing_to_remove(self, uninstall_context: RunContext):
        """No config and no cache is a successful no-op."""
        RemoveLegacyPlugin().execute(uninstall_context)

        assert not uninstall_context.paths.config_path.exists()

    def test_config_without_plugins_is_not_rewritten(self, uninstall_context: RunContext):
        config_path = uninstall_context.paths.config_path
        config_path.parent.mkdir(parents=True)
        config_path.write_text('{"plugin":["my-plugin"]}')

        RemoveLegacyPlugin().execute(uninstall_context)

        assert config_path.read_text() == '{"plugin":["my-plugin"]}'

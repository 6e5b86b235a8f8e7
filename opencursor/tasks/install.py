"""Steps of an install run."""

import logging
from pathlib import Path

from pydantic import ValidationError

from opencursor.config.document import get_dependencies, get_providers, upsert_provider
from opencursor.config.parser import load_document, save_document, validate_document
from opencursor.config.schemas import PROVIDER_KEY, ProviderSpec
from opencursor.config.settings import SDK_PACKAGE, SDK_VERSION_RANGE
from opencursor.core.context import RunContext
from opencursor.core.errors import (
    ConfigValidationError,
    FileOperationError,
    PrerequisiteMissingError,
)
from opencursor.core.linker import create_link
from opencursor.core.runner import command_exists
from opencursor.tasks.base import InstallStep
from opencursor.utils.filesystem import ensure_directory

logger = logging.getLogger("opencursor.tasks")

VERIFY_TIMEOUT = 5

# Tool -> install hint
REQUIRED_TOOLS = {
    "bun": "curl -fsSL https://bun.sh/install | bash",
    "cursor-agent": "curl -fsS https://cursor.com/install | bash",
}


class CheckPrerequisites(InstallStep):
    kind = "check-prerequisites"
    name = "Check prerequisites"
    description = "Verifying bun and cursor-agent"

    def execute(self, context: RunContext) -> None:
        for tool, hint in REQUIRED_TOOLS.items():
            if not command_exists(tool):
                raise PrerequisiteMissingError(tool, hint)
            logger.debug("Found %s", tool)


class BuildPlugin(InstallStep):
    kind = "build-plugin"
    name = "Build plugin"
    description = "Running bun install && bun run build"

    def execute(self, context: RunContext) -> None:
        project_dir = context.paths.project_dir
        context.runner.run("bun", ["install"], cwd=project_dir)
        context.runner.run("bun", ["run", "build"], cwd=project_dir)

        artifact = context.paths.artifact_path
        try:
            size = artifact.stat().st_size
        except OSError:
            size = 0
        if size == 0:
            raise FileOperationError(
                f"build artifact {artifact} not found or empty after build", artifact
            )
        logger.info("Built %s (%d bytes)", artifact, size)


class InstallDependencySdk(InstallStep):
    """Add the ACP SDK to the host's own dependencies.

    The host loads the plugin from its config directory, so the SDK has to be
    resolvable from there rather than from the plugin checkout. The step only
    counts as done when the package is both on disk and listed in the host's
    package.json, since a rolled-back run restores the manifest but leaves
    node_modules behind.
    """

    kind = "install-dependency-sdk"
    name = "Install ACP SDK"
    description = f"Adding {SDK_PACKAGE} to opencode"

    def execute(self, context: RunContext) -> None:
        paths = context.paths
        sdk_dir = paths.node_modules_dir / SDK_PACKAGE
        if sdk_dir.exists() and _lists_dependency(paths.package_json_path, SDK_PACKAGE):
            logger.info("%s already installed at %s", SDK_PACKAGE, sdk_dir)
            return

        context.backups.backup(paths.package_json_path)

        try:
            ensure_directory(paths.host_dir)
        except OSError as e:
            raise FileOperationError(
                f"failed to create {paths.host_dir}: {e}", paths.host_dir
            ) from e

        context.runner.run(
            "bun", ["add", f"{SDK_PACKAGE}@{SDK_VERSION_RANGE}"], cwd=paths.host_dir
        )


def _lists_dependency(package_json: Path, name: str) -> bool:
    dependencies = get_dependencies(load_document(package_json))
    return dependencies is not None and name in dependencies


class CreateSymlink(InstallStep):
    kind = "create-symlink"
    name = "Create symlink"
    description = "Linking to OpenCode plugin directory"

    def execute(self, context: RunContext) -> None:
        paths = context.paths
        try:
            ensure_directory(paths.plugin_dir)
        except OSError as e:
            raise FileOperationError(
                f"failed to create plugin directory {paths.plugin_dir}: {e}", paths.plugin_dir
            ) from e

        create_link(paths.artifact_path, paths.link_path, context.backups)


class UpdateConfig(InstallStep):
    kind = "update-config"
    name = "Update config"
    description = f"Adding {PROVIDER_KEY} provider to opencode.json"

    def execute(self, context: RunContext) -> None:
        config_path = context.paths.config_path
        context.backups.backup(config_path)

        document = load_document(config_path)
        upsert_provider(document, PROVIDER_KEY, context.provider)
        save_document(document, config_path)
        logger.info("Wrote %s provider to %s", PROVIDER_KEY, config_path)


class ValidateConfig(InstallStep):
    """Re-read the config from disk and check the provider entry.

    After an install the entry must be present and well formed; after an
    uninstall it must be gone. A missing config file is fine after an
    uninstall since there is nothing left to check.
    """

    kind = "validate-config"
    name = "Validate config"
    description = "Checking JSON syntax"

    def __init__(self, expect_provider: bool = True):
        self.expect_provider = expect_provider

    def execute(self, context: RunContext) -> None:
        config_path = context.paths.config_path
        if not self.expect_provider and not config_path.exists():
            return

        document = validate_document(config_path)
        providers = get_providers(document)

        if not self.expect_provider:
            if providers is not None and PROVIDER_KEY in providers:
                raise ConfigValidationError(
                    f"{PROVIDER_KEY} provider still exists in config", config_path
                )
            return

        if providers is None:
            raise ConfigValidationError("provider section missing from config", config_path)
        if PROVIDER_KEY not in providers:
            raise ConfigValidationError(
                f"{PROVIDER_KEY} provider not found in config", config_path
            )

        try:
            ProviderSpec.model_validate(providers[PROVIDER_KEY])
        except ValidationError as e:
            raise ConfigValidationError(
                f"{PROVIDER_KEY} provider entry is invalid: {e}", config_path
            ) from e


class VerifyPluginLoads(InstallStep):
    kind = "verify-plugin-loads"
    name = "Verify plugin loads"
    description = "Checking if plugin appears in opencode"
    optional = True

    def execute(self, context: RunContext) -> None:
        result = context.runner.run("opencode", ["models"], timeout=VERIFY_TIMEOUT)
        if PROVIDER_KEY not in result.output:
            raise ConfigValidationError(
                f"{PROVIDER_KEY} provider not found - plugin may not be installed correctly. "
                f"OpenCode output: {result.output.strip()}"
            )

        probe = context.runner.run("cursor-agent", ["--version"], timeout=VERIFY_TIMEOUT)
        logger.info("cursor-agent responded: %s", probe.output.strip())

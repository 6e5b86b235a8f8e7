"""Steps of an uninstall run."""

import logging

from opencursor.config.document import (
    get_plugins,
    remove_dependency,
    remove_plugins_with_prefix,
    remove_provider,
)
from opencursor.config.parser import load_document, save_document
from opencursor.config.schemas import PROVIDER_KEY
from opencursor.config.settings import LEGACY_PLUGIN_PREFIX, SDK_PACKAGE
from opencursor.core.context import RunContext
from opencursor.core.errors import FileOperationError
from opencursor.core.linker import remove_link
from opencursor.tasks.base import InstallStep
from opencursor.utils.filesystem import remove_directory

logger = logging.getLogger("opencursor.tasks")


class RemoveSymlink(InstallStep):
    kind = "remove-symlink"
    name = "Remove plugin symlink"
    description = f"Removing {PROVIDER_KEY}.js from plugin directory"

    def execute(self, context: RunContext) -> None:
        if not remove_link(context.paths.link_path):
            logger.info("Plugin symlink already absent")


class RemoveDependencySdk(InstallStep):
    kind = "remove-dependency-sdk"
    name = "Remove ACP SDK"
    description = f"Removing {SDK_PACKAGE} from opencode"

    def execute(self, context: RunContext) -> None:
        paths = context.paths
        sdk_dir = paths.node_modules_dir / SDK_PACKAGE
        if not sdk_dir.exists():
            logger.info("%s not installed", SDK_PACKAGE)
            return

        package_json = paths.package_json_path
        if package_json.exists():
            context.backups.backup(package_json)
            document = load_document(package_json)
            if remove_dependency(document, SDK_PACKAGE):
                save_document(document, package_json)
                logger.info("Removed %s from %s", SDK_PACKAGE, package_json)

        # Remove the whole scope directory, not only the package
        scope_dir = paths.node_modules_dir / SDK_PACKAGE.split("/")[0]
        try:
            remove_directory(scope_dir)
        except OSError as e:
            raise FileOperationError(f"failed to remove {scope_dir}: {e}", scope_dir) from e


class RemoveProviderConfig(InstallStep):
    kind = "remove-provider-config"
    name = "Remove provider config"
    description = f"Removing {PROVIDER_KEY} from opencode.json"

    def execute(self, context: RunContext) -> None:
        config_path = context.paths.config_path
        if not config_path.exists():
            return

        context.backups.backup(config_path)
        document = load_document(config_path)
        if remove_provider(document, PROVIDER_KEY):
            save_document(document, config_path)
            logger.info("Removed %s provider from %s", PROVIDER_KEY, config_path)


class RemoveLegacyPlugin(InstallStep):
    """Drop references to the old auth plugin and its cached package."""

    kind = "remove-legacy-plugin"
    name = "Remove old plugin"
    description = f"Removing {LEGACY_PLUGIN_PREFIX} if present"

    def execute(self, context: RunContext) -> None:
        config_path = context.paths.config_path
        if config_path.exists():
            context.backups.backup(config_path)
            document = load_document(config_path)
            before = get_plugins(document)
            removed = remove_plugins_with_prefix(document, LEGACY_PLUGIN_PREFIX)
            if before is not None and document["plugin"] != before:
                save_document(document, config_path)
                logger.info("Removed legacy plugin references: %s", ", ".join(removed) or "-")

        cached = context.paths.cache_dir / LEGACY_PLUGIN_PREFIX
        try:
            if remove_directory(cached):
                logger.info("Removed cached legacy plugin %s", cached)
        except OSError as e:
            raise FileOperationError(
                f"failed to remove old plugin from cache: {e}", cached
            ) from e

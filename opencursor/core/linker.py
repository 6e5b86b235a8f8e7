"""Symbolic link management for the plugin bundle."""

import logging
from pathlib import Path

from opencursor.core.backup import BackupStore
from opencursor.core.errors import LinkError
from opencursor.utils.filesystem import create_symlink, path_present, remove_file

logger = logging.getLogger("opencursor.linker")


def create_link(target: Path, link: Path, backups: BackupStore) -> None:
    """Point ``link`` at ``target``, replacing whatever is at ``link``.

    The link path is always backed up first: an existing entry is restored on
    rollback, and a link created where nothing existed is removed.

    Args:
        target: Path the link should resolve to
        link: Location of the link
        backups: Store receiving the link path's original state

    Raises:
        LinkError: If the link cannot be created or does not resolve
        FileOperationError: If the existing entry cannot be backed up
    """
    backups.backup(link)

    try:
        if remove_file(link):
            logger.debug("Removed existing entry at %s", link)
        create_symlink(target, link)
    except OSError as e:
        raise LinkError(f"failed to create symlink {link}: {e}", link) from e

    if not link.exists():
        raise LinkError(f"symlink verification failed: {link} does not resolve", link)

    logger.info("Linked %s -> %s", link, target)


def remove_link(link: Path) -> bool:
    """Remove a link if present.

    Args:
        link: Location of the link

    Returns:
        True if something was removed, False if nothing was there

    Raises:
        LinkError: If the entry exists but cannot be removed
    """
    if not path_present(link):
        logger.debug("No link at %s", link)
        return False

    try:
        remove_file(link)
    except OSError as e:
        raise LinkError(f"failed to remove symlink {link}: {e}", link) from e

    logger.info("Removed %s", link)
    return True

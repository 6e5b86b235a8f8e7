"""In-memory backups of files touched during a run.

The first backup of a path wins: later requests for the same path are
ignored, so restoring always brings a path back to its state before the run
started rather than to some intermediate state.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from opencursor.core.errors import FileOperationError, RollbackError

logger = logging.getLogger("opencursor.backup")


@dataclass(frozen=True)
class BackupEntry:
    """Snapshot of a path taken before it was first modified.

    Exactly one of ``content`` and ``link_target`` is set for an existing
    path. Both are None when the path did not exist, in which case restoring
    means deleting whatever was created there.
    """

    path: Path
    content: bytes | None = None
    link_target: str | None = None

    @property
    def existed(self) -> bool:
        return self.content is not None or self.link_target is not None


class BackupStore:
    """Records original file state keyed by path."""

    def __init__(self) -> None:
        self._entries: dict[Path, BackupEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, os.PathLike)):
            return False
        return Path(path) in self._entries

    def paths(self) -> list[Path]:
        """Get the backed-up paths in the order they were recorded."""
        return list(self._entries)

    def get(self, path: Path) -> BackupEntry | None:
        return self._entries.get(path)

    def backup(self, path: Path) -> None:
        """Record the current state of a path unless it is already recorded.

        Args:
            path: File or symlink to snapshot

        Raises:
            FileOperationError: If the path exists but cannot be read
        """
        if path in self._entries:
            return

        try:
            if path.is_symlink():
                entry = BackupEntry(path, link_target=str(path.readlink()))
            else:
                entry = BackupEntry(path, content=path.read_bytes())
        except FileNotFoundError:
            entry = BackupEntry(path)
        except OSError as e:
            raise FileOperationError(f"failed to back up {path}: {e}", path) from e

        self._entries[path] = entry
        logger.debug("Backed up %s (existed: %s)", path, entry.existed)

    def restore_all(self) -> None:
        """Restore every recorded path to its original state.

        Restoration continues past individual failures. The store is left
        intact; call cleanup() once the run is over.

        Raises:
            RollbackError: If any path could not be restored
        """
        failures: list[tuple[Path, str]] = []

        for path, entry in reversed(self._entries.items()):
            try:
                _restore_entry(entry)
                logger.debug("Restored %s", path)
            except OSError as e:
                logger.error("Failed to restore %s: %s", path, e)
                failures.append((path, str(e)))

        if failures:
            raise RollbackError(failures)

    def cleanup(self) -> None:
        """Discard all records without restoring anything."""
        self._entries.clear()


def _restore_entry(entry: BackupEntry) -> None:
    path = entry.path

    if path.is_symlink() or path.exists():
        if path.is_dir() and not path.is_symlink():
            raise IsADirectoryError(f"{path} is now a directory")
        path.unlink()

    if entry.link_target is not None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.symlink_to(entry.link_target)
    elif entry.content is not None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(entry.content)

"""Tests for opencursor.core.backup module."""

import os
from pathlib import Path

import pytest

from opencursor.core.backup import BackupEntry, BackupStore
from opencursor.core.errors import FileOperationError, RollbackError


@pytest.fixture
def store() -> BackupStore:
    return BackupStore()


class TestBackup:
    """Tests for BackupStore.backup()."""

    def test_records_file_content(self, store: BackupStore, temp_dir: Path):
        """Records the bytes of an existing file."""
        path = temp_dir / "config.json"
        path.write_bytes(b'{"a": 1}')

        store.backup(path)

        entry = store.get(path)
        assert entry is not None
        assert entry.content == b'{"a": 1}'
        assert entry.existed is True

    def test_records_missing_file(self, store: BackupStore, temp_dir: Path):
        """Records that a missing file did not exist."""
        path = temp_dir / "missing.json"

        store.backup(path)

        assert path in store
        assert store.get(path) == BackupEntry(path)
        assert store.get(path).existed is False

    def test_first_backup_wins(self, store: BackupStore, temp_dir: Path):
        """A second backup of the same path keeps the first content."""
        path = temp_dir / "config.json"
        path.write_text("original")
        store.backup(path)

        path.write_text("intermediate")
        store.backup(path)

        assert store.get(path).content == b"original"
        assert len(store) == 1

    def test_records_symlink_target(self, store: BackupStore, temp_dir: Path):
        """Symlinks are recorded by target, not by content."""
        target = temp_dir / "target.js"
        target.write_text("code")
        link = temp_dir / "link.js"
        link.symlink_to(target)

        store.backup(link)

        entry = store.get(link)
        assert entry.link_target == str(target)
        assert entry.content is None

    def test_raises_for_unreadable_path(self, store: BackupStore, temp_dir: Path):
        """Raises FileOperationError when the path cannot be read."""
        directory = temp_dir / "a-directory"
        directory.mkdir()

        with pytest.raises(FileOperationError, match="failed to back up"):
            store.backup(directory)

        assert directory not in store

    def test_membership_accepts_strings(self, store: BackupStore, temp_dir: Path):
        """Paths given as strings are found as well."""
        path = temp_dir / "config.json"

        store.backup(path)

        assert str(path) in store
        assert str(temp_dir / "other.json") not in store
        assert 42 not in store

    def test_paths_keep_insertion_order(self, store: BackupStore, temp_dir: Path):
        """paths() lists paths in the order they were backed up."""
        first = temp_dir / "b.json"
        second = temp_dir / "a.json"

        store.backup(first)
        store.backup(second)

        assert store.paths() == [first, second]


class TestRestoreAll:
    """Tests for BackupStore.restore_all()."""

    def test_restores_original_content(self, store: BackupStore, temp_dir: Path):
        """Overwritten files get their original bytes back."""
        path = temp_dir / "config.json"
        path.write_text("original")
        store.backup(path)
        path.write_text("modified")

        store.restore_all()

        assert path.read_text() == "original"

    def test_deletes_files_that_did_not_exist(self, store: BackupStore, temp_dir: Path):
        """Files created during the run are removed."""
        path = temp_dir / "created.json"
        store.backup(path)
        path.write_text("new")

        store.restore_all()

        assert not path.exists()

    def test_missing_and_still_missing_is_fine(self, store: BackupStore, temp_dir: Path):
        """Restoring a never-created path is a no-op."""
        store.backup(temp_dir / "never.json")

        store.restore_all()

    def test_recreates_deleted_file(self, store: BackupStore, temp_dir: Path):
        """Deleted files are written back, including parent directories."""
        path = temp_dir / "nested" / "config.json"
        path.parent.mkdir()
        path.write_text("original")
        store.backup(path)
        path.unlink()
        path.parent.rmdir()

        store.restore_all()

        assert path.read_text() == "original"

    def test_restores_symlink(self, store: BackupStore, temp_dir: Path):
        """A replaced symlink is recreated pointing at its old target."""
        old_target = temp_dir / "old.js"
        old_target.write_text("old")
        link = temp_dir / "plugin.js"
        link.symlink_to(old_target)
        store.backup(link)

        link.unlink()
        link.symlink_to(temp_dir / "new.js")

        store.restore_all()

        assert link.is_symlink()
        assert os.readlink(link) == str(old_target)

    def test_removes_symlink_created_during_run(self, store: BackupStore, temp_dir: Path):
        """A symlink created where nothing existed is removed."""
        link = temp_dir / "plugin.js"
        store.backup(link)
        link.symlink_to(temp_dir / "dangling.js")

        store.restore_all()

        assert not link.is_symlink()

    def test_continues_past_failures(self, store: BackupStore, temp_dir: Path):
        """One unrestorable path does not stop the others."""
        blocked = temp_dir / "blocked.json"
        blocked.write_text("original")
        good = temp_dir / "good.json"
        good.write_text("original")
        store.backup(blocked)
        store.backup(good)

        # Replace the file with a directory so it cannot be restored
        blocked.unlink()
        blocked.mkdir()
        good.write_text("modified")

        with pytest.raises(RollbackError) as exc_info:
            store.restore_all()

        assert good.read_text() == "original"
        assert [path for path, _ in exc_info.value.failures] == [blocked]
        assert "could not restore 1 file(s)" in str(exc_info.value)

    def test_does_not_clear_store(self, store: BackupStore, temp_dir: Path):
        """Records survive a restore until cleanup()."""
        path = temp_dir / "config.json"
        store.backup(path)

        store.restore_all()

        assert len(store) == 1


class TestCleanup:
    """Tests for BackupStore.cleanup()."""

    def test_discards_without_restoring(self, store: BackupStore, temp_dir: Path):
        """Cleanup forgets records and leaves files alone."""
        path = temp_dir / "config.json"
        path.write_text("original")
        store.backup(path)
        path.write_text("modified")

        store.cleanup()

        assert len(store) == 0
        assert path.read_text() == "modified"

    def test_backup_after_cleanup_takes_new_snapshot(self, store: BackupStore, temp_dir: Path):
        """After cleanup the next backup records the current content."""
        path = temp_dir / "config.json"
        path.write_text("first")
        store.backup(path)
        store.cleanup()
        path.write_text("second")

        store.backup(path)

        assert store.get(path).content == b"second"

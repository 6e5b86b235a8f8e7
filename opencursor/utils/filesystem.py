"""Filesystem utilities for opencursor."""

import os
import shutil
import tempfile
from pathlib import Path


def ensure_directory(path: Path) -> Path:
    """Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists

    Returns:
        The directory path
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def path_present(path: Path) -> bool:
    """Check whether anything occupies a path, including a dangling symlink.

    Args:
        path: Path to check

    Returns:
        True if a file, directory or symlink exists at the path
    """
    return path.is_symlink() or path.exists()


def remove_directory(path: Path) -> bool:
    """Remove a directory and its contents.

    Args:
        path: Directory path to remove

    Returns:
        True if the directory was removed, False if it didn't exist
    """
    if not path.exists():
        return False
    shutil.rmtree(path)
    return True


def remove_file(path: Path) -> bool:
    """Remove a file or symlink.

    Args:
        path: File path to remove

    Returns:
        True if the file was removed, False if it didn't exist
    """
    if not path_present(path):
        return False
    path.unlink()
    return True


def write_text_atomic(path: Path, content: str) -> None:
    """Write content to a text file through a temporary sibling file.

    The target is replaced in a single rename, so readers never observe a
    partially written file.

    Args:
        path: Path to the file
        content: Content to write
    """
    ensure_directory(path.parent)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def create_symlink(target: Path, link: Path) -> Path:
    """Create a symbolic link, creating the link's parent directory.

    Args:
        target: Path the link points to
        link: Path of the link itself

    Returns:
        The link path
    """
    ensure_directory(link.parent)
    link.symlink_to(target)
    return link

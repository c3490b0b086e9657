"""Utility functions for the photo sorter."""

import os
import psutil
from datetime import datetime
from pathlib import Path
from typing import Generator, Optional
import logging

logger = logging.getLogger(__name__)


def get_file_size(file_path: Path) -> int:
    """
    Get file size in bytes.

    Args:
        file_path: Path to file

    Returns:
        File size in bytes, 0 if error
    """
    try:
        return file_path.stat().st_size
    except OSError as e:
        logger.error(f"Failed to get size for {file_path}: {e}")
        return 0


def format_bytes(bytes_value: int) -> str:
    """
    Format bytes as human-readable string.

    Args:
        bytes_value: Size in bytes

    Returns:
        Formatted string like "1.2GB"
    """
    if bytes_value == 0:
        return "0B"

    units = ['B', 'KB', 'MB', 'GB', 'TB']
    unit_index = 0
    size = float(bytes_value)

    while size >= 1024.0 and unit_index < len(units) - 1:
        size /= 1024.0
        unit_index += 1

    return f"{size:.1f}{units[unit_index]}"


def get_available_space(path: Path) -> int:
    """
    Get available disk space for a path in bytes.

    Args:
        path: Path to check

    Returns:
        Available space in bytes
    """
    try:
        usage = psutil.disk_usage(str(path))
        return usage.free
    except Exception as e:
        logger.error(f"Failed to get disk space for {path}: {e}")
        return 0


def is_same_device(first: Path, second: Path) -> bool:
    """Check whether two existing paths live on the same filesystem."""
    return os.stat(first).st_dev == os.stat(second).st_dev


def ensure_directory(path: Path) -> bool:
    """
    Ensure directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure

    Returns:
        True if directory exists or was created successfully
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
        return True
    except OSError as e:
        logger.error(f"Failed to create directory {path}: {e}")
        return False


def find_source_files(directory: Path, exclude: Optional[Path] = None) -> Generator[Path, None, None]:
    """
    Recursively find all files in a directory in a stable order.

    Files are yielded directory by directory, names sorted by code point.

    Args:
        directory: Directory to search
        exclude: Directory subtree to skip (e.g. a destination nested in the source)

    Yields:
        Path objects for files found
    """
    excluded = exclude.resolve() if exclude is not None else None

    for dirpath, dirnames, filenames in os.walk(str(directory)):
        current = Path(dirpath)
        if excluded is not None:
            dirnames[:] = [d for d in dirnames if (current / d).resolve() != excluded]
        dirnames.sort()

        for filename in sorted(filenames):
            file_path = current / filename
            if file_path.is_file():
                yield file_path


def cleanup_empty_directories(directory: Path, exclude: Optional[Path] = None) -> int:
    """
    Remove empty directories below a root, keeping the root itself.

    Args:
        directory: Root directory to clean up
        exclude: Directory subtree to leave untouched

    Returns:
        Number of directories removed
    """
    removed_count = 0
    root = Path(directory)
    excluded = exclude.resolve() if exclude is not None else None

    # Walk bottom-up to remove empty directories
    for dirpath, dirnames, filenames in os.walk(str(root), topdown=False):
        dir_path = Path(dirpath)
        if dir_path == root or filenames:
            continue
        if excluded is not None and (dir_path.resolve() == excluded or excluded in dir_path.resolve().parents):
            continue

        if any((dir_path / dirname).exists() for dirname in dirnames):
            continue

        try:
            dir_path.rmdir()
            logger.debug(f"Removed empty directory: {dir_path}")
            removed_count += 1
        except OSError as e:
            logger.debug(f"Could not remove directory {dir_path}: {e}")

    return removed_count


def get_current_timestamp() -> str:
    """Get current timestamp as ISO string."""
    return datetime.now().isoformat()

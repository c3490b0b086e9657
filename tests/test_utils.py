#!/usr/bin/env python3
"""Tests for photo sorter utilities using should/when pattern."""

import tempfile
from pathlib import Path
from unittest.mock import patch

from photo_sorter.utils import (
    cleanup_empty_directories,
    ensure_directory,
    find_source_files,
    format_bytes,
    get_available_space,
    get_file_size,
    is_same_device,
)


def test_should_format_bytes_as_human_readable_when_size_provided():
    """Should format bytes as human-readable string when size is provided."""

    # When formatting different byte sizes
    test_cases = [
        (0, "0B"),
        (500, "500.0B"),
        (1024, "1.0KB"),
        (1024 * 1024, "1.0MB"),
        (1024 * 1024 * 1024, "1.0GB"),
        (1536, "1.5KB"),  # 1.5 * 1024
        (2048 * 1024 * 1024, "2.0GB")  # 2GB
    ]

    for byte_value, expected_format in test_cases:
        result = format_bytes(byte_value)
        assert result == expected_format, f"Expected {expected_format}, got {result} for {byte_value}"


def test_should_ensure_directory_exists_when_path_provided():
    """Should ensure directory exists when path is provided."""

    with tempfile.TemporaryDirectory() as temp_dir:
        new_dir = Path(temp_dir) / "new" / "nested" / "directory"
        assert not new_dir.exists(), "Directory should not exist initially"

        assert ensure_directory(new_dir) is True
        assert new_dir.is_dir()

        # When ensuring existing directory
        assert ensure_directory(new_dir) is True


def test_should_find_files_in_stable_order_when_tree_scanned(tmp_path):
    """Should walk directories and names in sorted order."""
    for relative in ['b/2.jpg', 'a/z.jpg', 'a/y.jpg', 'root.jpg', 'a (1).jpg', 'a.jpg']:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b'x')

    found = [str(p.relative_to(tmp_path)) for p in find_source_files(tmp_path)]

    assert found == ['a (1).jpg', 'a.jpg', 'root.jpg', 'a/y.jpg', 'a/z.jpg', 'b/2.jpg']


def test_should_skip_excluded_directory_when_scanning(tmp_path):
    """Should not descend into an excluded subtree."""
    (tmp_path / 'keep').mkdir()
    (tmp_path / 'keep' / 'photo.jpg').write_bytes(b'x')
    (tmp_path / 'dest').mkdir()
    (tmp_path / 'dest' / 'sorted.jpg').write_bytes(b'x')

    found = [p.name for p in find_source_files(tmp_path, exclude=tmp_path / 'dest')]

    assert found == ['photo.jpg']


def test_should_remove_only_empty_directories_when_cleaning_up(tmp_path):
    """Should remove empty folders bottom-up and keep the root and non-empty ones."""
    (tmp_path / 'empty' / 'deeper').mkdir(parents=True)
    (tmp_path / 'full').mkdir()
    (tmp_path / 'full' / 'photo.jpg').write_bytes(b'x')
    (tmp_path / 'dest' / 'bucket').mkdir(parents=True)

    removed = cleanup_empty_directories(tmp_path, exclude=tmp_path / 'dest')

    assert removed == 2
    assert tmp_path.exists()
    assert (tmp_path / 'full' / 'photo.jpg').exists()
    assert not (tmp_path / 'empty').exists()
    assert (tmp_path / 'dest' / 'bucket').exists()


def test_should_report_size_and_device_when_file_provided(tmp_path):
    """Should report file sizes and device identity."""
    path = tmp_path / 'photo.jpg'
    path.write_bytes(b'12345')

    assert get_file_size(path) == 5
    assert get_file_size(tmp_path / 'missing.jpg') == 0
    assert is_same_device(path, tmp_path)


def test_should_return_zero_space_when_disk_usage_fails(tmp_path):
    """Should return 0 when psutil cannot read disk usage."""
    with patch('photo_sorter.utils.psutil.disk_usage', side_effect=OSError('gone')):
        assert get_available_space(tmp_path) == 0

    assert get_available_space(tmp_path) > 0

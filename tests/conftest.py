"""Shared fixtures for photo sorter tests."""

import struct
from datetime import datetime
from pathlib import Path

import pytest
import yaml


class StubPropertyProvider:
    """Media property provider backed by a dict of (filename, column) -> value."""

    def __init__(self, values=None):
        self.values = values or {}
        self.calls = []

    def get_property(self, path, name):
        self.calls.append((Path(path).name, name))
        return self.values.get((Path(path).name, name))


class FixedDateResolver:
    """Date resolver that looks dates up by filename."""

    def __init__(self, dates=None):
        self.dates = dates or {}

    def resolve(self, path):
        return self.dates.get(Path(path).name)


def jpeg_segment(marker, payload):
    return struct.pack('>H', marker) + struct.pack('>H', len(payload) + 2) + payload


def build_jpeg(scan=b'\x12\x34compressed-scan-data\x56', metadata=b'Exif\x00\x00camera=A', comment=None):
    """Assemble a structurally valid JPEG byte string."""
    data = b'\xff\xd8'
    data += jpeg_segment(0xFFE1, metadata)
    if comment is not None:
        data += jpeg_segment(0xFFFE, comment)
    data += jpeg_segment(0xFFDB, b'\x00' + bytes(range(64)))
    data += b'\xff\xda' + struct.pack('>H', 8) + b'\x01\x01\x00\x00\x3f\x00'
    data += scan
    data += b'\xff\xd9'
    return data


@pytest.fixture
def make_jpeg():
    """Factory fixture: JPEG bytes with configurable metadata and scan data."""
    return build_jpeg


@pytest.fixture
def source_dir(tmp_path):
    path = tmp_path / 'source'
    path.mkdir()
    return path


@pytest.fixture
def dest_dir(tmp_path):
    path = tmp_path / 'destination'
    path.mkdir()
    return path


@pytest.fixture
def create_file():
    """Factory fixture: write bytes to a path, creating parents."""

    def _create(path, content=b'test-content'):
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return path

    return _create


@pytest.fixture
def sample_config(tmp_path):
    """Create a Config backed by a temp YAML file with media properties off."""
    config_data = {
        'photo_sorter': {
            'use_media_properties': False,
            'cleanup_empty_directories': True,
            'safety': {
                'check_free_space': True,
            },
        },
        'logging': {
            'level': 'DEBUG',
        },
    }

    config_path = tmp_path / 'photo_sorter.yml'
    with open(config_path, 'w') as f:
        yaml.dump(config_data, f)

    from photo_sorter.config import Config
    return Config(str(config_path))


@pytest.fixture
def stub_provider():
    return StubPropertyProvider


@pytest.fixture
def fixed_dates():
    """Factory fixture: a resolver returning the given filename -> datetime map."""
    return FixedDateResolver


@pytest.fixture
def may_2021():
    return datetime(2021, 5, 14, 9, 30, 0)

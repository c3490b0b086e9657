#!/usr/bin/env python3
"""Tests for photo sorter configuration using should/when pattern."""

import os
from pathlib import Path

import pytest
import yaml

from photo_sorter.config import Config


def test_should_use_defaults_when_no_config_file_found(tmp_path, monkeypatch):
    """Should fall back to built-in defaults when no config file exists."""
    monkeypatch.chdir(tmp_path)

    # When no config file is present
    config = Config()

    # Should use defaults
    assert config.config_path is None
    assert config.get_unknown_date_folder() == 'An Unknown Date'
    assert config.get_index_filename() == '.pshashfile'
    assert config.get_do_not_move_extensions() == ['.json', '.pshashfile']
    assert config.get_filename_patterns() == ['IMG_', 'BURST', 'IMG-', 'GIF_Action_']
    assert config.get_property_columns() == ['Media created', 'Date taken']
    assert config.use_media_properties() is True
    assert config.validate_config() == []


def test_should_find_config_file_when_present_in_working_directory(tmp_path, monkeypatch):
    """Should pick up photo_sorter.yml from the working directory."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / 'photo_sorter.yml').write_text(yaml.dump({
        'photo_sorter': {'unknown_date_folder': 'Undated'},
    }))

    config = Config()

    assert Path(config.config_path).name == 'photo_sorter.yml'
    assert config.get_unknown_date_folder() == 'Undated'
    # untouched keys keep their defaults
    assert config.get_index_filename() == '.pshashfile'


def test_should_prefer_local_config_when_both_present(tmp_path, monkeypatch):
    """Should prefer photo_sorter.local.yml over photo_sorter.yml."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / 'photo_sorter.yml').write_text('photo_sorter: {unknown_date_folder: Shared}')
    (tmp_path / 'photo_sorter.local.yml').write_text('photo_sorter: {unknown_date_folder: Local}')

    assert Config().get_unknown_date_folder() == 'Local'


def test_should_merge_nested_values_when_config_loaded(sample_config):
    """Should merge nested sections instead of replacing them."""
    assert sample_config.use_media_properties() is False
    assert sample_config.should_check_free_space() is True
    assert sample_config.get_log_level() == 'DEBUG'
    assert sample_config.get('photo_sorter.safety.check_free_space') is True
    assert sample_config.get('photo_sorter.missing.key', 'fallback') == 'fallback'


def test_should_normalize_extensions_when_dot_missing(tmp_path):
    """Should add a leading dot and lowercase do-not-move extensions."""
    path = tmp_path / 'config.yml'
    path.write_text(yaml.dump({'photo_sorter': {'do_not_move_extensions': ['JSON', '.XMP']}}))

    assert Config(str(path)).get_do_not_move_extensions() == ['.json', '.xmp', '.pshashfile']


def test_should_never_move_index_files_when_index_renamed(tmp_path):
    """Should treat a custom index filename as a do-not-move name."""
    path = tmp_path / 'config.yml'
    path.write_text(yaml.dump({'photo_sorter': {
        'index_filename': '.sortindex',
        'do_not_move_extensions': ['.json'],
    }}))

    assert Config(str(path)).get_do_not_move_extensions() == ['.json', '.sortindex']


def test_should_raise_when_explicit_config_missing(tmp_path):
    """Should raise when an explicit config path does not exist."""
    with pytest.raises(FileNotFoundError):
        Config(str(tmp_path / 'nope.yml'))


def test_should_raise_when_yaml_is_invalid(tmp_path):
    """Should raise when the config file is not valid YAML."""
    path = tmp_path / 'broken.yml'
    path.write_text('photo_sorter: [unclosed')

    with pytest.raises(yaml.YAMLError):
        Config(str(path))


def test_should_report_errors_when_config_invalid(tmp_path):
    """Should list validation errors for bad values."""
    path = tmp_path / 'bad.yml'
    path.write_text(yaml.dump({
        'photo_sorter': {
            'unknown_date_folder': '  ',
            'index_filename': 'sub/dir',
            'filename_patterns': ['IMG_', ''],
        },
        'logging': {'level': 'LOUD'},
    }))

    errors = Config(str(path)).validate_config()

    assert len(errors) == 4
    assert any('Unknown date folder' in e for e in errors)
    assert any('index filename' in e for e in errors)
    assert any('filename pattern' in e for e in errors)
    assert any('logging level' in e for e in errors)

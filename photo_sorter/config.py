"""Configuration management for the photo sorter."""

import copy
import yaml
from pathlib import Path
from typing import Dict, List, Any, Optional
import logging

logger = logging.getLogger(__name__)


DEFAULT_CONFIG: Dict[str, Any] = {
    'photo_sorter': {
        'unknown_date_folder': 'An Unknown Date',
        'index_filename': '.pshashfile',
        'do_not_move_extensions': ['.json', '.pshashfile'],
        'filename_patterns': ['IMG_', 'BURST', 'IMG-', 'GIF_Action_'],
        'property_columns': ['Media created', 'Date taken'],
        'use_media_properties': True,
        'cleanup_empty_directories': True,
        'safety': {
            'check_free_space': True,
        },
    },
    'logging': {
        'level': 'INFO',
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class Config:
    """Manages photo sorter configuration from YAML files with built-in defaults."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to config file. If None, searches the working
                directory and falls back to the defaults.
        """
        self.config_path = config_path or self._find_config_file()
        self.config: Dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)
        if self.config_path:
            self._load_config()

    def _find_config_file(self) -> Optional[str]:
        """Find configuration file in standard locations."""
        # Look for config files in order of preference
        possible_paths = [
            "photo_sorter.local.yml",
            "photo_sorter.yml",
        ]

        for path in possible_paths:
            config_file = Path.cwd() / path
            if config_file.exists():
                logger.info(f"Found config file: {config_file}")
                return str(config_file.resolve())

        logger.debug("No configuration file found, using defaults")
        return None

    def _load_config(self) -> None:
        """Load configuration from YAML file on top of the defaults."""
        if not Path(self.config_path).exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")
        try:
            with open(self.config_path, 'r') as f:
                loaded = yaml.safe_load(f) or {}
            self.config = _merge(DEFAULT_CONFIG, loaded)
            logger.info(f"Loaded configuration from {self.config_path}")
        except Exception as e:
            logger.error(f"Failed to load config from {self.config_path}: {e}")
            raise

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key_path: Dot-separated path like 'photo_sorter.safety.check_free_space'
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self.config

        try:
            for key in keys:
                value = value[key]
            return value
        except (KeyError, TypeError):
            return default

    def get_sorter_config(self) -> Dict[str, Any]:
        """Get photo sorter specific configuration."""
        return self.get('photo_sorter', {})

    def get_unknown_date_folder(self) -> str:
        """Get the bucket name used for files without a date."""
        return self.get('photo_sorter.unknown_date_folder', 'An Unknown Date')

    def get_index_filename(self) -> str:
        """Get the reserved name of the per-folder hash index."""
        return self.get('photo_sorter.index_filename', '.pshashfile')

    def get_do_not_move_extensions(self) -> List[str]:
        """
        Get extensions that are deleted from the source instead of moved.

        The index filename is always included so stale sidecars are never sorted.
        """
        extensions = self.get('photo_sorter.do_not_move_extensions', [])
        normalized = [ext.lower() if ext.startswith('.') else f".{ext.lower()}" for ext in extensions]

        index_filename = self.get_index_filename().lower()
        if index_filename and index_filename not in normalized:
            normalized.append(index_filename)
        return normalized

    def get_filename_patterns(self) -> List[str]:
        """Get filename prefixes that are followed by a YYYYMMDD date."""
        return list(self.get('photo_sorter.filename_patterns', []))

    def get_property_columns(self) -> List[str]:
        """Get media property names queried for a date, in order."""
        return list(self.get('photo_sorter.property_columns', []))

    def use_media_properties(self) -> bool:
        """Check if extended media properties should be queried."""
        return bool(self.get('photo_sorter.use_media_properties', True))

    def should_cleanup_empty_directories(self) -> bool:
        """Check if empty source directories are removed after sorting."""
        return bool(self.get('photo_sorter.cleanup_empty_directories', True))

    def should_check_free_space(self) -> bool:
        """Check if destination free space is verified before sorting."""
        return bool(self.get('photo_sorter.safety.check_free_space', True))

    def get_log_level(self) -> str:
        """Get logging level."""
        return self.get('logging.level', 'INFO')

    def validate_config(self) -> List[str]:
        """
        Validate configuration and return list of errors.

        Returns:
            List of validation error messages
        """
        errors = []

        if not self.get_unknown_date_folder().strip():
            errors.append("Unknown date folder name is empty")

        index_filename = self.get_index_filename()
        if not index_filename or '/' in index_filename or '\\' in index_filename:
            errors.append(f"Invalid index filename: {index_filename!r}")

        for pattern in self.get_filename_patterns():
            if not isinstance(pattern, str) or not pattern:
                errors.append(f"Invalid filename pattern: {pattern!r}")

        if not isinstance(self.get('photo_sorter.do_not_move_extensions', []), list):
            errors.append("do_not_move_extensions must be a list")

        level = str(self.get_log_level()).upper()
        if level not in ('DEBUG', 'INFO', 'WARNING', 'ERROR'):
            errors.append(f"Invalid logging level: {level}")

        return errors

    def __str__(self) -> str:
        """String representation of configuration."""
        return f"Config(path={self.config_path}, unknown={self.get_unknown_date_folder()!r})"

"""
Configuration for datedbackup.

Settings are read from a JSON file and merged over the defaults below.
Search order:
  1) explicit --config path (must exist and be valid JSON)
  2) config.json in the per-user application data directory
  3) built-in defaults
"""

import copy
import json
import logging
import os
import platform
from pathlib import Path
from typing import Any, Dict, Optional, Union

# Set up module-level logger
logger = logging.getLogger(__name__)

APP_NAME = 'datedbackup'
CONFIG_FILE_NAME = 'config.json'

DEFAULT_CONFIG = {
    'copy': {
        'command': 'robocopy',
        'retries': 10,
        'wait': 5,
        'severity_threshold': 8,
    },
    'naming': {
        'folder_format': 'Backup %d-%m-%Y',
    },
    'walk': {
        'skip_system_entries': True,
    },
    'paths': {
        # 'auto', 'drive' or 'mount'
        'volume_style': 'auto',
    },
}


class ConfigError(Exception):
    """Raised when a configuration file cannot be used."""


def get_app_data_dir(app_name: str = APP_NAME) -> Path:
    """
    Get the application data directory in a cross-platform way.

    Args:
        app_name: Name of the application

    Returns:
        Path to the application data directory
    """
    system = platform.system()
    if system == 'Windows':
        # Windows: %APPDATA%\app_name
        base_dir = os.environ.get('APPDATA', str(Path.home() / 'AppData' / 'Roaming'))
        return Path(base_dir) / app_name
    elif system == 'Darwin':
        # macOS: ~/Library/Application Support/app_name
        return Path.home() / 'Library' / 'Application Support' / app_name
    else:
        # Linux/Unix: ~/.config/app_name
        xdg_config_home = os.environ.get('XDG_CONFIG_HOME', str(Path.home() / '.config'))
        return Path(xdg_config_home) / app_name


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class BackupConfig:
    """
    Layered configuration with dotted-key access.

    Example:
        config = BackupConfig.load()
        retries = config.get('copy.retries')
    """

    def __init__(self, values: Optional[Dict[str, Any]] = None, source: Optional[Path] = None):
        self.values = _deep_merge(DEFAULT_CONFIG, values or {})
        self.source = source

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None) -> 'BackupConfig':
        """
        Load configuration from ``path`` or the default location.

        Raises:
            ConfigError: If an explicit path is missing, or any file found is unreadable or invalid
        """
        if path:
            config_path = Path(path)
            if not config_path.exists():
                raise ConfigError(f"Specified config file does not exist: {path}")
        else:
            config_path = get_app_data_dir() / CONFIG_FILE_NAME
            if not config_path.exists():
                logger.debug(f"No config file at {config_path}, using defaults")
                return cls()

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                values = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Cannot read config file {config_path}: {e}") from e

        if not isinstance(values, dict):
            raise ConfigError(f"Config file {config_path} must contain a JSON object")

        logger.debug(f"Loaded configuration from {config_path}")
        return cls(values, source=config_path)

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a dotted key such as 'copy.retries'."""
        current = self.values
        for part in key.split('.'):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current

    def set(self, key: str, value: Any) -> None:
        """Set a dotted key, creating intermediate sections as needed."""
        parts = key.split('.')
        current = self.values
        for part in parts[:-1]:
            current = current.setdefault(part, {})
        current[parts[-1]] = value

"""
Configuration management for Butiki

Settings live in a small JSON file merged over built-in defaults, with a
couple of environment variable overrides applied last.
"""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Dict, Any, Optional

from constants import (
    CONFIG_DIR_NAME,
    CONFIG_FILE_NAME,
    CONFIG_ENV_VAR,
    COMMANDS_FILE_ENV_VAR,
    LOG_LEVEL_ENV_VAR,
    DEFAULT_COMMANDS_FILE,
    DEFAULT_EDITOR,
    DEFAULT_SHELL,
    DEFAULT_LOG_LEVEL,
)
from errors import ConfigError, HomeDirUnresolvable, StoreWriteError

logger = logging.getLogger(f"butiki.{__name__}")


def resolve_home() -> Path:
    """Return the user's home directory or raise HomeDirUnresolvable"""
    try:
        home = Path.home()
    except (RuntimeError, KeyError) as e:
        raise HomeDirUnresolvable(str(e)) from e

    if not str(home) or str(home) == "~":
        raise HomeDirUnresolvable()
    return home


def expand_path(path_value: str) -> Path:
    """Expand a leading ~ against the resolved home directory"""
    if path_value == "~" or path_value.startswith("~/"):
        return resolve_home() / path_value[2:]
    return Path(path_value)


class ConfigManager:
    """Manages Butiki configuration"""

    DEFAULT_CONFIG = {
        "paths": {
            "commands_file": DEFAULT_COMMANDS_FILE
        },
        "editor": {
            "fallback": DEFAULT_EDITOR
        },
        "shell": {
            "program": DEFAULT_SHELL
        },
        "logging": {
            "level": DEFAULT_LOG_LEVEL,
            "file": None
        }
    }

    ENV_OVERRIDES = {
        COMMANDS_FILE_ENV_VAR: "paths.commands_file",
        LOG_LEVEL_ENV_VAR: "logging.level",
    }

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration manager"""
        if config_path:
            self.config_path = Path(config_path)
        else:
            self.config_path = self._find_config_file()

        self.config = self.load()
        self._apply_env_overrides()

    def _find_config_file(self) -> Path:
        """Find configuration file: $BUTIKI_CONFIG, then ~/.butiki/config.json"""
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            return Path(env_path)
        return resolve_home() / CONFIG_DIR_NAME / CONFIG_FILE_NAME

    def load(self) -> Dict[str, Any]:
        """Load configuration from file or use defaults"""
        if not self.config_path.exists():
            return copy.deepcopy(self.DEFAULT_CONFIG)

        try:
            with open(self.config_path, 'r') as f:
                user_config = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            print(f"Warning: Invalid config file {self.config_path}, using defaults")
            logger.warning("Could not load config %s: %s", self.config_path, e)
            return copy.deepcopy(self.DEFAULT_CONFIG)

        if not isinstance(user_config, dict):
            print(f"Warning: Invalid config file {self.config_path}, using defaults")
            return copy.deepcopy(self.DEFAULT_CONFIG)

        # Merge with defaults (user config overrides defaults)
        return self._merge_configs(self.DEFAULT_CONFIG, user_config)

    def _merge_configs(self, default: Dict, user: Dict) -> Dict:
        """Recursively merge user config with defaults"""
        result = copy.deepcopy(default)

        for key, value in user.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result

    def _apply_env_overrides(self):
        for env_var, key_path in self.ENV_OVERRIDES.items():
            value = os.environ.get(env_var)
            if value:
                logger.debug("Config %s overridden by $%s", key_path, env_var)
                self._set_value(self.config, key_path, value)

    def save(self, config: Optional[Dict] = None):
        """Save configuration to file (environment overrides excluded by set())"""
        if config is None:
            config = self.config
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, 'w') as f:
                json.dump(config, f, indent=2)
        except OSError as e:
            raise StoreWriteError(f"Failed to write config {self.config_path}: {e}") from e

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation
        Example: config.get('editor.fallback')
        """
        keys = key_path.split('.')
        value = self.config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def set(self, key_path: str, value: Any):
        """
        Set configuration value using dot notation and persist it
        Example: config.set('shell.program', 'zsh')
        """
        file_config = self.load()
        self._set_value(file_config, key_path, value)
        self._set_value(self.config, key_path, value)
        self.save(file_config)

    @staticmethod
    def _set_value(config: Dict, key_path: str, value: Any):
        keys = key_path.split('.')

        # Navigate to the parent dictionary
        for key in keys[:-1]:
            if not isinstance(config.get(key), dict):
                config[key] = {}
            config = config[key]

        config[keys[-1]] = value

    def get_path(self, path_key: str) -> Path:
        """Get a configured path as a Path object, with ~ expanded"""
        path_value = self.get(f'paths.{path_key}')
        if path_value:
            return expand_path(str(path_value))
        raise ConfigError(f"Path not configured: paths.{path_key}")

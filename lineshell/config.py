#!/usr/bin/env python3
"""
lineshell Configuration Management
Handles the optional config file, environment variables, and defaults
"""

import copy
import json
import os
from pathlib import Path
from typing import Any, Dict

from .exceptions import ConfigurationError
from .logger import logger


class ConfigManager:
    """Manage lineshell configuration"""

    _instance = None
    _initialized = False

    ENV_PREFIX = "LINESHELL_"

    DEFAULT_CONFIG = {
        "shell": {
            "prompt": ">",
            "history": True,
            "history_capacity": 0,
            "error_prefix": "Error: "
        },
        "logging": {
            "level": "WARNING",
            "directory": None,
            "retention_days": 7,
            "max_size_mb": 10,
            "backup_count": 5
        },
        "server": {
            "host": "127.0.0.1",
            "port": 1234
        }
    }

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if ConfigManager._initialized:
            return

        self.config_dir = Path.home() / ".lineshell"
        self.config_file = self.config_dir / "config.json"
        self.config = self._load_config()
        self._apply_logging()

        ConfigManager._initialized = True

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from files and environment"""
        config = copy.deepcopy(self.DEFAULT_CONFIG)

        if self.config_file.exists():
            try:
                with open(self.config_file, 'r') as f:
                    self._deep_merge(config, json.load(f))
                logger.info(f"Loaded configuration from {self.config_file}")
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Failed to load config file: {e}")

        self._load_from_env(config)
        return config

    def _apply_logging(self):
        logger.configure(
            level=self.get("logging.level", "WARNING"),
            directory=self.get("logging.directory"),
            max_size_mb=self.get("logging.max_size_mb", 10),
            backup_count=self.get("logging.backup_count", 5),
            retention_days=self.get("logging.retention_days", 7),
        )

    def _deep_merge(self, base: Dict, overlay: Dict):
        """Deep merge overlay config into base"""
        for key, value in overlay.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def _load_from_env(self, config: Dict):
        """Load configuration from environment variables"""
        # Pattern: LINESHELL_SECTION_KEY=value
        prefix_len = len(self.ENV_PREFIX)
        for env_key, env_value in os.environ.items():
            if env_key.startswith(self.ENV_PREFIX):
                parts = env_key[prefix_len:].lower().split("_", 1)
                if len(parts) == 2:
                    section, key = parts
                    if section in config:
                        # text settings keep the raw value ("5" stays a prompt)
                        if isinstance(config[section].get(key), str):
                            config[section][key] = env_value
                        else:
                            config[section][key] = self._parse_env_value(env_value)

    @staticmethod
    def _parse_env_value(value: str) -> Any:
        """Parse environment variable value to appropriate type"""
        if value.lower() in ('true', 'yes'):
            return True
        elif value.lower() in ('false', 'no'):
            return False
        elif value.isdigit() or (value.startswith('-') and value[1:].isdigit()):
            return int(value)
        else:
            try:
                return float(value)
            except ValueError:
                return value

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value with dot notation

        Args:
            key: Configuration key (e.g., "shell.prompt")
            default: Default value if key not found

        Returns:
            Configuration value
        """
        value = self.config
        for part in key.split("."):
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return default
        return value

    def set(self, key: str, value: Any):
        """Set configuration value with dot notation"""
        parts = key.split(".")
        config = self.config
        for part in parts[:-1]:
            if part not in config:
                config[part] = {}
            config = config[part]
        config[parts[-1]] = value
        logger.debug(f"Configuration updated: {key} = {value}")
        if parts[0] == "logging":
            self._apply_logging()

    def save(self) -> Path:
        """Save configuration to file"""
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, 'w') as f:
                json.dump(self.config, f, indent=2)
            logger.info(f"Configuration saved to {self.config_file}")
            return self.config_file
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration: {e}")

    def reset_to_defaults(self):
        """Reset configuration to defaults"""
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)
        self._apply_logging()
        logger.info("Configuration reset to defaults")

    def validate_shell(self):
        """Validate the shell section every Shell takes its defaults from"""
        prompt = self.get("shell.prompt")
        if not isinstance(prompt, str):
            raise ConfigurationError("shell.prompt must be a string", "shell.prompt")

        capacity = self.get("shell.history_capacity")
        if not isinstance(capacity, int) or isinstance(capacity, bool) or capacity < 0:
            raise ConfigurationError(
                "shell.history_capacity must be a non-negative integer",
                "shell.history_capacity"
            )

    def validate(self):
        """Validate configuration"""
        self.validate_shell()

        port = self.get("server.port")
        if not isinstance(port, int) or not 0 <= port <= 65535:
            raise ConfigurationError("server.port must be between 0 and 65535", "server.port")

        logger.debug("Configuration validation passed")

    def to_dict(self) -> Dict[str, Any]:
        """Get entire configuration as dictionary"""
        return copy.deepcopy(self.config)


# Singleton instance
config = ConfigManager()

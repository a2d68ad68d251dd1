"""
Configuration management for the Pulse Discovery engine.
"""

import json
import os
from typing import Any, Dict, Optional

import yaml

from ..models.config import EngineConfig
from ..utils.error_handling import ErrorCategory, ErrorSeverity, with_error_handling
from ..utils.logging import get_logger

logger = get_logger("config.manager")


class ConfigurationManager:
    """Manages loading, validation, and reloading of engine configuration."""

    DEFAULT_PATHS = [
        "config/discovery.yaml",
        "config/discovery.yml",
        "config/discovery.json",
        "discovery.yaml",
        "discovery.yml",
        "discovery.json",
    ]

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to the configuration file. If None, standard
                locations are searched and defaults are used when none exists.
        """
        self.config_path = config_path or self._find_config_file()
        self._config: Optional[EngineConfig] = None
        self._last_modified: Optional[float] = None

    def _find_config_file(self) -> Optional[str]:
        """Find the configuration file in standard locations."""
        for path in self.DEFAULT_PATHS:
            if os.path.exists(path):
                return path
        return None

    def load_config(self) -> EngineConfig:
        """
        Load configuration from file.

        Returns:
            EngineConfig with validated settings.

        Raises:
            ValueError: If configuration is invalid or file cannot be read.
            FileNotFoundError: If an explicit configuration file doesn't exist.
        """
        if self.config_path is None:
            config = EngineConfig()
            config.validate()
            self._config = config
            logger.info("No configuration file found, using defaults")
            return config

        if not os.path.exists(self.config_path):
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        try:
            raw_config = self._read_file(self.config_path)
            raw_config = self._expand_env_vars(raw_config)
            config = self._parse_config(raw_config)
            config.validate()
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in configuration file: {e}")
        except ValueError:
            raise
        except Exception as e:
            raise ValueError(f"Error loading configuration: {e}")

        self._config = config
        self._last_modified = os.path.getmtime(self.config_path)
        logger.info("Configuration loaded", extra={"config_path": self.config_path})

        return config

    @staticmethod
    def _read_file(path: str) -> Dict[str, Any]:
        with open(path, "r", encoding="utf-8") as f:
            if path.endswith(".json"):
                raw_config = json.load(f)
            else:
                raw_config = yaml.safe_load(f)

        if raw_config is None:
            return {}
        if not isinstance(raw_config, dict):
            raise ValueError("Configuration root must be a mapping")
        return raw_config

    def _expand_env_vars(self, obj: Any) -> Any:
        """Recursively expand ``${VAR_NAME}`` values."""
        if isinstance(obj, dict):
            return {key: self._expand_env_vars(value) for key, value in obj.items()}
        elif isinstance(obj, list):
            return [self._expand_env_vars(item) for item in obj]
        elif isinstance(obj, str):
            if obj.startswith("${") and obj.endswith("}"):
                var_name = obj[2:-1]
                env_value = os.getenv(var_name)
                if env_value is None:
                    raise ValueError(f"Environment variable '{var_name}' not found")
                return env_value
            return obj
        else:
            return obj

    def _parse_config(self, raw_config: Dict[str, Any]) -> EngineConfig:
        """Parse raw configuration dictionary into an EngineConfig."""
        defaults = EngineConfig()
        engine_data = raw_config.get("engine", {}) or {}
        deals_data = raw_config.get("deals", {}) or {}
        search_data = raw_config.get("search", {}) or {}
        logging_data = raw_config.get("logging", {}) or {}

        try:
            return EngineConfig(
                timezone=engine_data.get("timezone", defaults.timezone),
                happening_now_hours=int(
                    engine_data.get("happening_now_hours", defaults.happening_now_hours)
                ),
                upcoming_days=int(engine_data.get("upcoming_days", defaults.upcoming_days)),
                date_count_horizon_days=int(
                    engine_data.get("date_count_horizon_days", defaults.date_count_horizon_days)
                ),
                default_kids_age_range=list(
                    engine_data.get("default_kids_age_range", defaults.default_kids_age_range)
                ),
                real_deal_threshold=int(
                    deals_data.get("real_deal_threshold", defaults.real_deal_threshold)
                ),
                search_limit=int(search_data.get("limit", defaults.search_limit)),
                log_level=str(logging_data.get("level", defaults.log_level)),
                log_dir=str(logging_data.get("directory", defaults.log_dir)),
            )
        except (TypeError, ValueError) as e:
            raise ValueError(f"Error parsing configuration: {e}")

    def get_config(self) -> EngineConfig:
        """Get current configuration, loading if necessary."""
        if self._config is None:
            return self.load_config()
        return self._config

    @with_error_handling(
        "config.manager",
        ErrorCategory.CONFIGURATION,
        fallback_value=False,
        suppress_exceptions=True,
    )
    def reload_if_changed(self) -> bool:
        """
        Reload configuration if the file has been modified.

        A failed reload keeps the current configuration and returns False.
        """
        if self.config_path is None or not os.path.exists(self.config_path):
            return False

        current_modified = os.path.getmtime(self.config_path)
        if self._last_modified is None or current_modified > self._last_modified:
            self.load_config()
            return True

        return False

    def get_config_template(self) -> Dict[str, Any]:
        """Example configuration structure."""
        return {
            "engine": {
                "timezone": "America/Vancouver",
                "happening_now_hours": 2,
                "upcoming_days": 30,
                "date_count_horizon_days": 14,
                "default_kids_age_range": [0, 18],
            },
            "deals": {"real_deal_threshold": 15},
            "search": {"limit": 5},
            "logging": {"level": "INFO", "directory": "logs"},
        }

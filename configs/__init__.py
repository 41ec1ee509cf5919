"""
Bollinger Bands Configuration Management

Loads indicator parameters and display style from JSON, validated with JSON Schema.
"""

import json
import logging
import os
from typing import Dict, Any
from pathlib import Path

import jsonschema

from core.models.bands import BollingerParams
from core.models.config import BandStyle

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path(__file__).parent

CONFIG_FILES = {
    'bollinger': ('bollinger.json', 'bollinger.schema.json'),
}


class ConfigError(ValueError):
    """Raised when a configuration file is unreadable or fails validation."""


class ConfigLoader:
    """Loads and manages indicator configurations."""

    def __init__(self, config_dir=None, strict: bool = True):
        """
        Initialize configuration loader.

        Args:
            config_dir: Directory containing configuration files
            strict: Raise ConfigError on invalid files; otherwise log and store empty
        """
        self.config_dir = Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR
        self.strict = strict
        self.configs: Dict[str, Dict[str, Any]] = {}
        self._load_all_configs()

    def _load_all_configs(self) -> None:
        """Load all configuration files; missing files fall back to empty."""
        for config_name in CONFIG_FILES:
            try:
                self.configs[config_name] = self._read(config_name)
            except ConfigError as e:
                if self.strict:
                    raise
                # Store empty so callers fall back to defaults
                logger.error("config_load_failed", extra={"config": config_name, "error": str(e)})
                self.configs[config_name] = {}

    def _read(self, config_name: str) -> Dict[str, Any]:
        filename, schema_name = CONFIG_FILES[config_name]
        config_path = self.config_dir / filename
        if not config_path.exists():
            logger.warning("config_missing", extra={"path": str(config_path)})
            return {}

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            schema_path = self.config_dir / schema_name
            if not schema_path.exists():
                schema_path = DEFAULT_CONFIG_DIR / schema_name
            with open(schema_path, 'r', encoding='utf-8') as sf:
                schema = json.load(sf)
            jsonschema.validate(instance=data, schema=schema)
        except json.JSONDecodeError as e:
            raise ConfigError(f"{config_path}: invalid JSON: {e}") from e
        except jsonschema.ValidationError as e:
            raise ConfigError(f"{config_path}: {e.message}") from e

        logger.debug("config_loaded", extra={"path": str(config_path)})
        return data

    def get_config(self, config_name: str) -> Dict[str, Any]:
        """
        Get configuration by name.

        Args:
            config_name: Name of configuration

        Returns:
            Configuration dictionary
        """
        return self.configs.get(config_name, {})

    def get_all_configs(self) -> Dict[str, Dict[str, Any]]:
        """
        Get all configurations.

        Returns:
            Dictionary of all configurations
        """
        return self.configs.copy()

    def reload_config(self, config_name: str) -> None:
        """
        Reload specific configuration; on failure the prior config is kept.

        Args:
            config_name: Name of configuration to reload
        """
        if config_name not in CONFIG_FILES:
            raise KeyError(f"Unknown config: {config_name}")
        try:
            self.configs[config_name] = self._read(config_name)
        except ConfigError as e:
            logger.error("config_reload_failed", extra={"config": config_name, "error": str(e)})

    def load_params(self) -> BollingerParams:
        """Indicator parameters from config, defaults for missing keys."""
        return BollingerParams.from_dict(self.get_config('bollinger').get('params', {}))

    def load_style(self) -> BandStyle:
        """Display style from config, defaults for missing keys."""
        return BandStyle.from_dict(self.get_config('bollinger').get('style', {}))


# Global configuration loader instance
config_loader = ConfigLoader(os.environ.get('BB_CONFIG_DIR') or None, strict=False)

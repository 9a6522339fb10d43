"""Configuration loader and validator for the damage assessment service."""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
from loguru import logger


CONFIG_ENV_VAR = "AUTODAMAGE_CONFIG"


class Config:
    """Configuration manager for the damage assessment service."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to config.yaml file. If None, uses $AUTODAMAGE_CONFIG
                or the project root.
        """
        if config_path is None:
            config_path = os.getenv(CONFIG_ENV_VAR)

        if config_path is None:
            # Default to project root
            config_path = Path(__file__).parent.parent.parent / "config.yaml"
        else:
            config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r') as f:
            self._config = yaml.safe_load(f) or {}

        logger.info(f"Loaded configuration from {config_path}")
        self._validate()

    def _validate(self):
        """Validate configuration structure and values."""
        required_sections = ['api', 'model', 'logging']

        for section in required_sections:
            if section not in self._config:
                raise ValueError(f"Missing required configuration section: {section}")

        if not self.get('model.endpoint'):
            raise ValueError("Missing required configuration value: model.endpoint")

        logger.info("Configuration validated successfully")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key: Configuration key (e.g., 'model.endpoint')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split('.')
        value = self._config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default

        return value

    @property
    def model_endpoint(self) -> str:
        """Get the chat completions endpoint of the vision model."""
        return self.get('model.endpoint')

    @property
    def model_name(self) -> str:
        """Get the model name sent with each request."""
        return self.get('model.name', 'DEEPSEEK-REASONER')

    @property
    def model_temperature(self) -> float:
        return float(self.get('model.temperature', 0.0))

    @property
    def model_timeout(self) -> Optional[float]:
        """Get the outbound request timeout in seconds, None for no timeout."""
        timeout = self.get('model.timeout')
        return float(timeout) if timeout is not None else None

    @property
    def api_key_env(self) -> str:
        return self.get('model.api_key_env', 'DEEPSEEK_API_KEY')

    @property
    def api_key(self) -> Optional[str]:
        """Get the model credential from the environment."""
        return os.getenv(self.api_key_env) or None

    @property
    def log_level(self) -> str:
        return self.get('logging.level', 'INFO')

    @property
    def log_file(self) -> Optional[Path]:
        """Get the log file path, None when file logging is disabled."""
        log_file = self.get('logging.file')
        return Path(log_file) if log_file else None

    def __getitem__(self, key: str) -> Any:
        """Allow dictionary-style access."""
        return self.get(key)

    def to_dict(self) -> Dict[str, Any]:
        """Return the entire configuration as a dictionary."""
        return self._config.copy()


# Global config instance
_global_config: Optional[Config] = None


def get_config(config_path: Optional[str] = None) -> Config:
    """
    Get or create the global configuration instance.

    Args:
        config_path: Path to config file (only used on first call)

    Returns:
        Config instance
    """
    global _global_config

    if _global_config is None:
        _global_config = Config(config_path)

    return _global_config


def reset_config():
    """Reset the global configuration instance."""
    global _global_config
    _global_config = None

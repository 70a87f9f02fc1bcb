"""Configuration manager."""

import copy
import json
from pathlib import Path
from typing import Any, Optional, TypeVar

import yaml
from pydantic import BaseModel

from resource_provider.config.schemas.app_schema import (
    AppConfig,
    AWSProviderConfig,
    LoggingConfig,
    TimeoutsConfig,
    WaiterConfig,
)
from resource_provider.infrastructure.logging.logger import get_logger

T = TypeVar("T", bound=BaseModel)

# Section of the configuration document backing each typed model.
_TYPED_SECTIONS: dict[type, Optional[str]] = {
    AppConfig: None,
    AWSProviderConfig: "aws",
    WaiterConfig: "waiter",
    TimeoutsConfig: "timeouts",
    LoggingConfig: "logging",
}

logger = get_logger(__name__)


class ConfigurationManager:
    """Loads the provider configuration and exposes raw and typed views of it.

    Values are read from a dictionary or a JSON/YAML file and validated as
    AppConfig, whose settings sources let environment variables named
    ``RESOURCE_PROVIDER_<SECTION>__<KEY>`` override them.
    """

    def __init__(self) -> None:
        self._config: dict[str, Any] = {}
        self._config_file_path: Optional[str] = None
        self._app_config: Optional[AppConfig] = None

    def load_from_dict(self, config: dict[str, Any]) -> None:
        """Load configuration from a dictionary."""
        self._config = copy.deepcopy(config)
        self._app_config = None

    def load_from_file(self, path: str) -> None:
        """
        Load configuration from a JSON or YAML file.

        Args:
            path: Path to the configuration file

        Raises:
            FileNotFoundError: If the file does not exist
            json.JSONDecodeError: If a JSON file is malformed
            yaml.YAMLError: If a YAML file is malformed
        """
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(file_path, encoding="utf-8") as f:
            if file_path.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(f) or {}
            else:
                data = json.load(f)

        if not isinstance(data, dict):
            raise ValueError(f"Configuration file {path} must contain a mapping")

        self.load_from_dict(data)
        self._config_file_path = str(file_path)
        logger.info("Configuration loaded from %s", file_path)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a validated configuration value by dotted key, e.g. ``aws.region``.

        Environment overrides take precedence over loaded values.
        """
        value: Any = self.get_app_config().model_dump()
        for part in key.split("."):
            if not isinstance(value, dict) or part not in value:
                return default
            value = value[part]
        return value

    def get_typed(self, config_type: type[T]) -> T:
        """Get a validated configuration section as its pydantic model."""
        if config_type not in _TYPED_SECTIONS:
            raise ValueError(f"Unknown configuration type: {config_type.__name__}")

        section = _TYPED_SECTIONS[config_type]
        if section is None:
            return self.get_app_config()  # type: ignore[return-value]
        return getattr(self.get_app_config(), section)

    def get_app_config(self) -> AppConfig:
        """Get the whole configuration validated as AppConfig."""
        if self._app_config is None:
            self._app_config = AppConfig(**self._config)
        return self._app_config


"""Provider configuration."""

from .manager import ConfigurationManager
from .schemas import (
    AppConfig,
    AWSProviderConfig,
    LoggingConfig,
    TimeoutsConfig,
    WaiterConfig,
)

__all__: list[str] = [
    "AWSProviderConfig",
    "AppConfig",
    "ConfigurationManager",
    "LoggingConfig",
    "TimeoutsConfig",
    "WaiterConfig",
]

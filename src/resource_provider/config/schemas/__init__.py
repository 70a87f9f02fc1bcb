"""Configuration schemas."""

from .app_schema import (
    AppConfig,
    AWSProviderConfig,
    LoggingConfig,
    TimeoutsConfig,
    WaiterConfig,
)

__all__: list[str] = [
    "AWSProviderConfig",
    "AppConfig",
    "LoggingConfig",
    "TimeoutsConfig",
    "WaiterConfig",
]

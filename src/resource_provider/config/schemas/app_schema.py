"""Application configuration schema."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict


class AWSProviderConfig(BaseModel):
    """AWS connection configuration."""

    region: str = Field("us-east-1", description="AWS region")
    profile: Optional[str] = Field(None, description="Named profile from the shared credentials file")
    endpoint_url: Optional[str] = Field(None, description="Override endpoint, e.g. for local stacks")
    max_retries: int = Field(
        3, ge=0, le=10, description="Maximum attempts for transient API errors"
    )
    connect_timeout: int = Field(5, gt=0, description="Connection timeout in seconds")
    read_timeout: int = Field(10, gt=0, description="Read timeout in seconds")


class WaiterConfig(BaseModel):
    """Default polling behaviour for resource waiters."""

    delay: float = Field(0.0, ge=0, description="Seconds to sleep before the first poll")
    poll_interval: Optional[float] = Field(
        None, gt=0, description="Fixed poll interval in seconds; exponential backoff when unset"
    )
    min_interval: float = Field(0.1, gt=0, description="First backoff interval in seconds")
    max_interval: float = Field(10.0, gt=0, description="Backoff ceiling in seconds")
    not_found_checks: int = Field(
        20, ge=0, description="Not-found results tolerated while waiting for a resource to appear"
    )
    continuous_target_occurrence: int = Field(
        2, ge=1, description="Consecutive target observations required before success"
    )

    @model_validator(mode="after")
    def validate_intervals(self) -> "WaiterConfig":
        """Ensure the backoff bounds are ordered."""
        if self.min_interval > self.max_interval:
            raise ValueError("min_interval must not exceed max_interval")
        return self


class TimeoutsConfig(BaseModel):
    """Per-operation timeouts in seconds."""

    create: float = Field(30 * 60, gt=0, description="Create timeout in seconds")
    update: float = Field(30 * 60, gt=0, description="Update timeout in seconds")
    delete: float = Field(30 * 60, gt=0, description="Delete timeout in seconds")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field("INFO", description="Log level")
    destination: str = Field("stdout", description="stdout, file or both")
    log_dir: Optional[str] = Field(None, description="Directory for the log file")
    log_filename: str = Field("resource_provider.log", description="Log file name")

    @field_validator("level")
    @classmethod
    def validate_level(cls, value: str) -> str:
        """Normalize and check the log level."""
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {value}")
        return level

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, value: str) -> str:
        """Check the log destination."""
        if value not in ("stdout", "file", "both"):
            raise ValueError(f"Invalid log destination: {value}")
        return value


class AppConfig(BaseSettings):
    """
    Top-level provider configuration.

    Environment variables named ``RESOURCE_PROVIDER_<SECTION>__<KEY>`` override
    values passed to the constructor, e.g. ``RESOURCE_PROVIDER_AWS__REGION``.
    """

    model_config = SettingsConfigDict(
        env_prefix="RESOURCE_PROVIDER_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    aws: AWSProviderConfig = Field(default_factory=AWSProviderConfig)
    waiter: WaiterConfig = Field(default_factory=WaiterConfig)
    timeouts: TimeoutsConfig = Field(default_factory=TimeoutsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Give the environment precedence over loaded configuration."""
        return env_settings, init_settings

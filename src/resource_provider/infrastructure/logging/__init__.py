"""Logging infrastructure."""

from .logger import get_logger, setup_logging, setup_logging_from_config

__all__: list[str] = ["get_logger", "setup_logging", "setup_logging_from_config"]
